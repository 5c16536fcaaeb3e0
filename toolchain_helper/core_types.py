#!/usr/bin/env python3
"""
Core types and data models for the toolchain helper module.

This module holds the value types shared by every stage of toolchain
discovery and invocation: the closed set of host OS variants, canonical
architectures, the probed compiler description and the error taxonomy.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeAlias, Union

from loguru import logger

PathLike: TypeAlias = Union[str, Path]
ErrorHandler: TypeAlias = Callable[[List[str], Path, str], None]


class OSVariant(StrEnum):
    """Host operating systems that have a toolchain invoker."""

    LINUX = "linux"
    DARWIN = "darwin"
    WINDOWS = "windows"

    def __str__(self) -> str:
        descriptions = {
            self.LINUX: "Linux",
            self.DARWIN: "Darwin",
            self.WINDOWS: "Windows",
        }
        return descriptions.get(self, self.value)

    @classmethod
    def current(cls) -> OSVariant:
        """
        Detect the variant of the running host.

        Raises:
            ToolchainNotFoundError: If the host OS has no toolchain invoker
        """
        system = platform.system()
        try:
            return cls(system.lower())
        except ValueError:
            raise ToolchainNotFoundError(
                f"No toolchain invoker for operating system {system}",
                operating_system=system,
            ) from None


class Architecture(StrEnum):
    """Canonical architecture identifiers used for compatibility checks."""

    AMD64 = "amd64"
    AARCH64 = "aarch64"
    SPARC = "sparc"
    UNSUPPORTED = "unsupported"  # 32-bit targets
    UNKNOWN = "unknown"

    @property
    def is_supported(self) -> bool:
        return self not in {self.UNSUPPORTED, self.UNKNOWN}


class ErrorKind(StrEnum):
    """Closed set of failure kinds raised or reported by this package."""

    TOOLCHAIN_NOT_FOUND = "toolchain_not_found"
    INVALID_TOOLCHAIN_PATH = "invalid_toolchain_path"
    VERSION_INCOMPATIBLE = "version_incompatible"
    ARCHITECTURE_MISMATCH = "architecture_mismatch"
    PROCESS_LAUNCH_FAILURE = "process_launch_failure"
    COMPILE_FAILED = "compile_failed"
    BUILD_INTERRUPTED = "build_interrupted"
    INVALID_CONFIGURATION = "invalid_configuration"


@dataclass(frozen=True, slots=True)
class CompilerInfo:
    """
    Immutable description of a probed C compiler.

    ``target_arch`` keeps the raw token reported by the compiler; use
    :func:`toolchain_helper.architecture.guess_architecture` to canonicalise it.
    """

    vendor: str
    name: str
    short_name: str
    version_major: int
    version_minor: int
    version_patch: int
    target_arch: str

    def __post_init__(self) -> None:
        """Validate version numbers."""
        if min(self.version_major, self.version_minor, self.version_patch) < 0:
            raise ValueError("compiler version numbers cannot be negative")

    def __str__(self) -> str:
        return "|".join(
            [self.short_name, self.vendor, self.target_arch, self.version_string]
        )

    @property
    def version(self) -> Tuple[int, int, int]:
        return (self.version_major, self.version_minor, self.version_patch)

    @property
    def version_string(self) -> str:
        return f"{self.version_major}.{self.version_minor}.{self.version_patch}"

    def dump(self, sink: Callable[[str], Any]) -> None:
        """Feed a human-readable description, one line at a time, to ``sink``."""
        sink(f"Name: {self.name} ({self.short_name})")
        sink(f"Vendor: {self.vendor}")
        sink(f"Version: {self.version_string}")
        sink(f"Target architecture: {self.target_arch}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "vendor": self.vendor,
            "name": self.name,
            "short_name": self.short_name,
            "version_major": self.version_major,
            "version_minor": self.version_minor,
            "version_patch": self.version_patch,
            "target_arch": self.target_arch,
        }


@dataclass(frozen=True, slots=True)
class CompileFailure:
    """A single failure reported by a compile session."""

    command: Tuple[str, ...]
    source: Path
    line: str
    error_code: ErrorKind = field(default=ErrorKind.COMPILE_FAILED)

    @property
    def command_str(self) -> str:
        return " ".join(self.command)


class DiagnosticCollector:
    """Error handler that records every reported failure in order."""

    def __init__(self) -> None:
        self.failures: List[CompileFailure] = []

    def __call__(self, command: List[str], source: Path, line: str) -> None:
        self.failures.append(CompileFailure(tuple(command), Path(source), line))

    def __len__(self) -> int:
        return len(self.failures)

    @property
    def has_errors(self) -> bool:
        return bool(self.failures)

    @property
    def lines(self) -> List[str]:
        return [failure.line for failure in self.failures]


# Exceptions carrying an ErrorKind and structured context
class ToolchainError(Exception):
    """Base exception for toolchain discovery and invocation errors."""

    default_error_code: ErrorKind = ErrorKind.TOOLCHAIN_NOT_FOUND

    def __init__(
        self, message: str, *, error_code: Optional[ErrorKind] = None, **kwargs: Any
    ):
        super().__init__(message)
        self.error_code = error_code or self.default_error_code
        self.context = kwargs

        logger.error(f"{type(self).__name__} [{self.error_code}]: {message}")


class ToolchainNotFoundError(ToolchainError):
    """No usable compiler could be located or identified."""

    default_error_code = ErrorKind.TOOLCHAIN_NOT_FOUND


class InvalidToolchainPathError(ToolchainError):
    """The resolved compiler path is a directory or not executable."""

    default_error_code = ErrorKind.INVALID_TOOLCHAIN_PATH


class VersionIncompatibleError(ToolchainError):
    """The probed compiler version is not accepted on this host."""

    default_error_code = ErrorKind.VERSION_INCOMPATIBLE


class ArchitectureMismatchError(ToolchainError):
    """The probed compiler targets an architecture the build cannot use."""

    default_error_code = ErrorKind.ARCHITECTURE_MISMATCH


class ProcessLaunchError(ToolchainError):
    """The operating system refused to start a compiler process."""

    default_error_code = ErrorKind.PROCESS_LAUNCH_FAILURE

    def __init__(
        self, message: str, command: Optional[List[str]] = None, **kwargs: Any
    ):
        super().__init__(message, command=command, **kwargs)
        self.command = command


class ConfigurationError(ToolchainError):
    """Toolchain settings could not be loaded or validated."""

    default_error_code = ErrorKind.INVALID_CONFIGURATION


class BuildInterrupted(Exception):
    """
    Raised when a build is cancelled while a compiler process is running.

    Not part of the ToolchainError hierarchy; the in-flight compiler process
    has already been killed when this is raised.
    """

    error_code = ErrorKind.BUILD_INTERRUPTED

    def __init__(self, message: str = "Build interrupted", command: Optional[List[str]] = None):
        super().__init__(message)
        self.command = command
