#!/usr/bin/env python3
"""
Per-OS compatibility rules for probed toolchains.

All rule failures are fatal and name the detected and required values.
"""

from typing import Optional

from loguru import logger

from .architecture import guess_architecture
from .config import MsvcVersionPolicy
from .core_types import (
    Architecture,
    ArchitectureMismatchError,
    CompilerInfo,
    OSVariant,
    VersionIncompatibleError,
)


def _require_amd64(info: CompilerInfo, os_variant: OSVariant) -> None:
    if guess_architecture(info.target_arch) is not Architecture.AMD64:
        raise ArchitectureMismatchError(
            f"Native building on {os_variant} currently only supports target "
            f"architecture: {Architecture.AMD64} ({info.target_arch} unsupported)",
            detected=info.target_arch,
            required=str(Architecture.AMD64),
        )


def validate_windows(
    info: CompilerInfo,
    runtime_version: int,
    policy: Optional[MsvcVersionPolicy] = None,
) -> None:
    policy = policy or MsvcVersionPolicy()
    if runtime_version == policy.legacy_runtime_version:
        if (info.version_major, info.version_minor) != (
            policy.legacy_major,
            policy.legacy_minor,
        ):
            raise VersionIncompatibleError(
                f"Runtime version {runtime_version} native building on Windows "
                "requires Microsoft Windows SDK 7.1 (C/C++ Optimizing Compiler "
                f"Version {policy.legacy_major}.{policy.legacy_minor}.*, "
                f"found {info.version_string})",
                detected=info.version_string,
                runtime_version=runtime_version,
            )
    elif info.version_major < policy.minimum_major:
        raise VersionIncompatibleError(
            f"Runtime version {runtime_version} native building on Windows "
            "requires Visual Studio 2015 or later (C/C++ Optimizing Compiler "
            f"Version {policy.minimum_major}.* or later, found {info.version_string})",
            detected=info.version_string,
            runtime_version=runtime_version,
        )
    _require_amd64(info, OSVariant.WINDOWS)


def validate_darwin(info: CompilerInfo) -> None:
    _require_amd64(info, OSVariant.DARWIN)


def validate_linux(info: CompilerInfo, required_arch: Architecture) -> None:
    detected = guess_architecture(info.target_arch)
    if not detected.is_supported or detected is not required_arch:
        raise ArchitectureMismatchError(
            f"Native toolchain ({info.target_arch}) and build target "
            f"architecture ({required_arch}) mismatch.",
            detected=info.target_arch,
            required=str(required_arch),
        )


def validate_toolchain(
    info: CompilerInfo,
    os_variant: OSVariant,
    required_arch: Architecture,
    runtime_version: int,
    policy: Optional[MsvcVersionPolicy] = None,
) -> None:
    """
    Check that ``info`` satisfies the rules of ``os_variant``.

    Raises:
        VersionIncompatibleError: If the compiler version is not accepted
        ArchitectureMismatchError: If the compiler targets the wrong architecture
    """
    match os_variant:
        case OSVariant.LINUX:
            validate_linux(info, required_arch)
        case OSVariant.DARWIN:
            validate_darwin(info)
        case OSVariant.WINDOWS:
            validate_windows(info, runtime_version, policy)
    logger.debug(f"Toolchain {info} accepted for {os_variant}")
