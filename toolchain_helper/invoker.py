#!/usr/bin/env python3
"""
The toolchain invoker: one per build, probing the native compiler once and
running any number of compilations with it.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Iterable, List, Optional

from loguru import logger

from .command import CommandBuilder
from .config import ToolchainSettings
from .core_types import (
    CompilerInfo,
    ErrorHandler,
    OSVariant,
    PathLike,
    ToolchainNotFoundError,
)
from .paths import normalize_path, resolve_compiler_path
from .platforms import VariantStrategy, get_strategy
from .probe import probe_toolchain
from .session import CompileSession


class ToolchainInvoker:
    """
    Locates, identifies and drives the native C compiler of a host.

    Construction resolves the compiler executable and probes it; it fails if
    the compiler cannot be found or its banner cannot be parsed. The probed
    :class:`CompilerInfo` is never changed afterwards.
    """

    def __init__(
        self,
        working_directory: PathLike,
        settings: Optional[ToolchainSettings] = None,
        os_variant: Optional[OSVariant] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.working_directory = Path(working_directory)
        self.settings = settings or ToolchainSettings()
        self.os_variant = os_variant or OSVariant.current()
        self.strategy: VariantStrategy = get_strategy(self.os_variant)
        self.cancel_event = cancel_event

        self.compiler_path = normalize_path(
            resolve_compiler_path(
                self.settings.compiler_path,
                self.strategy.default_compiler,
                self.os_variant,
            )
        )
        self.command_builder = CommandBuilder(
            self.compiler_path,
            self.strategy.target_flags,
            self.settings.compiler_options,
            self.settings.libc.get_compiler_options(),
        )
        self.session = CompileSession(
            self.command_builder, self.working_directory, self.strategy
        )

        info = probe_toolchain(
            self.command_builder, self.working_directory, self.strategy, cancel_event
        )
        if info is None:
            raise ToolchainNotFoundError(
                f"Unable to detect supported {self.os_variant} native software "
                "development toolchain.",
                operating_system=str(self.os_variant),
                compiler_path=str(self.compiler_path),
            )
        self.compiler_info: CompilerInfo = info

    @classmethod
    def create(
        cls,
        working_directory: PathLike,
        settings: Optional[ToolchainSettings] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ToolchainInvoker:
        """Create the invoker for the running host."""
        return cls(working_directory, settings, OSVariant.current(), cancel_event)

    def verify_compiler(self) -> None:
        """
        Check the probed compiler against the host's version and architecture
        rules.

        Raises:
            VersionIncompatibleError: If the compiler version is not accepted
            ArchitectureMismatchError: If the compiler targets the wrong
                architecture
        """
        self.strategy.validate(self.compiler_info, self.settings)
        logger.info(f"Native toolchain {self.compiler_info} verified")

    def create_compiler_command(
        self,
        options: Iterable[str],
        target: Optional[PathLike] = None,
        inputs: Iterable[PathLike] = (),
    ) -> List[str]:
        return self.command_builder.build(options, target, inputs)

    def compile_and_parse_errors(
        self,
        options: Iterable[str],
        source: PathLike,
        target: PathLike,
        handler: Optional[ErrorHandler] = None,
    ) -> bool:
        """Compile ``source`` into ``target``, see :meth:`CompileSession.compile`."""
        return self.session.compile(
            options, source, target, handler, cancel_event=self.cancel_event
        )
