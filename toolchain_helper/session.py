#!/usr/bin/env python3
"""
Compilation runs and classification of their diagnostic output.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Iterable, Optional

from loguru import logger

from .command import CommandBuilder
from .core_types import ErrorHandler, PathLike, ProcessLaunchError
from .diagnostics import DiagnosticStream
from .paths import normalize_path
from .platforms import VariantStrategy
from .process import communicate, spawn


class CompileSession:
    """
    Runs the compiler on single sources and reports failures to a handler.

    Failures are never raised: each error line goes to the handler, and a
    non-zero exit without any recognised error line is reported once with the
    complete diagnostic output. The caller decides whether to abort.
    """

    def __init__(
        self,
        command_builder: CommandBuilder,
        working_directory: PathLike,
        strategy: VariantStrategy,
    ) -> None:
        self.command_builder = command_builder
        self.working_directory = Path(working_directory)
        self.strategy = strategy

    def compile(
        self,
        options: Iterable[str],
        source: PathLike,
        target: PathLike,
        handler: Optional[ErrorHandler] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> bool:
        """
        Compile ``source`` into ``target``.

        Args:
            options: Options for this compilation
            source: Source file
            target: Output file
            handler: Receives (command, source, line) for every failure
            cancel_event: Cancels the compilation when set

        Returns:
            True if no failure was reported

        Raises:
            ProcessLaunchError: If the compiler process cannot be started
            BuildInterrupted: If the compilation is cancelled
        """
        source_path = Path(source)
        command = self.command_builder.build(
            options, normalize_path(target), [normalize_path(source)]
        )
        try:
            with spawn(command, self.working_directory) as process:
                stdout, stderr = communicate(process, cancel_event)
                status = process.returncode
        except OSError as e:
            raise ProcessLaunchError(
                f"Unable to run native compiler '{' '.join(command)}': {e}. "
                "Make sure a native software development toolchain is installed "
                "on your system.",
                command=command,
            ) from e

        if self.strategy.diagnostics_stream is DiagnosticStream.STDOUT:
            lines = stdout.splitlines()
        else:
            lines = stderr.splitlines()

        error_reported = False
        for line in lines:
            if self.strategy.detect_error(line):
                logger.debug(f"Compiler error in {source_path}: {line}")
                if handler is not None:
                    handler(command, source_path, line)
                error_reported = True

        if status != 0 and not error_reported:
            logger.warning(
                f"Compiler exited with code {status} for {source_path} "
                "without reporting an error line"
            )
            if handler is not None:
                handler(command, source_path, "\n".join(lines))
            return False

        return not error_reported
