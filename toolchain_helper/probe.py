#!/usr/bin/env python3
"""
One-time identification of the native compiler from its version banner.
"""

from __future__ import annotations

import threading
from typing import Optional

from loguru import logger

from .command import CommandBuilder
from .core_types import CompilerInfo, PathLike, ToolchainNotFoundError
from .platforms import VariantStrategy
from .process import communicate, spawn


def probe_toolchain(
    command_builder: CommandBuilder,
    working_directory: PathLike,
    strategy: VariantStrategy,
    cancel_event: Optional[threading.Event] = None,
) -> Optional[CompilerInfo]:
    """
    Run the compiler with its version-query options and parse the banner.

    stderr is merged into stdout so the banner is found on either stream. The
    exit code of the version query is ignored.

    Returns:
        The parsed compiler info, None if the banner was not recognised

    Raises:
        ToolchainNotFoundError: If the compiler process cannot be run
        BuildInterrupted: If the probe is cancelled
    """
    command = command_builder.build(strategy.version_info_options)
    try:
        with spawn(command, working_directory, merge_stderr=True) as process:
            output, _ = communicate(process, cancel_event)
    except OSError as e:
        raise ToolchainNotFoundError(
            f"Collecting native-compiler info with '{' '.join(command)}' failed: {e}",
            command=command,
        ) from e

    logger.debug(f"Probe produced {len(output.splitlines())} lines of output")
    info = strategy.parse_banner(output)
    if info is not None:
        logger.info(f"Detected native toolchain: {info}")
    return info
