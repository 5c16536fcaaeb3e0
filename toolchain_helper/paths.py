#!/usr/bin/env python3
"""
Resolution of the compiler executable from an override or the search path.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from loguru import logger

from .core_types import (
    InvalidToolchainPathError,
    OSVariant,
    PathLike,
    ToolchainNotFoundError,
)

WINDOWS_EXECUTABLE_SUFFIX = ".exe"


def as_executable_name(basename: str, os_variant: OSVariant) -> str:
    """Apply the executable-name suffix rule of ``os_variant``."""
    if os_variant is OSVariant.WINDOWS and not basename.endswith(
        WINDOWS_EXECUTABLE_SUFFIX
    ):
        return basename + WINDOWS_EXECUTABLE_SUFFIX
    return basename


def normalize_path(path: PathLike) -> Path:
    """Lexically normalize ``path`` (collapses ``.`` and ``..`` segments)."""
    return Path(os.path.normpath(os.fspath(path)))


def is_executable_file(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def lookup_search_path(name: str, search_path: Optional[str] = None) -> Optional[Path]:
    """
    Find ``name`` in the directories of the executable search path.

    Args:
        name: Executable file name
        search_path: ``os.pathsep`` separated directories, defaults to ``$PATH``

    Returns:
        The first executable match in search-path order, None otherwise
    """
    if search_path is None:
        search_path = os.environ.get("PATH", "")

    for entry in search_path.split(os.pathsep):
        if not entry:
            continue
        candidate = Path(entry) / name
        if is_executable_file(candidate):
            return candidate
    return None


def resolve_compiler_path(
    override: Optional[PathLike],
    default_name: str,
    os_variant: OSVariant,
    search_path: Optional[str] = None,
) -> Path:
    """
    Resolve the compiler executable.

    Args:
        override: Explicitly configured compiler path, used verbatim if set
        default_name: Default compiler short name of the OS variant
        os_variant: Host OS variant
        search_path: Search path override, defaults to ``$PATH``

    Returns:
        Path to the compiler executable

    Raises:
        ToolchainNotFoundError: If no override is set and the default compiler
            is not on the search path
        InvalidToolchainPathError: If the resolved path is a directory or is
            not executable
    """
    if override is not None:
        compiler_path = Path(as_executable_name(os.fspath(override), os_variant))
    else:
        executable_name = as_executable_name(default_name, os_variant)
        found = lookup_search_path(executable_name, search_path)
        if found is None:
            raise ToolchainNotFoundError(
                f"Default native-compiler executable '{executable_name}' "
                "not found via environment variable PATH",
                executable=executable_name,
            )
        compiler_path = found

    if compiler_path.is_dir() or not os.access(compiler_path, os.X_OK):
        if override is not None:
            subject = f"Configured compiler path '{override}'"
        else:
            subject = f"Default native-compiler '{compiler_path}'"
        raise InvalidToolchainPathError(
            f"{subject} does not specify a path to an executable.",
            compiler_path=str(compiler_path),
        )

    logger.debug(f"Resolved native compiler: {compiler_path}")
    return compiler_path
