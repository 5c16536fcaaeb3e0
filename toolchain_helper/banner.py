#!/usr/bin/env python3
"""
Parsers for the identification banners printed by C compilers.

Each parser works on the complete, possibly multi-line output of a version
query and returns a :class:`CompilerInfo`, or ``None`` when the expected
markers are missing. Parsers never raise on unexpected text.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional, Tuple

from loguru import logger

from .core_types import CompilerInfo, OSVariant

TARGET_MARKER = "Target: "
GCC_VERSION_MARKER = "gcc version "
CLANG_VERSION_PATTERN = re.compile(r"Apple (clang|LLVM) version ")
MSVC_VERSION_MARKER = "Microsoft (R) C/C++ Optimizing Compiler Version "
MSVC_ARCH_MARKER = "for "

_VERSION_DELIMITER = re.compile(r"[. ]")
_VERSION_NUMBER = re.compile(r"[0-9]+")


def _find_marker(
    lines: List[str], marker: str, start: int = 0
) -> Optional[Tuple[int, str]]:
    """Return the index of the first line at or after ``start`` containing
    ``marker`` together with the text following the marker."""
    for index in range(start, len(lines)):
        position = lines[index].find(marker)
        if position >= 0:
            return index, lines[index][position + len(marker):]
    return None


def _version_numbers(text: str, count: int) -> List[int]:
    """Read up to ``count`` leading integers from ``text`` split on '.' and ' '."""
    numbers = []
    for token in _VERSION_DELIMITER.split(text)[:count]:
        if not _VERSION_NUMBER.fullmatch(token):
            break
        numbers.append(int(token))
    return numbers


def guess_target_triplet(
    lines: List[str], start: int = 0
) -> Optional[Tuple[str, str, str]]:
    """
    Find the ``Target: `` line and split its triple into (arch, vendor, os).

    The OS part keeps any further hyphens (``linux-gnu``).
    """
    found = _find_marker(lines, TARGET_MARKER, start)
    if found is None:
        return None
    parts = found[1].strip().split("-", 2)
    if len(parts) < 2 or not all(parts[:2]):
        return None
    arch, vendor = parts[0], parts[1]
    os_name = parts[2] if len(parts) > 2 else ""
    return arch, vendor, os_name.removeprefix("-")


def parse_gcc_banner(output: str) -> Optional[CompilerInfo]:
    """Parse the output of ``gcc -v``."""
    lines = output.splitlines()
    found_target = _find_marker(lines, TARGET_MARKER)
    triplet = guess_target_triplet(lines)
    if found_target is None or triplet is None:
        return None

    found_version = _find_marker(lines, GCC_VERSION_MARKER, found_target[0] + 1)
    if found_version is None:
        return None
    version = _version_numbers(found_version[1], 3)
    if len(version) < 3:
        return None

    arch, vendor, _ = triplet
    return CompilerInfo(
        vendor=vendor,
        name="GNU project C and C++ compiler",
        short_name="gcc",
        version_major=version[0],
        version_minor=version[1],
        version_patch=version[2],
        target_arch=arch,
    )


def parse_clang_banner(output: str) -> Optional[CompilerInfo]:
    """Parse the output of Apple's ``cc -v``."""
    lines = output.splitlines()
    for index, line in enumerate(lines):
        match = CLANG_VERSION_PATTERN.search(line)
        if match:
            break
    else:
        return None

    version = _version_numbers(line[match.end():], 3)
    if len(version) < 2:
        return None
    # Yosemite and older toolchains omit the patch number
    patch = version[2] if len(version) > 2 else 0

    triplet = guess_target_triplet(lines, index)
    if triplet is None:
        return None

    arch, vendor, _ = triplet
    return CompilerInfo(
        vendor=vendor,
        name="LLVM",
        short_name="clang",
        version_major=version[0],
        version_minor=version[1],
        version_patch=patch,
        target_arch=arch,
    )


def parse_msvc_banner(output: str) -> Optional[CompilerInfo]:
    """Parse the banner ``cl.exe`` prints when run without arguments."""
    # For cl.exe the first line holds all necessary information
    lines = output.splitlines()
    if not lines:
        return None
    first_line = lines[0]
    position = first_line.find(MSVC_VERSION_MARKER)
    if position < 0:
        return None
    rest = first_line[position + len(MSVC_VERSION_MARKER):]

    version = _version_numbers(rest, 3)
    if len(version) < 3:
        return None

    position = rest.find(MSVC_ARCH_MARKER)
    if position < 0:
        return None
    tokens = rest[position + len(MSVC_ARCH_MARKER):].split()
    if not tokens:
        return None

    return CompilerInfo(
        vendor="microsoft",
        name="C/C++ Optimizing Compiler",
        short_name="cl",
        version_major=version[0],
        version_minor=version[1],
        version_patch=version[2],
        target_arch=tokens[0],
    )


BANNER_PARSERS: Dict[OSVariant, Callable[[str], Optional[CompilerInfo]]] = {
    OSVariant.LINUX: parse_gcc_banner,
    OSVariant.DARWIN: parse_clang_banner,
    OSVariant.WINDOWS: parse_msvc_banner,
}


def parse_banner(output: str, os_variant: OSVariant) -> Optional[CompilerInfo]:
    """Parse ``output`` with the banner grammar of ``os_variant``."""
    info = BANNER_PARSERS[os_variant](output)
    if info is None:
        logger.debug(
            f"No {os_variant} compiler banner found in {len(output)} characters of output"
        )
    return info
