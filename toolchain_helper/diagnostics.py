#!/usr/bin/env python3
"""
Classification of compiler diagnostic lines.
"""

import re
from enum import StrEnum

ERROR_MARKERS = (": error:", ": fatal error:")

# file.c(12): error C2143: ...  /  file.c(12,5) : fatal error C1083: ...
MSVC_ERROR_PATTERN = re.compile(
    r"\(\d+(?:,\d+)?\)\s*:\s*(?:fatal\s+)?error\s+[A-Z]+\d+\s*:", re.IGNORECASE
)


class DiagnosticStream(StrEnum):
    """Process stream a compiler writes its diagnostics to."""

    STDOUT = "stdout"
    STDERR = "stderr"


def detect_error(line: str) -> bool:
    """Default predicate: GCC and Clang style error lines."""
    return any(marker in line for marker in ERROR_MARKERS)


def detect_msvc_error(line: str) -> bool:
    """MSVC predicate, also accepting GCC style markers."""
    return detect_error(line) or MSVC_ERROR_PATTERN.search(line) is not None
