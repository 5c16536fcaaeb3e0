#!/usr/bin/env python3
"""
Mapping of compiler-reported architecture tokens to canonical architectures.
"""

import platform

from .core_types import Architecture

_ARCHITECTURE_TOKENS = {
    "x86_64": Architecture.AMD64,
    "x64": Architecture.AMD64,  # Windows notation
    "amd64": Architecture.AMD64,
    "aarch64": Architecture.AARCH64,
    "arm64": Architecture.AARCH64,  # Apple notation
    "sparc64": Architecture.SPARC,
    # 32-bit targets are not supported
    "i686": Architecture.UNSUPPORTED,
    "80x86": Architecture.UNSUPPORTED,  # Windows notation
}


def guess_architecture(token: str) -> Architecture:
    """Map a raw architecture token to its canonical architecture."""
    return _ARCHITECTURE_TOKENS.get(token, Architecture.UNKNOWN)


def host_architecture() -> Architecture:
    """Canonical architecture of the running host."""
    return guess_architecture(platform.machine().lower())
