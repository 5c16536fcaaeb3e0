#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Toolchain Helper Module

This module locates the host's native C compiler, identifies its vendor,
version and target architecture from its version banner, checks that it suits
the build, and runs compilations while classifying their diagnostics.

Features:
- Host-specific conventions for Linux (GCC), Darwin (Apple Clang) and
  Windows (MSVC)
- Compiler path override or executable search path lookup
- Per-OS version and architecture compatibility rules
- Cancellable compiler subprocesses with guaranteed cleanup
- Settings via JSON files or command-line
"""

import sys

from loguru import logger

from .architecture import guess_architecture, host_architecture
from .banner import parse_banner
from .cli import LOG_FORMAT, main
from .command import CommandBuilder
from .config import LibCSettings, MsvcVersionPolicy, SettingsLoader, ToolchainSettings
from .core_types import (
    Architecture,
    ArchitectureMismatchError,
    BuildInterrupted,
    CompileFailure,
    CompilerInfo,
    ConfigurationError,
    DiagnosticCollector,
    ErrorKind,
    InvalidToolchainPathError,
    OSVariant,
    ProcessLaunchError,
    ToolchainError,
    ToolchainNotFoundError,
    VersionIncompatibleError,
)
from .invoker import ToolchainInvoker
from .session import CompileSession
from .validator import validate_toolchain

# Module metadata
__version__ = "0.1.0"
__license__ = "GPL-3.0-or-later"

# Configure default logging
logger.remove()  # Remove default handler
logger.add(
    sys.stderr,
    format=LOG_FORMAT,
    level="INFO",
)


def get_tool_info() -> dict:
    """
    Return metadata about this tool for discovery.

    Returns:
        Dict containing tool metadata including name, version, description,
        available functions, requirements, and platform compatibility.
    """
    return {
        "name": "toolchain_helper",
        "version": __version__,
        "description": "Native C toolchain discovery, validation and invocation for GCC, Apple Clang and MSVC",
        "license": __license__,
        "supported": True,
        "platform": ["windows", "linux", "macos"],
        "functions": [
            "parse_banner",
            "guess_architecture",
            "validate_toolchain",
            "create_compiler_command",
            "compile_and_parse_errors",
            "verify_compiler",
        ],
        "requirements": ["loguru", "pydantic", "aiofiles"],
        "classes": {
            "ToolchainInvoker": "Per-build compiler discovery, probing and invocation",
            "CompileSession": "Single compilation runs with diagnostic classification",
            "CommandBuilder": "Order-sensitive compiler command line assembly",
            "ToolchainSettings": "Read-only build-wide toolchain settings",
        },
    }


__all__ = [
    # Core types
    "Architecture",
    "CompilerInfo",
    "CompileFailure",
    "DiagnosticCollector",
    "ErrorKind",
    "OSVariant",
    # Errors
    "ToolchainError",
    "ToolchainNotFoundError",
    "InvalidToolchainPathError",
    "VersionIncompatibleError",
    "ArchitectureMismatchError",
    "ProcessLaunchError",
    "ConfigurationError",
    "BuildInterrupted",
    # Settings
    "ToolchainSettings",
    "MsvcVersionPolicy",
    "LibCSettings",
    "SettingsLoader",
    # Classes
    "ToolchainInvoker",
    "CompileSession",
    "CommandBuilder",
    # Functions
    "guess_architecture",
    "host_architecture",
    "parse_banner",
    "validate_toolchain",
    "get_tool_info",
    "main",
]
