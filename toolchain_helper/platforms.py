#!/usr/bin/env python3
"""
Strategy records binding each OS variant to its toolchain conventions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .banner import parse_clang_banner, parse_gcc_banner, parse_msvc_banner
from .command import TargetFlags, gnu_target_flags, msvc_target_flags
from .config import ToolchainSettings
from .core_types import CompilerInfo, OSVariant
from .diagnostics import DiagnosticStream, detect_error, detect_msvc_error
from .validator import validate_darwin, validate_linux, validate_windows


@dataclass(frozen=True)
class VariantStrategy:
    """Everything that differs between host operating systems."""

    os_variant: OSVariant
    default_compiler: str
    version_info_options: Tuple[str, ...]
    parse_banner: Callable[[str], Optional[CompilerInfo]]
    target_flags: TargetFlags
    diagnostics_stream: DiagnosticStream
    detect_error: Callable[[str], bool]
    validate: Callable[[CompilerInfo, ToolchainSettings], None]


def _validate_linux(info: CompilerInfo, settings: ToolchainSettings) -> None:
    validate_linux(info, settings.target_arch)


def _validate_darwin(info: CompilerInfo, settings: ToolchainSettings) -> None:
    validate_darwin(info)


def _validate_windows(info: CompilerInfo, settings: ToolchainSettings) -> None:
    validate_windows(info, settings.runtime_version, settings.msvc_policy)


STRATEGIES: Dict[OSVariant, VariantStrategy] = {
    OSVariant.LINUX: VariantStrategy(
        os_variant=OSVariant.LINUX,
        default_compiler="gcc",
        version_info_options=("-v",),
        parse_banner=parse_gcc_banner,
        target_flags=gnu_target_flags,
        diagnostics_stream=DiagnosticStream.STDERR,
        detect_error=detect_error,
        validate=_validate_linux,
    ),
    OSVariant.DARWIN: VariantStrategy(
        os_variant=OSVariant.DARWIN,
        default_compiler="cc",
        version_info_options=("-v",),
        parse_banner=parse_clang_banner,
        target_flags=gnu_target_flags,
        diagnostics_stream=DiagnosticStream.STDERR,
        detect_error=detect_error,
        validate=_validate_darwin,
    ),
    # cl.exe prints its banner when run without arguments and writes
    # diagnostics to stdout
    OSVariant.WINDOWS: VariantStrategy(
        os_variant=OSVariant.WINDOWS,
        default_compiler="cl",
        version_info_options=(),
        parse_banner=parse_msvc_banner,
        target_flags=msvc_target_flags,
        diagnostics_stream=DiagnosticStream.STDOUT,
        detect_error=detect_msvc_error,
        validate=_validate_windows,
    ),
}


def get_strategy(os_variant: Optional[OSVariant] = None) -> VariantStrategy:
    """Strategy for ``os_variant``, or for the running host when omitted."""
    return STRATEGIES[os_variant or OSVariant.current()]
