#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Command-line interface for the toolchain helper module.
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from .config import SettingsLoader, ToolchainSettings
from .core_types import (
    BuildInterrupted,
    DiagnosticCollector,
    ToolchainError,
)
from .invoker import ToolchainInvoker

EXIT_OK = 0
EXIT_COMPILE_FAILED = 1
EXIT_TOOLCHAIN_ERROR = 2
EXIT_INTERRUPTED = 130

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toolchain_helper",
        description="Native C toolchain discovery and invocation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show the detected toolchain
  toolchain_helper info

  # Use a specific compiler and skip the compatibility check
  toolchain_helper info --compiler-path /opt/gcc/bin/gcc --no-verify

  # Compile a single source
  toolchain_helper compile probe.c -o probe.o --flag=-c --flag=-O2
""",
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=Path, help="JSON settings file")
    common.add_argument(
        "--compiler-path", type=Path, help="Compiler executable, bypasses PATH lookup"
    )
    common.add_argument(
        "--compiler-option",
        action="append",
        dest="compiler_options",
        help="Option passed to every compiler invocation (repeatable)",
    )
    common.add_argument(
        "--target-arch", help="Build target architecture (e.g. amd64, x86_64)"
    )
    common.add_argument(
        "--working-dir",
        type=Path,
        default=Path.cwd(),
        help="Working directory of compiler processes",
    )
    common.add_argument(
        "--no-verify",
        action="store_true",
        help="Skip the toolchain version and architecture check",
    )
    common.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser(
        "info", parents=[common], help="Probe and describe the native toolchain"
    )

    compile_parser = subparsers.add_parser(
        "compile", parents=[common], help="Compile a single source file"
    )
    compile_parser.add_argument("source", type=Path, help="Source file")
    compile_parser.add_argument(
        "-o", "--output", type=Path, required=True, help="Output file"
    )
    compile_parser.add_argument(
        "--flag",
        action="append",
        dest="flags",
        default=[],
        help="Option for this compilation (repeatable)",
    )
    return parser


def load_settings(args: argparse.Namespace) -> ToolchainSettings:
    """Merge the settings file with command-line overrides."""
    settings = (
        SettingsLoader.load(args.config) if args.config else ToolchainSettings()
    )
    overrides = {}
    if args.compiler_path:
        overrides["compiler_path"] = args.compiler_path
    if args.compiler_options:
        overrides["compiler_options"] = (
            settings.compiler_options + args.compiler_options
        )
    if args.target_arch:
        overrides["target_arch"] = args.target_arch
    if not overrides:
        return settings
    return ToolchainSettings.model_validate(
        {**settings.model_dump(), **overrides}
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function for command-line usage.
    """
    args = build_parser().parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level="DEBUG" if args.verbose else "INFO")

    try:
        settings = load_settings(args)
        invoker = ToolchainInvoker.create(args.working_dir, settings)
        invoker.compiler_info.dump(print)
        if not args.no_verify:
            invoker.verify_compiler()

        if args.command == "compile":
            collector = DiagnosticCollector()
            invoker.compile_and_parse_errors(
                args.flags, args.source, args.output, collector
            )
            for failure in collector.failures:
                print(failure.line, file=sys.stderr)
            if collector.has_errors:
                logger.error(f"Compilation of {args.source} failed")
                return EXIT_COMPILE_FAILED
            logger.info(f"Compiled {args.source} -> {args.output}")
    except ToolchainError:
        # Already logged when raised
        return EXIT_TOOLCHAIN_ERROR
    except BuildInterrupted as e:
        logger.warning(str(e))
        return EXIT_INTERRUPTED

    return EXIT_OK
