"""
Shared fixtures: the running Python interpreter stands in for a C compiler.

Everything after ``python -c <script>`` ends up in the script's ``sys.argv``,
so a script passed as the global compiler options sees the exact compiler
arguments and can answer version queries or emit diagnostics.
"""

import sys
from typing import List

import pytest

from .config import ToolchainSettings

GCC_BANNER = (
    "Using built-in specs.\n"
    "COLLECT_GCC=gcc\n"
    "COLLECT_LTO_WRAPPER=/usr/lib/gcc/x86_64-pc-linux-gnu/9.3.0/lto-wrapper\n"
    "Target: x86_64-pc-linux-gnu\n"
    "Configured with: ../configure --prefix=/usr --enable-languages=c,c++\n"
    "Thread model: posix\n"
    "gcc version 9.3.0 (GCC) \n"
)

CLANG_BANNER = (
    "Apple clang version 12.0.0 (clang-1200.0.32.29)\n"
    "Target: x86_64-apple-darwin19.6.0\n"
    "Thread model: posix\n"
    "InstalledDir: /Library/Developer/CommandLineTools/usr/bin\n"
)

MSVC_BANNER = (
    "Microsoft (R) C/C++ Optimizing Compiler Version 19.16.27032.1 for x64\n"
    "Copyright (C) Microsoft Corporation.  All rights reserved.\n"
    "\n"
    "usage: cl [ option... ] filename... [ /link linkoption... ]\n"
)


def fake_compiler_script(
    banner: str = GCC_BANNER,
    diagnostics: str = "",
    exit_code: int = 0,
    stream: str = "stderr",
) -> str:
    """Script answering ``-v`` with ``banner`` and anything else with
    ``diagnostics`` on ``stream`` followed by ``exit_code``."""
    return "\n".join(
        [
            "import sys",
            "if '-v' in sys.argv[1:]:",
            f"    sys.stderr.write({banner!r})",
            "else:",
            f"    sys.{stream}.write({diagnostics!r})",
            f"    sys.exit({exit_code})",
        ]
    )


def script_options(script: str) -> List[str]:
    return ["-c", script]


def fake_settings(script: str, **kwargs) -> ToolchainSettings:
    kwargs.setdefault("target_arch", "x86_64")
    kwargs.setdefault("compiler_path", sys.executable)
    kwargs.setdefault("compiler_options", script_options(script))
    return ToolchainSettings(**kwargs)


@pytest.fixture
def gcc_settings():
    """Settings whose compiler reports GCC 9.3.0 for x86_64 and compiles cleanly."""
    return fake_settings(fake_compiler_script())


@pytest.fixture
def executable(tmp_path):
    """Factory creating executable files below ``tmp_path``."""

    def _make(relative: str, mode: int = 0o755):
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("#!/bin/sh\nexit 0\n")
        path.chmod(mode)
        return path

    return _make
