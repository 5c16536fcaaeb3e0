#!/usr/bin/env python3
"""
Assembly of compiler command lines.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence

from .core_types import PathLike

TargetFlags = Callable[[str], List[str]]


def gnu_target_flags(target: str) -> List[str]:
    return ["-o", target]


def msvc_target_flags(target: str) -> List[str]:
    return [f"/Fe{target}"]


class CommandBuilder:
    """
    Builds compiler argument vectors in a fixed, order-sensitive layout:

    compiler, global compiler options, per-call options, target flags,
    inputs, libc options.
    """

    def __init__(
        self,
        compiler_path: PathLike,
        target_flags: TargetFlags = gnu_target_flags,
        compiler_options: Sequence[str] = (),
        libc_options: Sequence[str] = (),
    ) -> None:
        self.compiler_path = str(compiler_path)
        self.target_flags = target_flags
        self.compiler_options = list(compiler_options)
        self.libc_options = list(libc_options)

    def build(
        self,
        options: Iterable[str],
        target: Optional[PathLike] = None,
        inputs: Iterable[PathLike] = (),
    ) -> List[str]:
        command = [self.compiler_path]
        command.extend(self.compiler_options)
        command.extend(options)
        if target is not None:
            command.extend(self.target_flags(str(target)))
        command.extend(str(path) for path in inputs)
        command.extend(self.libc_options)
        return command
