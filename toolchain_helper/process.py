#!/usr/bin/env python3
"""
Compiler subprocess lifecycle: spawning, draining output, cancellation and
guaranteed release.
"""

from __future__ import annotations

import subprocess
import threading
import time
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from loguru import logger

from .core_types import BuildInterrupted, PathLike


def release(process: subprocess.Popen) -> None:
    """Kill ``process`` if it is still running, close its pipes and reap it."""
    if process.poll() is None:
        process.kill()
    for stream in (process.stdin, process.stdout, process.stderr):
        if stream is not None:
            stream.close()
    process.wait()


@contextmanager
def spawn(
    command: List[str],
    cwd: Optional[PathLike] = None,
    *,
    merge_stderr: bool = False,
) -> Iterator[subprocess.Popen]:
    """
    Start ``command`` with piped output and release it on every exit path.

    Args:
        command: Command and arguments to execute
        cwd: Working directory of the child
        merge_stderr: Redirect the child's stderr into its stdout

    Raises:
        OSError: If the process cannot be created
    """
    logger.debug(f"Executing command: {' '.join(command)}")
    process = subprocess.Popen(
        command,
        cwd=cwd,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
    )
    try:
        yield process
    finally:
        release(process)


def _interrupt(process: subprocess.Popen, command: List[str]) -> BuildInterrupted:
    process.kill()
    logger.warning(f"Build interrupted, killed compiler process {process.pid}")
    return BuildInterrupted(
        f"Build interrupted while running '{' '.join(command)}'", command=command
    )


def communicate(
    process: subprocess.Popen,
    cancel_event: Optional[threading.Event] = None,
    poll_interval: float = 0.1,
) -> Tuple[str, str]:
    """
    Read all output of ``process`` and wait for it to exit.

    Both pipes are drained concurrently so the child never blocks on a full
    pipe buffer. Output already read is discarded on cancellation.

    Args:
        process: Process started by :func:`spawn`
        cancel_event: Event checked every ``poll_interval`` seconds
        poll_interval: Cancellation polling interval in seconds

    Returns:
        Tuple of (stdout, stderr); stderr is empty when it was merged

    Raises:
        BuildInterrupted: If interrupted or ``cancel_event`` is set; the child
            has been killed
    """
    command = [str(arg) for arg in process.args]
    start_time = time.time()
    try:
        if cancel_event is None:
            stdout, stderr = process.communicate()
        else:
            while True:
                if cancel_event.is_set():
                    raise _interrupt(process, command)
                try:
                    stdout, stderr = process.communicate(timeout=poll_interval)
                    break
                except subprocess.TimeoutExpired:
                    continue
    except KeyboardInterrupt as e:
        raise _interrupt(process, command) from e

    logger.debug(
        f"Command exited with code {process.returncode} "
        f"in {time.time() - start_time:.2f}s"
    )
    return stdout or "", stderr or ""
