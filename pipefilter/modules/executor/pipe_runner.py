#!/usr/bin/env python3
"""
Pipe runner - feeds a buffer to an external program and collects its output.

stdin and stdout are exchanged concurrently through ``communicate()`` so a
program that starts writing before it has read all of its input cannot
deadlock against us. stderr is inherited from the calling process.
"""

import logging
import subprocess
import threading
import time
from dataclasses import dataclass
from typing import List, Optional

from pipefilter.modules.transformations.errors import (
    LaunchFailed,
    TransformationCancelled,
    TransformationTimeout,
)

logger = logging.getLogger("pipefilter.executor")

# How often a cancellable run checks its cancel event
CANCEL_POLL_INTERVAL = 0.1


@dataclass
class PipeResult:
    """Output of a finished program."""

    stdout: bytes
    return_code: int
    elapsed_ms: int = 0


def run_filter(
    argv: List[str],
    data: bytes,
    timeout: float,
    cancel_event: Optional[threading.Event] = None,
) -> PipeResult:
    """
    Run ``argv`` with ``data`` on stdin and return everything it writes to stdout.

    Args:
        argv: Program path followed by its arguments
        data: Bytes written to the program's stdin before it is closed
        timeout: Deadline in seconds for the whole exchange
        cancel_event: Optional event; when set, the program is killed

    Returns:
        PipeResult with collected stdout and the exit status

    Raises:
        LaunchFailed: If the program cannot be started
        TransformationTimeout: If the deadline passes first
        TransformationCancelled: If ``cancel_event`` is set first
    """
    program = argv[0]
    start_time = time.monotonic()
    deadline = start_time + timeout

    logger.debug(f"Running: {' '.join(argv)}")

    try:
        process = subprocess.Popen(argv, stdin=subprocess.PIPE, stdout=subprocess.PIPE)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to launch {program}: {e}")
        raise LaunchFailed(program, e) from e

    # Leaving the block closes both pipes and reaps the process
    with process:
        pending: Optional[bytes] = data
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                _kill(process)
                logger.error(f"{program} timed out after {timeout}s")
                raise TransformationTimeout(program, timeout)

            wait = remaining if cancel_event is None else min(remaining, CANCEL_POLL_INTERVAL)
            try:
                stdout, _ = process.communicate(input=pending, timeout=wait)
                break
            except subprocess.TimeoutExpired:
                # Input is only handed over on the first call
                pending = None
                if cancel_event is not None and cancel_event.is_set():
                    _kill(process)
                    logger.info(f"{program} cancelled")
                    raise TransformationCancelled(program)

    elapsed_ms = int((time.monotonic() - start_time) * 1000)
    logger.debug(f"{program} exited with {process.returncode} in {elapsed_ms}ms")

    return PipeResult(stdout=stdout or b"", return_code=process.returncode, elapsed_ms=elapsed_ms)


def _kill(process: subprocess.Popen) -> None:
    """Kill the program and drain its pipes so it can be reaped."""
    process.kill()
    try:
        process.communicate(timeout=5)
    except subprocess.TimeoutExpired:
        logger.warning(f"Process {process.pid} did not exit after kill")
