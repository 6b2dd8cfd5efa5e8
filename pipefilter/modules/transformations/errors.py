"""
Error types for transformation plugins.

A no-op by design (empty registry, unknown selector) is never an error;
everything here marks a real failure the caller can act on.
"""

from typing import Optional


class TransformationError(Exception):
    """Base class for all transformation failures."""


class ConfigurationError(TransformationError, ValueError):
    """Invalid or incomplete configuration detected at load or construction time."""


class LaunchFailed(TransformationError):
    """The external program could not be started."""

    def __init__(self, program: str, reason: Optional[BaseException] = None):
        self.program = program
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Failed to launch {program}{detail}")


class TransformationTimeout(TransformationError):
    """The external program did not finish before the deadline."""

    def __init__(self, program: str, timeout_seconds: float):
        self.program = program
        self.timeout_seconds = timeout_seconds
        super().__init__(f"{program} did not finish within {timeout_seconds}s")


class TransformationCancelled(TransformationError):
    """The transformation was cancelled while the program was running."""

    def __init__(self, program: str):
        self.program = program
        super().__init__(f"Transformation through {program} was cancelled")
