"""Exceptions raised by nixctl operations."""
from typing import Optional, Sequence


class NixctlError(Exception):
    """Base class for all fatal nixctl errors."""
    pass


class ConfigError(NixctlError):
    """Missing or malformed configuration."""
    pass


class CommandError(NixctlError):
    """An external program failed or could not be started."""

    def __init__(
        self,
        message: str,
        command: Sequence[str] = (),
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ):
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr


class EvalError(NixctlError):
    """The configuration evaluator returned something unusable."""
    pass


class StepError(NixctlError):
    """A phase of a multi-step operation failed."""

    def __init__(self, phase: str, message: str):
        super().__init__(f"failed to {phase}: {message}")
        self.phase = phase
