"""Exceptions raised while provisioning."""
from typing import List, Optional


class MacSetupError(Exception):
    """Base class for macsetup failures."""
    pass


class PreconditionFailure(MacSetupError):
    """Raised when the host does not match the expected platform.

    Nothing has been installed when this is raised.
    """

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"This setup is designed for {expected} only (detected platform: {actual})"
        )


class StepExecutionFailure(MacSetupError):
    """Raised when an install action exits non-zero."""

    def __init__(
        self,
        message: str,
        argv: Optional[List[str]] = None,
        returncode: int = 1,
        stderr: str = "",
        step: Optional[str] = None,
    ):
        self.argv = list(argv or [])
        self.returncode = returncode or 1
        self.stderr = stderr
        self.step = step
        super().__init__(message)


class SequenceDefinitionError(MacSetupError):
    """Raised when the declared step sequence is malformed."""
    pass


class ConfigEmitError(MacSetupError):
    """Raised when a terminal setting cannot be written as Lua."""
    pass
