"""Exception types raised by isobench.

Every error except :class:`LineParseError` is fatal: the CLI reports it
and exits non-zero without printing a partial report.
"""

from __future__ import annotations


class IsobenchError(Exception):
    """Base class for all isobench errors."""

    def __init__(self, message: str, *, output: str = "") -> None:
        super().__init__(message)
        self.output = output


class ToolNotFoundError(IsobenchError):
    """The go tool could not be found or executed."""


class TargetResolutionError(IsobenchError):
    """The target package or its test files could not be resolved."""


class SourceReadError(IsobenchError):
    """A test source file could not be read."""


class CommandFailedError(IsobenchError):
    """``go test`` exited with a non-zero status."""

    def __init__(self, message: str, *, exit_code: int, output: str = "") -> None:
        super().__init__(message, output=output)
        self.exit_code = exit_code


class OutputFormatError(IsobenchError):
    """``go test`` output did not have the expected shape."""


class LineParseError(IsobenchError):
    """A benchmark result line did not match the result-line grammar."""
