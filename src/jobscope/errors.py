"""
Error types raised by the jobscope analysis engine.

All errors subclass ValueError: they signal inputs the engine cannot analyse,
and are raised at the point of detection without internal recovery.
"""


class JobscopeError(ValueError):
    """Base class for analysis engine errors."""


class InvalidKError(JobscopeError):
    """Requested cluster count is outside [1, n_points]."""


class DegenerateColumnError(JobscopeError):
    """A column has zero variance (or zero range) where spread is required."""

    def __init__(self, message: str, column=None):
        super().__init__(message)
        self.column = column


class InsufficientDimensionsError(JobscopeError):
    """More components were requested than the input has columns."""


class DimensionMismatchError(JobscopeError):
    """Inputs disagree on the number of records or columns."""
