"""Exceptions raised by the qlmath linear algebra and statistics modules."""

from __future__ import annotations


class MathError(Exception):
    """Base exception for qlmath errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ShapeError(MathError, ValueError):
    """Raised when operand dimensions do not fit the operation."""

    def __init__(
        self,
        message: str,
        expected: tuple[int, ...] | None = None,
        actual: tuple[int, ...] | None = None,
    ):
        self.expected = expected
        self.actual = actual
        if expected is not None and actual is not None:
            message = f"{message} (expected {expected}, got {actual})"
        super().__init__(message)


class SingularMatrixError(MathError, ArithmeticError):
    """Raised when an operation needs an invertible matrix and gets a singular one."""


class OutOfBoundsError(MathError, ValueError):
    """Raised when a parameter lies outside its admissible range."""

    def __init__(self, message: str, value: float | None = None):
        self.value = value
        super().__init__(message)


class DomainError(MathError, ValueError):
    """Raised when a statistic is undefined for the given data."""
