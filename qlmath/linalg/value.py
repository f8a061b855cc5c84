"""
Base MathValue class for the qlmath value system.

This module provides the foundation for the numeric value objects with:
- Type promotion hierarchy
- Operator overloading
- Fuzzy comparison with tolerances
- Multiple output formats (string, TeX)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any, ClassVar

import numpy as np


class TypePrecedence(IntEnum):
    """
    Type promotion precedence hierarchy.

    Lower values promote to higher values.
    """

    NUMBER = 0  # Generic number
    REAL = 1  # Real number
    COMPLEX = 2  # Complex number
    VECTOR = 3  # Vector
    MATRIX = 4  # Matrix


class ToleranceMode:
    """Modes for fuzzy comparison."""

    RELATIVE = "relative"  # |a - b| / max(|a|, |b|) <= tol
    ABSOLUTE = "absolute"  # |a - b| <= tol


class MathValue(ABC):
    """
    Base class for all mathematical value objects.

    Provides:
    - Type promotion system
    - Operator overloading (all Python operators)
    - Fuzzy comparison with tolerances
    - Multiple output formats (string, TeX, etc.)

    Subclasses must implement:
    - type_precedence: Class variable defining promotion order
    - All abstract methods

    Note: Concrete subclasses should inherit from both BaseModel and MathValue,
    e.g., `class Real(BaseModel, MathValue):`. MathValue itself is abstract
    and does not inherit from BaseModel to avoid MRO conflicts.
    """

    # Type precedence for promotion (must be set by subclasses)
    type_precedence: ClassVar[TypePrecedence]

    @abstractmethod
    def promote(self, other: MathValue) -> MathValue:
        """
        Promote this value to be compatible with another type.

        Args:
            other: The other value to promote to

        Returns:
            Promoted version of self (or self if no promotion needed)

        Example:
            Real(2).promote(Complex(1, 1)) → Complex(2, 0)
        """

    @abstractmethod
    def compare(
        self, other: MathValue, tolerance: float | None = None, mode: str | None = None
    ) -> bool:
        """
        Fuzzy comparison with tolerance.

        Args:
            other: Value to compare against
            tolerance: Tolerance for comparison (None = context flag)
            mode: Tolerance mode (None = context flag)

        Returns:
            True if values are equal within tolerance
        """

    # String representations

    @abstractmethod
    def to_string(self) -> str:
        """Convert to human-readable string."""

    @abstractmethod
    def to_tex(self) -> str:
        """Convert to LaTeX representation."""

    @abstractmethod
    def to_python(self) -> Any:
        """Convert to the Python native value."""

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.to_string()})"

    # Operator overloading (Python magic methods)

    @abstractmethod
    def __add__(self, other: Any) -> MathValue:
        """Addition: self + other"""

    @abstractmethod
    def __radd__(self, other: Any) -> MathValue:
        """Right addition: other + self"""

    @abstractmethod
    def __sub__(self, other: Any) -> MathValue:
        """Subtraction: self - other"""

    @abstractmethod
    def __rsub__(self, other: Any) -> MathValue:
        """Right subtraction: other - self"""

    @abstractmethod
    def __mul__(self, other: Any) -> MathValue:
        """Multiplication: self * other"""

    @abstractmethod
    def __rmul__(self, other: Any) -> MathValue:
        """Right multiplication: other * self"""

    @abstractmethod
    def __truediv__(self, other: Any) -> MathValue:
        """Division: self / other"""

    @abstractmethod
    def __neg__(self) -> MathValue:
        """Unary negation: -self"""

    @abstractmethod
    def __pos__(self) -> MathValue:
        """Unary positive: +self"""

    # Comparison operators (using fuzzy comparison)

    def __eq__(self, other: Any) -> bool:
        """Equality with the current context's tolerance."""
        if not isinstance(other, MathValue):
            try:
                other = MathValue.from_python(other)
            except TypeError:
                return False

        return self.compare(other)

    def __ne__(self, other: Any) -> bool:
        return not self.__eq__(other)

    # Helper methods for type promotion

    @classmethod
    def should_promote_to(cls, other_type: type[MathValue]) -> bool:
        """
        Check if this type should promote to another type.

        Args:
            other_type: The type to compare against

        Returns:
            True if this type should promote to other_type
        """
        return cls.type_precedence < other_type.type_precedence

    def promote_types(self, other: MathValue) -> tuple[MathValue, MathValue]:
        """
        Promote both values to a common type.

        Args:
            other: The other value

        Returns:
            Tuple of (promoted_self, promoted_other)

        Example:
            Real(2).promote_types(Complex(1, 1)) → (Complex(2, 0), Complex(1, 1))
        """
        if self.type_precedence < other.type_precedence:
            return self.promote(other), other
        elif other.type_precedence < self.type_precedence:
            return self, other.promote(self)
        else:
            return self, other

    # Conversion helpers

    @classmethod
    def from_python(cls, value: Any) -> MathValue:
        """
        Convert a Python scalar to a MathValue.

        Args:
            value: Python or numpy scalar (bool, int, float, complex)

        Returns:
            Real or Complex instance (MathValues pass through unchanged)
        """
        # Import here to avoid circular imports
        from .numeric import Complex, Real

        if isinstance(value, MathValue):
            return value

        if isinstance(value, np.generic):
            value = value.item()

        if isinstance(value, bool):
            # bool is a subclass of int, so check first
            return Real(1.0 if value else 0.0)

        elif isinstance(value, (int, float)):
            return Real(float(value))

        elif isinstance(value, complex):
            return Complex(value.real, value.imag)

        else:
            raise TypeError(f"Cannot convert {type(value)} to MathValue")
