"""
Numeric MathValue types: Real, Complex.

These are the scalar entries of vectors and matrices, plus the tolerance
helpers shared by every comparison in the package.
"""

from __future__ import annotations

import cmath
import math
from typing import Any, ClassVar

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from .value import MathValue, ToleranceMode, TypePrecedence

Number = int | float | complex


def _context_flags():
    # Import here to avoid circular dependency
    from .context import get_current_context

    return get_current_context().flags


def resolve_tolerance(tolerance: float | None = None, mode: str | None = None) -> tuple[float, str]:
    """Fill in missing comparison settings from the current context."""
    if tolerance is None or mode is None:
        flags = _context_flags()
        if tolerance is None:
            tolerance = flags.get('tolerance', 1e-6)
        if mode is None:
            mode = flags.get('tolType', ToleranceMode.ABSOLUTE)
    return tolerance, mode


def zero_level() -> float:
    """The magnitude below which a value counts as zero in the current context."""
    return _context_flags().get('zeroLevel', 1e-10)


def fuzzy_compare(
    a: Number, b: Number, tolerance: float | None = None, mode: str | None = None
) -> bool:
    """
    Compare two numbers with tolerance.

    Works for real and complex operands; for complex numbers the modulus of
    the difference is measured.

    Args:
        a: First value
        b: Second value
        tolerance: Tolerance value (None = context tolerance)
        mode: Comparison mode, absolute or relative (None = context tolType)

    Returns:
        True if values are equal within tolerance
    """
    tolerance, mode = resolve_tolerance(tolerance, mode)

    # Exact equality
    if a == b:
        return True

    # Use epsilon for floating point comparisons to avoid precision issues
    EPSILON = 1e-12

    if mode == ToleranceMode.ABSOLUTE:
        return abs(a - b) <= tolerance + EPSILON

    elif mode == ToleranceMode.RELATIVE:
        max_abs = max(abs(a), abs(b))
        if max_abs == 0:
            return abs(a - b) <= tolerance + EPSILON
        return abs(a - b) / max_abs <= tolerance + EPSILON

    raise ValueError(f"Unknown tolerance mode: {mode}")


def is_zero(value: Number | MathValue, level: float | None = None) -> bool:
    """True if |value| is within the zero level (context zeroLevel by default)."""
    if level is None:
        level = zero_level()
    if isinstance(value, MathValue):
        value = value.to_python()
    return abs(value) <= level


class Real(BaseModel, MathValue):
    """
    Real number value.

    Represents double-precision floating-point numbers with fuzzy
    comparison support.
    """

    model_config = ConfigDict(frozen=True)

    value: float = Field(description="The numeric value")
    type_precedence: ClassVar[TypePrecedence] = TypePrecedence.REAL

    def __init__(self, value: float | int, **kwargs):
        """
        Initialize a Real number.

        Args:
            value: Numeric value (will be converted to float)
        """
        if isinstance(value, Real):
            value = value.value
        super().__init__(value=float(value), **kwargs)

    def promote(self, other: MathValue) -> MathValue:
        """Promote Real to another type."""
        if isinstance(other, Complex):
            return Complex(self.value, 0.0)
        return self

    def compare(
        self, other: MathValue, tolerance: float | None = None, mode: str | None = None
    ) -> bool:
        """Fuzzy comparison of real numbers."""
        if not isinstance(other, Real):
            self_promoted, other_promoted = self.promote_types(other)
            if self_promoted is not self:
                return self_promoted.compare(other_promoted, tolerance, mode)
            # Can't promote, not comparable
            return False

        return fuzzy_compare(self.value, other.value, tolerance, mode)

    def __eq__(self, other: Any) -> bool:
        """Equality comparison with context-aware tolerance."""
        return MathValue.__eq__(self, other)

    def __ne__(self, other: Any) -> bool:
        return not self.__eq__(other)

    # fuzzy equality has no consistent hash
    __hash__ = None

    def to_string(self) -> str:
        """Convert to string."""
        # Remove .0 for integers
        if math.isfinite(self.value) and self.value == int(self.value) and abs(self.value) < 1e10:
            return str(int(self.value))
        return str(self.value)

    def to_tex(self) -> str:
        return self.to_string()

    def to_python(self) -> float:
        return self.value

    def __str__(self) -> str:
        return self.to_string()

    def __float__(self) -> float:
        return self.value

    def __complex__(self) -> complex:
        return complex(self.value, 0.0)

    # Arithmetic operators

    def _binary(self, other: Any, op) -> MathValue:
        if isinstance(other, np.generic):
            other = other.item()
        if isinstance(other, (int, float)):
            return Real(op(self.value, float(other)))
        elif isinstance(other, complex):
            return op(Complex(self.value, 0.0), Complex(other))
        elif isinstance(other, Real):
            return Real(op(self.value, other.value))
        elif isinstance(other, MathValue):
            self_promoted, other_promoted = self.promote_types(other)
            if self_promoted is not self:
                return op(self_promoted, other_promoted)
        # Let Vector/Matrix reflected operators take over
        return NotImplemented

    def __add__(self, other: Any) -> MathValue:
        return self._binary(other, lambda a, b: a + b)

    def __radd__(self, other: Any) -> MathValue:
        return self.__add__(other)

    def __sub__(self, other: Any) -> MathValue:
        return self._binary(other, lambda a, b: a - b)

    def __rsub__(self, other: Any) -> MathValue:
        return self._binary(other, lambda a, b: b - a)

    def __mul__(self, other: Any) -> MathValue:
        return self._binary(other, lambda a, b: a * b)

    def __rmul__(self, other: Any) -> MathValue:
        return self.__mul__(other)

    def __truediv__(self, other: Any) -> MathValue:
        """Division (raises ZeroDivisionError on an exact zero divisor)."""
        return self._binary(other, lambda a, b: a / b)

    def __rtruediv__(self, other: Any) -> MathValue:
        return self._binary(other, lambda a, b: b / a)

    def __pow__(self, other: Any) -> MathValue:
        """Exponentiation; negative bases with fractional powers go complex."""
        if isinstance(other, Real):
            other = other.value
        if isinstance(other, (int, float)):
            result = self.value ** other
            if isinstance(result, complex):
                return Complex(result)
            return Real(result)
        elif isinstance(other, (complex, Complex)):
            return Complex(self.value, 0.0) ** other
        return NotImplemented

    def __neg__(self) -> Real:
        return Real(-self.value)

    def __pos__(self) -> Real:
        return Real(self.value)

    def __abs__(self) -> Real:
        return Real(abs(self.value))

    def __lt__(self, other: Any) -> bool:
        if isinstance(other, (int, float)):
            return self.value < other
        elif isinstance(other, Real):
            return self.value < other.value
        return NotImplemented

    def __le__(self, other: Any) -> bool:
        return self.__eq__(other) or self.__lt__(other)

    def __gt__(self, other: Any) -> bool:
        if isinstance(other, (int, float)):
            return self.value > other
        elif isinstance(other, Real):
            return self.value > other.value
        return NotImplemented

    def __ge__(self, other: Any) -> bool:
        return self.__eq__(other) or self.__gt__(other)


class Complex(BaseModel, MathValue):
    """
    Complex number value.

    Represents numbers with real and imaginary parts.
    """

    model_config = ConfigDict(frozen=True)

    real: float = Field(description="The real part")
    imag: float = Field(description="The imaginary part")
    type_precedence: ClassVar[TypePrecedence] = TypePrecedence.COMPLEX

    def __init__(
        self,
        real: float | int | complex | list | tuple | Real,
        imag: float | int = 0.0,
        **kwargs
    ):
        """
        Initialize a Complex number.

        Args:
            real: Real part, a Python complex, or a [real, imag] sequence
            imag: Imaginary part (default 0)
        """
        if isinstance(real, (list, tuple)):
            if len(real) >= 2:
                real_part, imag_part = float(real[0]), float(real[1])
            elif len(real) == 1:
                real_part, imag_part = float(real[0]), 0.0
            else:
                real_part, imag_part = 0.0, 0.0
        elif isinstance(real, complex):
            real_part, imag_part = real.real, real.imag + float(imag)
        elif isinstance(real, Real):
            real_part, imag_part = real.value, float(imag)
        else:
            real_part, imag_part = float(real), float(imag)

        super().__init__(real=real_part, imag=imag_part, **kwargs)

    def promote(self, other: MathValue) -> MathValue:
        """Complex is the top of the scalar hierarchy."""
        return self

    def compare(
        self, other: MathValue, tolerance: float | None = None, mode: str | None = None
    ) -> bool:
        """Fuzzy comparison of complex numbers."""
        if isinstance(other, Real):
            other = Complex(other.value, 0.0)

        if not isinstance(other, Complex):
            return False

        return fuzzy_compare(self.to_python(), other.to_python(), tolerance, mode)

    def __eq__(self, other: Any) -> bool:
        return MathValue.__eq__(self, other)

    def __ne__(self, other: Any) -> bool:
        return not self.__eq__(other)

    # fuzzy equality has no consistent hash
    __hash__ = None

    def to_string(self) -> str:
        """Convert to string."""
        if self.imag == 0:
            return Real(self.real).to_string()
        elif self.real == 0:
            if self.imag == 1:
                return "i"
            elif self.imag == -1:
                return "-i"
            else:
                return f"{Real(self.imag).to_string()}i"
        else:
            imag_str = Real(abs(self.imag)).to_string()
            if abs(self.imag) == 1:
                imag_str = ""
            sign = "+" if self.imag > 0 else "-"
            return f"{Real(self.real).to_string()} {sign} {imag_str}i"

    def to_tex(self) -> str:
        return self.to_string()

    def __str__(self) -> str:
        return self.to_string()

    def to_python(self) -> complex:
        return complex(self.real, self.imag)

    def __complex__(self) -> complex:
        return self.to_python()

    @property
    def value(self) -> tuple[float, float]:
        """The value as a (real, imag) tuple."""
        return (self.real, self.imag)

    def conjugate(self) -> Complex:
        return Complex(self.real, -self.imag)

    def arg(self) -> Real:
        """Argument (phase angle) in (-π, π]."""
        return Real(cmath.phase(self.to_python()))

    def norm(self) -> Real:
        """Modulus of the complex number (same as abs())."""
        return self.__abs__()

    def unit(self) -> Complex:
        """
        Compute the unit complex number (normalized to magnitude 1).

        Raises:
            ZeroDivisionError: If the magnitude is zero
        """
        magnitude = abs(self.to_python())
        if magnitude == 0:
            raise ZeroDivisionError("Cannot compute unit of zero complex number")
        return Complex(self.real / magnitude, self.imag / magnitude)

    # Arithmetic operators

    @staticmethod
    def _as_python(other: Any) -> complex | None:
        if isinstance(other, np.generic):
            other = other.item()
        if isinstance(other, (int, float, complex)):
            return complex(other)
        if isinstance(other, (Real, Complex)):
            return complex(other.to_python())
        return None

    def __add__(self, other: Any) -> MathValue:
        value = self._as_python(other)
        if value is None:
            return NotImplemented
        return Complex(self.to_python() + value)

    def __radd__(self, other: Any) -> MathValue:
        return self.__add__(other)

    def __sub__(self, other: Any) -> MathValue:
        value = self._as_python(other)
        if value is None:
            return NotImplemented
        return Complex(self.to_python() - value)

    def __rsub__(self, other: Any) -> MathValue:
        value = self._as_python(other)
        if value is None:
            return NotImplemented
        return Complex(value - self.to_python())

    def __mul__(self, other: Any) -> MathValue:
        value = self._as_python(other)
        if value is None:
            return NotImplemented
        return Complex(self.to_python() * value)

    def __rmul__(self, other: Any) -> MathValue:
        return self.__mul__(other)

    def __truediv__(self, other: Any) -> MathValue:
        value = self._as_python(other)
        if value is None:
            return NotImplemented
        if value == 0:
            raise ZeroDivisionError("Complex division by zero")
        return Complex(self.to_python() / value)

    def __rtruediv__(self, other: Any) -> MathValue:
        value = self._as_python(other)
        if value is None:
            return NotImplemented
        if self.to_python() == 0:
            raise ZeroDivisionError("Complex division by zero")
        return Complex(value / self.to_python())

    def __pow__(self, other: Any) -> MathValue:
        value = self._as_python(other)
        if value is None:
            return NotImplemented
        return Complex(self.to_python() ** value)

    def __rpow__(self, other: Any) -> MathValue:
        value = self._as_python(other)
        if value is None:
            return NotImplemented
        return Complex(value ** self.to_python())

    def __neg__(self) -> Complex:
        return Complex(-self.real, -self.imag)

    def __pos__(self) -> Complex:
        return Complex(self.real, self.imag)

    def __abs__(self) -> Real:
        return Real(abs(self.to_python()))
