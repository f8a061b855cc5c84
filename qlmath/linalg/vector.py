"""
Vector MathValue type.

An immutable, ordered sequence of Real/Complex components.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Iterable, Iterator

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ShapeError
from .numeric import Complex, Real
from .value import MathValue, TypePrecedence

if TYPE_CHECKING:
    from .matrix import Matrix

_SCALARS = (int, float, complex, np.number, Real, Complex)


def scalar_value(value: Any) -> int | float | complex:
    """Unwrap a Real/Complex/numpy scalar to a Python number."""
    if isinstance(value, (Real, Complex)):
        return value.to_python()
    if isinstance(value, np.generic):
        return value.item()
    return value


class Vector(BaseModel, MathValue):
    """
    Vector in n-dimensional space.

    Supports dot, outer and Kronecker (tensor) products, norms, and
    conversion to column/row matrices.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    components: tuple[MathValue, ...] = Field(default_factory=tuple)
    type_precedence: ClassVar[TypePrecedence] = TypePrecedence.VECTOR

    def __init__(
        self,
        *args: Any,
        components: Iterable[Any] | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize a Vector.

        Accepts Vector([1, 2, 3]), Vector(1, 2, 3), Vector(components=[...])
        or a one-dimensional numpy array.
        """
        if components is not None and args:
            raise ValueError("Vector accepts either components or positional arguments, not both")

        if components is None:
            if len(args) == 1 and isinstance(args[0], (list, tuple, np.ndarray, Vector)):
                components = args[0]
            else:
                components = args

        super().__init__(components=self._coerce_components(components), **kwargs)

    @staticmethod
    def _coerce_components(raw_components: Any) -> tuple[MathValue, ...]:
        """Convert raw component values into MathValue instances."""
        if isinstance(raw_components, Vector):
            return raw_components.components
        if isinstance(raw_components, np.ndarray):
            if raw_components.ndim > 1:
                raise ShapeError("Vector requires one-dimensional data", actual=raw_components.shape)
            raw_components = raw_components.tolist()
        return tuple(MathValue.from_python(comp) for comp in raw_components)

    @field_validator("components", mode="before")
    @classmethod
    def _validate_components(cls, value):
        if value is None:
            return ()
        return cls._coerce_components(value)

    def promote(self, other: MathValue) -> MathValue:
        """Vectors don't promote to other types."""
        return self

    def compare(
        self, other: MathValue, tolerance: float | None = None, mode: str | None = None
    ) -> bool:
        """Compare vectors component-wise."""
        if not isinstance(other, Vector):
            return False

        if len(self.components) != len(other.components):
            return False

        return all(
            c1.compare(c2, tolerance, mode) for c1, c2 in zip(self.components, other.components)
        )

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, (list, tuple, np.ndarray)):
            try:
                other = Vector(other)
            except (ShapeError, TypeError):
                return False
        return MathValue.__eq__(self, other)

    def __ne__(self, other: Any) -> bool:
        return not self.__eq__(other)

    # fuzzy equality has no consistent hash
    __hash__ = None

    __repr__ = MathValue.__repr__
    __str__ = MathValue.__str__

    def to_string(self) -> str:
        comps_str = ", ".join(c.to_string() for c in self.components)
        return f"<{comps_str}>"

    def to_tex(self) -> str:
        comps_str = ", ".join(c.to_tex() for c in self.components)
        return f"\\left\\langle {comps_str} \\right\\rangle"

    def to_python(self) -> list[float | complex]:
        return [c.to_python() for c in self.components]

    def to_numpy(self) -> np.ndarray:
        return np.array(self.to_python())

    @property
    def n(self) -> int:
        """Number of components."""
        return len(self.components)

    def __len__(self) -> int:
        return len(self.components)

    def __getitem__(self, index: int) -> MathValue:
        return self.components[index]

    def __iter__(self) -> Iterator[MathValue]:
        return iter(self.components)

    # Vector operations

    def _require_same_length(self, other: Vector, operation: str) -> None:
        if len(self) != len(other):
            raise ShapeError(f"{operation} requires vectors of the same length",
                             expected=(len(self),), actual=(len(other),))

    def norm(self) -> Real:
        """Euclidean norm ||v|| (modulus-based for complex components)."""
        if not self.components:
            return Real(0.0)
        return Real(float(np.linalg.norm(self.to_numpy())))

    def unit(self) -> Vector:
        """
        Return the unit vector (normalized).

        Raises:
            ZeroDivisionError: for the zero vector
        """
        magnitude = self.norm().value
        if magnitude == 0:
            raise ZeroDivisionError("Cannot normalize zero vector")
        return Vector(self.to_numpy() / magnitude)

    def dot(self, other: Vector) -> MathValue:
        """
        Dot product Σ aᵢbᵢ (no conjugation of complex components).

        Raises:
            ShapeError: if the lengths differ
        """
        self._require_same_length(other, "Dot product")
        result = sum(
            (a * b for a, b in zip(self.to_python(), other.to_python())), 0.0
        )
        return MathValue.from_python(result)

    def outer_product(self, other: Vector) -> Matrix:
        """
        Outer product a⊗b as an n × m matrix with entry (i, j) = aᵢbⱼ.
        """
        from .matrix import build_matrix

        if not self.components or not other.components:
            raise ShapeError("Outer product requires non-empty vectors")
        return build_matrix(np.outer(self.to_numpy(), other.to_numpy()))

    def kronecker_product(self, other: Vector) -> Vector:
        """
        Tensor product of two vectors, flattened to length n·m.

        Component k = i·m + j holds aᵢbⱼ, so |0⟩⊗|1⟩ = <0, 1, 0, 0>.
        """
        return Vector(np.kron(self.to_numpy(), other.to_numpy()))

    tensor_product = kronecker_product

    def cross(self, other: Vector) -> Vector:
        """Cross product (3-D vectors only)."""
        if len(self) != 3 or len(other) != 3:
            raise ShapeError("Cross product only defined for 3D vectors",
                             expected=(3,), actual=(len(self), len(other)))
        return Vector(np.cross(self.to_numpy(), other.to_numpy()))

    def as_column_matrix(self) -> Matrix:
        """n × 1 matrix holding the components."""
        from .matrix import build_matrix

        if not self.components:
            raise ShapeError("Cannot build a matrix from an empty vector")
        return build_matrix([[c] for c in self.components])

    def as_row_matrix(self) -> Matrix:
        """1 × n matrix holding the components."""
        from .matrix import build_matrix

        if not self.components:
            raise ShapeError("Cannot build a matrix from an empty vector")
        return build_matrix([list(self.components)])

    def map(self, func: Callable[[Any], Any]) -> Vector:
        """Apply func to every component (as a Python number)."""
        return Vector([func(c) for c in self.to_python()])

    def sum(self) -> MathValue:
        return MathValue.from_python(sum(self.to_python(), 0.0))

    # Arithmetic operators

    def __add__(self, other: Any) -> Vector:
        if isinstance(other, Vector):
            self._require_same_length(other, "Vector addition")
            return Vector([c1 + c2 for c1, c2 in zip(self.components, other.components)])
        return NotImplemented

    def __radd__(self, other: Any) -> Vector:
        return self.__add__(other)

    def __sub__(self, other: Any) -> Vector:
        if isinstance(other, Vector):
            self._require_same_length(other, "Vector subtraction")
            return Vector([c1 - c2 for c1, c2 in zip(self.components, other.components)])
        return NotImplemented

    def __rsub__(self, other: Any) -> Vector:
        if isinstance(other, Vector):
            return other.__sub__(self)
        return NotImplemented

    def __mul__(self, other: Any) -> MathValue:
        """Scalar multiplication or dot product."""
        if isinstance(other, _SCALARS):
            scalar = scalar_value(other)
            return Vector([c * scalar for c in self.components])
        elif isinstance(other, Vector):
            return self.dot(other)
        return NotImplemented

    def __rmul__(self, other: Any) -> Vector:
        if isinstance(other, _SCALARS):
            scalar = scalar_value(other)
            return Vector([c * scalar for c in self.components])
        return NotImplemented

    def __truediv__(self, other: Any) -> Vector:
        if isinstance(other, _SCALARS):
            scalar = scalar_value(other)
            if scalar == 0:
                raise ZeroDivisionError("Vector division by zero")
            return Vector([c / scalar for c in self.components])
        return NotImplemented

    def __neg__(self) -> Vector:
        return Vector([-c for c in self.components])

    def __pos__(self) -> Vector:
        return Vector([+c for c in self.components])

    def __abs__(self) -> Real:
        """Magnitude (norm)."""
        return self.norm()

    def is_parallel(self, other: Vector, tolerance: float = 1e-6) -> bool:
        """True if one vector is a scalar multiple of the other."""
        self._require_same_length(other, "Parallel test")
        a, b = self.to_numpy(), other.to_numpy()
        # |a·b| = |a||b| exactly when a and b are parallel
        return math.isclose(abs(np.vdot(a, b)), np.linalg.norm(a) * np.linalg.norm(b),
                            rel_tol=tolerance, abs_tol=tolerance)

    def is_orthogonal(self, other: Vector, tolerance: float = 1e-6) -> bool:
        return abs(self.dot(other).to_python()) <= tolerance


def as_vector(value: Any) -> Vector:
    """Coerce a Vector, sequence or one-dimensional array into a Vector."""
    if isinstance(value, Vector):
        return value
    return Vector(value)


__all__ = ["Vector", "as_vector", "scalar_value"]
