"""
Dense Matrix MathValue types: Matrix, SquareMatrix, SymmetricMatrix.

Entries are Real/Complex MathValues. Bulk arithmetic runs on numpy
arrays (float64, or complex128 when any entry is complex) and the result
is wrapped back into a new, immutable matrix.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Iterable, Iterator

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ShapeError
from .numeric import Complex, Real, _context_flags, zero_level
from .value import MathValue, TypePrecedence
from .vector import Vector, scalar_value

if TYPE_CHECKING:
    from .decomposition import LUDecomposition

logger = logging.getLogger(__name__)

_SCALARS = (int, float, complex, np.number, Real, Complex)

Rows = tuple[tuple[MathValue, ...], ...]


def _coerce_rows(raw_rows: Any) -> Rows:
    """Convert raw row iterables into a rectangular grid of MathValues."""
    if isinstance(raw_rows, Matrix):
        return raw_rows.rows

    if isinstance(raw_rows, np.ndarray):
        if raw_rows.ndim != 2:
            raise ShapeError("Matrix requires two-dimensional data", actual=raw_rows.shape)
        raw_rows = raw_rows.tolist()

    if isinstance(raw_rows, (str, bytes)) or not isinstance(raw_rows, Iterable):
        raise TypeError("Matrix rows must be iterable sequences")

    normalized: list[tuple[MathValue, ...]] = []
    for row in raw_rows:
        if isinstance(row, Vector):
            row = row.components
        elif isinstance(row, np.ndarray):
            row = row.tolist()
        if isinstance(row, (str, bytes)) or not isinstance(row, Iterable):
            raise TypeError("Matrix rows must be iterable sequences")
        cells = tuple(MathValue.from_python(cell) for cell in row)
        for cell in cells:
            if not isinstance(cell, (Real, Complex)):
                raise TypeError(f"Matrix entries must be real or complex, not {type(cell).__name__}")
        normalized.append(cells)

    if not normalized or not normalized[0]:
        raise ShapeError("Matrix must have at least one row and one column")

    row_len = len(normalized[0])
    for index, row in enumerate(normalized):
        if len(row) != row_len:
            raise ShapeError(f"Matrix row {index} has the wrong number of entries",
                             expected=(row_len,), actual=(len(row),))
    return tuple(normalized)


def _grid_to_numpy(rows: Rows) -> np.ndarray:
    return np.array([[cell.to_python() for cell in row] for row in rows])


def build_matrix(data: Any) -> Matrix:
    """
    Wrap nested sequences or an array as the most specific matrix type.

    Square results become SquareMatrix, everything else a plain Matrix.
    """
    rows = _coerce_rows(data)
    if len(rows) == len(rows[0]):
        return SquareMatrix(rows)
    return Matrix(rows)


class Matrix(BaseModel, MathValue):
    """
    Matrix (2D array) with matrix operations.

    Supports arithmetic, transpose, trace, determinant, inverse, LU
    decomposition, linear solves, Kronecker products and the usual
    structural predicates (symmetric, triangular, definite, ...).
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    rows: Rows = Field(description="Entries, row by row")
    type_precedence: ClassVar[TypePrecedence] = TypePrecedence.MATRIX

    def __init__(self, rows: Iterable[Iterable[Any]] | np.ndarray | Matrix, **kwargs: Any) -> None:
        """Initialize a Matrix ensuring rectangular, non-empty structure."""
        super().__init__(rows=_coerce_rows(rows), **kwargs)

    @field_validator("rows", mode="before")
    @classmethod
    def _validate_rows(cls, value):
        return _coerce_rows(value)

    def promote(self, other: MathValue) -> MathValue:
        """Matrices don't promote."""
        return self

    def compare(
        self, other: MathValue, tolerance: float | None = None, mode: str | None = None
    ) -> bool:
        """Compare matrices element-wise."""
        if not isinstance(other, Matrix):
            return False

        if self.shape != other.shape:
            return False

        for row1, row2 in zip(self.rows, other.rows):
            for el1, el2 in zip(row1, row2):
                if not el1.compare(el2, tolerance, mode):
                    return False
        return True

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, (list, tuple, np.ndarray)):
            try:
                other = Matrix(other)
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
        rows_str = ", ".join(
            "[" + ", ".join(el.to_string() for el in row) + "]" for row in self.rows
        )
        return f"[{rows_str}]"

    def to_tex(self) -> str:
        """Convert to LaTeX (pmatrix)."""
        rows_tex = " \\\\ ".join(
            " & ".join(el.to_tex() for el in row) for row in self.rows
        )
        return f"\\begin{{pmatrix}} {rows_tex} \\end{{pmatrix}}"

    def to_python(self) -> list[list[float | complex]]:
        return [[el.to_python() for el in row] for row in self.rows]

    def to_numpy(self) -> np.ndarray:
        return _grid_to_numpy(self.rows)

    # Dimensions and access

    @property
    def shape(self) -> tuple[int, int]:
        """Matrix dimensions (rows, cols)."""
        return (len(self.rows), len(self.rows[0]))

    @property
    def m(self) -> int:
        """Number of rows."""
        return len(self.rows)

    @property
    def n(self) -> int:
        """Number of columns."""
        return len(self.rows[0])

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[tuple[MathValue, ...]]:
        return iter(self.rows)

    def __getitem__(self, index: tuple[int, int] | int) -> MathValue | tuple[MathValue, ...]:
        """Get element by (row, col) or a whole row."""
        if isinstance(index, tuple):
            row, col = index
            return self.rows[row][col]
        return self.rows[index]

    def row(self, index: int) -> Vector:
        """Row i (0-based) as a Vector."""
        return Vector(self.rows[index])

    def column(self, index: int) -> Vector:
        """Column j (0-based) as a Vector."""
        if not -self.n <= index < self.n:
            raise IndexError(f"Column index {index} out of range")
        return Vector([row[index] for row in self.rows])

    def columns(self) -> list[Vector]:
        """All columns as Vectors, left to right."""
        return [self.column(j) for j in range(self.n)]

    def diagonal(self) -> tuple[MathValue, ...]:
        """Main diagonal entries (also defined for rectangular matrices)."""
        return tuple(self.rows[i][i] for i in range(min(self.shape)))

    def is_square(self) -> bool:
        return self.m == self.n

    def is_complex(self) -> bool:
        """True if any entry is a Complex value."""
        return any(isinstance(el, Complex) for row in self.rows for el in row)

    def _require_square(self, operation: str) -> None:
        if not self.is_square():
            raise ShapeError(f"{operation} requires a square matrix",
                             expected=(self.m, self.m), actual=self.shape)

    def _require_same_shape(self, other: Matrix, operation: str) -> None:
        if self.shape != other.shape:
            raise ShapeError(f"{operation} requires matrices of the same dimensions",
                             expected=self.shape, actual=other.shape)

    # Arithmetic

    def add(self, other: Matrix) -> Matrix:
        """Element-wise sum A + B."""
        self._require_same_shape(other, "Matrix addition")
        return build_matrix(self.to_numpy() + other.to_numpy())

    def subtract(self, other: Matrix) -> Matrix:
        """Element-wise difference A - B."""
        self._require_same_shape(other, "Matrix subtraction")
        return build_matrix(self.to_numpy() - other.to_numpy())

    def scalar_multiply(self, scalar: Any) -> Matrix:
        """Multiply every entry by a real or complex scalar."""
        return build_matrix(self.to_numpy() * scalar_value(scalar))

    def negate(self) -> Matrix:
        return self.scalar_multiply(-1)

    def multiply(self, other: Matrix | Vector) -> Matrix:
        """
        Matrix product A·B.

        A Vector operand is treated as a column, giving an m × 1 matrix.

        Raises:
            ShapeError: if A's column count differs from B's row count
        """
        if isinstance(other, Vector):
            other = other.as_column_matrix()
        if self.n != other.m:
            raise ShapeError(f"Cannot multiply {self.shape} by {other.shape} matrices",
                             expected=(self.n, other.n), actual=other.shape)
        return build_matrix(self.to_numpy() @ other.to_numpy())

    def vector_multiply(self, vector: Vector) -> Vector:
        """Matrix-vector product A·x returned as a Vector."""
        if self.n != len(vector):
            raise ShapeError(f"Cannot multiply {self.shape} matrix by {len(vector)} vector",
                             expected=(self.n,), actual=(len(vector),))
        return Vector(self.to_numpy() @ vector.to_numpy())

    def map(self, func: Callable[[Any], Any]) -> Matrix:
        """
        Apply func element-wise, e.g. ``A.map(lambda x: round(x, 5))``.

        func receives and returns Python numbers.
        """
        return build_matrix([[func(el.to_python()) for el in row] for row in self.rows])

    @property
    def transpose(self) -> Matrix:
        """Transpose Aᵗ (a property, like T on numpy arrays)."""
        return build_matrix(self.to_numpy().T)

    T = transpose

    @property
    def conjugate_transpose(self) -> Matrix:
        """Conjugate (Hermitian) transpose A*."""
        return build_matrix(np.conj(self.to_numpy()).T)

    def trace(self) -> MathValue:
        """Sum of the diagonal entries (square matrices only)."""
        self._require_square("Trace")
        return MathValue.from_python(np.trace(self.to_numpy()))

    def determinant(self) -> MathValue:
        """
        Calculate the determinant (square matrices only).

        1×1 and 2×2 use the closed formula; larger matrices use the LU
        factors: det = (-1)^swaps · Π diag(U). A singular matrix gives 0.

        Raises:
            ShapeError: If matrix is not square
        """
        self._require_square("Determinant")
        a = self.to_numpy()
        if self.m == 1:
            value = a[0, 0]
        elif self.m == 2:
            value = a[0, 0] * a[1, 1] - a[0, 1] * a[1, 0]
        else:
            return self.lu_decomposition().determinant()
        return MathValue.from_python(value)

    det = determinant

    def lu_decomposition(self) -> LUDecomposition:
        """
        PA = LU factorisation with partial pivoting.

        Returns:
            LUDecomposition holding L, U and P
        """
        from .decomposition import lu_decompose

        self._require_square("LU decomposition")
        return lu_decompose(self)

    def inverse(self) -> Matrix:
        """
        Calculate the matrix inverse by solving A·X = I through the LU factors.

        Raises:
            ShapeError: If matrix is not square
            SingularMatrixError: If matrix is singular
        """
        self._require_square("Inverse")
        return self.lu_decomposition().inverse()

    def solve(self, b: Any) -> Vector:
        """
        Solve A·x = b for x.

        Args:
            b: Vector, sequence of numbers, or n × 1 matrix

        Raises:
            ShapeError: If A is not square or b has the wrong length
            SingularMatrixError: If A is singular
        """
        self._require_square("Solve")
        return self.lu_decomposition().solve(b)

    def rref(self) -> Matrix:
        """Reduced row echelon form via Gauss-Jordan elimination."""
        from .decomposition import reduced_row_echelon_form

        return reduced_row_echelon_form(self)

    def rank(self) -> int:
        """Number of non-zero rows in the reduced row echelon form."""
        reduced = self.rref().to_numpy()
        return int(np.count_nonzero(np.any(reduced != 0, axis=1)))

    def kronecker_product(self, other: Matrix) -> Matrix:
        """
        Kronecker product A⊗B.

        For A (m×n) and B (p×q) the result is (mp×nq) with block (i, j)
        equal to A[i, j]·B.
        """
        return build_matrix(np.kron(self.to_numpy(), other.to_numpy()))

    def kronecker_sum(self, other: Matrix) -> Matrix:
        """
        Kronecker sum A⊕B = A⊗I_m + I_n⊗B for A (n×n) and B (m×m).

        Raises:
            ShapeError: if either operand is not square
        """
        self._require_square("Kronecker sum")
        other._require_square("Kronecker sum")
        a, b = self.to_numpy(), other.to_numpy()
        return build_matrix(np.kron(a, np.eye(other.m)) + np.kron(np.eye(self.m), b))

    def covariance_matrix(self) -> SymmetricMatrix:
        """
        Sample covariance matrix.

        Each row is a variable and each column an observation; the result
        is (rows × rows) with the n - 1 denominator.
        """
        if self.n < 2:
            raise ShapeError("Covariance needs at least two observations (columns)",
                             actual=self.shape)
        covariance = np.atleast_2d(np.cov(self.to_numpy()))
        return SymmetricMatrix((covariance + covariance.T) / 2)

    # Predicates

    def _off_pattern_is_zero(self, pattern: np.ndarray) -> bool:
        level = zero_level()
        return bool(np.all(np.abs(pattern) <= level))

    def is_lower_triangular(self) -> bool:
        """All entries above the main diagonal are zero."""
        return self._off_pattern_is_zero(np.triu(self.to_numpy(), k=1))

    def is_upper_triangular(self) -> bool:
        """All entries below the main diagonal are zero."""
        return self._off_pattern_is_zero(np.tril(self.to_numpy(), k=-1))

    def is_triangular(self) -> bool:
        return self.is_lower_triangular() or self.is_upper_triangular()

    def is_diagonal(self) -> bool:
        return self.is_lower_triangular() and self.is_upper_triangular()

    def is_symmetric(self) -> bool:
        """A == Aᵗ within the symmetryTolerance flag (square only)."""
        if not self.is_square():
            return False
        a = self.to_numpy()
        tolerance = _context_flags().get('symmetryTolerance', 1e-6)
        return bool(np.all(np.abs(a - a.T) <= tolerance))

    def is_hermitian(self) -> bool:
        """A == A* within the symmetryTolerance flag (square only)."""
        if not self.is_square():
            return False
        a = self.to_numpy()
        tolerance = _context_flags().get('symmetryTolerance', 1e-6)
        return bool(np.all(np.abs(a - np.conj(a).T) <= tolerance))

    def is_invertible(self) -> bool:
        """No LU pivot within the zero level, the same test inverse() and solve() apply."""
        if not self.is_square():
            return False
        return not self.lu_decomposition().singular

    def is_singular(self) -> bool:
        return self.is_square() and not self.is_invertible()

    def _eigenvalues(self) -> np.ndarray | None:
        """Eigenvalues of a symmetric/Hermitian matrix, None for any other matrix."""
        if not self.is_hermitian():
            return None
        a = self.to_numpy()
        # Symmetrise away the rounding noise the tolerance let through
        return np.linalg.eigvalsh((a + np.conj(a).T) / 2)

    def is_positive_definite(self) -> bool:
        """Symmetric with all eigenvalues > 0."""
        eigenvalues = self._eigenvalues()
        result = eigenvalues is not None and bool(np.all(eigenvalues > zero_level()))
        logger.debug(f"Positive definite test on {self.shape} matrix: {result}")
        return result

    def is_positive_semidefinite(self) -> bool:
        """Symmetric with all eigenvalues >= 0."""
        eigenvalues = self._eigenvalues()
        return eigenvalues is not None and bool(np.all(eigenvalues >= -zero_level()))

    def is_negative_definite(self) -> bool:
        """Symmetric with all eigenvalues < 0."""
        eigenvalues = self._eigenvalues()
        return eigenvalues is not None and bool(np.all(eigenvalues < -zero_level()))

    def is_negative_semidefinite(self) -> bool:
        """Symmetric with all eigenvalues <= 0."""
        eigenvalues = self._eigenvalues()
        return eigenvalues is not None and bool(np.all(eigenvalues <= zero_level()))

    # Arithmetic operators

    def __add__(self, other: Any) -> Matrix:
        if isinstance(other, Matrix):
            return self.add(other)
        return NotImplemented

    def __radd__(self, other: Any) -> Matrix:
        return self.__add__(other)

    def __sub__(self, other: Any) -> Matrix:
        if isinstance(other, Matrix):
            return self.subtract(other)
        return NotImplemented

    def __rsub__(self, other: Any) -> Matrix:
        if isinstance(other, Matrix):
            return other.subtract(self)
        return NotImplemented

    def __mul__(self, other: Any) -> Matrix:
        """Matrix product, matrix times column vector, or scalar multiple."""
        if isinstance(other, _SCALARS):
            return self.scalar_multiply(other)
        elif isinstance(other, (Matrix, Vector)):
            return self.multiply(other)
        return NotImplemented

    def __rmul__(self, other: Any) -> Matrix:
        """Right multiplication (scalar only)."""
        if isinstance(other, _SCALARS):
            return self.scalar_multiply(other)
        return NotImplemented

    def __matmul__(self, other: Any) -> Matrix | Vector:
        """A @ B is the matrix product; A @ v returns a Vector."""
        if isinstance(other, Vector):
            return self.vector_multiply(other)
        elif isinstance(other, Matrix):
            return self.multiply(other)
        return NotImplemented

    def __truediv__(self, other: Any) -> Matrix:
        """Scalar division."""
        if isinstance(other, _SCALARS):
            scalar = scalar_value(other)
            if scalar == 0:
                raise ZeroDivisionError("Matrix division by zero")
            return build_matrix(self.to_numpy() / scalar)
        return NotImplemented

    def __pow__(self, other: Any) -> Matrix:
        """Matrix power (integer powers only; negative powers invert first)."""
        if not isinstance(other, int):
            return NotImplemented
        self._require_square("Matrix power")

        if other == 0:
            return build_matrix(np.eye(self.m))
        elif other > 0:
            result = self
            for _ in range(other - 1):
                result = result.multiply(self)
            return result
        return self.inverse() ** (-other)

    def __neg__(self) -> Matrix:
        return self.negate()

    def __pos__(self) -> Matrix:
        return build_matrix(self.rows)


class SquareMatrix(Matrix):
    """Matrix with as many rows as columns."""

    __hash__ = None

    def __init__(self, rows: Iterable[Iterable[Any]] | np.ndarray | Matrix, **kwargs: Any) -> None:
        grid = _coerce_rows(rows)
        if len(grid) != len(grid[0]):
            raise ShapeError("SquareMatrix requires a square grid",
                             expected=(len(grid), len(grid)), actual=(len(grid), len(grid[0])))
        super().__init__(grid, **kwargs)


class SymmetricMatrix(SquareMatrix):
    """Square matrix equal to its transpose (within symmetryTolerance)."""

    __hash__ = None

    def __init__(self, rows: Iterable[Iterable[Any]] | np.ndarray | Matrix, **kwargs: Any) -> None:
        grid = _coerce_rows(rows)
        if len(grid) == len(grid[0]):
            a = _grid_to_numpy(grid)
            tolerance = _context_flags().get('symmetryTolerance', 1e-6)
            if not np.all(np.abs(a - a.T) <= tolerance):
                raise ShapeError("SymmetricMatrix requires A == Aᵗ")
        super().__init__(grid, **kwargs)
