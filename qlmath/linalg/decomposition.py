"""
Row-reduction algorithms for dense matrices.

- LU factorisation with partial pivoting (PA = LU)
- Forward/back substitution solves built on the LU factors
- Gauss-Jordan reduced row echelon form
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from .errors import ShapeError, SingularMatrixError
from .matrix import Matrix, build_matrix
from .numeric import zero_level
from .value import MathValue
from .vector import Vector

logger = logging.getLogger(__name__)


class LUDecomposition(BaseModel):
    """
    Result of an LU factorisation PA = LU.

    L is unit lower-triangular, U upper-triangular and P the row
    permutation applied to A. ``swaps`` counts the row exchanges and
    ``singular`` is set when a pivot fell within the zero level.

    Unpacks as ``L, U, P = A.lu_decomposition()``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    L: Matrix = Field(description="Unit lower-triangular factor")
    U: Matrix = Field(description="Upper-triangular factor")
    P: Matrix = Field(description="Permutation matrix")
    swaps: int = Field(default=0, description="Number of row exchanges")
    singular: bool = Field(default=False, description="A pivot was numerically zero")

    def __iter__(self) -> Iterator[Matrix]:
        return iter((self.L, self.U, self.P))

    @property
    def size(self) -> int:
        return self.U.m

    def determinant(self) -> MathValue:
        """(-1)^swaps times the product of U's diagonal; 0 when singular."""
        if self.singular:
            logger.debug("Determinant of singular LU factorisation taken as 0")
            return MathValue.from_python(0.0)
        sign = -1.0 if self.swaps % 2 else 1.0
        return MathValue.from_python(sign * np.prod(np.diag(self.U.to_numpy())))

    def _require_regular(self, operation: str) -> None:
        if self.singular:
            raise SingularMatrixError(f"{operation} of a singular matrix")

    def _substitute(self, rhs: np.ndarray) -> np.ndarray:
        """Solve LUx = P·rhs column-wise; rhs is (n, k)."""
        lower, upper = self.L.to_numpy(), self.U.to_numpy()
        b = self.P.to_numpy() @ rhs
        dtype = np.result_type(lower, upper, b)
        n = self.size

        # Forward substitution (L has a unit diagonal)
        y = np.zeros(b.shape, dtype=dtype)
        for i in range(n):
            y[i] = b[i] - lower[i, :i] @ y[:i]

        x = np.zeros(b.shape, dtype=dtype)
        for i in reversed(range(n)):
            x[i] = (y[i] - upper[i, i + 1:] @ x[i + 1:]) / upper[i, i]
        return x

    def solve(self, b: Any) -> Vector:
        """
        Solve A·x = b using the stored factors.

        Args:
            b: Vector, sequence of numbers, or n × 1 Matrix

        Raises:
            ShapeError: If b does not have n entries
            SingularMatrixError: If the factorisation is singular
        """
        rhs = _right_hand_side(b)
        if rhs.shape[0] != self.size:
            raise ShapeError("Right-hand side length does not match the matrix",
                             expected=(self.size,), actual=(rhs.shape[0],))
        self._require_regular("Solve")
        return Vector(self._substitute(rhs.reshape(-1, 1))[:, 0])

    def inverse(self) -> Matrix:
        """Solve A·X = I column by column."""
        self._require_regular("Inverse")
        return build_matrix(self._substitute(np.eye(self.size)))


def _right_hand_side(b: Any) -> np.ndarray:
    if isinstance(b, Matrix):
        if b.n != 1:
            raise ShapeError("Right-hand side matrix must be a single column",
                             expected=(b.m, 1), actual=b.shape)
        return b.to_numpy()[:, 0]
    if isinstance(b, Vector):
        return b.to_numpy()
    return Vector(b).to_numpy()


def lu_decompose(matrix: Matrix) -> LUDecomposition:
    """
    Factor a square matrix with Gaussian elimination and partial pivoting.

    For each column the row at or below the diagonal with the largest
    magnitude entry is swapped into the pivot position. An all-zero pivot
    column is skipped, leaving a zero on U's diagonal.
    """
    if not matrix.is_square():
        raise ShapeError("LU decomposition requires a square matrix",
                         expected=(matrix.m, matrix.m), actual=matrix.shape)

    a = matrix.to_numpy().copy()
    n = matrix.m
    lower = np.eye(n, dtype=a.dtype)
    perm = list(range(n))
    swaps = 0
    singular = False
    level = zero_level()

    for k in range(n - 1):
        p = k + int(np.argmax(np.abs(a[k:, k])))
        if abs(a[p, k]) <= level:
            logger.debug(f"Zero pivot in column {k}, matrix is singular")
            singular = True
            if a[p, k] == 0:
                continue

        if p != k:
            a[[k, p]] = a[[p, k]]
            lower[[k, p], :k] = lower[[p, k], :k]
            perm[k], perm[p] = perm[p], perm[k]
            swaps += 1
            logger.debug(f"Swapped rows {k} and {p}")

        for i in range(k + 1, n):
            factor = a[i, k] / a[k, k]
            lower[i, k] = factor
            a[i, k:] -= factor * a[k, k:]
            a[i, k] = 0

    if abs(a[n - 1, n - 1]) <= level:
        logger.debug(f"Zero pivot in column {n - 1}, matrix is singular")
        singular = True

    return LUDecomposition(
        L=build_matrix(lower),
        U=build_matrix(a),
        P=build_matrix(np.eye(n)[perm]),
        swaps=swaps,
        singular=singular,
    )


def solve(matrix: Matrix, b: Any) -> Vector:
    """Solve matrix·x = b, e.g. ``solve(A, [5, 7])``."""
    return lu_decompose(matrix).solve(b)


def reduced_row_echelon_form(matrix: Matrix) -> Matrix:
    """
    Gauss-Jordan elimination with partial pivoting.

    Works for any m × n matrix. Entries within the zero level are snapped
    to exactly zero.
    """
    a = matrix.to_numpy().copy()
    m, n = a.shape
    level = zero_level()
    lead = 0

    for col in range(n):
        if lead >= m:
            break
        p = lead + int(np.argmax(np.abs(a[lead:, col])))
        if abs(a[p, col]) <= level:
            a[lead:, col] = 0
            continue
        if p != lead:
            a[[lead, p]] = a[[p, lead]]
        a[lead] = a[lead] / a[lead, col]
        for i in range(m):
            if i != lead:
                a[i] = a[i] - a[i, col] * a[lead]
        lead += 1

    a[np.abs(a) <= level] = 0
    return build_matrix(a)


rref = reduced_row_echelon_form


__all__ = [
    "LUDecomposition",
    "lu_decompose",
    "reduced_row_echelon_form",
    "rref",
    "solve",
]
