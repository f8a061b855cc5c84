"""Constructors for common matrices."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import numpy as np

from .errors import ShapeError
from .matrix import Matrix, SquareMatrix, SymmetricMatrix, build_matrix
from .vector import Vector, as_vector


def _require_size(name: str, value: int) -> int:
    if not isinstance(value, (int, np.integer)) or value < 1:
        raise ShapeError(f"{name} must be a positive integer, got {value!r}")
    return int(value)


class MatrixFactory:
    """
    Static constructors returning the most specific matrix type.

    Examples:
        >>> MatrixFactory.create([[1, 2], [3, 4]])     # SquareMatrix
        >>> MatrixFactory.identity(3)
        >>> MatrixFactory.vandermonde([1, 2, 3], 3)    # columns 1, x, x²
    """

    @staticmethod
    def create(rows: Iterable[Iterable[Any]] | np.ndarray) -> Matrix:
        return build_matrix(rows)

    @staticmethod
    def square(rows: Iterable[Iterable[Any]] | np.ndarray) -> SquareMatrix:
        return SquareMatrix(rows)

    @staticmethod
    def symmetric(rows: Iterable[Iterable[Any]] | np.ndarray) -> SymmetricMatrix:
        return SymmetricMatrix(rows)

    @staticmethod
    def identity(n: int) -> SquareMatrix:
        """n × n identity matrix."""
        return SquareMatrix(np.eye(_require_size("n", n)))

    @staticmethod
    def zero(m: int, n: int | None = None) -> Matrix:
        """m × n matrix of zeros (square when n is omitted)."""
        m = _require_size("m", m)
        n = m if n is None else _require_size("n", n)
        return build_matrix(np.zeros((m, n)))

    @staticmethod
    def one(m: int, n: int | None = None) -> Matrix:
        """m × n matrix of ones (square when n is omitted)."""
        m = _require_size("m", m)
        n = m if n is None else _require_size("n", n)
        return build_matrix(np.ones((m, n)))

    @staticmethod
    def diagonal(values: Sequence[Any] | Vector) -> SquareMatrix:
        """Square matrix with the given values on the main diagonal."""
        entries = as_vector(values)
        if len(entries) == 0:
            raise ShapeError("Diagonal matrix needs at least one value")
        return SquareMatrix(np.diag(entries.to_numpy()))

    @staticmethod
    def from_column_vectors(vectors: Sequence[Vector | Sequence[Any]]) -> Matrix:
        """Matrix whose j-th column is vectors[j]; all vectors need the same length."""
        columns = [as_vector(v) for v in vectors]
        if not columns:
            raise ShapeError("At least one column vector is required")
        length = len(columns[0])
        for column in columns:
            if len(column) != length:
                raise ShapeError("Column vectors must all have the same length",
                                 expected=(length,), actual=(len(column),))
        return build_matrix([[column[i] for column in columns] for i in range(length)])

    @staticmethod
    def from_row_vectors(vectors: Sequence[Vector | Sequence[Any]]) -> Matrix:
        """Matrix whose i-th row is vectors[i]."""
        rows = [as_vector(v) for v in vectors]
        if not rows:
            raise ShapeError("At least one row vector is required")
        return build_matrix(rows)

    @staticmethod
    def vandermonde(xs: Sequence[float] | Vector, columns: int) -> Matrix:
        """
        Vandermonde matrix with entry (i, j) = xs[i] ** j.

        Args:
            xs: Sample points (one row each)
            columns: Number of powers, starting at x⁰
        """
        columns = _require_size("columns", columns)
        points = as_vector(xs).to_numpy()
        if points.size == 0:
            raise ShapeError("Vandermonde matrix needs at least one point")
        return build_matrix(np.vander(points, columns, increasing=True))


matrix_from = MatrixFactory.create
identity = MatrixFactory.identity
zero = MatrixFactory.zero


__all__ = ["MatrixFactory", "identity", "matrix_from", "zero"]
