"""
Shared pytest fixtures and utilities for the qlmath test suite.

This module provides:
- A fresh comparison Context for every test
- Tolerance helpers for comparing matrices and vectors
- Common sample matrices
"""

import pytest
from typing import Any

import numpy as np
from pydantic import ValidationError

from qlmath.linalg import Matrix, Vector, reset_contexts


@pytest.fixture(autouse=True)
def fresh_context():
    """Every test starts from the default LinearAlgebra context."""
    reset_contexts()
    yield
    reset_contexts()


@pytest.fixture
def assert_matrix_close():
    """Helper to assert that a matrix matches expected entries within tolerance."""
    def _assert_close(actual: Matrix, expected: Any, tolerance: float = 1e-6) -> None:
        """
        Assert element-wise equality with an absolute tolerance.

        Args:
            actual: Matrix under test
            expected: Matrix, nested lists or numpy array
            tolerance: Absolute tolerance per entry
        """
        expected = expected if isinstance(expected, Matrix) else Matrix(expected)
        assert actual.shape == expected.shape, f"Shape {actual.shape} != {expected.shape}"
        assert actual.compare(expected, tolerance=tolerance, mode="absolute"), (
            f"Matrices not equal:\n{actual}\n!=\n{expected}"
        )

    return _assert_close


@pytest.fixture
def assert_vector_close():
    """Helper to assert that a vector matches expected components within tolerance."""
    def _assert_close(actual: Vector, expected: Any, tolerance: float = 1e-6) -> None:
        expected = expected if isinstance(expected, Vector) else Vector(expected)
        assert actual.compare(expected, tolerance=tolerance, mode="absolute"), (
            f"Vectors not equal: {actual} != {expected}"
        )

    return _assert_close


@pytest.fixture
def assert_immutable():
    """Helper to assert that a frozen value rejects attribute assignment."""
    def _assert_immutable(value: Any, field: str, new_value: Any) -> None:
        with pytest.raises(ValidationError):
            setattr(value, field, new_value)

    return _assert_immutable


@pytest.fixture
def matrix_2x2() -> Matrix:
    return Matrix([[4, 7], [2, 6]])


@pytest.fixture
def matrix_3x3() -> Matrix:
    return Matrix([[2, -1, 0], [-1, 2, -1], [0, -1, 2]])


@pytest.fixture
def singular_3x3() -> Matrix:
    return Matrix([[1, 2, 3], [4, 5, 6], [7, 8, 9]])


@pytest.fixture
def random_matrix():
    """Factory for reproducible random integer matrices."""
    def _random(m: int, n: int | None = None, seed: int = 0) -> Matrix:
        rng = np.random.default_rng(seed)
        return Matrix(rng.integers(-9, 10, size=(m, n or m)))

    return _random
