"""Tests for LU decomposition, substitution solves and row reduction."""

import logging

import numpy as np
import pytest

from qlmath.linalg import (
    LUDecomposition,
    Matrix,
    ShapeError,
    SingularMatrixError,
    Vector,
    lu_decompose,
    reduced_row_echelon_form,
    rref,
    solve,
)

LU_MATRICES = [
    [[4, 3], [6, 3]],
    [[1, 3, 5], [2, 4, 7], [1, 1, 0]],
    [[11, 9, 24, 2], [1, 5, 2, 6], [3, 17, 18, 1], [2, 5, 7, 1]],
    [[0, 1, 2], [1, 0, 3], [4, -3, 8]],
    [[1, 2, 3], [4, 5, 6], [7, 8, 9]],
    [[2, -1, 0], [-1, 2, -1], [0, -1, 2]],
    [[1j, 2], [3, 4 - 1j]],
]


class TestLUInvariants:
    """Test PA = LU and the shape of the factors."""

    @pytest.mark.parametrize("rows", LU_MATRICES)
    def test_pa_equals_lu(self, rows, assert_matrix_close):
        """Test the factorisation reproduces the permuted matrix."""
        a = Matrix(rows)
        lu = a.lu_decomposition()
        assert_matrix_close(lu.P @ a, lu.L @ lu.U)

    @pytest.mark.parametrize("rows", LU_MATRICES)
    def test_factor_structure(self, rows):
        """Test L is unit lower-triangular and U upper-triangular."""
        lu = Matrix(rows).lu_decomposition()
        assert lu.L.is_lower_triangular()
        assert all(d == 1 for d in lu.L.diagonal())
        assert lu.U.is_upper_triangular()

    @pytest.mark.parametrize("rows", LU_MATRICES)
    def test_permutation_is_orthogonal(self, rows, assert_matrix_close):
        """Test P·Pᵗ = I."""
        p = Matrix(rows).lu_decomposition().P
        assert_matrix_close(p @ p.transpose, np.eye(p.m))

    def test_partial_pivoting_picks_largest_entry(self):
        """Test the largest magnitude in the column is moved to the pivot."""
        lu = lu_decompose(Matrix([[1, 2], [3, 4]]))
        assert lu.P == [[0, 1], [1, 0]]
        assert lu.U[0, 0] == 3
        assert lu.swaps == 1

    def test_lower_factor_entries_bounded(self):
        """Test partial pivoting keeps every multiplier at most 1 in magnitude."""
        lu = lu_decompose(Matrix(LU_MATRICES[2]))
        assert np.all(np.abs(lu.L.to_numpy()) <= 1 + 1e-12)

    def test_unpacks_to_l_u_p(self):
        """Test the result unpacks as L, U, P."""
        lower, upper, perm = Matrix([[4, 3], [6, 3]]).lu_decomposition()
        assert lower.is_lower_triangular()
        assert upper.is_upper_triangular()
        assert perm == [[0, 1], [1, 0]]

    def test_requires_square(self):
        """Test LU of a rectangular matrix raises ShapeError."""
        with pytest.raises(ShapeError):
            lu_decompose(Matrix([[1, 2, 3], [4, 5, 6]]))

    def test_result_is_frozen(self, assert_immutable):
        """Test the factorisation record cannot be modified."""
        lu = lu_decompose(Matrix([[1, 2], [3, 4]]))
        assert isinstance(lu, LUDecomposition)
        assert_immutable(lu, "swaps", 5)


class TestLUSingular:
    """Test the singular flag and its consequences."""

    def test_singular_flag(self, singular_3x3):
        """Test a rank-deficient matrix is flagged."""
        lu = singular_3x3.lu_decomposition()
        assert lu.singular
        assert lu.determinant() == 0

    def test_zero_column_is_skipped(self, assert_matrix_close):
        """Test an all-zero pivot column leaves a zero on U's diagonal."""
        a = Matrix([[0, 1, 2], [0, 3, 4], [0, 5, 7]])
        lu = a.lu_decomposition()
        assert lu.singular
        assert lu.U[0, 0] == 0
        assert_matrix_close(lu.P @ a, lu.L @ lu.U)

    def test_regular_matrix_not_flagged(self, matrix_3x3):
        """Test an invertible matrix is not flagged."""
        assert not matrix_3x3.lu_decomposition().singular

    def test_solve_and_inverse_raise(self, singular_3x3):
        """Test solve and inverse refuse a singular factorisation."""
        lu = singular_3x3.lu_decomposition()
        with pytest.raises(SingularMatrixError):
            lu.solve([1, 2, 3])
        with pytest.raises(SingularMatrixError):
            lu.inverse()

    def test_singular_pivot_is_logged(self, singular_3x3, caplog):
        """Test the singular pivot produces a debug record."""
        with caplog.at_level(logging.DEBUG, logger="qlmath.linalg.decomposition"):
            singular_3x3.determinant()
        assert any("singular" in record.message for record in caplog.records)


class TestLUSolve:
    """Test solves through the factors."""

    def test_determinant_sign_follows_swaps(self):
        """Test det = (-1)^swaps · Π diag(U)."""
        lu = lu_decompose(Matrix([[0, 1, 0], [1, 0, 0], [0, 0, 1]]))
        assert lu.swaps == 1
        assert lu.determinant() == -1

    def test_solve_matches_numpy(self, random_matrix, assert_vector_close):
        """Test the substitution solve against numpy.linalg.solve."""
        a = random_matrix(5, seed=3) + 20 * Matrix(np.eye(5))
        b = [1, -2, 3, -4, 5]
        expected = np.linalg.solve(a.to_numpy(), np.array(b, dtype=float))
        assert_vector_close(a.lu_decomposition().solve(b), expected)

    def test_inverse_matches_numpy(self, random_matrix, assert_matrix_close):
        """Test the inverse against numpy.linalg.inv."""
        a = random_matrix(4, seed=7) + 20 * Matrix(np.eye(4))
        assert_matrix_close(a.lu_decomposition().inverse(), np.linalg.inv(a.to_numpy()))

    def test_module_level_solve(self, assert_vector_close):
        """Test solve(A, b)."""
        x = solve(Matrix([[3, 4], [2, -1]]), Vector([5, 7]))
        assert_vector_close(x, [3, -1])

    def test_right_hand_side_column_must_be_single(self):
        """Test a multi-column right-hand side raises ShapeError."""
        with pytest.raises(ShapeError):
            solve(Matrix([[1, 0], [0, 1]]), Matrix([[1, 2], [3, 4]]))


class TestReducedRowEchelonForm:
    """Test the Gauss-Jordan reduction."""

    def test_alias(self):
        """Test rref is the same function."""
        assert rref is reduced_row_echelon_form

    def test_leading_ones_and_zero_columns(self):
        """Test pivots are 1 with zeros above and below."""
        reduced = rref(Matrix([[2, 4, -2], [4, 9, -3], [-2, -3, 7]]))
        assert reduced == np.eye(3)

    def test_augmented_system(self):
        """Test reducing [A | b] exposes the solution in the last column."""
        reduced = rref(Matrix([[3, 4, 5], [2, -1, 7]]))
        assert reduced == [[1, 0, 3], [0, 1, -1]]

    def test_near_zero_entries_snapped(self):
        """Test rounding noise is replaced by exact zeros."""
        reduced = rref(Matrix([[1, 2, 3], [4, 5, 6], [7, 8, 9]])).to_numpy()
        assert np.all(reduced[2] == 0)

    @pytest.mark.parametrize("rows", LU_MATRICES[:-1])
    def test_rref_is_upper_triangular(self, rows):
        """Test the reduced form of a square matrix is upper-triangular."""
        assert rref(Matrix(rows)).is_upper_triangular()

    def test_wide_matrix(self):
        """Test reduction of a wide matrix with a free column."""
        reduced = rref(Matrix([[1, 2, 3, 4], [2, 4, 6, 9]]))
        assert reduced == [[1, 2, 3, 0], [0, 0, 0, 1]]
        assert reduced.is_upper_triangular()
