"""
qlmath.linalg - dense linear algebra value types

Immutable scalar, vector and matrix values with:
- Type promotion
- Operator overloading
- Fuzzy comparison under a configurable Context
- LU decomposition, inverse, solve and row reduction
"""

from .context import Context, get_context, get_current_context, reset_contexts, set_current_context
from .decomposition import LUDecomposition, lu_decompose, reduced_row_echelon_form, rref, solve
from .errors import DomainError, MathError, OutOfBoundsError, ShapeError, SingularMatrixError
from .factory import MatrixFactory, identity, matrix_from, zero
from .matrix import Matrix, SquareMatrix, SymmetricMatrix, build_matrix
from .numeric import Complex, Real, fuzzy_compare, is_zero
from .value import MathValue, ToleranceMode, TypePrecedence
from .vector import Vector, as_vector

__all__ = [
    "MathValue",
    "TypePrecedence",
    "ToleranceMode",
    "Real",
    "Complex",
    "fuzzy_compare",
    "is_zero",
    "Vector",
    "as_vector",
    "Matrix",
    "SquareMatrix",
    "SymmetricMatrix",
    "build_matrix",
    "LUDecomposition",
    "lu_decompose",
    "reduced_row_echelon_form",
    "rref",
    "solve",
    "MatrixFactory",
    "matrix_from",
    "identity",
    "zero",
    "Context",
    "get_context",
    "get_current_context",
    "set_current_context",
    "reset_contexts",
    "MathError",
    "ShapeError",
    "SingularMatrixError",
    "OutOfBoundsError",
    "DomainError",
]
