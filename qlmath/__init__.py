"""qlmath - dense linear algebra and statistics building blocks.

Main namespace package containing:
- qlmath.linalg: Real/Complex/Vector/Matrix values, LU, solve, RREF
- qlmath.statistics: circular statistics and LOESS regression
"""

from .linalg import Complex, Matrix, MatrixFactory, Real, Vector, get_context

__version__ = "0.1.0"

__all__ = ["Complex", "Matrix", "MatrixFactory", "Real", "Vector", "get_context"]
