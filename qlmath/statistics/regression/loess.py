"""
LOESS - locally weighted scatterplot smoothing.

For each x a polynomial of degree λ is fitted by weighted least squares to
the nearest ⌈α·n⌉ points, weighted by the tricube function of their
scaled distance to x.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Sequence

import numpy as np

from ...linalg.errors import OutOfBoundsError, SingularMatrixError
from ...linalg.factory import MatrixFactory
from ...linalg.vector import Vector
from .base import Regression

logger = logging.getLogger(__name__)


def tricube(u: np.ndarray) -> np.ndarray:
    """Tricube weight (1 - u³)³ for u in [0, 1]."""
    return (1 - u ** 3) ** 3


class LOESS(Regression):
    """
    Local polynomial regression.

    Args:
        points: (x, y) pairs
        alpha: Smoothness α ∈ (0, 1], the fraction of points in each fit
        degree: Degree λ ≥ 0 of the local polynomials

    Raises:
        OutOfBoundsError: for α outside (0, 1], λ < 0, or fewer than λ + 1 distinct x values

    Example:
        >>> loess = LOESS(points, alpha=1/3, degree=1)
        >>> loess.y_hat()
    """

    def __init__(self, points: Iterable[Sequence[float]], alpha: float, degree: int = 1):
        super().__init__(points)

        if not 0 < alpha <= 1:
            raise OutOfBoundsError(f"Smoothness parameter α must be in (0, 1], got {alpha}", value=alpha)
        if degree < 0:
            raise OutOfBoundsError(f"Polynomial degree λ must be at least 0, got {degree}", value=degree)
        if self.n < degree + 1:
            raise OutOfBoundsError(
                f"Degree {degree} fit needs at least {degree + 1} points, got {self.n}", value=self.n
            )
        distinct = np.unique(self.xs).size
        if distinct < degree + 1:
            raise OutOfBoundsError(
                f"Degree {degree} fit needs at least {degree + 1} distinct x values, got {distinct}",
                value=distinct,
            )

        self.alpha = alpha
        self.degree = degree
        self.number_of_points = min(math.ceil(alpha * self.n), self.n)
        logger.debug(f"LOESS over {self.n} points: {self.number_of_points} per neighbourhood")

    def weights(self, x: float, max_distance: float | None = None) -> np.ndarray:
        """
        Tricube weight of every input point for a fit centred at x.

        ``max_distance`` defaults to the distance of the ⌈α·n⌉-th nearest
        point; points at or beyond it weigh 0.
        """
        distances = np.abs(self.xs - x)
        if max_distance is None:
            max_distance = np.sort(distances)[self.number_of_points - 1]
        if max_distance == 0:
            return np.where(distances == 0, 1.0, 0.0)
        return tricube(np.minimum(distances / max_distance, 1))

    def _bandwidths(self, x: float) -> list[float]:
        """The ⌈α·n⌉-th nearest distance followed by every larger distance."""
        distances = np.abs(self.xs - x)
        nearest = np.sort(distances)[self.number_of_points - 1]
        return [float(nearest)] + [float(d) for d in np.unique(distances[distances > nearest])]

    def _fit(self, x: float, max_distance: float) -> Vector:
        design = MatrixFactory.vandermonde(self.xs, self.degree + 1)
        weight = MatrixFactory.diagonal(self.weights(x, max_distance))
        weighted_t = design.transpose.multiply(weight)
        normal = weighted_t.multiply(design)
        return normal.solve(weighted_t.vector_multiply(Vector(self.ys)))

    def parameters(self, x: float) -> Vector:
        """
        Local polynomial coefficients β₀..β_λ at x.

        Solves (XᵗWX)β = XᵗWy with X the Vandermonde matrix of the inputs.
        The farthest neighbour weighs 0, so while too few points keep a
        weight for the system to be regular the neighbourhood is widened to
        the next nearest point, and finally to every point unweighted.
        """
        for max_distance in self._bandwidths(x):
            try:
                return self._fit(x, max_distance)
            except SingularMatrixError:
                logger.debug(f"LOESS fit at x={x} singular within {max_distance}, widening")
        return self._fit(x, math.inf)

    def evaluate(self, x: float) -> float:
        """Fitted value Σ βⱼ xʲ at x."""
        beta = self.parameters(x).to_numpy()
        fitted = float(sum(b * x ** j for j, b in enumerate(beta)))
        logger.debug(f"LOESS fit at x={x}: {fitted}")
        return fitted

    def __repr__(self) -> str:
        return f"LOESS(n={self.n}, alpha={self.alpha}, degree={self.degree})"
