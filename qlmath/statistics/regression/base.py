"""Base class for regressions fitted to a set of (x, y) points."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Sequence

import numpy as np

from ...linalg.errors import ShapeError


class Regression(ABC):
    """
    A regression over a fixed point set.

    Subclasses implement evaluate(x); y_hat() and residuals() follow from it.
    """

    def __init__(self, points: Iterable[Sequence[float]]):
        pairs = [tuple(point) for point in points]
        if not pairs:
            raise ShapeError("Regression needs at least one point")
        for pair in pairs:
            if len(pair) != 2:
                raise ShapeError("Regression points must be (x, y) pairs",
                                 expected=(2,), actual=(len(pair),))
        self._points = np.asarray(pairs, dtype=float)

    @property
    def points(self) -> list[tuple[float, float]]:
        return [(float(x), float(y)) for x, y in self._points]

    @property
    def xs(self) -> np.ndarray:
        return self._points[:, 0].copy()

    @property
    def ys(self) -> np.ndarray:
        return self._points[:, 1].copy()

    @property
    def n(self) -> int:
        """Number of points."""
        return len(self._points)

    @abstractmethod
    def evaluate(self, x: float) -> float:
        """Fitted value at x."""

    def y_hat(self) -> list[float]:
        """Fitted values at every input x, in input order."""
        return [self.evaluate(x) for x in self.xs]

    def residuals(self) -> list[float]:
        """y - ŷ for every input point."""
        return [float(y - fitted) for y, fitted in zip(self.ys, self.y_hat())]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(n={self.n})"
