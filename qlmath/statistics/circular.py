"""
Circular statistics for angular data.

Angles are in radians. With S = Σ sin θᵢ and C = Σ cos θᵢ:

- resultant length      R = √(S² + C²)
- mean resultant length ρ = R / n
- mean                  atan2(S, C)
- variance              1 - ρ
- standard deviation    √(-2 ln ρ)
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from ..linalg.errors import DomainError

logger = logging.getLogger(__name__)


class CircularDescription(BaseModel):
    """Summary record returned by Circular.describe()."""

    model_config = ConfigDict(frozen=True)

    n: int = Field(description="Number of angles")
    mean: float = Field(description="Circular mean")
    resultant_length: float = Field(description="R")
    mean_resultant_length: float = Field(description="ρ = R / n")
    variance: float = Field(description="1 - ρ")
    sd: float = Field(description="Circular standard deviation")


def _angles(angles: Sequence[float]) -> np.ndarray:
    values = np.asarray(angles, dtype=float)
    if values.ndim != 1 or values.size == 0:
        raise DomainError("Circular statistics need a non-empty sequence of angles")
    return values


def _sums(angles: Sequence[float]) -> tuple[float, float, int]:
    values = _angles(angles)
    return float(np.sum(np.sin(values))), float(np.sum(np.cos(values))), values.size


class Circular:
    """Static circular statistics over a sequence of angles."""

    @staticmethod
    def mean(angles: Sequence[float]) -> float:
        """
        Mean direction atan2(Σ sin θ, Σ cos θ), in (-π, π].

        When both sums vanish the direction is undefined and the result is
        whatever atan2 gives for the rounded sums, e.g. π/2 for [0, π].
        """
        sin_sum, cos_sum, _ = _sums(angles)
        return math.atan2(sin_sum, cos_sum)

    @staticmethod
    def resultant_length(angles: Sequence[float]) -> float:
        sin_sum, cos_sum, _ = _sums(angles)
        return math.hypot(sin_sum, cos_sum)

    @staticmethod
    def mean_resultant_length(angles: Sequence[float]) -> float:
        sin_sum, cos_sum, n = _sums(angles)
        return math.hypot(sin_sum, cos_sum) / n

    @staticmethod
    def variance(angles: Sequence[float]) -> float:
        return 1 - Circular.mean_resultant_length(angles)

    @staticmethod
    def standard_deviation(angles: Sequence[float]) -> float:
        """
        Circular standard deviation √(-2 ln ρ).

        Raises:
            DomainError: if the mean resultant length is not positive
        """
        rho = Circular.mean_resultant_length(angles)
        if rho <= 0:
            raise DomainError(f"Standard deviation undefined for mean resultant length {rho}")
        # ρ may round a hair above 1
        return math.sqrt(max(-2 * math.log(rho), 0.0))

    @staticmethod
    def describe(angles: Sequence[float]) -> CircularDescription:
        """All circular statistics at once; ``.model_dump()`` gives a dict."""
        sin_sum, cos_sum, n = _sums(angles)
        resultant = math.hypot(sin_sum, cos_sum)
        rho = resultant / n
        logger.debug(f"Describing {n} angles: R={resultant}, rho={rho}")
        return CircularDescription(
            n=n,
            mean=math.atan2(sin_sum, cos_sum),
            resultant_length=resultant,
            mean_resultant_length=rho,
            variance=1 - rho,
            sd=Circular.standard_deviation(angles),
        )


mean = Circular.mean
resultant_length = Circular.resultant_length
mean_resultant_length = Circular.mean_resultant_length
variance = Circular.variance
standard_deviation = Circular.standard_deviation
describe = Circular.describe


__all__ = [
    "Circular",
    "CircularDescription",
    "describe",
    "mean",
    "mean_resultant_length",
    "resultant_length",
    "standard_deviation",
    "variance",
]
