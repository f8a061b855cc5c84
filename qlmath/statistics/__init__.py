"""
qlmath.statistics - statistics routines

- circular: mean direction, resultant length, variance and standard
  deviation of angular data
- regression: LOESS local polynomial smoothing
"""

from .circular import Circular, CircularDescription
from .regression import LOESS, Regression

__all__ = ["Circular", "CircularDescription", "LOESS", "Regression"]
