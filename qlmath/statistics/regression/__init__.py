"""Regression models over (x, y) point sets."""

from .base import Regression
from .loess import LOESS

__all__ = ["LOESS", "Regression"]
