"""
Interpolation for curves and surfaces.

Provides:
- Interpolator: abstract base with value, derivative and node weights
- LinearInterpolator: linear between nodes, flat beyond them

Node weights give the linear dependence of the interpolated value on
each node value. They are what turns a point sensitivity into a
per-node parameter sensitivity.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

import numpy as np


class Interpolator(ABC):
    """Abstract base class for one-dimensional interpolation."""

    @abstractmethod
    def fit(self, x: np.ndarray, values: np.ndarray) -> None:
        """
        Fit the interpolator to data points.

        Args:
            x: Node coordinates (sorted on fit)
            values: Node values
        """

    @abstractmethod
    def interpolate(self, x: float) -> float:
        """Interpolated value at x."""

    def __call__(self, x: float) -> float:
        return self.interpolate(x)

    @abstractmethod
    def derivative(self, x: float) -> float:
        """First derivative with respect to x."""

    @abstractmethod
    def node_weights(self, x: float) -> np.ndarray:
        """Derivative of the interpolated value at x with respect to each node value."""


class LinearInterpolator(Interpolator):
    """
    Linear interpolation.

    Simple linear interpolation between knot points.
    Extrapolates flat beyond boundaries. A single node gives a constant.
    """

    def __init__(self):
        self.x: Optional[np.ndarray] = None
        self.values: Optional[np.ndarray] = None

    def fit(self, x: np.ndarray, values: np.ndarray) -> None:
        """Fit linear interpolator."""
        x = np.asarray(x, dtype=float)
        values = np.asarray(values, dtype=float)
        if len(x) != len(values):
            raise ValueError("Node coordinates and values must have same length")
        if len(x) < 1:
            raise ValueError("Need at least 1 node for interpolation")

        idx = np.argsort(x)
        self.x = x[idx]
        self.values = values[idx]
        if np.any(np.diff(self.x) <= 0):
            raise ValueError("Node coordinates must be distinct")

    def _bracket(self, x: float) -> Tuple[int, float]:
        """Left node index and weight of the right node."""
        if self.x is None:
            raise RuntimeError("Interpolator not fitted")
        if len(self.x) == 1 or x <= self.x[0]:
            return 0, 0.0
        if x >= self.x[-1]:
            return len(self.x) - 2, 1.0

        idx = int(np.searchsorted(self.x, x, side='right')) - 1
        idx = max(0, min(idx, len(self.x) - 2))
        x0, x1 = self.x[idx], self.x[idx + 1]
        return idx, float((x - x0) / (x1 - x0))

    def interpolate(self, x: float) -> float:
        """Linear interpolation with flat extrapolation."""
        idx, w = self._bracket(x)
        if w == 0.0:
            return float(self.values[idx])
        if w == 1.0:
            return float(self.values[idx + 1])
        return float(self.values[idx] + w * (self.values[idx + 1] - self.values[idx]))

    def derivative(self, x: float) -> float:
        """Derivative of linear interpolation (piecewise constant)."""
        if self.x is None:
            raise RuntimeError("Interpolator not fitted")
        if len(self.x) == 1 or x <= self.x[0] or x >= self.x[-1]:
            return 0.0
        idx, _ = self._bracket(x)
        x0, x1 = self.x[idx], self.x[idx + 1]
        return float((self.values[idx + 1] - self.values[idx]) / (x1 - x0))

    def node_weights(self, x: float) -> np.ndarray:
        idx, w = self._bracket(x)
        weights = np.zeros(len(self.x))
        weights[idx] = 1.0 - w
        if w != 0.0:
            weights[idx + 1] = w
        return weights


def create_interpolator(method: str) -> Interpolator:
    """Create an interpolator by name."""
    if method.lower() == "linear":
        return LinearInterpolator()
    raise ValueError(f"Unknown interpolation method: {method}")


__all__ = [
    "Interpolator",
    "LinearInterpolator",
    "create_interpolator",
]
