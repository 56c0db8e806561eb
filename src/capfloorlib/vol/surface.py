"""
Volatility surfaces on (expiry, strike).

Provides:
- GridSurface: bilinear interpolation on an expiry x strike grid, flat
  beyond the grid edges
- ConstantSurface: one value everywhere

Parameters are the grid values in row-major (expiry, strike) order.
"""

from dataclasses import dataclass, field, replace
from typing import List, Sequence

import numpy as np

from ..curves.interpolation import LinearInterpolator


@dataclass(frozen=True, eq=False)
class GridSurface:
    """
    Volatility grid with bilinear interpolation.

    Attributes:
        name: Surface name, used to key parameter sensitivities
        expiries: Expiry nodes in years
        strikes: Strike nodes
        values: Volatilities, shape (len(expiries), len(strikes))
    """
    name: str
    expiries: Sequence[float]
    strikes: Sequence[float]
    values: np.ndarray
    _expiry_axis: LinearInterpolator = field(init=False, repr=False)
    _strike_axis: LinearInterpolator = field(init=False, repr=False)

    def __post_init__(self):
        expiries = np.asarray(self.expiries, dtype=float)
        strikes = np.asarray(self.strikes, dtype=float)
        values = np.asarray(self.values, dtype=float)
        if values.shape != (len(expiries), len(strikes)):
            raise ValueError(
                f"Surface {self.name}: values shape {values.shape} does not match "
                f"{len(expiries)} expiries x {len(strikes)} strikes")
        object.__setattr__(self, "expiries", expiries)
        object.__setattr__(self, "strikes", strikes)
        object.__setattr__(self, "values", values)

        # Axis interpolators are only used for their node weights
        expiry_axis = LinearInterpolator()
        expiry_axis.fit(expiries, np.zeros(len(expiries)))
        strike_axis = LinearInterpolator()
        strike_axis.fit(strikes, np.zeros(len(strikes)))
        object.__setattr__(self, "_expiry_axis", expiry_axis)
        object.__setattr__(self, "_strike_axis", strike_axis)

    @property
    def parameter_count(self) -> int:
        return self.values.size

    @property
    def labels(self) -> List[str]:
        return [f"{t:g}Y/{k:g}" for t in self.expiries for k in self.strikes]

    def node_weights(self, expiry: float, strike: float) -> np.ndarray:
        """Derivative of the interpolated value with respect to each grid value."""
        return np.outer(self._expiry_axis.node_weights(expiry),
                        self._strike_axis.node_weights(strike)).ravel()

    def value(self, expiry: float, strike: float) -> float:
        return float(self.node_weights(expiry, strike) @ self.values.ravel())

    def shift_node(self, node_index: int, amount: float) -> "GridSurface":
        """New surface with one grid value shifted."""
        values = self.values.copy()
        values.flat[node_index] += amount
        return replace(self, values=values)


@dataclass(frozen=True, eq=False)
class ConstantSurface:
    """Surface returning the same volatility for every expiry and strike."""
    name: str
    constant: float

    @property
    def parameter_count(self) -> int:
        return 1

    @property
    def labels(self) -> List[str]:
        return ["constant"]

    def node_weights(self, expiry: float, strike: float) -> np.ndarray:
        return np.ones(1)

    def value(self, expiry: float, strike: float) -> float:
        return self.constant

    def shift_node(self, node_index: int, amount: float) -> "ConstantSurface":
        if node_index != 0:
            raise IndexError(f"Invalid node index: {node_index}")
        return replace(self, constant=self.constant + amount)


__all__ = [
    "GridSurface",
    "ConstantSurface",
]
