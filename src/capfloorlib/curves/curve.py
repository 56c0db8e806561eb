"""
Curve representations.

Provides:
- NodalCurve: named parameter curve y(x) on interpolation nodes
- Curve: zero-rate discount curve P(0,t) = exp(-z(t) t)

Both expose their node values as parameters: parameter_count, labels,
node_weights and shift_node are the hooks used by sensitivity resolution
and by finite-difference bumping.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import List, Sequence, Tuple, Union

import numpy as np

from ..conventions import DayCount, year_fraction
from .interpolation import Interpolator, create_interpolator


@dataclass(frozen=True, eq=False)
class NodalCurve:
    """
    Interpolated curve of a model parameter.

    Attributes:
        name: Curve name, used to key parameter sensitivities
        x: Node coordinates (e.g. expiry in years)
        y: Node values
        interpolation_method: Name of interpolation method
    """
    name: str
    x: Sequence[float]
    y: Sequence[float]
    interpolation_method: str = "linear"
    _interpolator: Interpolator = field(init=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "x", np.asarray(self.x, dtype=float))
        object.__setattr__(self, "y", np.asarray(self.y, dtype=float))
        interpolator = create_interpolator(self.interpolation_method)
        interpolator.fit(self.x, self.y)
        object.__setattr__(self, "_interpolator", interpolator)

    @classmethod
    def constant(cls, name: str, value: float) -> "NodalCurve":
        """Curve with a single node, constant everywhere."""
        return cls(name, [0.0], [value])

    @property
    def parameter_count(self) -> int:
        return len(self.x)

    @property
    def labels(self) -> List[str]:
        return [f"{x:g}Y" for x in self.x]

    def value(self, x: float) -> float:
        return self._interpolator.interpolate(x)

    def first_derivative(self, x: float) -> float:
        return self._interpolator.derivative(x)

    def node_weights(self, x: float) -> np.ndarray:
        return self._interpolator.node_weights(x)

    def shift_node(self, node_index: int, amount: float) -> "NodalCurve":
        """New curve with one node value shifted by amount."""
        y = np.array(self.y, dtype=float)
        y[node_index] += amount
        return replace(self, y=y)

    def __repr__(self) -> str:
        return f"NodalCurve(name={self.name}, nodes={self.parameter_count})"


class Curve:
    """
    Zero-rate discount curve.

    Attributes:
        name: Curve name, used to key parameter sensitivities
        anchor_date: Valuation date (time 0)
        currency: Currency code
        day_count: Day count for time calculations

    Conventions:
        - Zero rates are continuously compounded
        - Times are year fractions from anchor date
        - Zero rates are interpolated linearly, flat beyond the nodes
    """

    def __init__(
        self,
        name: str,
        anchor_date: date,
        times: Sequence[float],
        zero_rates: Sequence[float],
        currency: str = "USD",
        day_count: DayCount = DayCount.ACT_365,
        interpolation_method: str = "linear"
    ):
        self.name = name
        self.anchor_date = anchor_date
        self.currency = currency
        self.day_count = day_count
        self.interpolation_method = interpolation_method

        self._times = np.asarray(times, dtype=float)
        self._zero_rates = np.asarray(zero_rates, dtype=float)
        if np.any(self._times <= 0):
            raise ValueError("Curve node times must be positive")

        self._interpolator = create_interpolator(interpolation_method)
        self._interpolator.fit(self._times, self._zero_rates)

    def time(self, d: date) -> float:
        """Year fraction from the anchor date."""
        return year_fraction(self.anchor_date, d, self.day_count)

    def _to_time(self, t: Union[float, date]) -> float:
        return self.time(t) if isinstance(t, date) else float(t)

    def discount_factor(self, t: Union[float, date]) -> float:
        """
        Get discount factor P(0,t).

        Args:
            t: Year fraction or date

        Returns:
            Discount factor, 1.0 at or before the anchor
        """
        t = self._to_time(t)
        if t <= 0:
            return 1.0
        return float(np.exp(-self._interpolator.interpolate(t) * t))

    def zero_rate(self, t: Union[float, date]) -> float:
        """Continuously compounded zero rate z(t)."""
        return self._interpolator.interpolate(self._to_time(t))

    def zero_rate_node_weights(self, t: Union[float, date]) -> np.ndarray:
        """Derivative of z(t) with respect to each node zero rate."""
        return self._interpolator.node_weights(self._to_time(t))

    def forward_rate(self, start: date, end: date, accrual: float) -> float:
        """
        Simply compounded forward rate between two dates.

        Args:
            start: Forward start date
            end: Forward end date
            accrual: Accrual year fraction of the forward period

        Returns:
            (P(start) / P(end) - 1) / accrual
        """
        if end <= start:
            raise ValueError("End must be after start")
        return (self.discount_factor(start) / self.discount_factor(end) - 1) / accrual

    @property
    def parameter_count(self) -> int:
        return len(self._times)

    @property
    def labels(self) -> List[str]:
        return [f"{t:g}Y" for t in self._times]

    def get_node_times(self) -> np.ndarray:
        """Get array of node times."""
        return self._times.copy()

    def get_node_rates(self) -> np.ndarray:
        """Get array of node zero rates."""
        return self._zero_rates.copy()

    def get_nodes(self) -> List[Tuple[float, float]]:
        """Get all (time, zero_rate) nodes."""
        return list(zip(self._times.tolist(), self._zero_rates.tolist()))

    def _with_rates(self, zero_rates: np.ndarray) -> "Curve":
        return Curve(
            name=self.name,
            anchor_date=self.anchor_date,
            times=self._times,
            zero_rates=zero_rates,
            currency=self.currency,
            day_count=self.day_count,
            interpolation_method=self.interpolation_method
        )

    def shift_node(self, node_index: int, amount: float) -> "Curve":
        """
        Create a new curve with one node zero rate shifted.

        Args:
            node_index: Index of node to shift (0-based)
            amount: Absolute shift in rate units

        Returns:
            New shifted curve
        """
        if node_index < 0 or node_index >= self.parameter_count:
            raise IndexError(f"Invalid node index: {node_index}")
        rates = self._zero_rates.copy()
        rates[node_index] += amount
        return self._with_rates(rates)

    def bump_node(self, node_index: int, bp: float) -> "Curve":
        """Shift a single node by bp basis points."""
        return self.shift_node(node_index, bp / 10000.0)

    def bump_parallel(self, bp: float) -> "Curve":
        """Shift every node by bp basis points."""
        return self._with_rates(self._zero_rates + bp / 10000.0)

    def __repr__(self) -> str:
        return (f"Curve(name={self.name}, anchor={self.anchor_date}, currency={self.currency}, "
                f"nodes={self.parameter_count}, method={self.interpolation_method})")


def create_flat_curve(
    name: str,
    anchor_date: date,
    rate: float,
    currency: str = "USD",
    max_tenor_years: float = 30.0
) -> Curve:
    """
    Create a flat zero-rate curve.

    Args:
        name: Curve name
        anchor_date: Valuation date
        rate: Flat continuously compounded rate
        currency: Currency code
        max_tenor_years: Last node time

    Returns:
        Flat curve
    """
    times = [0.25, 0.5, 1, 2, 5, 10, 20, max_tenor_years]
    return Curve(name, anchor_date, times, [rate] * len(times), currency=currency)


__all__ = [
    "Curve",
    "NodalCurve",
    "create_flat_curve",
]
