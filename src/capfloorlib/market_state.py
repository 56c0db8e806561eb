"""
Rates market state.

Provides:
- RatesProvider: immutable snapshot of discount curves, index forward
  curves and published fixings at a valuation date

The provider answers discount factor and forward rate queries, produces
the matching point sensitivities and resolves point sensitivities into
curve parameter sensitivities.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, Iterator, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .currency import MultiCurrencyAmount
from .curves.curve import Curve
from .errors import MissingFixingError
from .index import IborIndex, IborRateObservation, OvernightCompoundedObservation, OvernightIndex
from .sensitivity import (
    CurrencyParameterSensitivities,
    CurrencyParameterSensitivity,
    IborRateSensitivity,
    OvernightRateSensitivity,
    PointSensitivities,
    ZeroRateSensitivity,
)

logger = logging.getLogger(__name__)

RateObservation = Union[IborRateObservation, OvernightCompoundedObservation]


@dataclass(frozen=True, eq=False)
class RatesProvider:
    """
    Rates market data at a valuation date.

    Attributes:
        valuation_date: Market valuation date
        discount_curves: Discount curve per currency
        index_curves: Forward curve per index name
        fixings: Published fixings per index name, indexed by fixing date
    """
    valuation_date: date
    discount_curves: Mapping[str, Curve]
    index_curves: Mapping[str, Curve] = field(default_factory=dict)
    fixings: Mapping[str, pd.Series] = field(default_factory=dict)

    def __post_init__(self):
        """Normalise fixing series to a DatetimeIndex."""
        normalised = {}
        for name, series in self.fixings.items():
            series = pd.Series(series, dtype=float)
            series.index = pd.to_datetime(series.index)
            normalised[name] = series.sort_index()
        object.__setattr__(self, "discount_curves", dict(self.discount_curves))
        object.__setattr__(self, "index_curves", dict(self.index_curves))
        object.__setattr__(self, "fixings", normalised)

    def discount_curve(self, currency: str) -> Curve:
        try:
            return self.discount_curves[currency]
        except KeyError:
            raise KeyError(f"No discount curve for currency {currency}") from None

    def index_curve(self, index: Union[IborIndex, OvernightIndex]) -> Curve:
        try:
            return self.index_curves[index.name]
        except KeyError:
            raise KeyError(f"No forward curve for index {index.name}") from None

    def discount_factor(self, currency: str, payment_date: date) -> float:
        """Discount factor from the valuation date to payment_date."""
        return self.discount_curve(currency).discount_factor(payment_date)

    def discount_factor_point_sensitivity(self, currency: str, payment_date: date) -> PointSensitivities:
        """
        Sensitivity of the discount factor to the zero rate at payment_date.

        dP/dz = -t P(t); none when the date is not after the valuation date.
        """
        curve = self.discount_curve(currency)
        t = curve.time(payment_date)
        if t <= 0:
            return PointSensitivities.none()
        return PointSensitivities.of(
            ZeroRateSensitivity(currency, t, currency, -t * curve.discount_factor(t)))

    def fixing(self, index: Union[IborIndex, OvernightIndex], fixing_date: date) -> Optional[float]:
        """Published fixing, or None."""
        series = self.fixings.get(index.name)
        if series is None:
            return None
        value = series.get(pd.Timestamp(fixing_date))
        if value is None or pd.isna(value):
            return None
        return float(value)

    def is_fixed(self, observation: RateObservation) -> bool:
        """True when the observation rate is known rather than projected."""
        if isinstance(observation, OvernightCompoundedObservation):
            return self._compounding_split(observation)[1] is None
        if observation.fixing_date < self.valuation_date:
            return True
        if observation.fixing_date == self.valuation_date:
            return self.fixing(observation.index, observation.fixing_date) is not None
        return False

    def forward_rate(self, observation: RateObservation) -> float:
        """
        Rate of an Ibor or compounded overnight observation.

        Past fixings come from the time series. On the valuation date the
        published fixing is used when present, otherwise the curve forward.

        Raises:
            MissingFixingError: If a past fixing is not available
        """
        if isinstance(observation, OvernightCompoundedObservation):
            return self._compounded_rate(observation)
        if observation.fixing_date <= self.valuation_date:
            fixed = self.fixing(observation.index, observation.fixing_date)
            if fixed is not None:
                return fixed
            if observation.fixing_date < self.valuation_date:
                raise MissingFixingError(
                    f"No fixing for {observation.index.name} on {observation.fixing_date}")
            logger.warning("No fixing published for %s on valuation date %s, using curve forward",
                           observation.index.name, observation.fixing_date)
        return self._projected_rate(observation)

    def _projected_rate(self, observation: IborRateObservation) -> float:
        curve = self.index_curve(observation.index)
        return curve.forward_rate(observation.effective_date, observation.maturity_date,
                                  observation.year_fraction)

    def _compounding_split(self, observation: OvernightCompoundedObservation) -> Tuple[float, Optional[date]]:
        """
        Growth factor of the published fixings and the date projection starts from.

        Fixings before the valuation date must be published. The fixing on
        the valuation date is used when present, otherwise it and every later
        fixing are projected. The date is None once every fixing is known.

        Raises:
            MissingFixingError: If a past fixing is not available
        """
        growth = 1.0
        for i, (fixing_date, accrual) in enumerate(zip(observation.fixing_dates, observation.accrual_factors)):
            fixed = None
            if fixing_date <= self.valuation_date:
                fixed = self.fixing(observation.index, fixing_date)
                if fixed is None and fixing_date < self.valuation_date:
                    raise MissingFixingError(f"No fixing for {observation.index.name} on {fixing_date}")
            if fixed is None:
                return growth, observation.start_date if i == 0 else fixing_date
            growth *= 1.0 + fixed * accrual
        return growth, None

    def _compounded_rate(self, observation: OvernightCompoundedObservation) -> float:
        growth, projection_start = self._compounding_split(observation)
        if projection_start is not None:
            curve = self.index_curve(observation.index)
            growth *= curve.discount_factor(projection_start) / curve.discount_factor(observation.end_date)
        return (growth - 1.0) / observation.year_fraction

    def forward_rate_point_sensitivity(self, observation: RateObservation) -> PointSensitivities:
        """Unit sensitivity to the forward rate; none once the rate is fixed."""
        if self.is_fixed(observation):
            return PointSensitivities.none()
        if isinstance(observation, OvernightCompoundedObservation):
            return PointSensitivities.of(OvernightRateSensitivity(observation, observation.currency, 1.0))
        return PointSensitivities.of(IborRateSensitivity(observation, observation.currency, 1.0))

    def parameter_sensitivity(self, sensitivities: PointSensitivities) -> CurrencyParameterSensitivities:
        """
        Resolve zero rate, Ibor rate and overnight rate point sensitivities to curve nodes.

        Other record types are ignored.
        """
        result = CurrencyParameterSensitivities.empty()
        for s in sensitivities:
            if isinstance(s, ZeroRateSensitivity):
                curve = self.discount_curve(s.curve_currency)
                values = s.sensitivity * curve.zero_rate_node_weights(s.year_fraction)
            elif isinstance(s, IborRateSensitivity):
                obs = s.observation
                curve = self.index_curve(obs.index)
                values = s.sensitivity * self._forward_rate_node_weights(
                    curve, obs.effective_date, obs.maturity_date, obs.year_fraction)
            elif isinstance(s, OvernightRateSensitivity):
                obs = s.observation
                curve = self.index_curve(obs.index)
                growth, projection_start = self._compounding_split(obs)
                values = s.sensitivity * self._forward_rate_node_weights(
                    curve, projection_start, obs.end_date, obs.year_fraction / growth)
            else:
                continue
            result = result.combined_with(
                CurrencyParameterSensitivity(curve.name, s.currency, tuple(curve.labels), values))
        return result

    @staticmethod
    def _forward_rate_node_weights(curve: Curve, start: date, end: date, accrual: float) -> np.ndarray:
        """
        dF/dz_i for F = (P(s)/P(e) - 1) / accrual.

        P(s)/P(e) = exp(-z(s) t_s + z(e) t_e), so each node enters through
        the interpolation weights at both ends. A compounded overnight rate
        scales the ratio by the growth of its published fixings, which is
        passed in through the accrual.
        """
        t_s = curve.time(start)
        t_e = curve.time(end)
        ratio = curve.discount_factor(t_s) / curve.discount_factor(t_e)
        weights_s = curve.zero_rate_node_weights(t_s) if t_s > 0 else 0.0
        weights_e = curve.zero_rate_node_weights(t_e) if t_e > 0 else 0.0
        return ratio / accrual * (t_e * weights_e - t_s * weights_s)

    def currency_exposure(self, sensitivities: PointSensitivities) -> MultiCurrencyAmount:
        """
        FX exposure implied by point sensitivities.

        Zero rate and Ibor rate sensitivities are expressed in the currency
        of their own curve and carry no FX delta, so they contribute nothing.
        """
        return MultiCurrencyAmount.empty()

    def curves(self) -> Iterator[Tuple[str, Curve]]:
        """Distinct curves by name."""
        seen: Dict[str, Curve] = {}
        for curve in list(self.discount_curves.values()) + list(self.index_curves.values()):
            seen.setdefault(curve.name, curve)
        return iter(seen.items())

    def with_curve(self, name: str, curve: Curve) -> "RatesProvider":
        """Replace every occurrence of the named curve."""
        return replace(
            self,
            discount_curves={ccy: curve if c.name == name else c for ccy, c in self.discount_curves.items()},
            index_curves={idx: curve if c.name == name else c for idx, c in self.index_curves.items()},
        )


__all__ = [
    "RatesProvider",
]
