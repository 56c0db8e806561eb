"""
Overnight in-arrears caplet/floorlet pricers.

The payoff of an in-arrears period is set by the overnight rate compounded
over the accrual itself, so the option expires at the accrual end t1 and
its forward is the compounded rate over [t0, t1]. The volatility read from
the surface at t1 is scaled down to reflect the shrinking uncertainty as
fixings accumulate:

    before start (t0 > 0): sigma * sqrt((1 + 2 t0 / t1) / 3)
    after start (t0 <= 0): sigma * t1 / ((t1 - t0) * sqrt(3))

The SABR pricer uses effective SABR parameters instead, read at t0.

Provides:
- BlackOvernightInArrearsCapletFloorletPeriodPricer
- NormalOvernightInArrearsCapletFloorletPeriodPricer
- SabrOvernightInArrearsCapletFloorletPeriodPricer
"""

from typing import Optional, Tuple

import numpy as np

from ..market_state import RatesProvider
from ..product.caplet import OvernightInArrearsCapletFloorletPeriod
from ..sensitivity import PointSensitivities
from ..vol.sabr import SabrInArrearsFunction, VolatilityAdjoint, volatility_adjoint
from ..vol.sabr_volatilities import SabrCapletFloorletVolatilities
from ..vol.volatilities import CapletFloorletVolatilities
from .period import BlackCapletFloorletPeriodPricer, NormalCapletFloorletPeriodPricer
from .sabr import SabrCapletFloorletPeriodPricer


def accrual_times(
    period: OvernightInArrearsCapletFloorletPeriod,
    volatilities: CapletFloorletVolatilities
) -> Tuple[float, float]:
    """Times to the accrual start and end; the start is negative once accruing."""
    return volatilities.relative_time(period.start_date), volatilities.relative_time(period.end_date)


class _InArrearsVolatilityAdjustment:
    """Scales the surface volatility at the accrual end for compounding."""

    in_arrears = True

    def _option_volatility(self, period, forward, volatilities):
        start_time, end_time = accrual_times(period, volatilities)
        volatility = volatilities.volatility(end_time, period.strike, forward)
        if end_time <= 0:
            return end_time, volatility, 1.0
        if start_time > 0:
            scale = np.sqrt((1.0 + 2.0 * start_time / end_time) / 3.0)
        else:
            scale = end_time / ((end_time - start_time) * np.sqrt(3.0))
        return end_time, float(scale * volatility), float(scale)


class BlackOvernightInArrearsCapletFloorletPeriodPricer(
        _InArrearsVolatilityAdjustment, BlackCapletFloorletPeriodPricer):
    """Black'76 pricer for in-arrears periods, optionally shifted."""


class NormalOvernightInArrearsCapletFloorletPeriodPricer(
        _InArrearsVolatilityAdjustment, NormalCapletFloorletPeriodPricer):
    """Bachelier pricer for in-arrears periods."""


class SabrOvernightInArrearsCapletFloorletPeriodPricer(SabrCapletFloorletPeriodPricer):
    """
    SABR pricer for in-arrears periods.

    The raw SABR parameters are read at the accrual start t0 and turned
    into effective parameters for a Hagan volatility at the accrual end.
    Parameter sensitivities are reported at t0 against the raw parameters.

    Attributes:
        function: Effective parameter function
    """

    in_arrears = True

    def __init__(self, function: Optional[SabrInArrearsFunction] = None):
        self.function = function or SabrInArrearsFunction()

    def _sabr_adjoint(
        self,
        period: OvernightInArrearsCapletFloorletPeriod,
        forward: float,
        volatilities: SabrCapletFloorletVolatilities
    ) -> Tuple[float, VolatilityAdjoint]:
        start_time, end_time = accrual_times(period, volatilities)
        raw = volatilities.sabr.params_at(start_time)
        effective, jacobian = self.function.effective_parameters_adjoint(raw, start_time, end_time)
        adjoint = volatility_adjoint(forward, period.strike, end_time, effective.alpha, effective.beta,
                                     effective.rho, effective.nu, effective.shift)
        # [dAlpha, dBeta, dRho, dNu] on the raw parameters
        raw_derivatives = adjoint.derivatives[2:] @ jacobian
        derivatives = np.concatenate([adjoint.derivatives[:2], raw_derivatives])
        return start_time, VolatilityAdjoint(adjoint.volatility, derivatives)

    def _option_volatility(self, period, forward, volatilities):
        _, end_time = accrual_times(period, volatilities)
        if end_time <= 0:
            return end_time, volatilities.volatility(end_time, period.strike, forward), 1.0
        return end_time, self._sabr_adjoint(period, forward, volatilities)[1].volatility, 1.0

    def present_value_sensitivity_model_params_volatility(
        self,
        period: OvernightInArrearsCapletFloorletPeriod,
        rates: RatesProvider,
        volatilities: SabrCapletFloorletVolatilities
    ) -> PointSensitivities:
        """
        SABR parameter sensitivities at the accrual start.

        Returns the raw parameter records in place of a volatility-level
        record.
        """
        return self.present_value_sensitivity_model_params_sabr(period, rates, volatilities)


__all__ = [
    "accrual_times",
    "BlackOvernightInArrearsCapletFloorletPeriodPricer",
    "NormalOvernightInArrearsCapletFloorletPeriodPricer",
    "SabrOvernightInArrearsCapletFloorletPeriodPricer",
]
