"""
SABR caplet/floorlet pricer.

Prices with Black'76 at the Hagan implied volatility. The volatility
shift is applied to forward and strike, so a SABR caplet equals a shifted
Black caplet at the same volatility and shift.
"""

from typing import Tuple

from ..market_state import RatesProvider
from ..product.caplet import CapletFloorletPeriod
from ..sensitivity import CapletFloorletSabrSensitivity, PointSensitivities
from ..vol.sabr import VolatilityAdjoint
from ..vol.sabr_volatilities import ADJOINT_POSITION, SabrCapletFloorletVolatilities
from ..vol.volatilities import ModelFamily
from .period import BlackCapletFloorletPeriodPricer, TimeState


class SabrCapletFloorletPeriodPricer(BlackCapletFloorletPeriodPricer):
    """
    Black'76 pricer fed by SABR volatilities.

    present_value_sensitivity_rates keeps the implied volatility fixed
    (sticky strike). present_value_sensitivity_rates_sticky_model lets the
    volatility move with the forward along the SABR smile.
    """

    accepted_families = frozenset({ModelFamily.SABR})

    def _sabr_adjoint(
        self,
        period: CapletFloorletPeriod,
        forward: float,
        volatilities: SabrCapletFloorletVolatilities
    ) -> Tuple[float, VolatilityAdjoint]:
        """
        Parameter expiry and the volatility adjoint.

        Returns:
            (expiry at which the SABR parameters are read, volatility with its
            derivatives [dF, dK, dAlpha, dBeta, dRho, dNu])
        """
        expiry = volatilities.relative_time(period.fixing_date)
        return expiry, volatilities.volatility_adjoint(expiry, period.strike, forward)

    def present_value_sensitivity_rates_sticky_model(
        self,
        period: CapletFloorletPeriod,
        rates: RatesProvider,
        volatilities: SabrCapletFloorletVolatilities
    ) -> PointSensitivities:
        """
        Rates sensitivity with the SABR parameters held fixed.

        Adds vega * dSigma/dF to the forward component of the sticky strike
        sensitivity.

        Args:
            period: Caplet or floorlet
            rates: Rates market data
            volatilities: SABR volatilities

        Returns:
            Point sensitivities
        """
        sticky_strike = self.present_value_sensitivity_rates(period, rates, volatilities)
        if self._state(period, rates) is not TimeState.BEFORE_FIXING:
            return sticky_strike
        g = self._greeks(period, rates, volatilities)
        _, adjoint = self._sabr_adjoint(period, g['forward'], volatilities)
        vega = period.notional * period.year_fraction * g['discount_factor'] * g['vega']
        smile_sens = rates.forward_rate_point_sensitivity(period.observation).multiplied_by(
            vega * adjoint.derivatives[0])
        return sticky_strike.combined_with(smile_sens)

    def present_value_sensitivity_model_params_sabr(
        self,
        period: CapletFloorletPeriod,
        rates: RatesProvider,
        volatilities: SabrCapletFloorletVolatilities
    ) -> PointSensitivities:
        """
        Sensitivity to alpha, beta, rho and nu at the parameter expiry.

        Each record is vega times the derivative of the Hagan volatility to
        that parameter. None once the rate has fixed.
        """
        self._validate(period, volatilities)
        if self._state(period, rates) is not TimeState.BEFORE_FIXING:
            return PointSensitivities.none()
        g = self._greeks(period, rates, volatilities)
        expiry, adjoint = self._sabr_adjoint(period, g['forward'], volatilities)
        vega = period.notional * period.year_fraction * g['discount_factor'] * g['vega']
        return PointSensitivities.of(*(
            CapletFloorletSabrSensitivity(volatilities.name, expiry, parameter, period.currency,
                                          vega * adjoint.derivatives[position])
            for parameter, position in ADJOINT_POSITION.items()
        ))


__all__ = [
    "SabrCapletFloorletPeriodPricer",
]
