"""
Cap/floor leg pricer.

Sums period results over a leg. With max_workers set, periods are priced
on a thread pool; results are reduced in period order so totals do not
depend on scheduling.

Provides:
- CapFloorLegPricer: any period pricer
- SabrCapFloorLegPricer: adds the SABR sticky model and parameter risk
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import reduce
from typing import Callable, Dict, List, Optional, TypeVar

from ..currency import CurrencyAmount
from ..market_state import RatesProvider
from ..product.caplet import CapletFloorletPeriod
from ..product.leg import CapFloorLeg
from ..sensitivity import PointSensitivities
from ..settings import DEFAULT_SETTINGS
from ..vol.sabr_volatilities import SabrCapletFloorletVolatilities
from ..vol.volatilities import CapletFloorletVolatilities
from .period import CapletFloorletPeriodPricer
from .sabr import SabrCapletFloorletPeriodPricer

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CapFloorLegPricer:
    """
    Prices a cap/floor leg period by period.

    Attributes:
        period_pricer: Pricer for the individual caplets/floorlets
        max_workers: Thread pool size, None for sequential pricing
    """

    def __init__(
        self,
        period_pricer: CapletFloorletPeriodPricer,
        max_workers: Optional[int] = DEFAULT_SETTINGS.max_workers
    ):
        self.period_pricer = period_pricer
        self.max_workers = max_workers

    def _map(self, fn: Callable[[CapletFloorletPeriod], T], periods) -> List[T]:
        periods = list(periods)
        if self.max_workers is None or len(periods) < 2:
            return [fn(p) for p in periods]
        logger.debug("Pricing %d periods on %d workers", len(periods), self.max_workers)
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(fn, periods))

    def _sum_amounts(self, leg: CapFloorLeg, fn: Callable[[CapletFloorletPeriod], CurrencyAmount]) -> CurrencyAmount:
        return reduce(CurrencyAmount.plus, self._map(fn, leg.periods), CurrencyAmount.zero(leg.currency))

    def _sum_sensitivities(
        self,
        leg: CapFloorLeg,
        fn: Callable[[CapletFloorletPeriod], PointSensitivities]
    ) -> PointSensitivities:
        return reduce(PointSensitivities.combined_with, self._map(fn, leg.periods), PointSensitivities.none())

    def present_value(
        self,
        leg: CapFloorLeg,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> CurrencyAmount:
        """
        Present value of the leg.

        Args:
            leg: Cap/floor leg
            rates: Rates market data
            volatilities: Volatilities accepted by the period pricer

        Returns:
            Sum of the period present values
        """
        return self._sum_amounts(leg, lambda p: self.period_pricer.present_value(p, rates, volatilities))

    def present_value_delta(self, leg, rates, volatilities) -> CurrencyAmount:
        return self._sum_amounts(leg, lambda p: self.period_pricer.present_value_delta(p, rates, volatilities))

    def present_value_gamma(self, leg, rates, volatilities) -> CurrencyAmount:
        return self._sum_amounts(leg, lambda p: self.period_pricer.present_value_gamma(p, rates, volatilities))

    def present_value_theta(self, leg, rates, volatilities) -> CurrencyAmount:
        return self._sum_amounts(leg, lambda p: self.period_pricer.present_value_theta(p, rates, volatilities))

    def present_value_sensitivity_rates(
        self,
        leg: CapFloorLeg,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> PointSensitivities:
        return self._sum_sensitivities(
            leg, lambda p: self.period_pricer.present_value_sensitivity_rates(p, rates, volatilities))

    def present_value_sensitivity_model_params_volatility(
        self,
        leg: CapFloorLeg,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> PointSensitivities:
        return self._sum_sensitivities(
            leg, lambda p: self.period_pricer.present_value_sensitivity_model_params_volatility(
                p, rates, volatilities))

    def present_value_caplet_floorlet_periods(
        self,
        leg: CapFloorLeg,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> Dict[CapletFloorletPeriod, CurrencyAmount]:
        """Present value of each period, in leg order."""
        values = self._map(lambda p: self.period_pricer.present_value(p, rates, volatilities), leg.periods)
        return dict(zip(leg.periods, values))

    def current_cash(self, leg: CapFloorLeg, rates: RatesProvider) -> CurrencyAmount:
        """Cash paid by the leg on the valuation date."""
        return self._sum_amounts(leg, lambda p: self.period_pricer.current_cash(p, rates))

    def implied_volatilities(
        self,
        leg: CapFloorLeg,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> Dict[CapletFloorletPeriod, float]:
        """Implied volatility of each period that fixes after the valuation date."""
        periods = [p for p in leg.periods if p.fixing_date > rates.valuation_date]
        values = self._map(lambda p: self.period_pricer.implied_volatility(p, rates, volatilities), periods)
        return dict(zip(periods, values))

    def forward_rates(self, leg: CapFloorLeg, rates: RatesProvider) -> Dict[CapletFloorletPeriod, float]:
        """Forward rate of each period that fixes on or after the valuation date."""
        periods = [p for p in leg.periods if p.fixing_date >= rates.valuation_date]
        values = self._map(lambda p: self.period_pricer.forward_rate(p, rates), periods)
        return dict(zip(periods, values))


class SabrCapFloorLegPricer(CapFloorLegPricer):
    """
    Cap/floor leg pricer for SABR volatilities.

    Attributes:
        period_pricer: SABR pricer for the individual caplets/floorlets
        max_workers: Thread pool size, None for sequential pricing
    """

    def __init__(
        self,
        period_pricer: Optional[SabrCapletFloorletPeriodPricer] = None,
        max_workers: Optional[int] = DEFAULT_SETTINGS.max_workers
    ):
        super().__init__(period_pricer or SabrCapletFloorletPeriodPricer(), max_workers)

    def present_value_sensitivity_rates_sticky_model(
        self,
        leg: CapFloorLeg,
        rates: RatesProvider,
        volatilities: SabrCapletFloorletVolatilities
    ) -> PointSensitivities:
        """Rates sensitivity of the leg with the SABR parameters held fixed."""
        return self._sum_sensitivities(
            leg, lambda p: self.period_pricer.present_value_sensitivity_rates_sticky_model(p, rates, volatilities))

    def present_value_sensitivity_model_params_sabr(
        self,
        leg: CapFloorLeg,
        rates: RatesProvider,
        volatilities: SabrCapletFloorletVolatilities
    ) -> PointSensitivities:
        """
        Sensitivity of the leg to alpha, beta, rho and nu.

        Args:
            leg: Cap/floor leg
            rates: Rates market data
            volatilities: SABR volatilities

        Returns:
            SABR parameter point sensitivities of every unfixed period
        """
        return self._sum_sensitivities(
            leg, lambda p: self.period_pricer.present_value_sensitivity_model_params_sabr(p, rates, volatilities))


__all__ = [
    "CapFloorLegPricer",
    "SabrCapFloorLegPricer",
]
