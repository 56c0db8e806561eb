"""
Binary caplet/floorlet pricer by vertical spread replication.

A binary paying A * yf above K is approximated by N = A / (2 * spread)
caplets struck at K - spread less N caplets struck at K + spread. The
floorlet replication mirrors it. Smaller spreads track the digital payoff
more closely but become numerically unstable near the strike. Overnight
in-arrears binaries replicate with in-arrears vanilla periods.
"""

from typing import Tuple

from ..currency import CurrencyAmount
from ..errors import ConfigurationError
from ..market_state import RatesProvider
from ..product.caplet import CapletFloorletBinaryPeriod, CapletFloorletPeriod
from ..sensitivity import PointSensitivities
from ..settings import DEFAULT_SETTINGS
from ..vol.volatilities import CapletFloorletVolatilities
from .period import CapletFloorletPeriodPricer


class VerticalSpreadBinaryPricer:
    """
    Prices binary periods as a pair of vanilla periods.

    Attributes:
        period_pricer: Vanilla pricer used for both legs of the spread
        spread: Half-width of the strike spread
    """

    def __init__(
        self,
        period_pricer: CapletFloorletPeriodPricer,
        spread: float = DEFAULT_SETTINGS.binary_spread
    ):
        if spread <= 0:
            raise ConfigurationError(f"Binary spread must be positive, got {spread}")
        self.period_pricer = period_pricer
        self.spread = spread

    def vanilla_pair(
        self,
        binary: CapletFloorletBinaryPeriod
    ) -> Tuple[CapletFloorletPeriod, CapletFloorletPeriod]:
        """
        Replicating vanilla periods at K - spread and K + spread.

        Args:
            binary: Binary caplet or floorlet

        Returns:
            (low strike period, high strike period)
        """
        notional = binary.amount / (2.0 * self.spread)
        sign = 1.0 if binary.is_call else -1.0
        low = binary.vanilla(binary.strike - self.spread, sign * notional)
        high = binary.vanilla(binary.strike + self.spread, -sign * notional)
        return low, high

    def present_value(
        self,
        binary: CapletFloorletBinaryPeriod,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> CurrencyAmount:
        low, high = self.vanilla_pair(binary)
        return (self.period_pricer.present_value(low, rates, volatilities)
                + self.period_pricer.present_value(high, rates, volatilities))

    def present_value_sensitivity_rates(
        self,
        binary: CapletFloorletBinaryPeriod,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> PointSensitivities:
        low, high = self.vanilla_pair(binary)
        return self.period_pricer.present_value_sensitivity_rates(low, rates, volatilities).combined_with(
            self.period_pricer.present_value_sensitivity_rates(high, rates, volatilities))

    def present_value_sensitivity_model_params_volatility(
        self,
        binary: CapletFloorletBinaryPeriod,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> PointSensitivities:
        """Volatility sensitivities at both replicating strikes."""
        low, high = self.vanilla_pair(binary)
        pricer = self.period_pricer
        return pricer.present_value_sensitivity_model_params_volatility(low, rates, volatilities).combined_with(
            pricer.present_value_sensitivity_model_params_volatility(high, rates, volatilities))


__all__ = [
    "VerticalSpreadBinaryPricer",
]
