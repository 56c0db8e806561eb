"""
Bump-and-reprice parameter sensitivities.

Each node of each curve (or volatility surface/curve) is shifted up and
down and the pricing function re-evaluated. The central difference is
returned in the same CurrencyParameterSensitivities shape as the analytic
resolvers, so both can be compared node by node.
"""

import logging
from typing import Callable

import numpy as np

from ..currency import CurrencyAmount
from ..errors import ConfigurationError
from ..market_state import RatesProvider
from ..sensitivity import CurrencyParameterSensitivities, CurrencyParameterSensitivity
from ..settings import DEFAULT_SETTINGS
from ..vol.volatilities import CapletFloorletVolatilities

logger = logging.getLogger(__name__)


class FiniteDifferenceCalculator:
    """
    Central finite difference calculator.

    Attributes:
        shift: Additive bump applied to each parameter
    """

    def __init__(self, shift: float = DEFAULT_SETTINGS.fd_shift):
        if shift <= 0:
            raise ConfigurationError(f"Finite difference shift must be positive, got {shift}")
        self.shift = shift

    def _node_differences(self, parameters, reprice: Callable[[object], CurrencyAmount]) -> np.ndarray:
        values = np.zeros(parameters.parameter_count)
        for i in range(parameters.parameter_count):
            up = reprice(parameters.shift_node(i, self.shift)).amount
            down = reprice(parameters.shift_node(i, -self.shift)).amount
            values[i] = (up - down) / (2.0 * self.shift)
        return values

    def sensitivity_rates(
        self,
        rates: RatesProvider,
        pricing_fn: Callable[[RatesProvider], CurrencyAmount]
    ) -> CurrencyParameterSensitivities:
        """
        Sensitivity to every zero rate node of every curve in the provider.

        Args:
            rates: Base rates market data
            pricing_fn: Present value as a function of the rates provider

        Returns:
            One parameter sensitivity per curve
        """
        currency = pricing_fn(rates).currency
        result = CurrencyParameterSensitivities.empty()
        for name, curve in rates.curves():
            logger.debug("Bumping %d nodes of curve %s by %g", curve.parameter_count, name, self.shift)
            values = self._node_differences(curve, lambda bumped: pricing_fn(rates.with_curve(name, bumped)))
            result = result.combined_with(
                CurrencyParameterSensitivity(name, currency, tuple(curve.labels), values))
        return result

    def sensitivity_volatilities(
        self,
        volatilities: CapletFloorletVolatilities,
        pricing_fn: Callable[[CapletFloorletVolatilities], CurrencyAmount]
    ) -> CurrencyParameterSensitivities:
        """
        Sensitivity to every node of the volatility parameters.

        Args:
            volatilities: Base volatilities
            pricing_fn: Present value as a function of the volatilities

        Returns:
            One parameter sensitivity per surface or parameter curve
        """
        currency = pricing_fn(volatilities).currency
        result = CurrencyParameterSensitivities.empty()
        for name, parameters in volatilities.parameters().items():
            logger.debug("Bumping %d nodes of %s by %g", parameters.parameter_count, name, self.shift)
            values = self._node_differences(
                parameters, lambda bumped: pricing_fn(volatilities.with_parameters(name, bumped)))
            result = result.combined_with(
                CurrencyParameterSensitivity(name, currency, tuple(parameters.labels), values))
        return result


__all__ = [
    "FiniteDifferenceCalculator",
]
