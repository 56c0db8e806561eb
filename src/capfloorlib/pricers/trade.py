"""
Cap/floor trade pricer.

Combines the option leg, the optional pay leg and the optional premium
into multi-currency results.
"""

from typing import Optional

from ..currency import MultiCurrencyAmount
from ..market_state import RatesProvider
from ..product.trade import CapFloorTrade
from ..sensitivity import PointSensitivities
from ..vol.volatilities import CapletFloorletVolatilities
from .discounting import DiscountingPaymentPricer, DiscountingSwapLegPricer
from .leg import CapFloorLegPricer


class CapFloorTradePricer:
    """
    Prices cap/floor trades.

    Attributes:
        leg_pricer: Pricer for the cap/floor leg
        swap_leg_pricer: Pricer for the pay leg
        payment_pricer: Pricer for the premium
    """

    def __init__(
        self,
        leg_pricer: CapFloorLegPricer,
        swap_leg_pricer: Optional[DiscountingSwapLegPricer] = None,
        payment_pricer: Optional[DiscountingPaymentPricer] = None
    ):
        self.leg_pricer = leg_pricer
        self.swap_leg_pricer = swap_leg_pricer or DiscountingSwapLegPricer()
        self.payment_pricer = payment_pricer or DiscountingPaymentPricer()

    def present_value(
        self,
        trade: CapFloorTrade,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> MultiCurrencyAmount:
        """
        Present value of the option leg, pay leg and premium.

        Args:
            trade: Cap/floor trade
            rates: Rates market data
            volatilities: Volatilities accepted by the leg pricer

        Returns:
            Present value by currency
        """
        product = trade.product
        pv = MultiCurrencyAmount.of(self.leg_pricer.present_value(product.cap_floor_leg, rates, volatilities))
        if product.pay_leg is not None:
            pv = pv.plus(self.swap_leg_pricer.present_value(product.pay_leg, rates))
        if trade.premium is not None:
            pv = pv.plus(self.payment_pricer.present_value(trade.premium, rates))
        return pv

    def present_value_sensitivity_rates(
        self,
        trade: CapFloorTrade,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> PointSensitivities:
        product = trade.product
        sens = self.leg_pricer.present_value_sensitivity_rates(product.cap_floor_leg, rates, volatilities)
        if product.pay_leg is not None:
            sens = sens.combined_with(self.swap_leg_pricer.present_value_sensitivity(product.pay_leg, rates))
        if trade.premium is not None:
            sens = sens.combined_with(self.payment_pricer.present_value_sensitivity(trade.premium, rates))
        return sens

    def present_value_sensitivity_model_params_volatility(
        self,
        trade: CapFloorTrade,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> PointSensitivities:
        """Only the option leg depends on volatility."""
        return self.leg_pricer.present_value_sensitivity_model_params_volatility(
            trade.product.cap_floor_leg, rates, volatilities)

    def currency_exposure(
        self,
        trade: CapFloorTrade,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> MultiCurrencyAmount:
        sens = self.present_value_sensitivity_rates(trade, rates, volatilities)
        return rates.currency_exposure(sens) + self.present_value(trade, rates, volatilities)

    def current_cash(self, trade: CapFloorTrade, rates: RatesProvider) -> MultiCurrencyAmount:
        """Cash exchanged on the valuation date, premium included."""
        product = trade.product
        cash = MultiCurrencyAmount.of(self.leg_pricer.current_cash(product.cap_floor_leg, rates))
        if product.pay_leg is not None:
            cash = cash.plus(self.swap_leg_pricer.current_cash(product.pay_leg, rates))
        if trade.premium is not None:
            cash = cash.plus(self.payment_pricer.current_cash(trade.premium, rates))
        return cash


__all__ = [
    "CapFloorTradePricer",
]
