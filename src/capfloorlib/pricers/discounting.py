"""
Discounting pricers for the cash flows traded with a cap or floor.

Provides:
- DiscountingPaymentPricer: premiums and other single payments
- DiscountingSwapLegPricer: fixed and Ibor coupon legs

Cash flows paying before the valuation date are worth zero. A cash flow
paying on the valuation date is still valued, with a discount factor of 1.
"""

from functools import reduce

from ..currency import CurrencyAmount
from ..market_state import RatesProvider
from ..product.swap_leg import FixedRateCouponPeriod, SwapLeg
from ..product.trade import Payment
from ..sensitivity import PointSensitivities


class DiscountingPaymentPricer:
    """Values a single payment by discounting."""

    def present_value(self, payment: Payment, rates: RatesProvider) -> CurrencyAmount:
        if payment.payment_date < rates.valuation_date:
            return CurrencyAmount.zero(payment.currency)
        df = rates.discount_factor(payment.currency, payment.payment_date)
        return CurrencyAmount(payment.currency, payment.amount * df)

    def present_value_sensitivity(self, payment: Payment, rates: RatesProvider) -> PointSensitivities:
        if payment.payment_date < rates.valuation_date:
            return PointSensitivities.none()
        return rates.discount_factor_point_sensitivity(
            payment.currency, payment.payment_date).multiplied_by(payment.amount)

    def current_cash(self, payment: Payment, rates: RatesProvider) -> CurrencyAmount:
        if payment.payment_date != rates.valuation_date:
            return CurrencyAmount.zero(payment.currency)
        return payment.value


class DiscountingSwapLegPricer:
    """
    Values fixed and Ibor coupon legs by discounting.

    Ibor coupons use the fixing once known and the curve forward before.
    """

    def _coupon_amount(self, period, rates: RatesProvider) -> float:
        if isinstance(period, FixedRateCouponPeriod):
            return period.amount()
        return period.amount(rates.forward_rate(period.observation))

    def present_value(self, leg: SwapLeg, rates: RatesProvider) -> CurrencyAmount:
        """
        Present value of the live coupons.

        Args:
            leg: Coupon leg
            rates: Rates market data

        Returns:
            Sum of discounted coupon amounts
        """
        total = 0.0
        for period in leg:
            if period.payment_date < rates.valuation_date:
                continue
            df = rates.discount_factor(period.currency, period.payment_date)
            total += self._coupon_amount(period, rates) * df
        return CurrencyAmount(leg.currency, total)

    def present_value_sensitivity(self, leg: SwapLeg, rates: RatesProvider) -> PointSensitivities:
        """Discounting sensitivity of every live coupon plus the forward sensitivity of Ibor coupons."""
        result = []
        for period in leg:
            if period.payment_date < rates.valuation_date:
                continue
            result.append(rates.discount_factor_point_sensitivity(
                period.currency, period.payment_date).multiplied_by(self._coupon_amount(period, rates)))
            if not isinstance(period, FixedRateCouponPeriod):
                df = rates.discount_factor(period.currency, period.payment_date)
                result.append(rates.forward_rate_point_sensitivity(period.observation).multiplied_by(
                    period.notional * period.year_fraction * df))
        return reduce(PointSensitivities.combined_with, result, PointSensitivities.none())

    def current_cash(self, leg: SwapLeg, rates: RatesProvider) -> CurrencyAmount:
        total = sum(self._coupon_amount(p, rates) for p in leg if p.payment_date == rates.valuation_date)
        return CurrencyAmount(leg.currency, total)


__all__ = [
    "DiscountingPaymentPricer",
    "DiscountingSwapLegPricer",
]
