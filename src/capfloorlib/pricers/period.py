"""
Caplet/floorlet period pricers.

A caplet on notional N with accrual yf paying at t_p is worth

    V = N * yf * DF(t_p) * ModelPrice(F, K, T, sigma)

where F is the Ibor forward, K the strike and T the ACT/365F time to the
fixing date. Once the rate has fixed the option collapses to its
discounted payoff, and after payment it is worth nothing.

Provides:
- TimeState: lifecycle of a period relative to the valuation date
- CapletFloorletPeriodPricer: common state machine
- BlackCapletFloorletPeriodPricer: Black'76, optionally shifted
- NormalCapletFloorletPeriodPricer: Bachelier
"""

import logging
from datetime import date
from enum import Enum
from typing import ClassVar, Dict, FrozenSet, Tuple

from ..currency import CurrencyAmount
from ..errors import ExpiredOptionError, InvalidModelError
from ..market_state import RatesProvider
from ..options.base_models import bachelier_greeks, bachelier_price, black76_greeks, black76_price
from ..product.caplet import CapletFloorletPeriod, OvernightInArrearsCapletFloorletPeriod
from ..sensitivity import CapletFloorletSensitivity, PointSensitivities
from ..vol.volatilities import CapletFloorletVolatilities, ModelFamily

logger = logging.getLogger(__name__)


class TimeState(Enum):
    """Position of the valuation date in a period's lifecycle."""
    BEFORE_FIXING = "BeforeFixing"
    ON_FIXING = "OnFixing"
    AFTER_FIXING = "AfterFixing"
    AFTER_PAYMENT = "AfterPayment"


def time_state(period: CapletFloorletPeriod, valuation_date: date) -> TimeState:
    """
    Classify a period against the valuation date.

    Args:
        period: Caplet or floorlet
        valuation_date: Valuation date

    Returns:
        TimeState
    """
    if valuation_date < period.fixing_date:
        return TimeState.BEFORE_FIXING
    if valuation_date == period.fixing_date:
        return TimeState.ON_FIXING
    if valuation_date <= period.payment_date:
        return TimeState.AFTER_FIXING
    return TimeState.AFTER_PAYMENT


class CapletFloorletPeriodPricer:
    """
    Prices a single caplet or floorlet.

    Subclasses supply the option model through _model_price and
    _model_greeks and declare the volatility families they accept.
    Every public method checks the volatility family and the period kind
    (Ibor in advance or overnight in arrears) first and raises
    InvalidModelError on a mismatch.
    """

    accepted_families: ClassVar[FrozenSet[ModelFamily]] = frozenset()
    in_arrears: ClassVar[bool] = False

    def _validate(self, period: CapletFloorletPeriod, volatilities: CapletFloorletVolatilities) -> None:
        if isinstance(period, OvernightInArrearsCapletFloorletPeriod) != self.in_arrears:
            raise InvalidModelError(f"{type(self).__name__} cannot price {type(period).__name__}")
        if volatilities.model_family not in self.accepted_families:
            accepted = sorted(f.value for f in self.accepted_families)
            raise InvalidModelError(
                f"{type(self).__name__} requires volatilities of family {accepted}, "
                f"got {volatilities.model_family.value}")

    def _model_price(
        self,
        forward: float,
        strike: float,
        expiry: float,
        volatility: float,
        is_call: bool,
        shift: float
    ) -> float:
        """Undiscounted unit option price."""
        raise NotImplementedError

    def _model_greeks(
        self,
        forward: float,
        strike: float,
        expiry: float,
        volatility: float,
        is_call: bool,
        shift: float
    ) -> Dict[str, float]:
        """Undiscounted unit delta, gamma, vega and theta."""
        raise NotImplementedError

    def _option_volatility(
        self,
        period: CapletFloorletPeriod,
        forward: float,
        volatilities: CapletFloorletVolatilities
    ) -> Tuple[float, float, float]:
        """
        Expiry and volatility fed to the option model.

        Returns:
            (expiry, model volatility, derivative of the model volatility to
            the volatility read from the surface)
        """
        expiry = volatilities.relative_time(period.fixing_date)
        return expiry, volatilities.volatility(expiry, period.strike, forward), 1.0

    def _state(self, period: CapletFloorletPeriod, rates: RatesProvider) -> TimeState:
        state = time_state(period, rates.valuation_date)
        logger.debug("Period fixing %s paying %s is %s at %s", period.fixing_date,
                     period.payment_date, state.value, rates.valuation_date)
        return state

    def _greeks(
        self,
        period: CapletFloorletPeriod,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> Dict[str, float]:
        """Model greeks before fixing, together with the inputs that produced them."""
        forward = rates.forward_rate(period.observation)
        expiry, volatility, volatility_scale = self._option_volatility(period, forward, volatilities)
        greeks = self._model_greeks(forward, period.strike, expiry, volatility, period.is_call,
                                    volatilities.shift(expiry))
        greeks.update(
            forward=forward,
            expiry=expiry,
            volatility=volatility,
            volatility_scale=volatility_scale,
            price=self._model_price(forward, period.strike, expiry, volatility, period.is_call,
                                    volatilities.shift(expiry)),
            discount_factor=rates.discount_factor(period.currency, period.payment_date),
        )
        return greeks

    @staticmethod
    def _fixed_delta(period: CapletFloorletPeriod, rate: float, discount_factor: float) -> float:
        """Delta of the collapsed payoff: the signed unit coupon when in the money."""
        if not period.is_in_the_money(rate):
            return 0.0
        sign = 1.0 if period.is_call else -1.0
        return sign * period.notional * period.year_fraction * discount_factor

    def present_value(
        self,
        period: CapletFloorletPeriod,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> CurrencyAmount:
        """
        Present value of the period.

        Args:
            period: Caplet or floorlet
            rates: Rates market data
            volatilities: Volatilities of an accepted family

        Returns:
            Present value in the period currency
        """
        self._validate(period, volatilities)
        state = self._state(period, rates)
        if state is TimeState.AFTER_PAYMENT:
            return CurrencyAmount.zero(period.currency)
        if state is TimeState.BEFORE_FIXING:
            g = self._greeks(period, rates, volatilities)
            scale = period.notional * period.year_fraction * g['discount_factor']
            return CurrencyAmount(period.currency, scale * g['price'])
        rate = rates.forward_rate(period.observation)
        df = rates.discount_factor(period.currency, period.payment_date)
        return CurrencyAmount(period.currency, df * period.payoff(rate))

    def present_value_delta(
        self,
        period: CapletFloorletPeriod,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> CurrencyAmount:
        """Derivative of the present value with respect to the forward."""
        self._validate(period, volatilities)
        state = self._state(period, rates)
        if state is TimeState.BEFORE_FIXING:
            g = self._greeks(period, rates, volatilities)
            scale = period.notional * period.year_fraction * g['discount_factor']
            return CurrencyAmount(period.currency, scale * g['delta'])
        if state is TimeState.ON_FIXING:
            rate = rates.forward_rate(period.observation)
            df = rates.discount_factor(period.currency, period.payment_date)
            return CurrencyAmount(period.currency, self._fixed_delta(period, rate, df))
        return CurrencyAmount.zero(period.currency)

    def present_value_gamma(
        self,
        period: CapletFloorletPeriod,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> CurrencyAmount:
        """Second derivative of the present value with respect to the forward."""
        self._validate(period, volatilities)
        if self._state(period, rates) is not TimeState.BEFORE_FIXING:
            return CurrencyAmount.zero(period.currency)
        g = self._greeks(period, rates, volatilities)
        scale = period.notional * period.year_fraction * g['discount_factor']
        return CurrencyAmount(period.currency, scale * g['gamma'])

    def present_value_theta(
        self,
        period: CapletFloorletPeriod,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> CurrencyAmount:
        """Driftless theta: time decay with the forward held fixed."""
        self._validate(period, volatilities)
        if self._state(period, rates) is not TimeState.BEFORE_FIXING:
            return CurrencyAmount.zero(period.currency)
        g = self._greeks(period, rates, volatilities)
        scale = period.notional * period.year_fraction * g['discount_factor']
        return CurrencyAmount(period.currency, scale * g['theta'])

    def present_value_sensitivity_rates(
        self,
        period: CapletFloorletPeriod,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> PointSensitivities:
        """
        Point sensitivity of the present value to the rates curves.

        The volatility is held fixed (sticky strike). Before fixing the
        result has a forward component and a discounting component. Once
        fixed only the payoff is discounted, with a forward component while
        the fixing is still projected from the curve.

        Args:
            period: Caplet or floorlet
            rates: Rates market data
            volatilities: Volatilities of an accepted family

        Returns:
            Point sensitivities
        """
        self._validate(period, volatilities)
        state = self._state(period, rates)
        if state is TimeState.AFTER_PAYMENT:
            return PointSensitivities.none()

        if state is TimeState.BEFORE_FIXING:
            g = self._greeks(period, rates, volatilities)
            unit = period.notional * period.year_fraction
            forward_sens = rates.forward_rate_point_sensitivity(period.observation).multiplied_by(
                unit * g['discount_factor'] * g['delta'])
            discount_sens = rates.discount_factor_point_sensitivity(
                period.currency, period.payment_date).multiplied_by(unit * g['price'])
            return forward_sens.combined_with(discount_sens)

        rate = rates.forward_rate(period.observation)
        payoff = period.payoff(rate)
        if payoff == 0.0:
            return PointSensitivities.none()
        df = rates.discount_factor(period.currency, period.payment_date)
        discount_sens = rates.discount_factor_point_sensitivity(
            period.currency, period.payment_date).multiplied_by(payoff)
        # empty once the fixing is published
        forward_sens = rates.forward_rate_point_sensitivity(period.observation).multiplied_by(
            self._fixed_delta(period, rate, df))
        return discount_sens.combined_with(forward_sens)

    def present_value_sensitivity_model_params_volatility(
        self,
        period: CapletFloorletPeriod,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> PointSensitivities:
        """Vega as a single volatility point sensitivity; none once fixed."""
        self._validate(period, volatilities)
        if self._state(period, rates) is not TimeState.BEFORE_FIXING:
            return PointSensitivities.none()
        g = self._greeks(period, rates, volatilities)
        vega = period.notional * period.year_fraction * g['discount_factor'] * g['vega'] * g['volatility_scale']
        return PointSensitivities.of(CapletFloorletSensitivity(
            volatilities.name, g['expiry'], period.strike, g['forward'], period.currency, vega))

    def implied_volatility(
        self,
        period: CapletFloorletPeriod,
        rates: RatesProvider,
        volatilities: CapletFloorletVolatilities
    ) -> float:
        """
        Volatility used to price the period.

        Raises:
            ExpiredOptionError: If the fixing date is before the valuation date
        """
        self._validate(period, volatilities)
        state = self._state(period, rates)
        if state in (TimeState.AFTER_FIXING, TimeState.AFTER_PAYMENT):
            raise ExpiredOptionError(
                f"Option fixing on {period.fixing_date} has expired at {rates.valuation_date}")
        forward = rates.forward_rate(period.observation)
        return self._option_volatility(period, forward, volatilities)[1]

    def forward_rate(self, period: CapletFloorletPeriod, rates: RatesProvider) -> float:
        """Ibor rate of the period: the fixing once known, the curve forward before."""
        return rates.forward_rate(period.observation)

    def current_cash(self, period: CapletFloorletPeriod, rates: RatesProvider) -> CurrencyAmount:
        """Payoff when the valuation date is the payment date, zero otherwise."""
        if rates.valuation_date != period.payment_date:
            return CurrencyAmount.zero(period.currency)
        return CurrencyAmount(period.currency, period.payoff(rates.forward_rate(period.observation)))


class BlackCapletFloorletPeriodPricer(CapletFloorletPeriodPricer):
    """
    Black'76 pricer.

    Accepts Black and shifted Black volatilities; the shift (zero for plain
    Black) is added to both forward and strike.
    """

    accepted_families = frozenset({ModelFamily.BLACK, ModelFamily.SHIFTED_BLACK})

    def _model_price(self, forward, strike, expiry, volatility, is_call, shift):
        return black76_price(forward + shift, strike + shift, expiry, volatility, is_call)

    def _model_greeks(self, forward, strike, expiry, volatility, is_call, shift):
        return black76_greeks(forward + shift, strike + shift, expiry, volatility, 1.0, is_call)


class NormalCapletFloorletPeriodPricer(CapletFloorletPeriodPricer):
    """Bachelier pricer for normal volatilities."""

    accepted_families = frozenset({ModelFamily.NORMAL})

    def _model_price(self, forward, strike, expiry, volatility, is_call, shift):
        return bachelier_price(forward, strike, expiry, volatility, is_call)

    def _model_greeks(self, forward, strike, expiry, volatility, is_call, shift):
        return bachelier_greeks(forward, strike, expiry, volatility, 1.0, is_call)


__all__ = [
    "TimeState",
    "time_state",
    "CapletFloorletPeriodPricer",
    "BlackCapletFloorletPeriodPricer",
    "NormalCapletFloorletPeriodPricer",
]
