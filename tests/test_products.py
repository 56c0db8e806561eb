"""
Tests for caplet periods, legs and trades.
"""

import pytest
from datetime import date

from capfloorlib.errors import ConfigurationError
from capfloorlib.index import EUR_EURIBOR_3M, USD_LIBOR_3M, IborRateObservation
from capfloorlib.product import (
    CapFloor,
    CapFloorLeg,
    CapFloorTrade,
    CapletFloorletBinaryPeriod,
    CapletFloorletPeriod,
    FixedRateCouponPeriod,
    IborCouponPeriod,
    Payment,
    PutCall,
    SwapLeg,
)

from conftest import FIXING_DATE, NOTIONAL, STRIKE, make_caplet

OBS = IborRateObservation.of(EUR_EURIBOR_3M, FIXING_DATE)


class TestCapletFloorletPeriod:
    """Construction and payoff of vanilla periods."""

    def test_defaults(self, caplet):
        assert caplet.payment_date == caplet.end_date
        assert caplet.currency == "EUR"
        assert caplet.fixing_date == FIXING_DATE
        assert caplet.index == EUR_EURIBOR_3M
        assert caplet.strike == STRIKE

    def test_put_call(self, caplet, floorlet):
        assert caplet.put_call is PutCall.CALL and caplet.is_call
        assert floorlet.put_call is PutCall.PUT and not floorlet.is_call

    def test_both_strikes_rejected(self):
        with pytest.raises(ConfigurationError):
            CapletFloorletPeriod(NOTIONAL, OBS.effective_date, OBS.maturity_date, 0.25, OBS,
                                 caplet=0.01, floorlet=0.01)

    def test_no_strike_rejected(self):
        with pytest.raises(ConfigurationError):
            CapletFloorletPeriod(NOTIONAL, OBS.effective_date, OBS.maturity_date, 0.25, OBS)

    def test_end_before_start_rejected(self):
        with pytest.raises(ConfigurationError):
            CapletFloorletPeriod(NOTIONAL, OBS.maturity_date, OBS.effective_date, 0.25, OBS, caplet=0.01)

    def test_caplet_payoff(self, caplet):
        assert caplet.payoff(0.013) == pytest.approx(NOTIONAL * 0.25 * 0.003)
        assert caplet.payoff(0.008) == 0.0

    def test_floorlet_payoff(self, floorlet):
        assert floorlet.payoff(0.008) == pytest.approx(NOTIONAL * 0.25 * 0.002)
        assert floorlet.payoff(0.013) == 0.0

    def test_short_payoff(self, caplet):
        """A short caplet pays the negated payoff."""
        assert caplet.with_notional(-NOTIONAL).payoff(0.013) == -caplet.payoff(0.013)

    def test_with_strike_keeps_type(self, caplet, floorlet):
        assert caplet.with_strike(0.02).caplet == 0.02
        assert floorlet.with_strike(0.02).floorlet == 0.02
        assert floorlet.with_strike(0.02).caplet is None

    def test_hashable(self, caplet):
        assert {caplet: 1}[make_caplet()] == 1


class TestBinaryPeriod:
    """Digital payoff."""

    def test_payoff_is_step(self):
        binary = CapletFloorletBinaryPeriod(NOTIONAL, OBS.effective_date, OBS.maturity_date, 0.25, OBS,
                                            caplet=STRIKE)
        assert binary.payoff(0.0101) == pytest.approx(NOTIONAL * 0.25)
        assert binary.payoff(0.5) == pytest.approx(NOTIONAL * 0.25)
        assert binary.payoff(STRIKE) == 0.0
        assert binary.payoff(0.005) == 0.0

    def test_floorlet_payoff(self):
        binary = CapletFloorletBinaryPeriod(NOTIONAL, OBS.effective_date, OBS.maturity_date, 0.25, OBS,
                                            floorlet=STRIKE)
        assert binary.payoff(0.005) == pytest.approx(NOTIONAL * 0.25)
        assert binary.payoff(0.02) == 0.0
        assert binary.with_amount(-NOTIONAL).payoff(0.005) == pytest.approx(-NOTIONAL * 0.25)

    def test_invalid_terms(self):
        with pytest.raises(ConfigurationError):
            CapletFloorletBinaryPeriod(NOTIONAL, OBS.effective_date, OBS.maturity_date, 0.25, OBS)


class TestCapFloorLeg:
    """Leg construction and validation."""

    def test_build_quarterly_cap(self):
        leg = CapFloorLeg.build(EUR_EURIBOR_3M, date(2011, 3, 17), date(2016, 3, 17), 0.015, 1.0e8)
        assert len(leg) == 20
        assert leg.currency == "EUR"
        assert leg.index == EUR_EURIBOR_3M
        assert leg.start_date == date(2011, 3, 17)
        assert all(p.is_call for p in leg)
        for p in leg:
            assert p.fixing_date == EUR_EURIBOR_3M.fixing_date(p.start_date)
            assert p.payment_date == p.end_date
        periods = list(leg)
        for prev, period in zip(periods, periods[1:]):
            assert period.start_date == prev.end_date

    def test_build_with_holidays(self):
        """Fixing and deposit dates follow the leg calendar."""
        holidays = {date(2011, 3, 15), date(2011, 6, 16)}
        leg = CapFloorLeg.build(EUR_EURIBOR_3M, date(2011, 3, 17), date(2012, 3, 17), 0.015, 1.0e8,
                                holidays=holidays)
        first, second = leg.periods[0], leg.periods[1]
        assert first.fixing_date == date(2011, 3, 14)
        assert second.fixing_date == date(2011, 6, 14)
        assert first.observation.effective_date == date(2011, 3, 17)
        assert second.observation.effective_date == date(2011, 6, 17)
        assert all(p.fixing_date not in holidays for p in leg)

    def test_build_floor(self):
        leg = CapFloorLeg.build(EUR_EURIBOR_3M, date(2011, 3, 17), date(2012, 3, 17), 0.015, 1.0e8,
                                is_cap=False, frequency=2)
        assert len(leg) == 2
        assert all(p.put_call is PutCall.PUT for p in leg)

    def test_empty_leg(self):
        with pytest.raises(ConfigurationError):
            CapFloorLeg(())

    def test_overlapping_periods(self, caplet):
        with pytest.raises(ConfigurationError):
            CapFloorLeg((caplet, caplet))

    def test_mixed_index(self, caplet):
        usd_obs = IborRateObservation.of(USD_LIBOR_3M, date(2011, 4, 1))
        usd = CapletFloorletPeriod(NOTIONAL, usd_obs.effective_date, usd_obs.maturity_date, 0.25, usd_obs,
                                   caplet=STRIKE, currency="EUR")
        with pytest.raises(ConfigurationError):
            CapFloorLeg((caplet, usd))

    def test_mixed_currency(self, caplet):
        later = IborRateObservation.of(EUR_EURIBOR_3M, date(2011, 4, 1))
        other = CapletFloorletPeriod(NOTIONAL, later.effective_date, later.maturity_date, 0.25, later,
                                     caplet=STRIKE, currency="USD")
        with pytest.raises(ConfigurationError):
            CapFloorLeg((caplet, other))


class TestSwapLeg:
    """Coupon legs."""

    def test_fixed_leg(self):
        leg = SwapLeg.fixed("EUR", date(2011, 3, 17), date(2012, 3, 17), 0.02, -1.0e6)
        coupons = list(leg)
        assert len(coupons) == 4
        assert all(isinstance(c, FixedRateCouponPeriod) for c in coupons)
        assert coupons[0].amount() == pytest.approx(-1.0e6 * 0.02 * coupons[0].year_fraction)

    def test_ibor_leg(self):
        leg = SwapLeg.ibor(EUR_EURIBOR_3M, date(2011, 3, 17), date(2012, 3, 17), 1.0e6, spread=0.001)
        coupon = next(iter(leg))
        assert isinstance(coupon, IborCouponPeriod)
        assert coupon.observation.fixing_date == EUR_EURIBOR_3M.fixing_date(coupon.start_date)
        assert coupon.amount(0.02) == pytest.approx(1.0e6 * 0.021 * coupon.year_fraction)

    def test_ibor_leg_with_holidays(self):
        leg = SwapLeg.ibor(EUR_EURIBOR_3M, date(2011, 3, 17), date(2012, 3, 17), 1.0e6,
                           holidays={date(2011, 3, 15)})
        assert next(iter(leg)).observation.fixing_date == date(2011, 3, 14)

    def test_empty_leg(self):
        with pytest.raises(ConfigurationError):
            SwapLeg(())

    def test_mixed_currency(self):
        eur = FixedRateCouponPeriod("EUR", 1.0, date(2011, 1, 1), date(2011, 4, 1), date(2011, 4, 1), 0.25, 0.01)
        usd = FixedRateCouponPeriod("USD", 1.0, date(2011, 4, 1), date(2011, 7, 1), date(2011, 7, 1), 0.25, 0.01)
        with pytest.raises(ConfigurationError):
            SwapLeg((eur, usd))


class TestTrade:
    """Trade assembly."""

    def test_trade_defaults(self, caplet):
        trade = CapFloorTrade(CapFloor(CapFloorLeg((caplet,))))
        assert trade.premium is None
        assert trade.product.pay_leg is None

    def test_payment_value(self):
        payment = Payment("EUR", -1000.0, date(2008, 8, 20))
        assert payment.value.currency == "EUR"
        assert payment.value.amount == -1000.0
