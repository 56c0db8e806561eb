"""
Tests for the vertical spread binary pricer.
"""

import pytest
from scipy.stats import norm
import numpy as np

from capfloorlib.errors import ConfigurationError
from capfloorlib.index import EUR_EURIBOR_3M, IborRateObservation
from capfloorlib.pricers import BlackCapletFloorletPeriodPricer, VerticalSpreadBinaryPricer
from capfloorlib.product import CapletFloorletBinaryPeriod
from capfloorlib.risk import FiniteDifferenceCalculator
from capfloorlib.vol import BlackCapletFloorletVolatilities, ConstantSurface

from conftest import (
    AFTER_FIXING_DATE,
    AFTER_PAYMENT_DATE,
    FIXING_DATE,
    FIXING_RATE,
    NOTIONAL,
    STRIKE,
    VAL_DATE,
    make_black_vols,
    make_rates,
)

SPREAD = 2.0e-4
BINARY = VerticalSpreadBinaryPricer(BlackCapletFloorletPeriodPricer(), SPREAD)
OBS = IborRateObservation.of(EUR_EURIBOR_3M, FIXING_DATE)


def make_binary(amount=NOTIONAL, strike=STRIKE, is_cap=True):
    return CapletFloorletBinaryPeriod(
        amount=amount,
        start_date=OBS.effective_date,
        end_date=OBS.maturity_date,
        year_fraction=OBS.year_fraction,
        observation=OBS,
        caplet=strike if is_cap else None,
        floorlet=None if is_cap else strike
    )


class TestVanillaPair:
    """Replicating vanilla periods."""

    def test_caplet_pair(self):
        low, high = BINARY.vanilla_pair(make_binary())
        notional = NOTIONAL / (2 * SPREAD)
        assert low.caplet == pytest.approx(STRIKE - SPREAD)
        assert high.caplet == pytest.approx(STRIKE + SPREAD)
        assert low.notional == pytest.approx(notional)
        assert high.notional == pytest.approx(-notional)
        assert low.payment_date == high.payment_date == OBS.maturity_date

    def test_floorlet_pair(self):
        low, high = BINARY.vanilla_pair(make_binary(is_cap=False))
        notional = NOTIONAL / (2 * SPREAD)
        assert low.floorlet == pytest.approx(STRIKE - SPREAD)
        assert high.floorlet == pytest.approx(STRIKE + SPREAD)
        assert low.notional == pytest.approx(-notional)
        assert high.notional == pytest.approx(notional)

    @pytest.mark.parametrize("spread", [0.0, -1.0e-4])
    def test_non_positive_spread(self, spread):
        with pytest.raises(ConfigurationError):
            VerticalSpreadBinaryPricer(BlackCapletFloorletPeriodPricer(), spread)

    def test_default_spread(self):
        assert VerticalSpreadBinaryPricer(BlackCapletFloorletPeriodPricer()).spread == SPREAD


class TestBinaryPricing:
    """Binary present values and sensitivities."""

    def test_decomposition(self, rates, black_vols):
        binary = make_binary()
        low, high = BINARY.vanilla_pair(binary)
        pricer = BINARY.period_pricer
        expected = (pricer.present_value(low, rates, black_vols).amount
                    + pricer.present_value(high, rates, black_vols).amount)
        assert BINARY.present_value(binary, rates, black_vols).amount == pytest.approx(expected, abs=1e-2)

    @pytest.mark.parametrize("is_cap", [True, False])
    def test_long_short(self, is_cap, rates, black_vols):
        long = make_binary(is_cap=is_cap)
        short = long.with_amount(-NOTIONAL)
        assert BINARY.present_value(long, rates, black_vols).amount == pytest.approx(
            -BINARY.present_value(short, rates, black_vols).amount, abs=NOTIONAL * 1e-13)
        long_sens = BINARY.present_value_sensitivity_rates(long, rates, black_vols)
        short_sens = BINARY.present_value_sensitivity_rates(short, rates, black_vols)
        assert long_sens.equal_with_tolerance(short_sens.multiplied_by(-1.0), NOTIONAL * 1e-10)

    def test_put_call_parity(self, rates, black_vols):
        """Binary caplet plus binary floorlet pays the amount for sure."""
        df = rates.discount_factor("EUR", OBS.maturity_date)
        total = (BINARY.present_value(make_binary(), rates, black_vols).amount
                 + BINARY.present_value(make_binary(is_cap=False), rates, black_vols).amount)
        assert total == pytest.approx(df * NOTIONAL * OBS.year_fraction, rel=1e-9)

    def test_deep_in_the_money(self, rates, black_vols):
        df = rates.discount_factor("EUR", OBS.maturity_date)
        pv = BINARY.present_value(make_binary(strike=0.001), rates, black_vols).amount
        assert pv == pytest.approx(df * NOTIONAL * OBS.year_fraction, rel=1e-4)

    def test_deep_out_of_the_money(self, rates, black_vols):
        pv = BINARY.present_value(make_binary(strike=0.5), rates, black_vols).amount
        assert abs(pv) < NOTIONAL * 1e-6

    def test_close_to_black_digital(self, rates):
        """With a flat volatility the spread converges to the Black digital price."""
        vol = 0.3
        vols = BlackCapletFloorletVolatilities("EUR-Flat", EUR_EURIBOR_3M, VAL_DATE, ConstantSurface("flat", vol))
        forward = rates.forward_rate(OBS)
        df = rates.discount_factor("EUR", OBS.maturity_date)
        expiry = vols.relative_time(FIXING_DATE)
        d2 = (np.log(forward / STRIKE) - 0.5 * vol ** 2 * expiry) / (vol * np.sqrt(expiry))
        expected = df * NOTIONAL * OBS.year_fraction * norm.cdf(d2)
        assert BINARY.present_value(make_binary(), rates, vols).amount == pytest.approx(expected, rel=1e-4)

    def test_volatility_sensitivity_has_both_strikes(self, rates, black_vols):
        """Each strike carries the vega of its replicating vanilla, on its own smile point."""
        binary = make_binary()
        sens = list(BINARY.present_value_sensitivity_model_params_volatility(binary, rates, black_vols))
        assert sorted(s.strike for s in sens) == pytest.approx([STRIKE - SPREAD, STRIKE + SPREAD])

        low, high = BINARY.vanilla_pair(binary)
        vanilla = BINARY.period_pricer
        for period in (low, high):
            expected = vanilla.present_value_sensitivity_model_params_volatility(period, rates, black_vols)
            record = next(s for s in sens if s.strike == period.strike)
            assert record.sensitivity == pytest.approx(next(iter(expected)).sensitivity, rel=1e-12)
        assert low.notional > 0 > high.notional

    def test_volatility_sensitivity_matches_finite_difference(self, rates, black_vols):
        binary = make_binary()
        point = BINARY.present_value_sensitivity_model_params_volatility(binary, rates, black_vols)
        analytic = black_vols.parameter_sensitivity(point)
        fd = FiniteDifferenceCalculator().sensitivity_volatilities(
            black_vols, lambda v: BINARY.present_value(binary, rates, v))
        assert analytic.equal_with_tolerance(fd, NOTIONAL * 1e-4)

    def test_zero_low_strike(self, rates, black_vols):
        """A binary struck at the spread replicates with a zero strike caplet under plain Black."""
        pv = BINARY.present_value(make_binary(strike=SPREAD), rates, black_vols).amount
        df = rates.discount_factor("EUR", OBS.maturity_date)
        assert pv == pytest.approx(df * NOTIONAL * OBS.year_fraction, rel=1e-4)


class TestBinaryLifecycle:
    """Binary values once the rate has fixed."""

    def test_after_fixing_pays_amount(self):
        rates = make_rates(AFTER_FIXING_DATE)
        vols = make_black_vols(AFTER_FIXING_DATE)
        binary = make_binary()
        df = rates.discount_factor("EUR", OBS.maturity_date)
        assert binary.payoff(FIXING_RATE) == pytest.approx(NOTIONAL * OBS.year_fraction)
        assert BINARY.present_value(binary, rates, vols).amount == pytest.approx(
            df * binary.payoff(FIXING_RATE), rel=1e-9)
        assert BINARY.present_value_sensitivity_model_params_volatility(binary, rates, vols).is_empty()

    def test_after_fixing_out_of_the_money(self):
        rates = make_rates(AFTER_FIXING_DATE)
        vols = make_black_vols(AFTER_FIXING_DATE)
        assert BINARY.present_value(make_binary(strike=0.02), rates, vols).amount == 0.0

    def test_after_payment(self):
        rates = make_rates(AFTER_PAYMENT_DATE)
        vols = make_black_vols(AFTER_PAYMENT_DATE)
        assert BINARY.present_value(make_binary(), rates, vols).amount == 0.0
        assert BINARY.present_value_sensitivity_rates(make_binary(), rates, vols).is_empty()
