"""
Tests for the rates provider.
"""

import logging

import pytest
import numpy as np
import pandas as pd
from datetime import date

from capfloorlib.errors import MissingFixingError
from capfloorlib.index import EUR_EURIBOR_3M, USD_LIBOR_3M, IborRateObservation
from capfloorlib.sensitivity import IborRateSensitivity, PointSensitivities, ZeroRateSensitivity

from conftest import (
    DSC_NAME,
    FIXING_DATE,
    FIXING_RATE,
    FWD_NAME,
    VAL_DATE,
    make_rates,
)

OBS = IborRateObservation.of(EUR_EURIBOR_3M, FIXING_DATE)
PAY_DATE = date(2011, 4, 5)


class TestDiscounting:
    """Discount factors and their sensitivities."""

    def test_discount_factor(self, rates):
        curve = rates.discount_curve("EUR")
        assert rates.discount_factor("EUR", PAY_DATE) == curve.discount_factor(PAY_DATE)

    def test_missing_curve(self, rates):
        with pytest.raises(KeyError):
            rates.discount_factor("USD", PAY_DATE)
        with pytest.raises(KeyError):
            rates.index_curve(USD_LIBOR_3M)

    def test_point_sensitivity(self, rates):
        sens = list(rates.discount_factor_point_sensitivity("EUR", PAY_DATE))
        t = rates.discount_curve("EUR").time(PAY_DATE)
        assert len(sens) == 1
        assert isinstance(sens[0], ZeroRateSensitivity)
        assert sens[0].year_fraction == t
        assert sens[0].sensitivity == pytest.approx(-t * rates.discount_factor("EUR", PAY_DATE))

    def test_point_sensitivity_in_the_past(self, rates):
        assert rates.discount_factor_point_sensitivity("EUR", VAL_DATE).is_empty()

    def test_parameter_sensitivity_matches_bumping(self, rates):
        """Resolved zero rate sensitivity equals the node-bumped discount factor change."""
        resolved = rates.parameter_sensitivity(rates.discount_factor_point_sensitivity("EUR", PAY_DATE))
        values = resolved.get(DSC_NAME, "EUR").values

        curve = rates.discount_curve("EUR")
        h = 1e-7
        expected = [(curve.shift_node(i, h).discount_factor(PAY_DATE)
                     - curve.shift_node(i, -h).discount_factor(PAY_DATE)) / (2 * h)
                    for i in range(curve.parameter_count)]
        np.testing.assert_allclose(values, expected, atol=1e-8)


class TestForwardRates:
    """Ibor forward rates and fixings."""

    def test_projected_forward(self, rates):
        curve = rates.index_curve(EUR_EURIBOR_3M)
        expected = curve.forward_rate(OBS.effective_date, OBS.maturity_date, OBS.year_fraction)
        assert rates.forward_rate(OBS) == expected
        assert not rates.is_fixed(OBS)

    def test_past_fixing(self):
        rates = make_rates(date(2011, 1, 10))
        assert rates.forward_rate(OBS) == FIXING_RATE
        assert rates.is_fixed(OBS)
        assert rates.forward_rate_point_sensitivity(OBS).is_empty()

    def test_missing_past_fixing(self):
        rates = make_rates(date(2011, 1, 10), with_fixing=False)
        with pytest.raises(MissingFixingError):
            rates.forward_rate(OBS)

    def test_fixing_on_valuation_date(self):
        rates = make_rates(FIXING_DATE)
        assert rates.forward_rate(OBS) == FIXING_RATE
        assert rates.is_fixed(OBS)

    def test_unpublished_fixing_on_valuation_date(self, caplog):
        """Without a published fixing the curve forward is used and a warning logged."""
        rates = make_rates(FIXING_DATE, with_fixing=False)
        with caplog.at_level(logging.WARNING, logger="capfloorlib.market_state"):
            rate = rates.forward_rate(OBS)
        curve = rates.index_curve(EUR_EURIBOR_3M)
        assert rate == curve.forward_rate(OBS.effective_date, OBS.maturity_date, OBS.year_fraction)
        assert not rates.is_fixed(OBS)
        assert "No fixing published" in caplog.text

    def test_fixings_normalised(self, rates):
        series = rates.fixings[EUR_EURIBOR_3M.name]
        assert isinstance(series.index, pd.DatetimeIndex)
        assert rates.fixing(EUR_EURIBOR_3M, date(2011, 1, 4)) is None
        assert rates.fixing(USD_LIBOR_3M, FIXING_DATE) is None

    def test_forward_point_sensitivity(self, rates):
        sens = list(rates.forward_rate_point_sensitivity(OBS))
        assert sens == [IborRateSensitivity(OBS, "EUR", 1.0)]

    def test_forward_parameter_sensitivity_matches_bumping(self, rates):
        """Resolved forward sensitivity equals the node-bumped forward change."""
        resolved = rates.parameter_sensitivity(rates.forward_rate_point_sensitivity(OBS))
        values = resolved.get(FWD_NAME, "EUR").values

        h = 1e-7
        curve = rates.index_curve(EUR_EURIBOR_3M)
        expected = []
        for i in range(curve.parameter_count):
            up = rates.with_curve(FWD_NAME, curve.shift_node(i, h)).forward_rate(OBS)
            down = rates.with_curve(FWD_NAME, curve.shift_node(i, -h)).forward_rate(OBS)
            expected.append((up - down) / (2 * h))
        np.testing.assert_allclose(values, expected, rtol=1e-6, atol=1e-9)


class TestProviderOperations:
    """Curve replacement and exposure."""

    def test_curves_are_distinct(self, rates):
        assert [name for name, _ in rates.curves()] == [DSC_NAME, FWD_NAME]

    def test_with_curve_replaces_by_name(self, rates):
        bumped = rates.discount_curve("EUR").bump_parallel(1.0)
        new_rates = rates.with_curve(DSC_NAME, bumped)
        assert new_rates.discount_curve("EUR") is bumped
        assert new_rates.index_curve(EUR_EURIBOR_3M) is rates.index_curve(EUR_EURIBOR_3M)
        assert rates.discount_curve("EUR") is not bumped

    def test_currency_exposure_is_empty(self, rates):
        sens = rates.discount_factor_point_sensitivity("EUR", PAY_DATE)
        assert len(rates.currency_exposure(sens)) == 0

    def test_unknown_records_are_ignored(self, rates):
        assert len(rates.parameter_sensitivity(PointSensitivities.none())) == 0
