"""
Tests for cap/floor reports.
"""

import numpy as np
import pandas as pd
import pytest
from datetime import date

from capfloorlib.index import EUR_EURIBOR_3M
from capfloorlib.market_state import RatesProvider
from capfloorlib.pricers import BlackCapletFloorletPeriodPricer, CapFloorLegPricer
from capfloorlib.product import CapFloorLeg
from capfloorlib.reporting import CAPLET_COLUMNS, caplet_report, export_to_csv, sensitivity_report
from capfloorlib.sensitivity import CurrencyParameterSensitivities

from conftest import make_black_vols, make_rates

VAL = date(2011, 10, 3)
LEG_PRICER = CapFloorLegPricer(BlackCapletFloorletPeriodPricer())


@pytest.fixture
def leg():
    return CapFloorLeg.build(EUR_EURIBOR_3M, date(2011, 3, 17), date(2013, 3, 17), 0.015, 1.0e7)


class TestCapletReport:
    """Caplet-level report."""

    def test_columns_and_rows(self, leg, rates, black_vols):
        report = caplet_report(leg, LEG_PRICER, rates, black_vols)
        assert list(report.columns) == CAPLET_COLUMNS
        assert len(report) == len(leg)
        assert (report["time_state"] == "BeforeFixing").all()
        assert (report["put_call"] == "Call").all()
        assert report["pv"].sum() == pytest.approx(LEG_PRICER.present_value(leg, rates, black_vols).amount)
        assert report["implied_vol"].notna().all()

    def test_mid_life(self, leg):
        """Paid periods have no forward; fixed periods have no implied volatility."""
        base = make_rates(VAL, with_fixing=False)
        fixings = {p.fixing_date: 0.02 for p in leg if p.fixing_date < VAL}
        rates = RatesProvider(VAL, base.discount_curves, base.index_curves, {EUR_EURIBOR_3M.name: fixings})
        report = caplet_report(leg, LEG_PRICER, rates, make_black_vols(VAL))

        paid = report[report["time_state"] == "AfterPayment"]
        fixed = report[report["time_state"] == "AfterFixing"]
        live = report[report["time_state"] == "BeforeFixing"]
        assert len(paid) == 2 and len(fixed) == 1
        assert paid["forward"].isna().all()
        assert (paid["pv"] == 0.0).all()
        assert fixed["implied_vol"].isna().all()
        assert fixed["forward"].iloc[0] == 0.02
        assert (fixed["gamma"] == 0.0).all()
        assert live["implied_vol"].notna().all()


class TestSensitivityReport:
    def test_indexed_by_node(self, leg, rates, black_vols):
        sens = rates.parameter_sensitivity(LEG_PRICER.present_value_sensitivity_rates(leg, rates, black_vols))
        report = sensitivity_report(sens)
        assert report.index.names == ["name", "currency", "label"]
        assert list(report.columns) == ["value"]
        assert report["value"].sum() == pytest.approx(sum(s.total() for s in sens))

    def test_empty(self):
        assert sensitivity_report(CurrencyParameterSensitivities.empty()).empty


class TestExport:
    def test_export_to_csv(self, leg, rates, black_vols, tmp_path):
        caplets = caplet_report(leg, LEG_PRICER, rates, black_vols)
        sens = sensitivity_report(rates.parameter_sensitivity(
            LEG_PRICER.present_value_sensitivity_rates(leg, rates, black_vols)))

        files = export_to_csv({"caplets": caplets, "rate sensitivity": sens}, tmp_path / "out")
        assert [f.split("/")[-1] for f in files] == ["capfloor_caplets.csv", "capfloor_rate_sensitivity.csv"]

        reloaded = pd.read_csv(files[0])
        assert list(reloaded.columns) == CAPLET_COLUMNS
        np.testing.assert_allclose(reloaded["pv"], caplets["pv"])

        reloaded_sens = pd.read_csv(files[1])
        assert list(reloaded_sens.columns) == ["name", "currency", "label", "value"]
