"""
Shared market data for cap/floor tests.

The reference caplet fixes on 2011-01-03 on 3M Euribor; valuation dates
are chosen to put it in each lifecycle state.
"""

from datetime import date

import numpy as np
import pandas as pd
import pytest

from capfloorlib.curves import Curve, NodalCurve
from capfloorlib.index import EUR_EURIBOR_3M, IborRateObservation
from capfloorlib.market_state import RatesProvider
from capfloorlib.product import CapletFloorletPeriod
from capfloorlib.vol import (
    BlackCapletFloorletVolatilities,
    GridSurface,
    NormalCapletFloorletVolatilities,
    SabrCapletFloorletVolatilities,
    SabrParameterCurves,
)

VAL_DATE = date(2008, 8, 18)
FIXING_DATE = date(2011, 1, 3)
AFTER_FIXING_DATE = date(2011, 1, 10)
AFTER_PAYMENT_DATE = date(2011, 5, 2)
NOTIONAL = 1_000_000.0
STRIKE = 0.01
FIXING_RATE = 0.013

DSC_NAME = "EUR-Discount"
FWD_NAME = "EUR-EURIBOR-3M-Forward"

CURVE_TIMES = [0.5, 1.0, 2.0, 3.0, 5.0, 10.0]
DSC_RATES = [0.020, 0.022, 0.025, 0.027, 0.030, 0.033]
FWD_RATES = [0.024, 0.026, 0.029, 0.031, 0.034, 0.036]

VOL_EXPIRIES = [0.5, 1.0, 2.0, 3.0, 5.0]
VOL_STRIKES = [0.005, 0.01, 0.02, 0.03, 0.05]


def make_rates(valuation_date: date, with_fixing: bool = True) -> RatesProvider:
    """EUR discount and Euribor forward curves anchored at valuation_date."""
    discount = Curve(DSC_NAME, valuation_date, CURVE_TIMES, DSC_RATES, currency="EUR")
    forward = Curve(FWD_NAME, valuation_date, CURVE_TIMES, FWD_RATES, currency="EUR")
    fixings = {}
    if with_fixing:
        fixings[EUR_EURIBOR_3M.name] = pd.Series({FIXING_DATE: FIXING_RATE})
    return RatesProvider(
        valuation_date=valuation_date,
        discount_curves={"EUR": discount},
        index_curves={EUR_EURIBOR_3M.name: forward},
        fixings=fixings
    )


def make_black_vols(valuation_date: date) -> BlackCapletFloorletVolatilities:
    values = np.add.outer([0.36, 0.34, 0.32, 0.30, 0.28], [0.04, 0.02, 0.0, -0.01, -0.02])
    surface = GridSurface("EUR-Black", VOL_EXPIRIES, VOL_STRIKES, values)
    return BlackCapletFloorletVolatilities("EUR-Black-Vols", EUR_EURIBOR_3M, valuation_date, surface)


def make_normal_vols(valuation_date: date) -> NormalCapletFloorletVolatilities:
    values = np.add.outer([0.0095, 0.0100, 0.0105, 0.0110, 0.0115], [0.0005, 0.0002, 0.0, 0.0001, 0.0003])
    surface = GridSurface("EUR-Normal", VOL_EXPIRIES, VOL_STRIKES, values)
    return NormalCapletFloorletVolatilities("EUR-Normal-Vols", EUR_EURIBOR_3M, valuation_date, surface)


def make_sabr_vols(valuation_date: date, shift: float = 0.0) -> SabrCapletFloorletVolatilities:
    nodes = [0.5, 1.0, 3.0, 5.0, 10.0]
    sabr = SabrParameterCurves(
        alpha_curve=NodalCurve("EUR-SABR-Alpha", nodes, [0.050, 0.048, 0.045, 0.043, 0.040]),
        beta_curve=NodalCurve("EUR-SABR-Beta", nodes, [0.5] * 5),
        rho_curve=NodalCurve("EUR-SABR-Rho", nodes, [-0.20, -0.22, -0.25, -0.27, -0.30]),
        nu_curve=NodalCurve("EUR-SABR-Nu", nodes, [0.45, 0.42, 0.40, 0.38, 0.35]),
        shift=shift
    )
    return SabrCapletFloorletVolatilities("EUR-SABR-Vols", EUR_EURIBOR_3M, valuation_date, sabr)


def make_caplet(notional: float = NOTIONAL, strike: float = STRIKE, is_cap: bool = True) -> CapletFloorletPeriod:
    """Caplet or floorlet on the reference 3M Euribor observation."""
    observation = IborRateObservation.of(EUR_EURIBOR_3M, FIXING_DATE)
    return CapletFloorletPeriod(
        notional=notional,
        start_date=observation.effective_date,
        end_date=observation.maturity_date,
        year_fraction=observation.year_fraction,
        observation=observation,
        caplet=strike if is_cap else None,
        floorlet=None if is_cap else strike
    )


@pytest.fixture
def rates():
    return make_rates(VAL_DATE)


@pytest.fixture
def black_vols():
    return make_black_vols(VAL_DATE)


@pytest.fixture
def normal_vols():
    return make_normal_vols(VAL_DATE)


@pytest.fixture
def sabr_vols():
    return make_sabr_vols(VAL_DATE)


@pytest.fixture
def caplet():
    return make_caplet()


@pytest.fixture
def floorlet():
    return make_caplet(is_cap=False)
