"""
Cap/floor risk reporting.

Provides tabular output for:
- Caplet-by-caplet valuation and greeks of a leg
- Resolved parameter sensitivities
- CSV export of report frames
"""

from pathlib import Path
from typing import Dict, List, Union

import numpy as np
import pandas as pd

from ..market_state import RatesProvider
from ..pricers.leg import CapFloorLegPricer
from ..pricers.period import TimeState, time_state
from ..product.leg import CapFloorLeg
from ..sensitivity import CurrencyParameterSensitivities
from ..vol.volatilities import CapletFloorletVolatilities

CAPLET_COLUMNS = [
    "fixing_date", "payment_date", "strike", "put_call", "time_state",
    "forward", "implied_vol", "pv", "delta", "gamma", "theta",
]


def caplet_report(
    leg: CapFloorLeg,
    leg_pricer: CapFloorLegPricer,
    rates: RatesProvider,
    volatilities: CapletFloorletVolatilities
) -> pd.DataFrame:
    """
    Generate a caplet-level report for a leg.

    Periods already paid show zero values. The forward is NaN for them,
    and the implied volatility is NaN once the rate has fixed.

    Args:
        leg: Cap/floor leg
        leg_pricer: Leg pricer whose period pricer values each row
        rates: Rates market data
        volatilities: Volatilities accepted by the period pricer

    Returns:
        DataFrame with one row per period
    """
    pricer = leg_pricer.period_pricer
    implied = leg_pricer.implied_volatilities(leg, rates, volatilities)
    rows = []
    for period in leg:
        state = time_state(period, rates.valuation_date)
        if state is TimeState.AFTER_PAYMENT:
            forward = np.nan
        else:
            forward = pricer.forward_rate(period, rates)
        rows.append({
            "fixing_date": period.fixing_date,
            "payment_date": period.payment_date,
            "strike": period.strike,
            "put_call": period.put_call.value,
            "time_state": state.value,
            "forward": forward,
            "implied_vol": implied.get(period, np.nan),
            "pv": pricer.present_value(period, rates, volatilities).amount,
            "delta": pricer.present_value_delta(period, rates, volatilities).amount,
            "gamma": pricer.present_value_gamma(period, rates, volatilities).amount,
            "theta": pricer.present_value_theta(period, rates, volatilities).amount,
        })
    return pd.DataFrame(rows, columns=CAPLET_COLUMNS)


def sensitivity_report(sensitivities: CurrencyParameterSensitivities) -> pd.DataFrame:
    """
    Pivot resolved sensitivities to one row per node label.

    Args:
        sensitivities: Parameter sensitivities

    Returns:
        DataFrame indexed by (name, currency, label) with a value column
    """
    df = sensitivities.to_frame()
    if df.empty:
        return df
    return df.set_index(["name", "currency", "label"])


def export_to_csv(
    frames: Dict[str, pd.DataFrame],
    output_dir: Union[str, Path],
    prefix: str = "capfloor"
) -> List[str]:
    """
    Export report frames to CSV files, one per frame.

    Args:
        frames: Frames keyed by section title
        output_dir: Output directory
        prefix: Filename prefix

    Returns:
        List of created file paths
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    created_files = []
    for title, frame in frames.items():
        safe_title = title.replace(" ", "_").replace("/", "_")
        filename = output_path / f"{prefix}_{safe_title}.csv"
        frame.to_csv(filename, index=isinstance(frame.index, pd.MultiIndex))
        created_files.append(str(filename))
    return created_files


__all__ = [
    "CAPLET_COLUMNS",
    "caplet_report",
    "sensitivity_report",
    "export_to_csv",
]
