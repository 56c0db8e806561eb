"""
Pricers module - caplet/floorlet, leg and trade pricing.

Provides:
- Black, shifted Black, Normal and SABR period pricers
- Overnight in-arrears period pricers
- Vertical spread binary pricer
- Cap/floor leg and trade pricers
- Discounting pricers for pay legs and premiums
"""

from .binary import VerticalSpreadBinaryPricer
from .discounting import DiscountingPaymentPricer, DiscountingSwapLegPricer
from .in_arrears import (
    BlackOvernightInArrearsCapletFloorletPeriodPricer,
    NormalOvernightInArrearsCapletFloorletPeriodPricer,
    SabrOvernightInArrearsCapletFloorletPeriodPricer,
)
from .leg import CapFloorLegPricer, SabrCapFloorLegPricer
from .period import (
    BlackCapletFloorletPeriodPricer,
    CapletFloorletPeriodPricer,
    NormalCapletFloorletPeriodPricer,
    TimeState,
    time_state,
)
from .sabr import SabrCapletFloorletPeriodPricer
from .trade import CapFloorTradePricer

__all__ = [
    "VerticalSpreadBinaryPricer",
    "DiscountingPaymentPricer",
    "DiscountingSwapLegPricer",
    "BlackOvernightInArrearsCapletFloorletPeriodPricer",
    "NormalOvernightInArrearsCapletFloorletPeriodPricer",
    "SabrOvernightInArrearsCapletFloorletPeriodPricer",
    "CapFloorLegPricer",
    "SabrCapFloorLegPricer",
    "BlackCapletFloorletPeriodPricer",
    "CapletFloorletPeriodPricer",
    "NormalCapletFloorletPeriodPricer",
    "TimeState",
    "time_state",
    "SabrCapletFloorletPeriodPricer",
    "CapFloorTradePricer",
]
