"""
Product module - cap/floor instruments.

Provides:
- Caplet/floorlet and binary periods, fixing in advance or in arrears
- Cap/floor legs built from schedules
- Fixed and Ibor coupon legs
- Cap/floor products, trades and premiums
"""

from .caplet import (
    CapletFloorletBinaryPeriod,
    CapletFloorletPeriod,
    OvernightInArrearsCapletFloorletBinaryPeriod,
    OvernightInArrearsCapletFloorletPeriod,
    PutCall,
)
from .leg import CapFloorLeg
from .swap_leg import FixedRateCouponPeriod, IborCouponPeriod, SwapLeg
from .trade import CapFloor, CapFloorTrade, Payment

__all__ = [
    "CapletFloorletBinaryPeriod",
    "CapletFloorletPeriod",
    "OvernightInArrearsCapletFloorletBinaryPeriod",
    "OvernightInArrearsCapletFloorletPeriod",
    "PutCall",
    "CapFloorLeg",
    "FixedRateCouponPeriod",
    "IborCouponPeriod",
    "SwapLeg",
    "CapFloor",
    "CapFloorTrade",
    "Payment",
]
