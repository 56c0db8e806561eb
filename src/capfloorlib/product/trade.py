"""
Cap/floor product and trade.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..currency import CurrencyAmount
from .leg import CapFloorLeg
from .swap_leg import SwapLeg


@dataclass(frozen=True)
class Payment:
    """Single cash payment; a negative amount is paid."""
    currency: str
    amount: float
    payment_date: date

    @property
    def value(self) -> CurrencyAmount:
        return CurrencyAmount(self.currency, self.amount)


@dataclass(frozen=True)
class CapFloor:
    """
    Cap or floor with an optional leg exchanged alongside it.

    Attributes:
        cap_floor_leg: The optionality
        pay_leg: Optional coupon leg, e.g. a fixed-rate funding leg
    """
    cap_floor_leg: CapFloorLeg
    pay_leg: Optional[SwapLeg] = None


@dataclass(frozen=True)
class CapFloorTrade:
    """
    Trade in a cap or floor.

    Attributes:
        product: The cap/floor
        premium: Optional upfront premium
        trade_date: Optional trade date
    """
    product: CapFloor
    premium: Optional[Payment] = None
    trade_date: Optional[date] = None


__all__ = [
    "Payment",
    "CapFloor",
    "CapFloorTrade",
]
