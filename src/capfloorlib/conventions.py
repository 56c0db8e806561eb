"""
Day count conventions and business day adjustments.

Supported Day Counts:
- ACT/360: Actual days / 360 (Ibor accruals)
- ACT/365F: Actual days / 365 (curve and volatility time)
- 30/360: 30 days per month / 360 (fixed legs)

Business Day Conventions:
- Modified Following: next business day unless it falls in the next month
- Following: next business day
- Preceding: previous business day

The calendar is weekends plus an optional set of holidays.
"""

from datetime import date, timedelta
from enum import Enum
from typing import Optional


class DayCount(Enum):
    """Day count convention enumeration."""
    ACT_360 = "ACT/360"
    ACT_365 = "ACT/365F"
    THIRTY_360 = "30/360"

    @classmethod
    def from_string(cls, s: str) -> "DayCount":
        """Parse day count from string representation."""
        mapping = {
            "ACT/360": cls.ACT_360,
            "ACT360": cls.ACT_360,
            "ACT/365": cls.ACT_365,
            "ACT/365F": cls.ACT_365,
            "ACT365": cls.ACT_365,
            "30/360": cls.THIRTY_360,
            "30360": cls.THIRTY_360,
        }
        key = s.upper().replace(" ", "")
        if key in mapping:
            return mapping[key]
        raise ValueError(f"Unknown day count convention: {s}")


class BusinessDayConvention(Enum):
    """Business day adjustment convention."""
    MODIFIED_FOLLOWING = "ModifiedFollowing"
    FOLLOWING = "Following"
    PRECEDING = "Preceding"
    UNADJUSTED = "Unadjusted"


def year_fraction(start: date, end: date, day_count: DayCount) -> float:
    """
    Calculate year fraction between two dates.

    Args:
        start: Start date
        end: End date
        day_count: Day count convention

    Returns:
        Year fraction, 0.0 when end is not after start
    """
    if start >= end:
        return 0.0

    actual_days = (end - start).days

    if day_count == DayCount.ACT_360:
        return actual_days / 360.0

    elif day_count == DayCount.ACT_365:
        return actual_days / 365.0

    elif day_count == DayCount.THIRTY_360:
        d1 = min(start.day, 30)
        d2 = end.day
        if d2 == 31 and d1 == 30:
            d2 = 30
        return (360 * (end.year - start.year) + 30 * (end.month - start.month) + (d2 - d1)) / 360.0

    raise ValueError(f"Unknown day count: {day_count}")


def is_business_day(d: date, holidays: Optional[set] = None) -> bool:
    """True unless d is a Saturday, Sunday or listed holiday."""
    if d.weekday() >= 5:
        return False
    return not (holidays and d in holidays)


def adjust_business_day(
    d: date,
    convention: BusinessDayConvention,
    holidays: Optional[set] = None
) -> date:
    """
    Adjust a date according to a business day convention.

    Args:
        d: Date to adjust
        convention: Business day adjustment rule
        holidays: Optional set of holiday dates

    Returns:
        Adjusted date
    """
    if convention == BusinessDayConvention.UNADJUSTED or is_business_day(d, holidays):
        return d

    if convention == BusinessDayConvention.PRECEDING:
        return _roll(d, -1, holidays)

    following = _roll(d, 1, holidays)
    if convention == BusinessDayConvention.MODIFIED_FOLLOWING and following.month != d.month:
        return _roll(d, -1, holidays)
    return following


def add_business_days(d: date, days: int, holidays: Optional[set] = None) -> date:
    """
    Move a date by a number of business days.

    Args:
        d: Start date
        days: Business days to add (negative moves backwards)
        holidays: Optional set of holiday dates

    Returns:
        Shifted business date
    """
    step = 1 if days >= 0 else -1
    result = d
    for _ in range(abs(days)):
        result = _roll(result + timedelta(days=step), step, holidays)
    return result


def _roll(d: date, step: int, holidays: Optional[set]) -> date:
    """Step one calendar day at a time until a business day is reached."""
    while not is_business_day(d, holidays):
        d += timedelta(days=step)
    return d


__all__ = [
    "DayCount",
    "BusinessDayConvention",
    "year_fraction",
    "is_business_day",
    "adjust_business_day",
    "add_business_days",
]
