"""
Date utilities for cap/floor schedules.

Provides:
- Tenor parsing and tenor arithmetic
- Accrual schedule generation for caplet and coupon legs
"""

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Tuple

from .conventions import (
    BusinessDayConvention,
    DayCount,
    adjust_business_day,
    year_fraction
)


class DateUtils:
    """Utility class for date manipulation in rates contexts."""

    # Tenor regex pattern: number + unit (D/W/M/Y)
    TENOR_PATTERN = re.compile(r'^(\d+)([DWMY])$', re.IGNORECASE)

    @staticmethod
    def parse_tenor(tenor: str) -> Tuple[int, str]:
        """
        Parse a tenor string into (amount, unit).

        Args:
            tenor: Tenor string like "3M", "6M", "1Y"

        Returns:
            Tuple of (amount, unit) where unit is D/W/M/Y

        Raises:
            ValueError: If tenor format is invalid
        """
        match = DateUtils.TENOR_PATTERN.match(tenor.upper().strip())
        if not match:
            raise ValueError(f"Invalid tenor format: {tenor}. Expected format like '3M', '2Y'")
        return int(match.group(1)), match.group(2).upper()

    @staticmethod
    def add_tenor(start: date, tenor: str) -> date:
        """
        Add a calendar tenor to a date, clipping to month end.

        Args:
            start: Starting date
            tenor: Tenor string (e.g., "7D", "3M", "2Y")

        Returns:
            Unadjusted end date
        """
        amount, unit = DateUtils.parse_tenor(tenor)

        if unit == 'D':
            return start + timedelta(days=amount)
        if unit == 'W':
            return start + timedelta(weeks=amount)
        months = amount if unit == 'M' else 12 * amount
        return _add_months(start, months)

    @staticmethod
    def tenor_to_months(tenor: str) -> int:
        """Convert a month or year tenor to a month count."""
        amount, unit = DateUtils.parse_tenor(tenor)
        if unit == 'M':
            return amount
        if unit == 'Y':
            return 12 * amount
        raise ValueError(f"Tenor {tenor} is not a whole number of months")

    @staticmethod
    def generate_schedule(
        start: date,
        end: date,
        frequency: int,
        convention: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
        holidays: Optional[set] = None
    ) -> List[date]:
        """
        Generate period end dates between start and end.

        Dates roll backward from maturity so that any stub sits at the front.

        Args:
            start: Schedule start (first accrual start)
            end: Schedule end (maturity)
            frequency: Periods per year (1, 2, 4 or 12)
            convention: Business day adjustment
            holidays: Holiday calendar

        Returns:
            Adjusted period end dates, last one being the adjusted maturity
        """
        if frequency <= 0 or 12 % frequency != 0:
            raise ValueError(f"Frequency must divide 12, got {frequency}")
        if end <= start:
            raise ValueError(f"Schedule end {end} must be after start {start}")

        months_per_period = 12 // frequency
        unadjusted = [end]
        n = 1
        while True:
            prev_date = _add_months(end, -n * months_per_period)
            if prev_date <= start:
                break
            unadjusted.insert(0, prev_date)
            n += 1

        return [adjust_business_day(d, convention, holidays) for d in unadjusted]


@dataclass
class ScheduleInfo:
    """Container for schedule with accrual information."""
    accrual_starts: List[date]
    accrual_ends: List[date]
    year_fractions: List[float]
    day_count: DayCount


def generate_accrual_schedule(
    start: date,
    end: date,
    frequency: int,
    day_count: DayCount,
    convention: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
    holidays: Optional[set] = None
) -> ScheduleInfo:
    """
    Generate accrual periods for a leg.

    Args:
        start: Accrual start of the first period
        end: Leg maturity
        frequency: Periods per year
        day_count: Accrual day count
        convention: Business day adjustment
        holidays: Holiday calendar

    Returns:
        ScheduleInfo with one entry per period
    """
    ends = DateUtils.generate_schedule(start, end, frequency, convention, holidays)
    starts = [adjust_business_day(start, convention, holidays)] + ends[:-1]
    return ScheduleInfo(
        accrual_starts=starts,
        accrual_ends=ends,
        year_fractions=[year_fraction(s, e, day_count) for s, e in zip(starts, ends)],
        day_count=day_count
    )


def _add_months(d: date, months: int) -> date:
    """Shift by whole months, clipping the day to the target month's end."""
    index = d.year * 12 + d.month - 1 + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(d.day, _days_in_month(year, month)))


def _days_in_month(year: int, month: int) -> int:
    """Return number of days in a month."""
    if month in (1, 3, 5, 7, 8, 10, 12):
        return 31
    elif month in (4, 6, 9, 11):
        return 30
    elif month == 2:
        if (year % 4 == 0 and year % 100 != 0) or (year % 400 == 0):
            return 29
        return 28
    raise ValueError(f"Invalid month: {month}")


__all__ = [
    "DateUtils",
    "ScheduleInfo",
    "generate_accrual_schedule",
]
