"""
Ibor and overnight indices and their rate observations.

An IborIndex carries the conventions needed to turn a fixing date into
the deposit period the rate applies to. An IborRateObservation is that
resolved period. An OvernightCompoundedObservation lists the daily
fixings compounded over an accrual period.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from .conventions import (
    BusinessDayConvention,
    DayCount,
    add_business_days,
    adjust_business_day,
    year_fraction
)
from .dates import DateUtils


@dataclass(frozen=True)
class IborIndex:
    """
    Ibor index conventions.

    Attributes:
        name: Index name, e.g. "EUR-EURIBOR-3M"
        currency: Currency code
        tenor: Deposit tenor, e.g. "3M"
        day_count: Accrual day count of the deposit
        fixing_offset_days: Business days from fixing to effective date
        business_day: Adjustment applied to the maturity date
    """
    name: str
    currency: str
    tenor: str
    day_count: DayCount = DayCount.ACT_360
    fixing_offset_days: int = 2
    business_day: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING

    def effective_date(self, fixing_date: date, holidays: Optional[set] = None) -> date:
        return add_business_days(fixing_date, self.fixing_offset_days, holidays)

    def maturity_date(self, effective_date: date, holidays: Optional[set] = None) -> date:
        return adjust_business_day(DateUtils.add_tenor(effective_date, self.tenor), self.business_day, holidays)

    def fixing_date(self, effective_date: date, holidays: Optional[set] = None) -> date:
        """Fixing date for a deposit starting on effective_date."""
        return add_business_days(effective_date, -self.fixing_offset_days, holidays)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class IborRateObservation:
    """
    Observation of an Ibor index on a fixing date.

    Use IborRateObservation.of to derive the deposit dates from the index.
    """
    index: IborIndex
    fixing_date: date
    effective_date: date
    maturity_date: date
    year_fraction: float

    @classmethod
    def of(
        cls,
        index: IborIndex,
        fixing_date: date,
        holidays: Optional[set] = None
    ) -> "IborRateObservation":
        effective = index.effective_date(fixing_date, holidays)
        maturity = index.maturity_date(effective, holidays)
        return cls(
            index=index,
            fixing_date=fixing_date,
            effective_date=effective,
            maturity_date=maturity,
            year_fraction=year_fraction(effective, maturity, index.day_count)
        )

    @property
    def currency(self) -> str:
        return self.index.currency


@dataclass(frozen=True)
class OvernightIndex:
    """
    Overnight index conventions.

    Attributes:
        name: Index name, e.g. "EUR-ESTR"
        currency: Currency code
        day_count: Accrual day count of each overnight fixing
    """
    name: str
    currency: str
    day_count: DayCount = DayCount.ACT_360

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class OvernightCompoundedObservation:
    """
    Daily compounded overnight rate over an accrual period.

    Every business day in [start_date, end_date) fixes a rate accruing to
    the next business day (the first accrual runs from start_date). The
    compounded rate is (prod(1 + r_i * d_i) - 1) / year_fraction and is
    only known once the last fixing is published.
    """
    index: OvernightIndex
    start_date: date
    end_date: date
    fixing_dates: Tuple[date, ...]
    accrual_factors: Tuple[float, ...]
    year_fraction: float

    @classmethod
    def of(
        cls,
        index: OvernightIndex,
        start_date: date,
        end_date: date,
        holidays: Optional[set] = None
    ) -> "OvernightCompoundedObservation":
        if end_date <= start_date:
            raise ValueError(f"End date {end_date} must be after start date {start_date}")
        fixing_dates = []
        d = adjust_business_day(start_date, BusinessDayConvention.FOLLOWING, holidays)
        while d < end_date:
            fixing_dates.append(d)
            d = add_business_days(d, 1, holidays)
        if not fixing_dates:
            raise ValueError(f"No business day between {start_date} and {end_date}")

        accrual_starts = [start_date] + fixing_dates[1:]
        accrual_ends = fixing_dates[1:] + [end_date]
        return cls(
            index=index,
            start_date=start_date,
            end_date=end_date,
            fixing_dates=tuple(fixing_dates),
            accrual_factors=tuple(year_fraction(s, e, index.day_count)
                                  for s, e in zip(accrual_starts, accrual_ends)),
            year_fraction=year_fraction(start_date, end_date, index.day_count)
        )

    @property
    def fixing_date(self) -> date:
        """Last fixing date; the compounded rate is known after it."""
        return self.fixing_dates[-1]

    @property
    def effective_date(self) -> date:
        return self.start_date

    @property
    def maturity_date(self) -> date:
        return self.end_date

    @property
    def currency(self) -> str:
        return self.index.currency


EUR_EURIBOR_3M = IborIndex("EUR-EURIBOR-3M", "EUR", "3M")
EUR_EURIBOR_6M = IborIndex("EUR-EURIBOR-6M", "EUR", "6M")
USD_LIBOR_3M = IborIndex("USD-LIBOR-3M", "USD", "3M")
GBP_LIBOR_3M = IborIndex("GBP-LIBOR-3M", "GBP", "3M", day_count=DayCount.ACT_365, fixing_offset_days=0)
EUR_ESTR = OvernightIndex("EUR-ESTR", "EUR")
GBP_SONIA = OvernightIndex("GBP-SONIA", "GBP", day_count=DayCount.ACT_365)


__all__ = [
    "IborIndex",
    "IborRateObservation",
    "OvernightIndex",
    "OvernightCompoundedObservation",
    "EUR_EURIBOR_3M",
    "EUR_EURIBOR_6M",
    "USD_LIBOR_3M",
    "GBP_LIBOR_3M",
    "EUR_ESTR",
    "GBP_SONIA",
]
