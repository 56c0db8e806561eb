"""
Cap/floor leg: an ordered strip of caplets or floorlets.

Legs are built on an Ibor index fixing in advance or on an overnight
index compounded in arrears.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple, Union

from ..conventions import BusinessDayConvention, DayCount
from ..dates import generate_accrual_schedule
from ..errors import ConfigurationError
from ..index import IborIndex, IborRateObservation, OvernightCompoundedObservation, OvernightIndex
from .caplet import CapletFloorletPeriod, OvernightInArrearsCapletFloorletPeriod


@dataclass(frozen=True)
class CapFloorLeg:
    """
    Chronological, non-overlapping caplet/floorlet periods.

    All periods share one currency and one index.
    """
    periods: Tuple[CapletFloorletPeriod, ...]

    def __post_init__(self):
        periods = tuple(self.periods)
        object.__setattr__(self, "periods", periods)
        if not periods:
            raise ConfigurationError("A cap/floor leg needs at least one period")

        first = periods[0]
        for prev, period in zip(periods, periods[1:]):
            if period.currency != first.currency:
                raise ConfigurationError(f"Mixed currencies in leg: {first.currency} and {period.currency}")
            if period.index != first.index:
                raise ConfigurationError(f"Mixed indices in leg: {first.index} and {period.index}")
            if period.start_date < prev.end_date:
                raise ConfigurationError(
                    f"Periods must be ordered and non-overlapping: {period.start_date} starts before "
                    f"{prev.end_date}")

    @property
    def currency(self) -> str:
        return self.periods[0].currency

    @property
    def index(self) -> Union[IborIndex, OvernightIndex]:
        return self.periods[0].index

    @property
    def start_date(self) -> date:
        return self.periods[0].start_date

    @property
    def end_date(self) -> date:
        return self.periods[-1].end_date

    def __len__(self) -> int:
        return len(self.periods)

    def __iter__(self):
        return iter(self.periods)

    @classmethod
    def build(
        cls,
        index: IborIndex,
        start_date: date,
        end_date: date,
        strike: float,
        notional: float,
        is_cap: bool = True,
        frequency: int = 4,
        day_count: DayCount = DayCount.ACT_360,
        business_day: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
        holidays: Optional[set] = None
    ) -> "CapFloorLeg":
        """
        Build a cap or floor leg from a regular schedule.

        Each period fixes index.fixing_offset_days business days before its
        accrual start and pays on its accrual end. The holiday calendar
        applies to the schedule and to the fixing and deposit dates.

        Args:
            index: Ibor index observed by every period
            start_date: First accrual start
            end_date: Leg maturity
            strike: Cap or floor strike
            notional: Signed notional
            is_cap: True for caplets, False for floorlets
            frequency: Periods per year
            day_count: Accrual day count
            business_day: Schedule adjustment
            holidays: Holiday calendar

        Returns:
            CapFloorLeg
        """
        schedule = generate_accrual_schedule(start_date, end_date, frequency, day_count, business_day, holidays)
        periods = []
        for start, end, yf in zip(schedule.accrual_starts, schedule.accrual_ends, schedule.year_fractions):
            observation = IborRateObservation.of(index, index.fixing_date(start, holidays), holidays)
            periods.append(CapletFloorletPeriod(
                notional=notional,
                start_date=start,
                end_date=end,
                year_fraction=yf,
                observation=observation,
                caplet=strike if is_cap else None,
                floorlet=None if is_cap else strike,
                currency=index.currency
            ))
        return cls(tuple(periods))

    @classmethod
    def build_overnight_in_arrears(
        cls,
        index: OvernightIndex,
        start_date: date,
        end_date: date,
        strike: float,
        notional: float,
        is_cap: bool = True,
        frequency: int = 4,
        day_count: DayCount = DayCount.ACT_360,
        business_day: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
        holidays: Optional[set] = None
    ) -> "CapFloorLeg":
        """
        Build a leg of caplets or floorlets on a compounded overnight rate.

        Each period observes the overnight rate compounded daily over its own
        accrual period and pays on its accrual end.

        Args:
            index: Overnight index observed by every period
            start_date: First accrual start
            end_date: Leg maturity
            strike: Cap or floor strike
            notional: Signed notional
            is_cap: True for caplets, False for floorlets
            frequency: Periods per year
            day_count: Accrual day count
            business_day: Schedule adjustment
            holidays: Holiday calendar for the schedule and the overnight fixings

        Returns:
            CapFloorLeg
        """
        schedule = generate_accrual_schedule(start_date, end_date, frequency, day_count, business_day, holidays)
        periods = [
            OvernightInArrearsCapletFloorletPeriod(
                notional=notional,
                start_date=start,
                end_date=end,
                year_fraction=yf,
                observation=OvernightCompoundedObservation.of(index, start, end, holidays),
                caplet=strike if is_cap else None,
                floorlet=None if is_cap else strike,
                currency=index.currency
            )
            for start, end, yf in zip(schedule.accrual_starts, schedule.accrual_ends, schedule.year_fractions)
        ]
        return cls(tuple(periods))


__all__ = [
    "CapFloorLeg",
]
