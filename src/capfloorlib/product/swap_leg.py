"""
Coupon legs paid alongside a cap or floor.

Provides:
- FixedRateCouponPeriod: notional * rate * yf
- IborCouponPeriod: notional * (ibor + spread) * yf
- SwapLeg: ordered coupons in one currency
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple, Union

from ..conventions import BusinessDayConvention, DayCount
from ..dates import generate_accrual_schedule
from ..errors import ConfigurationError
from ..index import IborIndex, IborRateObservation


@dataclass(frozen=True)
class FixedRateCouponPeriod:
    """Fixed coupon paid on payment_date."""
    currency: str
    notional: float
    start_date: date
    end_date: date
    payment_date: date
    year_fraction: float
    rate: float

    def amount(self) -> float:
        return self.notional * self.rate * self.year_fraction


@dataclass(frozen=True)
class IborCouponPeriod:
    """Floating coupon on an Ibor observation, paid on payment_date."""
    currency: str
    notional: float
    start_date: date
    end_date: date
    payment_date: date
    year_fraction: float
    observation: IborRateObservation
    spread: float = 0.0

    def amount(self, rate: float) -> float:
        return self.notional * (rate + self.spread) * self.year_fraction


CouponPeriod = Union[FixedRateCouponPeriod, IborCouponPeriod]


@dataclass(frozen=True)
class SwapLeg:
    """Coupon periods in a single currency."""
    periods: Tuple[CouponPeriod, ...]

    def __post_init__(self):
        periods = tuple(self.periods)
        object.__setattr__(self, "periods", periods)
        if not periods:
            raise ConfigurationError("A swap leg needs at least one period")
        currencies = {p.currency for p in periods}
        if len(currencies) > 1:
            raise ConfigurationError(f"Mixed currencies in swap leg: {sorted(currencies)}")

    @property
    def currency(self) -> str:
        return self.periods[0].currency

    def __iter__(self):
        return iter(self.periods)

    @classmethod
    def fixed(
        cls,
        currency: str,
        start_date: date,
        end_date: date,
        rate: float,
        notional: float,
        frequency: int = 4,
        day_count: DayCount = DayCount.ACT_360,
        business_day: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
        holidays: Optional[set] = None
    ) -> "SwapLeg":
        """Fixed-rate leg on a regular schedule; use a negative notional to pay."""
        schedule = generate_accrual_schedule(start_date, end_date, frequency, day_count, business_day, holidays)
        return cls(tuple(
            FixedRateCouponPeriod(currency, notional, s, e, e, yf, rate)
            for s, e, yf in zip(schedule.accrual_starts, schedule.accrual_ends, schedule.year_fractions)
        ))

    @classmethod
    def ibor(
        cls,
        index: IborIndex,
        start_date: date,
        end_date: date,
        notional: float,
        spread: float = 0.0,
        frequency: int = 4,
        day_count: DayCount = DayCount.ACT_360,
        business_day: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
        holidays: Optional[set] = None
    ) -> "SwapLeg":
        """Ibor leg fixing in advance on a regular schedule."""
        schedule = generate_accrual_schedule(start_date, end_date, frequency, day_count, business_day, holidays)
        return cls(tuple(
            IborCouponPeriod(index.currency, notional, s, e, e, yf,
                             IborRateObservation.of(index, index.fixing_date(s, holidays), holidays), spread)
            for s, e, yf in zip(schedule.accrual_starts, schedule.accrual_ends, schedule.year_fractions)
        ))


__all__ = [
    "FixedRateCouponPeriod",
    "IborCouponPeriod",
    "SwapLeg",
]
