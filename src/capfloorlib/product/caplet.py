"""
Caplet and floorlet periods.

A caplet pays notional * yf * max(rate - strike, 0) on the payment date,
a floorlet notional * yf * max(strike - rate, 0). The binary variants pay
amount * yf when in the money and nothing otherwise. The overnight
in-arrears variants observe a daily compounded rate over the accrual
period itself and expire at its end.

Exactly one of caplet/floorlet must be given; its value is the strike.
"""

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Optional

from ..errors import ConfigurationError
from ..index import IborIndex, IborRateObservation, OvernightCompoundedObservation, OvernightIndex


class PutCall(Enum):
    """Option type on the rate: a caplet is a call, a floorlet a put."""
    CALL = "Call"
    PUT = "Put"


class _OptionletTerms:
    """Accessors shared by vanilla and binary periods."""

    caplet: Optional[float]
    floorlet: Optional[float]
    observation: IborRateObservation
    start_date: date
    end_date: date
    payment_date: Optional[date]
    currency: Optional[str]

    def _validate_terms(self) -> None:
        if (self.caplet is None) == (self.floorlet is None):
            raise ConfigurationError(
                f"Exactly one of caplet and floorlet must be set, got caplet={self.caplet}, "
                f"floorlet={self.floorlet}")
        if self.end_date <= self.start_date:
            raise ConfigurationError(f"End date {self.end_date} must be after start date {self.start_date}")
        if self.payment_date is None:
            object.__setattr__(self, "payment_date", self.end_date)
        if self.currency is None:
            object.__setattr__(self, "currency", self.observation.currency)

    @property
    def strike(self) -> float:
        return self.caplet if self.caplet is not None else self.floorlet

    @property
    def put_call(self) -> PutCall:
        return PutCall.CALL if self.caplet is not None else PutCall.PUT

    @property
    def is_call(self) -> bool:
        return self.caplet is not None

    @property
    def fixing_date(self) -> date:
        return self.observation.fixing_date

    @property
    def index(self) -> IborIndex:
        return self.observation.index

    def is_in_the_money(self, rate: float) -> bool:
        return rate > self.strike if self.is_call else rate < self.strike


@dataclass(frozen=True)
class CapletFloorletPeriod(_OptionletTerms):
    """
    A single caplet or floorlet.

    Attributes:
        notional: Signed notional (positive = long)
        start_date: Accrual start
        end_date: Accrual end
        year_fraction: Accrual year fraction
        observation: Ibor rate observation setting the payoff
        caplet: Caplet strike, if a caplet
        floorlet: Floorlet strike, if a floorlet
        payment_date: Payment date (defaults to end_date)
        currency: Payment currency (defaults to the index currency)
    """
    notional: float
    start_date: date
    end_date: date
    year_fraction: float
    observation: IborRateObservation
    caplet: Optional[float] = None
    floorlet: Optional[float] = None
    payment_date: Optional[date] = None
    currency: Optional[str] = None

    def __post_init__(self):
        self._validate_terms()

    def payoff(self, rate: float) -> float:
        """Cash paid for a given fixing."""
        intrinsic = rate - self.strike if self.is_call else self.strike - rate
        return self.notional * self.year_fraction * max(intrinsic, 0.0)

    def with_notional(self, notional: float) -> "CapletFloorletPeriod":
        return replace(self, notional=notional)

    def with_strike(self, strike: float) -> "CapletFloorletPeriod":
        """Same period and option type at another strike."""
        if self.is_call:
            return replace(self, caplet=strike)
        return replace(self, floorlet=strike)


@dataclass(frozen=True)
class CapletFloorletBinaryPeriod(_OptionletTerms):
    """
    A digital caplet or floorlet.

    Attributes:
        amount: Signed amount paid per unit of accrual when in the money
        start_date: Accrual start
        end_date: Accrual end
        year_fraction: Accrual year fraction
        observation: Ibor rate observation setting the payoff
        caplet: Caplet strike, if a caplet
        floorlet: Floorlet strike, if a floorlet
        payment_date: Payment date (defaults to end_date)
        currency: Payment currency (defaults to the index currency)
    """
    amount: float
    start_date: date
    end_date: date
    year_fraction: float
    observation: IborRateObservation
    caplet: Optional[float] = None
    floorlet: Optional[float] = None
    payment_date: Optional[date] = None
    currency: Optional[str] = None

    def __post_init__(self):
        self._validate_terms()

    def payoff(self, rate: float) -> float:
        return self.amount * self.year_fraction if self.is_in_the_money(rate) else 0.0

    def with_amount(self, amount: float) -> "CapletFloorletBinaryPeriod":
        return replace(self, amount=amount)

    def vanilla(self, strike: float, notional: float) -> CapletFloorletPeriod:
        """Vanilla period of the same option type, dates and observation."""
        return CapletFloorletPeriod(
            notional=notional,
            start_date=self.start_date,
            end_date=self.end_date,
            year_fraction=self.year_fraction,
            observation=self.observation,
            caplet=strike if self.is_call else None,
            floorlet=None if self.is_call else strike,
            payment_date=self.payment_date,
            currency=self.currency
        )


class _InArrearsTerms:
    """Overrides shared by in-arrears vanilla and binary periods."""

    observation: OvernightCompoundedObservation
    start_date: date
    end_date: date

    def _validate_accrual(self) -> None:
        if (self.observation.start_date, self.observation.end_date) != (self.start_date, self.end_date):
            raise ConfigurationError(
                f"Compounding period {self.observation.start_date} to {self.observation.end_date} must "
                f"match the accrual period {self.start_date} to {self.end_date}")

    @property
    def fixing_date(self) -> date:
        """The rate is set over the whole accrual, so the option expires at its end."""
        return self.end_date

    @property
    def index(self) -> OvernightIndex:
        return self.observation.index


@dataclass(frozen=True)
class OvernightInArrearsCapletFloorletPeriod(_InArrearsTerms, CapletFloorletPeriod):
    """
    A caplet or floorlet on an overnight rate compounded in arrears.

    The payoff is set by the daily compounded rate over the accrual period
    itself, so the option stays alive until the accrual end.

    Attributes:
        observation: Compounded overnight observation over [start_date, end_date]
    """
    observation: OvernightCompoundedObservation

    def __post_init__(self):
        self._validate_terms()
        self._validate_accrual()


@dataclass(frozen=True)
class OvernightInArrearsCapletFloorletBinaryPeriod(_InArrearsTerms, CapletFloorletBinaryPeriod):
    """A digital caplet or floorlet on an overnight rate compounded in arrears."""
    observation: OvernightCompoundedObservation

    def __post_init__(self):
        self._validate_terms()
        self._validate_accrual()

    def vanilla(self, strike: float, notional: float) -> OvernightInArrearsCapletFloorletPeriod:
        return OvernightInArrearsCapletFloorletPeriod(
            notional=notional,
            start_date=self.start_date,
            end_date=self.end_date,
            year_fraction=self.year_fraction,
            observation=self.observation,
            caplet=strike if self.is_call else None,
            floorlet=None if self.is_call else strike,
            payment_date=self.payment_date,
            currency=self.currency
        )


__all__ = [
    "PutCall",
    "CapletFloorletPeriod",
    "CapletFloorletBinaryPeriod",
    "OvernightInArrearsCapletFloorletPeriod",
    "OvernightInArrearsCapletFloorletBinaryPeriod",
]
