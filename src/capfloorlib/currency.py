"""
Currency-tagged amounts.

Provides:
- CurrencyAmount: signed amount in a single currency
- MultiCurrencyAmount: amounts in several currencies
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Mapping, Union

import pandas as pd


@dataclass(frozen=True)
class CurrencyAmount:
    """A signed amount in one currency."""
    currency: str
    amount: float

    @classmethod
    def zero(cls, currency: str) -> "CurrencyAmount":
        """Zero amount in the given currency."""
        return cls(currency, 0.0)

    def plus(self, other: "CurrencyAmount") -> "CurrencyAmount":
        """Add an amount in the same currency."""
        if other.currency != self.currency:
            raise ValueError(f"Currency mismatch: {self.currency} vs {other.currency}")
        return CurrencyAmount(self.currency, self.amount + other.amount)

    def multiplied_by(self, factor: float) -> "CurrencyAmount":
        return CurrencyAmount(self.currency, self.amount * factor)

    def negated(self) -> "CurrencyAmount":
        return CurrencyAmount(self.currency, -self.amount)

    def __add__(self, other: "CurrencyAmount") -> "CurrencyAmount":
        return self.plus(other)

    def __neg__(self) -> "CurrencyAmount":
        return self.negated()


@dataclass(frozen=True)
class MultiCurrencyAmount:
    """
    Amounts keyed by currency.

    Currencies are stored once each; adding an amount in an existing
    currency accumulates into it.
    """
    amounts: Mapping[str, float] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "MultiCurrencyAmount":
        return cls({})

    @classmethod
    def of(cls, *amounts: CurrencyAmount) -> "MultiCurrencyAmount":
        """Build from currency amounts, summing duplicates."""
        return cls.empty().plus_all(amounts)

    @property
    def currencies(self) -> Iterable[str]:
        return sorted(self.amounts)

    def get_amount(self, currency: str) -> CurrencyAmount:
        """Amount in a currency, zero if absent."""
        return CurrencyAmount(currency, self.amounts.get(currency, 0.0))

    def plus(
        self,
        other: Union[CurrencyAmount, "MultiCurrencyAmount"]
    ) -> "MultiCurrencyAmount":
        """Add a single-currency or multi-currency amount."""
        if isinstance(other, MultiCurrencyAmount):
            return self.plus_all(other)
        totals: Dict[str, float] = dict(self.amounts)
        totals[other.currency] = totals.get(other.currency, 0.0) + other.amount
        return MultiCurrencyAmount(totals)

    def plus_all(self, amounts: Iterable[CurrencyAmount]) -> "MultiCurrencyAmount":
        result = self
        for amount in amounts:
            result = result.plus(amount)
        return result

    def multiplied_by(self, factor: float) -> "MultiCurrencyAmount":
        return MultiCurrencyAmount({ccy: amt * factor for ccy, amt in self.amounts.items()})

    def to_series(self) -> pd.Series:
        """Amounts as a pandas Series indexed by currency."""
        return pd.Series({ccy: self.amounts[ccy] for ccy in self.currencies}, dtype=float)

    def __iter__(self) -> Iterator[CurrencyAmount]:
        for ccy in self.currencies:
            yield CurrencyAmount(ccy, self.amounts[ccy])

    def __len__(self) -> int:
        return len(self.amounts)

    def __add__(self, other: Union[CurrencyAmount, "MultiCurrencyAmount"]) -> "MultiCurrencyAmount":
        return self.plus(other)


__all__ = [
    "CurrencyAmount",
    "MultiCurrencyAmount",
]
