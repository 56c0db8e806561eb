"""
Point and parameter sensitivities.

Provides:
- PointSensitivity records (zero rate, Ibor rate, overnight rate, caplet vol,
  SABR parameter)
- PointSensitivities: immutable, combinable list of records
- CurrencyParameterSensitivity/ies: resolved per-node sensitivity vectors

Point sensitivities are produced by pricers and combined additively across
periods and legs. They are resolved into dense vectors only at the end, by
the rates provider or the volatilities that own the underlying curves.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .index import IborRateObservation, OvernightCompoundedObservation


class SabrParameterType(Enum):
    """SABR model parameter."""
    ALPHA = "alpha"
    BETA = "beta"
    RHO = "rho"
    NU = "nu"


class PointSensitivity:
    """
    Base class for a single sensitivity record.

    Subclasses are frozen dataclasses with currency and sensitivity fields.
    """
    currency: str
    sensitivity: float

    def with_sensitivity(self, value: float) -> "PointSensitivity":
        return replace(self, sensitivity=value)

    def multiplied_by(self, factor: float) -> "PointSensitivity":
        return self.with_sensitivity(self.sensitivity * factor)

    def key(self) -> Tuple:
        """Identity of the record, excluding its value."""
        raise NotImplementedError


@dataclass(frozen=True)
class ZeroRateSensitivity(PointSensitivity):
    """Sensitivity to the continuously compounded zero rate of a discount curve at a time."""
    curve_currency: str
    year_fraction: float
    currency: str
    sensitivity: float

    def key(self) -> Tuple:
        return ("zero", self.curve_currency, self.year_fraction, self.currency)


@dataclass(frozen=True)
class IborRateSensitivity(PointSensitivity):
    """Sensitivity to the forward rate of an Ibor observation."""
    observation: IborRateObservation
    currency: str
    sensitivity: float

    def key(self) -> Tuple:
        return ("ibor", self.observation.index.name, self.observation.fixing_date, self.currency)


@dataclass(frozen=True)
class OvernightRateSensitivity(PointSensitivity):
    """Sensitivity to the projected part of a compounded overnight rate."""
    observation: OvernightCompoundedObservation
    currency: str
    sensitivity: float

    def key(self) -> Tuple:
        return ("overnight", self.observation.index.name, self.observation.start_date,
                self.observation.end_date, self.currency)


@dataclass(frozen=True)
class CapletFloorletSensitivity(PointSensitivity):
    """Sensitivity to the caplet volatility at (expiry, strike, forward)."""
    volatilities_name: str
    expiry: float
    strike: float
    forward: float
    currency: str
    sensitivity: float

    def key(self) -> Tuple:
        return ("vol", self.volatilities_name, self.expiry, self.strike, self.forward, self.currency)


@dataclass(frozen=True)
class CapletFloorletSabrSensitivity(PointSensitivity):
    """Sensitivity to one SABR parameter at an expiry."""
    volatilities_name: str
    expiry: float
    sensitivity_type: SabrParameterType
    currency: str
    sensitivity: float

    def key(self) -> Tuple:
        return ("sabr", self.volatilities_name, self.expiry, self.sensitivity_type.value, self.currency)


def _sort_key(key: Tuple) -> Tuple:
    return tuple(k.toordinal() if isinstance(k, date) else k for k in key)


@dataclass(frozen=True)
class PointSensitivities:
    """
    Immutable list of point sensitivities.

    Combination is concatenation; normalized() merges records sharing a
    key, so the resolved result does not depend on combination order.
    """
    sensitivities: Tuple[PointSensitivity, ...] = ()

    @classmethod
    def none(cls) -> "PointSensitivities":
        """The empty sensitivity."""
        return cls(())

    @classmethod
    def of(cls, *sensitivities: PointSensitivity) -> "PointSensitivities":
        return cls(tuple(sensitivities))

    def combined_with(self, other: "PointSensitivities") -> "PointSensitivities":
        if not other.sensitivities:
            return self
        if not self.sensitivities:
            return other
        return PointSensitivities(self.sensitivities + other.sensitivities)

    def multiplied_by(self, factor: float) -> "PointSensitivities":
        return PointSensitivities(tuple(s.multiplied_by(factor) for s in self.sensitivities))

    def normalized(self) -> "PointSensitivities":
        """Merge records with the same key and sort them."""
        merged: Dict[Tuple, PointSensitivity] = {}
        for s in self.sensitivities:
            existing = merged.get(s.key())
            merged[s.key()] = s if existing is None else existing.with_sensitivity(
                existing.sensitivity + s.sensitivity)
        ordered = sorted(merged.items(), key=lambda item: _sort_key(item[0]))
        return PointSensitivities(tuple(s for _, s in ordered))

    def equal_with_tolerance(self, other: "PointSensitivities", tolerance: float) -> bool:
        """
        Compare two sensitivities after normalisation.

        Records missing on one side are compared against zero.
        """
        mine = {s.key(): s.sensitivity for s in self.normalized()}
        theirs = {s.key(): s.sensitivity for s in other.normalized()}
        for key in set(mine) | set(theirs):
            if abs(mine.get(key, 0.0) - theirs.get(key, 0.0)) > tolerance:
                return False
        return True

    def is_empty(self) -> bool:
        return not self.sensitivities

    def __iter__(self) -> Iterator[PointSensitivity]:
        return iter(self.sensitivities)

    def __len__(self) -> int:
        return len(self.sensitivities)

    def __add__(self, other: "PointSensitivities") -> "PointSensitivities":
        return self.combined_with(other)


@dataclass(frozen=True, eq=False)
class CurrencyParameterSensitivity:
    """
    Sensitivity to each parameter of a named curve or surface.

    Attributes:
        name: Curve or surface name
        currency: Currency of the sensitivity values
        labels: Parameter labels (e.g. node tenors)
        values: Sensitivity per parameter
    """
    name: str
    currency: str
    labels: Tuple[str, ...]
    values: np.ndarray

    def __post_init__(self):
        values = np.asarray(self.values, dtype=float)
        if len(values) != len(self.labels):
            raise ValueError(f"{self.name}: {len(self.labels)} labels for {len(values)} values")
        object.__setattr__(self, "labels", tuple(self.labels))
        object.__setattr__(self, "values", values)

    @property
    def key(self) -> Tuple[str, str]:
        return (self.name, self.currency)

    def plus(self, other: "CurrencyParameterSensitivity") -> "CurrencyParameterSensitivity":
        if other.key != self.key or other.labels != self.labels:
            raise ValueError(f"Cannot add sensitivity {other.key} to {self.key}")
        return CurrencyParameterSensitivity(self.name, self.currency, self.labels, self.values + other.values)

    def multiplied_by(self, factor: float) -> "CurrencyParameterSensitivity":
        return CurrencyParameterSensitivity(self.name, self.currency, self.labels, self.values * factor)

    def total(self) -> float:
        return float(self.values.sum())


@dataclass(frozen=True, eq=False)
class CurrencyParameterSensitivities:
    """Parameter sensitivities keyed by (name, currency)."""
    sensitivities: Dict[Tuple[str, str], CurrencyParameterSensitivity] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "CurrencyParameterSensitivities":
        return cls({})

    @classmethod
    def of(cls, *sensitivities: CurrencyParameterSensitivity) -> "CurrencyParameterSensitivities":
        result = cls.empty()
        for s in sensitivities:
            result = result.combined_with(s)
        return result

    def combined_with(self, other) -> "CurrencyParameterSensitivities":
        """Add a single sensitivity or another collection, merging matching keys."""
        items: Iterable[CurrencyParameterSensitivity]
        if isinstance(other, CurrencyParameterSensitivities):
            items = other.sensitivities.values()
        else:
            items = [other]
        merged = dict(self.sensitivities)
        for s in items:
            merged[s.key] = merged[s.key].plus(s) if s.key in merged else s
        return CurrencyParameterSensitivities(merged)

    def multiplied_by(self, factor: float) -> "CurrencyParameterSensitivities":
        return CurrencyParameterSensitivities(
            {key: s.multiplied_by(factor) for key, s in self.sensitivities.items()})

    def get(self, name: str, currency: str) -> CurrencyParameterSensitivity:
        try:
            return self.sensitivities[(name, currency)]
        except KeyError:
            raise KeyError(f"No sensitivity for {name} in {currency}") from None

    def find(self, name: str, currency: str) -> Optional[CurrencyParameterSensitivity]:
        return self.sensitivities.get((name, currency))

    def equal_with_tolerance(self, other: "CurrencyParameterSensitivities", tolerance: float) -> bool:
        """Compare element-wise; entries missing on one side count as zero."""
        for key in set(self.sensitivities) | set(other.sensitivities):
            mine = self.sensitivities.get(key)
            theirs = other.sensitivities.get(key)
            a = mine.values if mine is not None else np.zeros(len(theirs.values))
            b = theirs.values if theirs is not None else np.zeros(len(mine.values))
            if len(a) != len(b) or np.any(np.abs(a - b) > tolerance):
                return False
        return True

    def to_frame(self) -> pd.DataFrame:
        """Flatten to a DataFrame with columns name, currency, label, value."""
        rows: List[Dict] = []
        for (name, currency), s in sorted(self.sensitivities.items()):
            for label, value in zip(s.labels, s.values):
                rows.append({"name": name, "currency": currency, "label": label, "value": float(value)})
        return pd.DataFrame(rows, columns=["name", "currency", "label", "value"])

    def __len__(self) -> int:
        return len(self.sensitivities)

    def __iter__(self) -> Iterator[CurrencyParameterSensitivity]:
        return iter(self.sensitivities.values())


def parameter_sensitivity(
    name: str,
    currency: str,
    labels: Sequence[str],
    values: np.ndarray
) -> CurrencyParameterSensitivities:
    """Single-entry CurrencyParameterSensitivities."""
    return CurrencyParameterSensitivities.of(CurrencyParameterSensitivity(name, currency, tuple(labels), values))


__all__ = [
    "SabrParameterType",
    "PointSensitivity",
    "ZeroRateSensitivity",
    "IborRateSensitivity",
    "OvernightRateSensitivity",
    "CapletFloorletSensitivity",
    "CapletFloorletSabrSensitivity",
    "PointSensitivities",
    "CurrencyParameterSensitivity",
    "CurrencyParameterSensitivities",
    "parameter_sensitivity",
]
