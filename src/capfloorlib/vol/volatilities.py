"""
Caplet/floorlet volatilities.

Provides:
- ModelFamily: tag identifying the pricing model a volatility object feeds
- CapletFloorletVolatilities: common interface
- BlackCapletFloorletVolatilities: Black'76 volatilities on a surface
- ShiftedBlackCapletFloorletVolatilities: Black'76 with a constant shift
- NormalCapletFloorletVolatilities: Bachelier volatilities on a surface

Every volatility object is named, dated by its valuation date and tied to
an index. Expiries are ACT/365F year fractions from the valuation date.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import ClassVar, Dict, Union

from ..index import IborIndex, OvernightIndex
from ..sensitivity import (
    CapletFloorletSensitivity,
    CurrencyParameterSensitivities,
    CurrencyParameterSensitivity,
    PointSensitivities,
)
from .surface import ConstantSurface, GridSurface

Surface = Union[GridSurface, ConstantSurface]


class ModelFamily(Enum):
    """Volatility model family."""
    BLACK = "Black"
    SHIFTED_BLACK = "ShiftedBlack"
    NORMAL = "Normal"
    SABR = "SABR"


@dataclass(frozen=True, eq=False)
class CapletFloorletVolatilities(ABC):
    """
    Read-only volatility source for caplets and floorlets.

    Attributes:
        name: Name keying the volatility point sensitivities
        index: Ibor or overnight index the volatilities apply to
        valuation_date: Date at which expiry is zero
    """
    name: str
    index: Union[IborIndex, OvernightIndex]
    valuation_date: date

    model_family: ClassVar[ModelFamily]

    @property
    def currency(self) -> str:
        return self.index.currency

    def relative_time(self, d: date) -> float:
        """Signed ACT/365F year fraction from the valuation date."""
        return (d - self.valuation_date).days / 365.0

    @abstractmethod
    def volatility(self, expiry: float, strike: float, forward: float) -> float:
        """Volatility for an expiry, strike and forward."""

    def shift(self, expiry: float) -> float:
        """Shift added to forward and strike by shifted models."""
        return 0.0

    @abstractmethod
    def parameter_sensitivity(self, sensitivities: PointSensitivities) -> CurrencyParameterSensitivities:
        """Resolve the point sensitivities owned by this object into parameter space."""

    @abstractmethod
    def parameters(self) -> Dict[str, object]:
        """Named parameter surfaces or curves."""

    @abstractmethod
    def with_parameters(self, name: str, parameters) -> "CapletFloorletVolatilities":
        """Copy with the named parameter surface or curve replaced."""


@dataclass(frozen=True, eq=False)
class _SurfaceVolatilities(CapletFloorletVolatilities):
    """Volatilities read from an (expiry, strike) surface."""
    surface: Surface

    def volatility(self, expiry: float, strike: float, forward: float) -> float:
        return self.surface.value(expiry, strike)

    def parameter_sensitivity(self, sensitivities: PointSensitivities) -> CurrencyParameterSensitivities:
        result = CurrencyParameterSensitivities.empty()
        for s in sensitivities:
            if isinstance(s, CapletFloorletSensitivity) and s.volatilities_name == self.name:
                values = s.sensitivity * self.surface.node_weights(s.expiry, s.strike)
                result = result.combined_with(CurrencyParameterSensitivity(
                    self.surface.name, s.currency, tuple(self.surface.labels), values))
        return result

    def parameters(self) -> Dict[str, object]:
        return {self.surface.name: self.surface}

    def with_parameters(self, name: str, parameters) -> "CapletFloorletVolatilities":
        if name != self.surface.name:
            raise KeyError(f"Unknown parameter surface {name} for {self.name}")
        return replace(self, surface=parameters)


@dataclass(frozen=True, eq=False)
class BlackCapletFloorletVolatilities(_SurfaceVolatilities):
    """Log-normal volatilities for Black'76."""
    model_family: ClassVar[ModelFamily] = ModelFamily.BLACK


@dataclass(frozen=True, eq=False)
class ShiftedBlackCapletFloorletVolatilities(_SurfaceVolatilities):
    """
    Log-normal volatilities of the shifted rate.

    Attributes:
        shift_value: Constant added to forward and strike
    """
    shift_value: float = 0.0

    model_family: ClassVar[ModelFamily] = ModelFamily.SHIFTED_BLACK

    def shift(self, expiry: float) -> float:
        return self.shift_value


@dataclass(frozen=True, eq=False)
class NormalCapletFloorletVolatilities(_SurfaceVolatilities):
    """Normal (Bachelier) volatilities."""
    model_family: ClassVar[ModelFamily] = ModelFamily.NORMAL


__all__ = [
    "ModelFamily",
    "CapletFloorletVolatilities",
    "BlackCapletFloorletVolatilities",
    "ShiftedBlackCapletFloorletVolatilities",
    "NormalCapletFloorletVolatilities",
]
