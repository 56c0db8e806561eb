"""
Volatility module - caplet/floorlet volatilities and the SABR model.

Provides:
- Black, shifted Black and Normal volatilities on (expiry, strike) surfaces
- SABR volatilities on parameter term structures
- Hagan implied volatility approximation and its adjoint
- Effective SABR parameters for in-arrears rates
"""

from .sabr import SabrInArrearsFunction, SabrParams, VolatilityAdjoint, hagan_black_vol, volatility_adjoint
from .sabr_volatilities import SabrCapletFloorletVolatilities, SabrParameterCurves
from .surface import ConstantSurface, GridSurface
from .volatilities import (
    BlackCapletFloorletVolatilities,
    CapletFloorletVolatilities,
    ModelFamily,
    NormalCapletFloorletVolatilities,
    ShiftedBlackCapletFloorletVolatilities,
)

__all__ = [
    "SabrParams",
    "VolatilityAdjoint",
    "hagan_black_vol",
    "volatility_adjoint",
    "SabrInArrearsFunction",
    "SabrCapletFloorletVolatilities",
    "SabrParameterCurves",
    "ConstantSurface",
    "GridSurface",
    "ModelFamily",
    "CapletFloorletVolatilities",
    "BlackCapletFloorletVolatilities",
    "ShiftedBlackCapletFloorletVolatilities",
    "NormalCapletFloorletVolatilities",
]
