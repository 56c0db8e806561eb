"""
Curves package - discount, forward and parameter curves.

Provides:
- Curve: zero-rate discount/forward curve with node sensitivities
- NodalCurve: interpolated model parameter curve
- LinearInterpolator: linear interpolation with node weights
"""

from .curve import Curve, NodalCurve, create_flat_curve
from .interpolation import (
    Interpolator,
    LinearInterpolator,
    create_interpolator
)

__all__ = [
    "Curve",
    "NodalCurve",
    "create_flat_curve",
    "Interpolator",
    "LinearInterpolator",
    "create_interpolator",
]
