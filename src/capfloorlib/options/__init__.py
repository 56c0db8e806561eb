"""
Options module - closed-form formulas on a forward rate.

Provides:
- Bachelier (normal) and Black'76 prices and Greeks
- Shifted Black for negative rates
- Implied volatility inversion
"""

from .base_models import (
    bachelier_call,
    bachelier_put,
    bachelier_price,
    black76_call,
    black76_put,
    black76_price,
    shifted_black_call,
    shifted_black_put,
    bachelier_greeks,
    black76_greeks,
    implied_vol_bachelier,
    implied_vol_black,
)

__all__ = [
    "bachelier_call",
    "bachelier_put",
    "bachelier_price",
    "black76_call",
    "black76_put",
    "black76_price",
    "shifted_black_call",
    "shifted_black_put",
    "bachelier_greeks",
    "black76_greeks",
    "implied_vol_bachelier",
    "implied_vol_black",
]
