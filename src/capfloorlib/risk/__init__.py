"""
Risk module - finite difference sensitivities.

Provides:
- FiniteDifferenceCalculator: bump-and-reprice curve and volatility risk
"""

from .bumping import FiniteDifferenceCalculator

__all__ = [
    "FiniteDifferenceCalculator",
]
