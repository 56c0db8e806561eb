"""
Exception hierarchy for cap/floor pricing.

Provides:
- CapFloorLibError: common base for library errors
- InvalidModelError: volatilities of the wrong model family, or a period
  kind the pricer does not model
- ExpiredOptionError: implied volatility requested on a fixed option
- ConfigurationError: malformed product or pricer configuration
- MissingFixingError: past fixing not found in the time series

All concrete errors are also ValueErrors so callers catching ValueError
keep working.
"""


class CapFloorLibError(Exception):
    """Base class for all capfloorlib errors."""


class InvalidModelError(CapFloorLibError, ValueError):
    """Raised when a pricer receives volatilities or a period kind it does not support."""


class ExpiredOptionError(CapFloorLibError, ValueError):
    """Raised when an implied volatility is requested for an option that has already fixed."""


class ConfigurationError(CapFloorLibError, ValueError):
    """Raised at construction time for malformed periods, legs, pricers or settings."""


class MissingFixingError(CapFloorLibError, ValueError):
    """Raised when a fixing in the past is required but has not been published."""


__all__ = [
    "CapFloorLibError",
    "InvalidModelError",
    "ExpiredOptionError",
    "ConfigurationError",
    "MissingFixingError",
]
