"""
CapFloorLib: Interest Rate Cap/Floor Pricing & Risk Library

A modular library for:
- Pricing caplets and floorlets under Black, shifted Black, Normal and SABR
- Pricing binary caplets/floorlets by vertical spread replication
- Pricing overnight caplets/floorlets compounded in arrears
- Aggregating caplets into cap/floor legs and trades
- Point sensitivities resolved to curve and volatility parameters

Scope: single-currency Ibor and overnight caps and floors; no model calibration.
"""

__version__ = "0.1.0"

# Core modules
from .conventions import DayCount, BusinessDayConvention, year_fraction
from .dates import DateUtils, ScheduleInfo, generate_accrual_schedule
from .currency import CurrencyAmount, MultiCurrencyAmount
from .errors import (
    CapFloorLibError,
    ConfigurationError,
    ExpiredOptionError,
    InvalidModelError,
    MissingFixingError,
)
from .index import (
    IborIndex,
    IborRateObservation,
    OvernightIndex,
    OvernightCompoundedObservation,
    EUR_EURIBOR_3M,
    EUR_EURIBOR_6M,
    USD_LIBOR_3M,
    EUR_ESTR,
)
from .settings import PricingSettings, DEFAULT_SETTINGS

# Curves and market data
from .curves import Curve, NodalCurve, LinearInterpolator, create_flat_curve
from .market_state import RatesProvider

# Sensitivities
from .sensitivity import (
    PointSensitivities,
    CurrencyParameterSensitivities,
    CurrencyParameterSensitivity,
    SabrParameterType,
)

# Volatility
from .vol import (
    ModelFamily,
    BlackCapletFloorletVolatilities,
    ShiftedBlackCapletFloorletVolatilities,
    NormalCapletFloorletVolatilities,
    SabrCapletFloorletVolatilities,
    SabrParameterCurves,
    GridSurface,
    ConstantSurface,
    SabrParams,
    SabrInArrearsFunction,
    hagan_black_vol,
)

# Products
from .product import (
    CapletFloorletPeriod,
    CapletFloorletBinaryPeriod,
    OvernightInArrearsCapletFloorletPeriod,
    OvernightInArrearsCapletFloorletBinaryPeriod,
    CapFloorLeg,
    SwapLeg,
    CapFloor,
    CapFloorTrade,
    Payment,
)

# Pricers
from .pricers import (
    TimeState,
    BlackCapletFloorletPeriodPricer,
    NormalCapletFloorletPeriodPricer,
    SabrCapletFloorletPeriodPricer,
    BlackOvernightInArrearsCapletFloorletPeriodPricer,
    NormalOvernightInArrearsCapletFloorletPeriodPricer,
    SabrOvernightInArrearsCapletFloorletPeriodPricer,
    VerticalSpreadBinaryPricer,
    CapFloorLegPricer,
    SabrCapFloorLegPricer,
    CapFloorTradePricer,
)

# Risk and reporting
from .risk import FiniteDifferenceCalculator
from .reporting import caplet_report

__all__ = [
    # Version
    "__version__",
    # Conventions
    "DayCount",
    "BusinessDayConvention",
    "year_fraction",
    # Dates
    "DateUtils",
    "ScheduleInfo",
    "generate_accrual_schedule",
    # Amounts
    "CurrencyAmount",
    "MultiCurrencyAmount",
    # Errors
    "CapFloorLibError",
    "ConfigurationError",
    "ExpiredOptionError",
    "InvalidModelError",
    "MissingFixingError",
    # Indices
    "IborIndex",
    "IborRateObservation",
    "OvernightIndex",
    "OvernightCompoundedObservation",
    "EUR_EURIBOR_3M",
    "EUR_EURIBOR_6M",
    "USD_LIBOR_3M",
    "EUR_ESTR",
    # Settings
    "PricingSettings",
    "DEFAULT_SETTINGS",
    # Curves
    "Curve",
    "NodalCurve",
    "LinearInterpolator",
    "create_flat_curve",
    "RatesProvider",
    # Sensitivities
    "PointSensitivities",
    "CurrencyParameterSensitivities",
    "CurrencyParameterSensitivity",
    "SabrParameterType",
    # Volatility
    "ModelFamily",
    "BlackCapletFloorletVolatilities",
    "ShiftedBlackCapletFloorletVolatilities",
    "NormalCapletFloorletVolatilities",
    "SabrCapletFloorletVolatilities",
    "SabrParameterCurves",
    "GridSurface",
    "ConstantSurface",
    "SabrParams",
    "SabrInArrearsFunction",
    "hagan_black_vol",
    # Products
    "CapletFloorletPeriod",
    "CapletFloorletBinaryPeriod",
    "OvernightInArrearsCapletFloorletPeriod",
    "OvernightInArrearsCapletFloorletBinaryPeriod",
    "CapFloorLeg",
    "SwapLeg",
    "CapFloor",
    "CapFloorTrade",
    "Payment",
    # Pricers
    "TimeState",
    "BlackCapletFloorletPeriodPricer",
    "NormalCapletFloorletPeriodPricer",
    "SabrCapletFloorletPeriodPricer",
    "BlackOvernightInArrearsCapletFloorletPeriodPricer",
    "NormalOvernightInArrearsCapletFloorletPeriodPricer",
    "SabrOvernightInArrearsCapletFloorletPeriodPricer",
    "VerticalSpreadBinaryPricer",
    "CapFloorLegPricer",
    "SabrCapFloorLegPricer",
    "CapFloorTradePricer",
    # Risk and reporting
    "FiniteDifferenceCalculator",
    "caplet_report",
]
