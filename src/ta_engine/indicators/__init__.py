"""Indicator engine.

Provides the Indicator contract, the memoizing CachedIndicator, direct
price/constant indicators, moving averages, the directional movement
family, and the factories the verification harness builds indicators with.
"""

from ta_engine.indicators.adx import (
    ADXIndicator,
    ATRIndicator,
    DXIndicator,
    MinusDIIndicator,
    MinusDMIndicator,
    PlusDIIndicator,
    PlusDMIndicator,
    TRIndicator,
)
from ta_engine.indicators.averages import EMAIndicator, MMAIndicator, SMAIndicator
from ta_engine.indicators.base import CachedIndicator, FunctionIndicator, Indicator
from ta_engine.indicators.factory import (
    IndicatorFactory,
    PeriodIndicatorFactory,
    available_factories,
    get_factory,
    register_factory,
)
from ta_engine.indicators.helpers import (
    ClosePriceIndicator,
    ConstantIndicator,
    HighPriceIndicator,
    LowPriceIndicator,
    OpenPriceIndicator,
    VolumeIndicator,
)

__all__ = [
    "ADXIndicator",
    "ATRIndicator",
    "CachedIndicator",
    "ClosePriceIndicator",
    "ConstantIndicator",
    "DXIndicator",
    "EMAIndicator",
    "FunctionIndicator",
    "HighPriceIndicator",
    "Indicator",
    "IndicatorFactory",
    "LowPriceIndicator",
    "MMAIndicator",
    "MinusDIIndicator",
    "MinusDMIndicator",
    "OpenPriceIndicator",
    "PeriodIndicatorFactory",
    "PlusDIIndicator",
    "PlusDMIndicator",
    "SMAIndicator",
    "TRIndicator",
    "VolumeIndicator",
    "available_factories",
    "get_factory",
    "register_factory",
]
