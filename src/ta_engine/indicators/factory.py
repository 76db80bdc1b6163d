"""Indicator factories: parameter vectors in, indicator instances out.

The verification harness only knows this seam. It hands over a series, an
optional prerequisite indicator and the raw parameter vector it also wrote
into the reference fixture; the factory validates the shape and builds the
concrete indicator. Construction is pure: no I/O, no evaluation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from ta_engine.exceptions import FormatError, InvalidParameterError
from ta_engine.indicators.adx import (
    ADXIndicator,
    ATRIndicator,
    DXIndicator,
    MinusDIIndicator,
    PlusDIIndicator,
)
from ta_engine.indicators.averages import EMAIndicator, MMAIndicator, SMAIndicator
from ta_engine.indicators.base import Indicator
from ta_engine.indicators.helpers import ClosePriceIndicator
from ta_engine.num import Num
from ta_engine.series.time_series import TimeSeries


class IndicatorFactory(ABC):
    """Builds one kind of indicator from a parameter vector."""

    name: str

    @abstractmethod
    def build(
        self,
        series: TimeSeries,
        prerequisite: Indicator | None,
        *params: object,
    ) -> Indicator:
        """Construct the indicator.

        Raises:
            InvalidParameterError: If ``params`` do not fit the formula.
        """
        ...


def to_period(value: object) -> int:
    """Convert a raw parameter (int, integral float, text, Decimal, Num) to a period.

    Raises:
        InvalidParameterError: If the value is not a positive whole number.
    """
    try:
        number = Num.of(value)
    except FormatError as exc:
        raise InvalidParameterError(f"period is not numeric: {value!r}") from exc
    if number.is_nan() or number.to_decimal() != number.to_decimal().to_integral_value():
        raise InvalidParameterError(f"period must be a whole number, got {value!r}")
    period = int(number)
    if period < 1:
        raise InvalidParameterError(f"period must be >= 1, got {value!r}")
    return period


class PeriodIndicatorFactory(IndicatorFactory):
    """Factory for indicators parameterized by lookback periods only.

    Args:
        name: Registry key.
        constructor: Called as ``constructor(source, *periods)`` where source
            is the prerequisite indicator (``takes_prerequisite``) or the series.
        takes_prerequisite: Whether the indicator averages another indicator;
            close prices are used when no prerequisite is given.
        param_count: Maximum number of periods accepted.
        optional_params: How many trailing periods may be omitted.
    """

    def __init__(
        self,
        name: str,
        constructor: Callable[..., Indicator],
        takes_prerequisite: bool = False,
        param_count: int = 1,
        optional_params: int = 0,
    ) -> None:
        self.name = name
        self._constructor = constructor
        self._takes_prerequisite = takes_prerequisite
        self._max_params = param_count
        self._min_params = param_count - optional_params

    def build(
        self,
        series: TimeSeries,
        prerequisite: Indicator | None,
        *params: object,
    ) -> Indicator:
        if not self._min_params <= len(params) <= self._max_params:
            expected = (
                str(self._max_params)
                if self._min_params == self._max_params
                else f"{self._min_params}-{self._max_params}"
            )
            raise InvalidParameterError(
                f"{self.name} expects {expected} parameter(s), got {len(params)}: {params!r}"
            )
        if prerequisite is not None and prerequisite.series is not series:
            raise InvalidParameterError(
                f"{self.name} prerequisite {prerequisite!r} is bound to another series"
            )
        periods = [to_period(p) for p in params]

        if self._takes_prerequisite:
            source = prerequisite if prerequisite is not None else ClosePriceIndicator(series)
            return self._constructor(source, *periods)
        return self._constructor(series, *periods)

    def __repr__(self) -> str:
        return f"PeriodIndicatorFactory(name={self.name!r})"


_REGISTRY: dict[str, IndicatorFactory] = {}


def register_factory(factory: IndicatorFactory) -> IndicatorFactory:
    """Add a factory to the registry under ``factory.name``, replacing any previous one."""
    _REGISTRY[factory.name] = factory
    return factory


def get_factory(name: str) -> IndicatorFactory:
    """Look up a registered factory.

    Raises:
        InvalidParameterError: If no factory is registered under ``name``.
    """
    try:
        return _REGISTRY[name]
    except KeyError:
        raise InvalidParameterError(
            f"unknown indicator {name!r}; available: {', '.join(available_factories())}"
        ) from None


def available_factories() -> list[str]:
    return sorted(_REGISTRY)


for _factory in (
    PeriodIndicatorFactory("sma", SMAIndicator, takes_prerequisite=True),
    PeriodIndicatorFactory("ema", EMAIndicator, takes_prerequisite=True),
    PeriodIndicatorFactory("mma", MMAIndicator, takes_prerequisite=True),
    PeriodIndicatorFactory("atr", ATRIndicator),
    PeriodIndicatorFactory("plus_di", PlusDIIndicator),
    PeriodIndicatorFactory("minus_di", MinusDIIndicator),
    PeriodIndicatorFactory("dx", DXIndicator),
    PeriodIndicatorFactory("adx", ADXIndicator, param_count=2, optional_params=1),
):
    register_factory(_factory)
