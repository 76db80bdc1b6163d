"""Moving averages: simple, exponential and Wilder's modified average.

EMA and MMA are the recursive pattern the cache exists for: the value at
``i`` reads the average's own value at ``i - 1``. The first index of the
series seeds the recursion with the input value itself.

CRITICAL: All computations use Num. Never use float.
"""

from ta_engine.exceptions import InvalidParameterError
from ta_engine.indicators.base import CachedIndicator, Indicator
from ta_engine.num import Num


def check_period(period: int, name: str = "period") -> int:
    """Validate a lookback window length.

    Raises:
        InvalidParameterError: If ``period`` is not a positive int.
    """
    if isinstance(period, bool) or not isinstance(period, int):
        raise InvalidParameterError(f"{name} must be an int, got {period!r}")
    if period < 1:
        raise InvalidParameterError(f"{name} must be >= 1, got {period}")
    return period


class SMAIndicator(CachedIndicator):
    """Simple moving average over the last ``period`` values.

    Near the start of the series the window shrinks to the values available.
    """

    def __init__(self, indicator: Indicator, period: int) -> None:
        super().__init__(indicator.series)
        self._indicator = indicator
        self._period = check_period(period)

    def calculate(self, index: int) -> Num:
        start = max(self._series.begin_index, index - self._period + 1)
        total = Num.ZERO
        for i in range(start, index + 1):
            total = total + self._indicator.get_value(i)
        return total / (index - start + 1)


class _SmoothedAverageIndicator(CachedIndicator):
    """Recursive average: ``prev + (value - prev) * multiplier``."""

    def __init__(self, indicator: Indicator, period: int, multiplier: Num) -> None:
        super().__init__(indicator.series)
        self._indicator = indicator
        self._period = check_period(period)
        self._multiplier = multiplier

    @property
    def period(self) -> int:
        return self._period

    def calculate(self, index: int) -> Num:
        value = self._indicator.get_value(index)
        if index == self._series.begin_index:
            return value
        previous = self.get_value(index - 1)
        return previous + (value - previous) * self._multiplier


class EMAIndicator(_SmoothedAverageIndicator):
    """Exponential moving average, multiplier ``2 / (period + 1)``."""

    def __init__(self, indicator: Indicator, period: int) -> None:
        check_period(period)
        super().__init__(indicator, period, Num.of(2) / (period + 1))


class MMAIndicator(_SmoothedAverageIndicator):
    """Wilder's modified moving average, multiplier ``1 / period``."""

    def __init__(self, indicator: Indicator, period: int) -> None:
        check_period(period)
        super().__init__(indicator, period, Num.ONE / period)
