"""Directional movement indicators (Wilder).

The family is built by composition, each level a cached indicator reading
the level below it at the same index:

    TR, +DM, -DM            per-bar inputs
    ATR = MMA(TR)           smoothed true range
    +DI = MMA(+DM) / ATR * 100
    -DI = MMA(-DM) / ATR * 100
    DX  = |+DI - -DI| / (+DI + -DI) * 100
    ADX = MMA(DX)

At the first index of the series there is no previous bar: TR is the bar's
range and both directional movements are zero.

CRITICAL: All computations use Num. Never use float.
"""

from ta_engine.indicators.averages import MMAIndicator, check_period
from ta_engine.indicators.base import CachedIndicator
from ta_engine.num import Num
from ta_engine.series.time_series import TimeSeries


class TRIndicator(CachedIndicator):
    """True range: the largest of high-low, |high-prev close|, |prev close-low|."""

    def calculate(self, index: int) -> Num:
        bar = self._series.get_bar(index)
        bar_range = abs(bar.high - bar.low)
        if index == self._series.begin_index:
            return bar_range
        previous_close = self._series.get_bar(index - 1).close
        return bar_range.max(abs(bar.high - previous_close)).max(
            abs(previous_close - bar.low)
        )


class _DirectionalMovementIndicator(CachedIndicator):
    def _moves(self, index: int) -> tuple[Num, Num]:
        """Return (up move, down move) between bar ``index - 1`` and ``index``."""
        bar = self._series.get_bar(index)
        previous = self._series.get_bar(index - 1)
        return bar.high - previous.high, previous.low - bar.low


class PlusDMIndicator(_DirectionalMovementIndicator):
    """Positive directional movement."""

    def calculate(self, index: int) -> Num:
        if index == self._series.begin_index:
            return Num.ZERO
        up_move, down_move = self._moves(index)
        if up_move > down_move and up_move > Num.ZERO:
            return up_move
        return Num.ZERO


class MinusDMIndicator(_DirectionalMovementIndicator):
    """Negative directional movement."""

    def calculate(self, index: int) -> Num:
        if index == self._series.begin_index:
            return Num.ZERO
        up_move, down_move = self._moves(index)
        if down_move > up_move and down_move > Num.ZERO:
            return down_move
        return Num.ZERO


class ATRIndicator(MMAIndicator):
    """Average true range: Wilder-smoothed TR."""

    def __init__(self, series: TimeSeries, period: int) -> None:
        super().__init__(TRIndicator(series), period)


class _DirectionalIndexIndicator(CachedIndicator):
    """Smoothed directional movement as a percentage of ATR."""

    movement_class: type[_DirectionalMovementIndicator]

    def __init__(self, series: TimeSeries, period: int) -> None:
        super().__init__(series)
        self._period = check_period(period)
        self._average_movement = MMAIndicator(self.movement_class(series), period)
        self._atr = ATRIndicator(series, period)

    @property
    def period(self) -> int:
        return self._period

    def calculate(self, index: int) -> Num:
        return self._average_movement.get_value(index) / self._atr.get_value(index) * Num.HUNDRED


class PlusDIIndicator(_DirectionalIndexIndicator):
    """+DI over ``period`` bars."""

    movement_class = PlusDMIndicator


class MinusDIIndicator(_DirectionalIndexIndicator):
    """-DI over ``period`` bars."""

    movement_class = MinusDMIndicator


class DXIndicator(CachedIndicator):
    """Directional movement index: spread between +DI and -DI."""

    def __init__(self, series: TimeSeries, period: int) -> None:
        super().__init__(series)
        self._plus_di = PlusDIIndicator(series, period)
        self._minus_di = MinusDIIndicator(series, period)

    def calculate(self, index: int) -> Num:
        plus = self._plus_di.get_value(index)
        minus = self._minus_di.get_value(index)
        total = plus + minus
        if total.is_zero():
            return Num.ZERO
        return abs(plus - minus) / total * Num.HUNDRED


class ADXIndicator(MMAIndicator):
    """Average directional index: Wilder-smoothed DX.

    Args:
        series: The price series.
        di_period: Lookback for +DI/-DI.
        adx_period: Smoothing of DX; defaults to ``di_period``.
    """

    def __init__(self, series: TimeSeries, di_period: int, adx_period: int | None = None) -> None:
        if adx_period is None:
            adx_period = di_period
        super().__init__(DXIndicator(series, check_period(di_period, "di_period")), adx_period)
