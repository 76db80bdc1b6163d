"""Price bar model.

CRITICAL: All price and volume fields use Num. Never use float for prices.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ta_engine.num import Num


@dataclass(frozen=True)
class Bar:
    """A single OHLCV bar covering ``time_period`` and ending at ``end_time``.

    Immutable: nothing modifies a bar once it has been added to a series.
    """

    time_period: timedelta
    end_time: datetime
    open: Num
    high: Num
    low: Num
    close: Num
    volume: Num = Num.ZERO

    @classmethod
    def of(
        cls,
        time_period: timedelta,
        end_time: datetime,
        open: object,
        high: object,
        low: object,
        close: object,
        volume: object = 0,
    ) -> Bar:
        """Build a bar from raw numerics or numeric text.

        Raises:
            FormatError: If any price or volume text is not a valid number.
        """
        return cls(
            time_period=time_period,
            end_time=end_time,
            open=Num.of(open),
            high=Num.of(high),
            low=Num.of(low),
            close=Num.of(close),
            volume=Num.of(volume),
        )

    @property
    def begin_time(self) -> datetime:
        return self.end_time - self.time_period

    @property
    def is_bullish(self) -> bool:
        """True when the bar closed above its open."""
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        """True when the bar closed below its open."""
        return self.close < self.open

    def in_period(self, timestamp: datetime) -> bool:
        """True if ``timestamp`` falls in [begin_time, end_time)."""
        return self.begin_time <= timestamp < self.end_time
