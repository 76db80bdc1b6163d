"""Direct (uncached) indicators reading bar fields or constants."""

from ta_engine.indicators.base import Indicator
from ta_engine.num import Num
from ta_engine.series.time_series import TimeSeries


class ConstantIndicator(Indicator):
    """Same value at every index."""

    def __init__(self, series: TimeSeries, value: object) -> None:
        super().__init__(series)
        self._value = Num.of(value)

    def get_value(self, index: int) -> Num:
        self._series.check_index(index)
        return self._value


class PriceIndicator(Indicator):
    """Reads one bar field ("open", "high", "low", "close" or "volume")."""

    field = "close"

    def get_value(self, index: int) -> Num:
        return getattr(self._series.get_bar(index), self.field)


class OpenPriceIndicator(PriceIndicator):
    field = "open"


class HighPriceIndicator(PriceIndicator):
    field = "high"


class LowPriceIndicator(PriceIndicator):
    field = "low"


class ClosePriceIndicator(PriceIndicator):
    field = "close"


class VolumeIndicator(PriceIndicator):
    field = "volume"
