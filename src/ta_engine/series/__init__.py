"""Bar and time series models the indicators are evaluated over."""

from ta_engine.series.bar import Bar
from ta_engine.series.time_series import TimeSeries

__all__ = [
    "Bar",
    "TimeSeries",
]
