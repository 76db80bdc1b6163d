"""Indicator contract and the memoizing CachedIndicator.

An indicator is a pure function from a series index to a Num, bound to the
TimeSeries it reads. Two evaluation strategies share the contract:

* direct indicators compute their value on every call (price accessors,
  constants), and
* CachedIndicator subclasses implement ``calculate(index)`` and inherit a
  ``get_value`` that computes each index exactly once.

CachedIndicator fills its cache in ascending index order. A formula that
reads its own value at ``i - 1`` therefore always hits the cache, so an
N-bar series costs N base computations and the call stack grows with the
depth of the dependency graph, never with the length of the series.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable

from ta_engine.exceptions import CyclicDependencyError
from ta_engine.logging import get_logger
from ta_engine.num import Num
from ta_engine.series.time_series import TimeSeries

logger = get_logger(__name__)


class Indicator(ABC):
    """A derived numeric signal over a TimeSeries.

    The series must outlive the indicator and must not be modified while
    the indicator is in use.
    """

    def __init__(self, series: TimeSeries) -> None:
        self._series = series

    @property
    def series(self) -> TimeSeries:
        return self._series

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def get_value(self, index: int) -> Num:
        """Return the value at ``index``.

        Raises:
            IndexOutOfRangeError: If ``index`` is outside the series bounds.
        """
        ...

    def values(self) -> list[Num]:
        """Evaluate every index of the series, ascending."""
        return [self.get_value(i) for i in self._series.indices()]

    def __repr__(self) -> str:
        return f"{self.name}(series={self._series.name!r})"


class CachedIndicator(Indicator):
    """Indicator that memoizes ``calculate`` per index.

    ``get_value(i)`` returns the cached value when ``i <= highest_index``.
    Otherwise every index from ``highest_index + 1`` up to ``i`` is computed
    in ascending order and stored as it is produced.

    Concurrent callers are supported. Each single index is computed under
    the instance lock; a thread that loses the race for an index waits and
    then reuses the winner's value. The lock is released between indices.

    A formula that makes its own indicator compute an index it is already
    computing (a self read at ``i``, a look-ahead, or a cycle through other
    indicators) raises CyclicDependencyError on first evaluation.
    """

    def __init__(self, series: TimeSeries) -> None:
        super().__init__(series)
        self._results: list[Num] = []
        self._highest_index = series.begin_index - 1
        self._lock = threading.Lock()
        self._computing_thread: int | None = None
        self._computing_index: int | None = None

    @abstractmethod
    def calculate(self, index: int) -> Num:
        """Compute the value at ``index`` from prerequisites and earlier values."""
        ...

    @property
    def highest_index(self) -> int:
        """Highest index computed so far (``begin_index - 1`` before any)."""
        return self._highest_index

    def get_value(self, index: int) -> Num:
        self._series.check_index(index)
        if index > self._highest_index:
            self._fill_to(index)
        # Results are appended before highest_index advances, so a reader
        # that sees the new highest_index always finds the value.
        return self._results[index - self._series.begin_index]

    def _fill_to(self, index: int) -> None:
        if self._computing_thread == threading.get_ident():
            raise CyclicDependencyError(
                f"{self.name} requested index {index} while computing index "
                f"{self._computing_index}"
            )

        start = self._highest_index + 1
        for i in range(start, index + 1):
            with self._lock:
                if i <= self._highest_index:
                    continue
                self._computing_thread = threading.get_ident()
                self._computing_index = i
                try:
                    value = self.calculate(i)
                finally:
                    self._computing_thread = None
                    self._computing_index = None
                self._results.append(value)
                self._highest_index = i

        logger.debug(
            "indicator_cache_filled",
            indicator=self.name,
            series=self._series.name,
            start=start,
            end=index,
        )


class FunctionIndicator(CachedIndicator):
    """Cached indicator whose formula is a plain callable.

    The callable receives the indicator itself (so it can read its own
    earlier values) and the index being computed.

    Args:
        series: The series the formula reads.
        formula: ``formula(indicator, index) -> Num``.
        name: Optional label used in logs and reprs.
    """

    def __init__(
        self,
        series: TimeSeries,
        formula: Callable[[FunctionIndicator, int], Num],
        name: str | None = None,
    ) -> None:
        super().__init__(series)
        self._formula = formula
        self._label = name

    @property
    def name(self) -> str:
        return self._label or super().name

    def calculate(self, index: int) -> Num:
        return self._formula(self, index)
