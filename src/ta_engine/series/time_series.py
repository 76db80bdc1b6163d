"""Append-only, index-addressed sequence of bars.

A TimeSeries is built once by a producer (a reference fixture loader or a
live builder) and is read-only for the lifetime of every indicator attached
to it. ``sub_series`` returns a bounded view over the same bar storage, so
indicators windowed to a sub-range never copy bars.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from ta_engine.exceptions import IndexOutOfRangeError, OutOfOrderError, TAError
from ta_engine.logging import get_logger
from ta_engine.series.bar import Bar

logger = get_logger(__name__)


class TimeSeries:
    """Ordered bars addressed by ``begin_index..end_index`` (inclusive).

    Index numbering is shared with views: a view over 5..9 is addressed by
    indices 5..9, never renumbered from zero. An empty series has
    ``begin_index == 0`` and ``end_index == -1``.

    Args:
        name: Label used in log events and reprs.
        bars: Optional initial bars, appended in order through ``add_bar``.
    """

    def __init__(self, name: str = "unnamed", bars: Iterable[Bar] = ()) -> None:
        self._name = name
        self._bars: list[Bar] = []
        self._bounds: tuple[int, int] | None = None
        for bar in bars:
            self.add_bar(bar)

    @classmethod
    def _view(cls, parent: TimeSeries, begin: int, end: int) -> TimeSeries:
        view = cls.__new__(cls)
        view._name = f"{parent.name}[{begin}:{end}]"
        view._bars = parent._bars
        view._bounds = (begin, end)
        return view

    # ──────────────────────────────────────────────
    # Bounds
    # ──────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    @property
    def begin_index(self) -> int:
        if self._bounds is not None:
            return self._bounds[0]
        return 0

    @property
    def end_index(self) -> int:
        if self._bounds is not None:
            return self._bounds[1]
        return len(self._bars) - 1

    @property
    def bar_count(self) -> int:
        return self.end_index - self.begin_index + 1

    @property
    def is_empty(self) -> bool:
        return self.bar_count <= 0

    @property
    def is_view(self) -> bool:
        return self._bounds is not None

    def indices(self) -> range:
        """Range over every valid index, ascending."""
        return range(self.begin_index, self.end_index + 1)

    def contains_index(self, index: int) -> bool:
        return self.begin_index <= index <= self.end_index

    def check_index(self, index: int) -> None:
        """Raise IndexOutOfRangeError unless ``index`` is a valid index."""
        if not self.contains_index(index):
            raise IndexOutOfRangeError(
                f"index {index} outside [{self.begin_index}, {self.end_index}] "
                f"of series {self._name!r}"
            )

    # ──────────────────────────────────────────────
    # Access
    # ──────────────────────────────────────────────

    def get_bar(self, index: int) -> Bar:
        self.check_index(index)
        return self._bars[index]

    @property
    def first_bar(self) -> Bar:
        return self.get_bar(self.begin_index)

    @property
    def last_bar(self) -> Bar:
        return self.get_bar(self.end_index)

    @property
    def bars(self) -> tuple[Bar, ...]:
        """The visible bars, in index order."""
        return tuple(self._bars[self.begin_index : self.end_index + 1])

    def __len__(self) -> int:
        return max(self.bar_count, 0)

    def __iter__(self) -> Iterator[Bar]:
        return iter(self.bars)

    def __repr__(self) -> str:
        return (
            f"TimeSeries(name={self._name!r}, begin_index={self.begin_index}, "
            f"end_index={self.end_index})"
        )

    # ──────────────────────────────────────────────
    # Building
    # ──────────────────────────────────────────────

    def add_bar(self, bar: Bar) -> None:
        """Append a bar that ends strictly after the current last bar.

        Raises:
            OutOfOrderError: If ``bar.end_time`` is not after the last bar's.
            TAError: If called on a bounded view (views are read-only).
        """
        if self._bounds is not None:
            raise TAError(f"cannot add bars to bounded view {self._name!r}")
        if self._bars and not bar.end_time > self._bars[-1].end_time:
            raise OutOfOrderError(
                f"bar ending {bar.end_time.isoformat()} does not follow "
                f"{self._bars[-1].end_time.isoformat()} at index {len(self._bars)} "
                f"of series {self._name!r}"
            )
        self._bars.append(bar)

    def sub_series(self, begin: int, end: int) -> TimeSeries:
        """Return a view restricted to ``begin..end`` sharing this storage.

        Raises:
            IndexOutOfRangeError: If the bounds are empty or leave this series.
        """
        if begin > end or not (self.contains_index(begin) and self.contains_index(end)):
            raise IndexOutOfRangeError(
                f"sub-series [{begin}, {end}] outside [{self.begin_index}, "
                f"{self.end_index}] of series {self._name!r}"
            )
        view = TimeSeries._view(self, begin, end)
        logger.debug("sub_series_created", series=self._name, begin=begin, end=end)
        return view
