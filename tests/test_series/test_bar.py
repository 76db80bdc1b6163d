"""Tests for the Bar model."""

import dataclasses
from datetime import datetime, timedelta, timezone

import pytest

from ta_engine.exceptions import FormatError
from ta_engine.num import Num
from ta_engine.series.bar import Bar

END = datetime(2017, 1, 13, tzinfo=timezone.utc)
WEEK = timedelta(days=7)


class TestBar:
    """Tests for Bar construction and derived properties."""

    def test_of_converts_text(self) -> None:
        """Bar.of converts numeric text into Num fields."""
        bar = Bar.of(WEEK, END, "10", "12.5", "9.75", "11", "1500")
        assert bar.high == Num.of("12.5")
        assert bar.volume == Num.of(1500)

    def test_of_rejects_malformed_text(self) -> None:
        """Bar.of raises FormatError for non-numeric prices."""
        with pytest.raises(FormatError):
            Bar.of(WEEK, END, "10", "n/a", "9", "11")

    def test_volume_defaults_to_zero(self) -> None:
        """Volume is zero when omitted."""
        assert Bar.of(WEEK, END, 1, 2, 1, 2).volume == Num.ZERO

    def test_immutable(self) -> None:
        """Bars cannot be modified after construction."""
        bar = Bar.of(WEEK, END, 1, 2, 1, 2)
        with pytest.raises(dataclasses.FrozenInstanceError):
            bar.close = Num.of(3)  # type: ignore[misc]

    def test_begin_time(self) -> None:
        """begin_time is end_time minus the period."""
        bar = Bar.of(WEEK, END, 1, 2, 1, 2)
        assert bar.begin_time == datetime(2017, 1, 6, tzinfo=timezone.utc)

    def test_bullish_and_bearish(self) -> None:
        """Close above open is bullish, below is bearish, equal is neither."""
        assert Bar.of(WEEK, END, 1, 3, 1, 2).is_bullish
        assert Bar.of(WEEK, END, 2, 3, 1, 1).is_bearish
        doji = Bar.of(WEEK, END, 2, 3, 1, 2)
        assert not doji.is_bullish and not doji.is_bearish

    def test_in_period(self) -> None:
        """The period includes its begin and excludes its end."""
        bar = Bar.of(WEEK, END, 1, 2, 1, 2)
        assert bar.in_period(bar.begin_time)
        assert bar.in_period(END - timedelta(seconds=1))
        assert not bar.in_period(END)
