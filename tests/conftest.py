"""Shared test fixtures for the indicator engine."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from ta_engine.logging import setup_logging
from ta_engine.series.bar import Bar
from ta_engine.series.time_series import TimeSeries
from ta_engine.verification.sheet import Formula, Sheet

WEEK = timedelta(days=7)
START = datetime(2017, 1, 6, tzinfo=timezone.utc)

# Twelve weeks falling by one point per bar (range 4, close mid-range),
# then one bar rising by one point. True range is 4 on every bar, -DM is 1
# on bars 1-11 and 0 on the first and last bar.
DOWNTREND_ROWS: list[tuple[str, int, int, int, int, int]] = [
    ((START + i * WEEK).date().isoformat(), 98 - i, 100 - i, 96 - i, 98 - i, 1000 + 10 * i)
    for i in range(12)
] + [((START + 12 * WEEK).date().isoformat(), 87, 90, 86, 88, 1200)]

PARAM_ROW = 2
MINUS_DI_COLUMN = 10


@pytest.fixture(autouse=True, scope="session")
def _configure_logging() -> None:
    """Route structlog through stdlib logging at INFO, as the runtime does."""
    setup_logging("INFO")


@pytest.fixture
def series_factory() -> Callable[..., TimeSeries]:
    """Return a builder for weekly series from close prices.

    Each bar has open == high == low == close, which is all the averaging
    tests need.
    """

    def _make(closes: list[object], name: str = "test") -> TimeSeries:
        series = TimeSeries(name=name)
        for i, close in enumerate(closes):
            series.add_bar(Bar.of(WEEK, START + i * WEEK, close, close, close, close, 100))
        return series

    return _make


@pytest.fixture
def downtrend_series() -> TimeSeries:
    """The 13-bar series of DOWNTREND_ROWS."""
    series = TimeSeries(name="downtrend")
    for i, (_, open_, high, low, close, volume) in enumerate(DOWNTREND_ROWS):
        series.add_bar(Bar.of(WEEK, START + i * WEEK, open_, high, low, close, volume))
    return series


def _minus_di_formulas(data_rows: list[int]) -> dict[tuple[int, int], Formula]:
    """Spreadsheet-style -DI columns (float arithmetic, Wilder smoothing).

    Columns: 6 TR, 7 -DM, 8 ATR, 9 smoothed -DM, 10 -DI. Each cell reads the
    previous data row, skipping comment rows, and the period in PARAM_ROW.
    """
    high, low, close = 2, 3, 4
    tr, dm, atr, avg_dm, di = 6, 7, 8, 9, 10

    def value(sheet: Sheet, row: int, column: int) -> float:
        return float(sheet.evaluate(row, column))

    def make(position: int, column: int) -> Formula:
        row = data_rows[position]
        prev = data_rows[position - 1] if position > 0 else None

        def compute(sheet: Sheet) -> float:
            period = value(sheet, PARAM_ROW, 1)
            if column == tr:
                bar_range = value(sheet, row, high) - value(sheet, row, low)
                if prev is None:
                    return bar_range
                prev_close = value(sheet, prev, close)
                return max(
                    bar_range,
                    abs(value(sheet, row, high) - prev_close),
                    abs(prev_close - value(sheet, row, low)),
                )
            if column == dm:
                if prev is None:
                    return 0.0
                up = value(sheet, row, high) - value(sheet, prev, high)
                down = value(sheet, prev, low) - value(sheet, row, low)
                return down if down > up and down > 0 else 0.0
            if column in (atr, avg_dm):
                source = tr if column == atr else dm
                if prev is None:
                    return value(sheet, row, source)
                previous = value(sheet, prev, column)
                return previous + (value(sheet, row, source) - previous) / period
            return 100 * value(sheet, row, avg_dm) / value(sheet, row, atr)

        return Formula(compute, text=f"=col{column}[{row}]")

    return {
        (data_rows[position], column): make(position, column)
        for position in range(len(data_rows))
        for column in (tr, dm, atr, avg_dm, di)
    }


@pytest.fixture
def minus_di_sheet() -> Sheet:
    """Reference sheet for -DI over DOWNTREND_ROWS with a comment row.

    Layout: title row, "Param" header, period row (13), "Date" header, then
    the data rows with one comment row after the first bar.
    """
    rows: list[list[object]] = [
        ["Minus DI reference", None],
        ["Param"],
        ["Period", 13],
        ["Date", "Open", "High", "Low", "Close", "Volume", "TR", "-DM", "ATR", "Avg -DM", "-DI"],
    ]
    data_rows = []
    for i, row in enumerate(DOWNTREND_ROWS):
        data_rows.append(len(rows))
        rows.append(list(row) + [None] * 5)
        if i == 0:
            rows.append(["//", "holiday week, not a bar"])

    sheet = Sheet(rows, name="minus_di")
    for (row, column), formula in _minus_di_formulas(data_rows).items():
        sheet.set_value(row, column, formula)
    return sheet


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory of file-based reference fixtures."""
    return Path(__file__).parent / "fixtures"
