"""Reference fixture: ground-truth series and expected columns.

A fixture sheet has two sections, located by a header in the first cell:

    Param        <- parameter section header
    <label>  3   <- one row per parameter, value in the parameter column
    <label>  1
    Date  Open  High  Low  Close  Volume  <expected columns...>
    2017-01-06  ...
    //  ...      <- comment row, ignored
    2017-01-13  ...

Data rows hold the bar date (ISO text or spreadsheet serial day number)
followed by open, high, low, close and volume. Further columns hold the
expected indicator values, usually formulas reading the parameter cells.

Fixtures are opened with ``open_fixture``, which yields a handle scoped to
one verification session and closes it afterwards.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from ta_engine.config import FixtureSettings
from ta_engine.exceptions import FixtureFormatError, FormatError, InvalidParameterError, TAError
from ta_engine.logging import get_logger
from ta_engine.num import Num
from ta_engine.series.bar import Bar
from ta_engine.series.time_series import TimeSeries
from ta_engine.verification.sheet import Sheet, load_csv

logger = get_logger(__name__)

#: Day zero of spreadsheet serial dates.
_SERIAL_EPOCH = datetime(1899, 12, 30, tzinfo=timezone.utc)

_BAR_FIELDS = ("date", "open", "high", "low", "close", "volume")


class ReferenceFixture:
    """An open reference fixture.

    Use ``ReferenceFixture.load`` or ``open_fixture`` rather than the
    constructor; both parse and validate the bar section up front.

    Args:
        sheet: The reference grid.
        settings: Section headers, comment marker and bar period.
    """

    def __init__(self, sheet: Sheet, settings: FixtureSettings | None = None) -> None:
        self._sheet = sheet
        self._settings = settings or FixtureSettings()
        self._closed = False
        self._data_header_row = self._find_header(self._settings.data_header)
        self._param_header_row = self._find_header(self._settings.param_header)
        self._series = self._build_series()

    @classmethod
    def load(
        cls,
        source: Sheet | str | Path,
        settings: FixtureSettings | None = None,
    ) -> ReferenceFixture:
        """Open a fixture from a Sheet or a CSV file path.

        Raises:
            FixtureFormatError: If the data or parameter header is missing, or
                a data row lacks a required bar cell.
        """
        sheet = source if isinstance(source, Sheet) else load_csv(source)
        return cls(sheet, settings)

    @property
    def name(self) -> str:
        return self._sheet.name

    @property
    def sheet(self) -> Sheet:
        return self._sheet

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True

    def series(self) -> TimeSeries:
        """The reference series built from the data rows."""
        self._ensure_open()
        return self._series

    # ──────────────────────────────────────────────
    # Parameters
    # ──────────────────────────────────────────────

    def apply_parameters(self, params: Sequence[object]) -> None:
        """Write ``params`` into consecutive rows below the parameter header.

        Raises:
            FixtureFormatError: If fewer rows separate the parameter header
                from the data section than parameters given.
            InvalidParameterError: If a parameter is not numeric.
        """
        self._ensure_open()
        rows = self._parameter_rows()
        if len(params) > len(rows):
            raise FixtureFormatError(
                f"{len(params)} parameters given but the "
                f"{self._settings.param_header!r} section of fixture {self.name!r} "
                f"has only {len(rows)} rows"
            )

        values = []
        for param in params:
            try:
                values.append(Num.of(param))
            except FormatError as exc:
                raise InvalidParameterError(f"parameter is not numeric: {param!r}") from exc

        for row, value in zip(rows, values):
            self._sheet.set_value(row, self._settings.param_column, value)
        logger.debug(
            "fixture_parameters_applied",
            fixture=self.name,
            params=[str(v) for v in values],
        )

    def read_parameters(self) -> list[Num]:
        """Values currently held in the parameter rows (empty cells skipped)."""
        self._ensure_open()
        result = []
        for row in self._parameter_rows():
            value = self._sheet.evaluate(row, self._settings.param_column)
            if value is not None:
                result.append(self._to_num(value, row, "parameter"))
        return result

    def _parameter_rows(self) -> list[int]:
        header = self._param_header_row
        end = self._data_header_row if header < self._data_header_row else self._sheet.row_count
        return list(range(header + 1, end))

    # ──────────────────────────────────────────────
    # Data section
    # ──────────────────────────────────────────────

    def read_column(self, column_index: int) -> list[Num]:
        """Evaluate ``column_index`` for every data row.

        Formula cells are evaluated now, so they reflect the parameters most
        recently applied.

        Raises:
            FixtureFormatError: If a data row has no value in the column, or
                a non-numeric one.
        """
        self._ensure_open()
        values = []
        for row in self._data_rows():
            value = self._sheet.evaluate(row, column_index)
            if value is None:
                raise FixtureFormatError(
                    f"fixture {self.name!r} row {row}: missing cell in column {column_index}"
                )
            values.append(self._to_num(value, row, f"column {column_index}"))
        return values

    def _data_rows(self) -> list[int]:
        rows = []
        for row in range(self._data_header_row + 1, self._sheet.row_count):
            first = self._sheet.first_cell_text(row)
            if first is None or first == self._settings.comment_marker:
                continue
            rows.append(row)
        return rows

    def _build_series(self) -> TimeSeries:
        period = timedelta(days=self._settings.bar_period_days)
        series = TimeSeries(name=self.name)
        for row in self._data_rows():
            cells = []
            for column, field in enumerate(_BAR_FIELDS):
                value = self._sheet.evaluate(row, column)
                if value is None:
                    raise FixtureFormatError(
                        f"fixture {self.name!r} row {row}: missing {field} cell"
                    )
                cells.append(value)
            end_time = self._to_datetime(cells[0], row)
            prices = [self._to_num(value, row, field) for value, field in zip(cells[1:], _BAR_FIELDS[1:])]
            series.add_bar(Bar(period, end_time, *prices))
        return series

    # ──────────────────────────────────────────────
    # Helpers
    # ──────────────────────────────────────────────

    def _find_header(self, text: str) -> int:
        for row in range(self._sheet.row_count):
            first = self._sheet.first_cell_text(row)
            if first is not None and text in first:
                return row
        raise FixtureFormatError(f"{text!r} header row not found in fixture {self.name!r}")

    def _to_num(self, value: object, row: int, field: str) -> Num:
        try:
            return Num.of(value)
        except FormatError as exc:
            raise FixtureFormatError(
                f"fixture {self.name!r} row {row}: {field} is not numeric: {value!r}"
            ) from exc

    def _to_datetime(self, value: object, row: int) -> datetime:
        if isinstance(value, datetime):
            moment = value
        elif isinstance(value, date):
            moment = datetime(value.year, value.month, value.day)
        else:
            try:
                serial = Num.of(value)
            except FormatError:
                try:
                    moment = datetime.fromisoformat(str(value).strip())
                except ValueError as exc:
                    raise FixtureFormatError(
                        f"fixture {self.name!r} row {row}: date is not valid: {value!r}"
                    ) from exc
            else:
                if serial.is_nan():
                    raise FixtureFormatError(f"fixture {self.name!r} row {row}: date is NaN")
                try:
                    moment = _SERIAL_EPOCH + timedelta(days=float(serial))
                except (OverflowError, ValueError) as exc:
                    raise FixtureFormatError(
                        f"fixture {self.name!r} row {row}: date is not valid: {value!r}"
                    ) from exc
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment

    def _ensure_open(self) -> None:
        if self._closed:
            raise TAError(f"fixture {self.name!r} is closed")

    def __repr__(self) -> str:
        return f"ReferenceFixture(name={self.name!r}, bars={self._series.bar_count})"


@contextmanager
def open_fixture(
    source: Sheet | str | Path,
    settings: FixtureSettings | None = None,
) -> Iterator[ReferenceFixture]:
    """Open a fixture for one verification session and close it afterwards."""
    fixture = ReferenceFixture.load(source, settings)
    logger.info("fixture_opened", fixture=fixture.name, bars=fixture.series().bar_count)
    try:
        yield fixture
    finally:
        fixture.close()
        logger.info("fixture_closed", fixture=fixture.name)
