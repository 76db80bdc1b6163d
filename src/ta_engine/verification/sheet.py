"""Spreadsheet-like grid used as the reference data source.

A Sheet holds rows of cells. A cell is empty (None), a literal (text or a
number), or a Formula evaluated on read against the sheet itself, so
formula cells follow parameter values written into the sheet the way a
spreadsheet recalculates.

``load_csv`` reads a grid of literal cells from a CSV file in one blocking
read. Formula cells only exist in sheets built in code.
"""

from __future__ import annotations

import csv
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path


class Formula:
    """A computed cell.

    Args:
        compute: ``compute(sheet) -> value``; may evaluate other cells.
        text: Optional human-readable form, e.g. "=B2*100".
    """

    def __init__(self, compute: Callable[[Sheet], object], text: str = "") -> None:
        self._compute = compute
        self.text = text

    def evaluate(self, sheet: Sheet) -> object:
        return self._compute(sheet)

    def __repr__(self) -> str:
        return f"Formula({self.text!r})"


class Sheet:
    """Mutable grid of cells addressed by zero-based (row, column)."""

    def __init__(self, rows: Iterable[Sequence[object]] = (), name: str = "sheet") -> None:
        self.name = name
        self._rows: list[list[object]] = [list(row) for row in rows]

    @property
    def row_count(self) -> int:
        return len(self._rows)

    def cell(self, row: int, column: int) -> object:
        """Raw cell content (a Formula is returned unevaluated); None if empty."""
        if not 0 <= row < len(self._rows):
            return None
        cells = self._rows[row]
        if not 0 <= column < len(cells):
            return None
        return cells[column]

    def evaluate(self, row: int, column: int) -> object:
        """Cell value, evaluating formulas; None if empty."""
        content = self.cell(row, column)
        if isinstance(content, Formula):
            return content.evaluate(self)
        return content

    def set_value(self, row: int, column: int, value: object) -> None:
        """Write a cell, padding the row with empty cells as needed.

        Raises:
            IndexError: If ``row`` does not exist.
        """
        if not 0 <= row < len(self._rows):
            raise IndexError(f"row {row} does not exist in sheet {self.name!r}")
        cells = self._rows[row]
        if column >= len(cells):
            cells.extend([None] * (column + 1 - len(cells)))
        cells[column] = value

    def first_cell_text(self, row: int) -> str | None:
        """Evaluated first cell of ``row`` as stripped text; None if empty."""
        value = self.evaluate(row, 0)
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def __repr__(self) -> str:
        return f"Sheet(name={self.name!r}, rows={len(self._rows)})"


def load_csv(path: str | Path) -> Sheet:
    """Read a CSV file into a Sheet of literal text cells.

    Empty fields become empty cells. The sheet is named after the file stem.
    """
    path = Path(path)
    with open(path, newline="", encoding="utf-8") as f:
        rows = [
            [field if field.strip() else None for field in row]
            for row in csv.reader(f)
        ]
    return Sheet(rows, name=path.stem)
