from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

"""Ordered row and sheet models for the output workbook.

A SheetRow is an explicit ordered sequence of (column name, value) pairs rather
than a dict: the position of a column decides its spreadsheet letter, so the
order has to be declared, not inferred.
"""

__all__ = [
    "SheetRow",
    "Sheet",
    "ColumnOrderError",
]


class ColumnOrderError(ValueError):
    """Raised when rows of one sheet declare different column orders."""


@dataclass(frozen=True)
class SheetRow:
    cells: tuple[tuple[str, Any], ...]

    @classmethod
    def of(cls, pairs: Iterable[tuple[str, Any]]) -> SheetRow:
        cells = tuple((str(name), value) for name, value in pairs)
        names = [name for name, _ in cells]
        if len(set(names)) != len(names):
            raise ColumnOrderError(f"duplicate column names in row: {names}")
        return cls(cells)

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.cells)

    @property
    def values(self) -> tuple[Any, ...]:
        return tuple(value for _, value in self.cells)

    def __getitem__(self, column: str) -> Any:
        for name, value in self.cells:
            if name == column:
                return value
        raise KeyError(column)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(self.cells)

    def __len__(self) -> int:
        return len(self.cells)


@dataclass(frozen=True)
class Sheet:
    """Named output sheet. Header is row 1, ``rows`` start at row 2."""
    name: str
    columns: tuple[str, ...]
    rows: list[SheetRow] = field(default_factory=list)

    @classmethod
    def from_rows(cls, name: str, rows: list[SheetRow], columns: Iterable[str] | None = None) -> Sheet:
        if columns is None:
            if not rows:
                raise ColumnOrderError(f"sheet '{name}' has no rows and no columns")
            columns = rows[0].columns
        expected = tuple(columns)
        for i, row in enumerate(rows):
            if row.columns != expected:
                raise ColumnOrderError(
                    f"sheet '{name}' row {i + 2} columns {list(row.columns)} != {list(expected)}"
                )
        return cls(name=name, columns=expected, rows=list(rows))

    @property
    def last_row(self) -> int:
        """Physical row number of the last data row (1 when the sheet is empty)."""
        return len(self.rows) + 1
