from __future__ import annotations

import re
from collections.abc import Iterable

from ..models.sheet import SheetRow

"""Formula template engine.

Formulas are authored once as templates and rendered per row:

    {{index}}        -> the row's 1-based sheet row number
    {{Column Name}}  -> the spreadsheet letter of that column in the row

The letter comes from the column's position in the row's own ordered column
set, so ``{{Shares}}{{index}}`` becomes ``D7`` for row 7 of a sheet whose
fourth column is Shares. Placeholders naming no declared column are left as
they are, which keeps rendering idempotent.
"""

__all__ = [
    "INDEX_TOKEN",
    "HEADER_ROW",
    "FIRST_DATA_ROW",
    "column_letters",
    "render_template",
    "render_row",
    "render_rows",
    "sheet_reference",
]

INDEX_TOKEN = "index"
HEADER_ROW = 1
FIRST_DATA_ROW = HEADER_ROW + 1

_PLACEHOLDER = re.compile(r"\{\{([^{}]+)\}\}")


def column_letters(columns: Iterable[str]) -> dict[str, str]:
    """Map each column name to its letter by position (A, B, ..., Z, AA, ...)."""
    # openpyxl is imported only after spreadsheet_backend() has checked it
    from openpyxl.utils import get_column_letter

    return {name: get_column_letter(pos) for pos, name in enumerate(columns, start=1)}


def render_template(template: str, letters: dict[str, str], index: int) -> str:
    """Substitute placeholders in a single template string."""
    def _sub(match: re.Match[str]) -> str:
        name = match.group(1)
        if name == INDEX_TOKEN:
            return str(index)
        return letters.get(name, match.group(0))

    return _PLACEHOLDER.sub(_sub, template)


def render_row(row: SheetRow, index: int) -> SheetRow:
    """Rewrite every string cell of ``row`` for sheet row ``index``.

    Non-string values pass through unchanged.
    """
    letters = column_letters(row.columns)
    return SheetRow(tuple(
        (name, render_template(value, letters, index) if isinstance(value, str) else value)
        for name, value in row.cells
    ))


def render_rows(rows: Iterable[SheetRow], start_index: int = FIRST_DATA_ROW) -> list[SheetRow]:
    """Render rows numbered consecutively from ``start_index``."""
    return [render_row(row, index) for index, row in enumerate(rows, start=start_index)]


def sheet_reference(sheet_name: str, cell: str) -> str:
    """Cross-sheet reference such as ``'Tax Rates'!C2``."""
    quoted = sheet_name.replace("'", "''")
    return f"'{quoted}'!{cell}"
