from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.sheet import Sheet

"""Report workbook writer.

Sheets are written through ``pandas.ExcelWriter`` with the openpyxl engine and
then formatted on the openpyxl worksheet: bold filled header, frozen header
row, auto-filter and column widths sized to content. Strings starting with
``=`` are stored as formulas and evaluated by the spreadsheet application.
"""

__all__ = [
    "sheet_to_frame",
    "write_report",
]

HEADER_COLOR = "D9E1F2"
MIN_WIDTH = 8
MAX_WIDTH = 50
# Formula text says nothing about the rendered width
FORMULA_WIDTH = 14


def sheet_to_frame(sheet: Sheet) -> pd.DataFrame:
    """DataFrame with the sheet's columns in declared order."""
    return pd.DataFrame([list(row.values) for row in sheet.rows], columns=list(sheet.columns), dtype=object)


def _display_width(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, str) and value.startswith("="):
        return FORMULA_WIDTH
    return len(str(value))


def _format_worksheet(worksheet: Any, sheet: Sheet) -> None:
    from openpyxl.styles import Alignment, Font, PatternFill
    from openpyxl.utils import get_column_letter

    header_fill = PatternFill(start_color=HEADER_COLOR, end_color=HEADER_COLOR, fill_type="solid")
    for col_idx, name in enumerate(sheet.columns, start=1):
        header = worksheet.cell(row=1, column=col_idx)
        header.font = Font(bold=True)
        header.fill = header_fill
        header.alignment = Alignment(horizontal="center", vertical="center", wrap_text=False)

        widths = [len(name)] + [_display_width(row.values[col_idx - 1]) for row in sheet.rows]
        width = min(max(max(widths) + 2, MIN_WIDTH), MAX_WIDTH)
        worksheet.column_dimensions[get_column_letter(col_idx)].width = width

    worksheet.freeze_panes = "A2"  # Freeze header row
    worksheet.auto_filter.ref = worksheet.dimensions


def write_report(path: Path, sheets: Sequence[Sheet]) -> Path:
    """Write ``sheets`` in order into a new workbook at ``path``.

    The workbook is saved once, after every sheet has been written.
    """
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet in sheets:
            sheet_to_frame(sheet).to_excel(writer, sheet_name=sheet.name, index=False)
            _format_worksheet(writer.sheets[sheet.name], sheet)
    return path
