from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

from ..errors import UnreadableInputError
from ..models.row_data import RowData

"""Portfolio export reader.

The export starts with a preamble; the header sits on a configurable 1-based
row (6 by default) and data rows follow directly below it. Numeric cells come
back as numbers, date cells either as serial numbers or as datetime objects
depending on the cell format, and both are handled by the normalizer.
"""

__all__ = [
    "EXPECTED_COLUMNS",
    "SheetHeaderError",
    "MissingColumnsError",
    "DuplicateColumnsError",
    "SheetData",
    "read_excel_file",
    "normalize_sheet",
    "read_portfolio_sheet",
]

EXPECTED_COLUMNS = frozenset({
    "Plan",
    "Contribution type",
    "Strike price / Cost basis",
    "Market price",
    "Available from",
    "Allocated quantity",
    "Allocation date",
    "Expiry date",
})


class SheetHeaderError(Exception):
    """Raised when the header row is missing."""

    error_type = "SHEET_HEADER_ERROR"


class MissingColumnsError(Exception):
    """Raised when expected columns are missing in the sheet header."""

    error_type = "MISSING_COLUMNS"


class DuplicateColumnsError(Exception):
    """Raised when the header row repeats a column label."""

    error_type = "DUPLICATE_COLUMNS"


@dataclass
class SheetData:
    sheet_name: str
    columns: list[str]
    rows: list[RowData]


def read_excel_file(path: Path, sheet_name: str | int = 0) -> tuple[str, pd.DataFrame]:
    """Read one sheet without header interpretation.

    Returns:
        (sheet name, raw DataFrame) where DataFrame index 0 is sheet row 1

    Raises:
        UnreadableInputError: If the file is not a readable workbook or lacks the sheet
    """
    try:
        with pd.ExcelFile(path) as xls:
            name = xls.sheet_names[sheet_name] if isinstance(sheet_name, int) else sheet_name
            df = xls.parse(name, header=None)
    except Exception as e:
        # Any parse failure of an existing file is fatal for that file
        raise UnreadableInputError(path, str(e) or type(e).__name__) from e
    return str(name), df


def _clean(val: Any) -> Any:
    if isinstance(val, str):
        stripped = val.strip()
        return stripped if stripped else None
    if pd.isna(val):
        return None
    if isinstance(val, pd.Timestamp):
        return val.to_pydatetime()
    return val


def normalize_sheet(
    df: pd.DataFrame,
    sheet_name: str,
    header_row: int,
    expected_columns: Iterable[str] | None = None,
) -> SheetData:
    """Apply the header found on ``header_row`` (1-based) to a raw DataFrame.

    Steps:
    1. Validate the header row exists
    2. Extract column labels, dropping unlabeled columns
    3. Turn every following non-empty row into RowData with its sheet row number
    4. Reject repeated labels, validate expected columns subset
    """
    header_idx = header_row - 1
    if header_idx < 0 or df.shape[0] <= header_idx:
        raise SheetHeaderError(f"sheet '{sheet_name}' lacks header row {header_row}")

    header_series = df.iloc[header_idx]
    labeled: list[tuple[int, str]] = []
    for pos, label in enumerate(header_series.tolist()):
        if pd.isna(label) or str(label).strip() == "":
            continue
        labeled.append((pos, str(label).strip()))
    columns = [label for _, label in labeled]
    duplicates = sorted({label for label in columns if columns.count(label) > 1})
    if duplicates:
        raise DuplicateColumnsError(f"sheet '{sheet_name}' repeats columns: {duplicates}")

    if expected_columns is not None:
        missing = set(expected_columns) - set(columns)
        if missing:
            raise MissingColumnsError(f"sheet '{sheet_name}' missing columns: {sorted(missing)}")

    rows: list[RowData] = []
    for offset, (_, raw) in enumerate(df.iloc[header_idx + 1:].iterrows()):
        values = raw.tolist()
        row_dict = {label: _clean(values[pos]) for pos, label in labeled}
        # Skip rows with no content at all
        if all(v is None for v in row_dict.values()):
            continue
        rows.append(RowData(row_number=header_row + 1 + offset, values=row_dict))

    return SheetData(sheet_name=sheet_name, columns=columns, rows=rows)


def read_portfolio_sheet(path: Path, header_row: int, sheet_name: str | int = 0) -> SheetData:
    """Read and normalize the portfolio sheet of an export file."""
    name, df = read_excel_file(path, sheet_name)
    return normalize_sheet(df, name, header_row, expected_columns=EXPECTED_COLUMNS)
