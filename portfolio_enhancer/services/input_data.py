from __future__ import annotations

from ..excel.reader import SheetData
from ..models.sheet import Sheet, SheetRow
from .normalizer import DATE_COLUMNS, to_iso_date

"""Input Data sheet: the raw export rows with date serials shown as ISO text."""

INPUT_DATA_SHEET = "Input Data"


def build_input_sheet(data: SheetData) -> Sheet:
    rows = []
    for raw in data.rows:
        pairs = []
        for column in data.columns:
            value = raw.get(column)
            if column in DATE_COLUMNS and value is not None:
                value = to_iso_date(value, column, raw.row_number)
            pairs.append((column, value))
        rows.append(SheetRow.of(pairs))
    return Sheet.from_rows(INPUT_DATA_SHEET, rows, data.columns)
