from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from portfolio_enhancer.errors import UnreadableInputError
from portfolio_enhancer.excel.reader import (
    DuplicateColumnsError,
    MissingColumnsError,
    SheetHeaderError,
    normalize_sheet,
    read_excel_file,
    read_portfolio_sheet,
)


def test_read_portfolio_sheet_uses_row_six_header(make_export, three_record_rows):
    path = make_export("export.xlsx", three_record_rows)
    data = read_portfolio_sheet(path, header_row=6)
    assert data.sheet_name == "Portfolio"
    assert data.columns[0] == "Plan"
    assert len(data.rows) == 3
    first = data.rows[0]
    assert first.row_number == 7
    assert first.get("Contribution type") == "Award"
    assert first.get("Allocated quantity") == 10
    assert data.rows[2].row_number == 9


def test_missing_expected_columns(make_export):
    header = ["Plan", "Contribution type", "Market price"]
    path = make_export("partial.xlsx", [["ESPP", "Purchase", 5]], header=header)
    with pytest.raises(MissingColumnsError, match="Allocation date"):
        read_portfolio_sheet(path, header_row=6)


def test_header_row_beyond_sheet():
    df = pd.DataFrame([["title"], ["x"]])
    with pytest.raises(SheetHeaderError):
        normalize_sheet(df, "S", header_row=6)


def test_empty_rows_are_skipped_and_numbering_kept():
    df = pd.DataFrame([
        ["Plan", "Qty"],
        ["A", 1],
        [None, None],
        ["  ", None],
        ["B", 2],
    ])
    sheet = normalize_sheet(df, "S", header_row=1)
    assert [r.row_number for r in sheet.rows] == [2, 5]
    assert sheet.rows[1].values == {"Plan": "B", "Qty": 2}


def test_unlabeled_columns_are_dropped():
    df = pd.DataFrame([
        ["Plan", None, "Qty"],
        ["A", "junk", 1],
    ])
    sheet = normalize_sheet(df, "S", header_row=1)
    assert sheet.columns == ["Plan", "Qty"]
    assert sheet.rows[0].values == {"Plan": "A", "Qty": 1}


def test_read_excel_file_returns_raw_frame(temp_workdir: Path):
    path = temp_workdir / "raw.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame([["t"], ["h"], [1]]).to_excel(writer, sheet_name="Only", header=False, index=False)
    name, df = read_excel_file(path)
    assert name == "Only"
    assert df.shape[0] == 3

def test_repeated_header_label_is_rejected():
    df = pd.DataFrame([
        ["Plan", "Comment", "Qty", "Comment"],
        ["A", "x", 1, "y"],
    ])
    with pytest.raises(DuplicateColumnsError, match="Comment"):
        normalize_sheet(df, "S", header_row=1)


def test_non_workbook_file_is_unreadable(temp_workdir: Path):
    path = temp_workdir / "data" / "broken.xlsx"
    path.write_text("not a workbook", encoding="utf-8")
    with pytest.raises(UnreadableInputError) as e:
        read_portfolio_sheet(path, header_row=6)
    assert e.value.error_type == "UNREADABLE_INPUT"
    assert "broken.xlsx" in str(e.value)


def test_truncated_workbook_is_unreadable(make_export, three_record_rows):
    path = make_export("export.xlsx", three_record_rows)
    path.write_bytes(path.read_bytes()[:200])
    with pytest.raises(UnreadableInputError):
        read_excel_file(path)
