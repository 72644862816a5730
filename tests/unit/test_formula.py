from __future__ import annotations

from decimal import Decimal

from portfolio_enhancer.models.sheet import SheetRow
from portfolio_enhancer.services.formula import (
    column_letters,
    render_row,
    render_rows,
    render_template,
    sheet_reference,
)


def test_placeholders_become_letters_not_values():
    row = SheetRow.of([("A", "x"), ("B", "{{A}}-{{index}}")])
    rendered = render_row(row, 5)
    assert rendered["B"] == "A-5"
    assert rendered["B"] != "x-5"
    assert rendered["A"] == "x"


def test_letters_follow_column_position():
    row = SheetRow.of([("Shares", 3), ("Price", 2), ("Value", "=ROUND({{Shares}}{{index}}*{{Price}}{{index}},2)")])
    assert render_row(row, 7)["Value"] == "=ROUND(A7*B7,2)"


def test_non_string_values_pass_through():
    row = SheetRow.of([("n", Decimal("1.5")), ("blank", None), ("i", 3)])
    rendered = render_row(row, 2)
    assert rendered.values == (Decimal("1.5"), None, 3)


def test_unknown_placeholders_left_and_rendering_is_idempotent():
    row = SheetRow.of([("A", 1), ("B", "={{A}}{{index}}+{{Missing}}")])
    once = render_row(row, 4)
    assert once["B"] == "=A4+{{Missing}}"
    assert render_row(once, 4) == once


def test_column_names_with_spaces_and_slashes():
    letters = column_letters(["Date", "Cost Basis", "Strike / Price"])
    assert render_template("{{Cost Basis}}{{index}}&{{Strike / Price}}{{index}}", letters, 12) == "B12&C12"


def test_column_letters_beyond_z():
    letters = column_letters([f"c{i}" for i in range(28)])
    assert letters["c0"] == "A"
    assert letters["c25"] == "Z"
    assert letters["c26"] == "AA"
    assert letters["c27"] == "AB"


def test_render_rows_numbers_consecutively_from_start():
    rows = [SheetRow.of([("A", "{{index}}")]) for _ in range(3)]
    assert [r["A"] for r in render_rows(rows)] == ["2", "3", "4"]
    assert [r["A"] for r in render_rows(rows, start_index=10)] == ["10", "11", "12"]


def test_sheet_reference_quotes_name():
    assert sheet_reference("Tax Rates", "C2") == "'Tax Rates'!C2"
    assert sheet_reference("Bob's", "A1") == "'Bob''s'!A1"
