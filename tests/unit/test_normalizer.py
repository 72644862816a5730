from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from portfolio_enhancer.errors import InvalidContributionTypeError, InvalidValueError
from portfolio_enhancer.models.contribution import ContributionType
from portfolio_enhancer.models.row_data import RowData
from portfolio_enhancer.services.normalizer import (
    classify,
    normalize_row,
    normalize_rows,
    serial_to_iso,
    sort_records,
    to_decimal,
    to_iso_date,
)


def _row(n: int, kind: str = "Purchase", strike=10, market=12.5, qty=3, alloc=45000) -> RowData:
    return RowData(
        row_number=n,
        values={
            "Plan": "ESPP",
            "Contribution type": kind,
            "Strike price / Cost basis": strike,
            "Market price": market,
            "Available from": alloc,
            "Allocated quantity": qty,
            "Allocation date": alloc,
            "Expiry date": alloc,
        },
    )


@pytest.mark.parametrize(
    "label, price, expected",
    [
        ("Award", Decimal(0), ContributionType.LOCKED_AWARD),
        ("Award", Decimal("0.01"), ContributionType.GRANTED_AWARD),
        ("Purchase", Decimal(0), ContributionType.OWN_CONTRIBUTION),
        ("Purchase", Decimal("17.2"), ContributionType.OWN_CONTRIBUTION),
        ("Company match", Decimal(0), ContributionType.COMPANY_MATCH),
        ("Companymatch", Decimal("3"), ContributionType.COMPANY_MATCH),
        ("  company MATCH ", Decimal("3"), ContributionType.COMPANY_MATCH),
    ],
)
def test_classify_recognized_labels(label, price, expected):
    assert classify(label, price) is expected


@pytest.mark.parametrize("label", ["Dividend", "", "Awards", None])
def test_classify_unknown_label_raises_with_row(label):
    with pytest.raises(InvalidContributionTypeError) as e:
        classify(label, Decimal(0), row=9)
    assert e.value.row == 9
    assert e.value.error_type == "INVALID_CONTRIBUTION_TYPE"
    assert "row 9" in str(e.value)


def test_serial_to_iso_convention():
    assert serial_to_iso(0) == "1899-12-30"
    assert serial_to_iso(1) == "1899-12-31"
    assert serial_to_iso(59) == "1900-02-27"
    assert serial_to_iso(60) == "1900-02-29"
    assert serial_to_iso(61) == "1900-03-01"


def test_serial_to_iso_matches_reference_calculation():
    reference = (date(1899, 12, 30) + timedelta(days=45000)).isoformat()
    assert serial_to_iso(45000) == reference == "2023-03-15"


def test_serial_to_iso_floors_time_fraction():
    assert serial_to_iso(45000.99) == "2023-03-15"
    assert serial_to_iso(Decimal("45000.5")) == "2023-03-15"


def test_to_iso_date_accepts_decoded_cells():
    assert to_iso_date(datetime(2024, 1, 1, 13, 30)) == "2024-01-01"
    assert to_iso_date(date(2023, 6, 1)) == "2023-06-01"
    assert to_iso_date("45292") == "2024-01-01"
    assert to_iso_date("2024-02-03") == "2024-02-03"


def test_to_iso_date_rejects_garbage():
    with pytest.raises(InvalidValueError):
        to_iso_date("soon", "Allocation date", 7)
    with pytest.raises(InvalidValueError):
        to_iso_date(None, "Allocation date", 7)


def test_to_decimal_is_exact():
    assert to_decimal(0.1, "Market price") == Decimal("0.1")
    assert to_decimal("1,234.50", "Market price") == Decimal("1234.50")
    assert to_decimal(None, "Strike price / Cost basis", blank_as_zero=True) == Decimal(0)


def test_to_decimal_rejects_negative_and_blank():
    with pytest.raises(InvalidValueError, match="negative"):
        to_decimal(-1, "Allocated quantity", 8)
    with pytest.raises(InvalidValueError, match="empty"):
        to_decimal(None, "Market price", 8)
    with pytest.raises(InvalidValueError):
        to_decimal("n/a", "Market price", 8)


def test_normalize_row_builds_record():
    rec = normalize_row(_row(7, kind="Award", strike=None, market=5, qty=10, alloc=45292))
    assert rec.contribution_type is ContributionType.LOCKED_AWARD
    assert rec.purchase_price == Decimal(0)
    assert rec.market_price == Decimal(5)
    assert rec.shares == Decimal(10)
    assert rec.date == "2024-01-01"
    assert rec.plan == "ESPP"
    assert rec.row_number == 7


def test_normalize_rows_aborts_on_bad_label():
    rows = [_row(7), _row(8, kind="Gift"), _row(9)]
    with pytest.raises(InvalidContributionTypeError) as e:
        normalize_rows(rows)
    assert e.value.row == 8
    assert e.value.value == "Gift"


def test_sort_is_stable_for_equal_dates():
    rows = [
        _row(7, kind="Award", strike=0, alloc=45292),
        _row(8, kind="Award", strike=2, alloc=45078),
        _row(9, kind="Company match", strike=3, alloc=45292),
    ]
    records = normalize_rows(rows)
    assert [r.row_number for r in records] == [8, 7, 9]
    assert [r.date for r in records] == ["2023-06-01", "2024-01-01", "2024-01-01"]
    # already sorted input stays untouched
    assert sort_records(records) == records
