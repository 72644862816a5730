from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any

from ..errors import InvalidContributionTypeError, InvalidValueError
from ..models.contribution import ContributionType
from ..models.record import NormalizedRecord
from ..models.row_data import RowData

"""Row normalizer: raw export rows -> NormalizedRecord.

Classification of the raw ``Contribution type`` label:

    Award          -> Locked Award (purchase price 0) / Granted Award (> 0)
    Purchase       -> Own Contribution
    Company match  -> Company Match

Labels compare case-insensitively with whitespace removed. Any other label is
fatal for the whole file.
"""

__all__ = [
    "COL_PLAN",
    "COL_CONTRIBUTION_TYPE",
    "COL_PURCHASE_PRICE",
    "COL_MARKET_PRICE",
    "COL_SHARES",
    "COL_DATE",
    "DATE_COLUMNS",
    "SERIAL_EPOCH",
    "classify",
    "serial_to_iso",
    "to_iso_date",
    "to_decimal",
    "normalize_row",
    "normalize_rows",
    "sort_records",
]

COL_PLAN = "Plan"
COL_CONTRIBUTION_TYPE = "Contribution type"
COL_PURCHASE_PRICE = "Strike price / Cost basis"
COL_MARKET_PRICE = "Market price"
COL_SHARES = "Allocated quantity"
COL_DATE = "Allocation date"
DATE_COLUMNS = ("Available from", "Allocation date", "Expiry date")

SERIAL_EPOCH = date(1899, 12, 30)
# The spreadsheet serial convention keeps 1900 as a leap year; serial 60 is
# the day that never existed.
PHANTOM_LEAP_SERIAL = 60
PHANTOM_LEAP_DAY = "1900-02-29"

_AWARD = "award"
_PURCHASE = "purchase"
_COMPANY_MATCH = "companymatch"


def _label_key(value: Any) -> str:
    return "".join(str(value).split()).casefold()


def classify(raw_label: Any, purchase_price: Decimal, row: int = -1) -> ContributionType:
    """Map a raw contribution label to its ContributionType.

    Raises:
        InvalidContributionTypeError: For any label outside the recognized set
    """
    if raw_label is None:
        raise InvalidContributionTypeError(row, raw_label)
    key = _label_key(raw_label)
    if key == _AWARD:
        if purchase_price == 0:
            return ContributionType.LOCKED_AWARD
        return ContributionType.GRANTED_AWARD
    if key == _PURCHASE:
        return ContributionType.OWN_CONTRIBUTION
    if key == _COMPANY_MATCH:
        return ContributionType.COMPANY_MATCH
    raise InvalidContributionTypeError(row, raw_label)


def serial_to_iso(serial: float | int | Decimal) -> str:
    """Decode a spreadsheet day serial into ``yyyy-MM-dd``.

    >>> serial_to_iso(0), serial_to_iso(1), serial_to_iso(45000)
    ('1899-12-30', '1899-12-31', '2023-03-15')
    >>> serial_to_iso(60)
    '1900-02-29'
    """
    days = math.floor(serial)
    # Only 60 is remapped, so 59 lands on 1900-02-27 and no serial yields 1900-02-28
    if days == PHANTOM_LEAP_SERIAL:
        return PHANTOM_LEAP_DAY
    return (SERIAL_EPOCH + timedelta(days=days)).isoformat()


def to_iso_date(value: Any, column: str = COL_DATE, row: int = -1) -> str:
    """Format a date cell (serial number, date object or ISO text) as ISO text."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bool) or value is None:
        raise InvalidValueError(row, column, value, "is not a date")
    if isinstance(value, (int, float, Decimal)):
        if isinstance(value, float) and not math.isfinite(value):
            raise InvalidValueError(row, column, value, "is not a date")
        return serial_to_iso(value)
    text = str(value).strip()
    try:
        return serial_to_iso(Decimal(text))
    except InvalidOperation:
        pass
    try:
        return date.fromisoformat(text[:10]).isoformat()
    except ValueError as e:
        raise InvalidValueError(row, column, value, "is not a date") from e


def to_decimal(value: Any, column: str, row: int = -1, *, blank_as_zero: bool = False) -> Decimal:
    """Parse a numeric cell into an exact non-negative Decimal.

    Floats go through their shortest text form so that 0.1 stays 0.1.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if blank_as_zero:
            return Decimal(0)
        raise InvalidValueError(row, column, value, "is empty")
    if isinstance(value, bool):
        raise InvalidValueError(row, column, value)
    text = str(value).strip().replace(",", "")
    try:
        number = Decimal(text)
    except InvalidOperation as e:
        raise InvalidValueError(row, column, value) from e
    if not number.is_finite():
        raise InvalidValueError(row, column, value)
    if number < 0:
        raise InvalidValueError(row, column, value, "is negative")
    return number


def normalize_row(row: RowData) -> NormalizedRecord:
    """Convert one raw row into a NormalizedRecord."""
    n = row.row_number
    purchase_price = to_decimal(row.get(COL_PURCHASE_PRICE), COL_PURCHASE_PRICE, n, blank_as_zero=True)
    contribution_type = classify(row.get(COL_CONTRIBUTION_TYPE), purchase_price, n)
    plan = row.get(COL_PLAN)
    return NormalizedRecord(
        plan="" if plan is None else str(plan),
        contribution_type=contribution_type,
        purchase_price=purchase_price,
        market_price=to_decimal(row.get(COL_MARKET_PRICE), COL_MARKET_PRICE, n),
        shares=to_decimal(row.get(COL_SHARES), COL_SHARES, n),
        date=to_iso_date(row.get(COL_DATE), COL_DATE, n),
        row_number=n,
    )


def sort_records(records: Iterable[NormalizedRecord]) -> list[NormalizedRecord]:
    """Sort by ISO date ascending; ties keep their input order."""
    return sorted(records, key=lambda r: r.date)


def normalize_rows(rows: Iterable[RowData]) -> list[NormalizedRecord]:
    """Normalize all rows and return them sorted by date.

    Stops at the first invalid row; callers must not write partial output.
    """
    return sort_records(normalize_row(row) for row in rows)
