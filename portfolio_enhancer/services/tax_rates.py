from __future__ import annotations

from ..models.config_models import TaxRates
from ..models.sheet import Sheet, SheetRow
from .formula import FIRST_DATA_ROW, column_letters, render_rows, sheet_reference

"""Tax Rates sheet: the two percentage inputs every other sheet refers to."""

__all__ = [
    "TAX_RATES_SHEET",
    "TAX_RATE_COLUMNS",
    "income_tax_rate_ref",
    "capital_gains_tax_rate_ref",
    "build_tax_rates_sheet",
]

TAX_RATES_SHEET = "Tax Rates"
TAX_RATE_COLUMNS = ("Tax", "Percentage", "Rate")

INCOME_ROW = FIRST_DATA_ROW
CAPITAL_GAINS_ROW = FIRST_DATA_ROW + 1

_RATE_FORMULA = "={{Percentage}}{{index}}/100"


def _rate_cell(row: int) -> str:
    return sheet_reference(TAX_RATES_SHEET, f"{column_letters(TAX_RATE_COLUMNS)['Rate']}{row}")


def income_tax_rate_ref() -> str:
    """Absolute reference to the income tax rate, used inside detail and overview formulas."""
    return _rate_cell(INCOME_ROW)


def capital_gains_tax_rate_ref() -> str:
    return _rate_cell(CAPITAL_GAINS_ROW)


def build_tax_rates_sheet(rates: TaxRates) -> Sheet:
    rows = [
        SheetRow.of([("Tax", "Income"), ("Percentage", rates.income), ("Rate", _RATE_FORMULA)]),
        SheetRow.of([("Tax", "Capital Gains"), ("Percentage", rates.capital_gains), ("Rate", _RATE_FORMULA)]),
    ]
    return Sheet.from_rows(TAX_RATES_SHEET, render_rows(rows, INCOME_ROW), TAX_RATE_COLUMNS)
