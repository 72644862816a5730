from __future__ import annotations

from collections.abc import Iterable

from ..models.contribution import ContributionType
from ..models.record import NormalizedRecord
from ..models.sheet import Sheet, SheetRow
from .formula import render_rows
from .tax_rates import capital_gains_tax_rate_ref, income_tax_rate_ref

"""Detailed Data sheet: one row per normalized record.

Literal columns carry the record; every derived column is a formula over the
same row (plus the two rates on the Tax Rates sheet). Dependency graph:

    Value               = ROUND(Shares * Market Price, 2)
    Cost Basis          = ROUND(Shares * Purchase Price, 2)      blank w/o price
    Own Costs           = Cost Basis | ROUND(income rate * Cost Basis, 2) for
                          company matches | blank for locked awards
    Taxable Unr. Gains  = ROUND(Value - Cost Basis, 2)
    Real Unr. Gains     = ROUND(Value - Own Costs, 2)
    Estimated Tax       = 0 if taxable gains < 0 else ROUND(cg rate * gains, 2)
    Estimated Net Profit= ROUND(Real Unr. Gains - Estimated Tax, 2)

Everything downstream of Cost Basis is blank when Cost Basis is blank.
"""

__all__ = [
    "DETAIL_SHEET",
    "DETAIL_COLUMNS",
    "cell",
    "own_costs_formula",
    "derived_formulas",
    "detail_row",
    "build_detail_sheet",
]

DETAIL_SHEET = "Detailed Data"

DATE = "Date"
PLAN = "Plan"
CONTRIBUTION_TYPE = "Contribution Type"
SHARES = "Shares"
MARKET_PRICE = "Market Price"
VALUE = "Value"
PURCHASE_PRICE = "Purchase Price"
COST_BASIS = "Cost Basis"
OWN_COSTS = "Own Costs"
TAXABLE_GAINS = "Taxable Unrealized Gains"
REAL_GAINS = "Real Unrealized Gains"
ESTIMATED_TAX = "Estimated Tax"
NET_PROFIT = "Estimated Net Profit"

DETAIL_COLUMNS = (
    DATE,
    PLAN,
    CONTRIBUTION_TYPE,
    SHARES,
    MARKET_PRICE,
    VALUE,
    PURCHASE_PRICE,
    COST_BASIS,
    OWN_COSTS,
    TAXABLE_GAINS,
    REAL_GAINS,
    ESTIMATED_TAX,
    NET_PROFIT,
)


def cell(column: str) -> str:
    """Template for the cell of ``column`` in the current row."""
    return "{{" + column + "}}{{index}}"


def _if_cost_basis(expr: str) -> str:
    return f'=IF({cell(COST_BASIS)}="","",{expr})'


def own_costs_formula(contribution_type: ContributionType) -> str | None:
    """Own Costs depends on the category; None means a blank cell."""
    if contribution_type is ContributionType.LOCKED_AWARD:
        return None
    if contribution_type is ContributionType.COMPANY_MATCH:
        return _if_cost_basis(f"ROUND({income_tax_rate_ref()}*{cell(COST_BASIS)},2)")
    return f"={cell(COST_BASIS)}"


def derived_formulas(contribution_type: ContributionType) -> list[tuple[str, str | None]]:
    """Formulas shared by detail and overview rows, from Own Costs onwards."""
    taxable = cell(TAXABLE_GAINS)
    return [
        (OWN_COSTS, own_costs_formula(contribution_type)),
        (TAXABLE_GAINS, _if_cost_basis(f"ROUND({cell(VALUE)}-{cell(COST_BASIS)},2)")),
        (REAL_GAINS, _if_cost_basis(f"ROUND({cell(VALUE)}-{cell(OWN_COSTS)},2)")),
        (ESTIMATED_TAX, f'=IF({taxable}="","",IF({taxable}<0,0,ROUND({capital_gains_tax_rate_ref()}*{taxable},2)))'),
        (NET_PROFIT, _if_cost_basis(f"ROUND({cell(REAL_GAINS)}-{cell(ESTIMATED_TAX)},2)")),
    ]


def detail_row(record: NormalizedRecord) -> SheetRow:
    """Unrendered detail row for one record."""
    has_price = record.purchase_price > 0
    return SheetRow.of([
        (DATE, record.date),
        (PLAN, record.plan),
        (CONTRIBUTION_TYPE, record.contribution_type.label),
        (SHARES, record.shares),
        (MARKET_PRICE, record.market_price),
        (VALUE, f"=ROUND({cell(SHARES)}*{cell(MARKET_PRICE)},2)"),
        (PURCHASE_PRICE, record.purchase_price if has_price else None),
        (COST_BASIS, f'=IF({cell(PURCHASE_PRICE)}="","",ROUND({cell(SHARES)}*{cell(PURCHASE_PRICE)},2))'),
        *derived_formulas(record.contribution_type),
    ])


def build_detail_sheet(records: Iterable[NormalizedRecord]) -> Sheet:
    """Build the detail sheet from records already sorted by date."""
    rows = render_rows(detail_row(record) for record in records)
    return Sheet.from_rows(DETAIL_SHEET, rows, DETAIL_COLUMNS)
