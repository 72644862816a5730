from __future__ import annotations

from ..models.contribution import ContributionType
from ..models.sheet import Sheet, SheetRow
from .detail import (
    CONTRIBUTION_TYPE,
    COST_BASIS,
    DETAIL_COLUMNS,
    DETAIL_SHEET,
    ESTIMATED_TAX,
    MARKET_PRICE,
    NET_PROFIT,
    OWN_COSTS,
    REAL_GAINS,
    SHARES,
    TAXABLE_GAINS,
    VALUE,
    cell,
    derived_formulas,
)
from .formula import FIRST_DATA_ROW, column_letters, render_rows, sheet_reference

"""Overview sheet: roll-up of the detail sheet by contribution type.

Rows 2-5 hold one row per category (SUMIF over the detail rows), row 6 holds
the "All Except Locked Awards" total which sums rows 3-5.
"""

__all__ = [
    "OVERVIEW_SHEET",
    "OVERVIEW_COLUMNS",
    "CATEGORY_ORDER",
    "TOTAL_LABEL",
    "TOTAL_FIRST_ROW",
    "TOTAL_LAST_ROW",
    "category_row",
    "total_row",
    "build_overview_sheet",
]

OVERVIEW_SHEET = "Overview"
PERCENTAGE_GAIN = "Percentage Gain"

OVERVIEW_COLUMNS = (
    CONTRIBUTION_TYPE,
    SHARES,
    VALUE,
    COST_BASIS,
    OWN_COSTS,
    TAXABLE_GAINS,
    REAL_GAINS,
    ESTIMATED_TAX,
    NET_PROFIT,
    PERCENTAGE_GAIN,
)

CATEGORY_ORDER = (
    ContributionType.LOCKED_AWARD,
    ContributionType.GRANTED_AWARD,
    ContributionType.OWN_CONTRIBUTION,
    ContributionType.COMPANY_MATCH,
)

TOTAL_LABEL = "All Except Locked Awards"
# Fixed positions: the total assumes the four category rows occupy rows 2-5
# in CATEGORY_ORDER and skips the Locked Awards row.
TOTAL_FIRST_ROW = 3
TOTAL_LAST_ROW = 5

def _detail_letter(column: str) -> str:
    return column_letters(DETAIL_COLUMNS)[column]


def _detail_range(column: str, last_row: int) -> str:
    letter = _detail_letter(column)
    return sheet_reference(DETAIL_SHEET, f"${letter}${FIRST_DATA_ROW}:${letter}${last_row}")


def _sumif(contribution_type: ContributionType, column: str, last_row: int) -> str:
    criteria = _detail_range(CONTRIBUTION_TYPE, last_row)
    return f'=SUMIF({criteria},"{contribution_type.label}",{_detail_range(column, last_row)})'


def _percentage_gain() -> str:
    # Own Costs is 0 for a category with no detail rows
    own_costs = cell(OWN_COSTS)
    return (
        f'=IF(OR({cell(COST_BASIS)}="",{own_costs}=0),"",'
        f'ROUND({cell(NET_PROFIT)}/{own_costs}*100,2))'
    )


def category_row(contribution_type: ContributionType, last_detail_row: int) -> SheetRow:
    """Unrendered overview row aggregating one contribution type."""
    # The first detail row's market price stands in for the whole file
    market_price = sheet_reference(DETAIL_SHEET, f"${_detail_letter(MARKET_PRICE)}${FIRST_DATA_ROW}")
    if contribution_type is ContributionType.LOCKED_AWARD:
        cost_basis = None
    else:
        cost_basis = _sumif(contribution_type, COST_BASIS, last_detail_row)
    return SheetRow.of([
        (CONTRIBUTION_TYPE, contribution_type.overview_label),
        (SHARES, _sumif(contribution_type, SHARES, last_detail_row)),
        (VALUE, f"=ROUND({cell(SHARES)}*{market_price},2)"),
        (COST_BASIS, cost_basis),
        *derived_formulas(contribution_type),
        (PERCENTAGE_GAIN, _percentage_gain()),
    ])


def total_row() -> SheetRow:
    """Unrendered total row over the non-locked category rows."""
    def _sum(column: str) -> str:
        return "=SUM({{%s}}%d:{{%s}}%d)" % (column, TOTAL_FIRST_ROW, column, TOTAL_LAST_ROW)

    pairs: list[tuple[str, str]] = [(CONTRIBUTION_TYPE, TOTAL_LABEL)]
    pairs.extend((column, _sum(column)) for column in OVERVIEW_COLUMNS[1:-1])
    pairs.append((PERCENTAGE_GAIN, _percentage_gain()))
    return SheetRow.of(pairs)


def build_overview_sheet(last_detail_row: int) -> Sheet:
    """Build the overview sheet for a detail sheet ending at ``last_detail_row``."""
    rows = [category_row(ct, last_detail_row) for ct in CATEGORY_ORDER]
    rows.append(total_row())
    return Sheet.from_rows(OVERVIEW_SHEET, render_rows(rows), OVERVIEW_COLUMNS)
