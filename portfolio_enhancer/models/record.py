from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .contribution import ContributionType

"""NormalizedRecord: canonical representation of one portfolio line item."""

__all__ = [
    "NormalizedRecord",
]


@dataclass(frozen=True)
class NormalizedRecord:
    """One portfolio line item after normalization.

    Created once per raw row and never mutated afterwards. ``date`` is kept as
    ISO text because the spreadsheet date convention includes a day (1900-02-29)
    that ``datetime.date`` cannot represent.
    """
    plan: str
    contribution_type: ContributionType
    purchase_price: Decimal  # 0 means no purchase price (locked award)
    market_price: Decimal
    shares: Decimal
    date: str  # yyyy-MM-dd
    row_number: int = -1  # physical sheet row of the source line
