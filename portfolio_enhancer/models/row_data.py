from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""RowData model: one raw row as read from the portfolio export."""

__all__ = [
    "RowData",
]


@dataclass(frozen=True)
class RowData:
    """Logical representation of a single raw input row.

    ``row_number`` is the physical 1-based sheet row, so with the default header
    on row 6 the first data row is row 7.
    """
    row_number: int
    values: dict[str, Any]  # Column label -> raw value (None for empty cells)

    def get(self, column: str, default: Any = None) -> Any:
        return self.values.get(column, default)
