from __future__ import annotations

from enum import Enum

"""ContributionType enum: how a portfolio line item was acquired."""

__all__ = [
    "ContributionType",
]


class ContributionType(Enum):
    """Category of a portfolio line item.

    The value is the label written into the ``Contribution Type`` column of the
    detail sheet and used as the SUMIF criterion by the overview sheet.
    """
    LOCKED_AWARD = "Locked Award"
    GRANTED_AWARD = "Granted Award"
    OWN_CONTRIBUTION = "Own Contribution"
    COMPANY_MATCH = "Company Match"

    @property
    def label(self) -> str:
        return self.value

    @property
    def overview_label(self) -> str:
        """Plural label used for the category row of the overview sheet."""
        return _OVERVIEW_LABELS[self]


_OVERVIEW_LABELS = {
    ContributionType.LOCKED_AWARD: "Locked Awards",
    ContributionType.GRANTED_AWARD: "Granted Awards",
    ContributionType.OWN_CONTRIBUTION: "Own Contributions",
    ContributionType.COMPANY_MATCH: "Company Matches",
}
