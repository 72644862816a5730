from __future__ import annotations

from pathlib import Path
from typing import Any

"""Exception hierarchy for the portfolio report pipeline.

Every error carries a stable ``error_type`` in UPPER_SNAKE_CASE which is used
both for the JSON Lines error log and for mapping to CLI exit codes.
"""

__all__ = [
    "PortfolioEnhancerError",
    "MissingInputFileError",
    "InvalidContributionTypeError",
    "InvalidValueError",
    "InvalidOutputSpecificationError",
    "UnreadableInputError",
    "EnvironmentDependencyUnavailableError",
]


class PortfolioEnhancerError(Exception):
    """Base exception for report generation errors."""

    error_type = "PROCESSING_ERROR"
    # 1-based physical sheet row, -1 when the error is not tied to a row
    row: int = -1


class MissingInputFileError(PortfolioEnhancerError):
    """Raised when an input path does not resolve to an existing file."""

    error_type = "MISSING_INPUT_FILE"

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"input file not found: {path}")


class UnreadableInputError(PortfolioEnhancerError):
    """Raised when an existing input file cannot be parsed as a workbook."""

    error_type = "UNREADABLE_INPUT"

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"cannot read input file {path}: {reason}")


class InvalidContributionTypeError(PortfolioEnhancerError):
    """Raised for a contribution type label outside the recognized set."""

    error_type = "INVALID_CONTRIBUTION_TYPE"

    def __init__(self, row: int, value: Any) -> None:
        self.row = row
        self.value = value
        super().__init__(f"row {row}: unrecognized contribution type {value!r}")


class InvalidValueError(PortfolioEnhancerError):
    """Raised when a numeric or date cell cannot be interpreted."""

    error_type = "INVALID_VALUE"

    def __init__(self, row: int, column: str, value: Any, reason: str = "not a number") -> None:
        self.row = row
        self.column = column
        self.value = value
        super().__init__(f"row {row}: column '{column}' {reason}: {value!r}")


class InvalidOutputSpecificationError(PortfolioEnhancerError):
    """Raised when an explicit output path is combined with batch input."""

    error_type = "INVALID_OUTPUT_SPECIFICATION"


class EnvironmentDependencyUnavailableError(PortfolioEnhancerError):
    """Raised when the spreadsheet backend cannot be used."""

    error_type = "ENVIRONMENT_DEPENDENCY_UNAVAILABLE"
