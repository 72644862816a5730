"""Domain models for the portfolio report generator.

This package contains the typed records flowing through the pipeline, from raw
input rows to the ordered output rows written into the workbook.
"""

from .config_models import ReportConfig, TaxRates
from .contribution import ContributionType
from .processing_result import FileStat, ProcessingResult, ReportResult
from .record import NormalizedRecord
from .row_data import RowData
from .sheet import ColumnOrderError, Sheet, SheetRow

__all__ = [
    # Configuration models
    "ReportConfig",
    "TaxRates",
    # Input models
    "RowData",
    "ContributionType",
    "NormalizedRecord",
    # Output models
    "SheetRow",
    "Sheet",
    "ColumnOrderError",
    # Results
    "ReportResult",
    "FileStat",
    "ProcessingResult",
]
