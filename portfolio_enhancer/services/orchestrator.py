from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

from ..errors import InvalidOutputSpecificationError, MissingInputFileError, PortfolioEnhancerError
from ..excel.reader import (
    DuplicateColumnsError,
    MissingColumnsError,
    SheetData,
    SheetHeaderError,
    read_portfolio_sheet,
)
from ..excel.writer import write_report
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.config_models import ReportConfig, TaxRates
from ..models.processing_result import FileStat, ProcessingResult, ReportResult
from ..models.record import NormalizedRecord
from ..models.sheet import Sheet
from .detail import build_detail_sheet
from .environment import spreadsheet_backend
from .input_data import build_input_sheet
from .normalizer import normalize_rows
from .overview import build_overview_sheet
from .progress import ProgressTracker
from .tax_rates import build_tax_rates_sheet

"""Report orchestrator.

Per input file:
1. Check the file exists
2. Read the portfolio sheet (header on the configured row)
3. Normalize and sort all records by date
4. Resolve the output path, remove any previous output, create its directory
5. Write Overview, Tax Rates, Detailed Data and Input Data sheets

Files are processed one at a time in input order. The first failure is
recorded in the error log and aborts the run; a file's output is written with
a single save, so there is never a partial workbook.
"""

__all__ = [
    "FILE_LEVEL_SHEET",
    "resolve_output_path",
    "validate_output_specification",
    "build_report_sheets",
    "process_file",
    "process_all",
]

logger = logging.getLogger(__name__)

FILE_LEVEL_SHEET = "<FILE_LEVEL>"

_RECORDED_ERRORS = (PortfolioEnhancerError, MissingColumnsError, DuplicateColumnsError, SheetHeaderError)


def validate_output_specification(
    input_count: int, output_path: Path | None, from_pipeline: bool = False
) -> None:
    """An explicit output path is only valid for exactly one argument-given input.

    Raises:
        InvalidOutputSpecificationError: For an output path combined with batch
            or pipeline input
    """
    if output_path is None:
        return
    if from_pipeline:
        raise InvalidOutputSpecificationError("an explicit output path cannot be used with piped input")
    if input_count != 1:
        raise InvalidOutputSpecificationError(
            f"an explicit output path requires exactly one input file, got {input_count}"
        )


def resolve_output_path(
    input_path: Path,
    output_path: Path | None = None,
    output_directory: Path | str | None = None,
    prefix: str = "Enhanced-",
) -> Path:
    """Explicit path, else ``<dir>/<prefix><input name>`` with dir defaulting to the input's."""
    if output_path is not None:
        return Path(output_path).resolve()
    directory = Path(output_directory) if output_directory else input_path.parent
    return (directory / f"{prefix}{input_path.name}").resolve()


def build_report_sheets(data: SheetData, records: list[NormalizedRecord], rates: TaxRates) -> list[Sheet]:
    """All four sheets, in workbook order."""
    detail = build_detail_sheet(records)
    return [
        build_overview_sheet(detail.last_row),
        build_tax_rates_sheet(rates),
        detail,
        build_input_sheet(data),
    ]


def _prepare_output(path: Path) -> None:
    if path.exists():
        logger.debug(f"removing previous output: {path}")
        path.unlink()
    path.parent.mkdir(parents=True, exist_ok=True)


def process_file(
    input_path: Path,
    config: ReportConfig,
    output_path: Path | None = None,
) -> tuple[ReportResult, int]:
    """Generate the report for one input file.

    Returns:
        (ReportResult with absolute paths, number of detail records)

    Raises:
        MissingInputFileError: If ``input_path`` is not an existing file
        InvalidContributionTypeError / InvalidValueError: For a bad input row
        UnreadableInputError: If the file cannot be parsed as a workbook
        MissingColumnsError / DuplicateColumnsError / SheetHeaderError: For an
            unexpected sheet layout
    """
    input_path = Path(input_path)
    if not input_path.is_file():
        raise MissingInputFileError(input_path)
    input_path = input_path.resolve()

    data = read_portfolio_sheet(input_path, config.header_row)
    records = normalize_rows(data.rows)
    logger.debug(f"{input_path.name}: {len(records)} records normalized")

    target = resolve_output_path(input_path, output_path, config.output_directory, config.output_prefix)
    sheets = build_report_sheets(data, records, config.tax_rates)
    _prepare_output(target)
    write_report(target, sheets)

    return ReportResult(input_file=input_path, output_file=target), len(records)


def _record_error(error_log: ErrorLogBuffer, input_path: Path, error: Exception) -> None:
    row = getattr(error, "row", -1)
    error_log.append(ErrorRecord.create(
        file=input_path.name,
        sheet=FILE_LEVEL_SHEET,
        row=row if isinstance(row, int) else -1,
        error_type=getattr(error, "error_type", "PROCESSING_ERROR"),
        message=str(error),
    ))


def process_all(
    input_paths: Sequence[Path],
    config: ReportConfig,
    output_path: Path | None = None,
    *,
    from_pipeline: bool = False,
    error_log: ErrorLogBuffer | None = None,
) -> ProcessingResult:
    """Generate reports for every input file, in order.

    Raises:
        InvalidOutputSpecificationError: Before any processing, see
            ``validate_output_specification``
        EnvironmentDependencyUnavailableError: Before any file is touched
        PortfolioEnhancerError: The first per-file failure, after it has been
            written to the error log
    """
    validate_output_specification(len(input_paths), output_path, from_pipeline)
    error_log = error_log if error_log is not None else ErrorLogBuffer(config.logs_directory)

    start_time = datetime.now(timezone.utc)
    reports: list[ReportResult] = []
    file_stats: list[FileStat] = []
    total_records = 0

    try:
        with spreadsheet_backend(config.min_openpyxl_version), ProgressTracker(len(input_paths)) as progress:
            for input_path in input_paths:
                input_path = Path(input_path)
                progress.start_file(input_path)
                file_start = datetime.now(timezone.utc)
                try:
                    report, records = process_file(input_path, config, output_path)
                except _RECORDED_ERRORS as e:
                    _record_error(error_log, input_path, e)
                    raise
                elapsed = (datetime.now(timezone.utc) - file_start).total_seconds()

                logger.info(f"report input={report.input_file} output={report.output_file}")
                reports.append(report)
                file_stats.append(FileStat(file_name=input_path.name, records=records, elapsed_seconds=elapsed))
                total_records += records
                progress.finish_file(records)
    finally:
        log_path = error_log.flush()
        if log_path is not None:
            logger.debug(f"error log written: {log_path}")

    end_time = datetime.now(timezone.utc)
    return ProcessingResult(
        reports=reports,
        total_records=total_records,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )
