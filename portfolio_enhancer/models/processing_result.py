from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

"""Processing result models for the report pipeline.

ReportResult is the per-file outcome returned to callers (input/output pair);
ProcessingResult aggregates a whole run for the SUMMARY line.
"""


@dataclass(frozen=True)
class ReportResult:
    """Absolute input and output paths of one generated report."""
    input_file: Path
    output_file: Path

    def as_dict(self) -> dict[str, str]:
        return {"InputFile": str(self.input_file), "OutputFile": str(self.output_file)}


@dataclass(frozen=True)
class FileStat:
    """Per-file processing statistics."""
    file_name: str
    records: int  # detail rows written
    elapsed_seconds: float


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results for one run over all input files."""
    reports: list[ReportResult]
    total_records: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] = field(default_factory=list)

    @property
    def processed_files(self) -> int:
        return len(self.reports)
