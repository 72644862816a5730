from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path

from portfolio_enhancer.models.processing_result import FileStat, ProcessingResult, ReportResult
from portfolio_enhancer.services.summary import render_summary_line

SUMMARY_PATTERN = re.compile(r"^SUMMARY files=([0-9]+)/([0-9]+) records=([0-9]+) elapsed_sec=([0-9]+\.?[0-9]*)$")


def _result(reports: int, records: int, elapsed: float) -> ProcessingResult:
    t = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
    return ProcessingResult(
        reports=[ReportResult(Path(f"/in/{i}.xlsx"), Path(f"/out/Enhanced-{i}.xlsx")) for i in range(reports)],
        total_records=records,
        start_time=t,
        end_time=t,
        elapsed_seconds=elapsed,
        file_stats=[FileStat(f"{i}.xlsx", records, elapsed) for i in range(reports)],
    )


def test_render_summary_line_all_files():
    line = render_summary_line(2, _result(2, 17, 1.5))
    m = SUMMARY_PATTERN.match(line)
    assert m, line
    assert m.groups() == ("2", "2", "17", "1.5")


def test_render_summary_line_integer_elapsed():
    assert render_summary_line(1, _result(1, 3, 2.0)) == "SUMMARY files=1/1 records=3 elapsed_sec=2"


def test_render_summary_line_small_elapsed_has_no_exponent():
    line = render_summary_line(1, _result(1, 0, 0.000123))
    assert "e-" not in line
    assert line.endswith("elapsed_sec=0.000123")


def test_render_summary_line_rounds_to_milliseconds():
    assert render_summary_line(1, _result(1, 1, 0.84567)).endswith("elapsed_sec=0.846")
