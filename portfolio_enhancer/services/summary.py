from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""Summary line rendering."""


def _format_number(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Avoid scientific notation for very small numbers
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(total_files: int, result: ProcessingResult) -> str:
    """Render the SUMMARY line for a run.

    Format:
    SUMMARY files={processed}/{total} records={records} elapsed_sec={elapsed}

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     reports=[], total_records=0, start_time=t, end_time=t, elapsed_seconds=2.0
        ... )
        >>> render_summary_line(0, result)
        'SUMMARY files=0/0 records=0 elapsed_sec=2'
    """
    return (
        f"SUMMARY files={result.processed_files}/{total_files} "
        f"records={result.total_records} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)}"
    )
