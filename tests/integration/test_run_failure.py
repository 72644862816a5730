from __future__ import annotations

import json
from pathlib import Path

from portfolio_enhancer.cli import main as cli_main

"""End-to-end failures: the first bad row aborts the run, nothing is written."""

# Allocated 2024-01-01
GOOD = ["RSU", "Award", 0, 5, 46387, 10, 45292, 48942]
BAD_TYPE = ["Bonus Plan", "Bonus", 1, 5, 46387, 2, 45292, 48942]


def _error_lines(workdir: Path) -> list[dict]:
    logs = sorted((workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    return [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]


def test_invalid_contribution_type_aborts_without_output(temp_workdir: Path, make_export, capsys):
    source = make_export("export.xlsx", [GOOD, BAD_TYPE])
    code = cli_main([str(source)])
    out = capsys.readouterr().out

    assert code == 5
    assert "ERROR processing: row 8: unrecognized contribution type 'Bonus'" in out
    assert "SUMMARY" not in out
    assert not (source.parent / "Enhanced-export.xlsx").exists()

    (record,) = _error_lines(temp_workdir)
    assert record["row"] == 8
    assert record["file"] == "export.xlsx"
    assert record["error_type"] == "INVALID_CONTRIBUTION_TYPE"


def test_failure_keeps_previous_report(temp_workdir: Path, make_export, three_record_rows):
    first = make_export("first.xlsx", three_record_rows)
    broken = make_export("broken.xlsx", [BAD_TYPE])
    after = make_export("after.xlsx", three_record_rows)

    assert cli_main([str(first), str(broken), str(after)]) == 5
    assert (first.parent / "Enhanced-first.xlsx").exists()
    assert not (broken.parent / "Enhanced-broken.xlsx").exists()
    assert not (after.parent / "Enhanced-after.xlsx").exists()


def test_missing_columns_is_fatal(temp_workdir: Path, make_export, capsys):
    header = ["Plan", "Contribution type", "Market price"]
    source = make_export("odd.xlsx", [["RSU", "Award", 5]], header=header)
    code = cli_main([str(source)])
    assert code == 1
    assert "ERROR processing:" in capsys.readouterr().out
    assert _error_lines(temp_workdir)[0]["row"] == -1
