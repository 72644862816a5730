# Shared pytest fixtures
from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from portfolio_enhancer.logging.init import reset_logging

HEADER = [
    "Plan",
    "Contribution type",
    "Strike price / Cost basis",
    "Market price",
    "Available from",
    "Allocated quantity",
    "Allocation date",
    "Expiry date",
]

PREAMBLE = [
    ["Portfolio export"],
    ["Participant", "Test Person"],
    ["Exported", "2024-06-30"],
    ["Currency", "EUR"],
    ["Note", "values as of export date"],
]


@pytest.fixture(autouse=True)
def _clean_logging():
    # Handlers bind sys.stdout at setup time; rebuild them for every test so capsys sees the output
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "data").mkdir()
    (tmp_path / "config").mkdir()
    monkeypatch.chdir(tmp_path)
    for var in ("PORTFOLIO_INCOME_TAX", "PORTFOLIO_CAPITAL_GAINS_TAX", "PORTFOLIO_OUTPUT_DIR"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


def export_row(
    plan: str,
    kind: str,
    strike: Any,
    market: Any,
    quantity: Any,
    allocation_serial: Any,
) -> list[Any]:
    """One data row in export column order (available/expiry derived from allocation)."""
    return [plan, kind, strike, market, allocation_serial + 1095, quantity, allocation_serial, allocation_serial + 3650]


@pytest.fixture()
def make_export(temp_workdir: Path) -> Callable[..., Path]:
    """Write an export file with a 5-row preamble and the header on row 6."""
    def _make(name: str, rows: list[list[Any]], header: list[str] | None = None) -> Path:
        path = temp_workdir / "data" / name
        sheet = [*PREAMBLE, header or HEADER, *rows]
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            pd.DataFrame(sheet).to_excel(writer, sheet_name="Portfolio", header=False, index=False)
        return path

    return _make


# Serials: 45292 = 2024-01-01, 45078 = 2023-06-01
SERIAL_2024_01_01 = 45292
SERIAL_2023_06_01 = 45078


@pytest.fixture()
def three_record_rows() -> list[list[Any]]:
    return [
        export_row("RSU", "Award", 0, 5, 10, SERIAL_2024_01_01),
        export_row("Performance", "Award", 2, 5, 5, SERIAL_2023_06_01),
        export_row("ESPP", "Company match", 3, 5, 8, SERIAL_2024_01_01),
    ]
