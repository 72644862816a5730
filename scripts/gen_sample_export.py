#!/usr/bin/env python3
"""Sample portfolio export generator.

Writes a synthetic equity-plan export in the layout the enhancer expects:
- Rows 1-5: preamble (title, owner, export date, blank lines)
- Row 6: header row
- Row 7+: data rows, date columns as spreadsheet day serials

Useful for trying the CLI by hand or timing larger files.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

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

PLANS = ["Share Purchase Plan", "Restricted Stock Units", "Performance Shares"]
# Serial 44927 is 2023-01-01
FIRST_SERIAL = 44927


def generate_rows(rows: int, market_price: float, seed: int = 42) -> list[list[Any]]:
    """Generate export rows with a single market price for the whole file."""
    rng = np.random.default_rng(seed)
    data: list[list[Any]] = []
    for _ in range(rows):
        kind = rng.choice(["Award", "Award", "Purchase", "Company match"])
        if kind == "Award":
            strike = 0.0 if rng.random() < 0.5 else round(float(rng.uniform(1, market_price)), 2)
            plan = PLANS[1] if strike == 0 else PLANS[2]
        else:
            strike = round(float(rng.uniform(market_price * 0.5, market_price * 1.2)), 2)
            plan = PLANS[0]
        allocated = int(FIRST_SERIAL + rng.integers(0, 730))
        data.append([
            plan,
            str(kind),
            strike,
            market_price,
            allocated + 365 * 3,
            round(float(rng.uniform(1, 200)), 4),
            allocated,
            allocated + 365 * 10,
        ])
    return data


def create_export(output_path: Path, rows: int, market_price: float, seed: int = 42) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    sheet: list[list[Any]] = [
        ["Portfolio export"] + [None] * (len(HEADER) - 1),
        ["Participant", "Sample Person"] + [None] * (len(HEADER) - 2),
        ["Exported", "2024-06-30"] + [None] * (len(HEADER) - 2),
        [None] * len(HEADER),
        [None] * len(HEADER),
        HEADER,
    ]
    sheet.extend(generate_rows(rows, market_price, seed))
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        pd.DataFrame(sheet).to_excel(writer, sheet_name="Portfolio", header=False, index=False)
    print(f"Created sample export: {output_path} ({rows} rows)")


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a synthetic portfolio export")
    parser.add_argument("output", type=Path, help="Output xlsx path")
    parser.add_argument("--rows", type=int, default=50, help="Number of data rows (default: 50)")
    parser.add_argument("--market-price", type=float, default=42.5, help="Market price for every row")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    create_export(args.output, args.rows, args.market_price, args.seed)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
