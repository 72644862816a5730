from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal

"""Config dataclasses for the portfolio report generator.

Kept separate from the YAML loader in ``portfolio_enhancer/config/loader.py`` so
services can depend on the typed model without pulling in YAML/jsonschema.
"""

DEFAULT_HEADER_ROW = 6
DEFAULT_INCOME_TAX = Decimal("42.0")
DEFAULT_CAPITAL_GAINS_TAX = Decimal("26.375")
DEFAULT_OUTPUT_PREFIX = "Enhanced-"
DEFAULT_LOGS_DIRECTORY = "logs"
DEFAULT_MIN_OPENPYXL_VERSION = "3.0"


@dataclass(frozen=True)
class TaxRates:
    """Tax percentages in the range [0, 100]."""
    income: Decimal = DEFAULT_INCOME_TAX
    capital_gains: Decimal = DEFAULT_CAPITAL_GAINS_TAX


@dataclass(frozen=True)
class ReportConfig:
    """Root configuration object for a report run."""
    header_row: int = DEFAULT_HEADER_ROW  # 1-based sheet row holding column labels
    tax_rates: TaxRates = TaxRates()
    output_directory: str | None = None  # None -> next to each input file
    output_prefix: str = DEFAULT_OUTPUT_PREFIX
    logs_directory: str = DEFAULT_LOGS_DIRECTORY
    min_openpyxl_version: str = DEFAULT_MIN_OPENPYXL_VERSION

    def with_overrides(
        self,
        *,
        income_tax: Decimal | None = None,
        capital_gains_tax: Decimal | None = None,
        output_directory: str | None = None,
    ) -> ReportConfig:
        """Return a copy with the given non-None values applied."""
        rates = self.tax_rates
        if income_tax is not None:
            rates = replace(rates, income=income_tax)
        if capital_gains_tax is not None:
            rates = replace(rates, capital_gains=capital_gains_tax)
        cfg = replace(self, tax_rates=rates)
        if output_directory is not None:
            cfg = replace(cfg, output_directory=output_directory)
        return cfg
