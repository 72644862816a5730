from __future__ import annotations

import json
import os
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import ReportConfig, TaxRates

"""Config loader.

Responsibilities:
- Load YAML config (default ``config/enhancer.yml``)
- Validate against the JSON schema shipped next to this module
- Apply defaults for missing keys
- Apply environment overrides (``PORTFOLIO_*``), typically populated from ``.env``

Resolution order for every setting: CLI flag > environment > YAML > default.
The CLI layer applies its flags on top of what ``load_config`` returns.
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "ENV_INCOME_TAX",
    "ENV_CAPITAL_GAINS_TAX",
    "ENV_OUTPUT_DIR",
    "load_config",
    "apply_env_overrides",
    "parse_percentage",
]

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/enhancer.yml")

ENV_INCOME_TAX = "PORTFOLIO_INCOME_TAX"
ENV_CAPITAL_GAINS_TAX = "PORTFOLIO_CAPITAL_GAINS_TAX"
ENV_OUTPUT_DIR = "PORTFOLIO_OUTPUT_DIR"


class ConfigError(Exception):
    pass


def parse_percentage(value: Any, name: str) -> Decimal:
    """Parse a tax percentage and check it lies in [0, 100].

    Raises:
        ConfigError: If the value is not numeric or out of range
    """
    try:
        pct = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e
    if not pct.is_finite() or pct < 0 or pct > 100:
        raise ConfigError(f"{name} must be within [0, 100], got {value!r}")
    return pct


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the config
            violates it (wrong types, out-of-range values, unknown keys).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path | None = None, *, required: bool = False) -> ReportConfig:
    """Load the YAML config at ``path``.

    A missing file yields the defaults unless ``required`` is set (an explicit
    ``--config`` argument), in which case it is an error.
    """
    path = path or DEFAULT_CONFIG_PATH
    if not path.exists():
        if required:
            raise ConfigError(f"config file not found: {path}")
        return ReportConfig()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    defaults = ReportConfig()
    rates = TaxRates(
        income=parse_percentage(data.get("income_tax", defaults.tax_rates.income), "income_tax"),
        capital_gains=parse_percentage(
            data.get("capital_gains_tax", defaults.tax_rates.capital_gains), "capital_gains_tax"
        ),
    )
    return ReportConfig(
        header_row=data.get("header_row", defaults.header_row),
        tax_rates=rates,
        output_directory=data.get("output_directory", defaults.output_directory),
        output_prefix=data.get("output_prefix", defaults.output_prefix),
        logs_directory=data.get("logs_directory", defaults.logs_directory),
        min_openpyxl_version=str(data.get("min_openpyxl_version", defaults.min_openpyxl_version)),
    )


def apply_env_overrides(cfg: ReportConfig, environ: Mapping[str, str] | None = None) -> ReportConfig:
    """Apply ``PORTFOLIO_*`` environment variables on top of ``cfg``."""
    env = os.environ if environ is None else environ
    income = env.get(ENV_INCOME_TAX)
    gains = env.get(ENV_CAPITAL_GAINS_TAX)
    out_dir = env.get(ENV_OUTPUT_DIR)
    return cfg.with_overrides(
        income_tax=parse_percentage(income, ENV_INCOME_TAX) if income else None,
        capital_gains_tax=parse_percentage(gains, ENV_CAPITAL_GAINS_TAX) if gains else None,
        output_directory=out_dir or None,
    )
