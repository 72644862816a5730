from __future__ import annotations

import argparse
import json
import sys
from decimal import Decimal
from pathlib import Path
from typing import TextIO

from dotenv import load_dotenv

from ..config.loader import ConfigError, apply_env_overrides, load_config, parse_percentage
from ..errors import (
    EnvironmentDependencyUnavailableError,
    InvalidContributionTypeError,
    InvalidOutputSpecificationError,
    MissingInputFileError,
    PortfolioEnhancerError,
)
from ..excel.reader import DuplicateColumnsError, MissingColumnsError, SheetHeaderError
from ..logging.init import log_summary, set_debug, setup_logging
from ..services.orchestrator import process_all
from ..services.summary import render_summary_line
from ..services.viewer import open_in_viewer

"""CLI entrypoint.

Flow:
- Load ``.env`` (python-dotenv) so ``PORTFOLIO_*`` variables apply
- Load YAML config, apply environment then CLI overrides
- Collect input files from arguments, or from stdin when piped
- Generate one report per file, print a SUMMARY line

Errors map to distinct exit codes; argparse keeps 2 for usage errors.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_MISSING_INPUT = 3
EXIT_INVALID_OUTPUT = 4
EXIT_INVALID_CONTRIBUTION_TYPE = 5

DEFAULT_ENV_FILE = Path(".env")


def _percentage(value: str) -> Decimal:
    try:
        return parse_percentage(value, "percentage")
    except ConfigError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="portfolio-enhancer",
        description="Portfolio export -> enhanced workbook with live formulas",
    )
    p.add_argument("input_files", nargs="*", type=Path, help="Portfolio export files (read from stdin when omitted)")
    out = p.add_mutually_exclusive_group()
    out.add_argument("--output-dir", type=Path, default=None, help="Directory for Enhanced-* reports")
    out.add_argument("--output", type=Path, default=None, help="Explicit output file (single input only)")
    p.add_argument("--income-tax", type=_percentage, default=None, help="Income tax percentage [0-100] (default 42.0)")
    p.add_argument(
        "--capital-gains-tax", type=_percentage, default=None,
        help="Capital gains tax percentage [0-100] (default 26.375)",
    )
    p.add_argument("--open", action="store_true", help="Open each generated report")
    p.add_argument("--config", type=Path, default=None, help="YAML config (default config/enhancer.yml)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _read_piped_paths(stream: TextIO) -> list[Path]:
    return [Path(line.strip()) for line in stream if line.strip()]


def _exit_code_for(error: Exception) -> int:
    if isinstance(error, MissingInputFileError):
        return EXIT_MISSING_INPUT
    if isinstance(error, InvalidOutputSpecificationError):
        return EXIT_INVALID_OUTPUT
    if isinstance(error, InvalidContributionTypeError):
        return EXIT_INVALID_CONTRIBUTION_TYPE
    return EXIT_FATAL


def main(argv: list[str] | None = None, stdin: TextIO | None = None) -> int:
    logger = setup_logging()

    # None only -> read the real argv; an empty list means "no arguments"
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    load_dotenv(dotenv_path=DEFAULT_ENV_FILE, override=False)

    try:
        cfg = apply_env_overrides(load_config(args.config, required=args.config is not None))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    cfg = cfg.with_overrides(
        income_tax=args.income_tax,
        capital_gains_tax=args.capital_gains_tax,
        output_directory=str(args.output_dir) if args.output_dir is not None else None,
    )

    stdin = stdin if stdin is not None else sys.stdin
    inputs: list[Path] = list(args.input_files)
    from_pipeline = False
    if not inputs and not stdin.isatty():
        inputs = _read_piped_paths(stdin)
        from_pipeline = True
    if not inputs:
        logger.error("no input files given")
        return EXIT_MISSING_INPUT

    try:
        result = process_all(inputs, cfg, args.output, from_pipeline=from_pipeline)
    except (PortfolioEnhancerError, MissingColumnsError, DuplicateColumnsError, SheetHeaderError) as e:
        if isinstance(e, EnvironmentDependencyUnavailableError):
            logger.error(f"environment: {e}")
        else:
            logger.error(f"processing: {e}")
        return _exit_code_for(e)

    for report in result.reports:
        print(json.dumps(report.as_dict(), ensure_ascii=False))
        if args.open:
            open_in_viewer(report.output_file)

    log_summary(render_summary_line(len(inputs), result)[len("SUMMARY "):])
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
