from __future__ import annotations

import importlib
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from importlib import metadata
from types import ModuleType

from ..errors import EnvironmentDependencyUnavailableError

"""Spreadsheet backend acquisition.

The whole batch runs inside ``spreadsheet_backend()``: the backend is imported
and its version checked once before any file is touched, and released (logged)
when the batch ends, whether it succeeded or not.
"""

__all__ = [
    "BACKEND_MODULE",
    "BACKEND_DISTRIBUTION",
    "parse_version",
    "spreadsheet_backend",
]

logger = logging.getLogger(__name__)

BACKEND_MODULE = "openpyxl"
BACKEND_DISTRIBUTION = "openpyxl"


def parse_version(text: str) -> tuple[int, ...]:
    """Leading numeric components of a version string ('3.1.2' -> (3, 1, 2))."""
    parts: list[int] = []
    for piece in text.split("."):
        digits = ""
        for ch in piece:
            if not ch.isdigit():
                break
            digits += ch
        if not digits:
            break
        parts.append(int(digits))
    return tuple(parts)


@contextmanager
def spreadsheet_backend(min_version: str = "3.0") -> Iterator[ModuleType]:
    """Acquire the spreadsheet backend for the duration of a batch.

    Raises:
        EnvironmentDependencyUnavailableError: If the backend is not installed
            or older than ``min_version``
    """
    try:
        module = importlib.import_module(BACKEND_MODULE)
        installed = metadata.version(BACKEND_DISTRIBUTION)
    except (ImportError, metadata.PackageNotFoundError) as e:
        raise EnvironmentDependencyUnavailableError(
            f"spreadsheet backend '{BACKEND_DISTRIBUTION}' not available: {e}"
        ) from e

    if parse_version(installed) < parse_version(min_version):
        raise EnvironmentDependencyUnavailableError(
            f"spreadsheet backend '{BACKEND_DISTRIBUTION}' {installed} is older than required {min_version}"
        )

    logger.debug(f"backend acquired: {BACKEND_DISTRIBUTION} {installed}")
    try:
        yield module
    finally:
        logger.debug(f"backend released: {BACKEND_DISTRIBUTION} {installed}")
