from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path

"""Open a generated report in the platform's default application."""

logger = logging.getLogger(__name__)


def open_in_viewer(path: Path) -> bool:
    """Launch the default viewer for ``path``; failures are logged, not raised."""
    try:
        if sys.platform.startswith("win"):
            os.startfile(str(path))  # type: ignore[attr-defined]
        elif sys.platform == "darwin":
            subprocess.Popen(["open", str(path)])
        else:
            subprocess.Popen(["xdg-open", str(path)])
    except OSError as e:
        logger.warning(f"could not open {path}: {e}")
        return False
    return True
