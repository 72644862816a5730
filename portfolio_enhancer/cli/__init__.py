"""Command line interface (``python -m portfolio_enhancer.cli``)."""

from .__main__ import main

__all__ = ["main"]
