"""Logging setup for command-line entry points."""

from __future__ import annotations

import logging
import sys


def configure_logging(level: str = "INFO", *, verbose: bool = False) -> None:
    """Send package logs to stderr so stdout stays clean for report output."""
    if verbose:
        level = "DEBUG"
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
