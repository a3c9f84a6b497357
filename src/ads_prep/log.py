"""Logging configuration for the ads-prep CLI."""

from __future__ import annotations

import logging
import sys
from typing import Optional


def setup_logging(verbose: bool = False, level: Optional[int] = None) -> None:
    """Configure the root logger. Safe to call more than once.

    Args:
        verbose: DEBUG when True, otherwise WARNING (keeps CLI output clean)
        level: explicit level, overrides verbose
    """
    if level is None:
        level = logging.DEBUG if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
