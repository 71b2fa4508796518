"""Logging helpers."""

from __future__ import annotations

import logging
import os


def configure_logging(level: int | str | None = None) -> None:
    level = level or os.environ.get("AEROS_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        level=level,
    )
