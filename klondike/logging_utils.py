"""Logging setup shared by the service, the HTTP layer and the scripts."""

from __future__ import annotations

import logging
import os

# LOG_LEVEL=DEBUG / INFO / WARNING / ERROR
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Call once at program start (scripts/serve.py)."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
