"""Logging setup for the card pool.

The package logs through ``loguru`` and stays silent until an application
calls :func:`configure_logging`.
"""
from __future__ import annotations

import sys
from typing import Any, Optional

from loguru import logger

logger.disable("card_pool")


def configure_logging(level: str = "INFO", sink: Optional[Any] = None) -> int:
    """Enable package logs and route them to ``sink`` (stderr by default).

    Returns the loguru handler id so callers can remove the sink again.
    """

    logger.enable("card_pool")
    return logger.add(sink if sink is not None else sys.stderr, level=level, filter="card_pool")
