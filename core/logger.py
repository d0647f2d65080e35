from __future__ import annotations

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
PROJECT_PACKAGES = {"core", "network", "server", "client"}


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Return a stdout logger that does not propagate to the root logger.

    Handlers are only attached once, so modules can call this at import time.
    """
    level_name = (level or os.getenv("GAME_LOG_LEVEL") or "INFO").upper()
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    logger.propagate = False
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger


def set_level(level: str) -> None:
    """Apply `level` to every project logger created so far."""
    numeric = getattr(logging, level.upper(), logging.INFO)
    for name, existing in logging.root.manager.loggerDict.items():
        if not isinstance(existing, logging.Logger):
            continue
        if name.split(".")[0] in PROJECT_PACKAGES:
            existing.setLevel(numeric)
