"""Logging configuration for the desktop app."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from config import CONFIG_DIR

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(log_path: Path | None = None, level: int = logging.INFO) -> logging.Logger:
    """Attach file and stderr handlers to the root logger once."""
    logger = logging.getLogger()
    if any(getattr(h, "_lenstext", False) for h in logger.handlers):
        return logger

    log_path = log_path or CONFIG_DIR / "lenstext.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    stream_handler = logging.StreamHandler(sys.stderr)
    for handler in (file_handler, stream_handler):
        handler.setFormatter(formatter)
        handler._lenstext = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
