"""
Logging configuration.

The TUI owns the terminal, so log records go to <home>/emd.log.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .config import get_emd_home

LOG_FILE = "emd.log"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"


def get_log_path() -> Path:
    return get_emd_home() / LOG_FILE


def resolve_level(level: Optional[str] = None) -> int:
    """Level name from the argument, then EMD_LOG_LEVEL, defaulting to INFO."""
    name = (level or os.environ.get("EMD_LOG_LEVEL") or "INFO").upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: Optional[str] = None) -> Path:
    """
    Attach a file handler for the emd package logger.

    Calling it again replaces the previous handler.

    Returns:
        Path: Log file location
    """
    path = get_log_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("emd")
    for handler in list(logger.handlers):
        if getattr(handler, "_emd_handler", False):
            logger.removeHandler(handler)
            handler.close()

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._emd_handler = True
    logger.addHandler(handler)
    logger.setLevel(resolve_level(level))
    # boto3/botocore are chatty at DEBUG
    logging.getLogger("botocore").setLevel(logging.WARNING)
    return path
