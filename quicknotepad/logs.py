"""Logging setup for the editor.

The terminal belongs to the TUI while it runs, so records only ever go to a
log file (by default in the platform's user log directory).
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME

LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / f"{APP_NAME}.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler: logging.Handler | None = None


def configure_logging(level: str = "WARNING", log_path: Path | None = None) -> Path:
    """Route ``quicknotepad`` loggers to a file handler and return its path.

    Calling again replaces the previously installed handler.
    """
    global _handler

    target = log_path or LOG_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    package_logger = logging.getLogger(APP_NAME)
    if _handler is not None:
        package_logger.removeHandler(_handler)
        _handler.close()
    handler = logging.FileHandler(target, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    package_logger.propagate = False
    _handler = handler
    return target
