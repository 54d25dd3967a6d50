"""Logging configuration helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(
    level: str = "INFO", *, log_path: Optional[Path] = None, log_access: bool = False
) -> None:
    """Route driver logs to the console and, optionally, a file.

    The driver logs its listen address and shutdown at INFO, accepted
    commands at INFO, rejected commands at WARNING and buffer evictions at
    DEBUG. Per-request access lines come from ``aiohttp.access``.

    Parameters
    ----------
    level:
        Log level name, e.g. "INFO".
    log_path:
        Optional filesystem path for a file handler. When absent, only console logging is configured.
    log_access:
        When true, emit one access log line per request. Otherwise
        ``aiohttp.access`` is held at WARNING.
    """

    logging.captureWarnings(True)

    for handler in list(logging.getLogger().handlers):
        logging.getLogger().removeHandler(handler)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )

    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)

    access_level = logging.INFO if log_access else logging.WARNING
    logging.getLogger("aiohttp.access").setLevel(access_level)
