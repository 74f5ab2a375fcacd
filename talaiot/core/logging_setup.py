from __future__ import annotations

import logging
import os
import sys


LOG_FORMAT = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT = "[%(levelname)s] [%(name)s:%(lineno)d] %(message)s"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def parse_log_level(value: str | None) -> int | None:
    """Parse a level name ("INFO") or number ("20"); None when unrecognized."""
    if not value:
        return None
    text = value.strip().upper()
    if text.isdigit():
        return int(text)
    return _LEVELS.get(text)


def setup_logging(level: int | None = None) -> None:
    """Configure the root logger with one stream handler on stderr.

    If ``level`` is None, ``TALAIOT_LOG_LEVEL`` is consulted; WARNING otherwise.
    """
    if level is None:
        level = parse_log_level(os.environ.get("TALAIOT_LOG_LEVEL")) or logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT if level >= logging.INFO else DEBUG_LOG_FORMAT))
    root_logger.addHandler(handler)
