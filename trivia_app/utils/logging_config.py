"""Logging configuration helpers for the trivia application."""

from __future__ import annotations

import logging
from logging import Logger

# Per-request chatter from the HTTP stack drowns out session transitions.
_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: int = logging.INFO) -> Logger:
    """Configure basic logging for the application and return the package logger."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    return logging.getLogger("trivia_app")
