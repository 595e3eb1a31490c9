"""Logging configuration for the relay process."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import List

LOGGER_NAME = "inference_relay"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
STREAM_HANDLER_NAME = "inference_relay.stream"

_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}
_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def resolve_log_level(level_name: str | None = None) -> str:
    """Pick the level from *level_name*, ``RELAY_LOG_LEVEL`` or ``LOG_LEVEL``.

    Unknown names fall back to ``INFO``.
    """

    name = (level_name or os.getenv("RELAY_LOG_LEVEL") or os.getenv("LOG_LEVEL") or "INFO")
    name = name.strip().upper()
    name = _LEVEL_ALIASES.get(name, name)
    return name if name in _LEVELS else "INFO"


def _file_handler(formatter: logging.Formatter) -> RotatingFileHandler | None:
    log_file = os.getenv("RELAY_LOG_FILE", "").strip()
    if not log_file:
        return None
    os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
    handler = RotatingFileHandler(
        log_file,
        maxBytes=int(os.getenv("RELAY_LOG_MAX_BYTES", str(10 * 1024 * 1024))),
        backupCount=int(os.getenv("RELAY_LOG_BACKUP_COUNT", "5")),
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(level_name: str | None = None) -> logging.Logger:
    """Give the ``inference_relay`` logger its handlers, once per process.

    A second call returns the logger untouched. ``RELAY_LOG_FILE`` adds a
    rotating file next to the stderr stream.
    """

    relay_logger = logging.getLogger(LOGGER_NAME)
    if any(h.get_name() == STREAM_HANDLER_NAME for h in relay_logger.handlers):
        return relay_logger

    formatter = logging.Formatter(LOG_FORMAT)
    stream = logging.StreamHandler()
    stream.set_name(STREAM_HANDLER_NAME)
    stream.setFormatter(formatter)
    handlers: List[logging.Handler] = [stream]

    file_error = None
    try:
        file_handler = _file_handler(formatter)
    except OSError as exc:
        file_handler = None
        file_error = exc
    if file_handler is not None:
        handlers.append(file_handler)

    relay_logger.setLevel(resolve_log_level(level_name))
    relay_logger.propagate = False
    for handler in handlers:
        relay_logger.addHandler(handler)

    if file_error is not None:
        relay_logger.error(
            "Failed to configure RELAY_LOG_FILE=%r: %s", os.getenv("RELAY_LOG_FILE"), file_error
        )
    return relay_logger


__all__ = ["LOGGER_NAME", "resolve_log_level", "setup_logging"]
