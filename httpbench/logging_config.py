"""Structured logging configuration for httpbench."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

LOG_LEVEL_ENV = "HTTPBENCH_LOG_LEVEL"
LOG_FORMAT_ENV = "HTTPBENCH_LOG_FORMAT"  # "json" | "text" (default)

ROOT_LOGGER_NAME = "httpbench"


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name. Configures root httpbench logger on first use."""
    logger = logging.getLogger(ROOT_LOGGER_NAME if name == ROOT_LOGGER_NAME else f"{ROOT_LOGGER_NAME}.{name}")
    if not logger.handlers and logger.level == logging.NOTSET:
        _configure_httpbench_logging()
    return logger


def _configure_httpbench_logging() -> None:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if root.handlers:
        return
    level_name = (os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    root.setLevel(level)
    fmt_env = (os.environ.get(LOG_FORMAT_ENV) or "text").lower()
    handler = logging.StreamHandler(sys.stderr)
    if fmt_env == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
        )
    root.addHandler(handler)


# Attributes every LogRecord carries; anything else arrived through ``extra=``
_STANDARD_RECORD_FIELDS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class _JsonFormatter(logging.Formatter):
    """One JSON object per line, for log shippers.

    Fields passed with ``extra=`` (e.g. the resolved plan) are emitted as
    top-level keys next to the message.
    """

    def format(self, record: logging.LogRecord) -> str:
        import json
        obj: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt or "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_FIELDS and key not in obj:
                obj[key] = value
        if record.exc_info:
            obj["exception"] = self.formatException(record.exc_info)
        return json.dumps(obj, ensure_ascii=False, default=str)
