"""Unit tests for logging_config (get_logger, JSON formatter)."""

from __future__ import annotations

import json
import logging
import os

from httpbench.logging_config import LOG_LEVEL_ENV, _JsonFormatter, get_logger


def test_get_logger_returns_logger() -> None:
    logger = get_logger("test")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "httpbench.test"


def test_get_logger_root_name() -> None:
    logger = get_logger("httpbench")
    assert logger.name == "httpbench"


def test_get_logger_configures_root_handler() -> None:
    get_logger("test_handler")
    assert logging.getLogger("httpbench").handlers


def test_get_logger_log_level_respected() -> None:
    prev = os.environ.pop(LOG_LEVEL_ENV, None)
    try:
        os.environ[LOG_LEVEL_ENV] = "DEBUG"
        logger = get_logger("test_level")
        # Root may already be configured by an earlier import
        assert logging.getLogger("httpbench").level != logging.NOTSET
        assert logger.level >= 0
    finally:
        if prev is not None:
            os.environ[LOG_LEVEL_ENV] = prev
        else:
            os.environ.pop(LOG_LEVEL_ENV, None)


def test_json_formatter() -> None:
    record = logging.LogRecord(
        name="httpbench.prefix",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="URL %s is invalid: %s",
        args=("/bad%zz", "invalid percent-encoding at position 4"),
        exc_info=None,
    )
    out = json.loads(_JsonFormatter().format(record))
    assert out["level"] == "WARNING"
    assert out["logger"] == "httpbench.prefix"
    assert out["message"] == "URL /bad%zz is invalid: invalid percent-encoding at position 4"
    assert "timestamp" in out


def test_json_formatter_includes_extra_fields() -> None:
    record = logging.LogRecord(
        name="httpbench.resolver",
        level=logging.DEBUG,
        pathname=__file__,
        lineno=1,
        msg="Resolved plan",
        args=(),
        exc_info=None,
    )
    record.plan = {"concurrency": 4, "order": "sequential"}
    record.url_count = 2
    out = json.loads(_JsonFormatter().format(record))
    assert out["plan"] == {"concurrency": 4, "order": "sequential"}
    assert out["url_count"] == 2
    assert "lineno" not in out
    assert "args" not in out
