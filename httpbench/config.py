"""YAML defaults loader for httpbench runs.

A defaults file holds values that would otherwise be typed on every command
line. Explicit flags still win; built-in defaults apply to anything neither
source sets.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .exceptions import HttpBenchUsageError
from .logging_config import get_logger
from .models import DelayDistribution, HttpMethod, RequestOrder

logger = get_logger("config")

KNOWN_KEYS = frozenset(
    {"concurrency", "requests", "order", "delay_ms", "delay_dist", "prefix", "method", "payloads", "report_slow"}
)


@dataclass(slots=True)
class FileDefaults:
    """Values read from a defaults file. None means "not set in the file"."""

    concurrency: int | None = None
    requests: int | None = None
    order: RequestOrder | None = None
    delay_ms: int | None = None
    delay_distribution: DelayDistribution | None = None
    url_prefix: str | None = None
    http_method: HttpMethod | None = None
    payloads_file: str | None = None
    slow_percentile: float | None = None


def load_defaults(path: str | Path) -> FileDefaults:
    """Load run defaults from a YAML file.

    Args:
        path: Path to YAML defaults file

    Returns:
        FileDefaults with only the keys present in the file set

    Raises:
        HttpBenchUsageError: If file not found, invalid YAML, or a value is invalid
    """
    p = Path(path)
    if not p.exists():
        raise HttpBenchUsageError(
            f"Config file not found: {path}",
            context={"path": str(path)}
        )

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        logger.exception("Failed to parse YAML config file")
        raise HttpBenchUsageError(
            f"Invalid YAML syntax in config file: {e}",
            context={"path": str(path)},
            original_error=e
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        logger.exception("Failed to read config file")
        raise HttpBenchUsageError(
            f"Cannot read config file: {e}",
            context={"path": str(path)},
            original_error=e
        ) from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise HttpBenchUsageError(
            "Config must be a YAML object/dictionary",
            context={"path": str(path), "actual_type": type(raw).__name__}
        )

    unknown = sorted(str(k) for k in raw if k not in KNOWN_KEYS)
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", path, ", ".join(unknown))

    order = None
    if raw.get("order") is not None:
        order_str = str(raw["order"]).strip().lower()
        order = RequestOrder.from_flag(order_str)
        if order_str not in (RequestOrder.SEQUENTIAL.value, RequestOrder.RANDOM.value):
            logger.debug("Unknown order '%s', defaulting to random", order_str)

    try:
        defaults = FileDefaults(
            concurrency=_optional_int(raw, "concurrency"),
            requests=_optional_int(raw, "requests"),
            order=order,
            delay_ms=_optional_int(raw, "delay_ms"),
            delay_distribution=(
                DelayDistribution(str(raw["delay_dist"]).strip().lower())
                if raw.get("delay_dist") is not None else None
            ),
            url_prefix=_optional_str(raw, "prefix"),
            http_method=HttpMethod.parse(str(raw["method"])) if raw.get("method") is not None else None,
            payloads_file=_optional_path(raw, "payloads", p.parent),
            slow_percentile=_optional_float(raw, "report_slow"),
        )
    except (TypeError, ValueError) as e:
        raise HttpBenchUsageError(
            f"Invalid config value: {e}",
            context={"path": str(path)},
            original_error=e
        ) from e

    logger.debug("Loaded defaults from %s: %s", path, ", ".join(sorted(str(k) for k in raw if k in KNOWN_KEYS)))
    return defaults


def _optional_int(data: dict[str, Any], key: str) -> int | None:
    v = data.get(key)
    if v is None:
        return None
    if isinstance(v, bool) or (isinstance(v, float) and not v.is_integer()):
        raise ValueError(f"{key} must be an integer, got {v!r}")
    return int(v)


def _optional_float(data: dict[str, Any], key: str) -> float | None:
    v = data.get(key)
    if v is None:
        return None
    return float(v)


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    v = data.get(key)
    if v is None:
        return None
    return str(v)


def _optional_path(data: dict[str, Any], key: str, base_dir: Path) -> str | None:
    """Paths in a defaults file are relative to the file itself."""
    v = _optional_str(data, key)
    if v is None:
        return None
    candidate = Path(v).expanduser()
    if not candidate.is_absolute():
        candidate = base_dir / candidate
    return str(candidate)
