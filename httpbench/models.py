"""Data models for httpbench plan resolution.

Everything here is built once at startup and handed to the dispatch engine
by value:
- frozen dataclasses so nothing downstream can mutate the plan
- tuples for the URL and payload sequences
- str Enums so flag spellings and plan values convert in one place
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class RequestOrder(str, Enum):
    """Iteration strategy over the URL set."""

    SEQUENTIAL = "s"
    RANDOM = "r"

    @classmethod
    def from_flag(cls, value: str | None) -> "RequestOrder":
        """``s`` is sequential; anything else (including ``r``) is random."""
        if value is not None and value.strip().lower() == cls.SEQUENTIAL.value:
            return cls.SEQUENTIAL
        return cls.RANDOM


class DelayDistribution(str, Enum):
    """Shape applied to delay_ms to produce per-request delay."""

    CONSTANT = "c"
    UNIFORM = "u"
    NEGATIVE_EXPONENTIAL = "ne"


class HttpMethod(str, Enum):
    """Supported HTTP methods. Parsing is case-insensitive."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"

    @classmethod
    def parse(cls, value: str) -> "HttpMethod":
        """Return the method for ``value`` (any case). Raises ValueError when unsupported."""
        return cls(value.strip().upper())

    @property
    def requires_payloads(self) -> bool:
        return self in (HttpMethod.POST, HttpMethod.PUT)


@dataclass(frozen=True, slots=True)
class RawArguments:
    """Typed values produced by the argument model, before any file is read."""

    concurrency: int
    requests: int
    order: RequestOrder
    delay_ms: int
    delay_distribution: DelayDistribution
    http_method: HttpMethod
    url_file: str | None = None
    urls: tuple[str, ...] = ()
    url_prefix: str | None = None
    payloads_file: str | None = None
    slow_percentile: float | None = None


@dataclass(frozen=True, slots=True)
class ExecutionPlan:
    """Fully validated parameters governing a load-test run. Immutable."""

    concurrency: int
    requests: int
    order: RequestOrder
    delay_ms: int
    delay_distribution: DelayDistribution
    http_method: HttpMethod
    slow_percentile: float | None = None

    @property
    def has_delay(self) -> bool:
        """True when delay_distribution has an observable effect."""
        return self.delay_ms > 0


@dataclass(frozen=True, slots=True)
class ResolvedTargets:
    """Final URL and payload sequences handed to the dispatch engine."""

    urls: tuple[str, ...]
    payloads: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class LoadTestContext:
    """Plan plus targets; the single value the dispatch engine receives."""

    plan: ExecutionPlan
    targets: ResolvedTargets


# --- Per-URL prefix resolution outcome ---

@dataclass(frozen=True, slots=True)
class Absolute:
    """Candidate already had a scheme; kept as is."""

    url: str

    @property
    def resolved(self) -> str:
        return self.url


@dataclass(frozen=True, slots=True)
class Joined:
    """Relative candidate joined against the prefix."""

    original: str
    url: str

    @property
    def resolved(self) -> str:
        return self.url


@dataclass(frozen=True, slots=True)
class Unresolvable:
    """Malformed candidate; kept verbatim and reported with reason."""

    url: str
    reason: str

    @property
    def resolved(self) -> str:
        return self.url


UrlResolution = Union[Absolute, Joined, Unresolvable]
