"""Unit tests for plan resolution."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

import pytest

from httpbench.exceptions import HttpBenchPlanError, HttpBenchResourceError, HttpBenchUsageError
from httpbench.models import (
    DelayDistribution,
    ExecutionPlan,
    HttpMethod,
    LoadTestContext,
    RawArguments,
    RequestOrder,
)
from httpbench.resolver import build_plan, check_payloads, resolve_plan, resolve_targets

EXPECTED = "http://localhost:8070/abc123?def=456"


def _raw(**overrides) -> RawArguments:
    values = dict(
        concurrency=10,
        requests=100,
        order=RequestOrder.RANDOM,
        delay_ms=0,
        delay_distribution=DelayDistribution.CONSTANT,
        http_method=HttpMethod.GET,
        urls=("http://localhost:8070/",),
    )
    values.update(overrides)
    return RawArguments(**values)


def test_resolve_plan_copies_scalars_unchanged() -> None:
    raw = _raw(
        concurrency=4,
        requests=9,
        order=RequestOrder.SEQUENTIAL,
        delay_ms=15,
        delay_distribution=DelayDistribution.NEGATIVE_EXPONENTIAL,
        slow_percentile=0.9,
    )
    ctx = resolve_plan(raw)
    assert isinstance(ctx, LoadTestContext)
    assert ctx.plan == ExecutionPlan(
        concurrency=4,
        requests=9,
        order=RequestOrder.SEQUENTIAL,
        delay_ms=15,
        delay_distribution=DelayDistribution.NEGATIVE_EXPONENTIAL,
        http_method=HttpMethod.GET,
        slow_percentile=0.9,
    )
    assert ctx.plan.has_delay


def test_resolve_plan_from_file_with_prefix(url_file: Path) -> None:
    ctx = resolve_plan(_raw(urls=(), url_file=str(url_file), url_prefix="http://localhost:8070/"))
    assert ctx.targets.urls == (EXPECTED, EXPECTED, EXPECTED)
    assert ctx.targets.payloads == ()


def test_resolve_plan_inline_with_prefix() -> None:
    ctx = resolve_plan(_raw(
        urls=(EXPECTED, "abc123?def=456", "/abc123?def=456"),
        url_prefix="http://localhost:8070/",
    ))
    assert ctx.targets.urls == (EXPECTED, EXPECTED, EXPECTED)


def test_resolve_plan_without_prefix_keeps_urls(url_file: Path) -> None:
    ctx = resolve_plan(_raw(urls=(), url_file=str(url_file)))
    assert ctx.targets.urls == (EXPECTED, "abc123?def=456", "/abc123?def=456")


def test_resolve_plan_keeps_unresolvable_urls() -> None:
    ctx = resolve_plan(_raw(urls=("/ok", "/bad%zz"), url_prefix="http://localhost:8070/"))
    assert ctx.targets.urls == ("http://localhost:8070/ok", "/bad%zz")


def test_get_without_payloads_passes() -> None:
    ctx = resolve_plan(_raw(http_method=HttpMethod.GET))
    assert ctx.targets.payloads == ()


def test_get_with_payload_file_loads_inert_payloads(payloads_file: Path) -> None:
    ctx = resolve_plan(_raw(payloads_file=str(payloads_file)))
    assert len(ctx.targets.payloads) == 3


@pytest.mark.parametrize("method", [HttpMethod.POST, HttpMethod.PUT])
def test_post_put_without_payloads_fails(method: HttpMethod) -> None:
    with pytest.raises(HttpBenchPlanError, match="Payloads must be supplied"):
        resolve_plan(_raw(http_method=method))


@pytest.mark.parametrize("method", [HttpMethod.POST, HttpMethod.PUT])
def test_post_put_with_empty_payload_file_fails(method: HttpMethod, empty_file: Path) -> None:
    with pytest.raises(HttpBenchPlanError):
        resolve_plan(_raw(http_method=method, payloads_file=str(empty_file)))


@pytest.mark.parametrize("method", [HttpMethod.POST, HttpMethod.PUT])
def test_post_put_with_payloads_succeeds(method: HttpMethod, payloads_file: Path) -> None:
    ctx = resolve_plan(_raw(http_method=method, payloads_file=str(payloads_file)))
    assert ctx.plan.http_method == method
    assert ctx.targets.payloads == ('{"id": 1}', '{"id": 2}', '{"id": 3}')


def test_missing_url_file_is_resource_error() -> None:
    with pytest.raises(HttpBenchResourceError):
        resolve_plan(_raw(urls=(), url_file="/nonexistent/urls.txt"))


def test_missing_payload_file_is_resource_error() -> None:
    with pytest.raises(HttpBenchResourceError):
        resolve_plan(_raw(payloads_file="/nonexistent/payloads.txt"))


def test_invalid_prefix_is_usage_error() -> None:
    with pytest.raises(HttpBenchUsageError, match="Invalid URL prefix"):
        resolve_targets(_raw(urls=("/a",), url_prefix="/relative/"))


def test_check_payloads() -> None:
    check_payloads(HttpMethod.GET, [])
    check_payloads(HttpMethod.POST, ["x"])
    with pytest.raises(HttpBenchPlanError) as exc:
        check_payloads(HttpMethod.PUT, [])
    assert exc.value.context == {"http_method": "PUT"}


def test_plan_is_immutable() -> None:
    plan = build_plan(_raw())
    with pytest.raises(dataclasses.FrozenInstanceError):
        plan.concurrency = 99  # type: ignore[misc]
    ctx = resolve_plan(_raw())
    assert isinstance(ctx.targets.urls, tuple)
    with pytest.raises(dataclasses.FrozenInstanceError):
        ctx.targets.urls = ()  # type: ignore[misc]


def test_resolve_plan_logs_plan_fields(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="httpbench"):
        resolve_plan(_raw(concurrency=4, order=RequestOrder.SEQUENTIAL, urls=("/a", "/b"),
                          url_prefix="http://localhost:8070/"))
    [record] = [r for r in caplog.records if r.getMessage().startswith("Resolved plan")]
    assert record.plan["concurrency"] == 4
    assert record.plan["order"] == "s"
    assert record.plan["http_method"] == "GET"
    assert record.url_count == 2
    assert record.payload_count == 0
