"""Plan resolution: raw argument values in, immutable LoadTestContext out.

Single linear pass, run once before any request is dispatched:
1. Load URL candidates (file or inline)
2. Apply the URL prefix, if any
3. Load payloads, if a payload file was given
4. Check that POST and PUT have payloads
5. Assemble ExecutionPlan and ResolvedTargets

Every failure is raised as an HttpBenchError subclass; nothing here exits
the process.
"""

from __future__ import annotations

from typing import Sequence

from .exceptions import HttpBenchPlanError
from .logging_config import get_logger
from .models import ExecutionPlan, HttpMethod, LoadTestContext, RawArguments, ResolvedTargets
from .prefix import apply_prefix
from .sources import load_payloads, load_urls

logger = get_logger("resolver")


def check_payloads(http_method: HttpMethod, payloads: Sequence[str]) -> None:
    """Raise HttpBenchPlanError when the method needs payloads and there are none."""
    if http_method.requires_payloads and not payloads:
        raise HttpBenchPlanError(
            "Payloads must be supplied when http_method is set to POST or PUT",
            context={"http_method": http_method.value}
        )


def build_plan(raw: RawArguments) -> ExecutionPlan:
    """Copy the scalar fields into an ExecutionPlan, unchanged."""
    return ExecutionPlan(
        concurrency=raw.concurrency,
        requests=raw.requests,
        order=raw.order,
        delay_ms=raw.delay_ms,
        delay_distribution=raw.delay_distribution,
        http_method=raw.http_method,
        slow_percentile=raw.slow_percentile,
    )


def resolve_targets(raw: RawArguments) -> ResolvedTargets:
    """Load and prefix the URL set, load payloads and check the payload invariant.

    Raises:
        HttpBenchResourceError: If the URL or payload file cannot be loaded
        HttpBenchUsageError: If the URL prefix is not an absolute URL
        HttpBenchPlanError: If POST/PUT has no payloads
    """
    urls = load_urls(raw.url_file, raw.urls)
    urls = apply_prefix(urls, raw.url_prefix)
    payloads = load_payloads(raw.payloads_file)
    check_payloads(raw.http_method, payloads)
    if payloads and not raw.http_method.requires_payloads:
        logger.debug("Ignoring %d payloads for %s requests", len(payloads), raw.http_method.value)
    return ResolvedTargets(urls=tuple(urls), payloads=tuple(payloads))


def resolve_plan(raw: RawArguments) -> LoadTestContext:
    """Build the full LoadTestContext handed to the dispatch engine."""
    targets = resolve_targets(raw)
    plan = build_plan(raw)
    logger.debug(
        "Resolved plan: concurrency=%s, requests=%s, method=%s, urls=%d, payloads=%d",
        plan.concurrency, plan.requests, plan.http_method.value, len(targets.urls), len(targets.payloads),
        extra={
            "plan": {
                "concurrency": plan.concurrency,
                "requests": plan.requests,
                "order": plan.order.value,
                "delay_ms": plan.delay_ms,
                "delay_distribution": plan.delay_distribution.value,
                "http_method": plan.http_method.value,
                "slow_percentile": plan.slow_percentile,
            },
            "url_count": len(targets.urls),
            "payload_count": len(targets.payloads),
        },
    )
    return LoadTestContext(plan=plan, targets=targets)
