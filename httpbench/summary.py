"""Rendering of a resolved plan: Rich table for people, JSON for scripts."""

from __future__ import annotations

from typing import Any

import orjson
from rich.console import Console
from rich.table import Table

from .models import LoadTestContext

# URLs listed in the table before the rest is summarized as a count
TABLE_URL_PREVIEW = 5


def plan_to_dict(context: LoadTestContext) -> dict[str, Any]:
    """Plain-dict view of the context, using flag spellings for enum values."""
    plan = context.plan
    return {
        "plan": {
            "concurrency": plan.concurrency,
            "requests": plan.requests,
            "order": plan.order.name.lower(),
            "delay_ms": plan.delay_ms,
            "delay_distribution": plan.delay_distribution.name.lower(),
            "slow_percentile": plan.slow_percentile,
            "http_method": plan.http_method.value,
        },
        "urls": list(context.targets.urls),
        "payloads": list(context.targets.payloads),
    }


def render_plan_json(context: LoadTestContext) -> str:
    return orjson.dumps(plan_to_dict(context), option=orjson.OPT_INDENT_2).decode("utf-8")


def build_plan_table(context: LoadTestContext, url_preview: int = TABLE_URL_PREVIEW) -> Table:
    """Build a two-column Rich table describing the plan."""
    plan = context.plan
    targets = context.targets
    table = Table(title="httpbench plan", show_header=False)
    table.add_column(style="cyan")
    table.add_column(style="green")

    table.add_row("Workers", str(plan.concurrency))
    table.add_row("Requests", str(plan.requests))
    table.add_row("Order", plan.order.name.lower())
    table.add_row("HTTP method", plan.http_method.value)
    if plan.has_delay:
        table.add_row("Delay (ms)", f"{plan.delay_ms} ({plan.delay_distribution.name.lower().replace('_', ' ')})")
    else:
        table.add_row("Delay (ms)", "0")
    table.add_row("Slow report", f"p{plan.slow_percentile * 100:g}" if plan.slow_percentile is not None else "-")
    table.add_row("URLs", str(len(targets.urls)))
    for url in targets.urls[:url_preview]:
        table.add_row("", url)
    if len(targets.urls) > url_preview:
        table.add_row("", f"... and {len(targets.urls) - url_preview} more")
    if plan.http_method.requires_payloads:
        table.add_row("Payloads", str(len(targets.payloads)))
    return table


def print_plan(context: LoadTestContext, console: Console | None = None) -> None:
    (console or Console()).print(build_plan_table(context))
