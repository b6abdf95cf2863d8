"""CLI entry point for httpbench.

Parses the command line, resolves the execution plan and hands it to the
dispatch engine. Every configuration error surfaces here as a typed
exception; this is the only place that turns one into an exit code.
"""

from __future__ import annotations

import sys
from typing import Callable, Sequence

from .arguments import build_parser, raw_arguments_from
from .exceptions import HttpBenchError, HttpBenchUsageError
from .logging_config import get_logger
from .models import LoadTestContext
from .resolver import resolve_plan
from .summary import print_plan, render_plan_json

logger = get_logger("cli")

Dispatch = Callable[[LoadTestContext], object]


def handle_error(e: BaseException) -> int:
    if isinstance(e, HttpBenchUsageError):
        if e.usage:
            print(e.usage.rstrip(), file=sys.stderr)
        print(f"Error: {e.message}", file=sys.stderr)
        return e.exit_code
    if isinstance(e, HttpBenchError):
        print(f"Error: {e.message}", file=sys.stderr)
        return e.exit_code
    logger.exception("Unexpected error")
    print("Error: An unexpected error occurred. Check logs for details.", file=sys.stderr)
    return 1


def main(argv: Sequence[str] | None = None, dispatch: Dispatch | None = None) -> int:
    """Run httpbench. Returns the process exit code.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])
        dispatch: Receives the resolved LoadTestContext. When omitted the plan
            is printed (table, or JSON with --json).
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        raw = raw_arguments_from(args, usage=parser.format_usage())
        context = resolve_plan(raw)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
    except HttpBenchError as e:
        return handle_error(e)
    except Exception as e:
        return handle_error(e)

    try:
        if dispatch is not None:
            dispatch(context)
        elif args.json_output:
            sys.stdout.write(render_plan_json(context) + "\n")
        else:
            print_plan(context)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
    except HttpBenchError as e:
        return handle_error(e)
    except Exception as e:
        return handle_error(e)
    return 0


if __name__ == "__main__":
    sys.exit(main())
