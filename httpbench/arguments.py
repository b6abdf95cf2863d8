"""Command-line argument model for httpbench.

Declares every accepted knob, its type and default, and the structural
constraints that do not need any file contents (URL source exclusivity,
method spelling, value bounds). Violations raise HttpBenchUsageError; this
module never exits the process except for --help and --version.
"""

from __future__ import annotations

import argparse
from typing import NoReturn, Sequence

from . import __version__
from .config import FileDefaults, load_defaults
from .exceptions import HttpBenchUsageError
from .logging_config import get_logger
from .models import DelayDistribution, HttpMethod, RawArguments, RequestOrder

logger = get_logger("arguments")

# Built-in defaults, used when neither the command line nor a defaults file sets a value
DEFAULT_CONCURRENCY = 10
DEFAULT_REQUESTS = 100
DEFAULT_ORDER = RequestOrder.RANDOM
DEFAULT_DELAY_MS = 0
DEFAULT_DELAY_DISTRIBUTION = DelayDistribution.CONSTANT
DEFAULT_HTTP_METHOD = HttpMethod.GET
# Workers are counted in 16 bits by the dispatch engine
MAX_CONCURRENCY = 65_535


class _UsageErrorParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of printing usage and exiting."""

    def error(self, message: str) -> NoReturn:
        raise HttpBenchUsageError(message, usage=self.format_usage())


def _http_method(value: str) -> HttpMethod:
    try:
        return HttpMethod.parse(value)
    except ValueError:
        choices = ", ".join(m.value for m in HttpMethod)
        raise argparse.ArgumentTypeError(f"unsupported HTTP method {value!r} (choose from {choices})") from None


def build_parser() -> argparse.ArgumentParser:
    parser = _UsageErrorParser(
        prog="httpbench",
        description="HTTP/S load testing tool. Builds the validated execution plan "
        "(workers, request count, ordering, delays, method, URLs and payloads).",
    )
    parser.add_argument(
        "-c",
        type=int,
        default=None,
        dest="concurrency",
        metavar="concurrency",
        help=f"number of workers generating load (default: {DEFAULT_CONCURRENCY})",
    )
    parser.add_argument(
        "-n",
        type=int,
        default=None,
        dest="requests",
        metavar="requests",
        help=f"number of requests to execute (default: {DEFAULT_REQUESTS})",
    )
    parser.add_argument(
        "-o",
        choices=["r", "s"],
        default=None,
        dest="order",
        help="order in which to request URLs: r=random, s=sequential (default: r)",
    )
    # Time delay between request *dispatch*
    parser.add_argument(
        "-t",
        "--delay-time",
        type=int,
        default=None,
        dest="delay_ms",
        metavar="ms",
        help="time between requests (NB: includes response time; default: 0)",
    )
    parser.add_argument(
        "-d",
        "--delay-dist",
        choices=[d.value for d in DelayDistribution],
        default=None,
        dest="delay_dist",
        metavar="distribution",
        help="distribution of delay times, requires -t: c=constant, u=uniform, ne=negative exponential (default: c)",
    )
    # URLs come from a file or from the command line, never both
    parser.add_argument(
        "-f",
        "--file",
        default=None,
        dest="url_file",
        metavar="file",
        help="file containing URLs to request, one per line",
    )
    parser.add_argument(
        "urls",
        nargs="*",
        metavar="URL",
        help="URLs to request (instead of -f)",
    )
    parser.add_argument(
        "-p",
        "--prefix",
        default=None,
        dest="url_prefix",
        metavar="urlprefix",
        help="prefix to add to URLs that have no scheme or host (e.g. when the URL file "
        "holds just paths and query strings taken from a load-balancer log)",
    )
    parser.add_argument(
        "-s",
        "--reportslow",
        type=float,
        default=None,
        dest="slow_percentile",
        metavar="percentile",
        help="report requests slower than this latency percentile, in (0, 1]",
    )
    parser.add_argument(
        "-m",
        "--method",
        type=_http_method,
        default=None,
        dest="http_method",
        metavar="http_method",
        help="HTTP method: GET, POST or PUT (default: GET). With POST or PUT only the first URL "
        "is used for all requests, and --payloads is required.",
    )
    parser.add_argument(
        "--payloads",
        default=None,
        dest="payloads_file",
        metavar="path",
        help="payload file for POST and PUT; each request takes one line as its body",
    )
    parser.add_argument(
        "--config",
        default=None,
        dest="config_file",
        metavar="PATH",
        help="YAML file with default values (flags on the command line take precedence)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="print the resolved plan as JSON instead of a table",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"httpbench {__version__}",
    )
    return parser


def raw_arguments_from(args: argparse.Namespace, usage: str = "") -> RawArguments:
    """Turn a parsed Namespace into validated RawArguments.

    The URL source check runs before the defaults file is opened, so an illegal
    flag combination is reported without touching the filesystem.

    Raises:
        HttpBenchUsageError: On an illegal flag combination, a bad defaults file
            or out of range values
    """
    urls = tuple(args.urls or ())
    check_url_source(args.url_file, urls, usage=usage)

    file_defaults = load_defaults(args.config_file) if args.config_file else FileDefaults()

    order = RequestOrder.from_flag(args.order) if args.order is not None else file_defaults.order
    delay_distribution = (
        DelayDistribution(args.delay_dist) if args.delay_dist is not None else file_defaults.delay_distribution
    )
    raw = RawArguments(
        concurrency=_first_set(args.concurrency, file_defaults.concurrency, DEFAULT_CONCURRENCY),
        requests=_first_set(args.requests, file_defaults.requests, DEFAULT_REQUESTS),
        order=_first_set(order, DEFAULT_ORDER),
        delay_ms=_first_set(args.delay_ms, file_defaults.delay_ms, DEFAULT_DELAY_MS),
        delay_distribution=_first_set(delay_distribution, DEFAULT_DELAY_DISTRIBUTION),
        http_method=_first_set(args.http_method, file_defaults.http_method, DEFAULT_HTTP_METHOD),
        url_file=args.url_file,
        urls=urls,
        url_prefix=_first_set(args.url_prefix, file_defaults.url_prefix),
        payloads_file=_first_set(args.payloads_file, file_defaults.payloads_file),
        slow_percentile=_first_set(args.slow_percentile, file_defaults.slow_percentile),
    )
    validate_arguments(raw, usage=usage)
    return raw


def parse_arguments(argv: Sequence[str] | None = None) -> RawArguments:
    """Parse and validate argv into RawArguments."""
    parser = build_parser()
    args = parser.parse_args(argv)
    return raw_arguments_from(args, usage=parser.format_usage())


def check_url_source(url_file: str | None, urls: Sequence[str], usage: str = "") -> None:
    """Exactly one URL source: a non-empty -f path or inline URLs."""
    if url_file is not None:
        if not url_file:
            raise HttpBenchUsageError("argument -f/--file: expected a non-empty path", usage=usage)
        if urls:
            raise HttpBenchUsageError("argument -f/--file: not allowed with URL arguments", usage=usage)
    elif not urls:
        raise HttpBenchUsageError("one of the arguments -f/--file or URL is required", usage=usage)


def validate_arguments(raw: RawArguments, usage: str = "") -> None:
    """Validate RawArguments bounds. Raises HttpBenchUsageError if invalid."""
    check_url_source(raw.url_file, raw.urls, usage=usage)
    if raw.concurrency < 1:
        raise HttpBenchUsageError("concurrency must be >= 1", usage=usage)
    if raw.concurrency > MAX_CONCURRENCY:
        raise HttpBenchUsageError(f"concurrency must be <= {MAX_CONCURRENCY}", usage=usage)
    if raw.requests < 1:
        raise HttpBenchUsageError("requests must be >= 1", usage=usage)
    if raw.delay_ms < 0:
        raise HttpBenchUsageError("delay must be >= 0", usage=usage)
    if raw.slow_percentile is not None and not 0 < raw.slow_percentile <= 1:
        raise HttpBenchUsageError("reportslow percentile must be in (0, 1]", usage=usage)
    if raw.delay_distribution != DelayDistribution.CONSTANT and raw.delay_ms == 0:
        logger.warning(
            "Delay distribution '%s' has no effect without a delay (-t)", raw.delay_distribution.value
        )


def _first_set(*values):
    """Return the first value that is not None."""
    for v in values:
        if v is not None:
            return v
    return None
