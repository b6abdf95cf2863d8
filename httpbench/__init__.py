"""
httpbench - HTTP/S load testing tool.

Resolves command-line flags, URL files, URL prefixes and payload files into
one validated, immutable execution plan for the request dispatch engine.
"""

from .exceptions import HttpBenchError, HttpBenchPlanError, HttpBenchResourceError, HttpBenchUsageError

__all__ = [
    "__version__",
    "HttpBenchError",
    "HttpBenchPlanError",
    "HttpBenchResourceError",
    "HttpBenchUsageError",
]

__version__ = "0.1.0"
