"""Custom exceptions for httpbench plan resolution.

All httpbench-specific exceptions inherit from HttpBenchError so the CLI can
decide exit behavior in one place. Each exception preserves the original cause
chain for debugging.
"""

from __future__ import annotations

from typing import Any


class HttpBenchError(Exception):
    """Base exception for all httpbench errors.

    Attributes:
        message: Human-readable error description
        context: Optional dictionary with additional debugging context
        original_error: Original exception that caused this error (if any)
    """

    exit_code = 1

    def __init__(
        self,
        message: str,
        *args: object,
        context: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, *args)
        self.message = message
        self.context = context or {}
        self.original_error = original_error

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        base = self.message
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            base = f"{base} [{ctx_str}]"
        if self.original_error:
            base = f"{base} (caused by: {type(self.original_error).__name__}: {self.original_error})"
        return base


class HttpBenchUsageError(HttpBenchError):
    """Raised when the command line or defaults file is invalid.

    Common causes:
    - Both a URL file and inline URLs given, or neither
    - Unknown HTTP method
    - Out of range values (e.g. concurrency < 1)
    - URL prefix that is malformed or has no scheme
    - Unreadable or malformed YAML defaults file
    """

    exit_code = 2

    def __init__(self, message: str, *args: object, usage: str = "", **kwargs: Any) -> None:
        super().__init__(message, *args, **kwargs)
        self.usage = usage


class HttpBenchResourceError(HttpBenchError):
    """Raised when the URL file or payload file cannot be loaded.

    Common causes:
    - File not found or not readable
    - File is not valid UTF-8
    - URL file holds no URLs
    """


class HttpBenchPlanError(HttpBenchError):
    """Raised when the resolved plan violates an invariant.

    Common causes:
    - POST or PUT requested without any payloads
    """
