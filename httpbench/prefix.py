"""URL prefix resolution.

Each candidate URL gets exactly one outcome:

- Absolute: it has a scheme and parses cleanly, so it is kept unchanged even
  when its host differs from the prefix.
- Joined: it has no scheme (a relative reference), so it is resolved against
  the prefix with RFC 3986 reference resolution, whatever the prefix scheme.
- Unresolvable: it is malformed, or joining it produced a malformed URL. It is
  kept verbatim and a warning is logged; it is never dropped.

The mapping is pure and order-preserving. Resolving an already resolved list
again against the same prefix returns it unchanged.
"""

from __future__ import annotations

import re
from typing import Iterable, Sequence
from urllib.parse import SplitResult, urlsplit

from .exceptions import HttpBenchUsageError
from .logging_config import get_logger
from .models import Absolute, Joined, Unresolvable, UrlResolution

logger = get_logger("prefix")

# Schemes whose URLs must carry a host
HIERARCHICAL_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})

_ILLEGAL_CHAR = re.compile(r"[\x00-\x20\x7f]")
_BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def malformed_reason(url: str) -> str | None:
    """Return why ``url`` cannot be parsed, or None when it is well formed.

    A missing scheme is not a parse failure here; relative references are
    valid input that only needs a base.
    """
    m = _ILLEGAL_CHAR.search(url)
    if m:
        return f"illegal character {m.group()!r} at position {m.start()}"
    m = _BAD_PERCENT_ESCAPE.search(url)
    if m:
        return f"invalid percent-encoding at position {m.start()}"
    try:
        parts = urlsplit(url)
    except ValueError as e:
        return str(e)
    if parts.scheme:
        return _absolute_reason(parts)
    return None


def _absolute_reason(parts: SplitResult) -> str | None:
    try:
        parts.port
    except ValueError as e:
        return str(e)
    if parts.scheme in HIERARCHICAL_SCHEMES and not parts.hostname:
        return "empty host"
    return None


def is_absolute(url: str) -> bool:
    """True when ``url`` has a scheme. Assumes malformed_reason(url) is None."""
    return bool(urlsplit(url).scheme)


def parse_base(prefix: str) -> str:
    """Validate the URL prefix once, before any candidate is resolved.

    Any well-formed URL with a scheme is accepted, including ``file:///srv/``
    and custom schemes.

    Raises:
        HttpBenchUsageError: If the prefix is malformed or has no scheme
    """
    reason = malformed_reason(prefix)
    if reason is None and not is_absolute(prefix):
        reason = "prefix must be an absolute URL with a scheme"
    if reason is not None:
        raise HttpBenchUsageError(
            f"Invalid URL prefix {prefix!r}: {reason}",
            context={"prefix": prefix}
        )
    return prefix


def remove_dot_segments(path: str) -> str:
    """RFC 3986 section 5.2.4."""
    output: list[str] = []
    while path:
        if path.startswith("../"):
            path = path[3:]
        elif path.startswith("./"):
            path = path[2:]
        elif path.startswith("/./"):
            path = path[2:]
        elif path == "/.":
            path = "/"
        elif path.startswith("/../") or path == "/..":
            path = "/" + path[4:]
            if output:
                output.pop()
        elif path in (".", ".."):
            path = ""
        else:
            end = path.find("/", 1 if path.startswith("/") else 0)
            if end == -1:
                end = len(path)
            output.append(path[:end])
            path = path[end:]
    return "".join(output)


def _has_authority(url: str, scheme: str = "") -> bool:
    return url[len(scheme) + 1 if scheme else 0:].startswith("//")


def _has_query(url: str) -> bool:
    return "?" in url.split("#", 1)[0]


def join_reference(base: str, reference: str) -> str:
    """Resolve a relative ``reference`` against an absolute ``base`` (RFC 3986 section 5.2.2).

    Unlike urljoin this does not depend on the base scheme being registered
    as hierarchical, so ``file:`` and custom schemes join the same way as http.
    """
    b = urlsplit(base)
    r = urlsplit(reference)
    base_authority = _has_authority(base, b.scheme)

    if _has_authority(reference):
        authority, has_authority = r.netloc, True
        path = remove_dot_segments(r.path)
        query, has_query = r.query, _has_query(reference)
    else:
        authority, has_authority = b.netloc, base_authority
        if not r.path:
            path = b.path
            if _has_query(reference):
                query, has_query = r.query, True
            else:
                query, has_query = b.query, _has_query(base)
        else:
            if r.path.startswith("/"):
                path = remove_dot_segments(r.path)
            elif base_authority and not b.path:
                path = remove_dot_segments("/" + r.path)
            else:
                path = remove_dot_segments(b.path[: b.path.rfind("/") + 1] + r.path)
            query, has_query = r.query, _has_query(reference)

    joined = f"{b.scheme}:"
    if has_authority:
        joined += f"//{authority}"
    joined += path
    if has_query:
        joined += f"?{query}"
    if "#" in reference:
        joined += f"#{r.fragment}"
    return joined


def resolve_url(candidate: str, base: str) -> UrlResolution:
    """Classify a single candidate against an already validated base."""
    reason = malformed_reason(candidate)
    if reason is not None:
        return Unresolvable(candidate, reason)
    if is_absolute(candidate):
        return Absolute(candidate)

    try:
        joined = join_reference(base, candidate)
    except ValueError as e:
        return Unresolvable(candidate, str(e))
    reason = malformed_reason(joined)
    if reason is None and not is_absolute(joined):
        reason = "joining with the prefix did not produce an absolute URL"
    if reason is not None:
        return Unresolvable(candidate, reason)
    return Joined(candidate, joined)


def resolve_urls(candidates: Iterable[str], base: str) -> list[UrlResolution]:
    """Resolve every candidate, preserving order."""
    return [resolve_url(c, base) for c in candidates]


def apply_prefix(urls: Sequence[str], url_prefix: str | None) -> list[str]:
    """Return the URL set with the prefix applied where needed.

    Without a prefix the list comes back unchanged. Unresolvable candidates
    are kept verbatim and produce one warning each.

    Raises:
        HttpBenchUsageError: If the prefix itself is not a usable base URL
    """
    if url_prefix is None:
        return list(urls)

    logger.info("Applying prefixes")
    base = parse_base(url_prefix)
    resolved: list[str] = []
    for outcome in resolve_urls(urls, base):
        if isinstance(outcome, Unresolvable):
            logger.warning("URL %s is invalid: %s", outcome.url, outcome.reason)
        resolved.append(outcome.resolved)
    return resolved
