"""Loading of URL candidates and payload lines from local files."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from .exceptions import HttpBenchResourceError
from .logging_config import get_logger

logger = get_logger("sources")


def _read_lines(path: str | Path, kind: str) -> list[str]:
    """Read a UTF-8 text file and return its lines without line terminators.

    Raises:
        HttpBenchResourceError: If the file is missing, unreadable or not UTF-8
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise HttpBenchResourceError(
            f"{kind} file not found: {path}",
            context={"path": str(path)},
            original_error=e
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        logger.exception("Failed to read %s file", kind.lower())
        raise HttpBenchResourceError(
            f"Cannot read {kind.lower()} file: {path}",
            context={"path": str(path)},
            original_error=e
        ) from e
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def load_urls(url_file: str | Path | None = None, inline_urls: Sequence[str] | None = None) -> list[str]:
    """Collect candidate URLs from a file or from the command line.

    A file wins when given: every non-empty line is one candidate, in file
    order. Otherwise the inline URLs are used verbatim, in argument order.

    Raises:
        HttpBenchResourceError: If the file cannot be read or holds no URLs
    """
    if url_file is not None:
        logger.info("Loading URLs from %s", url_file)
        urls = [line for line in _read_lines(url_file, "URL") if line]
        if not urls:
            raise HttpBenchResourceError(
                f"URL file contains no URLs: {url_file}",
                context={"path": str(url_file)}
            )
        return urls
    return list(inline_urls or ())


def load_payloads(payloads_file: str | Path | None) -> list[str]:
    """Read one payload per line, in order. Empty when no file is given.

    Empty lines inside the file are kept so line i still pairs with request i.
    """
    if payloads_file is None:
        return []
    logger.info("Loading payloads from %s", payloads_file)
    payloads = _read_lines(payloads_file, "Payload")
    logger.debug("Loaded %d payloads", len(payloads))
    return payloads
