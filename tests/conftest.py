"""Pytest fixtures for httpbench tests."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def url_file(tmp_path: Path) -> Path:
    """URL file mixing an absolute URL, relative references and a blank line."""
    p = tmp_path / "urls.txt"
    p.write_text(
        "http://localhost:8070/abc123?def=456\n"
        "abc123?def=456\n"
        "\n"
        "/abc123?def=456\n",
        encoding="utf-8",
    )
    return p


@pytest.fixture
def payloads_file(tmp_path: Path) -> Path:
    p = tmp_path / "payloads.txt"
    p.write_text('{"id": 1}\n{"id": 2}\n{"id": 3}\n', encoding="utf-8")
    return p


@pytest.fixture
def empty_file(tmp_path: Path) -> Path:
    p = tmp_path / "empty.txt"
    p.write_text("", encoding="utf-8")
    return p


@pytest.fixture
def tmp_path_defaults() -> Path:
    """Write a defaults file to a temp file."""
    content = """
concurrency: 25
requests: 500
order: s
delay_ms: 40
delay_dist: u
prefix: http://localhost:8070/
method: get
report_slow: 0.95
"""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        f.write(content)
        path = Path(f.name)
    yield path
    path.unlink(missing_ok=True)
