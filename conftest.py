"""Pytest configuration — ensures the project root is importable."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))


@pytest.fixture(autouse=True)
def _no_remote_blob(monkeypatch: pytest.MonkeyPatch):
    """Never talk to the real Vercel Blob API from tests — keeps the suite offline."""
    monkeypatch.delenv("BLOB_READ_WRITE_TOKEN", raising=False)
    yield
