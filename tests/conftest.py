"""Shared test fixtures — reduces boilerplate across test modules.

Provides:
- ``NOW`` — the fixed evaluation instant used by every clock-dependent test
- ``blobs`` / ``commits_every`` — tree and commit-list builders
- ``set_test_env`` — autouse fixture giving Settings a deterministic environment
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from evalhub.domain.entities import CommitSummary, TreeEntry
from evalhub.infrastructure.config import get_settings

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def blobs(*paths: str) -> list[TreeEntry]:
    """One blob entry per path."""
    return [TreeEntry(path=p, type="blob", size=100) for p in paths]


def commits_every(count: int, step: timedelta, start: datetime = NOW) -> list[CommitSummary]:
    """``count`` commits, newest first, spaced ``step`` apart."""
    return [
        CommitSummary(sha=f"sha{i}", date=start - i * step, message=f"commit {i}")
        for i in range(count)
    ]


# ---------------------------------------------------------------------------
# Environment patching
# ---------------------------------------------------------------------------

_ENV: dict[str, str] = {
    "OPENAI_API_KEY": "sk-test-primary",
    "OPENAI_MODEL": "test-model",
}


@pytest.fixture(autouse=True)
def set_test_env(monkeypatch):
    """Deterministic settings; the cached singleton is reset around each test."""
    for name, value in _ENV.items():
        monkeypatch.setenv(name, value)
    for name in ("OPENAI_BACKUP_API_KEY", "GITHUB_TOKEN", "QUALITY_WEIGHTS"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
