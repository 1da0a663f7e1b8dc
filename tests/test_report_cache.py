"""Tests for the in-process report cache."""

from __future__ import annotations

from evalhub.domain.entities import RepoMetadata
from evalhub.infrastructure.report_cache import InMemoryReportCache
from evalhub.services.quality_scorer import build_report, fallback_report
from tests.conftest import NOW, blobs


class FakeTimer:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _report():
    return build_report(
        blobs("src/app.py", "README.md"),
        "# Demo",
        RepoMetadata(languages={"Python": 300}),
        [],
        now=NOW,
    )


def test_put_then_get_round_trips_report():
    cache = InMemoryReportCache()
    report = _report()

    cache.put("octo/demo", report)

    assert cache.get("octo/demo") == report


def test_keys_are_case_insensitive():
    cache = InMemoryReportCache()
    cache.put("Octo/Demo", fallback_report())

    assert cache.get("octo/demo") == fallback_report()
    assert cache.get("  OCTO/DEMO ") == fallback_report()


def test_entries_expire_after_ttl():
    timer = FakeTimer()
    cache = InMemoryReportCache(ttl_seconds=60, timer=timer)
    cache.put("octo/demo", _report())

    timer.now = 59
    assert cache.get("octo/demo") is not None
    timer.now = 61
    assert cache.get("octo/demo") is None


def test_max_size_evicts_oldest_entries():
    cache = InMemoryReportCache(max_size=2)
    for name in ("a/1", "b/2", "c/3"):
        cache.put(name, fallback_report())

    present = [name for name in ("a/1", "b/2", "c/3") if cache.get(name) is not None]
    assert len(present) == 2
    assert "c/3" in present


def test_invalidate_reports_whether_entry_existed():
    cache = InMemoryReportCache()
    cache.put("octo/demo", _report())

    assert cache.invalidate("OCTO/demo") is True
    assert cache.invalidate("octo/demo") is False
    assert cache.get("octo/demo") is None


def test_entry_exposes_payload_and_timestamp():
    cache = InMemoryReportCache()
    cache.put("octo/demo", fallback_report())

    entry = cache.entry("octo/demo")

    assert entry is not None
    assert '"qualityScore": 50' in entry.payload
    assert entry.cached_at.tzinfo is not None
