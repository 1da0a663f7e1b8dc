"""Port: quality-report cache keyed by repository full name."""

from __future__ import annotations

from typing import Protocol

from evalhub.domain.entities import QualityReport


class ReportCache(Protocol):
    """Stores serialized reports with an expiry; keys are ``owner/name``."""

    def get(self, full_name: str) -> QualityReport | None:
        """Return the cached report, or ``None`` when absent or expired."""
        ...

    def put(self, full_name: str, report: QualityReport) -> None:
        """Store *report*, replacing any previous entry."""
        ...

    def invalidate(self, full_name: str) -> bool:
        """Drop the entry; return whether one was present."""
        ...
