"""In-process quality-report cache — implements the ReportCache port.

Entries are the serialized report JSON plus the moment it was stored, held
in a ``cachetools.TTLCache`` so expiry and size bounds come for free.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from cachetools import TTLCache

from evalhub.domain.entities import QualityReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CachedReport:
    payload: str
    cached_at: datetime


def _key(full_name: str) -> str:
    return full_name.strip().lower()


class InMemoryReportCache:
    """TTL-bounded report cache keyed by case-insensitive ``owner/name``."""

    def __init__(
        self,
        ttl_seconds: float = 3600,
        max_size: int = 512,
        *,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: TTLCache[str, CachedReport] = TTLCache(
            maxsize=max_size, ttl=ttl_seconds, timer=timer
        )

    def get(self, full_name: str) -> QualityReport | None:
        entry = self._entries.get(_key(full_name))
        if entry is None:
            return None
        return QualityReport.from_dict(json.loads(entry.payload))

    def entry(self, full_name: str) -> CachedReport | None:
        """The raw cached entry including its timestamp."""
        return self._entries.get(_key(full_name))

    def put(self, full_name: str, report: QualityReport) -> None:
        payload = json.dumps(report.to_dict(), sort_keys=True)
        self._entries[_key(full_name)] = CachedReport(payload, datetime.now(timezone.utc))
        logger.debug("Cached quality report for %s", full_name)

    def invalidate(self, full_name: str) -> bool:
        return self._entries.pop(_key(full_name), None) is not None
