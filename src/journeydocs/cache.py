"""In-memory journey caches.

Two tiers with different lifetimes, owned by one service object:

* Milestone index cache: ``base_url -> [Milestone]``. No TTL; lives for the
  process unless cleared with ``clear_all``.
* Content cache: ``requested_url -> ContentCacheEntry``. Entries older than
  the TTL are treated as misses on read; they are not deleted, the next
  ``put_content`` simply overwrites them.

Nothing is persisted across restarts. The clock is injectable so tests can
move time instead of sleeping. Writes always replace whole entries.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import structlog

from journeydocs.models.cache import ContentCacheEntry
from journeydocs.urls import absolutize, is_under

if TYPE_CHECKING:
    from journeydocs.models.journey import JourneyContent, Milestone

log = structlog.get_logger()

Clock = Callable[[], datetime]

DEFAULT_CONTENT_TTL = timedelta(minutes=5)


def utcnow() -> datetime:
    return datetime.now(UTC)


class JourneyCache:
    """Process-wide cache implementing CacheProtocol."""

    def __init__(
        self,
        ttl: timedelta = DEFAULT_CONTENT_TTL,
        clock: Clock = utcnow,
        docs_base_url: str = "",
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        # Relative content keys are resolved against this host when matching.
        self._docs_base_url = docs_base_url
        self._milestones: dict[str, list[Milestone]] = {}
        self._content: dict[str, ContentCacheEntry] = {}

    def init(self) -> None:
        """Start from empty caches. Called once at startup."""
        self._milestones = {}
        self._content = {}

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------
    # Milestone index cache
    # ------------------------------------------------------------------

    def get_milestones(self, base_url: str) -> list[Milestone] | None:
        return self._milestones.get(base_url)

    def set_milestones(self, base_url: str, milestones: list[Milestone]) -> None:
        self._milestones[base_url] = milestones

    # ------------------------------------------------------------------
    # Content cache
    # ------------------------------------------------------------------

    def get_content(self, url: str) -> JourneyContent | None:
        """Return cached content for ``url`` if it is younger than the TTL."""
        entry = self._content.get(url)
        if entry is None:
            return None
        age = self._clock() - entry.fetched_at
        if age >= self._ttl:
            log.debug("content_cache_expired", url=url, age_seconds=age.total_seconds())
            return None
        return entry.content

    def put_content(self, url: str, content: JourneyContent) -> None:
        self._content[url] = ContentCacheEntry(url=url, content=content, fetched_at=self._clock())

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    def clear_journey(self, base_url: str) -> int:
        """Drop every content entry under ``base_url``; keep its milestone index.

        The index must survive so a reopened journey can still resolve its
        current position. Returns the number of content entries removed.
        """
        stale = [url for url in self._content if is_under(self._absolute_key(url), base_url)]
        for url in stale:
            del self._content[url]
        log.info("journey_content_cleared", base_url=base_url, removed=len(stale))
        return len(stale)

    def _absolute_key(self, url: str) -> str:
        if not self._docs_base_url:
            return url
        return absolutize(url, self._docs_base_url)

    def clear_all(self) -> None:
        content_count = len(self._content)
        index_count = len(self._milestones)
        self._content.clear()
        self._milestones.clear()
        log.info("journey_cache_cleared", content_entries=content_count, indexes=index_count)
