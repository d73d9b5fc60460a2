"""Journey loading pipeline.

cache lookup → URL variants → fetch → milestone index → position → transform
→ cache write. Suspends only inside the fetcher and the index loader; every
other step is synchronous.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from journeydocs import navigation
from journeydocs.errors import ContentUnavailableError
from journeydocs.index import MilestoneIndexLoader
from journeydocs.models.journey import JourneyContent
from journeydocs.position import resolve_position
from journeydocs.transformer import DEFAULT_TITLE, TransformContext, transform
from journeydocs.urls import absolutize, base_url_of, resolve_content_url, strip_fragment

if TYPE_CHECKING:
    from journeydocs.config import Settings
    from journeydocs.protocols import CacheProtocol, FetcherProtocol


class JourneyService:
    """Opens journey pages and navigates between them.

    Concurrent requests for the same uncached URL are not coalesced: each
    one fetches, and whichever finishes last owns the cache entry.
    """

    def __init__(
        self,
        settings: Settings,
        cache: CacheProtocol,
        fetcher: FetcherProtocol,
        index_loader: MilestoneIndexLoader | None = None,
    ) -> None:
        self._settings = settings
        self._cache = cache
        self._fetcher = fetcher
        self._index_loader = index_loader or MilestoneIndexLoader(
            fetcher, cache, settings.docs.base_url
        )

    @property
    def cache(self) -> CacheProtocol:
        return self._cache

    def base_url_of(self, url: str) -> str:
        absolute = absolutize(url, self._settings.docs.base_url)
        return base_url_of(strip_fragment(absolute), self._settings.docs.journey_prefixes)

    async def open(self, url: str, title: str | None = None) -> JourneyContent:
        """Return the transformed page for ``url``.

        Raises ContentUnavailableError when every URL variant fails, and
        IndexFetchError / IndexParseError when pagination cannot be built.
        """
        log = structlog.get_logger().bind(url=url)

        cached = self._cache.get_content(url)
        if cached is not None:
            log.info("cache_hit")
            return cached

        docs = self._settings.docs
        absolute = absolutize(url, docs.base_url)
        resolved = resolve_content_url(absolute, docs.base_url)
        log.info("cache_miss_fetching", primary=resolved.primary, variants=len(resolved.variants))

        raw = await self._fetcher.fetch(resolved)
        if raw is None:
            raise ContentUnavailableError(
                f"Could not load {url}: all {len(resolved.candidates)} URL variants failed"
            )

        base_url = self.base_url_of(absolute)
        milestones = await self._index_loader.load(base_url)

        page_url = strip_fragment(absolute)
        ordinal = resolve_position(page_url, milestones, base_url)
        # Snapshot so later opens of sibling pages cannot flip this entry's active flag.
        snapshot = [milestone.model_copy(deep=True) for milestone in milestones]

        result = transform(
            raw,
            TransformContext(
                docs_base_url=docs.base_url,
                content_path=docs.content_path,
                current_ordinal=ordinal,
                milestones=tuple(snapshot),
            ),
        )

        content = JourneyContent(
            title=result.title or title or DEFAULT_TITLE,
            body=result.body,
            source_url=page_url,
            base_url=base_url,
            current_ordinal=ordinal,
            total_milestones=len(snapshot),
            milestones=snapshot,
            fetched_at=self._cache.now(),
            summary=result.summary,
            anchor_fragment=resolved.fragment,
        )
        self._cache.put_content(url, content)
        log.info(
            "journey_page_loaded",
            base_url=base_url,
            current_ordinal=ordinal,
            total_milestones=content.total_milestones,
        )
        return content

    async def next(self, content: JourneyContent) -> JourneyContent | None:
        target = navigation.next_url(content.current_ordinal, content.milestones)
        return await self.open(target) if target is not None else None

    async def previous(self, content: JourneyContent) -> JourneyContent | None:
        target = navigation.previous_url(content.current_ordinal, content.milestones)
        return await self.open(target) if target is not None else None

    def close_journey(self, url: str) -> int:
        """Drop cached content for the journey containing ``url``; keep its index."""
        return self._cache.clear_journey(self.base_url_of(url))

    def reset(self) -> None:
        self._cache.clear_all()
