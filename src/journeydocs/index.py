"""Milestone index loading.

A journey publishes ``{base_url}index.json``: an array of page descriptors.
``parse_index`` turns that document into the ordered milestone list (pure,
no I/O); ``MilestoneIndexLoader`` adds the session-long cache and the fetch.
"""

from __future__ import annotations

import json
import math
from typing import TYPE_CHECKING, Any

import structlog

from journeydocs.errors import IndexFetchError, IndexParseError, JourneyError
from journeydocs.models.journey import ImageRef, LinkGroup, LinkItem, Milestone
from journeydocs.urls import INDEX_FILE, absolutize

if TYPE_CHECKING:
    from journeydocs.protocols import CacheProtocol, FetcherProtocol

log = structlog.get_logger()

DEFAULT_DURATION = "2-3 min"
SIDE_JOURNEYS_HEADING = "More to explore (optional)"
RELATED_JOURNEYS_HEADING = "Related journeys"


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool) and math.isfinite(value)


def _is_conclusion(params: dict) -> bool:
    cta = params.get("cta")
    return isinstance(cta, dict) and cta.get("type") == "conclusion"


def _is_skipped(params: dict) -> bool:
    grafana = params.get("grafana")
    return isinstance(grafana, dict) and grafana.get("skip") is True


def _link_group(raw: Any, default_heading: str, docs_base_url: str) -> LinkGroup | None:
    if not isinstance(raw, dict):
        return None
    items = [
        LinkItem(url=absolutize(item["link"], docs_base_url), title=str(item.get("title") or item["link"]))
        for item in raw.get("items") or []
        if isinstance(item, dict) and isinstance(item.get("link"), str) and item["link"].strip()
    ]
    if not items:
        return None
    heading = raw.get("heading")
    return LinkGroup(heading=heading if isinstance(heading, str) and heading else default_heading, items=items)


def _conclusion_image(params: dict, docs_base_url: str) -> ImageRef | None:
    cta = params.get("cta")
    if not isinstance(cta, dict):
        return None
    image = cta.get("image")
    if not isinstance(image, dict) or not isinstance(image.get("src"), str) or not image["src"]:
        return None
    width = image.get("width")
    height = image.get("height")
    return ImageRef(
        src=absolutize(image["src"], docs_base_url),
        width=int(width) if _is_number(width) else 735,
        height=int(height) if _is_number(height) else 175,
    )


def parse_index(raw: str, docs_base_url: str) -> list[Milestone]:
    """Parse an index.json document into milestones numbered 1..N.

    Keeps entries that declare a numeric ``params.step`` or are marked as a
    conclusion page. Entries sort by declared step; conclusion pages sort last
    whatever step they declare. Final ordinals come from the sorted position,
    so gaps or duplicates in declared steps never show up in the result.

    Raises IndexParseError for invalid JSON, a non-array document, or an
    index that yields no milestones.
    """
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise IndexParseError(f"index.json is not valid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise IndexParseError(f"index.json must be an array, got {type(data).__name__}")

    candidates: list[tuple[bool, float, int, dict, dict]] = []
    for position, item in enumerate(data):
        if not isinstance(item, dict):
            continue
        params = item.get("params")
        permalink = item.get("permalink")
        if not isinstance(params, dict) or not isinstance(permalink, str) or not permalink:
            continue
        if _is_skipped(params):
            continue
        conclusion = _is_conclusion(params)
        step = params.get("step")
        if not (_is_number(step) or conclusion):
            continue
        sort_step = float(step) if _is_number(step) else math.inf
        # Position breaks ties so equal steps keep document order.
        candidates.append((conclusion, sort_step, position, item, params))

    candidates.sort(key=lambda c: (c[0], c[1], c[2]))

    milestones: list[Milestone] = []
    for ordinal, (_conclusion, _step, _pos, item, params) in enumerate(candidates, start=1):
        title = params.get("title") or params.get("menutitle") or f"Step {ordinal}"
        duration = params.get("duration")
        milestones.append(
            Milestone(
                ordinal=ordinal,
                title=str(title),
                estimated_duration=duration if isinstance(duration, str) and duration else DEFAULT_DURATION,
                url=absolutize(item["permalink"], docs_base_url),
                side_journeys=_link_group(params.get("side_journeys"), SIDE_JOURNEYS_HEADING, docs_base_url),
                related_journeys=_link_group(
                    params.get("related_journeys"), RELATED_JOURNEYS_HEADING, docs_base_url
                ),
                conclusion_image=_conclusion_image(params, docs_base_url),
            )
        )

    if not milestones:
        raise IndexParseError("index.json lists no step or conclusion pages")

    return milestones


def index_url_for(base_url: str) -> str:
    return base_url if base_url.endswith("/") else f"{base_url}/"


class MilestoneIndexLoader:
    """Loads a journey's milestone list, caching it for the whole session."""

    def __init__(self, fetcher: FetcherProtocol, cache: CacheProtocol, docs_base_url: str) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._docs_base_url = docs_base_url

    async def load(self, base_url: str) -> list[Milestone]:
        """Return the milestones for ``base_url``; fetch index.json on a miss.

        Raises IndexFetchError or IndexParseError. Failures are not retried.
        """
        cached = self._cache.get_milestones(base_url)
        if cached is not None:
            log.debug("index_cache_hit", base_url=base_url, milestones=len(cached))
            return cached

        url = absolutize(index_url_for(base_url), self._docs_base_url) + INDEX_FILE
        log.info("index_fetching", url=url)
        try:
            raw = await self._fetcher.fetch_text(url)
        except JourneyError as exc:
            raise IndexFetchError(f"Failed to fetch journey index {url}: {exc.message}") from exc

        milestones = parse_index(raw, self._docs_base_url)
        self._cache.set_milestones(base_url, milestones)
        log.info("index_loaded", base_url=base_url, milestones=len(milestones))
        return milestones
