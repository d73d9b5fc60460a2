"""Per-journey view state machine.

    Idle ──open/navigate──▶ Loading ──ok──▶ Loaded
                               │                │
                               └──error──▶ Errored
    Loaded/Errored ──next/previous/reopen──▶ Loading

Each load takes a generation number. A load that finishes after a newer one
has started is not applied to the view; its cache write still stands.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from journeydocs import navigation
from journeydocs.errors import JourneyError

if TYPE_CHECKING:
    from journeydocs.models.journey import JourneyContent
    from journeydocs.service import JourneyService

log = structlog.get_logger()


class ViewState(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERRORED = "errored"


class JourneyView:
    """One open journey, e.g. a tab in the host application."""

    def __init__(self, service: JourneyService, url: str, title: str | None = None) -> None:
        self._service = service
        self.url = url
        self.title = title
        self.state = ViewState.IDLE
        self.content: JourneyContent | None = None
        self.error: JourneyError | None = None
        self._last_loaded: JourneyContent | None = None
        self._generation = 0

    @property
    def base_url(self) -> str:
        return self._service.base_url_of(self.url)

    async def open(self) -> ViewState:
        return await self._load(self.url, self.title)

    async def navigate(self, url: str, title: str | None = None) -> ViewState:
        return await self._load(url, title)

    async def reopen(self) -> ViewState:
        return await self._load(self.url, self.title)

    async def next(self) -> ViewState:
        """Load the next milestone; stays put when there is none."""
        if self._last_loaded is None:
            return self.state
        target = navigation.next_url(self._last_loaded.current_ordinal, self._last_loaded.milestones)
        if target is None:
            return self.state
        return await self._load(target, None)

    async def previous(self) -> ViewState:
        if self._last_loaded is None:
            return self.state
        target = navigation.previous_url(self._last_loaded.current_ordinal, self._last_loaded.milestones)
        if target is None:
            return self.state
        return await self._load(target, None)

    def require_content(self) -> JourneyContent:
        """Return the loaded page, or raise whatever stopped the last load."""
        if self.state == ViewState.ERRORED and self.error is not None:
            raise self.error
        if self.state != ViewState.LOADED or self.content is None:
            raise JourneyError(
                f"Journey view for {self.url} is {self.state}",
                suggestion="Another request replaced this page before it finished. Retry the call.",
                recoverable=True,
            )
        return self.content

    def close(self) -> int:
        """Drop the journey's cached content and return the view to Idle."""
        removed = self._service.close_journey(self.url)
        self._generation += 1
        self.state = ViewState.IDLE
        self.content = None
        self.error = None
        self._last_loaded = None
        return removed

    async def _load(self, url: str, title: str | None) -> ViewState:
        self._generation += 1
        generation = self._generation
        self.url = url
        self.title = title
        self.state = ViewState.LOADING

        try:
            content = await self._service.open(url, title)
        except JourneyError as exc:
            if generation != self._generation:
                log.info("stale_load_discarded", url=url, outcome="error")
                return self.state
            log.warning("journey_view_errored", url=url, code=exc.code, message=exc.message)
            self.state = ViewState.ERRORED
            self.content = None
            self.error = exc
            return self.state

        if generation != self._generation:
            log.info("stale_load_discarded", url=url, outcome="loaded")
            return self.state

        self.state = ViewState.LOADED
        self.content = content
        self._last_loaded = content
        self.error = None
        return self.state


def view_for(views: dict[str, JourneyView], service: JourneyService, url: str) -> JourneyView:
    """Return the view owning ``url``'s journey, creating it on first use.

    Views are keyed by journey base URL, so every page of one journey shares
    a single state machine.
    """
    base_url = service.base_url_of(url)
    view = views.get(base_url)
    if view is None:
        view = views[base_url] = JourneyView(service, url)
    return view
