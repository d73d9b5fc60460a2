"""Protocol interfaces for swappable components.

The service and AppState reference these protocols, not the concrete
implementations. This allows:
- Tests to use lightweight fakes (e.g. a fetcher that records attempts)
- Future backends to be swapped without changing the service
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import datetime

    from journeydocs.models.journey import JourneyContent, Milestone
    from journeydocs.urls import ResolvedUrl


class CacheProtocol(Protocol):
    """Interface for the two-tier journey cache."""

    def init(self) -> None: ...

    def now(self) -> datetime: ...

    def get_milestones(self, base_url: str) -> list[Milestone] | None: ...

    def set_milestones(self, base_url: str, milestones: list[Milestone]) -> None: ...

    def get_content(self, url: str) -> JourneyContent | None: ...

    def put_content(self, url: str, content: JourneyContent) -> None: ...

    def clear_journey(self, base_url: str) -> int: ...

    def clear_all(self) -> None: ...


class FetcherProtocol(Protocol):
    """Interface for the HTTP fetcher."""

    async def fetch_text(self, url: str) -> str: ...

    async def fetch(self, resolved: ResolvedUrl) -> str | None: ...
