"""Application state container.

AppState is created once at server startup (inside the FastMCP lifespan context
manager) and injected into every tool handler via the MCP Context object.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from journeydocs.config import Settings
    from journeydocs.protocols import CacheProtocol, FetcherProtocol
    from journeydocs.service import JourneyService
    from journeydocs.view import JourneyView


@dataclass
class AppState:
    """Holds all shared runtime state. Passed to every tool handler."""

    settings: Settings
    cache: CacheProtocol
    fetcher: FetcherProtocol
    service: JourneyService
    http_client: httpx.AsyncClient | None = None
    # One view per open journey, keyed by base URL.
    views: dict[str, JourneyView] = field(default_factory=dict)
