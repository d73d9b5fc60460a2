"""Integration test fixtures.

Provides a fully wired AppState (real cache, fetcher and service over a
mocked docs host) plus helpers for serving a journey with respx.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import httpx
import pytest
import respx

from journeydocs.cache import JourneyCache
from journeydocs.fetcher import ContentFetcher
from journeydocs.service import JourneyService
from journeydocs.state import AppState

if TYPE_CHECKING:
    from collections.abc import Callable

    from journeydocs.config import Settings

BASE = "https://docs.example/learn/topic/"


def _serve_journey(
    router: respx.MockRouter,
    index_json: str | None,
    pages: dict[str, str],
) -> dict[str, respx.Route]:
    """Register the journey index and page bodies; anything else is a 404.

    ``pages`` maps absolute URLs to bodies. Returns the routes keyed by URL
    (the index under ``"index"``) so tests can count calls.
    """
    routes: dict[str, respx.Route] = {}
    if index_json is not None:
        routes["index"] = router.get(BASE + "index.json").mock(
            return_value=httpx.Response(200, text=index_json)
        )
    for url, body in pages.items():
        routes[url] = router.get(url).mock(return_value=httpx.Response(200, text=body))
    # Registered last so the specific routes above win.
    router.route(host="docs.example").mock(return_value=httpx.Response(404))
    return routes


@pytest.fixture()
def serve_journey() -> Callable[..., dict[str, respx.Route]]:
    return _serve_journey


@pytest.fixture()
def subprocess_env() -> dict[str, str]:
    """Baseline env dict for subprocess-based MCP integration tests.

    Runs the server from an empty directory so no local journeydocs.yaml is
    picked up, and points it at an unreachable docs host.
    """
    env = os.environ.copy()
    env["JOURNEYDOCS__DOCS__BASE_URL"] = "http://127.0.0.1:1"
    env["JOURNEYDOCS__LOGGING__LEVEL"] = "WARNING"
    return env


@pytest.fixture()
async def app_state(settings: Settings, clock) -> AppState:
    """Full AppState wired against the mocked docs host."""
    cache = JourneyCache(clock=clock, docs_base_url=settings.docs.base_url)
    cache.init()

    async with httpx.AsyncClient(follow_redirects=True) as client:
        fetcher = ContentFetcher(client)
        state = AppState(
            settings=settings,
            cache=cache,
            fetcher=fetcher,
            service=JourneyService(settings, cache, fetcher),
            http_client=client,
        )
        yield state
