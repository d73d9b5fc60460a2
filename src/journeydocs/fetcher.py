"""HTTP fetcher for journey pages and index documents.

All network I/O goes through a single ContentFetcher instance shared across
tool calls. The fetcher receives an httpx.AsyncClient via constructor
injection; the lifespan owns the client lifecycle.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

import httpx
import structlog

from journeydocs.errors import EmptyBodyError, HttpStatusError, JourneyError, NetworkError

if TYPE_CHECKING:
    from journeydocs.config import DocsSettings, FetcherSettings
    from journeydocs.urls import ResolvedUrl

log = structlog.get_logger()

_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,application/json;q=0.8,*/*;q=0.5"


def build_auth(docs: DocsSettings) -> httpx.BasicAuth | None:
    """Basic auth when a username is configured (the password may be empty)."""
    if not docs.username:
        return None
    return httpx.BasicAuth(docs.username, docs.password or "")


def build_http_client(fetcher: FetcherSettings, docs: DocsSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    return httpx.AsyncClient(
        follow_redirects=True,
        timeout=httpx.Timeout(fetcher.timeout_seconds),
        headers={"User-Agent": fetcher.user_agent, "Accept": _ACCEPT},
        auth=build_auth(docs),
        limits=httpx.Limits(
            max_connections=10,
            max_keepalive_connections=5,
        ),
    )


class ContentFetcher:
    """Fetches documents, trying URL variants in order until one succeeds."""

    def __init__(self, client: httpx.AsyncClient, attempt_timeout: float | None = None) -> None:
        self._client = client
        # Caps one whole GET, redirects and body included; httpx times each phase.
        self._attempt_timeout = attempt_timeout

    async def fetch_text(self, url: str) -> str:
        """Single GET attempt.

        Returns the body on a 2xx response with non-blank content. Raises
        NetworkError, HttpStatusError or EmptyBodyError otherwise.
        """
        try:
            response = await asyncio.wait_for(self._client.get(url), timeout=self._attempt_timeout)
        except TimeoutError as exc:
            raise NetworkError(
                f"Timed out fetching {url} after {self._attempt_timeout}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"Network error fetching {url}: {exc}") from exc

        if not response.is_success:
            raise HttpStatusError(
                f"HTTP {response.status_code} fetching {url}",
                status_code=response.status_code,
            )

        text = response.text
        if not text.strip():
            raise EmptyBodyError(f"Empty body fetching {url}")
        return text

    async def fetch(self, resolved: ResolvedUrl) -> str | None:
        """Try the primary URL then each variant; first non-empty success wins.

        Never raises for fetch failures: returns ``None`` once every candidate
        has failed.
        """
        for attempt, url in enumerate(resolved.candidates, start=1):
            started = time.monotonic()
            try:
                text = await self.fetch_text(url)
            except JourneyError as exc:
                log.info(
                    "fetch_attempt_failed",
                    url=url,
                    attempt=attempt,
                    code=exc.code,
                    reason=exc.message,
                )
                continue

            log.info(
                "fetch_complete",
                url=url,
                attempt=attempt,
                content_length=len(text),
                duration_ms=round((time.monotonic() - started) * 1000),
            )
            return text

        log.warning(
            "fetch_exhausted",
            primary=resolved.primary,
            attempts=len(resolved.candidates),
        )
        return None
