"""Unit tests for journeydocs.fetcher."""

from __future__ import annotations

import asyncio

import httpx
import pytest
import respx

from journeydocs.config import DocsSettings, FetcherSettings
from journeydocs.errors import EmptyBodyError, ErrorCode, HttpStatusError, NetworkError
from journeydocs.fetcher import ContentFetcher, build_auth, build_http_client
from journeydocs.urls import ResolvedUrl

# ---------------------------------------------------------------------------
# build_auth / build_http_client
# ---------------------------------------------------------------------------


class TestBuildAuth:
    def test_no_username_no_auth(self) -> None:
        assert build_auth(DocsSettings()) is None

    def test_username_without_password(self) -> None:
        assert isinstance(build_auth(DocsSettings(username="alice")), httpx.BasicAuth)


class TestBuildHttpClient:
    async def test_client_configuration(self) -> None:
        client = build_http_client(FetcherSettings(timeout_seconds=2.5), DocsSettings())
        try:
            assert isinstance(client, httpx.AsyncClient)
            assert client.follow_redirects is True
            assert client.timeout.connect == 2.5
            assert client.headers["User-Agent"] == "journeydocs/1.0"
        finally:
            await client.aclose()

    async def test_auth_header_sent_when_configured(self) -> None:
        client = build_http_client(FetcherSettings(), DocsSettings(username="alice", password="s3cret"))
        with respx.mock:
            route = respx.get("https://docs.example/a").mock(return_value=httpx.Response(200, text="ok"))
            await client.get("https://docs.example/a")
            assert route.calls.last.request.headers["Authorization"].startswith("Basic ")
        await client.aclose()

    async def test_no_auth_header_by_default(self) -> None:
        client = build_http_client(FetcherSettings(), DocsSettings())
        with respx.mock:
            route = respx.get("https://docs.example/a").mock(return_value=httpx.Response(200, text="ok"))
            await client.get("https://docs.example/a")
            assert "Authorization" not in route.calls.last.request.headers
        await client.aclose()


# ---------------------------------------------------------------------------
# ContentFetcher.fetch_text
# ---------------------------------------------------------------------------


class TestFetchText:
    async def test_successful_fetch(self) -> None:
        with respx.mock:
            respx.get("https://docs.example/page").mock(return_value=httpx.Response(200, text="<p>hi</p>"))
            async with httpx.AsyncClient() as client:
                assert await ContentFetcher(client).fetch_text("https://docs.example/page") == "<p>hi</p>"

    async def test_404_raises_status_error(self) -> None:
        with respx.mock:
            respx.get("https://docs.example/missing").mock(return_value=httpx.Response(404))
            async with httpx.AsyncClient() as client:
                with pytest.raises(HttpStatusError) as exc_info:
                    await ContentFetcher(client).fetch_text("https://docs.example/missing")
                assert exc_info.value.code == ErrorCode.HTTP_STATUS_ERROR
                assert exc_info.value.status_code == 404
                assert exc_info.value.recoverable is False

    async def test_500_is_recoverable(self) -> None:
        with respx.mock:
            respx.get("https://docs.example/error").mock(return_value=httpx.Response(503))
            async with httpx.AsyncClient() as client:
                with pytest.raises(HttpStatusError) as exc_info:
                    await ContentFetcher(client).fetch_text("https://docs.example/error")
                assert exc_info.value.recoverable is True

    async def test_network_error(self) -> None:
        with respx.mock:
            respx.get("https://docs.example/down").mock(side_effect=httpx.ConnectError("Connection refused"))
            async with httpx.AsyncClient() as client:
                with pytest.raises(NetworkError) as exc_info:
                    await ContentFetcher(client).fetch_text("https://docs.example/down")
                assert exc_info.value.code == ErrorCode.NETWORK_ERROR

    async def test_timeout_is_network_error(self) -> None:
        with respx.mock:
            respx.get("https://docs.example/slow").mock(side_effect=httpx.ReadTimeout("timed out"))
            async with httpx.AsyncClient() as client:
                with pytest.raises(NetworkError):
                    await ContentFetcher(client).fetch_text("https://docs.example/slow")

    async def test_whole_attempt_is_capped(self) -> None:
        async def trickle(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1)
            return httpx.Response(200, text="too late")

        async with httpx.AsyncClient(transport=httpx.MockTransport(trickle)) as client:
            fetcher = ContentFetcher(client, attempt_timeout=0.05)
            with pytest.raises(NetworkError) as exc_info:
                await fetcher.fetch_text("https://docs.example/slow")
        assert exc_info.value.code == ErrorCode.NETWORK_ERROR
        assert "Timed out" in exc_info.value.message

    async def test_blank_body_raises(self) -> None:
        with respx.mock:
            respx.get("https://docs.example/empty").mock(return_value=httpx.Response(200, text="  \n "))
            async with httpx.AsyncClient() as client:
                with pytest.raises(EmptyBodyError):
                    await ContentFetcher(client).fetch_text("https://docs.example/empty")

    async def test_redirect_followed(self) -> None:
        with respx.mock:
            respx.get("https://docs.example/old").mock(
                return_value=httpx.Response(301, headers={"location": "https://docs.example/new"})
            )
            respx.get("https://docs.example/new").mock(return_value=httpx.Response(200, text="moved"))
            async with httpx.AsyncClient(follow_redirects=True) as client:
                assert await ContentFetcher(client).fetch_text("https://docs.example/old") == "moved"


# ---------------------------------------------------------------------------
# ContentFetcher.fetch (variant fallback)
# ---------------------------------------------------------------------------

RESOLVED = ResolvedUrl(
    primary="https://docs.example/a/unstyled.html",
    variants=("https://docs.example/b", "https://docs.example/c/unstyled.html"),
)


class TestFetchVariants:
    async def test_first_success_wins(self) -> None:
        with respx.mock:
            a = respx.get("https://docs.example/a/unstyled.html").mock(
                return_value=httpx.Response(200, text="A")
            )
            b = respx.get("https://docs.example/b").mock(return_value=httpx.Response(200, text="B"))
            async with httpx.AsyncClient() as client:
                assert await ContentFetcher(client).fetch(RESOLVED) == "A"
            assert a.call_count == 1
            assert b.call_count == 0

    async def test_tries_in_order_until_success(self) -> None:
        with respx.mock:
            a = respx.get("https://docs.example/a/unstyled.html").mock(return_value=httpx.Response(404))
            b = respx.get("https://docs.example/b").mock(side_effect=httpx.ConnectError("refused"))
            c = respx.get("https://docs.example/c/unstyled.html").mock(
                return_value=httpx.Response(200, text="C")
            )
            async with httpx.AsyncClient() as client:
                assert await ContentFetcher(client).fetch(RESOLVED) == "C"
            assert (a.call_count, b.call_count, c.call_count) == (1, 1, 1)

    async def test_empty_body_moves_to_next_variant(self) -> None:
        with respx.mock:
            respx.get("https://docs.example/a/unstyled.html").mock(return_value=httpx.Response(200, text=""))
            respx.get("https://docs.example/b").mock(return_value=httpx.Response(200, text="B"))
            async with httpx.AsyncClient() as client:
                assert await ContentFetcher(client).fetch(RESOLVED) == "B"

    async def test_all_fail_returns_none(self) -> None:
        with respx.mock:
            routes = [
                respx.get(url).mock(return_value=httpx.Response(500)) for url in RESOLVED.candidates
            ]
            async with httpx.AsyncClient() as client:
                assert await ContentFetcher(client).fetch(RESOLVED) is None
            # Each candidate is tried exactly once; there are no retries.
            assert [r.call_count for r in routes] == [1, 1, 1]
