"""MCP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState via the FastMCP lifespan context manager
- Register tools
- Run over stdio
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import TYPE_CHECKING

import structlog
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, TextContent

import journeydocs.tools.close_journey as t_close
import journeydocs.tools.navigate as t_navigate
import journeydocs.tools.open_journey as t_open
from journeydocs import __version__
from journeydocs.cache import JourneyCache
from journeydocs.config import Settings
from journeydocs.errors import JourneyError
from journeydocs.fetcher import ContentFetcher, build_http_client
from journeydocs.service import JourneyService
from journeydocs.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs go to stderr; stdout is reserved for the MCP JSON-RPC stream
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


def build_state(settings: Settings) -> AppState:
    """Wire the cache, HTTP client, fetcher and service for one process."""
    cache = JourneyCache(
        ttl=timedelta(seconds=settings.cache.content_ttl_seconds),
        docs_base_url=settings.docs.base_url,
    )
    cache.init()
    http_client = build_http_client(settings.fetcher, settings.docs)
    fetcher = ContentFetcher(http_client, attempt_timeout=settings.fetcher.timeout_seconds)
    service = JourneyService(settings, cache, fetcher)
    return AppState(
        settings=settings,
        cache=cache,
        fetcher=fetcher,
        service=service,
        http_client=http_client,
    )


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncGenerator[AppState, None]:
    """Create and tear down all shared resources for the server's lifetime."""
    settings = Settings()
    _setup_logging(settings)

    log.info(
        "server_starting",
        version=__version__,
        docs_base_url=settings.docs.base_url,
        authenticated=bool(settings.docs.username),
    )

    state = build_state(settings)
    log.info("server_started", version=__version__)

    try:
        yield state
    finally:
        state.views.clear()
        state.cache.clear_all()
        if state.http_client is not None:
            await state.http_client.aclose()
        log.info("server_stopping")


# ---------------------------------------------------------------------------
# FastMCP instance and tool registration
# ---------------------------------------------------------------------------

mcp = FastMCP("journeydocs", lifespan=lifespan)
# FastMCP doesn't expose a version kwarg, so set it on the underlying Server
# so the MCP initialize handshake reports our version, not the SDK's.
mcp._mcp_server.version = __version__  # pyright: ignore[reportPrivateUsage]


def _serialise_tool_error(error: JourneyError) -> CallToolResult:
    """Convert a JourneyError to the MCP tool error result envelope."""
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(error.to_dict()))],
        isError=True,
    )


def _log_tool_error(tool: str, exc: JourneyError) -> None:
    log.warning(
        "tool_error",
        tool=tool,
        code=exc.code,
        message=exc.message,
        recoverable=exc.recoverable,
    )


@mcp.tool()
async def open_journey(url: str, ctx: Context, title: str | None = None) -> object:
    """Open a learning journey page (cover page or milestone).

    Returns the transformed page as HTML together with the milestone list,
    the current position and the next/previous milestone URLs.
    """
    state: AppState = ctx.request_context.lifespan_context
    try:
        return await t_open.handle(url, title, state)
    except JourneyError as exc:
        _log_tool_error("open_journey", exc)
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool="open_journey", exc_info=True)
        raise


@mcp.tool()
async def next_milestone(url: str, ctx: Context) -> object:
    """Open the milestone after the page at ``url``."""
    state: AppState = ctx.request_context.lifespan_context
    try:
        return await t_navigate.handle_next(url, state)
    except JourneyError as exc:
        _log_tool_error("next_milestone", exc)
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool="next_milestone", exc_info=True)
        raise


@mcp.tool()
async def previous_milestone(url: str, ctx: Context) -> object:
    """Open the milestone before the page at ``url``. Never returns to the cover page."""
    state: AppState = ctx.request_context.lifespan_context
    try:
        return await t_navigate.handle_previous(url, state)
    except JourneyError as exc:
        _log_tool_error("previous_milestone", exc)
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool="previous_milestone", exc_info=True)
        raise


@mcp.tool()
async def close_journey(url: str, ctx: Context) -> object:
    """Forget cached pages for the journey containing ``url``."""
    state: AppState = ctx.request_context.lifespan_context
    try:
        return await t_close.handle(url, state)
    except JourneyError as exc:
        _log_tool_error("close_journey", exc)
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool="close_journey", exc_info=True)
        raise


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
