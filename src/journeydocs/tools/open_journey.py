"""Tool handler for open_journey.

Receives AppState, validates input, loads the page through the journey's
JourneyView and returns a structured dict. No MCP or FastMCP imports;
server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from journeydocs import navigation
from journeydocs.errors import InvalidInputError
from journeydocs.models.tools import JourneyOutput, MilestoneOutput, OpenJourneyInput
from journeydocs.urls import milestone_slug
from journeydocs.view import view_for

if TYPE_CHECKING:
    from journeydocs.models.journey import JourneyContent
    from journeydocs.state import AppState


def build_output(content: JourneyContent) -> JourneyOutput:
    """Flatten a JourneyContent into the tool output model."""
    return JourneyOutput(
        title=content.title,
        source_url=content.source_url,
        base_url=content.base_url,
        current_ordinal=content.current_ordinal,
        total_milestones=content.total_milestones,
        milestones=[
            MilestoneOutput(
                ordinal=m.ordinal,
                title=m.title,
                estimated_duration=m.estimated_duration,
                url=m.url,
                slug=milestone_slug(m.url),
                is_active=m.is_active,
            )
            for m in content.milestones
        ],
        body_html=content.body_html(),
        summary=content.summary,
        anchor_fragment=content.anchor_fragment,
        fetched_at=content.fetched_at,
        next_url=navigation.next_url(content.current_ordinal, content.milestones),
        previous_url=navigation.previous_url(content.current_ordinal, content.milestones),
        progress_percent=navigation.progress_percent(content.current_ordinal, content.total_milestones),
        is_cover_page=content.is_cover_page,
        is_first_milestone=navigation.is_first_milestone(content.current_ordinal),
        is_last_milestone=navigation.is_last_milestone(content.current_ordinal, content.milestones),
    )


async def handle(url: str, title: str | None, state: AppState) -> dict:
    """Handle an open_journey tool call."""
    log = structlog.get_logger().bind(tool="open_journey", url=url)
    log.info("handler_called")

    try:
        validated = OpenJourneyInput(url=url, title=title)
    except ValueError as exc:
        raise InvalidInputError(
            str(exc),
            suggestion="Provide a docs URL (http/https or a /docs/ path, max 2048 chars).",
        ) from exc

    view = view_for(state.views, state.service, validated.url)
    await view.navigate(validated.url, validated.title)
    return build_output(view.require_content()).model_dump(mode="json")
