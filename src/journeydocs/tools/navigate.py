"""Tool handlers for next_milestone and previous_milestone.

Both load the page at ``url`` through the journey's view (normally a cache
hit), then move the view one step.
When there is nowhere to go the current page comes back with ``moved=False``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import structlog

from journeydocs.errors import InvalidInputError
from journeydocs.models.tools import JourneyUrlInput, NavigateOutput
from journeydocs.tools.open_journey import build_output
from journeydocs.view import view_for

if TYPE_CHECKING:
    from journeydocs.state import AppState


async def _step(url: str, direction: Literal["next", "previous"], state: AppState) -> dict:
    log = structlog.get_logger().bind(tool=f"{direction}_milestone", url=url)
    log.info("handler_called")

    try:
        validated = JourneyUrlInput(url=url)
    except ValueError as exc:
        raise InvalidInputError(
            str(exc),
            suggestion="Provide the URL of the journey page currently shown.",
        ) from exc

    view = view_for(state.views, state.service, validated.url)
    await view.navigate(validated.url)
    current = view.require_content()
    if direction == "next":
        await view.next()
    else:
        await view.previous()
    target = view.require_content()

    if target is current:
        log.info("navigation_boundary", current_ordinal=current.current_ordinal)
        return NavigateOutput(moved=False, journey=build_output(current)).model_dump(mode="json")

    log.info("navigation_complete", from_ordinal=current.current_ordinal, to_ordinal=target.current_ordinal)
    return NavigateOutput(moved=True, journey=build_output(target)).model_dump(mode="json")


async def handle_next(url: str, state: AppState) -> dict:
    """Handle a next_milestone tool call."""
    return await _step(url, "next", state)


async def handle_previous(url: str, state: AppState) -> dict:
    """Handle a previous_milestone tool call."""
    return await _step(url, "previous", state)
