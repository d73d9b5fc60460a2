"""Tool handler for close_journey.

Mirrors a tab closing in the host. Cached page content for the journey is
dropped but its milestone index is kept. The journey's view goes back to Idle
and is forgotten.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from journeydocs.errors import InvalidInputError
from journeydocs.models.tools import CloseJourneyOutput, JourneyUrlInput

if TYPE_CHECKING:
    from journeydocs.state import AppState


async def handle(url: str, state: AppState) -> dict:
    """Handle a close_journey tool call."""
    log = structlog.get_logger().bind(tool="close_journey", url=url)
    log.info("handler_called")

    try:
        validated = JourneyUrlInput(url=url)
    except ValueError as exc:
        raise InvalidInputError(
            str(exc),
            suggestion="Provide any URL belonging to the journey being closed.",
        ) from exc

    base_url = state.service.base_url_of(validated.url)
    view = state.views.pop(base_url, None)
    if view is not None:
        cleared = view.close()
    else:
        cleared = state.service.close_journey(validated.url)
    return CloseJourneyOutput(base_url=base_url, cleared_entries=cleared).model_dump(mode="json")
