"""Pagination over a resolved milestone list.

Pure functions of ``(current_ordinal, milestones)``. Ordinal 0 is the cover
page: "next" from it goes to milestone 1, but "previous" never leads back
to it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from journeydocs.models.journey import Milestone


def _by_ordinal(milestones: list[Milestone], ordinal: int) -> Milestone | None:
    return next((m for m in milestones if m.ordinal == ordinal), None)


def next_url(current_ordinal: int, milestones: list[Milestone]) -> str | None:
    total = len(milestones)
    if current_ordinal == 0 and total > 0:
        first = _by_ordinal(milestones, 1)
        return first.url if first else None
    if 0 < current_ordinal < total:
        upcoming = _by_ordinal(milestones, current_ordinal + 1)
        return upcoming.url if upcoming else None
    return None


def previous_url(current_ordinal: int, milestones: list[Milestone]) -> str | None:
    if current_ordinal <= 1:
        return None
    if current_ordinal <= len(milestones):
        prior = _by_ordinal(milestones, current_ordinal - 1)
        return prior.url if prior else None
    return None


def current_milestone(current_ordinal: int, milestones: list[Milestone]) -> Milestone | None:
    return _by_ordinal(milestones, current_ordinal) if current_ordinal > 0 else None


def is_cover_page(current_ordinal: int) -> bool:
    return current_ordinal == 0


def is_first_milestone(current_ordinal: int) -> bool:
    return current_ordinal == 1


def is_last_milestone(current_ordinal: int, milestones: list[Milestone]) -> bool:
    return len(milestones) > 0 and current_ordinal == len(milestones)


def progress_percent(current_ordinal: int, total_milestones: int) -> int:
    """Share of the journey reached, rounded to a whole percent."""
    if total_milestones <= 0:
        return 0
    return round(current_ordinal / total_milestones * 100)
