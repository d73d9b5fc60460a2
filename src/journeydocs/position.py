"""Milestone position resolution.

Maps a requested URL onto a milestone ordinal. Never fails: anything that
cannot be matched is the cover page (ordinal 0).

Matching order (first hit wins):
  1. Full URL equality, trailing slash toggled on either side
  2. Path-only equality (scheme and host ignored), trailing slash toggled
  3. The URL is the journey base URL → cover page
  4. Otherwise → cover page
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from journeydocs.urls import strip_content_suffix, strip_fragment, urls_equivalent

if TYPE_CHECKING:
    from journeydocs.models.journey import Milestone

COVER_PAGE = 0


def _path_of(url: str) -> str:
    return urlsplit(url).path


def find_ordinal(requested_url: str, milestones: list[Milestone], base_url: str | None = None) -> int:
    """Compute the ordinal for ``requested_url`` without touching active flags."""
    url = strip_content_suffix(strip_fragment(requested_url))

    for milestone in milestones:
        if urls_equivalent(url, milestone.url):
            return milestone.ordinal

    path = _path_of(url)
    for milestone in milestones:
        if urls_equivalent(path, _path_of(milestone.url)):
            return milestone.ordinal

    if base_url is not None and urls_equivalent(url, base_url):
        return COVER_PAGE

    return COVER_PAGE


def mark_active(milestones: list[Milestone], ordinal: int) -> None:
    """Clear every active flag, then set it on the milestone at ``ordinal``.

    A no-op beyond clearing when ``ordinal`` is the cover page.
    """
    for milestone in milestones:
        milestone.is_active = milestone.ordinal == ordinal


def resolve_position(requested_url: str, milestones: list[Milestone], base_url: str | None = None) -> int:
    """Resolve the current ordinal and update the active flags to match."""
    ordinal = find_ordinal(requested_url, milestones, base_url)
    mark_active(milestones, ordinal)
    return ordinal
