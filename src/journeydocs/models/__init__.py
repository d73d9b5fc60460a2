from __future__ import annotations

from journeydocs.models.cache import ContentCacheEntry
from journeydocs.models.journey import (
    ImageRef,
    JourneyContent,
    LinkGroup,
    LinkItem,
    Milestone,
)
from journeydocs.models.tools import (
    CloseJourneyOutput,
    JourneyOutput,
    JourneyUrlInput,
    MilestoneOutput,
    NavigateOutput,
    OpenJourneyInput,
)

__all__ = [
    # journey
    "LinkItem",
    "LinkGroup",
    "ImageRef",
    "Milestone",
    "JourneyContent",
    # cache
    "ContentCacheEntry",
    # tools
    "OpenJourneyInput",
    "JourneyUrlInput",
    "MilestoneOutput",
    "JourneyOutput",
    "CloseJourneyOutput",
    "NavigateOutput",
]
