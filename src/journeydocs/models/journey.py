from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from journeydocs import navigation
from journeydocs.nodes import Element


class LinkItem(BaseModel):
    url: str
    title: str


class LinkGroup(BaseModel):
    """An "explore more" style group of cross-links shown under a milestone."""

    heading: str
    items: list[LinkItem] = []


class ImageRef(BaseModel):
    src: str
    width: int = 735
    height: int = 175


class Milestone(BaseModel):
    """One page of a journey. Ordinals are 1-based; the cover page (0) is never a Milestone."""

    ordinal: int = Field(ge=1)
    title: str
    estimated_duration: str = "2-3 min"
    url: str
    is_active: bool = False
    side_journeys: LinkGroup | None = None
    related_journeys: LinkGroup | None = None
    conclusion_image: ImageRef | None = None


class JourneyContent(BaseModel):
    """A fully transformed journey page, ready for the host renderer."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    title: str
    body: Element
    source_url: str
    base_url: str
    current_ordinal: int = Field(ge=0)
    total_milestones: int
    milestones: list[Milestone]
    fetched_at: datetime
    summary: str | None = None
    anchor_fragment: str | None = None

    @property
    def is_cover_page(self) -> bool:
        return navigation.is_cover_page(self.current_ordinal)

    def body_html(self) -> str:
        return self.body.to_html()
