from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

_MAX_URL_LENGTH = 2048
_MAX_TITLE_LENGTH = 500


def _validate_url(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("url must not be empty")
    if len(v) > _MAX_URL_LENGTH:
        raise ValueError(f"url must be at most {_MAX_URL_LENGTH} characters")
    # Relative docs paths are allowed; they are resolved against the docs host.
    if "://" in v and not v.startswith(("http://", "https://")):
        raise ValueError("url must use http or https")
    return v


class JourneyUrlInput(BaseModel):
    url: str

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _validate_url(v)


class OpenJourneyInput(JourneyUrlInput):
    title: str | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if len(v) > _MAX_TITLE_LENGTH:
            raise ValueError(f"title must be at most {_MAX_TITLE_LENGTH} characters")
        return v or None


class MilestoneOutput(BaseModel):
    ordinal: int
    title: str
    estimated_duration: str
    url: str
    slug: str
    is_active: bool


class JourneyOutput(BaseModel):
    title: str
    source_url: str
    base_url: str
    current_ordinal: int
    total_milestones: int
    milestones: list[MilestoneOutput]
    body_html: str
    summary: str | None
    anchor_fragment: str | None
    fetched_at: datetime
    next_url: str | None
    previous_url: str | None
    progress_percent: int
    is_cover_page: bool
    is_first_milestone: bool
    is_last_milestone: bool


class CloseJourneyOutput(BaseModel):
    base_url: str
    cleared_entries: int


class NavigateOutput(BaseModel):
    moved: bool
    journey: JourneyOutput
