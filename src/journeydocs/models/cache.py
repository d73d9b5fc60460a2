from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from journeydocs.models.journey import JourneyContent


class ContentCacheEntry(BaseModel):
    """Cached transformed page, keyed by the originally requested URL."""

    url: str
    content: JourneyContent
    fetched_at: datetime
