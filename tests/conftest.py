"""Shared test fixtures for the journeydocs test suite."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

import pytest

from journeydocs.config import DocsSettings, Settings
from journeydocs.models.journey import Milestone

DOCS_HOST = "https://docs.example"
JOURNEY_BASE = f"{DOCS_HOST}/learn/topic/"


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current += delta


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def settings() -> Settings:
    """Settings pointing at a fictional docs host with ``/learn/`` journeys."""
    return Settings(
        docs=DocsSettings(
            base_url=DOCS_HOST,
            content_path="/learn/",
            journey_prefixes=["/learn/"],
        )
    )


@pytest.fixture()
def index_document() -> list[dict]:
    """index.json with three steps, a conclusion page and non-milestone noise.

    Declared steps are out of order and the conclusion page is listed first,
    so the parsed order only comes out right if sorting works.
    """
    return [
        {
            "permalink": "/learn/topic/finish/",
            "params": {
                "title": "Wrap up",
                "step": 2,
                "cta": {
                    "type": "conclusion",
                    "image": {"src": "/media/done.png", "width": 600, "height": 120},
                },
            },
        },
        {"permalink": "/learn/topic/", "params": {"title": "Topic"}},
        {
            "permalink": "/learn/topic/two/",
            "params": {
                "title": "Second",
                "step": 3,
                "duration": "5 min",
                "side_journeys": {
                    "items": [
                        {"title": "Watch it", "link": "https://www.youtube.com/watch?v=abc"},
                        {"title": "No link"},
                    ]
                },
            },
        },
        {"permalink": "/learn/topic/one/", "params": {"title": "First", "step": 1}},
        {"permalink": "/learn/topic/hidden/", "params": {"step": 4, "grafana": {"skip": True}}},
        {
            "permalink": "/learn/topic/three/",
            "params": {
                "menutitle": "Third",
                "step": 5,
                "related_journeys": {
                    "heading": "Keep going",
                    "items": [{"title": "Other journey", "link": "/learn/other/"}],
                },
            },
        },
    ]


@pytest.fixture()
def index_json(index_document: list[dict]) -> str:
    return json.dumps(index_document)


@pytest.fixture()
def milestones() -> list[Milestone]:
    """Four milestones as parsed from ``index_document``."""
    return [
        Milestone(ordinal=1, title="First", url=f"{JOURNEY_BASE}one/"),
        Milestone(ordinal=2, title="Second", url=f"{JOURNEY_BASE}two/"),
        Milestone(ordinal=3, title="Third", url=f"{JOURNEY_BASE}three/"),
        Milestone(ordinal=4, title="Wrap up", url=f"{JOURNEY_BASE}finish/"),
    ]


@pytest.fixture()
def cover_html() -> str:
    return """<!DOCTYPE html>
<html><head><title>Topic | Docs</title><script>track()</script></head>
<body>
<h1>Learn the topic</h1>
<p>Short intro.</p>
<p>This journey walks you through the whole topic end to end.</p>
<p>You will set things up and then explore what you built.</p>
</body></html>
"""


@pytest.fixture()
def milestone_html() -> str:
    return """<html><body>
<h1>Second step</h1>
<p>Read the <a href="/learn/topic/one/">first step</a> or the <a href="https://elsewhere.example/x">guide</a>.</p>
<img class="lazyload" data-src="/media/shot.png">
</body></html>
"""
