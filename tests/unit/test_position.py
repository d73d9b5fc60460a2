"""Unit tests for journeydocs.position."""

from __future__ import annotations

from journeydocs.models.journey import Milestone
from journeydocs.position import COVER_PAGE, find_ordinal, mark_active, resolve_position

BASE = "https://docs.example/learn/topic/"


class TestFindOrdinal:
    def test_exact_match(self, milestones: list[Milestone]) -> None:
        assert find_ordinal(BASE + "two/", milestones) == 2

    def test_trailing_slash_toggled(self, milestones: list[Milestone]) -> None:
        assert find_ordinal(BASE + "two", milestones) == 2

    def test_content_endpoint_matches_page(self, milestones: list[Milestone]) -> None:
        assert find_ordinal(BASE + "three/unstyled.html", milestones) == 3

    def test_fragment_ignored(self, milestones: list[Milestone]) -> None:
        assert find_ordinal(BASE + "one/#install", milestones) == 1

    def test_path_match_across_hosts(self, milestones: list[Milestone]) -> None:
        assert find_ordinal("http://mirror.example/learn/topic/finish", milestones) == 4

    def test_base_url_is_cover(self, milestones: list[Milestone]) -> None:
        assert find_ordinal(BASE, milestones, BASE) == COVER_PAGE

    def test_unknown_is_cover(self, milestones: list[Milestone]) -> None:
        assert find_ordinal("https://docs.example/somewhere/else/", milestones, BASE) == 0

    def test_empty_milestones(self) -> None:
        assert find_ordinal(BASE + "two/", []) == 0


class TestMarkActive:
    def test_exactly_one_active(self, milestones: list[Milestone]) -> None:
        mark_active(milestones, 3)
        assert [m.is_active for m in milestones] == [False, False, True, False]

    def test_cover_clears_all(self, milestones: list[Milestone]) -> None:
        milestones[0].is_active = True
        mark_active(milestones, 0)
        assert not any(m.is_active for m in milestones)

    def test_previous_active_cleared(self, milestones: list[Milestone]) -> None:
        mark_active(milestones, 1)
        mark_active(milestones, 2)
        assert [m.ordinal for m in milestones if m.is_active] == [2]


class TestResolvePosition:
    def test_returns_ordinal_and_marks(self, milestones: list[Milestone]) -> None:
        assert resolve_position(BASE + "two/", milestones, BASE) == 2
        assert [m.ordinal for m in milestones if m.is_active] == [2]

    def test_cover_page(self, milestones: list[Milestone]) -> None:
        assert resolve_position(BASE, milestones, BASE) == 0
        assert not any(m.is_active for m in milestones)
