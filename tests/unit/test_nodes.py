"""Unit tests for journeydocs.nodes."""

from __future__ import annotations

import pytest

from journeydocs.nodes import Element, Text, el


class TestClasses:
    def test_add_class_dedupes(self) -> None:
        node = el("p", {"class": "a"})
        node.add_class("a", "b")
        assert node.attrs["class"] == "a b"

    def test_remove_last_class_drops_attribute(self) -> None:
        node = el("img", {"class": "lazyload"})
        node.remove_class("lazyload")
        assert "class" not in node.attrs

    def test_has_class(self) -> None:
        assert el("div", {"class": "collapse open"}).has_class("open")
        assert not el("div").has_class("open")


class TestTraversal:
    def test_elements_excludes_self(self) -> None:
        root = el("body", {}, el("p", {}, el("a")), el("ul"))
        assert [node.tag for node in root.elements()] == ["p", "a", "ul"]

    def test_walk_ancestors_end_with_parent(self) -> None:
        link = el("a")
        paragraph = el("p", {}, link)
        root = el("body", {}, paragraph)
        chains = {node.tag: ancestors for node, ancestors in root.walk()}
        assert chains["p"] == (root,)
        assert chains["a"][-1] is paragraph
        assert chains["a"][0] is root

    def test_find_class_and_find_all(self) -> None:
        root = el("body", {}, el("div", {"class": "x"}), el("p"), el("p"))
        assert root.find_class("x") is not None
        assert root.find_class("missing") is None
        assert len(root.find_all("p")) == 2

    def test_text_content(self) -> None:
        root = el("p", {}, "Hello ", el("b", {}, "world"), "!")
        assert root.text_content() == "Hello world!"


class TestMutation:
    def test_replace_child_by_identity(self) -> None:
        first = el("span")
        second = el("span")
        root = el("p", {}, first, second)
        replacement = el("em")
        root.replace_child(second, replacement)
        assert root.children == [first, replacement]
        assert root.children[1] is replacement

    def test_replace_missing_child_raises(self) -> None:
        with pytest.raises(ValueError):
            el("p").replace_child(el("span"), el("em"))

    def test_append_returns_self(self) -> None:
        root = el("ul")
        assert root.append(el("li"), Text("x")) is root
        assert len(root.children) == 2


class TestSerialise:
    def test_escapes_text_and_attributes(self) -> None:
        root = el("body", {}, el("a", {"href": '/x?a=1&b="2"'}, "<tag> & more"))
        assert root.to_html() == '<a href="/x?a=1&amp;b=&quot;2&quot;">&lt;tag&gt; &amp; more</a>'

    def test_void_and_boolean_attributes(self) -> None:
        root = el("body", {}, el("img", {"src": "a.png"}), el("button", {"disabled": ""}, "Go"))
        assert root.to_html() == '<img src="a.png"><button disabled>Go</button>'

    def test_el_wraps_strings(self) -> None:
        node = el("p", None, "text")
        assert node == Element("p", {}, [Text("text")])
