"""Typed document tree used by the content transformer.

A parsed page is an ``Element`` root holding ``Element`` and ``Text``
children. Transformation passes operate on this tree only, so they can be
exercised on hand-built trees without an HTML parser. ``to_html`` serialises
the tree back to markup for the host renderer.
"""

from __future__ import annotations

import html
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

VOID_TAGS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}
)


@dataclass
class Text:
    value: str


@dataclass
class Element:
    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    children: list[Element | Text] = field(default_factory=list)

    # ------------------------------------------------------------------
    # Class attribute helpers
    # ------------------------------------------------------------------

    @property
    def classes(self) -> list[str]:
        return self.attrs.get("class", "").split()

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def add_class(self, *names: str) -> None:
        current = self.classes
        current.extend(n for n in names if n not in current)
        self.attrs["class"] = " ".join(current)

    def remove_class(self, *names: str) -> None:
        remaining = [c for c in self.classes if c not in names]
        if remaining:
            self.attrs["class"] = " ".join(remaining)
        else:
            self.attrs.pop("class", None)

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def elements(self) -> Iterator[Element]:
        """Yield every descendant element in document order (not self)."""
        for child in list(self.children):
            if isinstance(child, Element):
                yield child
                yield from child.elements()

    def walk(self, ancestors: tuple[Element, ...] = ()) -> Iterator[tuple[Element, tuple[Element, ...]]]:
        """Yield ``(element, ancestors)`` pairs for every descendant element.

        ``ancestors`` runs from the outermost ancestor to the direct parent,
        and always includes ``self``.
        """
        chain = (*ancestors, self)
        for child in list(self.children):
            if isinstance(child, Element):
                yield child, chain
                yield from child.walk(chain)

    def find(self, predicate: Callable[[Element], bool]) -> Element | None:
        return next((el for el in self.elements() if predicate(el)), None)

    def find_all(self, *tags: str) -> list[Element]:
        return [el for el in self.elements() if el.tag in tags]

    def find_class(self, name: str) -> Element | None:
        return self.find(lambda el: el.has_class(name))

    def text_content(self) -> str:
        parts: list[str] = []
        for child in self.children:
            if isinstance(child, Text):
                parts.append(child.value)
            else:
                parts.append(child.text_content())
        return "".join(parts)

    def replace_child(self, old: Element | Text, new: Element | Text) -> None:
        for idx, child in enumerate(self.children):
            if child is old:
                self.children[idx] = new
                return
        raise ValueError("node is not a child of this element")

    def append(self, *nodes: Element | Text) -> Element:
        self.children.extend(nodes)
        return self

    def to_html(self) -> str:
        """Serialise the children of this element (inner HTML)."""
        return "".join(_serialise(child) for child in self.children)


def el(tag: str, attrs: dict[str, str] | None = None, *children: Element | Text | str) -> Element:
    """Shorthand constructor; bare strings become ``Text`` nodes."""
    nodes: list[Element | Text] = [Text(c) if isinstance(c, str) else c for c in children]
    return Element(tag, dict(attrs or {}), nodes)


def _serialise(node: Element | Text) -> str:
    if isinstance(node, Text):
        return html.escape(node.value, quote=False)

    attrs = "".join(
        f' {name}="{html.escape(value, quote=True)}"' if value != "" else f" {name}"
        for name, value in node.attrs.items()
    )
    if node.tag in VOID_TAGS:
        return f"<{node.tag}{attrs}>"
    inner = "".join(_serialise(child) for child in node.children)
    return f"<{node.tag}{attrs}>{inner}</{node.tag}>"
