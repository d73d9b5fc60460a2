"""Content transformer for journey pages.

Pipeline: ``parse_document`` turns raw HTML into a ``nodes.Element`` tree,
then an ordered sequence of passes rewrites it:

  1. Resource rewriting: absolute image/iframe sources, lazy-load markers dropped
  2. Link classification: internal docs links vs external (new context) links
  3. Structural normalising: headings, code blocks, tables, collapsibles, blocks
  4. Affordance synthesis: start CTA on the cover page; conclusion banner,
     link groups and pagination on milestone pages

Each pass is a plain ``(root, context) -> root`` function and only touches the
node tree, so it can be tested on a hand-built tree.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from journeydocs import navigation
from journeydocs.nodes import Element, Text, el
from journeydocs.urls import absolutize

if TYPE_CHECKING:
    from journeydocs.models.journey import ImageRef, LinkGroup, Milestone

SUMMARY_MIN_LENGTH = 20
SUMMARY_PARAGRAPHS = 3
LONG_CODE_THRESHOLD = 100
DEFAULT_TITLE = "Learning Journey"

LAZY_CLASSES = ("lazyload", "lazyloaded", "ls-is-cached")
TABLE_WRAPPER_CLASS = "responsive-table-wrapper"

_DROPPED_TAGS = frozenset({"script", "style", "noscript", "head", "title", "template"})
_HEADING_RE = re.compile(r"^h([1-6])$")
_ALPINE_PREFIXES = ("x-", "@", ":")


@dataclass(frozen=True)
class TransformContext:
    """Everything the passes need to know about the page being transformed."""

    docs_base_url: str
    content_path: str = "/docs/"
    current_ordinal: int = 0
    milestones: Sequence[Milestone] = field(default_factory=tuple)

    @property
    def is_cover_page(self) -> bool:
        return navigation.is_cover_page(self.current_ordinal)

    @property
    def total_milestones(self) -> int:
        return len(self.milestones)

    @property
    def active_milestone(self) -> Milestone | None:
        return navigation.current_milestone(self.current_ordinal, list(self.milestones))


@dataclass
class TransformResult:
    body: Element
    title: str | None = None
    summary: str | None = None


Pass = Callable[[Element, TransformContext], Element]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _convert(node: Tag) -> list[Element | Text]:
    children: list[Element | Text] = []
    for child in node.children:
        # Comments, doctypes, CDATA and processing instructions
        if isinstance(child, PreformattedString):
            continue
        if isinstance(child, NavigableString):
            children.append(Text(str(child)))
            continue
        if not isinstance(child, Tag) or child.name in _DROPPED_TAGS:
            continue
        attrs = {
            name: " ".join(value) if isinstance(value, list) else str(value)
            for name, value in child.attrs.items()
        }
        children.append(Element(child.name, attrs, _convert(child)))
    return children


def parse_document(raw: str) -> tuple[Element, str | None]:
    """Parse raw HTML into a ``body`` element plus the ``<title>`` text, if any."""
    soup = BeautifulSoup(raw, "html.parser")
    title_tag = soup.find("title")
    head_title = title_tag.get_text(strip=True) if title_tag is not None else None
    container = soup.body or soup.html or soup
    return Element("body", {}, _convert(container)), head_title or None


def _normalise_space(text: str) -> str:
    return " ".join(text.split())


def extract_title(root: Element) -> str | None:
    heading = next(iter(root.find_all("h1")), None)
    if heading is None:
        return None
    return _normalise_space(heading.text_content()) or None


def extract_summary(root: Element) -> str:
    """Join the first three paragraphs longer than the minimum length."""
    parts: list[str] = []
    for paragraph in root.find_all("p"):
        text = _normalise_space(paragraph.text_content())
        if len(text) > SUMMARY_MIN_LENGTH:
            parts.append(text)
            if len(parts) >= SUMMARY_PARAGRAPHS:
                break
    return " ".join(parts)


# ---------------------------------------------------------------------------
# Pass 1: resource rewriting
# ---------------------------------------------------------------------------


def _iframe_kind(src: str) -> str:
    if "youtube.com" in src or "youtu.be" in src:
        return "youtube"
    if "vimeo.com" in src:
        return "vimeo"
    return "embed"


_IFRAME_TITLES = {
    "youtube": "YouTube video player",
    "vimeo": "Vimeo video player",
    "embed": "Embedded content",
}


def rewrite_resources(root: Element, ctx: TransformContext) -> Element:
    """Make image and iframe sources absolute and drop lazy-load markers."""
    targets = [(node, ancestors[-1]) for node, ancestors in root.walk() if node.tag in ("img", "iframe")]
    for node, parent in targets:
        source = node.attrs.get("data-src") or node.attrs.get("src")
        if source:
            node.attrs["src"] = absolutize(source, ctx.docs_base_url)
            node.attrs.pop("data-src", None)
            node.remove_class(*LAZY_CLASSES)

        if node.tag == "img":
            node.add_class("journey-image")
            node.attrs["loading"] = "lazy"
            if not node.attrs.get("alt"):
                node.attrs["alt"] = "Learning journey image"
            continue

        kind = _iframe_kind(node.attrs.get("src", ""))
        node.add_class("journey-iframe")
        if not node.attrs.get("title"):
            node.attrs["title"] = _IFRAME_TITLES[kind]
        if kind == "embed":
            node.add_class("journey-general-iframe")
            continue

        node.add_class("journey-video-iframe")
        node.attrs.pop("width", None)
        node.attrs.pop("height", None)
        wrapper = el("div", {"class": "journey-iframe-wrapper journey-video-wrapper"}, node)
        parent.replace_child(node, wrapper)
    return root


# ---------------------------------------------------------------------------
# Pass 2: link classification
# ---------------------------------------------------------------------------


def is_internal_link(url: str, ctx: TransformContext) -> bool:
    """True when ``url`` lives on the docs host under the content path."""
    target = urlsplit(url)
    docs = urlsplit(ctx.docs_base_url)
    return (
        target.scheme in ("http", "https")
        and target.netloc == docs.netloc
        and target.path.startswith(ctx.content_path)
    )


def classify_anchor(anchor: Element, ctx: TransformContext) -> None:
    href = anchor.attrs.get("href", "").strip()
    if not href or href.startswith("#"):
        return
    target = absolutize(href, ctx.docs_base_url)
    anchor.attrs["href"] = target
    if is_internal_link(target, ctx):
        # The host intercepts internal links and opens them in-app.
        anchor.attrs["data-link-type"] = "internal"
        anchor.attrs.pop("target", None)
        anchor.attrs.pop("rel", None)
    else:
        anchor.attrs["data-link-type"] = "external"
        anchor.attrs["target"] = "_blank"
        anchor.attrs["rel"] = "noopener noreferrer"


def classify_links(root: Element, ctx: TransformContext) -> Element:
    for anchor in root.find_all("a"):
        classify_anchor(anchor, ctx)
    return root


# ---------------------------------------------------------------------------
# Pass 3: structural normalisation
# ---------------------------------------------------------------------------


def tag_headings(root: Element, ctx: TransformContext) -> Element:
    for node in root.elements():
        match = _HEADING_RE.match(node.tag)
        if match:
            node.attrs["data-heading-level"] = match.group(1)
            node.add_class("journey-heading", f"journey-heading-{node.tag}")
    return root


def _is_standalone(parent: Element, node: Element) -> bool:
    return all(
        child is node or (isinstance(child, Text) and not child.value.strip()) for child in parent.children
    )


def _is_long_code(text: str) -> bool:
    return "\n" in text.strip() or len(text.strip()) > LONG_CODE_THRESHOLD


def promote_code_blocks(root: Element, ctx: TransformContext) -> Element:
    """Promote standalone long inline code spans to ``pre`` blocks.

    A paragraph whose only content is such a span is replaced by the block.
    """
    for pre in root.find_all("pre"):
        pre.add_class("journey-code-block")

    targets = [
        (node, ancestors)
        for node, ancestors in root.walk()
        if node.tag == "code" and not any(a.tag == "pre" for a in ancestors)
    ]
    for code, ancestors in targets:
        parent = ancestors[-1]
        if not (_is_long_code(code.text_content()) and _is_standalone(parent, code)):
            code.add_class("journey-inline-code")
            continue
        block = el("pre", {"class": "journey-code-block"}, code)
        if parent.tag == "p" and len(ancestors) >= 2:
            ancestors[-2].replace_child(parent, block)
        else:
            parent.replace_child(code, block)
    return root


def wrap_tables(root: Element, ctx: TransformContext) -> Element:
    targets = [
        (node, ancestors[-1])
        for node, ancestors in root.walk()
        if node.tag == "table" and not any(a.has_class(TABLE_WRAPPER_CLASS) for a in ancestors)
    ]
    for table, parent in targets:
        table.add_class("journey-table")
        parent.replace_child(table, el("div", {"class": TABLE_WRAPPER_CLASS}, table))
    return root


def _strip_template_attrs(node: Element) -> None:
    for name in [n for n in node.attrs if n.startswith(_ALPINE_PREFIXES)]:
        del node.attrs[name]


def normalize_collapsibles(root: Element, ctx: TransformContext) -> Element:
    """Turn template-driven ``.collapse[x-data]`` sections into plain collapsibles.

    The section, its trigger and its content region are identified with
    ``data-collapse-*`` attributes; content starts hidden.
    """
    sections = [node for node in root.elements() if node.has_class("collapse") and "x-data" in node.attrs]
    for index, section in enumerate(sections):
        collapse_id = f"collapse-{index}"
        _strip_template_attrs(section)
        section.add_class("journey-collapse")
        section.attrs["data-collapse-id"] = collapse_id
        section.attrs["data-collapsed"] = "true"

        trigger = section.find_class("collapse-trigger")
        if trigger is not None:
            _strip_template_attrs(trigger)
            trigger.add_class("journey-collapse-trigger")
            trigger.attrs["data-collapse-target"] = collapse_id
            trigger.attrs["aria-expanded"] = "false"
            icon = trigger.find_class("collapse-trigger__icon")
            if icon is not None:
                _strip_template_attrs(icon)
                icon.add_class("journey-collapse-icon")

        content = section.find_class("collapse-content")
        if content is not None:
            _strip_template_attrs(content)
            content.add_class("journey-collapse-content")
            content.attrs["data-collapse-id"] = collapse_id
            content.attrs["hidden"] = ""
            inner = content.find_class("collapse-content__inner")
            if inner is not None:
                _strip_template_attrs(inner)
                inner.add_class("journey-collapse-content-inner")
    return root


def tag_content_blocks(root: Element, ctx: TransformContext) -> Element:
    for node in root.elements():
        if node.tag in ("ul", "ol"):
            node.add_class("journey-list")
        elif node.tag == "p":
            node.add_class("journey-paragraph")
        if node.has_class("admonition"):
            node.add_class("journey-admonition")
            title = node.find(lambda n: n.has_class("title"))
            if title is not None:
                title.add_class("admonition-title")
    return root


# ---------------------------------------------------------------------------
# Pass 4: affordance synthesis
# ---------------------------------------------------------------------------


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


def start_cta(ctx: TransformContext) -> Element:
    first_url = navigation.next_url(0, list(ctx.milestones)) or ""
    return el(
        "div",
        {"class": "journey-start-section"},
        el(
            "div",
            {"class": "journey-start-container"},
            el("h3", {}, "Ready to begin?"),
            el(
                "button",
                {
                    "class": "journey-start-button",
                    "type": "button",
                    "data-journey-start": "true",
                    "data-milestone-url": first_url,
                },
                "Start journey",
            ),
            el("p", {"class": "journey-start-description"}, _plural(ctx.total_milestones, "milestone")),
        ),
    )


def conclusion_banner(image: ImageRef) -> Element:
    return el(
        "div",
        {"class": "journey-conclusion-image"},
        el(
            "img",
            {
                "src": image.src,
                "alt": "Journey complete",
                "width": str(image.width),
                "height": str(image.height),
                "class": "journey-conclusion-header",
            },
        ),
    )


def link_group_section(group: LinkGroup, kind: str, ctx: TransformContext) -> Element:
    """Collapsible list of cross-links; ``kind`` is ``side-journeys`` or ``related-journeys``."""
    item_kind = kind.removesuffix("s")
    items: list[Element | Text] = []
    for item in group.items:
        anchor = el(
            "a",
            {"href": item.url, "class": f"journey-{item_kind}-item", f"data-{item_kind}-link": "true"},
            el("span", {"class": f"journey-{item_kind}-title"}, item.title),
        )
        if kind == "side-journeys":
            label = "Video" if _iframe_kind(item.url) != "embed" else "External"
            anchor.append(el("span", {"class": f"journey-{item_kind}-type"}, label))
        classify_anchor(anchor, ctx)
        items.append(el("li", {}, anchor))

    return el(
        "div",
        {"class": f"journey-{kind}-section"},
        el(
            "div",
            {"class": "journey-collapse", "data-collapse-id": kind, "data-collapsed": "true"},
            el(
                "button",
                {
                    "class": "journey-collapse-trigger",
                    "type": "button",
                    "data-collapse-target": kind,
                    "aria-expanded": "false",
                },
                el("span", {"class": f"journey-{kind}-title"}, group.heading),
            ),
            el(
                "div",
                {"class": "journey-collapse-content", "data-collapse-id": kind, "hidden": ""},
                Element("ul", {"class": f"journey-{kind}-list"}, items),
            ),
        ),
    )


def bottom_navigation(ctx: TransformContext) -> Element:
    milestones = list(ctx.milestones)
    previous = navigation.previous_url(ctx.current_ordinal, milestones)
    upcoming = navigation.next_url(ctx.current_ordinal, milestones)

    def button(direction: str, label: str, target: str | None) -> Element:
        attrs = {"class": "journey-bottom-nav-button", "type": "button", "data-bottom-nav": direction}
        if target is None:
            attrs["disabled"] = ""
        else:
            attrs["data-milestone-url"] = target
        return el("button", attrs, label)

    return el(
        "nav",
        {"class": "journey-bottom-navigation", "aria-label": "Journey pagination"},
        button("previous", "Previous", previous),
        el(
            "span",
            {"class": "journey-bottom-nav-milestone"},
            f"Milestone {ctx.current_ordinal} of {ctx.total_milestones}",
        ),
        button("next", "Next", upcoming),
    )


def append_affordances(root: Element, ctx: TransformContext) -> Element:
    if ctx.is_cover_page:
        if ctx.total_milestones > 0:
            root.append(start_cta(ctx))
        return root

    active = ctx.active_milestone
    if active is not None:
        if active.conclusion_image is not None:
            root.append(conclusion_banner(active.conclusion_image))
        if active.side_journeys is not None and active.side_journeys.items:
            root.append(link_group_section(active.side_journeys, "side-journeys", ctx))
        if active.related_journeys is not None and active.related_journeys.items:
            root.append(link_group_section(active.related_journeys, "related-journeys", ctx))
    root.append(bottom_navigation(ctx))
    return root


DEFAULT_PASSES: tuple[Pass, ...] = (
    rewrite_resources,
    classify_links,
    tag_headings,
    promote_code_blocks,
    wrap_tables,
    normalize_collapsibles,
    tag_content_blocks,
    append_affordances,
)


def apply_passes(root: Element, ctx: TransformContext, passes: Sequence[Pass] = DEFAULT_PASSES) -> Element:
    for transform_pass in passes:
        root = transform_pass(root, ctx)
    return root


def transform(raw: str, ctx: TransformContext, passes: Sequence[Pass] = DEFAULT_PASSES) -> TransformResult:
    """Parse ``raw`` and run every pass. Only cover pages get a summary."""
    root, head_title = parse_document(raw)
    title = extract_title(root) or head_title
    summary = extract_summary(root) if ctx.is_cover_page else None
    body = apply_passes(root, ctx, passes)
    return TransformResult(body=body, title=title, summary=summary or None)
