"""URL resolution for journey pages.

Pure string logic with no I/O. Turns a navigational docs URL into the content
endpoint the docs host serves embeddable HTML from, plus an ordered list of
fallback forms, and computes the journey partition key ("base URL").
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import urldefrag, urlsplit

from journeydocs.config import DEFAULT_JOURNEY_PREFIXES

CONTENT_SUFFIX = "unstyled.html"
INDEX_FILE = "index.json"
INTRO_SUFFIXES = ("introduction", "overview")

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


@dataclass(frozen=True)
class ResolvedUrl:
    """Canonical content endpoint plus fallbacks, in the order they are tried."""

    primary: str
    variants: tuple[str, ...] = ()
    fragment: str | None = None

    @property
    def candidates(self) -> tuple[str, ...]:
        return (self.primary, *self.variants)


def absolutize(ref: str, docs_base_url: str) -> str:
    """Resolve a possibly relative reference against the docs host.

    ``/x`` is joined onto the host, bare ``x`` becomes ``{host}/x``, and
    protocol-relative ``//cdn/x`` gets ``https:``. Anything with a scheme
    (``http:``, ``data:``, ``mailto:`` ...) is returned unchanged.
    """
    ref = ref.strip()
    if _SCHEME_RE.match(ref):
        return ref
    if ref.startswith("//"):
        return f"https:{ref}"
    host = docs_base_url.rstrip("/")
    if ref.startswith("/"):
        return f"{host}{ref}"
    return f"{host}/{ref}"


def strip_fragment(url: str) -> str:
    return urldefrag(url).url


def strip_content_suffix(url: str) -> str:
    """Drop a trailing ``unstyled.html`` segment added for content fetching."""
    if url.endswith("/" + CONTENT_SUFFIX):
        return url[: -len(CONTENT_SUFFIX)]
    return url


def urls_equivalent(a: str, b: str) -> bool:
    """Equality with the trailing slash toggled on either side."""
    return a.rstrip("/") == b.rstrip("/")


def _content_endpoint(origin: str, path: str) -> str:
    return f"{origin}{path.rstrip('/')}/{CONTENT_SUFFIX}"


def resolve_content_url(url: str, docs_base_url: str) -> ResolvedUrl:
    """Compute the content endpoint for ``url`` and its fallback variants.

    Variant order (first success wins, each tried at most once):
      1. The bare page URL with its trailing slash toggled
      2. Introductory sub-pages (``introduction``, ``overview``)
      3. The parent path, then the grandparent path
    The fragment is split off and returned separately so the caller can
    reattach it for in-page scrolling.
    """
    page, fragment = urldefrag(absolutize(url, docs_base_url))
    anchor = fragment or None
    parts = urlsplit(page)

    if parts.path.endswith("/" + CONTENT_SUFFIX) or parts.path.endswith(INDEX_FILE):
        return ResolvedUrl(primary=page, fragment=anchor)

    origin = f"{parts.scheme}://{parts.netloc}"
    trimmed = parts.path.rstrip("/")
    primary = _content_endpoint(origin, trimmed)

    variants: list[str] = []
    toggled = trimmed if parts.path.endswith("/") else f"{trimmed}/"
    variants.append(f"{origin}{toggled}")

    for suffix in INTRO_SUFFIXES:
        variants.append(_content_endpoint(origin, f"{trimmed}/{suffix}"))

    segments = [s for s in trimmed.split("/") if s]
    for drop in (1, 2):
        if len(segments) > drop:
            variants.append(_content_endpoint(origin, "/" + "/".join(segments[:-drop])))

    seen = {primary}
    ordered: list[str] = []
    for variant in variants:
        if variant not in seen:
            seen.add(variant)
            ordered.append(variant)

    return ResolvedUrl(primary=primary, variants=tuple(ordered), fragment=anchor)


@lru_cache(maxsize=32)
def _journey_pattern(prefix: str) -> re.Pattern[str]:
    normalised = "/" + prefix.strip("/") + "/"
    return re.compile(rf"^(https?://[^/?#]+{re.escape(normalised)}[^/?#]+)(?:[/?#]|$)")


def base_url_of(url: str, prefixes: list[str] | tuple[str, ...] = tuple(DEFAULT_JOURNEY_PREFIXES)) -> str:
    """Return the journey root (with trailing slash) for ``url``.

    A URL that does not sit under any known journey prefix is returned
    unchanged and acts as its own partition key.
    """
    for prefix in prefixes:
        match = _journey_pattern(prefix).match(url)
        if match:
            return match.group(1) + "/"
    return url


def is_under(url: str, base_url: str) -> bool:
    """True when ``url`` is the journey root itself or any page below it."""
    root = base_url.rstrip("/")
    page = strip_fragment(url).rstrip("/")
    return page == root or page.startswith(root + "/")


def milestone_slug(url: str) -> str:
    """Last path segment of a milestone URL, ignoring content suffixes.

    ``https://host/docs/learning-journeys/j/select-platform/unstyled.html``
    gives ``"select-platform"``.
    """
    clean = strip_content_suffix(strip_fragment(url)).rstrip("/")
    return clean.rsplit("/", 1)[-1] if clean else ""
