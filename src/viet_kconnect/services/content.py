"""Summaries of post HTML for list views: excerpt text and image thumbnails.

The editor stores posts as HTML. List views never render that HTML; they
show a plain-text excerpt and up to four thumbnails scraped from ``<img>``
tags. Everything here is a pure function over strings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

__all__ = [
    "ImageSummary",
    "build_excerpt",
    "extract_images",
    "strip_html_to_text",
    "strip_template_prelude",
]

EXCERPT_LENGTH = 200
MAX_THUMBNAILS = 4

_IMG_TAG_RE = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
_ANY_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")

# src may appear anywhere among the attributes, quoted with either quote
# character; the other quote character may occur inside the value.
_SRC_ATTR_RE = re.compile(
    r"""(?<![\w-])src\s*=\s*(?:"([^"]*)"|'([^']*)')""",
    re.IGNORECASE,
)
_THUMBNAIL_FLAG_RE = re.compile(r"""data-thumbnail\s*=\s*['"]?true['"]?""", re.IGNORECASE)

# Question templates open with bold "label" paragraphs, optionally closed by
# an empty paragraph, before the member's own text.
_PRELUDE_WITH_SEPARATOR_RE = re.compile(
    r"^(?:\s*<p>\s*<strong>.*?</strong>\s*</p>\s*)+<p>\s*</p>",
    re.IGNORECASE | re.DOTALL,
)
_PRELUDE_RE = re.compile(
    r"^(?:\s*<p>\s*<strong>.*?</strong>\s*</p>\s*)+",
    re.IGNORECASE | re.DOTALL,
)


@dataclass(frozen=True)
class ImageSummary:
    thumbnails: list[str] = field(default_factory=list)
    thumbnail: str | None = None
    image_count: int = 0


def extract_images(html: str | None, max_thumbs: int = MAX_THUMBNAILS) -> ImageSummary:
    """Collect image sources in document order.

    ``image_count`` counts every ``<img>`` with a quoted ``src`` even past
    ``max_thumbs``. An image flagged ``data-thumbnail="true"`` becomes the
    cover and moves to the front of the thumbnails.
    """
    if not html:
        return ImageSummary()

    thumbnails: list[str] = []
    selected: str | None = None
    image_count = 0
    for tag in _IMG_TAG_RE.finditer(html):
        src_match = _SRC_ATTR_RE.search(tag.group(0))
        if src_match is None:
            continue
        src = src_match.group(1) if src_match.group(1) is not None else src_match.group(2)
        if not src:
            continue
        image_count += 1
        if selected is None and _THUMBNAIL_FLAG_RE.search(tag.group(0)):
            selected = src
        if len(thumbnails) < max_thumbs:
            thumbnails.append(src)

    if selected is not None:
        ordered = [selected, *(src for src in thumbnails if src != selected)]
        return ImageSummary(ordered[:max_thumbs], selected, image_count)
    return ImageSummary(thumbnails, thumbnails[0] if thumbnails else None, image_count)


def strip_html_to_text(html: str) -> str:
    text = _IMG_TAG_RE.sub("", html)
    text = _ANY_TAG_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_template_prelude(html: str) -> str:
    """Drop the bold template labels that open templated questions."""
    trimmed = html.lstrip()
    if not trimmed.startswith("<p>"):
        return html
    for pattern in (_PRELUDE_WITH_SEPARATOR_RE, _PRELUDE_RE):
        if pattern.match(trimmed):
            return pattern.sub("", trimmed, count=1).lstrip()
    return html


def build_excerpt(html: str | None, max_length: int = EXCERPT_LENGTH) -> str:
    if not html:
        return ""
    return strip_html_to_text(strip_template_prelude(html))[:max_length]
