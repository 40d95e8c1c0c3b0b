"""Plain-text helpers for HTML post bodies."""

from __future__ import annotations

import html
import math
import re
import unicodedata

_TAG_RE = re.compile(r"<[^>]*>")
_WS_RE = re.compile(r"\s+")
_SLUG_STRIP_RE = re.compile(r"[^a-z0-9\s-]")
_SLUG_DASH_RE = re.compile(r"[\s_-]+")


def strip_html(value: str | None) -> str:
    """Return the text content of an HTML fragment with whitespace collapsed."""
    if not value:
        return ""
    # Tags are replaced by a space so adjacent blocks do not run together.
    text = _TAG_RE.sub(" ", value)
    text = html.unescape(text)
    return _WS_RE.sub(" ", text).strip()


def extract_excerpt(value: str | None, max_length: int = 160) -> str:
    """Return a plain-text excerpt of at most ``max_length`` characters.

    Longer text is cut at the last word boundary and suffixed with ``...``.
    """
    text = strip_html(value)
    if len(text) <= max_length:
        return text
    cut = text[:max_length]
    boundary = cut.rfind(" ")
    if boundary > 0:
        cut = cut[:boundary]
    return cut.rstrip(" ,.;:") + "..."


def slugify(value: str) -> str:
    """Return a lowercase, dash-separated ASCII slug for ``value``."""
    normalized = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    normalized = _SLUG_STRIP_RE.sub("", normalized.lower())
    return _SLUG_DASH_RE.sub("-", normalized).strip("-")


def word_count(value: str | None) -> int:
    text = strip_html(value)
    return len(text.split()) if text else 0


def reading_time_minutes(value: str | None, words_per_minute: int = 200) -> int:
    """Estimated reading time in whole minutes, never less than one."""
    return max(1, math.ceil(word_count(value) / words_per_minute))
