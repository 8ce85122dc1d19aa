"""Classify raw CV content before any parsing happens.

Stored CV content can be a full HTML document, an already-decoded JSON
object, a JSON-encoded string, or free text. The sniffer only looks at the
value; it never parses or mutates it.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from ojtech_resume.constants.resume_constants import HTML_MARKERS, JSON_DELIMITERS

__all__ = [
    "ContentFormat",
    "contains_html_markers",
    "looks_like_json",
    "sniff",
]


class ContentFormat(StrEnum):
    """Shape of a raw content value."""

    HTML = "html"
    STRUCTURED_OBJECT = "structured_object"
    LIKELY_JSON = "likely_json"
    UNKNOWN = "unknown"


def contains_html_markers(text: str) -> bool:
    """Return True if *text* contains a doctype or ``<html>`` tag."""
    lowered = text.lower()
    return any(marker in lowered for marker in HTML_MARKERS)


def looks_like_json(text: str) -> bool:
    """Return True if *text* starts and ends with matching JSON delimiters."""
    stripped = text.strip()
    if len(stripped) < 2:
        return False
    closer = JSON_DELIMITERS.get(stripped[0])
    return closer is not None and stripped.endswith(closer)


def sniff(value: Any) -> ContentFormat:
    """Classify *value* without parsing it.

    HTML wins over the JSON heuristic: a string carrying HTML markers is
    never handed to a JSON parser, even when it happens to be quoted.
    """
    if not isinstance(value, str):
        return ContentFormat.STRUCTURED_OBJECT
    if contains_html_markers(value):
        return ContentFormat.HTML
    if looks_like_json(value):
        return ContentFormat.LIKELY_JSON
    return ContentFormat.UNKNOWN
