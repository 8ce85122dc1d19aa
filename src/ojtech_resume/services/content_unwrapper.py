"""Peel repeated layers of JSON escaping off stored CV content.

Content that has been through several serialize/deserialize round trips
(generation service -> storage -> API) can arrive as a JSON string that
decodes to another JSON string, and so on. :func:`unwrap` decodes one
layer per level until it reaches HTML text or a structured value, bounded
by :data:`MAX_UNWRAP_DEPTH`.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ojtech_resume.constants.resume_constants import MAX_UNWRAP_DEPTH
from ojtech_resume.services.content_sniffer import (
    ContentFormat,
    contains_html_markers,
    looks_like_json,
    sniff,
)

__all__ = [
    "ResolvedContent",
    "resolve_content",
    "unwrap",
]

logger = logging.getLogger(__name__)

# HTML text, a decoded JSON object/array, or the input handed back untouched.
ResolvedContent = Any


def unwrap(value: Any, depth: int = 0) -> ResolvedContent:
    """Decode *value* layer by layer until it stops being a JSON string.

    Args:
        value: Raw content. Non-strings and HTML strings are returned as-is.
        depth: Current recursion level. Callers normally leave this at 0.

    Returns:
        The HTML string, the decoded structured value, or the last string
        reached when parsing fails or the depth ceiling is hit.
    """
    if not isinstance(value, str) or contains_html_markers(value):
        return value

    if depth > MAX_UNWRAP_DEPTH:
        logger.warning("Maximum unwrap depth %d reached, returning current value", MAX_UNWRAP_DEPTH)
        return value

    try:
        parsed = json.loads(value)
    except (ValueError, RecursionError):
        logger.debug("Content is not valid JSON at depth %d", depth)
        return value

    if isinstance(parsed, str):
        if contains_html_markers(parsed):
            logger.debug("Found HTML content after %d unwrap levels", depth + 1)
            return parsed
        if looks_like_json(parsed):
            return unwrap(parsed, depth + 1)

    return parsed


def resolve_content(raw: Any) -> ResolvedContent:
    """Sniff *raw* and unwrap it only when it looks like encoded JSON."""
    if sniff(raw) is ContentFormat.LIKELY_JSON:
        return unwrap(raw)
    return raw
