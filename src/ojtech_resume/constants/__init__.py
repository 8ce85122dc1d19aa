from __future__ import annotations

from ojtech_resume.constants.resume_constants import (
    DEFAULT_FETCH_BACKOFF_SECONDS,
    DEFAULT_FETCH_MAX_ATTEMPTS,
    DEFAULT_TEMPLATE,
    HTML_MARKERS,
    MAX_UNWRAP_DEPTH,
)

__all__ = [
    "DEFAULT_FETCH_BACKOFF_SECONDS",
    "DEFAULT_FETCH_MAX_ATTEMPTS",
    "DEFAULT_TEMPLATE",
    "HTML_MARKERS",
    "MAX_UNWRAP_DEPTH",
]
