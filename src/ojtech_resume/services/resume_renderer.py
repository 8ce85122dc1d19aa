"""Render resolved CV content to a self-contained HTML document.

:func:`render` is the pure document -> HTML step. :func:`render_content`
runs the whole pipeline on raw stored content: sniff, unwrap, normalize,
render, with HTML content passed through untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ojtech_resume.constants.resume_constants import DEFAULT_TEMPLATE
from ojtech_resume.services.content_sniffer import ContentFormat, contains_html_markers, sniff
from ojtech_resume.services.content_unwrapper import resolve_content
from ojtech_resume.services.cv_errors import CvPipelineError, MalformedContent
from ojtech_resume.services.resume_document import ResumeDocument
from ojtech_resume.services.resume_normalizer import normalize, peel_wrappers
from ojtech_resume.templates import get_template
from ojtech_resume.templates.base import get_environment

__all__ = [
    "RenderOutcome",
    "RenderPath",
    "render",
    "render_content",
    "wrap_plain_text",
]

logger = logging.getLogger(__name__)


class RenderPath(StrEnum):
    """How a piece of raw content ended up as HTML."""

    HTML = "html"
    CACHED = "cached"
    DOCUMENT = "document"
    TEXT = "text"
    EMPTY = "empty"


@dataclass(frozen=True)
class RenderOutcome:
    """Result of :func:`render_content`.

    Attributes:
        html: Finished HTML document; empty only when ``error`` is set.
        path: Which branch produced the HTML.
        document: The normalized document, when one was built.
        error: Taxonomy error for content that could not be rendered.
    """

    html: str
    path: RenderPath
    document: ResumeDocument | None = None
    error: CvPipelineError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def render(doc: ResumeDocument, template_name: str = DEFAULT_TEMPLATE) -> str:
    """Render *doc* with the registered template *template_name*."""
    return get_template(template_name).render(doc)


def wrap_plain_text(text: str) -> str:
    """Wrap free text in a minimal HTML document, escaped."""
    return get_environment().get_template("plain_text.html").render(text=text)


def _is_absent(raw: Any) -> bool:
    if raw is None:
        return True
    return isinstance(raw, str) and not raw.strip()


def _absent() -> RenderOutcome:
    return RenderOutcome(html="", path=RenderPath.EMPTY, error=MalformedContent())


def render_content(raw: Any, template_name: str = DEFAULT_TEMPLATE) -> RenderOutcome:
    """Resolve, normalize and render raw stored content.

    CV-record and ``jsonContent`` wrappers are peeled first, so HTML kept
    inside a record's ``parsedResume`` is passed through like top-level HTML.

    Args:
        raw: Stored CV content of unknown shape.
        template_name: Template used when a document has to be rendered.

    Returns:
        A :class:`RenderOutcome`. Absent content yields ``MalformedContent``;
        content that cannot be recognized degrades to the empty document.
    """
    if _is_absent(raw):
        return _absent()

    if sniff(raw) is ContentFormat.HTML:
        return RenderOutcome(html=raw, path=RenderPath.HTML)

    resolved = peel_wrappers(resolve_content(raw))
    if _is_absent(resolved):
        return _absent()
    if isinstance(resolved, str):
        if contains_html_markers(resolved):
            return RenderOutcome(html=resolved, path=RenderPath.HTML)
        if sniff(resolved) is ContentFormat.UNKNOWN:
            return RenderOutcome(html=wrap_plain_text(resolved), path=RenderPath.TEXT)
        logger.warning("Content still looks like JSON after unwrapping, rendering empty resume")
        doc = ResumeDocument.empty()
    else:
        doc = normalize(resolved)
        if doc.is_empty:
            logger.warning("Could not recover a resume document, rendering empty resume")
    return RenderOutcome(html=render(doc, template_name), path=RenderPath.DOCUMENT, document=doc)
