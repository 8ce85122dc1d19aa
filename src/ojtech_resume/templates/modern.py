"""Resume layout with a dark header banner and professional headline."""

from __future__ import annotations

from ojtech_resume.templates.base import ResumeTemplate

__all__ = ["ModernResumeTemplate"]


class ModernResumeTemplate(ResumeTemplate):
    """Banner header showing the headline from contact info or latest role."""

    @property
    def name(self) -> str:  # pragma: no cover
        return "Modern"

    @property
    def template_file(self) -> str:
        return "modern.html"
