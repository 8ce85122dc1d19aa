"""Single-column, print-first resume layout."""

from __future__ import annotations

from ojtech_resume.templates.base import ResumeTemplate

__all__ = ["ClassicResumeTemplate"]


class ClassicResumeTemplate(ResumeTemplate):
    """Centered header, ruled section titles, skill chips."""

    @property
    def name(self) -> str:  # pragma: no cover
        return "Classic"

    @property
    def template_file(self) -> str:
        return "classic.html"
