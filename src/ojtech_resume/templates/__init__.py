"""Template registry for resume rendering."""

from __future__ import annotations

from ojtech_resume.templates.base import ResumeTemplate
from ojtech_resume.templates.classic import ClassicResumeTemplate
from ojtech_resume.templates.modern import ModernResumeTemplate

__all__ = [
    "ResumeTemplate",
    "get_template",
    "list_templates",
]

_REGISTRY: dict[str, ResumeTemplate] = {
    "classic": ClassicResumeTemplate(),
    "modern": ModernResumeTemplate(),
}


def get_template(name: str) -> ResumeTemplate:
    """Return the template registered under *name*.

    Raises:
        ValueError: If no template with that name exists.
    """
    try:
        return _REGISTRY[name]
    except KeyError:
        available = ", ".join(sorted(_REGISTRY))
        msg = f"Unknown template {name!r}. Available: {available}"
        raise ValueError(msg) from None


def list_templates() -> list[str]:
    """Return sorted names of all registered templates."""
    return sorted(_REGISTRY)
