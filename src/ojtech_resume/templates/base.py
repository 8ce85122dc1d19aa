"""Abstract base class for pluggable HTML resume templates."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

if TYPE_CHECKING:
    from ojtech_resume.services.resume_document import ResumeDocument

__all__ = ["ResumeTemplate", "get_environment"]

_TEMPLATE_DIR = Path(__file__).parent / "html"
_PROTOCOL = re.compile(r"^https?://", re.IGNORECASE)


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    """Return the shared Jinja environment.

    Autoescaping is on for every template, including ones rendered from
    strings, so resume field values are always inserted as text.
    """
    env = Environment(
        loader=FileSystemLoader(_TEMPLATE_DIR),
        autoescape=select_autoescape(default=True, default_for_string=True),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["display_url"] = ResumeTemplate._strip_protocol
    return env


class ResumeTemplate(ABC):
    """Interface that every resume template must implement."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable template name shown in the UI."""

    @property
    @abstractmethod
    def template_file(self) -> str:
        """File name of the Jinja template under ``templates/html``."""

    def render(self, doc: ResumeDocument) -> str:
        """Render *doc* into a complete, self-contained HTML document."""
        template = get_environment().get_template(self.template_file)
        return template.render(doc=doc)

    # ------------------------------------------------------------------
    # Shared helpers available to all templates
    # ------------------------------------------------------------------

    @staticmethod
    def _strip_protocol(url: str) -> str:
        """Drop a leading ``http://`` or ``https://`` and any trailing slash."""
        return _PROTOCOL.sub("", url).rstrip("/")
