"""AI collaborator that authors resume content from a student profile."""

from __future__ import annotations

import asyncio
import json
import logging
import re
from collections.abc import Mapping
from typing import Any, Protocol

from ojtech_resume.services.cv_errors import (
    GenerationEndpointUnavailable,
    GenerationTransientFailure,
)
from ojtech_resume.services.llm_providers import LLMError
from ojtech_resume.services.llm_service import LLMService
from ojtech_resume.services.resume_normalizer import synthesize_canonical

__all__ = [
    "CV_SYSTEM_INSTRUCTIONS",
    "ContentGenerator",
    "GeminiContentGenerator",
    "build_profile_prompt",
    "strip_code_fences",
]

logger = logging.getLogger(__name__)

CV_SYSTEM_INSTRUCTIONS = """\
You write ATS-friendly resumes for students applying to internships and
entry-level jobs. Rewrite the draft below into polished resume content.

Rules:
- Respond with a single JSON object and nothing else.
- Keep exactly these keys: contactInfo, professionalSummary, skills,
  experience, projects, education, certifications.
- contactInfo has name, email, phone, location, linkedin, github, portfolio
  and professionalTitle.
- professionalSummary.summaryPoints is a list of 2-3 short sentences.
- skills.skillsList is a list of skill names.
- experience.experiences is a list of objects with title, company, location,
  dateRange and achievements (a list of strong, quantified bullet points).
- projects.projectsList is a list of objects with name, technologies and
  highlights (a list of bullet points).
- education has university, major, graduationYear and location.
- certifications.certificationsList is a list of objects with name, issuer
  and dateReceived.
- Never invent employers, degrees or certifications that are not in the draft.
  Leave a value empty rather than guessing.
"""

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?```$", re.DOTALL)


class ContentGenerator(Protocol):
    """Async interface for the AI content collaborator.

    ``generate`` raises :class:`GenerationEndpointUnavailable` when the
    service is misconfigured (404) and :class:`GenerationTransientFailure`
    for every other failure.
    """

    async def generate(self, profile: dict) -> str: ...


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code fence, if the model added one."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    return match.group(1).strip() if match else stripped


def build_profile_prompt(profile: Mapping[str, Any]) -> str:
    """Render *profile* as the draft resume JSON handed to the model."""
    return json.dumps(synthesize_canonical(profile), indent=2, ensure_ascii=False)


class GeminiContentGenerator:
    """:class:`ContentGenerator` that calls :class:`LLMService`.

    The service is created on first use so a missing API key surfaces as a
    generation failure rather than at import time.
    """

    def __init__(
        self,
        service: LLMService | None = None,
        temperature: float = 0.1,
        max_tokens: int | None = 8192,
    ) -> None:
        self._service = service
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _generate_sync(self, profile: Mapping[str, Any]) -> str:
        if self._service is None:
            self._service = LLMService()
        return self._service.generate_llm_response(
            CV_SYSTEM_INSTRUCTIONS,
            build_profile_prompt(profile),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

    async def generate(self, profile: dict) -> str:
        try:
            text = await asyncio.to_thread(self._generate_sync, profile)
        except LLMError as exc:
            if exc.status_code == 404:
                logger.error("Resume generation endpoint not found: %s", exc)
                raise GenerationEndpointUnavailable(str(exc)) from exc
            logger.exception("Resume generation failed")
            raise GenerationTransientFailure(str(exc)) from exc
        content = strip_code_fences(text)
        if not content:
            raise GenerationTransientFailure("Model returned an empty response")
        return content
