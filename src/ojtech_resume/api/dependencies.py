"""Shared dependencies for API routes."""

from __future__ import annotations

import logging
import os
from typing import Annotated

from fastapi import Header, HTTPException, status

from ojtech_resume.constants.resume_constants import DEFAULT_TEMPLATE
from ojtech_resume.services.cv_content_generator import GeminiContentGenerator
from ojtech_resume.services.cv_generator import CvGenerator, RetryPolicy
from ojtech_resume.services.cv_storage import SqlCvStorage
from ojtech_resume.templates import list_templates

logger = logging.getLogger(__name__)


def get_current_username(
    x_username: Annotated[
        str | None,
        Header(
            description=(
                "Current username. In production, this should be extracted "
                "from authenticated session/JWT token."
            )
        ),
    ] = None,
) -> str:
    """Get the current username from request context.

    NOTE: This is a simplified implementation using a header.
    In production, this should extract from JWT/session.

    Raises:
        HTTPException: If authentication is missing (401).
    """
    if not x_username:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authentication. Please provide X-Username header.",
        )
    return x_username


def get_default_template() -> str:
    """Return the template named by ``RESUME_TEMPLATE``, or ``classic``."""
    name = os.environ.get("RESUME_TEMPLATE", DEFAULT_TEMPLATE).strip().lower()
    if name not in list_templates():
        logger.warning("Unknown RESUME_TEMPLATE=%r, using %s", name, DEFAULT_TEMPLATE)
        return DEFAULT_TEMPLATE
    return name


def get_cv_generator() -> CvGenerator:
    """Build the generation workflow wired to the database and Gemini."""
    return CvGenerator(
        SqlCvStorage(),
        GeminiContentGenerator(),
        policy=RetryPolicy.from_env(),
        template_name=get_default_template(),
    )
