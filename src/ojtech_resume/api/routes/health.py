"""Health check routes."""

from __future__ import annotations

from fastapi import APIRouter

from ojtech_resume.templates import list_templates

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> dict[str, str | list[str]]:
    """Report liveness plus the resume templates this instance can render."""
    return {"status": "healthy", "templates": list_templates()}
