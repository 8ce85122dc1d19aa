"""Stateless resume rendering routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from ojtech_resume.api.dependencies import get_default_template
from ojtech_resume.api.schemas.cvs import RenderRequest, RenderResponse, TemplateListResponse
from ojtech_resume.services.resume_renderer import render_content
from ojtech_resume.templates import list_templates

router = APIRouter(prefix="/resumes", tags=["resumes"])


@router.post("/render", response_model=RenderResponse)
def render_resume(
    data: RenderRequest,
    default_template: Annotated[str, Depends(get_default_template)],
) -> RenderResponse:
    """Render raw CV content to HTML without storing anything."""
    template_name = data.template_name or default_template
    if template_name not in list_templates():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown template '{template_name}'. Available: {', '.join(list_templates())}",
        )

    outcome = render_content(data.content, template_name)
    if not outcome.ok:
        raise HTTPException(
            status_code=422,
            detail=outcome.error.user_message,
        )
    return RenderResponse(html=outcome.html, path=outcome.path.value, template_name=template_name)


@router.get("/templates", response_model=TemplateListResponse)
def get_templates(
    default_template: Annotated[str, Depends(get_default_template)],
) -> TemplateListResponse:
    """List the registered resume templates."""
    return TemplateListResponse(templates=list_templates(), default=default_template)
