"""Pydantic schemas for CV generation and rendering endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Accepts both snake_case and the camelCase keys the web client sends."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExperienceItem(_CamelModel):
    title: str = ""
    company: str = ""
    location: str = ""
    start_date: str | None = None
    end_date: str | None = None
    current: bool = False
    description: str = ""


class ProjectItem(_CamelModel):
    name: str = ""
    description: str = ""
    technologies: list[str] = Field(default_factory=list)
    url: str = ""


class CertificationItem(_CamelModel):
    name: str = ""
    issuer: str = ""
    date_received: str | None = None


class StudentProfileRequest(_CamelModel):
    """Student profile used as the source material for an AI-written CV."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone_number: str = ""
    location: str = ""
    bio: str = ""
    university: str = ""
    major: str = ""
    graduation_year: str | int | None = None
    skills: list[str] | str = Field(
        default_factory=list, description="Skill names, or one comma-separated string"
    )
    experiences: list[ExperienceItem] = Field(default_factory=list)
    github_projects: list[ProjectItem] = Field(default_factory=list)
    certifications: list[CertificationItem] = Field(default_factory=list)
    github_url: str = ""
    linkedin_url: str = ""
    portfolio_url: str = ""

    def to_profile(self) -> dict[str, Any]:
        """Return the profile as the camelCase dict the generator expects."""
        return self.model_dump(by_alias=True)


class CvGenerateResponse(BaseModel):
    """Response schema for a freshly generated CV."""

    cv_id: str
    html: str
    used_fallback: bool = Field(
        False,
        description=(
            "True when storage could not return the content and it was rendered "
            "from the generated payload instead"
        ),
    )


class CvRecordResponse(BaseModel):
    """Summary of a stored CV record."""

    id: str
    owner: str
    active: bool
    generated: bool
    has_content: bool
    has_rendered_html: bool
    created_at: datetime
    updated_at: datetime


class CvContentResponse(BaseModel):
    cv_id: str
    content: str | None = None


class CvContentUpdateRequest(BaseModel):
    """Request schema for replacing the raw content of a CV."""

    content: str = Field(..., min_length=1, description="Raw CV content (HTML or JSON)")


class RenderRequest(BaseModel):
    """Request schema for rendering raw content without storing it."""

    content: Any = Field(..., description="Raw CV content: HTML, JSON text or a JSON object")
    template_name: str | None = Field(None, description="Template identifier")


class RenderResponse(BaseModel):
    html: str
    path: str = Field(..., description="How the HTML was produced: html, document or text")
    template_name: str


class TemplateListResponse(BaseModel):
    templates: list[str]
    default: str
