"""Canonical resume document model.

Every template renders from a :class:`ResumeDocument` and nothing else, so
the normalizer is the only place that has to know about the many shapes
stored CV content can take. All fields default to an empty string or an
empty tuple; templates only ever ask "is this non-empty?".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

__all__ = [
    "CertificationEntry",
    "ContactInfo",
    "EducationEntry",
    "ExperienceEntry",
    "ProjectEntry",
    "ResumeDocument",
]


@dataclass(frozen=True)
class ContactInfo:
    """Name and contact details shown in the resume header."""

    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    address: str = ""
    linkedin: str = ""
    github: str = ""
    portfolio: str = ""
    title: str = ""

    def links(self) -> list[tuple[str, str]]:
        """Return ``(label, value)`` pairs for the non-empty profile links."""
        pairs = [
            ("LinkedIn", self.linkedin),
            ("GitHub", self.github),
            ("Portfolio", self.portfolio),
        ]
        return [(label, value) for label, value in pairs if value]


@dataclass(frozen=True)
class ExperienceEntry:
    """A single work-experience record."""

    title: str = ""
    company: str = ""
    location: str = ""
    date_range: str = ""
    achievements: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProjectEntry:
    """A single project record."""

    name: str = ""
    technologies: str = ""
    highlights: tuple[str, ...] = ()


@dataclass(frozen=True)
class EducationEntry:
    """The (single) education record."""

    university: str = ""
    major: str = ""
    graduation_year: str = ""
    location: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.university or self.major or self.graduation_year or self.location)


@dataclass(frozen=True)
class CertificationEntry:
    """A certification or license."""

    name: str = ""
    issuer: str = ""
    date_received: str = ""


@dataclass(frozen=True)
class ResumeDocument:
    """Fully-defaulted resume ready for rendering."""

    contact: ContactInfo = field(default_factory=ContactInfo)
    summary: tuple[str, ...] = ()
    skills: tuple[str, ...] = ()
    experience: tuple[ExperienceEntry, ...] = ()
    projects: tuple[ProjectEntry, ...] = ()
    education: EducationEntry = field(default_factory=EducationEntry)
    certifications: tuple[CertificationEntry, ...] = ()

    @classmethod
    def empty(cls) -> ResumeDocument:
        """Return the all-defaults document."""
        return cls()

    @property
    def is_empty(self) -> bool:
        """True when no section carries any content."""
        return self == ResumeDocument.empty()

    @property
    def headline(self) -> str:
        """Professional title, falling back to the most recent job title."""
        if self.contact.title:
            return self.contact.title
        for entry in self.experience:
            if entry.title:
                return entry.title
        return ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the canonical JSON shape accepted by the normalizer."""
        contact = self.contact
        return {
            "contactInfo": {
                "name": contact.name,
                "email": contact.email,
                "phone": contact.phone,
                "location": contact.location,
                "address": contact.address,
                "linkedin": contact.linkedin,
                "github": contact.github,
                "portfolio": contact.portfolio,
                "professionalTitle": contact.title,
            },
            "professionalSummary": {"summaryPoints": list(self.summary)},
            "skills": {"skillsList": list(self.skills)},
            "experience": {
                "experiences": [
                    {
                        "title": exp.title,
                        "company": exp.company,
                        "location": exp.location,
                        "dateRange": exp.date_range,
                        "achievements": list(exp.achievements),
                    }
                    for exp in self.experience
                ]
            },
            "projects": {
                "projectsList": [
                    {
                        "name": proj.name,
                        "technologies": proj.technologies,
                        "highlights": list(proj.highlights),
                    }
                    for proj in self.projects
                ]
            },
            "education": {
                "university": self.education.university,
                "major": self.education.major,
                "graduationYear": self.education.graduation_year,
                "location": self.education.location,
            },
            "certifications": {
                "certificationsList": [
                    {
                        "name": cert.name,
                        "issuer": cert.issuer,
                        "dateReceived": cert.date_received,
                    }
                    for cert in self.certifications
                ]
            },
        }
