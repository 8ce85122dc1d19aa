"""Map resolved CV content onto the canonical :class:`ResumeDocument`.

Stored content arrives in several shapes that drifted apart over time:

- a full CV record whose ``parsedResume`` holds the real content,
- a ``{"jsonContent": ...}`` wrapper produced by older exports,
- the canonical AI-generation shape (``contactInfo``, ``professionalSummary``,
  ``experience.experiences`` ...),
- the onboarding wizard shape with nested ``personalInfo`` / ``contact`` steps,
- the flat student-profile shape (``firstName``, ``experiences``,
  ``githubProjects`` ...).

:func:`detect_shape` tries an ordered list of pure matchers and the first
hit picks the decoder. Anything unrecognized becomes the empty document;
:func:`normalize` never raises.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from enum import StrEnum
from typing import Any

from ojtech_resume.constants.resume_constants import (
    DATE_RANGE_SEPARATOR,
    MAX_UNWRAP_DEPTH,
    MONTH_ABBR,
    PRESENT_LABEL,
)
from ojtech_resume.services.content_sniffer import ContentFormat, contains_html_markers, sniff
from ojtech_resume.services.content_unwrapper import resolve_content, unwrap
from ojtech_resume.services.resume_document import (
    CertificationEntry,
    ContactInfo,
    EducationEntry,
    ExperienceEntry,
    ProjectEntry,
    ResumeDocument,
)

__all__ = [
    "ResumeShape",
    "decode_canonical",
    "decode_flat_profile",
    "decode_personal_info",
    "detect_shape",
    "flatten_personal_info",
    "format_date_range",
    "format_month_year",
    "normalize",
    "peel_wrappers",
    "synthesize_canonical",
]

logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})(?:-\d{1,2})?(?:[T ].*)?$")


class ResumeShape(StrEnum):
    """Recognized input shapes, in detection priority order."""

    CV_RECORD = "cv_record"
    JSON_CONTENT = "json_content"
    PERSONAL_INFO = "personal_info"
    CANONICAL = "canonical"
    FLAT_PROFILE = "flat_profile"
    UNRECOGNIZED = "unrecognized"


_CANONICAL_KEYS = ("contactInfo", "professionalSummary", "experience", "projects")
_CANONICAL_SECTION_KEYS = ("skills", "education", "certifications")
_FLAT_PROFILE_KEYS = (
    "firstName",
    "lastName",
    "email",
    "phoneNumber",
    "bio",
    "skills",
    "experiences",
    "githubProjects",
    "certifications",
    "university",
    "major",
    "graduationYear",
)


# ---------------------------------------------------------------------------
# Value coercion


def _text(value: Any) -> str:
    """Coerce a scalar to display text; anything else becomes ``""``."""
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    return ""


def _lookup(data: Any, path: str) -> Any:
    """Walk a dotted *path* through nested mappings, or return None."""
    current = data
    for key in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def _pick(data: Any, *paths: str) -> str:
    """Return the first non-empty text found along *paths*."""
    for path in paths:
        text = _text(_lookup(data, path))
        if text:
            return text
    return ""


def _as_sequence(value: Any) -> list[Any] | None:
    """Return *value* as a list, decoding JSON-encoded arrays; None otherwise."""
    if isinstance(value, str):
        value = resolve_content(value)
    if isinstance(value, (list, tuple)):
        return list(value)
    return None


def _text_list(value: Any) -> tuple[str, ...]:
    """Coerce *value* into a tuple of non-empty strings, keeping sentences whole."""
    if isinstance(value, str):
        items = _as_sequence(value)
        if items is None:
            text = value.strip()
            return (text,) if text else ()
        value = items
    if isinstance(value, (list, tuple)):
        return tuple(text for text in (_text(item) for item in value) if text)
    return ()


def _labels(value: Any) -> tuple[str, ...]:
    """Coerce skill-like *value* into labels.

    Accepts a list of strings, a list of ``{"name": ...}`` objects, a
    JSON-encoded list, or a comma-separated string.
    """
    items = _as_sequence(value)
    if items is None:
        if isinstance(value, str):
            items = value.split(",")
        else:
            return ()
    labels: list[str] = []
    for item in items:
        label = _pick(item, "name", "label") if isinstance(item, Mapping) else _text(item)
        if label:
            labels.append(label)
    return tuple(labels)


def _joined(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(_labels(list(value)))
    return _text(value)


def _first_list(data: Any, *paths: str) -> tuple[str, ...]:
    for path in paths:
        value = _lookup(data, path)
        if isinstance(value, Mapping):
            continue
        items = _text_list(value)
        if items:
            return items
    return ()


def _first_entries(data: Any, *paths: str) -> list[Mapping[str, Any]]:
    for path in paths:
        items = _as_sequence(_lookup(data, path))
        if items:
            return [item for item in items if isinstance(item, Mapping)]
    return []


def _full_name(data: Any) -> str:
    return f"{_pick(data, 'firstName')} {_pick(data, 'lastName')}".strip()


# ---------------------------------------------------------------------------
# Date formatting


def format_month_year(value: Any) -> str:
    """Format an ISO date (``YYYY-MM`` or ``YYYY-MM-DD``) as ``Mon YYYY``.

    Anything that is not an ISO date is returned as text unchanged.
    """
    text = _text(value)
    match = _ISO_DATE.match(text)
    if match:
        month = int(match.group(2))
        if 1 <= month <= 12:
            return f"{MONTH_ABBR[month]} {match.group(1)}"
    return text


def format_date_range(start: Any, end: Any, is_current: bool = False) -> str:
    """Return ``"{start} - {end}"`` with ``Present`` for ongoing entries.

    An entry with no start date has no displayable range.
    """
    start_str = format_month_year(start)
    if not start_str:
        return ""
    end_str = "" if is_current else format_month_year(end)
    return f"{start_str}{DATE_RANGE_SEPARATOR}{end_str or PRESENT_LABEL}"


# ---------------------------------------------------------------------------
# Shape matchers


def _is_cv_record(data: Mapping[str, Any]) -> bool:
    return "parsedResume" in data and ("id" in data or "active" in data)


def _is_json_content_wrapper(data: Mapping[str, Any]) -> bool:
    return "jsonContent" in data


def _is_personal_info(data: Mapping[str, Any]) -> bool:
    return isinstance(data.get("personalInfo"), Mapping)


def _is_canonical(data: Mapping[str, Any]) -> bool:
    if any(key in data for key in _CANONICAL_KEYS):
        return True
    return any(isinstance(data.get(key), Mapping) for key in _CANONICAL_SECTION_KEYS)


def _is_flat_profile(data: Mapping[str, Any]) -> bool:
    return any(key in data for key in _FLAT_PROFILE_KEYS)


_SHAPE_MATCHERS: list[tuple[ResumeShape, Callable[[Mapping[str, Any]], bool]]] = [
    (ResumeShape.CV_RECORD, _is_cv_record),
    (ResumeShape.JSON_CONTENT, _is_json_content_wrapper),
    (ResumeShape.PERSONAL_INFO, _is_personal_info),
    (ResumeShape.CANONICAL, _is_canonical),
    (ResumeShape.FLAT_PROFILE, _is_flat_profile),
]


def detect_shape(data: Any) -> ResumeShape:
    """Return the first :class:`ResumeShape` whose matcher accepts *data*."""
    if not isinstance(data, Mapping):
        return ResumeShape.UNRECOGNIZED
    for shape, matcher in _SHAPE_MATCHERS:
        if matcher(data):
            return shape
    return ResumeShape.UNRECOGNIZED


# ---------------------------------------------------------------------------
# Decoders


def _decode_experience(entry: Mapping[str, Any]) -> ExperienceEntry:
    date_range = _pick(entry, "dateRange", "dates") or format_date_range(
        entry.get("startDate"),
        entry.get("endDate"),
        bool(entry.get("current") or entry.get("isCurrent")),
    )
    return ExperienceEntry(
        title=_pick(entry, "title", "position", "role"),
        company=_pick(entry, "company", "employer", "organization"),
        location=_pick(entry, "location"),
        date_range=date_range,
        achievements=_first_list(entry, "achievements", "highlights", "description"),
    )


def _decode_project(entry: Mapping[str, Any]) -> ProjectEntry:
    return ProjectEntry(
        name=_pick(entry, "name", "title"),
        technologies=_joined(entry.get("technologies")),
        highlights=_first_list(entry, "highlights", "achievements", "description"),
    )


def _decode_certification(entry: Mapping[str, Any]) -> CertificationEntry:
    return CertificationEntry(
        name=_pick(entry, "name", "title"),
        issuer=_pick(entry, "issuer", "organization"),
        date_received=format_month_year(_pick(entry, "dateReceived", "date", "issueDate")),
    )


def _decode_education(data: Mapping[str, Any]) -> EducationEntry:
    education = _lookup(data, "education")
    items = _as_sequence(education)
    if items:
        education = items[0]
    if not isinstance(education, Mapping):
        education = {}
    return EducationEntry(
        university=_pick(education, "university", "institution", "school")
        or _pick(data, "university"),
        major=_pick(education, "major", "degree", "fieldOfStudy") or _pick(data, "major"),
        graduation_year=_pick(education, "graduationYear", "year")
        or _pick(data, "graduationYear"),
        location=_pick(education, "location"),
    )


def decode_canonical(data: Mapping[str, Any]) -> ResumeDocument:
    """Decode the canonical shape, absorbing flat-profile aliases per field."""
    contact = ContactInfo(
        name=_pick(data, "contactInfo.name", "contactInfo.fullName", "name", "fullName")
        or _full_name(data),
        email=_pick(data, "contactInfo.email", "email"),
        phone=_pick(data, "contactInfo.phone", "contactInfo.phoneNumber", "phone", "phoneNumber"),
        location=_pick(data, "contactInfo.location", "location"),
        address=_pick(data, "contactInfo.address", "address"),
        linkedin=_pick(
            data, "contactInfo.linkedin", "contactInfo.linkedinUrl", "linkedin", "linkedinUrl"
        ),
        github=_pick(data, "contactInfo.github", "contactInfo.githubUrl", "github", "githubUrl"),
        portfolio=_pick(
            data,
            "contactInfo.portfolio",
            "contactInfo.portfolioUrl",
            "contactInfo.website",
            "portfolio",
            "portfolioUrl",
            "website",
        ),
        title=_pick(data, "contactInfo.professionalTitle", "contactInfo.title", "professionalTitle"),
    )

    skills_value = _lookup(data, "skills.skillsList")
    if skills_value is None:
        skills_value = data.get("skills")

    return ResumeDocument(
        contact=contact,
        summary=_first_list(
            data, "professionalSummary.summaryPoints", "professionalSummary", "summary", "bio"
        ),
        skills=_labels(skills_value),
        experience=tuple(
            _decode_experience(entry)
            for entry in _first_entries(data, "experience.experiences", "experience", "experiences")
        ),
        projects=tuple(
            _decode_project(entry)
            for entry in _first_entries(data, "projects.projectsList", "projects", "githubProjects")
        ),
        education=_decode_education(data),
        certifications=tuple(
            _decode_certification(entry)
            for entry in _first_entries(
                data, "certifications.certificationsList", "certifications"
            )
        ),
    )


def synthesize_canonical(profile: Mapping[str, Any]) -> dict[str, Any]:
    """Build the canonical shape from a flat student profile."""
    bio = _pick(profile, "bio")
    experiences = [
        {
            "title": _pick(exp, "title"),
            "company": _pick(exp, "company"),
            "location": _pick(exp, "location"),
            "dateRange": format_date_range(
                exp.get("startDate"), exp.get("endDate"), bool(exp.get("current"))
            ),
            "achievements": list(_text_list(exp.get("description"))),
        }
        for exp in _first_entries(profile, "experiences")
    ]
    projects = [
        {
            "name": _pick(proj, "name", "title"),
            "technologies": _joined(proj.get("technologies")),
            "highlights": list(_text_list(proj.get("description"))),
        }
        for proj in _first_entries(profile, "githubProjects", "projects")
    ]
    certifications = [
        {
            "name": _pick(cert, "name"),
            "issuer": _pick(cert, "issuer"),
            "dateReceived": format_month_year(cert.get("dateReceived")),
        }
        for cert in _first_entries(profile, "certifications")
    ]
    return {
        "contactInfo": {
            "name": _full_name(profile) or _pick(profile, "name"),
            "email": _pick(profile, "email"),
            "phone": _pick(profile, "phoneNumber", "phone"),
            "location": _pick(profile, "location"),
            "address": _pick(profile, "address"),
            "linkedin": _pick(profile, "linkedinUrl", "linkedin"),
            "github": _pick(profile, "githubUrl", "github"),
            "portfolio": _pick(profile, "portfolioUrl", "portfolio", "website"),
        },
        "professionalSummary": {"summaryPoints": [bio] if bio else []},
        "skills": {"skillsList": list(_labels(profile.get("skills")))},
        "experience": {"experiences": experiences},
        "projects": {"projectsList": projects},
        "education": {
            "university": _pick(profile, "university"),
            "major": _pick(profile, "major"),
            "graduationYear": _pick(profile, "graduationYear"),
        },
        "certifications": {"certificationsList": certifications},
    }


def decode_flat_profile(profile: Mapping[str, Any]) -> ResumeDocument:
    """Decode the flat student-profile shape."""
    return decode_canonical(synthesize_canonical(profile))


def flatten_personal_info(data: Mapping[str, Any]) -> dict[str, Any]:
    """Merge onboarding wizard step objects into one flat profile dict."""
    flat: dict[str, Any] = {}
    for step in ("personalInfo", "education", "contact"):
        section = data.get(step)
        if isinstance(section, Mapping):
            flat.update(section)
    for key in ("email", "bio", "skills", "experiences", "certifications", "githubProjects"):
        if key in data and key not in flat:
            flat[key] = data[key]
    return flat


def decode_personal_info(data: Mapping[str, Any]) -> ResumeDocument:
    return decode_flat_profile(flatten_personal_info(data))


_DECODERS: dict[ResumeShape, Callable[[Mapping[str, Any]], ResumeDocument]] = {
    ResumeShape.CANONICAL: decode_canonical,
    ResumeShape.FLAT_PROFILE: decode_flat_profile,
    ResumeShape.PERSONAL_INFO: decode_personal_info,
}


# ---------------------------------------------------------------------------
# Public API


def peel_wrappers(value: Any) -> Any:
    """Return the content held inside CV-record and ``jsonContent`` wrappers.

    Every wrapper level counts against :data:`MAX_UNWRAP_DEPTH`, and encoded
    strings found inside a wrapper are unwrapped from that level on, so the
    wrappers and the JSON layers under them share one budget. Returns
    ``None`` once the budget is spent.
    """
    depth = 0
    while True:
        shape = detect_shape(value)
        if shape is ResumeShape.CV_RECORD:
            value = value.get("parsedResume")
        elif shape is ResumeShape.JSON_CONTENT:
            value = value.get("jsonContent")
        else:
            return value

        depth += 1
        if depth > MAX_UNWRAP_DEPTH:
            logger.warning("Nested CV content deeper than %d levels, giving up", MAX_UNWRAP_DEPTH)
            return None
        if sniff(value) is ContentFormat.LIKELY_JSON:
            value = unwrap(value, depth)


def _decode(value: Any) -> ResumeDocument:
    if isinstance(value, str):
        # HTML content is rendered as-is by the caller, never re-parsed.
        return ResumeDocument.empty()

    shape = detect_shape(value)
    if shape is ResumeShape.UNRECOGNIZED:
        logger.debug("Unrecognized resume content shape: %s", type(value).__name__)
        return ResumeDocument.empty()
    return _DECODERS[shape](value)


def normalize(resolved: Any) -> ResumeDocument:
    """Return the canonical document for *resolved* content.

    Args:
        resolved: Output of :func:`resolve_content`. A raw string is
            resolved once here; strings left over after that are not
            parsed again.

    Returns:
        A fully-populated :class:`ResumeDocument`; the empty document when
        the content cannot be recognized.
    """
    try:
        if isinstance(resolved, str) and not contains_html_markers(resolved):
            resolved = resolve_content(resolved)
        return _decode(peel_wrappers(resolved))
    except (TypeError, ValueError, AttributeError):
        logger.exception("Failed to normalize resume content")
        return ResumeDocument.empty()
