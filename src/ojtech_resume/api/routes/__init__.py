"""Route handlers for the API."""

from ojtech_resume.api.routes import cvs, health, resumes

__all__ = [
    "health",
    "cvs",
    "resumes",
]
