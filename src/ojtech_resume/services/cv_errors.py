"""Error taxonomy for CV content resolution and generation.

Each error carries a ``user_message`` that is safe to show to end users.
The pipeline returns these on result objects instead of raising them all
the way to the caller, so internal details never leak past the API.
"""

from __future__ import annotations

__all__ = [
    "CvPipelineError",
    "FetchExhausted",
    "GenerationCancelled",
    "GenerationEndpointUnavailable",
    "GenerationTransientFailure",
    "MalformedContent",
    "PersistCacheFailure",
    "RecordCreationFailed",
    "StorageError",
]


class CvPipelineError(Exception):
    """Base class for all pipeline failures."""

    user_message = "Something went wrong while preparing your resume. Please try again."


class MalformedContent(CvPipelineError):
    """Stored content is missing or could not be turned into a resume."""

    user_message = "No resume content is available yet. Generate a resume to get started."


class GenerationEndpointUnavailable(CvPipelineError):
    """The AI generation endpoint answered 404 (misconfiguration)."""

    user_message = "The resume generation service could not be found. Check API configuration."


class GenerationTransientFailure(CvPipelineError):
    """Network error or server error from the AI generation service."""

    user_message = "Failed to generate your resume. Please try again later."


class FetchExhausted(CvPipelineError):
    """Generated content could not be fetched back from storage."""

    user_message = "Your resume was generated but could not be loaded. Please try again later."

    def __init__(self, message: str = "", attempts: int = 0) -> None:
        super().__init__(message)
        self.attempts = attempts


class PersistCacheFailure(CvPipelineError):
    """Rendered HTML could not be cached. Logged only."""


class GenerationCancelled(CvPipelineError):
    """The caller cancelled the request while content was being fetched."""

    user_message = "Resume generation was cancelled."


class RecordCreationFailed(CvPipelineError):
    """A new CV record could not be created."""

    user_message = "Could not create a new resume. Please try again later."


class StorageError(Exception):
    """Raised by storage collaborators.

    Attributes:
        status_code: HTTP-style status, or None for network-level failures.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_retryable(self) -> bool:
        """Network errors and 4xx responses may succeed on a later attempt."""
        return self.status_code is None or 400 <= self.status_code < 500
