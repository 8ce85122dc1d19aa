"""Services"""

from ojtech_resume.services.content_unwrapper import resolve_content, unwrap
from ojtech_resume.services.cv_generator import (
    CvGenerator,
    GenerationResult,
    GenerationState,
    RetryPolicy,
    fetch_with_retry,
)
from ojtech_resume.services.resume_normalizer import normalize
from ojtech_resume.services.resume_renderer import RenderOutcome, render, render_content

__all__ = [
    "resolve_content",
    "unwrap",
    "normalize",
    "render",
    "render_content",
    "RenderOutcome",
    "CvGenerator",
    "GenerationResult",
    "GenerationState",
    "RetryPolicy",
    "fetch_with_retry",
]
