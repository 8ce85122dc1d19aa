"""CV generation, content and rendering routes."""

from __future__ import annotations

import asyncio
from typing import Annotated, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi import Path as PathParam
from fastapi.responses import HTMLResponse

from ojtech_resume.api.dependencies import get_current_username, get_cv_generator
from ojtech_resume.api.schemas.cvs import (
    CvContentResponse,
    CvContentUpdateRequest,
    CvGenerateResponse,
    CvRecordResponse,
    StudentProfileRequest,
)
from ojtech_resume.services.cv_errors import (
    CvPipelineError,
    FetchExhausted,
    GenerationCancelled,
    GenerationEndpointUnavailable,
    GenerationTransientFailure,
    MalformedContent,
    RecordCreationFailed,
)
from ojtech_resume.services.cv_generator import CvGenerator
from ojtech_resume.services.cv_storage import (
    delete_cv_record,
    find_current_cv,
    get_cv_content,
    get_cv_record,
    list_cv_records,
    replace_cv_content,
)
from ojtech_resume.templates import list_templates

router = APIRouter(prefix="/cvs", tags=["cvs"])

_ERROR_STATUS: dict[type[CvPipelineError], int] = {
    RecordCreationFailed: status.HTTP_500_INTERNAL_SERVER_ERROR,
    GenerationEndpointUnavailable: status.HTTP_502_BAD_GATEWAY,
    GenerationTransientFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
    FetchExhausted: status.HTTP_504_GATEWAY_TIMEOUT,
    GenerationCancelled: status.HTTP_503_SERVICE_UNAVAILABLE,
    MalformedContent: status.HTTP_404_NOT_FOUND,
}


def _raise_for_error(error: CvPipelineError) -> NoReturn:
    raise HTTPException(
        status_code=_ERROR_STATUS.get(type(error), status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail=error.user_message,
    )


def _require_owned_record(cv_id: str, current_username: str) -> dict:
    """Return the record summary if *current_username* owns it.

    Raises:
        HTTPException: 404 if the record does not exist, 403 if it belongs
            to someone else.
    """
    record = get_cv_record(cv_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"CV '{cv_id}' not found",
        )
    if record["owner"] != current_username:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only access your own CVs",
        )
    return record


def _require_known_template(template: str | None) -> None:
    if template is not None and template not in list_templates():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown template '{template}'. Available: {', '.join(list_templates())}",
        )


# --- fixed paths MUST come before /{cv_id} to avoid path conflicts ---


@router.post("/generate", response_model=CvGenerateResponse)
async def generate_cv(
    data: StudentProfileRequest,
    current_username: Annotated[str, Depends(get_current_username)],
    generator: Annotated[CvGenerator, Depends(get_cv_generator)],
) -> CvGenerateResponse:
    """Generate a new CV from the student's profile and return its HTML."""
    result = await generator.generate(data.to_profile(), current_username)
    if not result.ok:
        _raise_for_error(result.error)
    return CvGenerateResponse(
        cv_id=result.record_id,
        html=result.html,
        used_fallback=result.used_fallback,
    )


@router.get("", response_model=list[CvRecordResponse])
def list_cvs(
    current_username: Annotated[str, Depends(get_current_username)],
) -> list[CvRecordResponse]:
    """List the caller's CVs, most recently updated first."""
    return [CvRecordResponse(**r) for r in list_cv_records(current_username)]


@router.get("/me", response_model=CvRecordResponse)
def get_current_cv(
    current_username: Annotated[str, Depends(get_current_username)],
) -> CvRecordResponse:
    """Return the CV that should be shown for the caller."""
    record = find_current_cv(current_username)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=MalformedContent.user_message,
        )
    return CvRecordResponse(**record)


@router.get("/me/content", response_model=CvContentResponse)
def read_current_cv_content(
    current_username: Annotated[str, Depends(get_current_username)],
) -> CvContentResponse:
    """Return the raw stored content of the caller's current CV."""
    record = find_current_cv(current_username)
    content = get_cv_content(record["id"]) if record else None
    if not content:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=MalformedContent.user_message,
        )
    return CvContentResponse(cv_id=record["id"], content=content)


@router.get("/me/html", response_class=HTMLResponse)
async def get_current_cv_html(
    current_username: Annotated[str, Depends(get_current_username)],
    generator: Annotated[CvGenerator, Depends(get_cv_generator)],
    refresh: Annotated[bool, Query(description="Ignore the cached HTML")] = False,
    template: Annotated[str | None, Query(description="Template identifier")] = None,
) -> HTMLResponse:
    """Return the rendered HTML document of the caller's current CV."""
    _require_known_template(template)
    record = await asyncio.to_thread(find_current_cv, current_username)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=MalformedContent.user_message,
        )

    outcome = await generator.render_record(record["id"], refresh=refresh, template_name=template)
    if not outcome.ok:
        _raise_for_error(outcome.error)
    return HTMLResponse(content=outcome.html)


@router.get("/{cv_id}/content", response_model=CvContentResponse)
def read_cv_content(
    cv_id: Annotated[str, PathParam(description="CV ID")],
    current_username: Annotated[str, Depends(get_current_username)],
) -> CvContentResponse:
    """Return the raw stored content of a CV."""
    _require_owned_record(cv_id, current_username)
    return CvContentResponse(cv_id=cv_id, content=get_cv_content(cv_id))


@router.put("/{cv_id}/content", response_model=CvRecordResponse)
def update_cv_content(
    cv_id: Annotated[str, PathParam(description="CV ID")],
    data: CvContentUpdateRequest,
    current_username: Annotated[str, Depends(get_current_username)],
) -> CvRecordResponse:
    """Replace the raw content of a CV. The cached HTML is discarded."""
    _require_owned_record(cv_id, current_username)
    if not replace_cv_content(cv_id, data.content):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"CV '{cv_id}' not found",
        )
    return CvRecordResponse(**get_cv_record(cv_id))


@router.get("/{cv_id}/html", response_class=HTMLResponse)
async def get_cv_html(
    cv_id: Annotated[str, PathParam(description="CV ID")],
    current_username: Annotated[str, Depends(get_current_username)],
    generator: Annotated[CvGenerator, Depends(get_cv_generator)],
    refresh: Annotated[bool, Query(description="Ignore the cached HTML")] = False,
    template: Annotated[str | None, Query(description="Template identifier")] = None,
) -> HTMLResponse:
    """Return the rendered HTML document of a CV."""
    _require_known_template(template)
    await asyncio.to_thread(_require_owned_record, cv_id, current_username)

    outcome = await generator.render_record(cv_id, refresh=refresh, template_name=template)
    if not outcome.ok:
        _raise_for_error(outcome.error)
    return HTMLResponse(content=outcome.html)


@router.get("/{cv_id}", response_model=CvRecordResponse)
def get_cv(
    cv_id: Annotated[str, PathParam(description="CV ID")],
    current_username: Annotated[str, Depends(get_current_username)],
) -> CvRecordResponse:
    """Return the summary of one CV."""
    return CvRecordResponse(**_require_owned_record(cv_id, current_username))


@router.delete("/{cv_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_cv(
    cv_id: Annotated[str, PathParam(description="CV ID")],
    current_username: Annotated[str, Depends(get_current_username)],
) -> None:
    """Delete a CV and its cached HTML."""
    _require_owned_record(cv_id, current_username)
    if not delete_cv_record(cv_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"CV '{cv_id}' not found",
        )
