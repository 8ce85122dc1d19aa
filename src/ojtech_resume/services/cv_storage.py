"""Storage collaborator for CV records.

:class:`CvStorage` is the async interface the generation workflow talks
to. :class:`SqlCvStorage` implements it on top of the SQLAlchemy session
factory, running each blocking database call in a worker thread. The
plain functions at the bottom are used directly by the API routes.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ojtech_resume.data.db import get_session
from ojtech_resume.data.models import CvRecord
from ojtech_resume.services.cv_errors import StorageError

__all__ = [
    "CvStorage",
    "SqlCvStorage",
    "delete_cv_record",
    "find_current_cv",
    "get_cv_content",
    "get_cv_record",
    "list_cv_records",
    "replace_cv_content",
]

logger = logging.getLogger(__name__)


class CvStorage(Protocol):
    """Async storage interface used by the generation workflow.

    Implementations raise :class:`StorageError` on failure, with a 404
    status for unknown records and ``None`` for network-level errors.
    """

    async def create_record(self, owner: str) -> str: ...

    async def get_content(self, record_id: str) -> str | None: ...

    async def put_content(self, record_id: str, content: str) -> None: ...

    async def get_rendered_html(self, record_id: str) -> str | None: ...

    async def put_rendered_html(self, record_id: str, html: str) -> None: ...


def _to_dict(record: CvRecord) -> dict:
    return {
        "id": record.id,
        "owner": record.owner,
        "active": record.active,
        "generated": record.generated,
        "has_content": bool(record.raw_content),
        "has_rendered_html": bool(record.rendered_html),
        "created_at": record.created_at,
        "updated_at": record.updated_at,
    }


def _require_record(session: Session, record_id: str) -> CvRecord:
    record = session.get(CvRecord, record_id)
    if record is None:
        raise StorageError(f"CV record {record_id} not found", status_code=404)
    return record


class SqlCvStorage:
    """:class:`CvStorage` backed by the application database."""

    async def create_record(self, owner: str) -> str:
        return await asyncio.to_thread(self._run, self._create_record, owner)

    async def get_content(self, record_id: str) -> str | None:
        return await asyncio.to_thread(self._run, self._get_content, record_id)

    async def put_content(self, record_id: str, content: str) -> None:
        await asyncio.to_thread(self._run, self._put_content, record_id, content)

    async def get_rendered_html(self, record_id: str) -> str | None:
        return await asyncio.to_thread(self._run, self._get_rendered_html, record_id)

    async def put_rendered_html(self, record_id: str, html: str) -> None:
        await asyncio.to_thread(self._run, self._put_rendered_html, record_id, html)

    # ------------------------------------------------------------------
    # blocking implementations
    # ------------------------------------------------------------------

    @staticmethod
    def _run(func: Callable[..., Any], *args: Any) -> Any:
        try:
            return func(*args)
        except SQLAlchemyError as exc:
            logger.exception("Database error in %s", func.__name__)
            raise StorageError("Database error", status_code=500) from exc

    @staticmethod
    def _create_record(owner: str) -> str:
        with get_session() as session:
            session.query(CvRecord).filter(CvRecord.owner == owner).update(
                {CvRecord.active: False}, synchronize_session=False
            )
            record = CvRecord(owner=owner, active=True, generated=True)
            session.add(record)
            session.flush()
            return record.id

    @staticmethod
    def _get_content(record_id: str) -> str | None:
        with get_session() as session:
            return _require_record(session, record_id).raw_content

    @staticmethod
    def _put_content(record_id: str, content: str) -> None:
        with get_session() as session:
            record = _require_record(session, record_id)
            record.raw_content = content
            record.rendered_html = None
            record.updated_at = datetime.now(UTC)

    @staticmethod
    def _get_rendered_html(record_id: str) -> str | None:
        with get_session() as session:
            return _require_record(session, record_id).rendered_html

    @staticmethod
    def _put_rendered_html(record_id: str, html: str) -> None:
        with get_session() as session:
            _require_record(session, record_id).rendered_html = html


def get_cv_record(record_id: str) -> dict | None:
    """Return a summary dict for one CV record, or None if it does not exist."""
    with get_session() as session:
        record = session.get(CvRecord, record_id)
        return _to_dict(record) if record else None


def list_cv_records(owner: str) -> list[dict]:
    """Return all CV records of *owner*, most recently updated first."""
    with get_session() as session:
        records = (
            session.query(CvRecord)
            .filter(CvRecord.owner == owner)
            .order_by(CvRecord.updated_at.desc())
            .all()
        )
        return [_to_dict(r) for r in records]


def find_current_cv(owner: str) -> dict | None:
    """Pick the CV to show for *owner*.

    Prefers a record that has content, then the active one, then the most
    recently updated.
    """
    records = list_cv_records(owner)
    if not records:
        return None
    for record in records:
        if record["has_content"]:
            return record
    for record in records:
        if record["active"]:
            return record
    return records[0]


def replace_cv_content(record_id: str, content: str) -> bool:
    """Overwrite the raw content of a record and drop its rendered cache.

    Returns:
        True if the record exists and was updated, False otherwise.
    """
    with get_session() as session:
        record = session.get(CvRecord, record_id)
        if record is None:
            return False
        record.raw_content = content
        record.rendered_html = None
        record.updated_at = datetime.now(UTC)
        record.generated = False
        return True


def get_cv_content(record_id: str) -> str | None:
    """Return the raw content of a record, or None if it has none."""
    with get_session() as session:
        record = session.get(CvRecord, record_id)
        return record.raw_content if record else None


def delete_cv_record(record_id: str) -> bool:
    """Delete a CV record.

    Returns:
        True if the record existed and was deleted, False otherwise.
    """
    with get_session() as session:
        record = session.get(CvRecord, record_id)
        if record is None:
            return False
        session.delete(record)
        return True
