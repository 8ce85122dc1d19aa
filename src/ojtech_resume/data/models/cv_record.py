from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ojtech_resume.data.db import Base


class CvRecord(Base):
    """A CV owned by one user.

    Attributes:
        id: UUID string primary key.
        owner: Username of the student the CV belongs to.
        raw_content: Content as stored by the generation workflow. Opaque
            until resolved; may be HTML, JSON, or JSON-encoded JSON.
        rendered_html: Cached render of ``raw_content``. Written only by
            the rendering pipeline and cleared when the content changes.
        active: Whether this is the owner's current CV.
        generated: Whether the content came from AI generation.
    """

    __tablename__ = "cv_records"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    owner: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    raw_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    rendered_html: Mapped[str | None] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    generated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
