"""SQLAlchemy ORM models for forms and submissions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from skforms.db.base import Base, utcnow
from skforms.db.enums import FormPublishStatus, FormSubmissionStatus

if TYPE_CHECKING:
    from skforms.db.models.programs import Event, User


class Form(Base):
    """Public data-collection form configured by an administrator.

    ``fields`` holds the field list as JSON text. Rows written by this service
    are single-encoded; legacy rows may be double-encoded or corrupt and are
    normalized on read by ``form_schema_service``.
    """

    __tablename__ = "forms"
    __table_args__ = (
        Index("idx_forms_event", "event_id"),
        Index("idx_forms_publish_status", "publish_status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(50), default="registration", nullable=False)
    fields: Mapped[str] = mapped_column(Text, default="[]", nullable=False)

    file_upload: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    gcash_receipt: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    qr_code_image: Mapped[str | None] = mapped_column(String(512), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    publish_status: Mapped[str] = mapped_column(
        String(20),
        default=FormPublishStatus.DRAFT.value,
        server_default=text(f"'{FormPublishStatus.DRAFT.value}'"),
        nullable=False,
    )
    submission_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)
    submission_deadline: Mapped[datetime | None] = mapped_column(nullable=True)

    event_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("events.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow, onupdate=utcnow, nullable=False
    )

    event: Mapped["Event"] = relationship()
    submissions: Mapped[list["FormSubmission"]] = relationship(
        back_populates="form",
        cascade="all, delete-orphan",
    )


class FormSubmission(Base):
    """A submitted form response.

    ``data`` is the raw key/value map as JSON text. It is written once on
    submission and never rewritten; reviews only touch the review columns.
    """

    __tablename__ = "form_submissions"
    __table_args__ = (
        Index("idx_form_submissions_form", "form_id"),
        Index("idx_form_submissions_status", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    form_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("forms.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    data: Mapped[str] = mapped_column(Text, default="{}", nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=FormSubmissionStatus.PENDING.value,
        server_default=text(f"'{FormSubmissionStatus.PENDING.value}'"),
        nullable=False,
    )

    submitted_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    reviewed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    reviewed_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    form: Mapped["Form"] = relationship(back_populates="submissions")
    user: Mapped["User"] = relationship()
