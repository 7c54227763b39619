"""SQLAlchemy ORM models for financial records."""

from __future__ import annotations

from typing import TYPE_CHECKING

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from skforms.db.base import Base, utcnow
from skforms.db.enums import RevenueStatus

if TYPE_CHECKING:
    from skforms.db.models.forms import FormSubmission
    from skforms.db.models.programs import Program


class Revenue(Base):
    """
    A revenue entry booked against a program.

    Entries synced from approved submissions carry ``form_submission_id``.
    At most one entry exists per (form_submission_id, source); the check is
    enforced by the sync service, not by a table constraint.
    """

    __tablename__ = "revenues"
    __table_args__ = (
        Index("idx_revenues_program", "program_id"),
        Index("idx_revenues_submission_source", "form_submission_id", "source"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    source: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=RevenueStatus.PENDING.value, nullable=False
    )
    date: Mapped[datetime] = mapped_column(nullable=False)
    receipt: Mapped[str | None] = mapped_column(String(512), nullable=True)

    program_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("programs.id", ondelete="CASCADE"), nullable=False
    )
    form_submission_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("form_submissions.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    program: Mapped["Program"] = relationship()
    form_submission: Mapped["FormSubmission"] = relationship()
