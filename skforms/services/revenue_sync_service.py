"""GCash revenue reconciliation.

Approved submissions whose form has GCash receipt fields carry the paid
amount under ``{field}_amount`` and the receipt path under
``{field}_receipt``. Syncing books one APPROVED revenue per submission; a
submission that already has a GCASH revenue is counted as skipped, so running
the sync again creates nothing new.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from skforms.core.structured_logging import build_log_context
from skforms.db.enums import FormSubmissionStatus, RevenueSource, RevenueStatus
from skforms.db.models import Event, Form, FormSubmission, Program, Revenue
from skforms.services import form_schema_service
from skforms.services.field_aliases import resolve_payer_name
from skforms.services.field_resolver import parse_submission_data, resolve_payment

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_LABEL = "Payment"


@dataclass
class SyncResult:
    created: int = 0
    skipped: int = 0
    total_processed: int = 0
    unlinked: int = 0
    failed: int = 0

    def add(self, other: "SyncResult") -> None:
        self.created += other.created
        self.skipped += other.skipped
        self.total_processed += other.total_processed
        self.unlinked += other.unlinked
        self.failed += other.failed


def revenue_title(label: str | None) -> str:
    return f"GCash Payment - {label or DEFAULT_PAYMENT_LABEL}"


def revenue_description(payer_name: str) -> str:
    return f"Automatic revenue from form submission by {payer_name}"


def _has_gcash_revenue(db: Session, submission_id: uuid.UUID) -> bool:
    return (
        db.scalar(
            select(Revenue.id)
            .where(
                Revenue.form_submission_id == submission_id,
                Revenue.source == RevenueSource.GCASH.value,
            )
            .limit(1)
        )
        is not None
    )


def _submission_program(submission: FormSubmission) -> Program | None:
    event = submission.form.event if submission.form is not None else None
    return event.program if event is not None else None


def sync_submission_revenue(db: Session, submission: FormSubmission) -> SyncResult:
    """Book GCash revenue for one approved submission.

    Each GCash receipt field with a positive amount is considered in field
    order. The first one books the revenue; the existing-entry check makes any
    later ones count as skipped.

    A write that fails is rolled back and counted in ``failed``; the caller
    carries on with the next submission.
    """
    result = SyncResult(total_processed=1)
    log_context = build_log_context(submission_id=str(submission.id), form_id=str(submission.form_id))

    fields = form_schema_service.get_form_fields(submission.form)
    gcash_fields = form_schema_service.payment_fields(fields)
    if not gcash_fields:
        return result

    parsed = parse_submission_data(submission.data)
    if parsed.parse_failed:
        logger.warning("Skipping submission with unreadable data", extra=log_context)
        return result
    data = parsed.values

    for field in gcash_fields:
        amount, receipt = resolve_payment(data, field.name)
        if amount is None:
            logger.debug("No valid amount for field %s", field.name, extra=log_context)
            continue

        if _has_gcash_revenue(db, submission.id):
            result.skipped += 1
            continue

        program = _submission_program(submission)
        if program is None:
            logger.warning("Submission form has no event program, revenue not booked", extra=log_context)
            result.unlinked += 1
            continue

        user_name = submission.user.name if submission.user is not None else None
        revenue = Revenue(
            title=revenue_title(field.label),
            description=revenue_description(resolve_payer_name(data, user_name)),
            amount=amount.quantize(Decimal("0.01")),
            source=RevenueSource.GCASH.value,
            status=RevenueStatus.APPROVED.value,
            date=submission.submitted_at,
            program_id=program.id,
            form_submission_id=submission.id,
            receipt=receipt,
        )
        db.add(revenue)
        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to create GCash revenue", extra=log_context)
            result.failed += 1
            break
        result.created += 1
        logger.info("Created GCash revenue %s", revenue.id, extra=log_context)

    return result


def sync_gcash_revenue(db: Session) -> SyncResult:
    """Book GCash revenue for every approved submission, oldest first."""
    submissions = db.scalars(
        select(FormSubmission)
        .where(FormSubmission.status == FormSubmissionStatus.APPROVED.value)
        .options(
            joinedload(FormSubmission.form).joinedload(Form.event).joinedload(Event.program),
            joinedload(FormSubmission.user),
        )
        .order_by(FormSubmission.submitted_at.asc(), FormSubmission.id.asc())
    ).all()

    total = SyncResult()
    for submission in submissions:
        total.add(sync_submission_revenue(db, submission))

    logger.info(
        "GCash revenue sync completed: created=%s skipped=%s processed=%s unlinked=%s failed=%s",
        total.created,
        total.skipped,
        total.total_processed,
        total.unlinked,
        total.failed,
    )
    return total


def list_revenues(
    db: Session,
    *,
    source: str | None = None,
    program_id: uuid.UUID | None = None,
) -> list[Revenue]:
    """Revenues, most recent date first."""
    query = db.query(Revenue)
    if source:
        query = query.filter(Revenue.source == source)
    if program_id:
        query = query.filter(Revenue.program_id == program_id)
    return query.order_by(Revenue.date.desc(), Revenue.created_at.desc()).all()
