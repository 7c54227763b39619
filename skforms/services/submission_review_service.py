"""Submission review and status notification."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skforms.core.structured_logging import build_log_context
from skforms.db.enums import REVIEW_STATUSES
from skforms.db.models import FormSubmission
from skforms.services import email_service, submission_email_service
from skforms.services.field_aliases import (
    DEFAULT_RECIPIENT_NAME,
    resolve_recipient_email,
    resolve_recipient_name,
)
from skforms.services.field_resolver import parse_submission_data
from skforms.services.form_submission_service import (
    FormSubmissionError,
    InvalidStatusError,
    SubmissionNotFoundError,
)
from skforms.utils.datetime_parsing import format_display_date

logger = logging.getLogger(__name__)

DEFAULT_REVIEWER = "Admin"
DEFAULT_FORM_TITLE = "Form Submission"

_EMAIL_ADAPTER = TypeAdapter(EmailStr)


@dataclass(frozen=True)
class NotificationOutcome:
    sent: bool
    error: str | None = None
    recipient_found: bool = False


@dataclass(frozen=True)
class ReviewResult:
    submission: FormSubmission
    notification: NotificationOutcome


@dataclass(frozen=True)
class Recipient:
    email: str
    name: str


def resolve_recipient(submission: FormSubmission) -> Recipient | None:
    """Who gets the status email: the linked user first, then the submitted data."""
    user = submission.user
    if user is not None and user.email:
        return Recipient(email=user.email, name=user.name or DEFAULT_RECIPIENT_NAME)

    parsed = parse_submission_data(submission.data)
    email = resolve_recipient_email(parsed.values)
    if not email:
        return None
    return Recipient(email=email, name=resolve_recipient_name(parsed.values))


def build_status_email_context(
    submission: FormSubmission,
    recipient: Recipient,
    review_date: datetime,
) -> submission_email_service.StatusEmailContext:
    form = submission.form
    event = form.event if form is not None else None
    return submission_email_service.StatusEmailContext(
        recipient_email=recipient.email,
        recipient_name=recipient.name,
        form_title=(form.title if form is not None else None) or DEFAULT_FORM_TITLE,
        status=submission.status,
        reviewer_name=submission.reviewed_by or DEFAULT_REVIEWER,
        review_date=format_display_date(review_date),
        event_name=event.title if event is not None else None,
        event_date=format_display_date(event.date_time) if event is not None else None,
        notes=submission.notes,
    )


async def notify_status_change(submission: FormSubmission) -> NotificationOutcome:
    """Send the status email. Failures come back as a value, never raised."""
    log_context = build_log_context(submission_id=str(submission.id), form_id=str(submission.form_id))
    try:
        recipient = resolve_recipient(submission)
    except Exception as exc:
        logger.warning("Could not resolve notification recipient", extra=log_context, exc_info=True)
        return NotificationOutcome(sent=False, error=str(exc) or exc.__class__.__name__, recipient_found=False)
    if recipient is None:
        logger.info("No email address found for submission notification", extra=log_context)
        return NotificationOutcome(sent=False, recipient_found=False)

    try:
        _EMAIL_ADAPTER.validate_python(recipient.email)
    except ValidationError:
        logger.warning("Recipient email address is not valid", extra=log_context)
        return NotificationOutcome(
            sent=False, error="Invalid recipient email address", recipient_found=True
        )

    reviewed_at = submission.reviewed_at or datetime.now(timezone.utc)
    try:
        context = build_status_email_context(submission, recipient, reviewed_at)
        subject, html = submission_email_service.build_status_email(context)
        result = await email_service.send_email(
            to=recipient.email,
            subject=subject,
            html=html,
            text=email_service.html_to_text(html),
            idempotency_key=(
                f"submission-status/{submission.id}/{submission.status}/{reviewed_at.isoformat()}"
            ),
        )
    except Exception as exc:
        logger.warning("Status notification failed", extra=log_context, exc_info=True)
        return NotificationOutcome(sent=False, error=str(exc) or exc.__class__.__name__, recipient_found=True)

    if not result.success:
        logger.warning("Status notification not sent: %s", result.error, extra=log_context)
    return NotificationOutcome(sent=result.success, error=result.error, recipient_found=True)


def apply_review(
    db: Session,
    submission_id: uuid.UUID,
    status: str,
    *,
    reviewed_by: str | None = None,
    reviewed_at: datetime | None = None,
    notes: str | None = None,
) -> FormSubmission:
    """Persist a review decision. This is the must-succeed part of a review."""
    if status not in REVIEW_STATUSES:
        raise InvalidStatusError("Invalid status. Must be APPROVED or REJECTED")

    submission = db.get(FormSubmission, submission_id)
    if submission is None:
        raise SubmissionNotFoundError("Submission not found")

    submission.status = status
    submission.reviewed_by = reviewed_by or DEFAULT_REVIEWER
    submission.reviewed_at = reviewed_at or datetime.now(timezone.utc)
    submission.notes = notes or None
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(
            "Failed to update submission",
            extra=build_log_context(submission_id=str(submission_id)),
        )
        raise FormSubmissionError("Failed to update submission") from exc
    db.refresh(submission)
    return submission


async def review_submission(
    db: Session,
    submission_id: uuid.UUID,
    status: str,
    *,
    reviewed_by: str | None = None,
    reviewed_at: datetime | None = None,
    notes: str | None = None,
) -> ReviewResult:
    """Record a review decision, then notify the submitter (best effort).

    Every call re-sends the notification, including repeated transitions to
    the same status.
    """
    submission = apply_review(
        db,
        submission_id,
        status,
        reviewed_by=reviewed_by,
        reviewed_at=reviewed_at,
        notes=notes,
    )
    logger.info(
        "Submission reviewed as %s",
        status,
        extra=build_log_context(submission_id=str(submission.id), form_id=str(submission.form_id)),
    )
    notification = await notify_status_change(submission)
    return ReviewResult(submission=submission, notification=notification)
