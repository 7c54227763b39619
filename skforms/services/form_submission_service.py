"""Public form submissions: window validation, storage, lookup and tracking."""

from __future__ import annotations

import json
import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from fastapi import UploadFile
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skforms.core.config import settings
from skforms.core.structured_logging import build_log_context
from skforms.db.enums import FormPublishStatus
from skforms.db.models import Event, Form, FormSubmission, Program
from skforms.services import upload_service
from skforms.services.field_aliases import resolve_submitter_name
from skforms.services.field_resolver import extract_uploaded_files, parse_submission_data
from skforms.utils.datetime_parsing import as_utc

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "SK-"
_REFERENCE_PREFIX_RE = re.compile(r"^SK-", re.IGNORECASE)


class FormSubmissionError(Exception):
    """Base exception for form submission errors."""

    pass


class FormNotFoundError(FormSubmissionError):
    """Form not found."""

    pass


class FormUnavailableError(FormSubmissionError):
    """Form is inactive or not published."""

    pass


class DeadlinePassedError(FormSubmissionError):
    """Form submission deadline has passed."""

    pass


class LimitReachedError(FormSubmissionError):
    """Form has reached its submission limit."""

    pass


class SubmissionNotFoundError(FormSubmissionError):
    """Submission not found."""

    pass


class InvalidStatusError(FormSubmissionError):
    """Review status is not APPROVED or REJECTED."""

    pass


class InvalidSubmissionDataError(FormSubmissionError):
    """Submitted data is not a JSON object, or an upload was rejected."""

    pass


# =============================================================================
# Validation
# =============================================================================


def count_submissions(db: Session, form_id: uuid.UUID) -> int:
    return db.scalar(
        select(func.count()).select_from(FormSubmission).where(FormSubmission.form_id == form_id)
    ) or 0


def validate_submission_window(db: Session, form: Form, now: datetime | None = None) -> None:
    """Raise if the form cannot accept a submission right now.

    Checks run in order: availability, deadline, limit. The limit check reads
    the current count without a lock, so concurrent submits may overshoot it.
    """
    now = now or datetime.now(timezone.utc)

    if not form.is_active or form.publish_status != FormPublishStatus.PUBLISHED.value:
        raise FormUnavailableError("Form is not available for submissions")

    if form.submission_deadline is not None and as_utc(form.submission_deadline) < as_utc(now):
        raise DeadlinePassedError("Submission deadline has passed")

    # A limit of 0 means "no limit".
    if form.submission_limit:
        if count_submissions(db, form.id) >= form.submission_limit:
            raise LimitReachedError("Submission limit reached")


# =============================================================================
# Submission store
# =============================================================================


def _coerce_submission_data(raw_data: object) -> dict[str, Any]:
    if raw_data is None:
        return {}
    parsed = parse_submission_data(raw_data)
    if parsed.parse_failed:
        raise InvalidSubmissionDataError("Submission data must be a JSON object")
    return dict(parsed.values)


def submit_form(
    db: Session,
    form_id: uuid.UUID,
    raw_data: object,
    files: dict[str, UploadFile] | None = None,
    *,
    user_id: uuid.UUID | None = None,
    now: datetime | None = None,
) -> FormSubmission:
    """Validate and persist a public submission.

    Uploaded files are written first and their URLs merged over the submitted
    values under the upload's field name. If the database write fails the
    stored files are removed again.
    """
    form = db.get(Form, form_id)
    if form is None:
        raise FormNotFoundError(f"Form {form_id} not found")

    submitted_at = now or datetime.now(timezone.utc)
    validate_submission_window(db, form, submitted_at)
    data = _coerce_submission_data(raw_data)

    try:
        file_urls = upload_service.store_submission_files(files or {})
    except upload_service.UploadRejectedError as exc:
        raise InvalidSubmissionDataError(str(exc)) from exc
    except OSError as exc:
        logger.exception("Failed to store uploads for form %s", form_id)
        raise FormSubmissionError("Failed to store uploaded files") from exc

    final_data = {**data, **file_urls}
    submission = FormSubmission(
        form_id=form.id,
        user_id=user_id,
        data=json.dumps(final_data, ensure_ascii=False),
        submitted_at=submitted_at,
    )
    db.add(submission)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        for url in file_urls.values():
            upload_service.delete_file(url)
        logger.exception(
            "Failed to save submission",
            extra=build_log_context(form_id=str(form_id)),
        )
        raise FormSubmissionError("Failed to submit form") from exc

    db.refresh(submission)
    logger.info(
        "Form submission received",
        extra=build_log_context(submission_id=str(submission.id), form_id=str(form.id)),
    )
    return submission


def get_submission(db: Session, submission_id: uuid.UUID) -> FormSubmission | None:
    return db.get(FormSubmission, submission_id)


def list_submissions(
    db: Session,
    *,
    form_id: uuid.UUID | None = None,
    status: str | None = None,
) -> list[FormSubmission]:
    """Submissions, newest first."""
    query = db.query(FormSubmission)
    if form_id:
        query = query.filter(FormSubmission.form_id == form_id)
    if status:
        query = query.filter(FormSubmission.status == status)
    return query.order_by(FormSubmission.submitted_at.desc()).all()


# =============================================================================
# Tracking
# =============================================================================


@dataclass
class SubmissionTracking:
    submission: FormSubmission
    reference_code: str
    submitter_name: str
    form: Form
    event: Event | None
    program: Program | None
    data: dict[str, Any] = field(default_factory=dict)
    uploaded_files: list[dict[str, str]] = field(default_factory=list)


def reference_code_for(submission_id: uuid.UUID) -> str:
    return f"{REFERENCE_PREFIX}{submission_id}"


def parse_reference_code(reference_code: str) -> uuid.UUID:
    """Submission id from a reference code, with or without the ``SK-`` prefix."""
    cleaned = _REFERENCE_PREFIX_RE.sub("", reference_code.strip())
    try:
        return uuid.UUID(cleaned)
    except ValueError as exc:
        raise SubmissionNotFoundError("Submission not found") from exc


def track_submission(db: Session, reference_code: str) -> SubmissionTracking:
    submission_id = parse_reference_code(reference_code)
    submission = get_submission(db, submission_id)
    if submission is None:
        raise SubmissionNotFoundError("Submission not found")

    parsed = parse_submission_data(submission.data)
    if parsed.parse_failed:
        logger.warning(
            "Stored submission data is not a JSON object",
            extra=build_log_context(submission_id=str(submission.id)),
        )
    event = submission.form.event
    return SubmissionTracking(
        submission=submission,
        reference_code=reference_code_for(submission.id),
        submitter_name=resolve_submitter_name(parsed.values),
        form=submission.form,
        event=event,
        program=event.program if event is not None else None,
        data=parsed.values,
        uploaded_files=extract_uploaded_files(parsed.values, settings.UPLOAD_URL_PREFIX),
    )
