"""Form submission endpoints: public submit and tracking, admin read and review."""

import json
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile as StarletteUploadFile

from skforms.core.config import settings
from skforms.core.deps import get_db
from skforms.core.rate_limit import limiter
from skforms.db.models import FormSubmission
from skforms.schemas.submissions import (
    EmailNotificationRead,
    SubmissionCreate,
    SubmissionCreated,
    SubmissionCreateResponse,
    SubmissionRead,
    SubmissionReviewRequest,
    SubmissionReviewResponse,
    TrackedEntity,
    TrackedForm,
    TrackedSubmission,
    TrackRequest,
    TrackResponse,
    UploadedFileRead,
)
from skforms.services import form_submission_service, submission_review_service
from skforms.services.field_resolver import parse_submission_data
from skforms.services.form_submission_service import (
    DeadlinePassedError,
    FormNotFoundError,
    FormSubmissionError,
    FormUnavailableError,
    InvalidStatusError,
    InvalidSubmissionDataError,
    LimitReachedError,
    SubmissionNotFoundError,
)

router = APIRouter(prefix="/submissions", tags=["submissions"])

# Multipart parts that carry submission metadata rather than uploads.
_MULTIPART_META_KEYS = ("formId", "form_id", "data")


def _submission_read(submission: FormSubmission) -> SubmissionRead:
    parsed = parse_submission_data(submission.data)
    return SubmissionRead(
        id=submission.id,
        form_id=submission.form_id,
        form_title=submission.form.title if submission.form else None,
        user_id=submission.user_id,
        status=submission.status,
        data=parsed.values,
        data_parse_failed=parsed.parse_failed,
        submitted_at=submission.submitted_at,
        reviewed_at=submission.reviewed_at,
        reviewed_by=submission.reviewed_by,
        notes=submission.notes,
    )


async def _read_submission_request(
    request: Request,
) -> tuple[UUID, object, dict[str, StarletteUploadFile]]:
    """Accept either a JSON body or multipart form data with uploads."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form_data = await request.form()
        form_id_raw = form_data.get("formId") or form_data.get("form_id")
        if not isinstance(form_id_raw, str) or not form_id_raw:
            raise HTTPException(status_code=400, detail="Form ID is required")
        try:
            form_id = UUID(form_id_raw)
        except ValueError as exc:
            raise HTTPException(status_code=404, detail="Form not found") from exc
        data_raw = form_data.get("data")
        files = {
            key: value
            for key, value in form_data.items()
            if isinstance(value, StarletteUploadFile) and key not in _MULTIPART_META_KEYS
        }
        return form_id, data_raw if isinstance(data_raw, str) else None, files

    try:
        body: Any = await request.json()
    except json.JSONDecodeError as exc:
        raise HTTPException(status_code=400, detail="Invalid JSON body") from exc
    if isinstance(body, dict) and "formId" in body and "form_id" not in body:
        body = {**body, "form_id": body["formId"]}
    try:
        payload = SubmissionCreate.model_validate(body)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc
    return payload.form_id, payload.data, {}


@router.post("", response_model=SubmissionCreateResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(f"{settings.RATE_LIMIT_PUBLIC_SUBMIT}/minute")
async def create_submission(request: Request, db: Session = Depends(get_db)):
    """Submit a form (JSON body, or multipart with file uploads)."""
    form_id, data, files = await _read_submission_request(request)
    try:
        submission = form_submission_service.submit_form(db, form_id, data, files)
    except FormNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Form not found") from exc
    except (
        FormUnavailableError,
        DeadlinePassedError,
        LimitReachedError,
        InvalidSubmissionDataError,
    ) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except FormSubmissionError as exc:
        raise HTTPException(
            status_code=500, detail="Failed to submit form. Please try again."
        ) from exc

    return SubmissionCreateResponse(
        submission=SubmissionCreated(id=submission.id, submitted_at=submission.submitted_at),
        reference_code=form_submission_service.reference_code_for(submission.id),
    )


@router.get("", response_model=list[SubmissionRead])
def list_submissions(
    form_id: UUID | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    submissions = form_submission_service.list_submissions(db, form_id=form_id, status=status_filter)
    return [_submission_read(s) for s in submissions]


@router.post("/track", response_model=TrackResponse)
@limiter.limit(f"{settings.RATE_LIMIT_PUBLIC_READ}/minute")
def track_submission(request: Request, data: TrackRequest, db: Session = Depends(get_db)):
    """Look up a submission by its SK- reference code."""
    try:
        tracking = form_submission_service.track_submission(db, data.reference_code)
    except SubmissionNotFoundError as exc:
        raise HTTPException(
            status_code=404,
            detail="Submission not found. Please check your reference code and try again.",
        ) from exc

    submission = tracking.submission
    return TrackResponse(
        submission=TrackedSubmission(
            id=submission.id,
            reference_code=tracking.reference_code,
            status=submission.status,
            submitted_at=submission.submitted_at,
            reviewed_at=submission.reviewed_at,
            notes=submission.notes,
            submitter_name=tracking.submitter_name,
        ),
        form=TrackedForm(id=tracking.form.id, title=tracking.form.title, type=tracking.form.type),
        event=TrackedEntity(id=tracking.event.id, title=tracking.event.title)
        if tracking.event
        else None,
        program=TrackedEntity(id=tracking.program.id, title=tracking.program.title)
        if tracking.program
        else None,
        form_data=tracking.data,
        uploaded_files=[UploadedFileRead(**f) for f in tracking.uploaded_files],
    )


@router.get("/{submission_id}", response_model=SubmissionRead)
def get_submission(submission_id: UUID, db: Session = Depends(get_db)):
    submission = form_submission_service.get_submission(db, submission_id)
    if not submission:
        raise HTTPException(status_code=404, detail="Submission not found")
    return _submission_read(submission)


@router.patch("/{submission_id}", response_model=SubmissionReviewResponse)
async def review_submission(
    submission_id: UUID,
    data: SubmissionReviewRequest,
    db: Session = Depends(get_db),
):
    """Approve or reject a submission and notify the submitter."""
    try:
        result = await submission_review_service.review_submission(
            db,
            submission_id,
            data.status,
            reviewed_by=data.reviewed_by,
            reviewed_at=data.reviewed_at,
            notes=data.notes,
        )
    except InvalidStatusError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except SubmissionNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Submission not found") from exc
    except FormSubmissionError as exc:
        raise HTTPException(status_code=500, detail="Failed to update submission") from exc

    return SubmissionReviewResponse(
        submission=_submission_read(result.submission),
        email_notification=EmailNotificationRead(
            sent=result.notification.sent,
            error=result.notification.error,
            recipient_found=result.notification.recipient_found,
        ),
    )
