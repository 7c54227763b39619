"""Schemas for form submissions, reviews and tracking."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class SubmissionCreate(BaseModel):
    form_id: UUID
    # Either a JSON object or its JSON text (older clients send text).
    data: dict[str, Any] | str = Field(default_factory=dict)


class SubmissionCreated(BaseModel):
    id: UUID
    submitted_at: datetime


class SubmissionCreateResponse(BaseModel):
    message: str = "Form submitted successfully"
    submission: SubmissionCreated
    reference_code: str


class SubmissionRead(BaseModel):
    id: UUID
    form_id: UUID
    form_title: str | None = None
    user_id: UUID | None
    status: str
    data: dict[str, Any]
    data_parse_failed: bool = False
    submitted_at: datetime
    reviewed_at: datetime | None
    reviewed_by: str | None
    notes: str | None


class SubmissionReviewRequest(BaseModel):
    status: str
    reviewed_by: str | None = Field(None, max_length=255)
    reviewed_at: datetime | None = None
    notes: str | None = None


class EmailNotificationRead(BaseModel):
    sent: bool
    error: str | None = None
    recipient_found: bool = False


class SubmissionReviewResponse(BaseModel):
    submission: SubmissionRead
    email_notification: EmailNotificationRead


class TrackRequest(BaseModel):
    reference_code: str = Field(..., min_length=1, max_length=100)


class TrackedSubmission(BaseModel):
    id: UUID
    reference_code: str
    status: str
    submitted_at: datetime
    reviewed_at: datetime | None
    notes: str | None
    submitter_name: str


class TrackedEntity(BaseModel):
    id: UUID
    title: str


class TrackedForm(TrackedEntity):
    type: str


class UploadedFileRead(BaseModel):
    field_name: str
    file_path: str
    file_name: str


class TrackResponse(BaseModel):
    submission: TrackedSubmission
    form: TrackedForm
    event: TrackedEntity | None
    program: TrackedEntity | None
    form_data: dict[str, Any]
    uploaded_files: list[UploadedFileRead]
