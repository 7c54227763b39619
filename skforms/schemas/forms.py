"""Schemas for forms."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from skforms.services.form_schema_service import FieldDescriptor


class FormCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    type: str = Field("registration", min_length=1, max_length=50)
    fields: list[dict[str, Any]] = Field(default_factory=list)
    file_upload: bool = False
    gcash_receipt: bool = False
    qr_code_image: str | None = None
    is_active: bool = True
    publish_status: str = "DRAFT"
    submission_limit: int | None = Field(None, ge=0)
    submission_deadline: datetime | None = None
    event_id: UUID | None = None


class FormUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    type: str | None = Field(None, min_length=1, max_length=50)
    fields: list[dict[str, Any]] | None = None
    file_upload: bool | None = None
    gcash_receipt: bool | None = None
    qr_code_image: str | None = None
    is_active: bool | None = None
    publish_status: str | None = None
    submission_limit: int | None = Field(None, ge=0)
    submission_deadline: datetime | None = None
    event_id: UUID | None = None


class FormSummary(BaseModel):
    id: UUID
    title: str
    type: str
    is_active: bool
    publish_status: str
    event_id: UUID | None
    created_at: datetime
    updated_at: datetime


class FormRead(FormSummary):
    fields: list[FieldDescriptor]
    fields_parse_failed: bool = False
    file_upload: bool
    gcash_receipt: bool
    qr_code_image: str | None
    submission_limit: int | None
    submission_deadline: datetime | None
    submission_count: int = 0
