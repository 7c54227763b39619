"""Form administration: create, update, read and delete forms."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skforms.db.enums import FormPublishStatus
from skforms.db.models import Event, Form
from skforms.services import form_schema_service

logger = logging.getLogger(__name__)


class FormServiceError(Exception):
    """Base exception for form administration errors."""

    pass


class EventNotFoundError(FormServiceError):
    """Linked event does not exist."""

    pass


class DuplicateFieldNameError(FormServiceError):
    """Two or more fields of a form share a name."""

    def __init__(self, names: list[str]):
        self.names = names
        super().__init__(f"Duplicate field names: {', '.join(names)}")


class InvalidPublishStatusError(FormServiceError):
    """Publish status is not DRAFT or PUBLISHED."""

    pass


_UPDATABLE_COLUMNS = (
    "title",
    "type",
    "file_upload",
    "gcash_receipt",
    "qr_code_image",
    "is_active",
    "publish_status",
    "submission_limit",
    "submission_deadline",
    "event_id",
)
_REQUIRED_COLUMNS = frozenset(
    {"title", "type", "file_upload", "gcash_receipt", "is_active", "publish_status"}
)


def _canonical_fields(fields: object) -> str:
    """Normalize incoming fields and reject duplicate names."""
    descriptors = form_schema_service.normalize_fields(fields).fields
    duplicates = form_schema_service.find_duplicate_field_names(descriptors)
    if duplicates:
        raise DuplicateFieldNameError(duplicates)
    return form_schema_service.serialize_fields(descriptors)


def _check_event(db: Session, event_id: uuid.UUID | None) -> None:
    if event_id is not None and db.get(Event, event_id) is None:
        raise EventNotFoundError(f"Event {event_id} not found")


def _check_publish_status(value: str | None) -> None:
    if value is not None and value not in {s.value for s in FormPublishStatus}:
        raise InvalidPublishStatusError(f"Invalid publish status: {value}")


def list_forms(
    db: Session,
    *,
    publish_status: str | None = None,
    active_only: bool = False,
) -> list[Form]:
    query = db.query(Form)
    if publish_status:
        query = query.filter(Form.publish_status == publish_status)
    if active_only:
        query = query.filter(Form.is_active.is_(True))
    return query.order_by(Form.created_at.desc()).all()


def get_form(db: Session, form_id: uuid.UUID) -> Form | None:
    return db.get(Form, form_id)


def create_form(db: Session, *, title: str, fields: object = None, **attrs: Any) -> Form:
    """Create a form; ``attrs`` holds any of the optional form columns."""
    unknown = set(attrs) - set(_UPDATABLE_COLUMNS)
    if unknown:
        raise TypeError(f"Unknown form attributes: {sorted(unknown)}")
    _check_event(db, attrs.get("event_id"))
    _check_publish_status(attrs.get("publish_status"))

    form = Form(title=title, fields=_canonical_fields(fields), **attrs)
    db.add(form)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create form")
        raise FormServiceError("Failed to create form") from exc
    db.refresh(form)
    logger.info("Created form %s", form.id)
    return form


def update_form(db: Session, form: Form, changes: dict[str, Any]) -> Form:
    """Apply a partial update. Keys absent from ``changes`` are left untouched."""
    # An explicit null keeps the stored schema.
    fields = _canonical_fields(changes["fields"]) if changes.get("fields") is not None else None
    if "event_id" in changes:
        _check_event(db, changes["event_id"])
    _check_publish_status(changes.get("publish_status"))

    if fields is not None:
        form.fields = fields
    for column in _UPDATABLE_COLUMNS:
        if column not in changes:
            continue
        value = changes[column]
        # Non-nullable columns ignore explicit nulls.
        if value is None and column in _REQUIRED_COLUMNS:
            continue
        setattr(form, column, value)

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to update form %s", form.id)
        raise FormServiceError("Failed to update form") from exc
    db.refresh(form)
    return form


def delete_form(db: Session, form: Form) -> None:
    """Delete a form together with its submissions."""
    form_id = form.id
    try:
        db.delete(form)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to delete form %s", form_id)
        raise FormServiceError("Failed to delete form") from exc
    logger.info("Deleted form %s", form_id)
