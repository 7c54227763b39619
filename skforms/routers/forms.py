"""Form administration endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from skforms.core.deps import get_db
from skforms.db.models import Form
from skforms.schemas.forms import FormCreate, FormRead, FormUpdate
from skforms.services import form_schema_service, form_service, form_submission_service
from skforms.services.form_service import (
    DuplicateFieldNameError,
    EventNotFoundError,
    FormServiceError,
    InvalidPublishStatusError,
)

router = APIRouter(prefix="/forms", tags=["forms"])


def _form_read(db: Session, form: Form) -> FormRead:
    parsed = form_schema_service.normalize_fields(form.fields, form_id=form.id)
    return FormRead(
        id=form.id,
        title=form.title,
        type=form.type,
        is_active=form.is_active,
        publish_status=form.publish_status,
        event_id=form.event_id,
        created_at=form.created_at,
        updated_at=form.updated_at,
        fields=parsed.fields,
        fields_parse_failed=parsed.parse_failed,
        file_upload=form.file_upload,
        gcash_receipt=form.gcash_receipt,
        qr_code_image=form.qr_code_image,
        submission_limit=form.submission_limit,
        submission_deadline=form.submission_deadline,
        submission_count=form_submission_service.count_submissions(db, form.id),
    )


def _raise_for_form_error(exc: FormServiceError) -> None:
    if isinstance(exc, EventNotFoundError):
        raise HTTPException(status_code=404, detail="Event not found") from exc
    if isinstance(exc, (DuplicateFieldNameError, InvalidPublishStatusError)):
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    raise HTTPException(status_code=500, detail="Failed to save form") from exc


@router.get("", response_model=list[FormRead])
def list_forms(
    publish_status: str | None = Query(None),
    active_only: bool = Query(False),
    db: Session = Depends(get_db),
):
    forms = form_service.list_forms(db, publish_status=publish_status, active_only=active_only)
    return [_form_read(db, form) for form in forms]


@router.get("/{form_id}", response_model=FormRead)
def get_form(form_id: UUID, db: Session = Depends(get_db)):
    form = form_service.get_form(db, form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    return _form_read(db, form)


@router.post("", response_model=FormRead, status_code=status.HTTP_201_CREATED)
def create_form(data: FormCreate, db: Session = Depends(get_db)):
    attrs = data.model_dump(exclude={"title", "fields"})
    try:
        form = form_service.create_form(db, title=data.title, fields=data.fields, **attrs)
    except FormServiceError as exc:
        _raise_for_form_error(exc)
    return _form_read(db, form)


@router.put("/{form_id}", response_model=FormRead)
def update_form(form_id: UUID, data: FormUpdate, db: Session = Depends(get_db)):
    form = form_service.get_form(db, form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    try:
        form = form_service.update_form(db, form, data.model_dump(exclude_unset=True))
    except FormServiceError as exc:
        _raise_for_form_error(exc)
    return _form_read(db, form)


@router.delete("/{form_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_form(form_id: UUID, db: Session = Depends(get_db)):
    form = form_service.get_form(db, form_id)
    if not form:
        raise HTTPException(status_code=404, detail="Form not found")
    try:
        form_service.delete_form(db, form)
    except FormServiceError as exc:
        _raise_for_form_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
