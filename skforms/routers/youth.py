"""Youth profile endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from skforms.core.deps import get_db
from skforms.schemas.youth import AutoCreateRequest, AutoCreateResponse, YouthProfileRead
from skforms.services import youth_profile_service
from skforms.services.form_submission_service import (
    InvalidSubmissionDataError,
    SubmissionNotFoundError,
)
from skforms.services.youth_profile_service import (
    DuplicateProfileError,
    UnsupportedFormError,
    YouthProfileError,
)

router = APIRouter(prefix="/youth", tags=["youth"])


@router.post("/auto-create", response_model=AutoCreateResponse, status_code=status.HTTP_201_CREATED)
def auto_create_profile(data: AutoCreateRequest, db: Session = Depends(get_db)):
    """Create a youth profile from a youth registration submission."""
    try:
        profile = youth_profile_service.auto_create_from_submission(
            db, data.submission_id, data.form_title
        )
    except (UnsupportedFormError, InvalidSubmissionDataError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except SubmissionNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Submission not found") from exc
    except DuplicateProfileError as exc:
        raise HTTPException(
            status_code=409,
            detail={
                "message": str(exc),
                "existing_profile": YouthProfileRead.model_validate(exc.existing).model_dump(
                    mode="json"
                ),
            },
        ) from exc
    except YouthProfileError as exc:
        raise HTTPException(
            status_code=500, detail="Failed to create youth profile from submission"
        ) from exc

    return AutoCreateResponse(youth_profile=YouthProfileRead.model_validate(profile))


@router.get("", response_model=list[YouthProfileRead])
def list_profiles(
    status_filter: str | None = Query(None, alias="status"),
    barangay: str | None = Query(None),
    db: Session = Depends(get_db),
):
    return youth_profile_service.list_profiles(db, status=status_filter, barangay=barangay)


@router.get("/{tracking_id}", response_model=YouthProfileRead)
def get_profile(tracking_id: str, db: Session = Depends(get_db)):
    profile = youth_profile_service.get_profile_by_tracking_id(db, tracking_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Youth profile not found")
    return profile
