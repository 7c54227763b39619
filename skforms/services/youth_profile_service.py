"""Youth profile synthesis from youth registration submissions."""

from __future__ import annotations

import logging
import math
import secrets
import uuid
from datetime import date
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skforms.core.config import settings
from skforms.core.structured_logging import build_log_context
from skforms.db.enums import DEFAULT_CIVIL_STATUS, DEFAULT_COMMITTEE, YouthProfileStatus
from skforms.db.models import FormSubmission, YouthProfile
from skforms.services.field_aliases import YOUTH_PROFILE_ALIASES
from skforms.services.field_resolver import parse_submission_data
from skforms.services.form_submission_service import (
    InvalidSubmissionDataError,
    SubmissionNotFoundError,
)
from skforms.utils.datetime_parsing import parse_date_value

logger = logging.getLogger(__name__)

TRACKING_ID_PREFIX = "SK"
TRACKING_ID_ATTEMPTS = 10

BOOLEAN_ATTRIBUTES = frozenset(
    {"is_graduated", "is_employed", "sk_membership", "is_pwd", "is_solo_parent"}
)
FLOAT_ATTRIBUTES = frozenset({"latitude", "longitude"})
# Text columns that are stored as "" rather than NULL when absent.
BLANK_TEXT_ATTRIBUTES = frozenset(
    {"skills", "hobbies", "preferred_programs", "volunteer_experience", "leadership_roles"}
)


class YouthProfileError(Exception):
    """Base exception for youth profile errors."""

    pass


class UnsupportedFormError(YouthProfileError):
    """Form is not a youth registration form."""

    pass


class DuplicateProfileError(YouthProfileError):
    """A profile already exists for this person."""

    def __init__(self, existing: YouthProfile):
        self.existing = existing
        super().__init__("Youth profile already exists for this person")


class TrackingIdExhaustedError(YouthProfileError):
    """No free tracking id was found."""

    pass


# =============================================================================
# Value coercion
# =============================================================================


def is_youth_registration(form_title: str | None) -> bool:
    marker = settings.YOUTH_REGISTRATION_MARKER.lower()
    return bool(form_title) and marker in form_title.lower()


def coerce_flag(value: Any) -> bool:
    """``"Yes"``, ``"true"`` and boolean True are true; anything else is false."""
    if value is True:
        return True
    if isinstance(value, str):
        return value.strip() in ("Yes", "true")
    return False


def _coerce_text(value: Any) -> str | None:
    if value is None or isinstance(value, dict):
        return None
    if isinstance(value, list):
        text = ", ".join(str(item).strip() for item in value if str(item).strip())
    else:
        text = str(value).strip()
    return text or None


def _coerce_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def calculate_age(date_of_birth: date, today: date) -> int:
    """Whole years between ``date_of_birth`` and ``today``."""
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def map_submission_to_profile(data: dict[str, Any]) -> dict[str, Any]:
    """Map submitted values onto profile attributes with defaults applied.

    Raises InvalidSubmissionDataError when the full name or a readable date of
    birth is missing.
    """
    resolved = YOUTH_PROFILE_ALIASES.resolve_all(data)
    attrs: dict[str, Any] = {}
    for attribute in YOUTH_PROFILE_ALIASES.purposes():
        value = resolved.get(attribute)
        if attribute in BOOLEAN_ATTRIBUTES:
            attrs[attribute] = coerce_flag(value)
        elif attribute in FLOAT_ATTRIBUTES:
            attrs[attribute] = _coerce_float(value)
        elif attribute == "date_of_birth":
            attrs[attribute] = parse_date_value(value)
        else:
            attrs[attribute] = _coerce_text(value)

    if not attrs["full_name"]:
        raise InvalidSubmissionDataError("Full name is required")
    if attrs["date_of_birth"] is None:
        raise InvalidSubmissionDataError("A valid date of birth is required")

    attrs["civil_status"] = attrs["civil_status"] or DEFAULT_CIVIL_STATUS
    attrs["committee"] = attrs["committee"] or DEFAULT_COMMITTEE
    attrs["barangay"] = attrs["barangay"] or settings.DEFAULT_BARANGAY
    for attribute in BLANK_TEXT_ATTRIBUTES:
        attrs[attribute] = attrs[attribute] or ""
    return attrs


# =============================================================================
# Persistence
# =============================================================================


def find_existing_profile(
    db: Session,
    full_name: str,
    mobile_number: str | None,
    date_of_birth: date,
) -> YouthProfile | None:
    mobile_clause = (
        YouthProfile.mobile_number.is_(None)
        if mobile_number is None
        else YouthProfile.mobile_number == mobile_number
    )
    return db.scalar(
        select(YouthProfile)
        .where(
            YouthProfile.full_name == full_name,
            mobile_clause,
            YouthProfile.date_of_birth == date_of_birth,
        )
        .limit(1)
    )


def generate_tracking_id(db: Session, year: int) -> str:
    """Random ``SK-{year}-{NNNN}`` id not yet used by any profile."""
    for _ in range(TRACKING_ID_ATTEMPTS):
        candidate = f"{TRACKING_ID_PREFIX}-{year}-{secrets.randbelow(10000):04d}"
        taken = db.scalar(select(YouthProfile.id).where(YouthProfile.tracking_id == candidate))
        if taken is None:
            return candidate
    raise TrackingIdExhaustedError(f"No free tracking id for {year}")


def auto_create_from_submission(
    db: Session,
    submission_id: uuid.UUID,
    form_title: str | None,
    *,
    today: date | None = None,
) -> YouthProfile:
    """Create a youth profile from a youth registration submission.

    The submission's notes are overwritten with the new tracking id in the
    same transaction as the profile insert.
    """
    if not is_youth_registration(form_title):
        raise UnsupportedFormError("This feature is only available for Youth Registration Forms")

    submission = db.get(FormSubmission, submission_id)
    if submission is None:
        raise SubmissionNotFoundError("Submission not found")

    log_context = build_log_context(submission_id=str(submission.id), form_id=str(submission.form_id))
    parsed = parse_submission_data(submission.data)
    if parsed.parse_failed:
        raise InvalidSubmissionDataError("Invalid submission data format")

    attrs = map_submission_to_profile(parsed.values)

    existing = find_existing_profile(
        db, attrs["full_name"], attrs["mobile_number"], attrs["date_of_birth"]
    )
    if existing is not None:
        logger.info("Youth profile already exists (%s)", existing.tracking_id, extra=log_context)
        raise DuplicateProfileError(existing)

    today = today or date.today()
    profile = YouthProfile(
        tracking_id=generate_tracking_id(db, today.year),
        age=calculate_age(attrs["date_of_birth"], today),
        status=YouthProfileStatus.ACTIVE.value,
        participation=0,
        date_of_registration=today,
        last_activity=today,
        **attrs,
    )
    db.add(profile)
    submission.notes = f"Youth profile automatically created: {profile.tracking_id}"
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create youth profile", extra=log_context)
        raise YouthProfileError("Failed to create youth profile from submission") from exc

    db.refresh(profile)
    logger.info("Created youth profile %s", profile.tracking_id, extra=log_context)
    return profile


def list_profiles(
    db: Session,
    *,
    status: str | None = None,
    barangay: str | None = None,
) -> list[YouthProfile]:
    query = db.query(YouthProfile)
    if status:
        query = query.filter(YouthProfile.status == status)
    if barangay:
        query = query.filter(YouthProfile.barangay == barangay)
    return query.order_by(YouthProfile.created_at.desc()).all()


def get_profile_by_tracking_id(db: Session, tracking_id: str) -> YouthProfile | None:
    return db.scalar(select(YouthProfile).where(YouthProfile.tracking_id == tracking_id))
