"""Enum definitions for application constants."""

from skforms.db.enums.finance import RevenueSource, RevenueStatus
from skforms.db.enums.forms import (
    REVIEW_STATUSES,
    FieldType,
    FormPublishStatus,
    FormSubmissionStatus,
)
from skforms.db.enums.youth import (
    DEFAULT_CIVIL_STATUS,
    DEFAULT_COMMITTEE,
    YouthProfileStatus,
)

__all__ = [
    "DEFAULT_CIVIL_STATUS",
    "DEFAULT_COMMITTEE",
    "REVIEW_STATUSES",
    "FieldType",
    "FormPublishStatus",
    "FormSubmissionStatus",
    "RevenueSource",
    "RevenueStatus",
    "YouthProfileStatus",
]
