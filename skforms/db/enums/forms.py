"""Form-related enums."""

from enum import Enum


class FormPublishStatus(str, Enum):
    """Publication state of a form."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


class FormSubmissionStatus(str, Enum):
    """Review status of a submitted form response."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class FieldType(str, Enum):
    """Field types understood by the form builder."""

    TEXT = "text"
    EMAIL = "email"
    TEL = "tel"
    NUMBER = "number"
    DATE = "date"
    TEXTAREA = "textarea"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    RATING = "rating"
    SCALE = "scale"
    PARAGRAPH = "paragraph"
    SIGNATURE = "signature"
    CONSENT = "consent"
    FILE_UPLOAD = "fileUpload"
    GCASH_RECEIPT = "gcashReceipt"


# Statuses an admin may set when reviewing a submission.
REVIEW_STATUSES = frozenset(
    {FormSubmissionStatus.APPROVED.value, FormSubmissionStatus.REJECTED.value}
)
