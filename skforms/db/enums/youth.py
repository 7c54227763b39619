"""Youth profile enums."""

from enum import Enum


class YouthProfileStatus(str, Enum):
    """Membership state of a youth profile."""

    ACTIVE = "Active"
    INACTIVE = "Inactive"


DEFAULT_CIVIL_STATUS = "Single"
DEFAULT_COMMITTEE = "General"
