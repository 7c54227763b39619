"""Revenue-related enums."""

from enum import Enum


class RevenueSource(str, Enum):
    """Where a revenue entry came from."""

    GCASH = "GCASH"
    CASH = "CASH"
    DONATION = "DONATION"
    GRANT = "GRANT"
    OTHER = "OTHER"


class RevenueStatus(str, Enum):
    """Approval state of a revenue entry."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
