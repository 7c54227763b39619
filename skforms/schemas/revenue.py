"""Schemas for revenue entries and GCash sync."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel


class RevenueRead(BaseModel):
    id: UUID
    title: str
    description: str | None
    amount: Decimal
    source: str
    status: str
    date: datetime
    receipt: str | None
    program_id: UUID
    form_submission_id: UUID | None
    created_at: datetime

    model_config = {"from_attributes": True}


class GcashSyncResponse(BaseModel):
    message: str = "GCash revenue sync completed"
    created: int
    skipped: int
    total_processed: int
    unlinked: int
    failed: int
