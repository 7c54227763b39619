"""Revenue endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skforms.core.deps import get_db
from skforms.schemas.revenue import GcashSyncResponse, RevenueRead
from skforms.services import revenue_sync_service

router = APIRouter(prefix="/revenue", tags=["revenue"])


@router.post("/sync-gcash", response_model=GcashSyncResponse)
def sync_gcash(db: Session = Depends(get_db)):
    """Book revenue for approved submissions that carry a GCash payment."""
    result = revenue_sync_service.sync_gcash_revenue(db)
    return GcashSyncResponse(
        created=result.created,
        skipped=result.skipped,
        total_processed=result.total_processed,
        unlinked=result.unlinked,
        failed=result.failed,
    )


@router.get("", response_model=list[RevenueRead])
def list_revenues(
    source: str | None = Query(None),
    program_id: UUID | None = Query(None),
    db: Session = Depends(get_db),
):
    return revenue_sync_service.list_revenues(db, source=source, program_id=program_id)
