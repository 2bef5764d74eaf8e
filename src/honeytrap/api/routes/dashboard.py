"""Dashboard API endpoints.

GET /api/dashboard/stats - Headline counts
GET /api/dashboard/scam-types - Scam type distribution
GET /api/dashboard/daily - Daily scam detections
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from honeytrap.aggregation import dashboard
from honeytrap.api.app import get_caller, get_store
from honeytrap.models.domain import Caller
from honeytrap.models.types import DailyDetection, DashboardStats, ScamTypeCount
from honeytrap.store.base import RecordStore

router = APIRouter(prefix="/dashboard")


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    store: RecordStore = Depends(get_store),
    caller: Caller | None = Depends(get_caller),
) -> DashboardStats:
    """Get headline counts for the caller."""
    return await dashboard.get_stats(store, caller)


@router.get("/scam-types", response_model=list[ScamTypeCount])
async def get_scam_type_distribution(
    store: RecordStore = Depends(get_store),
    caller: Caller | None = Depends(get_caller),
) -> list[ScamTypeCount]:
    """Get the caller's scam type distribution."""
    return await dashboard.get_scam_type_distribution(store, caller)


@router.get("/daily", response_model=list[DailyDetection])
async def get_daily_detections(
    days: int = Query(default=7, ge=0, le=366),
    store: RecordStore = Depends(get_store),
    caller: Caller | None = Depends(get_caller),
) -> list[DailyDetection]:
    """Get the caller's scam detections per day.

    Args:
        days: Number of trailing days, today included.
        store: Record store (injected).
        caller: Current caller (injected).

    Returns:
        Exactly ``days`` zero-filled buckets, oldest first.
    """
    return await dashboard.get_daily_detections(store, caller, days)
