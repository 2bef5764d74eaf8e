"""System logs API endpoints.

GET /api/logs - List recent system logs
POST /api/logs - Write a system log entry (best-effort)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from honeytrap.api.app import get_store
from honeytrap.db import repo
from honeytrap.models.domain import SystemLogEntity
from honeytrap.models.types import SystemLogCreate
from honeytrap.store.base import RecordStore

router = APIRouter()


class LogAcceptedResponse(BaseModel):
    """Response for a log write; ``stored`` is False when the write was dropped."""

    stored: bool


@router.get("/logs", response_model=list[SystemLogEntity])
def get_logs(
    limit: int = Query(default=100, ge=1, le=1000),
    store: RecordStore = Depends(get_store),
) -> list[SystemLogEntity]:
    """List system logs, newest first."""
    return repo.get_logs(store, limit=limit)


@router.post("/logs", response_model=LogAcceptedResponse, status_code=202)
def create_log(
    log: SystemLogCreate,
    store: RecordStore = Depends(get_store),
) -> LogAcceptedResponse:
    """Write a system log entry.

    Always accepted: a failed write is logged server-side and reported
    as ``stored: false`` rather than as an error.
    """
    error = repo.create_log(store, log)
    return LogAcceptedResponse(stored=error is None)
