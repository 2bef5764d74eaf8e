"""Intelligence API endpoints.

GET /api/intelligence - List the caller's intelligence
POST /api/intelligence - Record extracted intelligence
GET /api/intelligence/count - Count the caller's intelligence
GET /api/intelligence/recent - Latest few entries
DELETE /api/intelligence/{intelligence_id} - Delete an entry
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response

from honeytrap.api.app import get_caller, get_store
from honeytrap.db import repo
from honeytrap.models.domain import Caller, IntelligenceEntity
from honeytrap.models.types import CountResponse, IntelligenceCreate
from honeytrap.store.base import RecordStore

router = APIRouter()


@router.get("/intelligence", response_model=list[IntelligenceEntity])
def get_intelligence(
    limit: int = Query(default=100, ge=1, le=1000),
    store: RecordStore = Depends(get_store),
    caller: Caller | None = Depends(get_caller),
) -> list[IntelligenceEntity]:
    """List the caller's intelligence, newest first."""
    return repo.get_intelligence(store, caller, limit=limit)


@router.post("/intelligence", response_model=IntelligenceEntity, status_code=201)
def create_intelligence(
    intelligence: IntelligenceCreate,
    store: RecordStore = Depends(get_store),
) -> IntelligenceEntity:
    """Record extracted intelligence."""
    return repo.create_intelligence(store, intelligence)


@router.get("/intelligence/count", response_model=CountResponse)
def get_intelligence_count(
    store: RecordStore = Depends(get_store),
    caller: Caller | None = Depends(get_caller),
) -> CountResponse:
    """Count the caller's intelligence entries."""
    return CountResponse(count=repo.get_intelligence_count(store, caller))


@router.get("/intelligence/recent", response_model=list[IntelligenceEntity])
def get_recent_intelligence(
    limit: int = Query(default=5, ge=1, le=100),
    store: RecordStore = Depends(get_store),
    caller: Caller | None = Depends(get_caller),
) -> list[IntelligenceEntity]:
    """List the caller's latest intelligence entries."""
    return repo.get_recent_intelligence(store, caller, limit=limit)


@router.delete("/intelligence/{intelligence_id}", status_code=204)
def delete_intelligence(
    intelligence_id: str,
    store: RecordStore = Depends(get_store),
) -> Response:
    """Delete an intelligence entry."""
    repo.delete_intelligence(store, intelligence_id)
    return Response(status_code=204)
