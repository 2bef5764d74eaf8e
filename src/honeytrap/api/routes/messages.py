"""Messages API endpoints.

POST /api/messages - Record an analysed message
GET /api/messages - List the caller's messages
GET /api/messages/scams - List the caller's recent scams
DELETE /api/messages/{message_id} - Delete a message
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response

from honeytrap.api.app import get_caller, get_store
from honeytrap.db import repo
from honeytrap.models.domain import Caller, MessageEntity
from honeytrap.models.types import MessageCreate
from honeytrap.store.base import RecordStore

router = APIRouter()


@router.post("/messages", response_model=MessageEntity, status_code=201)
def create_message(
    message: MessageCreate,
    store: RecordStore = Depends(get_store),
) -> MessageEntity:
    """Record an analysed message."""
    return repo.create_message(store, message)


@router.get("/messages", response_model=list[MessageEntity])
def get_messages(
    limit: int = Query(default=50, ge=1, le=500),
    store: RecordStore = Depends(get_store),
    caller: Caller | None = Depends(get_caller),
) -> list[MessageEntity]:
    """List the caller's messages, newest first."""
    return repo.get_messages(store, caller, limit=limit)


@router.get("/messages/scams", response_model=list[MessageEntity])
def get_recent_scams(
    limit: int = Query(default=10, ge=1, le=500),
    store: RecordStore = Depends(get_store),
    caller: Caller | None = Depends(get_caller),
) -> list[MessageEntity]:
    """List the caller's scam-flagged messages, newest first."""
    return repo.get_recent_scams(store, caller, limit=limit)


@router.delete("/messages/{message_id}", status_code=204)
def delete_message(
    message_id: str,
    store: RecordStore = Depends(get_store),
) -> Response:
    """Delete a message."""
    repo.delete_message(store, message_id)
    return Response(status_code=204)
