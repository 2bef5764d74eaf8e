"""Conversations API endpoints.

GET /api/conversations - List the caller's conversations
POST /api/conversations - Start a conversation
GET /api/conversations/active/count - Count the caller's active conversations
GET /api/conversations/{conversation_id} - Get conversation detail
PATCH /api/conversations/{conversation_id} - Update a conversation
DELETE /api/conversations/{conversation_id} - Delete a conversation
GET /api/conversations/{conversation_id}/messages - List conversation turns
POST /api/conversations/{conversation_id}/messages - Append a turn
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel

from honeytrap.api.app import get_caller, get_store
from honeytrap.db import repo
from honeytrap.models.domain import (
    Caller,
    ConversationEntity,
    ConversationMessageEntity,
    ConversationRole,
)
from honeytrap.models.types import (
    ConversationCreate,
    ConversationMessageCreate,
    ConversationUpdate,
    CountResponse,
)
from honeytrap.store.base import RecordStore

router = APIRouter()


class TurnSubmission(BaseModel):
    """Body for appending a turn; the conversation comes from the path."""

    role: ConversationRole
    content: str


@router.get("/conversations", response_model=list[ConversationEntity])
def get_conversations(
    limit: int = Query(default=50, ge=1, le=500),
    store: RecordStore = Depends(get_store),
    caller: Caller | None = Depends(get_caller),
) -> list[ConversationEntity]:
    """List the caller's conversations, newest first."""
    return repo.get_conversations(store, caller, limit=limit)


@router.post("/conversations", response_model=ConversationEntity, status_code=201)
def create_conversation(
    conversation: ConversationCreate,
    store: RecordStore = Depends(get_store),
) -> ConversationEntity:
    """Start a conversation."""
    return repo.create_conversation(store, conversation)


@router.get("/conversations/active/count", response_model=CountResponse)
def get_active_conversations_count(
    store: RecordStore = Depends(get_store),
    caller: Caller | None = Depends(get_caller),
) -> CountResponse:
    """Count the caller's active conversations."""
    return CountResponse(count=repo.get_active_conversations_count(store, caller))


@router.get("/conversations/{conversation_id}", response_model=ConversationEntity)
def get_conversation(
    conversation_id: str,
    store: RecordStore = Depends(get_store),
) -> ConversationEntity:
    """Get conversation detail with its persona.

    Raises:
        HTTPException: 404 if conversation not found.
    """
    conversation = repo.get_conversation(store, conversation_id)

    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")

    return conversation


@router.patch("/conversations/{conversation_id}", status_code=204)
def update_conversation(
    conversation_id: str,
    updates: ConversationUpdate,
    store: RecordStore = Depends(get_store),
) -> Response:
    """Update a conversation."""
    repo.update_conversation(store, conversation_id, updates)
    return Response(status_code=204)


@router.delete("/conversations/{conversation_id}", status_code=204)
def delete_conversation(
    conversation_id: str,
    store: RecordStore = Depends(get_store),
) -> Response:
    """Delete a conversation."""
    repo.delete_conversation(store, conversation_id)
    return Response(status_code=204)


@router.get(
    "/conversations/{conversation_id}/messages",
    response_model=list[ConversationMessageEntity],
)
def get_conversation_messages(
    conversation_id: str,
    store: RecordStore = Depends(get_store),
) -> list[ConversationMessageEntity]:
    """List the turns of a conversation, oldest first."""
    return repo.get_conversation_messages(store, conversation_id)


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=ConversationMessageEntity,
    status_code=201,
)
def add_conversation_message(
    conversation_id: str,
    turn: TurnSubmission,
    store: RecordStore = Depends(get_store),
) -> ConversationMessageEntity:
    """Append a turn to a conversation.

    Raises:
        HTTPException: 404 if conversation not found.
    """
    if repo.get_conversation(store, conversation_id) is None:
        raise HTTPException(status_code=404, detail="Conversation not found")

    message = ConversationMessageCreate(
        conversation_id=conversation_id,
        role=turn.role,
        content=turn.content,
    )
    return repo.add_conversation_message(store, message)
