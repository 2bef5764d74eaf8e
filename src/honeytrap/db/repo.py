"""Repository functions for record access.

One-shot wrappers over the record store: build filters, issue one query
or mutation, convert rows to domain entities. Caller-scoped reads return
an empty value when there is no caller. Store errors propagate unchanged,
except for ``create_log`` which is best-effort.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from honeytrap.models.domain import (
    Caller,
    ConversationEntity,
    ConversationMessageEntity,
    IntelligenceEntity,
    MessageEntity,
    PersonaEntity,
    ProfileEntity,
    SystemLogEntity,
)
from honeytrap.models.types import (
    ConversationCreate,
    ConversationMessageCreate,
    ConversationUpdate,
    IntelligenceCreate,
    MessageCreate,
    PersonaCreate,
    PersonaUpdate,
    ProfileUpdate,
    SystemLogCreate,
)
from honeytrap.store.base import RecordStore, Row, asc, desc, eq, in_
from honeytrap.store.errors import StoreError

logger = logging.getLogger(__name__)

# Personas seeded for every user by ensure_default_personas
DEFAULT_PERSONAS: list[dict] = [
    {
        "name": "Margaret",
        "description": "Retired school teacher, lives alone, new to smartphones.",
        "age": 72,
        "personality": "Trusting, chatty, slow to follow technical instructions.",
    },
    {
        "name": "Raj",
        "description": "Small business owner who is always busy.",
        "age": 45,
        "personality": "Distracted, asks for things to be repeated, eager to save money.",
    },
    {
        "name": "Alex",
        "description": "University student looking for part-time work.",
        "age": 21,
        "personality": "Curious, asks lots of questions, short on cash.",
    },
]


# ============================================================================
# Converters: rows -> Domain
# ============================================================================


def _profile_to_entity(row: Row) -> ProfileEntity:
    """Convert profile row to domain entity."""
    return ProfileEntity(
        id=row["id"],
        email=row.get("email"),
        full_name=row.get("full_name"),
        role=row.get("role", "user"),
        created_at=row.get("created_at"),
    )


def _message_to_entity(row: Row) -> MessageEntity:
    """Convert message row to domain entity."""
    return MessageEntity(
        id=row["id"],
        user_id=row["user_id"],
        content=row["content"],
        is_scam=bool(row.get("is_scam")),
        sender=row.get("sender"),
        confidence=row.get("confidence"),
        scam_type=row.get("scam_type"),
        risk_level=row.get("risk_level"),
        explanation=row.get("explanation"),
        created_at=row.get("created_at"),
    )


def _persona_to_entity(row: Row) -> PersonaEntity:
    """Convert persona row to domain entity."""
    return PersonaEntity(
        id=row["id"],
        user_id=row["user_id"],
        name=row["name"],
        description=row.get("description"),
        age=row.get("age"),
        personality=row.get("personality"),
        is_default=bool(row.get("is_default")),
        created_at=row.get("created_at"),
    )


def _conversation_to_entity(row: Row, persona: PersonaEntity | None = None) -> ConversationEntity:
    """Convert conversation row to domain entity."""
    return ConversationEntity(
        id=row["id"],
        user_id=row["user_id"],
        status=row["status"],
        persona_id=row.get("persona_id"),
        message_id=row.get("message_id"),
        scammer_identifier=row.get("scammer_identifier"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        persona=persona,
    )


def _conversation_message_to_entity(row: Row) -> ConversationMessageEntity:
    """Convert conversation message row to domain entity."""
    return ConversationMessageEntity(
        id=row["id"],
        conversation_id=row["conversation_id"],
        role=row["role"],
        content=row["content"],
        timestamp=row.get("timestamp"),
    )


def _intelligence_to_entity(row: Row) -> IntelligenceEntity:
    """Convert intelligence row to domain entity."""
    return IntelligenceEntity(
        id=row["id"],
        user_id=row["user_id"],
        intel_type=row["intel_type"],
        value=row["value"],
        conversation_id=row.get("conversation_id"),
        confidence=row.get("confidence"),
        created_at=row.get("created_at"),
    )


def _system_log_to_entity(row: Row) -> SystemLogEntity:
    """Convert system log row to domain entity."""
    return SystemLogEntity(
        id=row["id"],
        level=row["level"],
        message=row["message"],
        context=row.get("context"),
        user_id=row.get("user_id"),
        created_at=row.get("created_at"),
    )


# ============================================================================
# Profile Repository
# ============================================================================


def get_current_profile(store: RecordStore, caller: Caller | None) -> ProfileEntity | None:
    """Get the caller's own profile."""
    if caller is None:
        return None
    rows = store.query("profiles", [eq("id", caller.user_id)], limit=1)
    return _profile_to_entity(rows[0]) if rows else None


def get_all_profiles(store: RecordStore) -> list[ProfileEntity]:
    """Get all profiles, newest first."""
    rows = store.query("profiles", order_by=desc("created_at"))
    return [_profile_to_entity(r) for r in rows]


def update_profile(store: RecordStore, profile_id: str, updates: ProfileUpdate) -> None:
    """Update profile fields that were explicitly set."""
    store.update("profiles", profile_id, updates.model_dump(exclude_unset=True))


# ============================================================================
# Message Repository
# ============================================================================


def create_message(store: RecordStore, message: MessageCreate) -> MessageEntity:
    """Create a new analysed message."""
    row = store.insert("messages", message.model_dump())
    return _message_to_entity(row)


def get_messages(
    store: RecordStore, caller: Caller | None, limit: int = 50
) -> list[MessageEntity]:
    """Get the caller's most recent messages."""
    if caller is None:
        return []
    rows = store.query(
        "messages",
        [eq("user_id", caller.user_id)],
        order_by=desc("created_at"),
        limit=limit,
    )
    return [_message_to_entity(r) for r in rows]


def get_recent_scams(
    store: RecordStore, caller: Caller | None, limit: int = 10
) -> list[MessageEntity]:
    """Get the caller's most recent scam-flagged messages."""
    if caller is None:
        return []
    rows = store.query(
        "messages",
        [eq("user_id", caller.user_id), eq("is_scam", True)],
        order_by=desc("created_at"),
        limit=limit,
    )
    return [_message_to_entity(r) for r in rows]


def delete_message(store: RecordStore, message_id: str) -> None:
    """Delete a message."""
    store.delete("messages", message_id)


# ============================================================================
# Persona Repository
# ============================================================================


def get_personas(store: RecordStore, caller: Caller | None) -> list[PersonaEntity]:
    """Get the caller's personas, newest first."""
    if caller is None:
        return []
    rows = store.query(
        "personas",
        [eq("user_id", caller.user_id)],
        order_by=desc("created_at"),
    )
    return [_persona_to_entity(r) for r in rows]


def get_persona(store: RecordStore, persona_id: str) -> PersonaEntity | None:
    """Get persona by ID."""
    rows = store.query("personas", [eq("id", persona_id)], limit=1)
    return _persona_to_entity(rows[0]) if rows else None


def create_persona(store: RecordStore, persona: PersonaCreate) -> PersonaEntity:
    """Create a new persona."""
    row = store.insert("personas", persona.model_dump())
    return _persona_to_entity(row)


def update_persona(store: RecordStore, persona_id: str, updates: PersonaUpdate) -> None:
    """Update persona fields that were explicitly set."""
    store.update("personas", persona_id, updates.model_dump(exclude_unset=True))


def delete_persona(store: RecordStore, persona_id: str) -> None:
    """Delete a persona."""
    store.delete("personas", persona_id)


def ensure_default_personas(store: RecordStore, user_id: str) -> list[PersonaEntity]:
    """Create any built-in default personas the user does not have yet.

    Idempotent: defaults are matched by name among the user's default
    personas, so repeated calls insert nothing.

    Returns:
        The personas created by this call.
    """
    existing = store.query(
        "personas",
        [eq("user_id", user_id), eq("is_default", True)],
        columns=["name"],
    )
    existing_names = {r["name"] for r in existing}

    created = []
    for template in DEFAULT_PERSONAS:
        if template["name"] in existing_names:
            continue
        row = store.insert("personas", {**template, "user_id": user_id, "is_default": True})
        created.append(_persona_to_entity(row))
    return created


# ============================================================================
# Conversation Repository
# ============================================================================


def _attach_personas(store: RecordStore, rows: list[Row]) -> list[ConversationEntity]:
    """Convert conversation rows, attaching their persona records."""
    persona_ids = sorted({r["persona_id"] for r in rows if r.get("persona_id")})
    personas: dict[str, PersonaEntity] = {}
    if persona_ids:
        persona_rows = store.query("personas", [in_("id", persona_ids)])
        personas = {p["id"]: _persona_to_entity(p) for p in persona_rows}
    return [_conversation_to_entity(r, personas.get(r.get("persona_id"))) for r in rows]


def get_conversations(
    store: RecordStore, caller: Caller | None, limit: int = 50
) -> list[ConversationEntity]:
    """Get the caller's most recent conversations with personas attached."""
    if caller is None:
        return []
    rows = store.query(
        "conversations",
        [eq("user_id", caller.user_id)],
        order_by=desc("created_at"),
        limit=limit,
    )
    return _attach_personas(store, rows)


def get_conversation(store: RecordStore, conversation_id: str) -> ConversationEntity | None:
    """Get conversation by ID with its persona attached."""
    rows = store.query("conversations", [eq("id", conversation_id)], limit=1)
    if not rows:
        return None
    return _attach_personas(store, rows)[0]


def create_conversation(store: RecordStore, conversation: ConversationCreate) -> ConversationEntity:
    """Create a new conversation."""
    row = store.insert("conversations", conversation.model_dump())
    return _conversation_to_entity(row)


def update_conversation(
    store: RecordStore, conversation_id: str, updates: ConversationUpdate
) -> None:
    """Update conversation fields; always stamps updated_at."""
    values = updates.model_dump(exclude_unset=True)
    values["updated_at"] = datetime.now(timezone.utc)
    store.update("conversations", conversation_id, values)


def delete_conversation(store: RecordStore, conversation_id: str) -> None:
    """Delete a conversation."""
    store.delete("conversations", conversation_id)


def get_active_conversations_count(store: RecordStore, caller: Caller | None) -> int:
    """Count the caller's active conversations."""
    if caller is None:
        return 0
    count = store.count(
        "conversations",
        [eq("user_id", caller.user_id), eq("status", "active")],
    )
    return count or 0


# ============================================================================
# Conversation Message Repository
# ============================================================================


def get_conversation_messages(
    store: RecordStore, conversation_id: str
) -> list[ConversationMessageEntity]:
    """Get all turns of a conversation, oldest first."""
    rows = store.query(
        "conversation_messages",
        [eq("conversation_id", conversation_id)],
        order_by=asc("timestamp"),
    )
    return [_conversation_message_to_entity(r) for r in rows]


def add_conversation_message(
    store: RecordStore, message: ConversationMessageCreate
) -> ConversationMessageEntity:
    """Append a turn to a conversation."""
    row = store.insert("conversation_messages", message.model_dump())
    return _conversation_message_to_entity(row)


# ============================================================================
# Intelligence Repository
# ============================================================================


def get_intelligence(
    store: RecordStore, caller: Caller | None, limit: int = 100
) -> list[IntelligenceEntity]:
    """Get the caller's intelligence entries, newest first."""
    if caller is None:
        return []
    rows = store.query(
        "intelligence",
        [eq("user_id", caller.user_id)],
        order_by=desc("created_at"),
        limit=limit,
    )
    return [_intelligence_to_entity(r) for r in rows]


def get_recent_intelligence(
    store: RecordStore, caller: Caller | None, limit: int = 5
) -> list[IntelligenceEntity]:
    """Get the caller's latest few intelligence entries."""
    return get_intelligence(store, caller, limit=limit)


def create_intelligence(store: RecordStore, intelligence: IntelligenceCreate) -> IntelligenceEntity:
    """Create a new intelligence entry."""
    row = store.insert("intelligence", intelligence.model_dump())
    return _intelligence_to_entity(row)


def delete_intelligence(store: RecordStore, intelligence_id: str) -> None:
    """Delete an intelligence entry."""
    store.delete("intelligence", intelligence_id)


def get_intelligence_count(store: RecordStore, caller: Caller | None) -> int:
    """Count the caller's intelligence entries."""
    if caller is None:
        return 0
    count = store.count("intelligence", [eq("user_id", caller.user_id)])
    return count or 0


# ============================================================================
# System Log Repository
# ============================================================================


def get_logs(store: RecordStore, limit: int = 100) -> list[SystemLogEntity]:
    """Get the most recent system logs."""
    rows = store.query("system_logs", order_by=desc("created_at"), limit=limit)
    return [_system_log_to_entity(r) for r in rows]


def create_log(store: RecordStore, log: SystemLogCreate) -> StoreError | None:
    """Persist a system log entry, best-effort.

    A failed write is reported on this module's logger and returned,
    never raised: losing a log line must not fail the caller's operation.

    Returns:
        The store error if the write failed, otherwise None.
    """
    try:
        store.insert("system_logs", log.model_dump())
    except StoreError as e:
        logger.error("Failed to create log: %s", e)
        return e
    return None
