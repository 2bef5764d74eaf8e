"""Tests for repository functions.

Runs against both record store implementations.
"""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from honeytrap.db import repo
from honeytrap.models.domain import (
    Caller,
    ConversationEntity,
    MessageEntity,
    PersonaEntity,
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
from honeytrap.store import MemoryRecordStore
from honeytrap.store.errors import TransportError

T0 = datetime(2020, 3, 1, 9, 0, tzinfo=timezone.utc)


def seed_messages(store, user_id: str, flags: list[bool]) -> list[dict]:
    """Insert one message per flag, one minute apart."""
    return [
        store.insert(
            "messages",
            {
                "user_id": user_id,
                "content": f"message {i}",
                "is_scam": is_scam,
                "created_at": T0 + timedelta(minutes=i),
            },
        )
        for i, is_scam in enumerate(flags)
    ]


class TestNoCaller:
    """Caller-scoped reads return empty values without a caller."""

    def test_empty_values(self, store):
        """No caller gives None, [] or 0 and issues no query."""
        assert repo.get_current_profile(store, None) is None
        assert repo.get_messages(store, None) == []
        assert repo.get_recent_scams(store, None) == []
        assert repo.get_personas(store, None) == []
        assert repo.get_conversations(store, None) == []
        assert repo.get_active_conversations_count(store, None) == 0
        assert repo.get_intelligence(store, None) == []
        assert repo.get_recent_intelligence(store, None) == []
        assert repo.get_intelligence_count(store, None) == 0

    def test_no_store_calls(self):
        """No caller never touches the store."""
        store = MemoryRecordStore()
        repo.get_messages(store, None)
        repo.get_intelligence_count(store, None)
        assert store.calls == []


class TestProfiles:
    """Test profile repository."""

    def test_get_current_profile(self, store, caller):
        """Returns the caller's own profile."""
        store.insert("profiles", {"id": caller.user_id, "email": "me@example.com"})
        store.insert("profiles", {"id": "other", "email": "other@example.com"})

        profile = repo.get_current_profile(store, caller)
        assert profile is not None
        assert profile.email == "me@example.com"
        assert profile.role == "user"

    def test_get_current_profile_missing(self, store, caller):
        """Returns None when the caller has no profile."""
        assert repo.get_current_profile(store, caller) is None

    def test_get_all_profiles_newest_first(self, store):
        """Lists all profiles, newest first."""
        store.insert("profiles", {"id": "a", "created_at": T0})
        store.insert("profiles", {"id": "b", "created_at": T0 + timedelta(days=1)})
        assert [p.id for p in repo.get_all_profiles(store)] == ["b", "a"]

    def test_update_profile_only_set_fields(self, store, caller):
        """Only explicitly set fields are written."""
        store.insert("profiles", {"id": caller.user_id, "email": "me@example.com"})
        repo.update_profile(store, caller.user_id, ProfileUpdate(full_name="Ada"))

        profile = repo.get_current_profile(store, caller)
        assert profile.full_name == "Ada"
        assert profile.email == "me@example.com"


class TestMessages:
    """Test message repository."""

    def test_create_message(self, store, caller):
        """Creates a message with generated fields."""
        message = repo.create_message(
            store,
            MessageCreate(
                user_id=caller.user_id,
                content="You won!",
                is_scam=True,
                scam_type="lottery",
                risk_level="medium",
                confidence=0.8,
            ),
        )
        assert isinstance(message, MessageEntity)
        assert message.id
        assert message.created_at is not None
        assert message.scam_type == "lottery"

    def test_get_messages_scoped_and_limited(self, store, caller):
        """Returns only the caller's messages, newest first, limited."""
        seed_messages(store, caller.user_id, [False, True, False])
        seed_messages(store, "other", [True])

        messages = repo.get_messages(store, caller, limit=2)
        assert [m.content for m in messages] == ["message 2", "message 1"]
        assert all(m.user_id == caller.user_id for m in messages)

    def test_get_recent_scams(self, store, caller):
        """Returns only scam-flagged messages."""
        seed_messages(store, caller.user_id, [True, False, True])
        scams = repo.get_recent_scams(store, caller)
        assert [m.content for m in scams] == ["message 2", "message 0"]
        assert all(m.is_scam for m in scams)

    def test_delete_message(self, store, caller):
        """Deletes a message."""
        rows = seed_messages(store, caller.user_id, [True])
        repo.delete_message(store, rows[0]["id"])
        assert repo.get_messages(store, caller) == []


class TestPersonas:
    """Test persona repository."""

    def test_create_update_delete(self, store, caller):
        """Persona lifecycle."""
        persona = repo.create_persona(
            store, PersonaCreate(user_id=caller.user_id, name="Grandpa Joe", age=80)
        )
        assert isinstance(persona, PersonaEntity)
        assert persona.is_default is False

        repo.update_persona(store, persona.id, PersonaUpdate(personality="Grumpy"))
        fetched = repo.get_persona(store, persona.id)
        assert fetched.personality == "Grumpy"
        assert fetched.name == "Grandpa Joe"

        repo.delete_persona(store, persona.id)
        assert repo.get_personas(store, caller) == []

    def test_ensure_default_personas(self, store, caller):
        """Creates every default persona once."""
        created = repo.ensure_default_personas(store, caller.user_id)
        assert len(created) == len(repo.DEFAULT_PERSONAS)
        assert all(p.is_default for p in created)

        personas = repo.get_personas(store, caller)
        assert {p.name for p in personas} == {t["name"] for t in repo.DEFAULT_PERSONAS}

    def test_ensure_default_personas_idempotent(self, store, caller):
        """A second call creates nothing."""
        repo.ensure_default_personas(store, caller.user_id)
        assert repo.ensure_default_personas(store, caller.user_id) == []
        assert len(repo.get_personas(store, caller)) == len(repo.DEFAULT_PERSONAS)

    def test_ensure_default_personas_fills_gaps(self, store, caller):
        """Only missing defaults are created."""
        first = repo.ensure_default_personas(store, caller.user_id)
        repo.delete_persona(store, first[0].id)

        created = repo.ensure_default_personas(store, caller.user_id)
        assert [p.name for p in created] == [first[0].name]

    def test_defaults_are_per_user(self, store, caller):
        """Another user's defaults do not count."""
        repo.ensure_default_personas(store, "other")
        assert len(repo.ensure_default_personas(store, caller.user_id)) == len(
            repo.DEFAULT_PERSONAS
        )


class TestConversations:
    """Test conversation repository."""

    def test_get_conversation_attaches_persona(self, store, caller):
        """Conversation detail includes its persona."""
        persona = repo.create_persona(store, PersonaCreate(user_id=caller.user_id, name="Margo"))
        conversation = repo.create_conversation(
            store, ConversationCreate(user_id=caller.user_id, persona_id=persona.id)
        )

        fetched = repo.get_conversation(store, conversation.id)
        assert isinstance(fetched, ConversationEntity)
        assert fetched.status == "active"
        assert fetched.persona is not None
        assert fetched.persona.name == "Margo"

    def test_get_conversation_without_persona(self, store, caller):
        """Conversation without persona has persona None."""
        conversation = repo.create_conversation(store, ConversationCreate(user_id=caller.user_id))
        assert repo.get_conversation(store, conversation.id).persona is None

    def test_get_conversation_missing(self, store):
        """Missing conversation returns None."""
        assert repo.get_conversation(store, "missing") is None

    def test_get_conversations_attaches_personas(self, store, caller):
        """Conversation lists include personas."""
        a = repo.create_persona(store, PersonaCreate(user_id=caller.user_id, name="A"))
        b = repo.create_persona(store, PersonaCreate(user_id=caller.user_id, name="B"))
        for persona in (a, b, a):
            repo.create_conversation(
                store, ConversationCreate(user_id=caller.user_id, persona_id=persona.id)
            )

        conversations = repo.get_conversations(store, caller)
        assert len(conversations) == 3
        assert sorted(c.persona.name for c in conversations) == ["A", "A", "B"]

    def test_update_conversation_stamps_updated_at(self, store, caller):
        """Updates always move updated_at forward."""
        conversation = repo.create_conversation(
            store,
            ConversationCreate(user_id=caller.user_id),
        )
        store.update("conversations", conversation.id, {"updated_at": T0})

        repo.update_conversation(store, conversation.id, ConversationUpdate(status="completed"))

        fetched = repo.get_conversation(store, conversation.id)
        assert fetched.status == "completed"
        assert fetched.updated_at > T0

    def test_active_count(self, store, caller):
        """Counts only the caller's active conversations."""
        for status in ("active", "active", "completed"):
            repo.create_conversation(
                store, ConversationCreate(user_id=caller.user_id, status=status)
            )
        repo.create_conversation(store, ConversationCreate(user_id="other"))

        assert repo.get_active_conversations_count(store, caller) == 2

    def test_delete_conversation(self, store, caller):
        """Deletes a conversation."""
        conversation = repo.create_conversation(store, ConversationCreate(user_id=caller.user_id))
        repo.delete_conversation(store, conversation.id)
        assert repo.get_conversation(store, conversation.id) is None

    def test_conversation_messages_oldest_first(self, store, caller):
        """Turns come back in timestamp order."""
        conversation = repo.create_conversation(store, ConversationCreate(user_id=caller.user_id))
        for i, role in enumerate(["scammer", "persona", "scammer"]):
            store.insert(
                "conversation_messages",
                {
                    "conversation_id": conversation.id,
                    "role": role,
                    "content": f"turn {i}",
                    "timestamp": T0 + timedelta(seconds=10 - i),
                },
            )

        turns = repo.get_conversation_messages(store, conversation.id)
        assert [t.content for t in turns] == ["turn 2", "turn 1", "turn 0"]

    def test_add_conversation_message(self, store, caller):
        """Appends a turn with a generated timestamp."""
        conversation = repo.create_conversation(store, ConversationCreate(user_id=caller.user_id))
        turn = repo.add_conversation_message(
            store,
            ConversationMessageCreate(
                conversation_id=conversation.id, role="persona", content="Who is this?"
            ),
        )
        assert turn.timestamp is not None
        assert repo.get_conversation_messages(store, conversation.id) == [turn]


class TestIntelligence:
    """Test intelligence repository."""

    def _create(self, store, user_id, value):
        return repo.create_intelligence(
            store, IntelligenceCreate(user_id=user_id, intel_type="phone_number", value=value)
        )

    def test_create_and_count(self, store, caller):
        """Entries are counted per caller."""
        self._create(store, caller.user_id, "+1-555-0100")
        self._create(store, caller.user_id, "+1-555-0101")
        self._create(store, "other", "+1-555-0102")
        assert repo.get_intelligence_count(store, caller) == 2

    def test_recent_limited_newest_first(self, store, caller):
        """Recent entries are newest first."""
        for i in range(7):
            store.insert(
                "intelligence",
                {
                    "user_id": caller.user_id,
                    "intel_type": "url",
                    "value": f"http://scam{i}.example",
                    "created_at": T0 + timedelta(minutes=i),
                },
            )

        recent = repo.get_recent_intelligence(store, caller)
        assert len(recent) == 5
        assert recent[0].value == "http://scam6.example"

    def test_delete(self, store, caller):
        """Deletes an entry."""
        entry = self._create(store, caller.user_id, "+1-555-0100")
        repo.delete_intelligence(store, entry.id)
        assert repo.get_intelligence(store, caller) == []


class TestSystemLogs:
    """Test best-effort system logs."""

    def test_create_and_list(self, store):
        """Logs are stored and listed newest first."""
        assert repo.create_log(store, SystemLogCreate(message="first")) is None
        store.insert(
            "system_logs",
            {"message": "older", "created_at": T0},
        )

        logs = repo.get_logs(store)
        assert [entry.message for entry in logs] == ["first", "older"]
        assert logs[0].level == "info"

    def test_create_log_failure_is_swallowed(self, caplog):
        """A failed log write is logged and returned, not raised."""
        store = MemoryRecordStore()
        store.fail("insert", "system_logs", TransportError("offline", table="system_logs"))

        with caplog.at_level(logging.ERROR, logger="honeytrap.db.repo"):
            error = repo.create_log(store, SystemLogCreate(message="lost", level="error"))

        assert isinstance(error, TransportError)
        assert "Failed to create log" in caplog.text

    def test_other_writes_propagate(self, caller):
        """Store failures outside logging propagate unchanged."""
        store = MemoryRecordStore()
        failure = TransportError("offline", table="messages")
        store.fail("query", "messages", failure)

        with pytest.raises(TransportError) as exc_info:
            repo.get_messages(store, caller)
        assert exc_info.value is failure


def test_caller_is_hashable():
    """Caller is a frozen value object."""
    assert Caller("u") == Caller("u")
    assert len({Caller("u"), Caller("u")}) == 1
