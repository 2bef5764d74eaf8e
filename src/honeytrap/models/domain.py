"""Domain models for honeytrap.

Pure Python dataclasses representing domain entities.
These models are independent of the record store and used throughout
the application for clean separation from the persistence layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal


# ============================================================================
# Caller
# ============================================================================


@dataclass(frozen=True)
class Caller:
    """The authenticated user on whose behalf queries are scoped."""

    user_id: str


# ============================================================================
# Profile Domain
# ============================================================================

ProfileRole = Literal["user", "admin"]


@dataclass
class ProfileEntity:
    """Domain model for a user profile."""

    id: str
    email: str | None
    full_name: str | None
    role: ProfileRole
    created_at: datetime | None = None


# ============================================================================
# Message Domain
# ============================================================================

ScamType = Literal[
    "phishing",
    "lottery",
    "investment",
    "romance",
    "tech_support",
    "impersonation",
    "job_offer",
    "other",
]
RiskLevel = Literal["low", "medium", "high", "critical"]


@dataclass
class MessageEntity:
    """Domain model for an analysed message (a detection event)."""

    id: str
    user_id: str
    content: str
    is_scam: bool
    sender: str | None = None
    confidence: float | None = None
    scam_type: ScamType | None = None
    risk_level: RiskLevel | None = None
    explanation: str | None = None
    created_at: datetime | None = None


# ============================================================================
# Persona Domain
# ============================================================================


@dataclass
class PersonaEntity:
    """Domain model for a decoy persona used to engage scammers."""

    id: str
    user_id: str
    name: str
    description: str | None = None
    age: int | None = None
    personality: str | None = None
    is_default: bool = False
    created_at: datetime | None = None


# ============================================================================
# Conversation Domain
# ============================================================================

ConversationStatus = Literal["active", "paused", "completed", "terminated"]
ConversationRole = Literal["scammer", "persona"]


@dataclass
class ConversationEntity:
    """Domain model for a conversation with a scammer.

    ``persona`` is populated by the repository when the linked persona
    record exists.
    """

    id: str
    user_id: str
    status: ConversationStatus
    persona_id: str | None = None
    message_id: str | None = None
    scammer_identifier: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    persona: PersonaEntity | None = None


@dataclass
class ConversationMessageEntity:
    """Domain model for a single turn in a conversation."""

    id: str
    conversation_id: str
    role: ConversationRole
    content: str
    timestamp: datetime | None = None


# ============================================================================
# Intelligence Domain
# ============================================================================

IntelType = Literal[
    "phone_number",
    "bank_account",
    "upi_id",
    "url",
    "email",
    "crypto_wallet",
    "other",
]


@dataclass
class IntelligenceEntity:
    """Domain model for a piece of intelligence extracted from a scammer."""

    id: str
    user_id: str
    intel_type: IntelType
    value: str
    conversation_id: str | None = None
    confidence: float | None = None
    created_at: datetime | None = None


# ============================================================================
# System Log Domain
# ============================================================================

LogLevel = Literal["debug", "info", "warning", "error"]


@dataclass
class SystemLogEntity:
    """Domain model for a persisted system log entry."""

    id: str
    level: LogLevel
    message: str
    context: dict[str, Any] | None = None
    user_id: str | None = None
    created_at: datetime | None = None
