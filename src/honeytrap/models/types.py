"""Pydantic models for the honeytrap API.

Request payloads for record creation/update and the dashboard
aggregates returned by the reporter.
"""

import datetime as dt
from typing import Any

from pydantic import BaseModel, Field, field_validator

from honeytrap.models.domain import (
    ConversationRole,
    ConversationStatus,
    IntelType,
    LogLevel,
    ProfileRole,
    RiskLevel,
    ScamType,
)


def _reject_null(value: Any) -> Any:
    """Reject an explicit null for a column that cannot be cleared."""
    if value is None:
        raise ValueError("may be omitted but not null")
    return value


# ============================================================================
# Dashboard aggregates
# ============================================================================


class DashboardStats(BaseModel):
    """Headline counts for the caller's dashboard."""

    total_messages: int = 0
    total_scams: int = 0
    active_conversations: int = 0
    intelligence_extracted: int = 0


class ScamTypeCount(BaseModel):
    """Number of scam-flagged messages sharing a scam type."""

    type: str
    count: int


class DailyDetection(BaseModel):
    """Number of scam-flagged messages on one UTC calendar day."""

    date: dt.date
    count: int = Field(ge=0)


class CountResponse(BaseModel):
    """Single exact count."""

    count: int


# ============================================================================
# Profiles
# ============================================================================


class ProfileUpdate(BaseModel):
    """Partial profile update."""

    email: str | None = None
    full_name: str | None = None
    role: ProfileRole | None = None

    @field_validator("role")
    @classmethod
    def _role_not_null(cls, v):
        return _reject_null(v)


# ============================================================================
# Messages
# ============================================================================


class MessageCreate(BaseModel):
    """New analysed message."""

    user_id: str
    content: str
    is_scam: bool = False
    sender: str | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    scam_type: ScamType | None = None
    risk_level: RiskLevel | None = None
    explanation: str | None = None


# ============================================================================
# Personas
# ============================================================================


class PersonaCreate(BaseModel):
    """New decoy persona."""

    user_id: str
    name: str
    description: str | None = None
    age: int | None = None
    personality: str | None = None
    is_default: bool = False


class PersonaUpdate(BaseModel):
    """Partial persona update."""

    name: str | None = None
    description: str | None = None
    age: int | None = None
    personality: str | None = None

    @field_validator("name")
    @classmethod
    def _name_not_null(cls, v):
        return _reject_null(v)


# ============================================================================
# Conversations
# ============================================================================


class ConversationCreate(BaseModel):
    """New conversation."""

    user_id: str
    persona_id: str | None = None
    message_id: str | None = None
    status: ConversationStatus = "active"
    scammer_identifier: str | None = None


class ConversationUpdate(BaseModel):
    """Partial conversation update."""

    persona_id: str | None = None
    status: ConversationStatus | None = None
    scammer_identifier: str | None = None

    @field_validator("status")
    @classmethod
    def _status_not_null(cls, v):
        return _reject_null(v)


class ConversationMessageCreate(BaseModel):
    """New conversation turn."""

    conversation_id: str
    role: ConversationRole
    content: str


# ============================================================================
# Intelligence
# ============================================================================


class IntelligenceCreate(BaseModel):
    """New extracted intelligence entry."""

    user_id: str
    intel_type: IntelType
    value: str
    conversation_id: str | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)


# ============================================================================
# System logs
# ============================================================================


class SystemLogCreate(BaseModel):
    """New system log entry."""

    level: LogLevel = "info"
    message: str
    context: dict[str, Any] | None = None
    user_id: str | None = None
