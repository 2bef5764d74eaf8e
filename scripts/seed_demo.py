#!/usr/bin/env python3
"""Seed a demo database with scam detection records.

Usage:
    python scripts/seed_demo.py

This script:
1. Initializes the demo database
2. Seeds a profile, default personas and a week of messages
3. Starts a conversation and records extracted intelligence
4. Prints the dashboard aggregates for the demo user
"""

from __future__ import annotations

import asyncio
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from honeytrap.aggregation import dashboard  # noqa: E402
from honeytrap.db import repo  # noqa: E402
from honeytrap.db.session import init_db  # noqa: E402
from honeytrap.models.domain import Caller  # noqa: E402
from honeytrap.models.types import (  # noqa: E402
    ConversationCreate,
    ConversationMessageCreate,
    IntelligenceCreate,
    SystemLogCreate,
)
from honeytrap.store import SqlRecordStore  # noqa: E402
from honeytrap.store.base import eq  # noqa: E402

# Constants
DEMO_DB_PATH = PROJECT_ROOT / "demo.db"
DEMO_USER_ID = "demo-user"

# (days ago, content, scam_type, risk_level); scam_type None means not a scam
DEMO_MESSAGES = [
    (0, "Your parcel is held at customs, pay the fee here", "phishing", "high"),
    (0, "Hi mum, new number, can you send money?", "impersonation", "critical"),
    (1, "You have won a lottery of $1,000,000!", "lottery", "medium"),
    (2, "Lunch tomorrow?", None, None),
    (3, "Double your crypto in 24 hours", "investment", "high"),
    (5, "Urgent: your bank account is locked", "phishing", "critical"),
    (6, "Work from home, earn $500/day", "job_offer", "medium"),
]


def seed_database(store: SqlRecordStore) -> None:
    """Insert demo records unless the demo user already exists."""
    if store.count("profiles", [eq("id", DEMO_USER_ID)]):
        print(f"Demo user already exists: {DEMO_USER_ID}")
        return

    print("Creating profile...")
    store.insert(
        "profiles",
        {"id": DEMO_USER_ID, "email": "demo@example.com", "full_name": "Demo User"},
    )

    print("Creating default personas...")
    personas = repo.ensure_default_personas(store, DEMO_USER_ID)
    for persona in personas:
        print(f"  Created persona: {persona.name}")

    print("Creating messages...")
    now = datetime.now(timezone.utc)
    first_scam_id = None
    for days_ago, content, scam_type, risk_level in DEMO_MESSAGES:
        row = store.insert(
            "messages",
            {
                "user_id": DEMO_USER_ID,
                "content": content,
                "is_scam": scam_type is not None,
                "scam_type": scam_type,
                "risk_level": risk_level,
                "confidence": 0.9 if scam_type else 0.1,
                "created_at": now - timedelta(days=days_ago),
            },
        )
        if scam_type and first_scam_id is None:
            first_scam_id = row["id"]

    print("Starting conversation...")
    conversation = repo.create_conversation(
        store,
        ConversationCreate(
            user_id=DEMO_USER_ID,
            persona_id=personas[0].id if personas else None,
            message_id=first_scam_id,
            scammer_identifier="+1-555-0100",
        ),
    )
    for role, content in [
        ("scammer", "Please pay the customs fee to this account."),
        ("persona", "Oh dear, which account should I use?"),
        ("scammer", "Send it to UPI id fastpay@okbank"),
    ]:
        repo.add_conversation_message(
            store,
            ConversationMessageCreate(conversation_id=conversation.id, role=role, content=content),
        )

    repo.create_intelligence(
        store,
        IntelligenceCreate(
            user_id=DEMO_USER_ID,
            conversation_id=conversation.id,
            intel_type="upi_id",
            value="fastpay@okbank",
            confidence=0.95,
        ),
    )
    repo.create_log(store, SystemLogCreate(message="Demo data seeded", user_id=DEMO_USER_ID))

    print("Database seeded successfully!")


async def print_dashboard(store: SqlRecordStore) -> None:
    """Print dashboard aggregates for the demo user."""
    caller = Caller(user_id=DEMO_USER_ID)

    stats = await dashboard.get_stats(store, caller)
    print(f"  Messages: {stats.total_messages}  Scams: {stats.total_scams}")
    print(f"  Active conversations: {stats.active_conversations}")
    print(f"  Intelligence extracted: {stats.intelligence_extracted}")

    print("  Scam types:")
    for bucket in await dashboard.get_scam_type_distribution(store, caller):
        print(f"    {bucket.type}: {bucket.count}")

    print("  Daily detections:")
    for bucket in await dashboard.get_daily_detections(store, caller, 7):
        print(f"    {bucket.date.isoformat()}: {bucket.count}")


def main() -> int:
    """Main entry point."""
    print("=" * 60)
    print("honeytrap Demo Seeding Script")
    print("=" * 60)

    print("\n[1/2] Seeding database...")
    init_db(DEMO_DB_PATH)
    store = SqlRecordStore.from_path(DEMO_DB_PATH)
    seed_database(store)

    print("\n[2/2] Dashboard...")
    asyncio.run(print_dashboard(store))

    print("\n" + "=" * 60)
    print("Demo seeding complete!")
    print(f"Database: {DEMO_DB_PATH}")
    print("=" * 60)

    return 0


if __name__ == "__main__":
    sys.exit(main())
