"""Dashboard aggregation over the caller's detection events.

Fetches rows through the record store, then buckets them with pure
functions. Store calls are blocking, so each runs in a worker thread;
the four headline counts are issued together and joined.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone

from fastapi.concurrency import run_in_threadpool

from honeytrap.models.domain import Caller
from honeytrap.models.types import DailyDetection, DashboardStats, ScamTypeCount
from honeytrap.store.base import RecordStore, asc, eq, gte, not_null


async def get_stats(store: RecordStore, caller: Caller | None) -> DashboardStats:
    """Compute headline counts for the caller's dashboard.

    The counts are independent and run concurrently. There is no
    consistency guarantee across them. If any count fails the error
    propagates and no partial stats are returned.

    Args:
        store: Record store.
        caller: Current caller, or None.

    Returns:
        DashboardStats; all zeros when there is no caller.
    """
    if caller is None:
        return DashboardStats()

    user = eq("user_id", caller.user_id)
    messages, scams, active, intel = await asyncio.gather(
        run_in_threadpool(store.count, "messages", [user]),
        run_in_threadpool(store.count, "messages", [user, eq("is_scam", True)]),
        run_in_threadpool(store.count, "conversations", [user, eq("status", "active")]),
        run_in_threadpool(store.count, "intelligence", [user]),
    )

    return DashboardStats(
        total_messages=messages or 0,
        total_scams=scams or 0,
        active_conversations=active or 0,
        intelligence_extracted=intel or 0,
    )


async def get_scam_type_distribution(
    store: RecordStore, caller: Caller | None
) -> list[ScamTypeCount]:
    """Count the caller's scam-flagged messages per scam type.

    Args:
        store: Record store.
        caller: Current caller, or None.

    Returns:
        One entry per scam type, ordered by each type's earliest message.
    """
    if caller is None:
        return []

    rows = await run_in_threadpool(
        store.query,
        "messages",
        [eq("user_id", caller.user_id), eq("is_scam", True), not_null("scam_type")],
        order_by=asc("created_at"),
        columns=["scam_type"],
    )
    return count_by_type(r["scam_type"] for r in rows)


async def get_daily_detections(
    store: RecordStore,
    caller: Caller | None,
    days: int = 7,
    *,
    now: datetime | None = None,
) -> list[DailyDetection]:
    """Count the caller's scam detections per UTC day for the trailing days.

    Args:
        store: Record store.
        caller: Current caller, or None.
        days: Number of calendar days, today included.
        now: Reference time; defaults to the current UTC time.

    Returns:
        Exactly ``days`` buckets in ascending date order, zero-filled.
        Empty when there is no caller.

    Raises:
        ValueError: If days is negative.
    """
    if days < 0:
        raise ValueError(f"days must be non-negative, got {days}")
    if caller is None or days == 0:
        return []

    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=days)

    rows = await run_in_threadpool(
        store.query,
        "messages",
        [eq("user_id", caller.user_id), eq("is_scam", True), gte("created_at", cutoff)],
        columns=["created_at"],
    )
    return bucket_by_day((r["created_at"] for r in rows), days, _utc_date(now))


def count_by_type(labels: Iterable[str | None]) -> list[ScamTypeCount]:
    """Group labels, keeping first-occurrence order.

    Pure function - no store access.
    """
    counts: dict[str, int] = {}
    for label in labels:
        if label:
            counts[label] = counts.get(label, 0) + 1
    return [ScamTypeCount(type=label, count=count) for label, count in counts.items()]


def bucket_by_day(
    timestamps: Iterable[datetime], days: int, today: date
) -> list[DailyDetection]:
    """Build zero-filled daily buckets ending at ``today``.

    Pure function - no store access. Timestamps falling outside the
    window are counted but never emitted.

    Args:
        timestamps: Event timestamps; naive values are taken as UTC.
        days: Number of buckets.
        today: Last bucket date.

    Returns:
        Buckets from ``today - (days - 1)`` to ``today``, ascending.
    """
    by_date: dict[date, int] = {}
    for ts in timestamps:
        day = _utc_date(ts)
        by_date[day] = by_date.get(day, 0) + 1

    result = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        result.append(DailyDetection(date=day, count=by_date.get(day, 0)))
    return result


def _utc_date(ts: datetime) -> date:
    if ts.tzinfo is None:
        return ts.date()
    return ts.astimezone(timezone.utc).date()
