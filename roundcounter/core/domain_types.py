"""Domain Types — records exchanged between the Store and its callers.

Invariants:
    - ActivityId and LapId wrap server-assigned integers (monotonic, never reused)
    - Records are frozen: callers never mutate what a store returned
    - lap_count is derived at read time, never stored
    - Timestamps are naive UTC datetimes truncated to whole seconds

Design Decisions:
    - NewType over wrapper classes: zero runtime cost, type-checker support
    - Plain dataclasses instead of ORM objects so the in-memory store and the
      SQL store return identical shapes
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ActivityId = NewType("ActivityId", int)
LapId = NewType("LapId", int)


# ─── Timestamps ──────────────────────────────────────────────────

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def utc_now() -> datetime:
    """Current UTC time, naive, at whole-second resolution."""
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


def format_timestamp(value: datetime) -> str:
    """Serialize a store timestamp (`2026-01-31 08:15:00`, UTC, no marker)."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.strftime(TIMESTAMP_FORMAT)


# ─── Records ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class ActivityRecord:
    """A named, user-created countable subject."""
    id: ActivityId
    name: str
    created_at: datetime


@dataclass(frozen=True)
class ActivitySummary:
    """Activity plus its live lap count, as returned by list_activities."""
    activity: ActivityRecord
    lap_count: int


@dataclass(frozen=True)
class LapRecord:
    """A single timestamped increment owned by one activity."""
    id: LapId
    activity_id: ActivityId
    recorded_at: datetime


@dataclass(frozen=True)
class LapHistory:
    """An activity with its laps, newest first."""
    activity: ActivityRecord
    laps: tuple[LapRecord, ...]
