"""Boundary Protocol — the Store contract between the API layer and persistence.

Invariants:
    - Core NEVER imports from shell — implementations live in infrastructure/
    - Every failure is a typed RoundCounterError (InvalidInputError, ConflictError,
      ResourceNotFoundError, DatabaseError); stores never return error sentinels
    - delete_activity removes the activity and all its laps atomically
    - list results are ordered newest-first with id as the tie-break

Design Decisions:
    - Protocol over ABC: SqlActivityStore and InMemoryActivityStore share no base class
    - Async methods: the SQL implementation does IO; the in-memory one awaits a lock
"""

from typing import Protocol

from roundcounter.core.domain_types import (
    ActivityId, ActivityRecord, ActivitySummary, LapHistory, LapId, LapRecord,
)
from roundcounter.core.errors import InvalidInputError


class ActivityStore(Protocol):
    """Capability set: list/create/delete activities, record/list/delete laps."""

    async def list_activities(self) -> list[ActivitySummary]: ...

    async def create_activity(self, name: str) -> ActivityRecord: ...

    async def delete_activity(self, activity_id: ActivityId) -> None: ...

    async def record_lap(self, activity_id: ActivityId) -> LapRecord: ...

    async def list_laps(self, activity_id: ActivityId) -> LapHistory: ...

    async def delete_lap(
        self, activity_id: ActivityId, lap_id: LapId,
    ) -> None: ...


def normalize_activity_name(name: str | None) -> str:
    """Trim an activity name; empty or whitespace-only names are rejected."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidInputError("Activity name is required", field="name")
    return cleaned
