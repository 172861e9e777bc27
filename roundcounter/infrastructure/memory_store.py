"""In-Memory Activity Store — dict-backed ActivityStore for tests and embedding.

Invariants:
    - Same contract and ordering as SqlActivityStore (see core/store_protocol.py)
    - Every mutation runs under one asyncio.Lock: the uniqueness check + insert and
      the activity + laps cascade delete are each a single atomic step
    - Ids are monotonic counters and never reused
"""

import asyncio
import logging
from itertools import count

from roundcounter.core.domain_types import (
    ActivityId, ActivityRecord, ActivitySummary, LapHistory, LapId, LapRecord,
    utc_now,
)
from roundcounter.core.errors import ConflictError, ResourceNotFoundError
from roundcounter.core.store_protocol import normalize_activity_name

logger = logging.getLogger(__name__)


class InMemoryActivityStore:
    """Process-local store; state is lost when the instance is dropped."""

    def __init__(self):
        self._activities: dict[ActivityId, ActivityRecord] = {}
        self._laps: dict[ActivityId, list[LapRecord]] = {}
        self._activity_ids = count(1)
        self._lap_ids = count(1)
        self._lock = asyncio.Lock()

    async def list_activities(self) -> list[ActivitySummary]:
        ordered = sorted(
            self._activities.values(),
            key=lambda a: (a.created_at, a.id),
            reverse=True,
        )
        return [
            ActivitySummary(activity=a, lap_count=len(self._laps[a.id]))
            for a in ordered
        ]

    async def create_activity(self, name: str) -> ActivityRecord:
        name = normalize_activity_name(name)
        async with self._lock:
            if any(a.name == name for a in self._activities.values()):
                raise ConflictError()
            activity = ActivityRecord(
                id=ActivityId(next(self._activity_ids)),
                name=name,
                created_at=utc_now(),
            )
            self._activities[activity.id] = activity
            self._laps[activity.id] = []
        logger.info(
            f"Activity created: {name!r}", extra={"activity_id": activity.id},
        )
        return activity

    async def delete_activity(self, activity_id: ActivityId) -> None:
        async with self._lock:
            if activity_id not in self._activities:
                raise ResourceNotFoundError("Activity", activity_id)
            del self._activities[activity_id]
            del self._laps[activity_id]
        logger.info("Activity deleted", extra={"activity_id": activity_id})

    async def record_lap(self, activity_id: ActivityId) -> LapRecord:
        async with self._lock:
            if activity_id not in self._activities:
                raise ResourceNotFoundError("Activity", activity_id)
            lap = LapRecord(
                id=LapId(next(self._lap_ids)),
                activity_id=activity_id,
                recorded_at=utc_now(),
            )
            self._laps[activity_id].append(lap)
        logger.info(
            "Lap recorded",
            extra={"activity_id": activity_id, "lap_id": lap.id},
        )
        return lap

    async def list_laps(self, activity_id: ActivityId) -> LapHistory:
        activity = self._activities.get(activity_id)
        if activity is None:
            raise ResourceNotFoundError("Activity", activity_id)
        laps = sorted(
            self._laps[activity_id],
            key=lambda lap: (lap.recorded_at, lap.id),
            reverse=True,
        )
        return LapHistory(activity=activity, laps=tuple(laps))

    async def delete_lap(
        self, activity_id: ActivityId, lap_id: LapId,
    ) -> None:
        async with self._lock:
            laps = self._laps.get(activity_id, [])
            remaining = [lap for lap in laps if lap.id != lap_id]
            if len(remaining) == len(laps):
                raise ResourceNotFoundError("Lap", lap_id)
            self._laps[activity_id] = remaining
        logger.info(
            "Lap deleted",
            extra={"activity_id": activity_id, "lap_id": lap_id},
        )
