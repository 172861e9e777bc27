"""SQL Activity Store — SQLAlchemy implementation of the ActivityStore protocol.

Invariants:
    - One short transaction per operation; every failure path rolls back first
    - lap_count comes from LEFT OUTER JOIN + COUNT at query time (activities with
      zero laps report 0); nothing is cached
    - Activity deletion removes its laps and the activity in one transaction,
      regardless of whether the backend enforces ON DELETE CASCADE
    - Duplicate names are detected by the unique constraint, not by a pre-check,
      so two concurrent creates resolve to exactly one success and one Conflict
    - delete_lap is scoped by activity_id: a lap owned by another activity is NotFound

Design Decisions:
    - Store receives an AsyncSession (request-scoped via get_db) instead of owning one
    - Ordering ties (whole-second timestamps) broken by id DESC = insertion order
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from roundcounter.core.domain_types import (
    ActivityId, ActivityRecord, ActivitySummary, LapHistory, LapId, LapRecord,
    utc_now,
)
from roundcounter.core.errors import ConflictError, ResourceNotFoundError
from roundcounter.core.store_protocol import normalize_activity_name
from roundcounter.models.activity import Activity
from roundcounter.models.lap import Lap

logger = logging.getLogger(__name__)


class SqlActivityStore:
    """Relational store for activities and laps."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_activity(self, activity_id: ActivityId) -> Activity | None:
        # select, not Session.get: the identity map may hold a row deleted in bulk
        return await self.db.scalar(
            select(Activity).where(Activity.id == activity_id),
        )

    async def list_activities(self) -> list[ActivitySummary]:
        """All activities, newest first, each with its live lap count."""
        result = await self.db.execute(
            select(Activity, func.count(Lap.id).label("lap_count"))
            .outerjoin(Lap, Lap.activity_id == Activity.id)
            .group_by(Activity.id)
            .order_by(Activity.created_at.desc(), Activity.id.desc())
        )
        return [
            ActivitySummary(activity=activity.to_record(), lap_count=int(count))
            for activity, count in result.all()
        ]

    async def create_activity(self, name: str) -> ActivityRecord:
        """Insert an activity; InvalidInput on empty name, Conflict on duplicate."""
        name = normalize_activity_name(name)
        activity = Activity(name=name, created_at=utc_now())
        self.db.add(activity)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info(f"Duplicate activity name rejected: {name!r}")
            raise ConflictError()
        logger.info(
            f"Activity created: {name!r}", extra={"activity_id": activity.id},
        )
        return activity.to_record()

    async def delete_activity(self, activity_id: ActivityId) -> None:
        """Delete the activity and all of its laps atomically."""
        await self.db.execute(
            delete(Lap)
            .where(Lap.activity_id == activity_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(
            delete(Activity)
            .where(Activity.id == activity_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise ResourceNotFoundError("Activity", activity_id)
        await self.db.commit()
        logger.info("Activity deleted", extra={"activity_id": activity_id})

    async def record_lap(self, activity_id: ActivityId) -> LapRecord:
        """Append a lap stamped with the current time."""
        if await self._get_activity(activity_id) is None:
            raise ResourceNotFoundError("Activity", activity_id)
        lap = Lap(activity_id=activity_id, recorded_at=utc_now())
        self.db.add(lap)
        try:
            await self.db.commit()
        except IntegrityError:
            # Activity deleted between the lookup and the insert.
            await self.db.rollback()
            raise ResourceNotFoundError("Activity", activity_id)
        logger.info(
            "Lap recorded",
            extra={"activity_id": activity_id, "lap_id": lap.id},
        )
        return lap.to_record()

    async def list_laps(self, activity_id: ActivityId) -> LapHistory:
        """The activity plus its laps, most recent first."""
        activity = await self._get_activity(activity_id)
        if activity is None:
            raise ResourceNotFoundError("Activity", activity_id)
        result = await self.db.execute(
            select(Lap)
            .where(Lap.activity_id == activity_id)
            .order_by(Lap.recorded_at.desc(), Lap.id.desc())
        )
        return LapHistory(
            activity=activity.to_record(),
            laps=tuple(lap.to_record() for lap in result.scalars().all()),
        )

    async def delete_lap(
        self, activity_id: ActivityId, lap_id: LapId,
    ) -> None:
        """Delete one lap, only if it belongs to the given activity."""
        result = await self.db.execute(
            delete(Lap)
            .where(Lap.id == lap_id, Lap.activity_id == activity_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            raise ResourceNotFoundError("Lap", lap_id)
        await self.db.commit()
        logger.info(
            "Lap deleted",
            extra={"activity_id": activity_id, "lap_id": lap_id},
        )
