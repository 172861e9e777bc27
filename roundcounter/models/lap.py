"""Lap ORM — a single timestamped increment belonging to one activity.

Invariants:
    - Always belongs to an Activity (activity_id FK, non-nullable, ON DELETE CASCADE)
    - recorded_at is assigned at insert time; laps carry no other payload
    - Ordering on read: recorded_at DESC, then id DESC (insertion order tie-break)
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roundcounter.core.domain_types import ActivityId, LapId, LapRecord, utc_now
from roundcounter.db.base import Base


class Lap(Base):
    """Lap entity — one tap on an activity's counter."""
    __tablename__ = "laps"
    __table_args__ = (
        Index("ix_laps_activity_recorded", "activity_id", "recorded_at"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    activity_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("activities.id", ondelete="CASCADE"),
        nullable=False,
    )
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utc_now,
    )

    # Relationships
    activity: Mapped["Activity"] = relationship(
        "Activity", back_populates="laps",
    )

    def to_record(self) -> LapRecord:
        return LapRecord(
            id=LapId(self.id),
            activity_id=ActivityId(self.activity_id),
            recorded_at=self.recorded_at,
        )
