"""Activity ORM — a named, user-created countable subject.

Invariants:
    - id is an autoincrement integer (never reused after deletion)
    - name is unique (uq_activities_name) and case-sensitive; stored already
      trimmed; no length limit
    - created_at is assigned at insert time by the store, never by the client

Design Decisions:
    - cascade delete for laps at both ORM (delete-orphan) and FK level (ON DELETE CASCADE)
    - passive_deletes: the database removes lap rows, the ORM does not load them first
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roundcounter.core.domain_types import ActivityRecord, ActivityId, utc_now
from roundcounter.db.base import Base


class Activity(Base):
    """Activity aggregate root — owns all of its laps."""
    __tablename__ = "activities"
    __table_args__ = (
        UniqueConstraint("name", name="uq_activities_name"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(
        Text, nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utc_now,
    )

    # Relationships
    laps: Mapped[list["Lap"]] = relationship(
        "Lap", back_populates="activity",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    def to_record(self) -> ActivityRecord:
        return ActivityRecord(
            id=ActivityId(self.id), name=self.name, created_at=self.created_at,
        )
