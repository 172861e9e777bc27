"""Activity Schemas — request and response contracts for /api/activities.

Invariants:
    - ActivityCreate.name is stripped; emptiness is judged by the store (400, not 422)
    - Timestamps are `YYYY-MM-DD HH:MM:SS` strings, UTC, no timezone marker
"""

from pydantic import BaseModel, field_validator

from roundcounter.core.domain_types import (
    ActivityRecord, ActivitySummary, LapHistory, LapRecord, format_timestamp,
)


class ActivityCreate(BaseModel):
    """Activity creation — a null or missing name is treated as empty."""
    name: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else v


class ActivityResponse(BaseModel):
    id: int
    name: str
    created_at: str

    @classmethod
    def from_record(cls, record: ActivityRecord) -> "ActivityResponse":
        return cls(
            id=record.id,
            name=record.name,
            created_at=format_timestamp(record.created_at),
        )


class ActivityListItem(ActivityResponse):
    """Sidebar row — activity plus live lap count."""
    lap_count: int

    @classmethod
    def from_summary(cls, summary: ActivitySummary) -> "ActivityListItem":
        record = summary.activity
        return cls(
            id=record.id,
            name=record.name,
            created_at=format_timestamp(record.created_at),
            lap_count=summary.lap_count,
        )


class LapResponse(BaseModel):
    id: int
    activity_id: int
    recorded_at: str

    @classmethod
    def from_record(cls, record: LapRecord) -> "LapResponse":
        return cls(
            id=record.id,
            activity_id=record.activity_id,
            recorded_at=format_timestamp(record.recorded_at),
        )


class LapHistoryResponse(BaseModel):
    """An activity and its laps, newest first."""
    activity: ActivityResponse
    laps: list[LapResponse]

    @classmethod
    def from_history(cls, history: LapHistory) -> "LapHistoryResponse":
        return cls(
            activity=ActivityResponse.from_record(history.activity),
            laps=[LapResponse.from_record(lap) for lap in history.laps],
        )


class DeleteResponse(BaseModel):
    success: bool = True
