"""Activity Routes — create/list/delete activities and record/list/delete their laps.

Invariants:
    - Path ids are 32-bit integers; anything else is a 400 before the store runs,
      while an in-range id that matches no row is a 404
    - Store outcomes map to status codes through the global RoundCounterError handler
    - Lap lists are newest-first; lap deletion is scoped to the activity in the path
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from roundcounter.api.dependencies import get_store
from roundcounter.core.domain_types import ActivityId, LapId
from roundcounter.core.store_protocol import ActivityStore
from roundcounter.schemas.activity import (
    ActivityCreate,
    ActivityListItem,
    ActivityResponse,
    DeleteResponse,
    LapHistoryResponse,
    LapResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/activities", tags=["activities"])

# Ids are 32-bit INTEGER columns.
MIN_ID, MAX_ID = -(2**31), 2**31 - 1
ActivityIdParam = Annotated[int, Path(ge=MIN_ID, le=MAX_ID)]
LapIdParam = Annotated[int, Path(ge=MIN_ID, le=MAX_ID)]


@router.get("", response_model=list[ActivityListItem])
async def list_activities(store: ActivityStore = Depends(get_store)):
    """All activities, newest first, with live lap counts."""
    summaries = await store.list_activities()
    return [ActivityListItem.from_summary(s) for s in summaries]


@router.post(
    "", response_model=ActivityResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_activity(
    body: ActivityCreate, store: ActivityStore = Depends(get_store),
):
    record = await store.create_activity(body.name or "")
    return ActivityResponse.from_record(record)


@router.delete("/{activity_id}", response_model=DeleteResponse)
async def delete_activity(
    activity_id: ActivityIdParam, store: ActivityStore = Depends(get_store),
):
    """Delete an activity together with all of its laps."""
    await store.delete_activity(ActivityId(activity_id))
    return DeleteResponse()


@router.post(
    "/{activity_id}/laps", response_model=LapResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_lap(
    activity_id: ActivityIdParam, store: ActivityStore = Depends(get_store),
):
    """Record a lap now. No request body."""
    record = await store.record_lap(ActivityId(activity_id))
    return LapResponse.from_record(record)


@router.get("/{activity_id}/laps", response_model=LapHistoryResponse)
async def list_laps(
    activity_id: ActivityIdParam, store: ActivityStore = Depends(get_store),
):
    history = await store.list_laps(ActivityId(activity_id))
    return LapHistoryResponse.from_history(history)


@router.delete(
    "/{activity_id}/laps/{lap_id}", response_model=DeleteResponse,
)
async def delete_lap(
    activity_id: ActivityIdParam, lap_id: LapIdParam,
    store: ActivityStore = Depends(get_store),
):
    await store.delete_lap(ActivityId(activity_id), LapId(lap_id))
    return DeleteResponse()
