"""Activity Store Contract — the same behavior from the SQL and in-memory stores.

Invariants:
    - Duplicate names → ConflictError, activity count unchanged
    - Blank names → InvalidInputError, nothing created
    - N recorded laps → N laps newest-first and lap_count == N
    - Deleting an activity removes it and its laps; later reads are NotFound
    - Deleting a lap through the wrong activity → NotFound, both lap sets unchanged

Design Decisions:
    - One parametrized `store` fixture runs every contract test against both stores
"""

import asyncio

import pytest

from roundcounter.core.domain_types import ActivityId, LapId
from roundcounter.core.errors import (
    ConflictError, InvalidInputError, ResourceNotFoundError,
)
from roundcounter.infrastructure.memory_store import InMemoryActivityStore
from roundcounter.infrastructure.sql_store import SqlActivityStore


@pytest.fixture(params=["sql", "memory"])
async def store(request, test_db):
    if request.param == "sql":
        return SqlActivityStore(test_db)
    return InMemoryActivityStore()


# -- Activities -----------------------------------------------------------------

async def test_list_is_empty_initially(store):
    assert await store.list_activities() == []


async def test_create_assigns_id_and_timestamp(store):
    activity = await store.create_activity("Running")
    assert activity.id > 0
    assert activity.name == "Running"
    assert activity.created_at.microsecond == 0


async def test_create_trims_name(store):
    activity = await store.create_activity("  Cycling  ")
    assert activity.name == "Cycling"


async def test_duplicate_name_conflicts_without_mutation(store):
    await store.create_activity("Running")
    with pytest.raises(ConflictError):
        await store.create_activity("Running")
    assert len(await store.list_activities()) == 1


async def test_duplicate_after_trim_conflicts(store):
    await store.create_activity("Running")
    with pytest.raises(ConflictError):
        await store.create_activity(" Running ")


async def test_names_are_case_sensitive(store):
    await store.create_activity("Running")
    await store.create_activity("running")
    assert len(await store.list_activities()) == 2


@pytest.mark.parametrize("name", ["", "   ", "\t"])
async def test_blank_name_is_invalid(store, name):
    with pytest.raises(InvalidInputError):
        await store.create_activity(name)
    assert await store.list_activities() == []


async def test_list_newest_first_with_zero_lap_counts(store):
    first = await store.create_activity("First")
    second = await store.create_activity("Second")
    summaries = await store.list_activities()
    assert [s.activity.id for s in summaries] == [second.id, first.id]
    assert [s.lap_count for s in summaries] == [0, 0]


async def test_ids_are_monotonic(store):
    a = await store.create_activity("A")
    await store.delete_activity(a.id)
    b = await store.create_activity("B")
    assert b.id > a.id


# -- Laps -----------------------------------------------------------------------

async def test_n_laps_are_listed_newest_first_and_counted(store):
    activity = await store.create_activity("Swimming")
    recorded = [await store.record_lap(activity.id) for _ in range(5)]

    history = await store.list_laps(activity.id)
    assert history.activity.id == activity.id
    assert [lap.id for lap in history.laps] == [lap.id for lap in reversed(recorded)]

    summaries = await store.list_activities()
    assert summaries[0].lap_count == 5


async def test_lap_counts_are_per_activity(store):
    a = await store.create_activity("A")
    b = await store.create_activity("B")
    await store.record_lap(a.id)
    await store.record_lap(a.id)
    await store.record_lap(b.id)
    counts = {s.activity.id: s.lap_count for s in await store.list_activities()}
    assert counts == {a.id: 2, b.id: 1}


async def test_lap_ids_increase(store):
    activity = await store.create_activity("Rowing")
    first = await store.record_lap(activity.id)
    second = await store.record_lap(activity.id)
    assert second.id > first.id
    assert second.activity_id == activity.id


async def test_record_lap_on_missing_activity_is_not_found(store):
    with pytest.raises(ResourceNotFoundError):
        await store.record_lap(ActivityId(999))


async def test_list_laps_on_missing_activity_is_not_found(store):
    with pytest.raises(ResourceNotFoundError):
        await store.list_laps(ActivityId(999))


async def test_delete_lap(store):
    activity = await store.create_activity("Yoga")
    first = await store.record_lap(activity.id)
    second = await store.record_lap(activity.id)
    await store.delete_lap(activity.id, first.id)
    history = await store.list_laps(activity.id)
    assert [lap.id for lap in history.laps] == [second.id]


async def test_delete_lap_through_other_activity_is_not_found(store):
    a = await store.create_activity("A")
    b = await store.create_activity("B")
    lap_a = await store.record_lap(a.id)
    lap_b = await store.record_lap(b.id)

    with pytest.raises(ResourceNotFoundError):
        await store.delete_lap(b.id, lap_a.id)

    assert [lap.id for lap in (await store.list_laps(a.id)).laps] == [lap_a.id]
    assert [lap.id for lap in (await store.list_laps(b.id)).laps] == [lap_b.id]


async def test_delete_missing_lap_is_not_found(store):
    activity = await store.create_activity("Hiking")
    with pytest.raises(ResourceNotFoundError):
        await store.delete_lap(activity.id, LapId(12345))


# -- Cascade --------------------------------------------------------------------

async def test_delete_activity_removes_it_and_its_laps(store):
    keep = await store.create_activity("Keep")
    doomed = await store.create_activity("Doomed")
    await store.record_lap(doomed.id)
    await store.record_lap(doomed.id)
    await store.record_lap(keep.id)

    await store.delete_activity(doomed.id)

    with pytest.raises(ResourceNotFoundError):
        await store.list_laps(doomed.id)
    summaries = await store.list_activities()
    assert [(s.activity.id, s.lap_count) for s in summaries] == [(keep.id, 1)]


async def test_delete_missing_activity_is_not_found_every_time(store):
    for _ in range(2):
        with pytest.raises(ResourceNotFoundError):
            await store.delete_activity(ActivityId(424242))


async def test_deleted_name_can_be_reused(store):
    first = await store.create_activity("Running")
    await store.delete_activity(first.id)
    again = await store.create_activity("Running")
    assert again.id != first.id


async def test_names_have_no_length_limit(store):
    name = "Marathon " * 100
    activity = await store.create_activity(name)
    assert activity.name == name.strip()
    [summary] = await store.list_activities()
    assert summary.activity.name == name.strip()


# -- Concurrency ----------------------------------------------------------------

async def test_concurrent_duplicate_creates_yield_one_conflict():
    store = InMemoryActivityStore()
    results = await asyncio.gather(
        store.create_activity("Sprint"),
        store.create_activity("Sprint"),
        return_exceptions=True,
    )
    conflicts = [r for r in results if isinstance(r, ConflictError)]
    assert len(conflicts) == 1
    assert len(await store.list_activities()) == 1
