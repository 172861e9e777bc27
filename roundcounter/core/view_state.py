"""View State — immutable client-side snapshot of activities, the open activity, and the view.

Invariants:
    - Exactly one View at a time: EMPTY, COUNTER, or HISTORY
    - View changes only through TRANSITIONS (explicit user actions)
    - HISTORY and COUNTER require an open activity; EMPTY has none
    - Every update function returns a new CounterState; inputs are never mutated
    - generation increments on every navigation, and on a lap recorded while the
      open activity's laps are still unfetched; a response fetched under an
      older generation is discarded instead of overwriting newer state
    - The sidebar lap_count of the open activity always equals the length of
      its cached laps once those laps are known

Design Decisions:
    - Pure functions over a frozen dataclass: services/counter_session.py owns IO
      and calls one update function per user action or server response
    - Laps kept as LapEntry tuples (newest first), mirroring the server ordering
"""

from dataclasses import dataclass, replace
from enum import Enum


class View(str, Enum):
    """The three mutually exclusive UI states."""
    EMPTY = "empty"
    COUNTER = "counter"
    HISTORY = "history"


class ViewEvent(str, Enum):
    """User actions that move between views."""
    SELECT_ACTIVITY = "select_activity"
    OPEN_HISTORY = "open_history"
    BACK = "back"
    DELETE_CURRENT = "delete_current"


TRANSITIONS: dict[tuple[View, ViewEvent], View] = {
    (View.EMPTY, ViewEvent.SELECT_ACTIVITY): View.COUNTER,
    (View.COUNTER, ViewEvent.SELECT_ACTIVITY): View.COUNTER,
    (View.HISTORY, ViewEvent.SELECT_ACTIVITY): View.COUNTER,
    (View.COUNTER, ViewEvent.OPEN_HISTORY): View.HISTORY,
    (View.HISTORY, ViewEvent.OPEN_HISTORY): View.HISTORY,
    (View.HISTORY, ViewEvent.BACK): View.COUNTER,
    (View.COUNTER, ViewEvent.BACK): View.COUNTER,
    (View.COUNTER, ViewEvent.DELETE_CURRENT): View.EMPTY,
    (View.HISTORY, ViewEvent.DELETE_CURRENT): View.EMPTY,
}


class InvalidTransitionError(ValueError):
    """Event not allowed from the current view."""
    def __init__(self, view: View, event: ViewEvent):
        super().__init__(f"{event.value} is not allowed from {view.value}")
        self.view = view
        self.event = event


def next_view(view: View, event: ViewEvent) -> View:
    try:
        return TRANSITIONS[(view, event)]
    except KeyError:
        raise InvalidTransitionError(view, event) from None


# ─── Snapshot types ──────────────────────────────────────────────

@dataclass(frozen=True)
class LapEntry:
    id: int
    activity_id: int
    recorded_at: str

    @classmethod
    def from_dict(cls, data: dict) -> "LapEntry":
        return cls(
            id=int(data["id"]),
            activity_id=int(data["activity_id"]),
            recorded_at=str(data["recorded_at"]),
        )


@dataclass(frozen=True)
class ActivityEntry:
    """Sidebar row: last-known server activity plus its lap count."""
    id: int
    name: str
    created_at: str
    lap_count: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "ActivityEntry":
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            created_at=str(data["created_at"]),
            lap_count=int(data.get("lap_count", 0)),
        )


@dataclass(frozen=True)
class OpenActivity:
    """The activity shown in the counter/history view.

    laps is None until the first fetch completes; the count then falls back
    to the sidebar's cached lap_count.
    """
    entry: ActivityEntry
    laps: tuple[LapEntry, ...] | None = None

    @property
    def id(self) -> int:
        return self.entry.id

    @property
    def count(self) -> int:
        if self.laps is None:
            return self.entry.lap_count
        return len(self.laps)

    @property
    def last_lap(self) -> LapEntry | None:
        return self.laps[0] if self.laps else None


@dataclass(frozen=True)
class CounterState:
    activities: tuple[ActivityEntry, ...] = ()
    current: OpenActivity | None = None
    view: View = View.EMPTY
    generation: int = 0

    @property
    def current_id(self) -> int | None:
        return self.current.id if self.current else None

    @property
    def displayed_count(self) -> int:
        return self.current.count if self.current else 0

    def find(self, activity_id: int) -> ActivityEntry | None:
        for entry in self.activities:
            if entry.id == activity_id:
                return entry
        return None


# ─── Helpers ─────────────────────────────────────────────────────

def _with_lap_count(
    activities: tuple[ActivityEntry, ...], activity_id: int, lap_count: int,
) -> tuple[ActivityEntry, ...]:
    return tuple(
        replace(a, lap_count=lap_count) if a.id == activity_id else a
        for a in activities
    )


def _navigate(
    state: CounterState, event: ViewEvent, current: OpenActivity | None,
) -> CounterState:
    return replace(
        state,
        current=current,
        view=next_view(state.view, event),
        generation=state.generation + 1,
    )


def _apply_laps(state: CounterState, history: dict) -> CounterState:
    laps = tuple(LapEntry.from_dict(lap) for lap in history.get("laps", []))
    activity = history.get("activity") or {}
    entry = replace(
        state.current.entry,
        name=str(activity.get("name", state.current.entry.name)),
        lap_count=len(laps),
    )
    return replace(
        state,
        activities=_with_lap_count(state.activities, entry.id, len(laps)),
        current=OpenActivity(entry=entry, laps=laps),
    )


# ─── Update functions ────────────────────────────────────────────

def activities_loaded(state: CounterState, items: list[dict]) -> CounterState:
    """Replace the sidebar with a fresh server list."""
    return replace(
        state, activities=tuple(ActivityEntry.from_dict(i) for i in items),
    )


def activity_created(state: CounterState, activity: dict) -> CounterState:
    """Prepend the new activity with count 0 and open it in the counter view."""
    entry = replace(ActivityEntry.from_dict(activity), lap_count=0)
    state = replace(state, activities=(entry, *state.activities))
    return _navigate(
        state, ViewEvent.SELECT_ACTIVITY, OpenActivity(entry=entry, laps=()),
    )


def activity_selected(state: CounterState, activity_id: int) -> CounterState:
    """Open an activity; its laps are refetched before the count is trusted."""
    entry = state.find(activity_id)
    if entry is None:
        return state
    return _navigate(
        state, ViewEvent.SELECT_ACTIVITY, OpenActivity(entry=entry),
    )


def laps_loaded(
    state: CounterState, history: dict, *, generation: int,
) -> CounterState:
    """Apply a lap fetch started under `generation`; stale fetches are dropped."""
    activity_id = int(history["activity"]["id"])
    if state.current_id != activity_id or state.generation != generation:
        return state
    return _apply_laps(state, history)


def history_refreshed(state: CounterState, history: dict) -> CounterState:
    """Authoritative re-sync after a lap deletion, gated on activity identity only."""
    activity_id = int(history["activity"]["id"])
    if state.current_id != activity_id:
        return state
    return _apply_laps(state, history)


def lap_recorded(state: CounterState, lap: dict) -> CounterState:
    """Prepend a newly recorded lap and mirror the count into the sidebar."""
    new_lap = LapEntry.from_dict(lap)
    if state.current_id != new_lap.activity_id:
        entry = state.find(new_lap.activity_id)
        if entry is None:
            return state
        return replace(
            state,
            activities=_with_lap_count(
                state.activities, entry.id, entry.lap_count + 1,
            ),
        )

    current = state.current
    generation = state.generation
    if current.laps is None:
        # Initial fetch still pending and possibly served before this lap:
        # advance the cached count and invalidate that fetch.
        entry = replace(current.entry, lap_count=current.entry.lap_count + 1)
        opened = OpenActivity(entry=entry)
        generation += 1
    else:
        laps = (new_lap, *current.laps)
        entry = replace(current.entry, lap_count=len(laps))
        opened = OpenActivity(entry=entry, laps=laps)
    return replace(
        state,
        activities=_with_lap_count(state.activities, entry.id, entry.lap_count),
        current=opened,
        generation=generation,
    )


def activity_deleted(state: CounterState, activity_id: int) -> CounterState:
    """Drop the activity; deleting the open one returns to the empty view."""
    activities = tuple(a for a in state.activities if a.id != activity_id)
    state = replace(state, activities=activities)
    if state.current_id != activity_id:
        return state
    return _navigate(state, ViewEvent.DELETE_CURRENT, None)


def history_opened(state: CounterState) -> CounterState:
    if state.current is None:
        return state
    return _navigate(state, ViewEvent.OPEN_HISTORY, state.current)


def back_to_counter(state: CounterState) -> CounterState:
    if state.current is None:
        return state
    return _navigate(state, ViewEvent.BACK, state.current)
