"""Counter Session — keeps the client view state in sync with the server after every command.

Invariants:
    - One update function from core/view_state.py per user action or response
    - Write failures (create, record, delete) call notify(message) and leave state unchanged
    - Read failures (list, lap refresh) are logged; the last good state is kept
    - select_activity and open_history always refetch laps instead of trusting
      the cached sidebar lap_count
    - A lap recorded before the open activity's first fetch returns triggers a
      refetch, since that fetch may have been served before the lap existed
    - delete_lap re-syncs from the server rather than splicing the local list
    - Responses that arrive after the user navigated away are checked against the
      current activity / generation before they are applied

Design Decisions:
    - notify and confirm injected as plain callables: a UI supplies blocking dialogs,
      tests supply recorders
"""

import logging
from typing import Callable

from roundcounter.core.lap_format import (
    format_lap_date, format_lap_time, lap_count_label, last_lap_label,
    numbered_laps,
)
from roundcounter.core.view_state import (
    CounterState,
    activities_loaded,
    activity_created,
    activity_deleted,
    activity_selected,
    back_to_counter,
    history_opened,
    history_refreshed,
    lap_recorded,
    laps_loaded,
)
from roundcounter.infrastructure.api_client import (
    ApiRequestError, RoundCounterApiClient,
)

logger = logging.getLogger(__name__)

DELETE_ACTIVITY_PROMPT = "Delete this activity and all its laps?"


def _log_notification(message: str) -> None:
    logger.warning(f"User notification: {message}")


def _always_confirm(_prompt: str) -> bool:
    return True


class CounterSession:
    """Client-held cache of activities plus the open activity's laps."""

    def __init__(
        self,
        api: RoundCounterApiClient,
        notify: Callable[[str], None] | None = None,
        confirm: Callable[[str], bool] | None = None,
        state: CounterState | None = None,
    ):
        self.api = api
        self.notify = notify or _log_notification
        self.confirm = confirm or _always_confirm
        self.state = state or CounterState()

    # ─── Reads ───────────────────────────────────────────────────

    async def load(self) -> CounterState:
        """Bootstrap: fetch the list and open the newest activity, if any."""
        try:
            items = await self.api.list_activities()
        except ApiRequestError as e:
            logger.error(f"Failed to load activities: {e.message}")
            return self.state
        self.state = activities_loaded(self.state, items)
        if self.state.activities:
            await self.select_activity(self.state.activities[0].id)
        return self.state

    async def select_activity(self, activity_id: int) -> CounterState:
        self.state = activity_selected(self.state, activity_id)
        if self.state.current_id == activity_id:
            await self._refresh_laps(activity_id, self.state.generation)
        return self.state

    async def open_history(self) -> CounterState:
        if self.state.current is None:
            return self.state
        self.state = history_opened(self.state)
        await self._refresh_laps(self.state.current_id, self.state.generation)
        return self.state

    def back(self) -> CounterState:
        self.state = back_to_counter(self.state)
        return self.state

    async def _refresh_laps(self, activity_id: int, generation: int) -> None:
        try:
            history = await self.api.list_laps(activity_id)
        except ApiRequestError as e:
            logger.warning(
                f"Lap refresh failed: {e.message}",
                extra={"activity_id": activity_id, "view": self.state.view.value},
            )
            return
        self.state = laps_loaded(self.state, history, generation=generation)

    # ─── Writes ──────────────────────────────────────────────────

    async def create_activity(self, name: str) -> CounterState:
        """Create and open an activity; blank names never reach the server."""
        name = (name or "").strip()
        if not name:
            return self.state
        try:
            activity = await self.api.create_activity(name)
        except ApiRequestError as e:
            self.notify(e.message)
            return self.state
        self.state = activity_created(self.state, activity)
        return self.state

    async def record_lap(self) -> CounterState:
        if self.state.current is None:
            return self.state
        activity_id = self.state.current_id
        try:
            lap = await self.api.record_lap(activity_id)
        except ApiRequestError as e:
            self.notify(e.message)
            return self.state
        self.state = lap_recorded(self.state, lap)
        current = self.state.current
        if current is not None and current.id == activity_id and current.laps is None:
            await self._refresh_laps(activity_id, self.state.generation)
        return self.state

    async def delete_activity(self, activity_id: int) -> CounterState:
        if not self.confirm(DELETE_ACTIVITY_PROMPT):
            return self.state
        try:
            await self.api.delete_activity(activity_id)
        except ApiRequestError as e:
            self.notify(e.message)
            return self.state
        self.state = activity_deleted(self.state, activity_id)
        return self.state

    async def delete_lap(self, lap_id: int) -> CounterState:
        """Delete a lap of the open activity, then re-sync its history."""
        if self.state.current is None:
            return self.state
        activity_id = self.state.current_id
        try:
            await self.api.delete_lap(activity_id, lap_id)
        except ApiRequestError as e:
            self.notify(e.message)
            return self.state
        try:
            history = await self.api.list_laps(activity_id)
        except ApiRequestError as e:
            logger.warning(
                f"History refresh after lap delete failed: {e.message}",
                extra={"activity_id": activity_id, "lap_id": lap_id},
            )
            return self.state
        self.state = history_refreshed(self.state, history)
        return self.state

    # ─── Display ─────────────────────────────────────────────────

    @property
    def sidebar_rows(self) -> list[tuple[int, str, str]]:
        """(id, name, `N laps`) per activity, in server order."""
        return [
            (a.id, a.name, lap_count_label(a.lap_count))
            for a in self.state.activities
        ]

    @property
    def last_lap_text(self) -> str:
        current = self.state.current
        last = current.last_lap if current else None
        return last_lap_label(last.recorded_at if last else None)

    @property
    def history_rows(self) -> list[tuple[int, str, str]]:
        """(number, date, time) per lap of the open activity, newest first."""
        current = self.state.current
        if current is None or not current.laps:
            return []
        return [
            (number, format_lap_date(lap.recorded_at), format_lap_time(lap.recorded_at))
            for number, lap in numbered_laps(current.laps)
        ]
