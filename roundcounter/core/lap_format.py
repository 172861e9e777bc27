"""Lap Formatting — display strings for counts, last-lap labels, and lap history rows.

Invariants:
    - Server timestamps carry no timezone marker and are interpreted as UTC
    - History numbering counts down from the total: newest lap is #total, oldest is #1

Design Decisions:
    - Pure string helpers; CounterSession exposes them as sidebar_rows,
      last_lap_text and history_rows for UI code
"""

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import TypeVar

T = TypeVar("T")


def parse_timestamp(value: str) -> datetime:
    """Parse a server timestamp into an aware UTC datetime."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1]
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_lap_date(value: str) -> str:
    """`Jan 5, 2026` style date."""
    ts = parse_timestamp(value)
    return f"{ts.strftime('%b')} {ts.day}, {ts.year}"


def format_lap_time(value: str) -> str:
    """`08:15:02` style time."""
    return parse_timestamp(value).strftime("%H:%M:%S")


def last_lap_label(recorded_at: str | None) -> str:
    """Label for the counter view, empty when no lap exists yet."""
    if not recorded_at:
        return ""
    return f"Last lap: {format_lap_time(recorded_at)}, {format_lap_date(recorded_at)}"


def lap_count_label(count: int) -> str:
    return f"{count} lap" if count == 1 else f"{count} laps"


def numbered_laps(laps: Sequence[T]) -> list[tuple[int, T]]:
    """Pair each lap (newest first) with its display number."""
    total = len(laps)
    return [(total - i, lap) for i, lap in enumerate(laps)]
