"""Lap Formatting — display helpers for timestamps, counts and history numbering."""

from datetime import timezone

from roundcounter.core.lap_format import (
    format_lap_date,
    format_lap_time,
    lap_count_label,
    last_lap_label,
    numbered_laps,
    parse_timestamp,
)


def test_timestamp_without_marker_is_utc():
    ts = parse_timestamp("2026-01-05 08:15:02")
    assert ts.tzinfo == timezone.utc
    assert (ts.hour, ts.minute, ts.second) == (8, 15, 2)


def test_timestamp_with_z_suffix_is_utc():
    assert parse_timestamp("2026-01-05T08:15:02Z") == parse_timestamp(
        "2026-01-05 08:15:02",
    )


def test_format_date_and_time():
    assert format_lap_date("2026-01-05 08:15:02") == "Jan 5, 2026"
    assert format_lap_time("2026-01-05 08:15:02") == "08:15:02"


def test_last_lap_label():
    assert last_lap_label("2026-03-14 21:09:00") == "Last lap: 21:09:00, Mar 14, 2026"
    assert last_lap_label(None) == ""


def test_lap_count_label_pluralizes():
    assert lap_count_label(0) == "0 laps"
    assert lap_count_label(1) == "1 lap"
    assert lap_count_label(12) == "12 laps"


def test_numbered_laps_counts_down_from_total():
    assert numbered_laps(["c", "b", "a"]) == [(3, "c"), (2, "b"), (1, "a")]
    assert numbered_laps([]) == []
