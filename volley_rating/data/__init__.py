"""Data access for the rating engine.

Reads the plain in-memory collections the engine works on from CSV or JSON
files. The engine itself never touches files; this layer is optional.

Submodules:
    loader: pandas-backed readers and grouping helpers

Example:
    >>> from volley_rating.data import load_game_records, group_by_player
    >>> histories = group_by_player(load_game_records("data/stats.csv"))
"""

from __future__ import annotations

from volley_rating.data.loader import (
    COUNT_COLUMNS,
    entries_by_event,
    events_from_records,
    group_by_player,
    load_attendance,
    load_game_records,
    load_roster,
    parse_position,
    parse_positions,
    practice_events,
    read_table,
)

__all__ = [
    "COUNT_COLUMNS",
    "entries_by_event",
    "events_from_records",
    "group_by_player",
    "load_attendance",
    "load_game_records",
    "load_roster",
    "parse_position",
    "parse_positions",
    "practice_events",
    "read_table",
]
