"""Load stat entries, attendance and rosters from tabular files.

Files are read with pandas (``.csv`` or ``.json`` in records orientation)
and converted row by row into the frozen value objects of
:mod:`volley_rating.types`. Missing count columns default to 0; missing
optional event columns default to ``None``.

Expected columns:
    stats: player_id, event_id, start_time, [count columns], [opponent_tier,
        title, opponent, sets_won, sets_lost, rotation]
    attendance: player_id, event_id, event_type, start_time, status
    roster: player_id, [name, positions, jersey_number]

``positions`` holds one or more position names separated by ``|`` or ``,``;
the first is the primary position.

Example:
    >>> records = load_game_records("data/stats.csv")
    >>> histories = group_by_player(records)
    >>> roster = load_roster("data/roster.csv")
"""

from __future__ import annotations

import re
from collections import defaultdict
from datetime import date
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from volley_rating.logging import WARN, get_logger
from volley_rating.types import (
    AttendanceRecord,
    AttendanceStatus,
    DataLoadError,
    EventContext,
    EventId,
    EventType,
    GameRecord,
    InvalidPositionError,
    InvalidRecordError,
    PlayerId,
    Position,
    PracticeEvent,
    RosterPlayer,
    StatEntry,
)

logger = get_logger(__name__)

# =============================================================================
# Column Definitions
# =============================================================================

COUNT_COLUMNS: tuple[str, ...] = (
    "kills",
    "attack_errors",
    "attack_attempts",
    "aces",
    "service_errors",
    "serve_attempts",
    "digs",
    "block_solos",
    "block_assists",
    "block_touches",
    "pass_attempts",
    "pass_sum",
    "set_attempts",
    "set_sum",
    "setting_errors",
    "ball_handling_errors",
    "sets_played",
    "rotations_played",
)

STATS_REQUIRED = ("player_id", "event_id", "start_time")
ATTENDANCE_REQUIRED = ("player_id", "event_id", "event_type", "start_time", "status")
ROSTER_REQUIRED = ("player_id",)

ID_COLUMNS = {"player_id": str, "event_id": str}

_POSITION_SEPARATORS = re.compile(r"[|,]")


# =============================================================================
# Reading
# =============================================================================


def read_table(path: str | Path) -> pd.DataFrame:
    """Read a CSV or JSON file into a DataFrame.

    Args:
        path: File path; the suffix selects the reader.

    Returns:
        DataFrame with identifier columns read as strings.

    Raises:
        DataLoadError: If the file is missing, has an unsupported suffix, or
            cannot be parsed.
    """
    path = Path(path)
    if not path.is_file():
        raise DataLoadError(f"File not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".csv":
            df = pd.read_csv(path, dtype=ID_COLUMNS)
        elif suffix == ".json":
            df = pd.read_json(path, orient="records", dtype=ID_COLUMNS)
        else:
            raise DataLoadError(f"Unsupported file type '{suffix}' for {path}")
    except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError) as e:
        raise DataLoadError(f"Could not parse {path}: {e}") from e

    logger.debug("Read {} rows from {}", len(df), path)
    return df


def _require_columns(df: pd.DataFrame, columns: Iterable[str], path: str | Path) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise DataLoadError(f"{path} is missing required columns: {', '.join(missing)}")


def _rows(df: pd.DataFrame) -> Iterable[tuple[int, dict[str, Any]]]:
    # Row numbers are 1-based and exclude the header line
    for index, row in enumerate(df.to_dict(orient="records"), start=1):
        yield index, {key: (None if _is_missing(value) else value) for key, value in row.items()}


def _is_missing(value: Any) -> bool:
    return not isinstance(value, (list, tuple)) and bool(pd.isna(value))


# =============================================================================
# Field Parsing
# =============================================================================


def parse_position(value: str) -> Position:
    """Parse a position name such as ``"Outside Hitter"`` or ``"libero"``.

    Raises:
        InvalidPositionError: If the value names none of the seven positions.
    """
    key = re.sub(r"[\s\-]+", "_", str(value).strip().lower())
    try:
        return Position(key)
    except ValueError:
        raise InvalidPositionError(f"Unknown position: {value!r}") from None


def parse_positions(value: Any) -> tuple[Position, ...]:
    """Parse a separated list of positions, keeping order."""
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        parts = [str(v) for v in value]
    else:
        parts = _POSITION_SEPARATORS.split(str(value))
    return tuple(parse_position(part) for part in parts if part.strip())


def _parse_date(value: Any) -> date:
    if value is None:
        raise ValueError("start_time is empty")
    return pd.Timestamp(value).date()


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"expected a whole number, got {value}")
        return int(value)
    return int(value)


def _count(row: dict[str, Any], column: str) -> int:
    value = _optional_int(row.get(column))
    if value is None:
        return 0
    if value < 0:
        raise ValueError(f"{column} cannot be negative")
    return value


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


# =============================================================================
# Loaders
# =============================================================================


def load_game_records(path: str | Path) -> list[GameRecord]:
    """Load stat entries joined with their event columns.

    Raises:
        DataLoadError: If the file cannot be read or lacks required columns.
        InvalidRecordError: If a row holds an unusable value.
    """
    df = read_table(path)
    _require_columns(df, STATS_REQUIRED, path)

    records = []
    for index, row in _rows(df):
        try:
            entry = StatEntry(
                player_id=str(row["player_id"]),
                event_id=str(row["event_id"]),
                rotation=_optional_int(row.get("rotation")),
                **{column: _count(row, column) for column in COUNT_COLUMNS},
            )
            event = EventContext(
                start_time=_parse_date(row["start_time"]),
                opponent_tier=_optional_int(row.get("opponent_tier")),
                event_id=entry.event_id,
                title=_optional_str(row.get("title")),
                opponent=_optional_str(row.get("opponent")),
                sets_won=_optional_int(row.get("sets_won")),
                sets_lost=_optional_int(row.get("sets_lost")),
            )
        except (TypeError, ValueError) as e:
            raise InvalidRecordError(f"{path} row {index}: {e}") from e
        records.append(GameRecord(entry=entry, event=event))

    logger.info("Loaded {} stat entries from {}", len(records), path)
    return records


def load_attendance(path: str | Path) -> list[AttendanceRecord]:
    """Load attendance records.

    Raises:
        DataLoadError: If the file cannot be read or lacks required columns.
        InvalidRecordError: If a row holds an unknown status or event type.
    """
    df = read_table(path)
    _require_columns(df, ATTENDANCE_REQUIRED, path)

    records = []
    for index, row in _rows(df):
        try:
            records.append(
                AttendanceRecord(
                    player_id=str(row["player_id"]),
                    event_id=str(row["event_id"]),
                    event_type=EventType(str(row["event_type"]).strip().lower()),
                    start_time=_parse_date(row["start_time"]),
                    status=AttendanceStatus(str(row["status"]).strip().lower()),
                )
            )
        except (TypeError, ValueError) as e:
            raise InvalidRecordError(f"{path} row {index}: {e}") from e

    logger.info("Loaded {} attendance records from {}", len(records), path)
    return records


def load_roster(path: str | Path) -> list[RosterPlayer]:
    """Load active roster players.

    Raises:
        DataLoadError: If the file cannot be read or lacks required columns.
        InvalidRecordError: If a row lists an unknown position.
    """
    df = read_table(path)
    _require_columns(df, ROSTER_REQUIRED, path)

    players = []
    for index, row in _rows(df):
        try:
            players.append(
                RosterPlayer(
                    player_id=str(row["player_id"]),
                    name=_optional_str(row.get("name")) or "",
                    positions=parse_positions(row.get("positions")),
                    jersey_number=_optional_int(row.get("jersey_number")),
                )
            )
        except (TypeError, ValueError) as e:
            raise InvalidRecordError(f"{path} row {index}: {e}") from e

    without_position = sum(1 for p in players if not p.positions)
    if without_position:
        logger.warning("{} {} roster players have no position listed", WARN, without_position)
    logger.info("Loaded {} roster players from {}", len(players), path)
    return players


# =============================================================================
# Grouping
# =============================================================================


def group_by_player(records: Iterable[GameRecord]) -> dict[PlayerId, list[GameRecord]]:
    """Split game records into one history per player."""
    histories: dict[PlayerId, list[GameRecord]] = defaultdict(list)
    for record in records:
        histories[record.entry.player_id].append(record)
    return dict(histories)


def entries_by_event(records: Iterable[GameRecord]) -> dict[EventId, list[StatEntry]]:
    """Collect every player's stat entry per event."""
    events: dict[EventId, list[StatEntry]] = defaultdict(list)
    for record in records:
        events[record.entry.event_id].append(record.entry)
    return dict(events)


def events_from_records(records: Iterable[GameRecord]) -> list[EventContext]:
    """Distinct event contexts, first occurrence per event id."""
    seen: dict[EventId, EventContext] = {}
    for record in records:
        seen.setdefault(record.entry.event_id, record.event)
    return list(seen.values())


def practice_events(records: Iterable[AttendanceRecord]) -> list[PracticeEvent]:
    """Distinct team practices found in attendance records."""
    seen: dict[EventId, PracticeEvent] = {}
    for record in records:
        if record.event_type is EventType.PRACTICE:
            seen.setdefault(record.event_id, PracticeEvent(record.event_id, record.start_time))
    return list(seen.values())


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
