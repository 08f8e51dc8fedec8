"""Shared pytest fixtures for volley rating tests.

This module contains fixtures used across multiple test modules:
- A fixed evaluation date so recency weights are reproducible
- Record factories for stat entries, game records and attendance
- Configuration fixtures (test settings)
- Sample CSV files for the data loader and CLI

Example:
    def test_something(make_record, engine):
        record = make_record(kills=8, attack_attempts=20, days_ago=10)
        rating = engine.rate([record], Position.OUTSIDE_HITTER)
"""

from __future__ import annotations

import os
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Callable, Generator

import pandas as pd
import pytest

from volley_rating.config import Settings, reset_settings
from volley_rating.ratings import PlayerRatingEngine
from volley_rating.types import (
    AttendanceRecord,
    AttendanceStatus,
    EventContext,
    EventType,
    GameRecord,
    StatEntry,
)

AS_OF = date(2026, 10, 1)


# =============================================================================
# Dates
# =============================================================================


@pytest.fixture
def as_of() -> date:
    """Fixed evaluation date used by every engine in the suite."""
    return AS_OF


@pytest.fixture
def engine(as_of: date) -> PlayerRatingEngine:
    """Rating engine pinned to the fixed evaluation date."""
    return PlayerRatingEngine(as_of=as_of)


# =============================================================================
# Record Factories
# =============================================================================


@pytest.fixture
def make_entry() -> Callable[..., StatEntry]:
    """Factory for stat entries; counts default to 0."""

    def _make(player_id: str = "p1", event_id: str = "e1", **counts: Any) -> StatEntry:
        return StatEntry(player_id=player_id, event_id=event_id, **counts)

    return _make


@pytest.fixture
def make_record(as_of: date) -> Callable[..., GameRecord]:
    """Factory for game records dated relative to the evaluation date."""
    counter = {"n": 0}

    def _make(
        player_id: str = "p1",
        event_id: str | None = None,
        days_ago: int = 0,
        tier: int | None = None,
        sets_won: int | None = None,
        sets_lost: int | None = None,
        opponent: str | None = None,
        **counts: Any,
    ) -> GameRecord:
        if event_id is None:
            counter["n"] += 1
            event_id = f"e{counter['n']}"
        entry = StatEntry(player_id=player_id, event_id=event_id, **counts)
        event = EventContext(
            start_time=as_of - timedelta(days=days_ago),
            opponent_tier=tier,
            event_id=event_id,
            opponent=opponent,
            sets_won=sets_won,
            sets_lost=sets_lost,
        )
        return GameRecord(entry=entry, event=event)

    return _make


@pytest.fixture
def make_attendance(as_of: date) -> Callable[..., AttendanceRecord]:
    """Factory for attendance records dated relative to the evaluation date."""

    def _make(
        status: AttendanceStatus,
        days_ago: int,
        event_id: str | None = None,
        event_type: EventType = EventType.PRACTICE,
        player_id: str = "p1",
    ) -> AttendanceRecord:
        return AttendanceRecord(
            player_id=player_id,
            event_id=event_id or f"pr{days_ago}",
            event_type=event_type,
            start_time=as_of - timedelta(days=days_ago),
            status=status,
        )

    return _make


@pytest.fixture
def hitter_history(make_record: Callable[..., GameRecord]) -> list[GameRecord]:
    """Four games of a solid outside hitter against mid-table opponents."""
    return [
        make_record(
            days_ago=days_ago,
            tier=tier,
            kills=9,
            attack_errors=3,
            attack_attempts=25,
            aces=2,
            service_errors=2,
            serve_attempts=14,
            digs=7,
            block_solos=1,
            block_assists=2,
            pass_attempts=12,
            pass_sum=24,
            ball_handling_errors=1,
        )
        for days_ago, tier in ((5, 6), (20, 5), (45, 4), (90, 7))
    ]


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def test_settings(tmp_path: Path) -> Generator[Settings, None, None]:
    """Provide test settings with temporary directories.

    Automatically resets settings singleton after test.
    """
    os.environ["LOG_DIR"] = str(tmp_path / "logs")
    os.environ["VOLLEY_DATA_DIR"] = str(tmp_path / "data")
    os.environ["LOG_LEVEL"] = "DEBUG"

    reset_settings()
    from volley_rating.config import get_settings

    settings = get_settings()
    settings.ensure_directories()

    yield settings

    reset_settings()
    for key in ["LOG_DIR", "VOLLEY_DATA_DIR", "LOG_LEVEL"]:
        os.environ.pop(key, None)


# =============================================================================
# Sample Files
# =============================================================================


@pytest.fixture
def sample_stats_df() -> pd.DataFrame:
    """Stat entries for a three-player team over three matches."""
    rows = []
    matches = [
        ("e1", "2026-08-20", 4, "Falcons", 3, 1),
        ("e2", "2026-09-05", 6, "Sharks", 1, 3),
        ("e3", "2026-09-25", 5, "Owls", 3, 2),
    ]
    players = {
        "p1": dict(kills=10, attack_errors=2, attack_attempts=24, aces=1, serve_attempts=12,
                   service_errors=1, digs=6, pass_attempts=10, pass_sum=21),
        "p2": dict(set_attempts=40, set_sum=92, setting_errors=1, aces=2, serve_attempts=15,
                   service_errors=2, digs=8, kills=1, attack_attempts=3),
        "p3": dict(digs=16, pass_attempts=22, pass_sum=51, ball_handling_errors=1),
    }
    for event_id, start_time, tier, opponent, won, lost in matches:
        for player_id, counts in players.items():
            rows.append(
                {
                    "player_id": player_id,
                    "event_id": event_id,
                    "start_time": start_time,
                    "opponent_tier": tier,
                    "title": f"League vs {opponent}",
                    "opponent": opponent,
                    "sets_won": won,
                    "sets_lost": lost,
                    **counts,
                }
            )
    return pd.DataFrame(rows)


@pytest.fixture
def sample_roster_df() -> pd.DataFrame:
    """Roster matching the sample stat entries plus one unrated player."""
    return pd.DataFrame(
        [
            {"player_id": "p1", "name": "Ana", "positions": "outside_hitter|opposite",
             "jersey_number": 7},
            {"player_id": "p2", "name": "Bea", "positions": "setter", "jersey_number": 3},
            {"player_id": "p3", "name": "Cleo", "positions": "libero", "jersey_number": 1},
            {"player_id": "p4", "name": "Dee", "positions": "middle_blocker",
             "jersey_number": 12},
        ]
    )


@pytest.fixture
def sample_attendance_df() -> pd.DataFrame:
    """Practice attendance for p1 over the last six practices."""
    statuses = ["present", "present", "late", "absent", "present", "excused"]
    return pd.DataFrame(
        [
            {
                "player_id": "p1",
                "event_id": f"pr{i}",
                "event_type": "practice",
                "start_time": f"2026-09-{10 + i:02d}",
                "status": status,
            }
            for i, status in enumerate(statuses)
        ]
    )


@pytest.fixture
def data_files(
    tmp_path: Path,
    sample_stats_df: pd.DataFrame,
    sample_roster_df: pd.DataFrame,
    sample_attendance_df: pd.DataFrame,
) -> dict[str, Path]:
    """Write the sample frames as CSV files and return their paths."""
    data_dir = tmp_path / "data"
    data_dir.mkdir(exist_ok=True)
    paths = {
        "stats": data_dir / "stats.csv",
        "roster": data_dir / "roster.csv",
        "attendance": data_dir / "attendance.csv",
    }
    sample_stats_df.to_csv(paths["stats"], index=False)
    sample_roster_df.to_csv(paths["roster"], index=False)
    sample_attendance_df.to_csv(paths["attendance"], index=False)
    return paths
