"""Unit tests for skill progression.

Tests cover:
- monthly cumulative-prefix levels
- per-game overall series
- linear trend
"""

from __future__ import annotations

from typing import Callable

import pytest

from volley_rating.ratings.engine import PlayerRatingEngine
from volley_rating.ratings.progression import ProgressionTracker, month_key
from volley_rating.types import SKILLS, GameRecord, Position


@pytest.fixture
def tracker(engine: PlayerRatingEngine) -> ProgressionTracker:
    """Create progression tracker on the pinned engine."""
    return ProgressionTracker(engine)


@pytest.fixture
def two_month_history(make_record: Callable[..., GameRecord]) -> list[GameRecord]:
    """Two August games and one strong September game, unordered."""
    return [
        make_record(days_ago=10, tier=7, kills=14, attack_attempts=25, digs=9,
                    pass_attempts=10, pass_sum=25),
        make_record(days_ago=50, tier=5, kills=4, attack_errors=4, attack_attempts=20),
        make_record(days_ago=45, tier=5, kills=6, attack_errors=3, attack_attempts=18,
                    digs=3),
    ]


class TestMonthly:
    """Tests for monthly progression."""

    def test_month_key(self, make_record: Callable[..., GameRecord]) -> None:
        """Months are formatted YYYY-MM."""
        assert month_key(make_record(days_ago=50)) == "2026-08"

    def test_points_per_month_and_skill(
        self, tracker: ProgressionTracker, two_month_history: list[GameRecord]
    ) -> None:
        """Every month with games gets all eight skills, in order."""
        points = tracker.monthly(two_month_history)

        assert len(points) == 2 * len(SKILLS)
        assert [p.month for p in points[:: len(SKILLS)]] == ["2026-08", "2026-09"]
        assert [p.skill for p in points[: len(SKILLS)]] == list(SKILLS)

    def test_levels_are_prefix_ratings(
        self,
        tracker: ProgressionTracker,
        engine: PlayerRatingEngine,
        two_month_history: list[GameRecord],
    ) -> None:
        """Each month shows the engine's rating over games up to that month."""
        points = tracker.monthly(two_month_history)
        august = [r for r in two_month_history if month_key(r) == "2026-08"]

        august_levels = {p.skill: p.level for p in points if p.month == "2026-08"}
        september_levels = {p.skill: p.level for p in points if p.month == "2026-09"}

        assert august_levels == engine.rate(august, Position.ALL_AROUND).sub_ratings.as_dict()
        assert september_levels == engine.rate(
            two_month_history, Position.ALL_AROUND
        ).sub_ratings.as_dict()

    def test_empty_history(self, tracker: ProgressionTracker) -> None:
        """No games, no points."""
        assert tracker.monthly([]) == []


class TestOverallSeries:
    """Tests for overall_series and trend."""

    def test_series_ends_at_current_rating(
        self,
        tracker: ProgressionTracker,
        engine: PlayerRatingEngine,
        two_month_history: list[GameRecord],
    ) -> None:
        """The last point is the player's current overall rating."""
        series = tracker.overall_series(two_month_history, Position.OUTSIDE_HITTER)

        assert len(series) == 3
        assert series[-1] == engine.rate(two_month_history, Position.OUTSIDE_HITTER).overall

    def test_improving_player_has_positive_trend(
        self, tracker: ProgressionTracker, two_month_history: list[GameRecord]
    ) -> None:
        """A strong latest game lifts the trend."""
        series = tracker.overall_series(two_month_history, Position.OUTSIDE_HITTER)

        assert tracker.trend(series) > 0

    @pytest.mark.parametrize(
        ("series", "expected"),
        [([40, 50, 60], 10.0), ([30, 30, 30, 30], 0.0), ([55], 0.0), ([], 0.0)],
    )
    def test_trend(self, series: list[int], expected: float) -> None:
        """Slope of the least-squares line, 0 with fewer than two points."""
        assert ProgressionTracker.trend(series) == pytest.approx(expected, abs=1e-9)
