"""Unit tests for roster-wide rating.

Tests cover:
- concurrent results match sequential ratings
- per-player failures do not abort the batch
- default position for players without one
- team rating composition
- rankings and stat leaderboards
"""

from __future__ import annotations

from typing import Callable, Sequence

import pytest
from loguru import logger

from volley_rating.config import Settings
from volley_rating.logging import setup_logging
from volley_rating.ratings.batch import RosterRater, leaderboard_value, stat_leaderboard
from volley_rating.ratings.engine import PlayerRatingEngine
from volley_rating.ratings.team import TeamRatingAggregator
from volley_rating.types import (
    SKILLS,
    AggregatedStats,
    GameRecord,
    LeaderboardStat,
    PlayerRanking,
    PlayerRating,
    Position,
    RosterPlayer,
    SubRatings,
)


@pytest.fixture
def roster() -> list[RosterPlayer]:
    """Four players, one without a listed position."""
    return [
        RosterPlayer("p1", "Ana", (Position.OUTSIDE_HITTER,)),
        RosterPlayer("p2", "Bea", (Position.SETTER,)),
        RosterPlayer("p3", "Cleo", (Position.LIBERO,)),
        RosterPlayer("p4", "Dee"),
    ]


@pytest.fixture
def histories(make_record: Callable[..., GameRecord]) -> dict[str, list[GameRecord]]:
    """Game histories keyed by player; p4 has none."""
    return {
        "p1": [
            make_record(player_id="p1", days_ago=i * 7, tier=6, kills=10, attack_errors=2,
                        attack_attempts=24, serve_attempts=12, aces=1)
            for i in range(4)
        ],
        "p2": [
            make_record(player_id="p2", days_ago=i * 7, tier=6, set_attempts=40, set_sum=95,
                        setting_errors=1)
            for i in range(2)
        ],
        "p3": [
            make_record(player_id="p3", days_ago=i * 7, tier=6, digs=15, pass_attempts=20,
                        pass_sum=48)
            for i in range(3)
        ],
    }


class TestRosterRater:
    """Tests for RosterRater."""

    def test_matches_sequential_ratings(
        self,
        engine: PlayerRatingEngine,
        roster: list[RosterPlayer],
        histories: dict[str, list[GameRecord]],
    ) -> None:
        """Each concurrent rating equals the engine's direct result."""
        rater = RosterRater(engine, max_workers=3, default_position=Position.ALL_AROUND)
        result = rater.rate_roster(roster, histories.get)

        assert set(result.ratings) == {"p1", "p2", "p3", "p4"}
        assert result.failures == {}
        assert result.ratings["p1"] == engine.rate(histories["p1"], Position.OUTSIDE_HITTER)
        assert result.ratings["p3"] == engine.rate(histories["p3"], Position.LIBERO)
        assert result.ratings["p4"].games_played == 0

    def test_failure_is_isolated(
        self,
        engine: PlayerRatingEngine,
        roster: list[RosterPlayer],
        histories: dict[str, list[GameRecord]],
    ) -> None:
        """A provider error for one player leaves the others rated."""

        def provider(player_id: str) -> Sequence[GameRecord]:
            if player_id == "p2":
                raise RuntimeError("stat export unavailable")
            return histories.get(player_id, [])

        result = RosterRater(engine, max_workers=2).rate_roster(roster, provider)

        assert "p2" not in result.ratings
        assert result.failures == {"p2": "stat export unavailable"}
        assert set(result.ratings) == {"p1", "p3", "p4"}

    def test_failure_logged_with_player(self, engine: PlayerRatingEngine) -> None:
        """The failure warning carries the failing player's id."""

        def provider(player_id: str) -> Sequence[GameRecord]:
            raise RuntimeError("stat export unavailable")

        setup_logging(level="WARNING", log_dir=None)
        messages: list[str] = []
        sink_id = logger.add(messages.append, level="WARNING", format="{extra[context]}{message}")
        try:
            RosterRater(engine).rate_roster([RosterPlayer("p9", "Ivy")], provider)
        finally:
            logger.remove(sink_id)

        assert len(messages) == 1
        assert messages[0].startswith("[player=p9] ")
        assert "stat export unavailable" in messages[0]

    def test_default_position(
        self,
        engine: PlayerRatingEngine,
        histories: dict[str, list[GameRecord]],
    ) -> None:
        """Players without a position are rated with the default profile."""
        unlisted = [RosterPlayer("p1")]
        rater = RosterRater(engine, default_position=Position.OPPOSITE)

        result = rater.rate_roster(unlisted, histories.get)

        assert result.ratings["p1"] == engine.rate(histories["p1"], Position.OPPOSITE)

    def test_settings_supply_defaults(
        self, engine: PlayerRatingEngine, test_settings: Settings
    ) -> None:
        """Width and default position come from settings when not given."""
        rater = RosterRater(engine)

        assert rater.max_workers == test_settings.max_workers
        assert rater.default_position is test_settings.default_position

    def test_empty_roster(self, engine: PlayerRatingEngine) -> None:
        """An empty roster yields empty results."""
        result = RosterRater(engine).rate_roster([], lambda player_id: [])

        assert result.ratings == {}
        assert result.failures == {}

    def test_rate_team(
        self,
        engine: PlayerRatingEngine,
        roster: list[RosterPlayer],
        histories: dict[str, list[GameRecord]],
    ) -> None:
        """Team rating averages the three players with games."""
        rater = RosterRater(engine, max_workers=4)
        team = rater.rate_team(roster, histories.get)
        ratings = rater.rate_roster(roster, histories.get).ratings

        assert team.player_count == 3
        assert not team.is_provisional
        assert team == TeamRatingAggregator().aggregate(
            ratings[p.player_id] for p in roster
        )


def _ranking(player_id: str, overall: int, **stats: float) -> PlayerRanking:
    games = int(stats.pop("games_played", 3))
    return PlayerRanking(
        player_id=player_id,
        name=player_id.upper(),
        position=Position.ALL_AROUND,
        rating=PlayerRating(
            overall=overall,
            sub_ratings=SubRatings(**{skill: 50 for skill in SKILLS}),
            aggregated_stats=AggregatedStats(games_played=games, **stats),
            is_provisional=games < 3,
            games_played=games,
        ),
    )


class TestRankings:
    """Tests for rankings and stat leaderboards."""

    def test_sorted_by_overall(
        self,
        engine: PlayerRatingEngine,
        roster: list[RosterPlayer],
        histories: dict[str, list[GameRecord]],
    ) -> None:
        """Rankings run highest overall first and carry roster details."""
        rankings = RosterRater(engine, max_workers=2).rankings(roster, histories.get)

        overalls = [r.rating.overall for r in rankings]
        assert overalls == sorted(overalls, reverse=True)
        assert {r.player_id for r in rankings} == {"p1", "p2", "p3", "p4"}
        assert rankings[-1].player_id == "p4"
        libero = next(r for r in rankings if r.player_id == "p3")
        assert libero.position is Position.LIBERO
        assert libero.name == "Cleo"

    def test_failed_players_are_left_out(
        self,
        engine: PlayerRatingEngine,
        roster: list[RosterPlayer],
        histories: dict[str, list[GameRecord]],
    ) -> None:
        """A player whose rating failed does not appear in the rankings."""

        def provider(player_id: str) -> Sequence[GameRecord]:
            if player_id == "p1":
                raise RuntimeError("boom")
            return histories.get(player_id, [])

        rankings = RosterRater(engine).rankings(roster, provider)

        assert "p1" not in {r.player_id for r in rankings}
        assert len(rankings) == 3

    def test_stat_leaderboard_from_roster(
        self,
        engine: PlayerRatingEngine,
        roster: list[RosterPlayer],
        histories: dict[str, list[GameRecord]],
    ) -> None:
        """The kills leaderboard is led by the only attacker."""
        board = RosterRater(engine).stat_leaderboard(
            roster, histories.get, LeaderboardStat.KILLS, limit=2
        )

        assert len(board) == 2
        assert board[0].player_id == "p1"
        assert board[0].value == 10.0
        assert board[0].games_played == 4

    def test_values_rounded_and_sorted(self) -> None:
        """Values are rounded to one decimal and sorted descending."""
        rankings = [
            _ranking("a", 70, kills_per_game=3.04),
            _ranking("b", 60, kills_per_game=4.25),
            _ranking("c", 50, kills_per_game=3.96),
        ]

        board = stat_leaderboard(rankings, LeaderboardStat.KILLS)

        assert [(e.player_id, e.value) for e in board] == [("b", 4.3), ("c", 4.0), ("a", 3.0)]

    def test_percentages_in_percent(self) -> None:
        """Kill % and serve % are shown as percentages."""
        rankings = [_ranking("a", 70, kill_percentage=0.25, serve_percentage=0.875)]

        assert stat_leaderboard(rankings, LeaderboardStat.KILL_PCT)[0].value == 25.0
        assert stat_leaderboard(rankings, LeaderboardStat.SERVE_PCT)[0].value == 87.5

    def test_ties_keep_ranking_order_and_limit(self) -> None:
        """Equal values keep the incoming order; the list is cut at the limit."""
        rankings = [_ranking(f"p{i}", 90 - i, digs_per_game=5.0) for i in range(12)]

        board = stat_leaderboard(rankings, LeaderboardStat.DIGS)

        assert len(board) == 10
        assert [e.player_id for e in board[:3]] == ["p0", "p1", "p2"]

    @pytest.mark.parametrize(
        ("stat", "field"),
        [
            (LeaderboardStat.ACES, "aces_per_game"),
            (LeaderboardStat.BLOCKS, "blocks_per_game"),
            (LeaderboardStat.PASS_RATING, "pass_rating"),
        ],
    )
    def test_leaderboard_value(self, stat: LeaderboardStat, field: str) -> None:
        """Each stat reads its aggregated figure."""
        stats = AggregatedStats(games_played=2, **{field: 1.5})

        assert leaderboard_value(stats, stat) == 1.5
