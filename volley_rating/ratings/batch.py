"""Roster-wide rating, rankings and stat leaderboards with a thread pool.

Each player is rated independently from the history the caller's provider
returns for them, so the work fans out over a ``ThreadPoolExecutor`` and is
gathered by player id. A provider or engine failure for one player is logged
and recorded in ``RosterRatings.failures``; the rest of the roster is still
rated.

Example:
    >>> rater = RosterRater(PlayerRatingEngine(as_of=date(2026, 10, 1)))
    >>> result = rater.rate_roster(roster, histories.get)
    >>> team = rater.rate_team(roster, histories.get)
    >>> top = rater.stat_leaderboard(roster, histories.get, LeaderboardStat.KILLS)
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Sequence

from volley_rating.config import get_settings
from volley_rating.logging import FAIL, get_logger
from volley_rating.ratings.constants import LEADERBOARD_LIMIT
from volley_rating.ratings.engine import PlayerRatingEngine
from volley_rating.ratings.estimators import round_half_up
from volley_rating.ratings.team import TeamRatingAggregator
from volley_rating.types import (
    AggregatedStats,
    GameRecord,
    LeaderboardEntry,
    LeaderboardStat,
    PlayerId,
    PlayerRanking,
    PlayerRating,
    Position,
    RosterPlayer,
    RosterRatings,
    TeamRating,
)

logger = get_logger(__name__)

HistoryProvider = Callable[[PlayerId], Sequence[GameRecord] | None]


class RosterRater:
    """Rate every player of a roster concurrently.

    Attributes:
        engine: Engine shared by all workers; it holds no mutable state.
        max_workers: Thread pool width.
        default_position: Weight profile for players with no listed position.
    """

    def __init__(
        self,
        engine: PlayerRatingEngine | None = None,
        max_workers: int | None = None,
        default_position: Position | None = None,
    ) -> None:
        settings = get_settings()
        self.engine = engine or PlayerRatingEngine()
        self.max_workers = max_workers or settings.max_workers
        self.default_position = default_position or settings.default_position

    def _rate_one(self, player: RosterPlayer, provider: HistoryProvider) -> PlayerRating:
        history = provider(player.player_id) or ()
        position = player.primary_position or self.default_position
        log = get_logger(__name__, player_id=player.player_id, position=position.value)
        log.debug("Rating {} games", len(history))
        return self.engine.rate(history, position)

    def rate_roster(
        self,
        roster: Sequence[RosterPlayer],
        provider: HistoryProvider,
    ) -> RosterRatings:
        """Rate each roster player from their history.

        Args:
            roster: Active roster players.
            provider: Returns a player's game records; ``None`` means none.

        Returns:
            RosterRatings with a rating or a failure message per player.
        """
        result = RosterRatings()
        if not roster:
            return result

        workers = min(self.max_workers, len(roster))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self._rate_one, player, provider): player.player_id
                for player in roster
            }
            for future in as_completed(futures):
                player_id = futures[future]
                try:
                    result.ratings[player_id] = future.result()
                except Exception as e:
                    get_logger(__name__, player_id=player_id).warning(
                        "{} Rating failed: {}", FAIL, e
                    )
                    result.failures[player_id] = str(e)

        logger.info(
            "Rated {} of {} players ({} failed)",
            len(result.ratings),
            len(roster),
            len(result.failures),
        )
        return result

    def rate_team(
        self,
        roster: Sequence[RosterPlayer],
        provider: HistoryProvider,
        aggregator: TeamRatingAggregator | None = None,
    ) -> TeamRating:
        """Rate the roster and average it into a team rating."""
        result = self.rate_roster(roster, provider)
        aggregator = aggregator or TeamRatingAggregator()
        ordered = [result.ratings[p.player_id] for p in roster if p.player_id in result.ratings]
        return aggregator.aggregate(ordered)

    def rankings(
        self,
        roster: Sequence[RosterPlayer],
        provider: HistoryProvider,
    ) -> list[PlayerRanking]:
        """Roster players sorted by overall rating, highest first.

        Players whose rating failed are left out; ties keep roster order.
        """
        result = self.rate_roster(roster, provider)
        ranked = [
            PlayerRanking(
                player_id=player.player_id,
                name=player.name,
                position=player.primary_position or self.default_position,
                rating=result.ratings[player.player_id],
                jersey_number=player.jersey_number,
            )
            for player in roster
            if player.player_id in result.ratings
        ]
        return sorted(ranked, key=lambda r: r.rating.overall, reverse=True)

    def stat_leaderboard(
        self,
        roster: Sequence[RosterPlayer],
        provider: HistoryProvider,
        stat: LeaderboardStat,
        limit: int = LEADERBOARD_LIMIT,
    ) -> list[LeaderboardEntry]:
        """Top players by one statistic; see :func:`stat_leaderboard`."""
        return stat_leaderboard(self.rankings(roster, provider), stat, limit)


def leaderboard_value(stats: AggregatedStats, stat: LeaderboardStat) -> float:
    """The leaderboard figure for a stat; percentages are in percent."""
    if stat is LeaderboardStat.KILLS:
        return stats.kills_per_game
    if stat is LeaderboardStat.ACES:
        return stats.aces_per_game
    if stat is LeaderboardStat.DIGS:
        return stats.digs_per_game
    if stat is LeaderboardStat.BLOCKS:
        return stats.blocks_per_game
    if stat is LeaderboardStat.PASS_RATING:
        return stats.pass_rating
    if stat is LeaderboardStat.KILL_PCT:
        return stats.kill_percentage * 100
    return stats.serve_percentage * 100


def stat_leaderboard(
    rankings: Sequence[PlayerRanking],
    stat: LeaderboardStat,
    limit: int = LEADERBOARD_LIMIT,
) -> list[LeaderboardEntry]:
    """Rank players by one statistic.

    Per-game counts and pass rating come from each player's aggregated
    stats; values are rounded half up to one decimal before sorting, and
    equal values keep the incoming order.

    Args:
        rankings: Rated roster players, usually from :meth:`RosterRater.rankings`.
        stat: Statistic to rank by.
        limit: Maximum number of entries.

    Returns:
        At most ``limit`` entries, highest value first.
    """
    entries = [
        LeaderboardEntry(
            player_id=r.player_id,
            name=r.name,
            value=round_half_up(leaderboard_value(r.rating.aggregated_stats, stat), 1),
            games_played=r.rating.games_played,
        )
        for r in rankings
    ]
    return sorted(entries, key=lambda e: e.value, reverse=True)[:limit]


__all__ = ["HistoryProvider", "RosterRater", "leaderboard_value", "stat_leaderboard"]
