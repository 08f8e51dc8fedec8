"""Team-level aggregation: team rating, match summaries, tiers and best lineup.

The team rating is a plain mean over players who have at least one game;
each team sub-rating is the mean of the matching player sub-rating, rounded
independently of the overall. Fewer than three rated players makes the team
rating provisional, whatever their game counts.

Example:
    >>> aggregator = TeamRatingAggregator()
    >>> team = aggregator.aggregate(roster_ratings.ratings.values())
    >>> print(team.overall, team.player_count)
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from volley_rating.logging import get_logger
from volley_rating.ratings.aggregation import StatAggregator
from volley_rating.ratings.constants import (
    FORM_STREAK_GAMES,
    MIN_RATING,
    PROVISIONAL_TEAM_THRESHOLD,
    TIER_LABELS,
)
from volley_rating.ratings.estimators import normalize_tier, round_half_up, to_rating
from volley_rating.types import (
    SKILLS,
    BestLineup,
    EventContext,
    FormStreak,
    LineupSlot,
    MatchResult,
    OpponentTierStats,
    PlayerId,
    PlayerRating,
    Position,
    RosterPlayer,
    StatEntry,
    SubRatings,
    TeamGameStat,
    TeamRating,
)

logger = get_logger(__name__)

FLOOR_SUB_RATINGS = SubRatings(**{skill: MIN_RATING for skill in SKILLS})

# Slot name -> position, in selection order
LINEUP_SLOTS: tuple[tuple[str, Position], ...] = (
    ("setter", Position.SETTER),
    ("libero", Position.LIBERO),
    ("outside_hitter_1", Position.OUTSIDE_HITTER),
    ("outside_hitter_2", Position.OUTSIDE_HITTER),
    ("middle_blocker_1", Position.MIDDLE_BLOCKER),
    ("middle_blocker_2", Position.MIDDLE_BLOCKER),
    ("opposite", Position.OPPOSITE),
)


def _mean_percent(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return round_half_up(sum(values) / len(values), 1)


def match_result(sets_won: int, sets_lost: int) -> MatchResult:
    """Win, loss or draw from a set count."""
    if sets_won > sets_lost:
        return MatchResult.WIN
    if sets_lost > sets_won:
        return MatchResult.LOSS
    return MatchResult.DRAW


class TeamRatingAggregator:
    """Average player ratings into team-level views."""

    def aggregate(self, ratings: Iterable[PlayerRating]) -> TeamRating:
        """Team rating from the ratings of active roster players.

        Players with no games are ignored. With no valid ratings the team
        gets 1 everywhere and is provisional.

        Args:
            ratings: One PlayerRating per active roster player.

        Returns:
            TeamRating.
        """
        valid = [r for r in ratings if r.games_played > 0]
        if not valid:
            return TeamRating(
                overall=MIN_RATING,
                sub_ratings=FLOOR_SUB_RATINGS,
                player_count=0,
                is_provisional=True,
            )

        count = len(valid)
        overall = to_rating(sum(r.overall for r in valid) / count)
        sub_ratings = SubRatings(
            **{
                skill: to_rating(sum(getattr(r.sub_ratings, skill) for r in valid) / count)
                for skill in SKILLS
            }
        )
        logger.debug("Team rating from {} players: {}", count, overall)
        return TeamRating(
            overall=overall,
            sub_ratings=sub_ratings,
            player_count=count,
            is_provisional=count < PROVISIONAL_TEAM_THRESHOLD,
        )

    def game_stats(
        self,
        events: Sequence[EventContext],
        entries_by_event: Mapping[str, Sequence[StatEntry]],
    ) -> list[TeamGameStat]:
        """Team totals for each match, most recent first.

        Args:
            events: Game and tournament events with their results.
            entries_by_event: Every player's stat entries keyed by event id.

        Returns:
            One TeamGameStat per event.
        """
        aggregator = StatAggregator()
        results = []
        for event in sorted(events, key=lambda e: e.start_time, reverse=True):
            stats = aggregator.aggregate(entries_by_event.get(event.event_id or "", ()))
            sets_won = event.sets_won or 0
            sets_lost = event.sets_lost or 0
            results.append(
                TeamGameStat(
                    event_id=event.event_id,
                    title=event.title,
                    start_time=event.start_time,
                    opponent=event.opponent,
                    opponent_tier=event.opponent_tier,
                    result=match_result(sets_won, sets_lost),
                    sets_won=sets_won,
                    sets_lost=sets_lost,
                    kill_percentage=stats.kill_percentage,
                    serve_percentage=stats.serve_percentage,
                    pass_rating=stats.pass_rating,
                )
            )
        return results

    def form_streak(self, events: Iterable[EventContext]) -> FormStreak:
        """Results of the last five matches with a recorded score."""
        decided = [e for e in events if e.sets_won is not None and e.sets_lost is not None]
        decided.sort(key=lambda e: e.start_time, reverse=True)
        recent = decided[:FORM_STREAK_GAMES]
        if not recent:
            return FormStreak()

        results = tuple(match_result(e.sets_won or 0, e.sets_lost or 0) for e in recent)
        wins = sum(1 for r in results if r is MatchResult.WIN)
        return FormStreak(
            results=results,
            win_rate=int(round_half_up(wins / len(results) * 100)),
        )

    def performance_by_tier(
        self,
        events: Iterable[EventContext],
        entries_by_event: Mapping[str, Sequence[StatEntry]],
    ) -> list[OpponentTierStats]:
        """Results and team efficiency grouped by opponent tier.

        Only matches with a recorded score count. A match is a win when more
        sets were won than lost; anything else counts as a loss. Kill % and
        serve % are team totals per match (in percent), averaged over the
        matches that have stat entries. Missing tiers count as tier 5.

        Returns:
            One entry per tier played, ordered by tier.
        """
        aggregator = StatAggregator()
        by_tier: dict[int, dict[str, list]] = {}
        for event in events:
            if event.sets_won is None or event.sets_lost is None:
                continue
            tier = normalize_tier(event.opponent_tier)
            bucket = by_tier.setdefault(tier, {"results": [], "kill": [], "serve": []})
            bucket["results"].append(event.sets_won > event.sets_lost)

            entries = entries_by_event.get(event.event_id or "", ())
            if entries:
                stats = aggregator.aggregate(entries)
                bucket["kill"].append(stats.kill_percentage * 100)
                bucket["serve"].append(stats.serve_percentage * 100)

        analysis = []
        for tier in sorted(by_tier):
            bucket = by_tier[tier]
            games = len(bucket["results"])
            wins = sum(bucket["results"])
            analysis.append(
                OpponentTierStats(
                    tier=tier,
                    tier_label=TIER_LABELS[tier],
                    wins=wins,
                    losses=games - wins,
                    win_pct=int(round_half_up(wins / games * 100)),
                    avg_kill_pct=_mean_percent(bucket["kill"]),
                    avg_serve_pct=_mean_percent(bucket["serve"]),
                    games_played=games,
                )
            )
        return analysis

    def best_lineup(
        self,
        roster: Sequence[RosterPlayer],
        ratings: Mapping[PlayerId, PlayerRating],
    ) -> BestLineup:
        """Pick the strongest starting lineup greedily by overall rating.

        Slots are filled in order setter, libero, two outside hitters, two
        middle blockers, opposite. A player is a candidate for any position
        they list and fills at most one slot. Players without a rating count
        as 1; ties keep roster order.
        """
        used: set[PlayerId] = set()
        chosen: dict[str, LineupSlot | None] = {}

        for slot, position in LINEUP_SLOTS:
            best: RosterPlayer | None = None
            best_rating = 0
            for player in roster:
                if player.player_id in used or position not in player.positions:
                    continue
                rating = self._overall(ratings.get(player.player_id))
                if best is None or rating > best_rating:
                    best, best_rating = player, rating

            if best is None:
                chosen[slot] = None
                continue
            used.add(best.player_id)
            chosen[slot] = LineupSlot(
                player_id=best.player_id,
                name=best.name,
                position=position,
                rating=best_rating,
                jersey_number=best.jersey_number,
            )

        return BestLineup(**chosen)

    @staticmethod
    def _overall(rating: PlayerRating | None) -> int:
        if rating is None or rating.games_played == 0:
            return MIN_RATING
        return rating.overall


__all__ = [
    "LINEUP_SLOTS",
    "TeamRatingAggregator",
    "match_result",
]
