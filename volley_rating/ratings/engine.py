"""Player rating engine: overall and displayed skill ratings for a player.

Overall rating
    Each game is rated on its own: its sub-ratings are combined with the
    position's weight profile into a performance score (about 1-99), then
    capped by the opponent's tier ceiling:

        game_rating = opponent_max * performance_score / 99

    The overall rating is the recency-weighted mean of game ratings, so one
    big game against a weak opponent cannot inflate a career number.

Displayed sub-ratings
    Computed once from the aggregate of the whole history, then scaled by the
    recency-weighted average ceiling (avg_opponent_max / 99) so the eight
    skills stay in proportion to the capped overall rating.

Example:
    >>> engine = PlayerRatingEngine(as_of=date(2026, 10, 1))
    >>> rating = engine.rate(history, Position.LIBERO)
    >>> print(rating.overall, rating.is_provisional)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from volley_rating.logging import get_logger
from volley_rating.ratings.aggregation import StatAggregator
from volley_rating.ratings.constants import (
    MAX_RATING,
    MIN_RATING,
    POSITION_WEIGHTS,
    PROVISIONAL_GAME_THRESHOLD,
)
from volley_rating.ratings.estimators import (
    opponent_ceiling,
    recency_weight,
    to_rating,
)
from volley_rating.ratings.subratings import SubRatingCalculator
from volley_rating.types import (
    SKILLS,
    GameRecord,
    PlayerRating,
    Position,
    StatEntry,
    SubRatings,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class GameContribution:
    """One game's part in the overall rating.

    Attributes:
        performance_score: Position-weighted sub-rating blend (about 1-99).
        opponent_max: Ceiling for the opponent's tier.
        game_rating: Performance scaled into the ceiling.
        weight: Recency weight of the game.
    """

    performance_score: float
    opponent_max: int
    game_rating: float
    weight: float


class PlayerRatingEngine:
    """Combine per-game and career statistics into a PlayerRating.

    Attributes:
        as_of: Evaluation date for recency weights; ``None`` means today.
        aggregator: Stat aggregator used for game and career aggregates.
        calculator: Sub-rating calculator.
    """

    def __init__(
        self,
        as_of: date | None = None,
        aggregator: StatAggregator | None = None,
        calculator: SubRatingCalculator | None = None,
    ) -> None:
        self.as_of = as_of
        self.aggregator = aggregator or StatAggregator()
        self.calculator = calculator or SubRatingCalculator()

    def evaluation_date(self) -> date:
        """The configured ``as_of``, or today when none was given."""
        return self.as_of if self.as_of is not None else date.today()

    def performance_score(self, sub_ratings: SubRatings, position: Position) -> float:
        """Weighted sum of sub-ratings for a position's profile."""
        weights = POSITION_WEIGHTS[position]
        return sum(getattr(sub_ratings, skill) * getattr(weights, skill) for skill in SKILLS)

    def game_contribution(
        self,
        record: GameRecord,
        position: Position,
        as_of: date | None = None,
    ) -> GameContribution:
        """Rate a single game and attach its recency weight.

        ``as_of`` overrides the engine's evaluation date for this call.
        """
        as_of = as_of or self.evaluation_date()
        game_ratings = self.calculator.calculate(self.aggregator.aggregate([record.entry]))
        score = self.performance_score(game_ratings, position)
        opponent_max = opponent_ceiling(record.event.opponent_tier)
        return GameContribution(
            performance_score=score,
            opponent_max=opponent_max,
            game_rating=opponent_max * (score / MAX_RATING),
            weight=recency_weight(record.event.start_time, as_of),
        )

    def tier_scale(self, history: Sequence[GameRecord], as_of: date | None = None) -> float:
        """Recency-weighted average opponent ceiling, as a fraction of 99."""
        as_of = as_of or self.evaluation_date()
        total_weight = 0.0
        weighted_max = 0.0
        for record in history:
            weight = recency_weight(record.event.start_time, as_of)
            total_weight += weight
            weighted_max += opponent_ceiling(record.event.opponent_tier) * weight
        if total_weight == 0:
            return opponent_ceiling(None) / MAX_RATING
        return (weighted_max / total_weight) / MAX_RATING

    def rate(self, history: Sequence[GameRecord], position: Position) -> PlayerRating:
        """Compute a player's rating from their full game history.

        Args:
            history: Every (stat entry, event context) pair for the player.
            position: Primary position selecting the weight profile.

        Returns:
            PlayerRating. An empty history yields overall 1, provisional,
            with sub-ratings from the empty aggregate.
        """
        history = list(history)
        aggregated = self.aggregator.aggregate(history)
        raw_sub_ratings = self.calculator.calculate(aggregated)
        games_played = len(history)

        if games_played == 0:
            return PlayerRating(
                overall=MIN_RATING,
                sub_ratings=raw_sub_ratings,
                aggregated_stats=aggregated,
                is_provisional=True,
                games_played=0,
            )

        # One evaluation date for every weight in this rating
        as_of = self.evaluation_date()
        contributions = [self.game_contribution(record, position, as_of) for record in history]
        total_weight = sum(c.weight for c in contributions)
        weighted_rating = sum(c.game_rating * c.weight for c in contributions)

        overall = to_rating(weighted_rating / total_weight)
        scale = self.tier_scale(history, as_of)
        sub_ratings = SubRatings(
            **{
                skill: to_rating(value * scale)
                for skill, value in raw_sub_ratings.as_dict().items()
            }
        )

        logger.debug(
            "Rated {} games as {}: overall={}, tier_scale={:.3f}",
            games_played,
            position.value,
            overall,
            scale,
        )
        return PlayerRating(
            overall=overall,
            sub_ratings=sub_ratings,
            aggregated_stats=aggregated,
            is_provisional=games_played < PROVISIONAL_GAME_THRESHOLD,
            games_played=games_played,
        )

    def raw_skill_values(self, history: Sequence[GameRecord]) -> dict[str, float]:
        """Tier-scaled skill values without rounding.

        Lets goal tracking see sub-integer movement between two histories.
        An empty history yields 0.0 for every skill.
        """
        history = list(history)
        if not history:
            return {skill: 0.0 for skill in SKILLS}
        raw = self.calculator.calculate_raw(self.aggregator.aggregate(history))
        scale = self.tier_scale(history)
        return {skill: value * scale for skill, value in raw.items()}

    def single_game_rating(
        self,
        entry: StatEntry,
        opponent_tier: int | None,
        position: Position,
    ) -> int:
        """Performance rating for one game, capped by the opponent's tier."""
        game_ratings = self.calculator.calculate(self.aggregator.aggregate([entry]))
        score = self.performance_score(game_ratings, position)
        return to_rating(opponent_ceiling(opponent_tier) * (score / MAX_RATING))


def calculate_player_rating(
    history: Sequence[GameRecord],
    position: Position,
    as_of: date | None = None,
) -> PlayerRating:
    """Convenience wrapper around :meth:`PlayerRatingEngine.rate`."""
    return PlayerRatingEngine(as_of=as_of).rate(history, position)


__all__ = [
    "GameContribution",
    "PlayerRatingEngine",
    "calculate_player_rating",
]
