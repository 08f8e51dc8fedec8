"""Sub-rating calculator: eight 1-99 skill scores from aggregated stats.

Each skill has its own formula. Rates are always smoothed with ``shrink`` so
a thin sample lands near a credible baseline instead of an extreme:

    serve    = (ace_rate * 3 + (1 - serve_err_rate)) * 76
    receive  = pass_rate * 33                       (pass values 0-3)
    set      = ((set_rate / 3) * 0.8 + (1 - set_err_rate) * 0.2) * 99
    block    = min(block_points_per_game / 6, 1) * 99   (solo = 2, assist = 1)
    attack   = efficiency * 165
    dig      = min(digs_per_game / 15, 1) * 99
    mental   = 99 * max(0, 1 - error_rate / 0.30) ** 1.2
    physique = min(actions_per_game / 30, 1) * 49 + 50  (70 with no games)

Every value is clamped to [1, 99]; the integer form rounds half up first.

Example:
    >>> calculator = SubRatingCalculator()
    >>> ratings = calculator.calculate(aggregate_stats(history))
    >>> print(ratings.attack)
"""

from __future__ import annotations

from volley_rating.ratings.constants import (
    ACE_PRIOR,
    ATTACK_EFFICIENCY_PRIOR,
    ATTACK_SCALE,
    BLOCK_POINTS_FOR_MAX,
    BLOCK_SOLO_POINTS,
    DIGS_FOR_MAX,
    ERROR_RATE_PRIOR,
    MAX_RATING,
    MENTAL_ERROR_CEILING,
    MENTAL_EXPONENT,
    PASS_PRIOR,
    PHYSIQUE_ACTIONS_FOR_MAX,
    PHYSIQUE_BASE,
    PHYSIQUE_DEFAULT,
    PHYSIQUE_RANGE,
    RECEIVE_SCALE,
    SERVE_ACE_MULTIPLIER,
    SERVE_ERROR_PRIOR,
    SERVE_SCALE,
    SET_ERROR_PRIOR,
    SET_ERROR_SHARE,
    SET_MAX_VALUE,
    SET_PRIOR,
    SET_QUALITY_SHARE,
)
from volley_rating.ratings.estimators import clamp_rating, safe_rate, shrink_with, to_rating
from volley_rating.types import SKILLS, AggregatedStats, SubRatings


class SubRatingCalculator:
    """Convert aggregated stats into the eight skill sub-ratings.

    Works the same for a single game's aggregate and a full history; per-game
    skills (block, dig, physique) divide by ``games_played``.
    """

    def serve(self, stats: AggregatedStats) -> float:
        """Aces rewarded, service errors punished."""
        ace_rate = shrink_with(stats.total_aces, stats.total_serve_attempts, ACE_PRIOR)
        error_rate = shrink_with(
            stats.total_service_errors, stats.total_serve_attempts, SERVE_ERROR_PRIOR
        )
        return (ace_rate * SERVE_ACE_MULTIPLIER + (1 - error_rate)) * SERVE_SCALE

    def receive(self, stats: AggregatedStats) -> float:
        pass_rate = shrink_with(stats.total_pass_sum, stats.total_pass_attempts, PASS_PRIOR)
        return pass_rate * RECEIVE_SCALE

    def set(self, stats: AggregatedStats) -> float:
        set_rate = shrink_with(stats.total_set_sum, stats.total_set_attempts, SET_PRIOR)
        error_rate = shrink_with(
            stats.total_setting_errors, stats.total_set_attempts, SET_ERROR_PRIOR
        )
        score = (set_rate / SET_MAX_VALUE) * SET_QUALITY_SHARE + (1 - error_rate) * SET_ERROR_SHARE
        return score * MAX_RATING

    def block(self, stats: AggregatedStats) -> float:
        points = stats.total_block_solos * BLOCK_SOLO_POINTS + stats.total_block_assists
        per_game = safe_rate(points, stats.games_played)
        return min(per_game / BLOCK_POINTS_FOR_MAX, 1.0) * MAX_RATING

    def attack(self, stats: AggregatedStats) -> float:
        efficiency = shrink_with(
            stats.total_kills - stats.total_attack_errors,
            stats.total_attack_attempts,
            ATTACK_EFFICIENCY_PRIOR,
        )
        return efficiency * ATTACK_SCALE

    def dig(self, stats: AggregatedStats) -> float:
        per_game = safe_rate(stats.total_digs, stats.games_played)
        return min(per_game / DIGS_FOR_MAX, 1.0) * MAX_RATING

    def mental(self, stats: AggregatedStats) -> float:
        """Few errors per action means a composed player."""
        total_errors = (
            stats.total_attack_errors
            + stats.total_service_errors
            + stats.total_ball_handling_errors
        )
        total_actions = (
            stats.total_attack_attempts
            + stats.total_serve_attempts
            + stats.total_pass_attempts
        )
        error_rate = shrink_with(total_errors, total_actions, ERROR_RATE_PRIOR)
        headroom = max(0.0, 1 - error_rate / MENTAL_ERROR_CEILING)
        return MAX_RATING * headroom**MENTAL_EXPONENT

    def physique(self, stats: AggregatedStats) -> float:
        """Endurance proxy from serve, attack and dig volume per game."""
        if stats.games_played <= 0:
            return float(PHYSIQUE_DEFAULT)
        actions = stats.total_serve_attempts + stats.total_attack_attempts + stats.total_digs
        per_game = actions / stats.games_played
        return min(per_game / PHYSIQUE_ACTIONS_FOR_MAX, 1.0) * PHYSIQUE_RANGE + PHYSIQUE_BASE

    def calculate_raw(self, stats: AggregatedStats) -> dict[str, float]:
        """Unrounded skill values, each clamped to [1, 99].

        Args:
            stats: Aggregate for one game or a whole history.

        Returns:
            Dict keyed by skill name in canonical order.
        """
        return {skill: clamp_rating(getattr(self, skill)(stats)) for skill in SKILLS}

    def calculate(self, stats: AggregatedStats) -> SubRatings:
        """Integer sub-ratings, rounded half up and clamped to [1, 99]."""
        raw = self.calculate_raw(stats)
        return SubRatings(**{skill: to_rating(value) for skill, value in raw.items()})


def calculate_sub_ratings(stats: AggregatedStats) -> SubRatings:
    """Convenience wrapper around :meth:`SubRatingCalculator.calculate`."""
    return SubRatingCalculator().calculate(stats)


__all__ = ["SubRatingCalculator", "calculate_sub_ratings"]
