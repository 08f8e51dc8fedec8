"""Shrinkage, recency and opponent-ceiling primitives.

These are the small building blocks every rating formula goes through:

- ``shrink`` blends an observed rate with a prior (Bayesian smoothing):
  (actual + prior_rate * prior_weight) / (attempts + prior_weight)
- ``recency_weight`` decays linearly over 120 days, floored at 0.3:
  max(0.3, 1 - days_since / 120)
- ``opponent_ceiling`` maps an opponent tier (1-9) to the best rating a
  single game against that tier can produce.

Example:
    >>> round(shrink(2, 2, 0.30, 15), 3)  # two kills from two swings is not 100%
    0.382
    >>> recency_weight(date(2026, 6, 1), as_of=date(2026, 7, 1))
    0.75
"""

from __future__ import annotations

import math
from datetime import date, datetime

from volley_rating.ratings.constants import (
    DEFAULT_OPPONENT_TIER,
    MAX_RATING,
    MIN_RATING,
    RECENCY_FLOOR,
    RECENCY_WINDOW_DAYS,
    TIER_MAX_RATING,
    Prior,
)


def shrink(actual: float, attempts: float, prior_rate: float, prior_weight: float) -> float:
    """Smooth an observed rate toward a prior.

    Converges to ``actual / attempts`` as attempts grow and returns
    ``prior_rate`` when there are no attempts.

    Args:
        actual: Observed successes (or summed values).
        attempts: Number of attempts behind ``actual``.
        prior_rate: Baseline rate assumed before any data.
        prior_weight: Pseudo-count of the baseline; must be positive.

    Returns:
        Smoothed rate.
    """
    return (actual + prior_rate * prior_weight) / (attempts + prior_weight)


def shrink_with(actual: float, attempts: float, prior: Prior) -> float:
    """:func:`shrink` using a prior from the constants table."""
    return shrink(actual, attempts, prior.rate, prior.weight)


def safe_rate(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 when the denominator is zero."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with halves going up, independent of banker's rounding."""
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def clamp_rating(value: float) -> float:
    """Clamp a value to the rating scale without rounding."""
    return max(float(MIN_RATING), min(float(MAX_RATING), value))


def to_rating(value: float) -> int:
    """Round half up and clamp to [1, 99]."""
    return int(clamp_rating(round_half_up(value)))


def as_date(value: date) -> date:
    """Drop the time part of a datetime; plain dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_since(game_date: date, as_of: date | None = None) -> int:
    """Whole calendar days between a game and the evaluation date.

    Games dated after ``as_of`` count as zero days old.

    Args:
        game_date: Date (or datetime) the game was played.
        as_of: Evaluation date; defaults to today.

    Returns:
        Non-negative day count.
    """
    reference = as_date(as_of) if as_of is not None else date.today()
    return max(0, (reference - as_date(game_date)).days)


def recency_weight(game_date: date, as_of: date | None = None) -> float:
    """Linear decay weight for a game, floored so old games still count."""
    return max(RECENCY_FLOOR, 1.0 - days_since(game_date, as_of) / RECENCY_WINDOW_DAYS)


def normalize_tier(tier: object) -> int:
    """Return a valid opponent tier, mapping anything unusable to tier 5.

    Whole-valued floats (``8.0``, as pandas produces for columns with gaps)
    are accepted.
    """
    if isinstance(tier, float) and tier.is_integer():
        tier = int(tier)
    if isinstance(tier, bool) or not isinstance(tier, int):
        return DEFAULT_OPPONENT_TIER
    if tier not in TIER_MAX_RATING:
        return DEFAULT_OPPONENT_TIER
    return tier


def opponent_ceiling(tier: object) -> int:
    """Maximum single-game rating against an opponent of the given tier."""
    return TIER_MAX_RATING[normalize_tier(tier)]


__all__ = [
    "as_date",
    "clamp_rating",
    "days_since",
    "normalize_tier",
    "opponent_ceiling",
    "recency_weight",
    "round_half_up",
    "safe_rate",
    "shrink",
    "shrink_with",
    "to_rating",
]
