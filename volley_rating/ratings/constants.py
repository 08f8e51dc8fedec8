"""Static tables for the rating engine.

Every tuning constant the formulas use lives here as an immutable table so the
contracts can be audited and tested in isolation. Nothing in this module is
read from configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from volley_rating.types import Position

# =============================================================================
# Rating scale
# =============================================================================

MIN_RATING: int = 1
MAX_RATING: int = 99
PROVISIONAL_GAME_THRESHOLD: int = 3
PROVISIONAL_TEAM_THRESHOLD: int = 3


# =============================================================================
# Opponent ceilings
# =============================================================================

DEFAULT_OPPONENT_TIER: int = 5

TIER_MAX_RATING: Mapping[int, int] = MappingProxyType(
    {
        1: 15,  # Beginner
        2: 25,  # Novice
        3: 35,  # Developing
        4: 45,  # Intermediate
        5: 55,  # Competitive
        6: 65,  # Advanced
        7: 75,  # Elite
        8: 87,  # National
        9: 99,  # World class
    }
)

TIER_LABELS: Mapping[int, str] = MappingProxyType(
    {
        1: "Beginner",
        2: "Novice",
        3: "Developing",
        4: "Intermediate",
        5: "Competitive",
        6: "Advanced",
        7: "Elite",
        8: "National",
        9: "World Class",
    }
)


# =============================================================================
# Recency
# =============================================================================

RECENCY_WINDOW_DAYS: int = 120
RECENCY_FLOOR: float = 0.3


# =============================================================================
# Shrinkage priors
# =============================================================================


@dataclass(frozen=True)
class Prior:
    """Baseline rate and its pseudo-count weight."""

    rate: float
    weight: float


ACE_PRIOR = Prior(rate=0.05, weight=15)
SERVE_ERROR_PRIOR = Prior(rate=0.10, weight=15)
PASS_PRIOR = Prior(rate=1.5, weight=10)
SET_PRIOR = Prior(rate=1.5, weight=10)
SET_ERROR_PRIOR = Prior(rate=0.10, weight=10)
ATTACK_EFFICIENCY_PRIOR = Prior(rate=0.30, weight=15)
ERROR_RATE_PRIOR = Prior(rate=0.15, weight=20)


# =============================================================================
# Sub-rating scales
# =============================================================================

SERVE_ACE_MULTIPLIER: float = 3.0
SERVE_SCALE: float = 76.0
RECEIVE_SCALE: float = 33.0  # pass values are on a 0-3 scale
SET_QUALITY_SHARE: float = 0.8
SET_ERROR_SHARE: float = 0.2
SET_MAX_VALUE: float = 3.0
BLOCK_POINTS_FOR_MAX: float = 6.0  # per game
BLOCK_SOLO_POINTS: int = 2
ATTACK_SCALE: float = 165.0
DIGS_FOR_MAX: float = 15.0  # per game
MENTAL_ERROR_CEILING: float = 0.30
MENTAL_EXPONENT: float = 1.2
PHYSIQUE_ACTIONS_FOR_MAX: float = 30.0  # per game
PHYSIQUE_BASE: float = 50.0
PHYSIQUE_RANGE: float = 49.0
PHYSIQUE_DEFAULT: int = 70


# =============================================================================
# Position weight profiles
# =============================================================================


@dataclass(frozen=True)
class PositionWeights:
    """Contribution of each skill to the overall rating; sums to 1."""

    serve: float
    receive: float
    set: float
    block: float
    attack: float
    dig: float
    mental: float
    physique: float


POSITION_WEIGHTS: Mapping[Position, PositionWeights] = MappingProxyType(
    {
        Position.OUTSIDE_HITTER: PositionWeights(
            serve=0.12, receive=0.15, set=0.05, block=0.08,
            attack=0.25, dig=0.10, mental=0.15, physique=0.10,
        ),
        Position.OPPOSITE: PositionWeights(
            serve=0.12, receive=0.08, set=0.05, block=0.10,
            attack=0.30, dig=0.05, mental=0.15, physique=0.15,
        ),
        Position.MIDDLE_BLOCKER: PositionWeights(
            serve=0.08, receive=0.05, set=0.05, block=0.25,
            attack=0.22, dig=0.05, mental=0.15, physique=0.15,
        ),
        Position.SETTER: PositionWeights(
            serve=0.10, receive=0.15, set=0.30, block=0.05,
            attack=0.05, dig=0.10, mental=0.15, physique=0.10,
        ),
        Position.LIBERO: PositionWeights(
            serve=0.00, receive=0.30, set=0.10, block=0.00,
            attack=0.00, dig=0.30, mental=0.20, physique=0.10,
        ),
        Position.DEFENSIVE_SPECIALIST: PositionWeights(
            serve=0.10, receive=0.25, set=0.08, block=0.02,
            attack=0.05, dig=0.25, mental=0.15, physique=0.10,
        ),
        Position.ALL_AROUND: PositionWeights(
            serve=0.12, receive=0.12, set=0.12, block=0.12,
            attack=0.14, dig=0.12, mental=0.14, physique=0.12,
        ),
    }
)


# =============================================================================
# Awards
# =============================================================================

MVP_KILL_POINTS: float = 2.0
MVP_ACE_POINTS: float = 3.0
MVP_DIG_POINTS: float = 1.0
MVP_BLOCK_POINTS: float = 2.0
MVP_ERROR_PENALTY: float = 1.5
MIN_ATTACK_ATTEMPTS_FOR_AWARD: int = 5
MIN_PASS_ATTEMPTS_FOR_AWARD: int = 5

# Season awards
SEASON_MIN_ATTACK_ATTEMPTS: int = 20
SEASON_MIN_PASS_ATTEMPTS: int = 20
MOST_IMPROVED_MIN_GAMES: int = 2


# =============================================================================
# Leaderboards
# =============================================================================

LEADERBOARD_LIMIT: int = 10


# =============================================================================
# Form
# =============================================================================

FORM_WINDOW: int = 10
FORM_ATTENDANCE_FOR_MAX: int = 8
SELECTION_RECENT_GAMES: int = 3
FORM_STREAK_GAMES: int = 5


__all__ = [
    "ACE_PRIOR",
    "ATTACK_EFFICIENCY_PRIOR",
    "DEFAULT_OPPONENT_TIER",
    "ERROR_RATE_PRIOR",
    "FORM_ATTENDANCE_FOR_MAX",
    "FORM_STREAK_GAMES",
    "FORM_WINDOW",
    "LEADERBOARD_LIMIT",
    "MAX_RATING",
    "MIN_RATING",
    "MOST_IMPROVED_MIN_GAMES",
    "PASS_PRIOR",
    "POSITION_WEIGHTS",
    "PROVISIONAL_GAME_THRESHOLD",
    "PROVISIONAL_TEAM_THRESHOLD",
    "RECENCY_FLOOR",
    "RECENCY_WINDOW_DAYS",
    "SEASON_MIN_ATTACK_ATTEMPTS",
    "SEASON_MIN_PASS_ATTEMPTS",
    "SELECTION_RECENT_GAMES",
    "SERVE_ERROR_PRIOR",
    "SET_ERROR_PRIOR",
    "SET_PRIOR",
    "TIER_LABELS",
    "TIER_MAX_RATING",
    "PositionWeights",
    "Prior",
]
