"""Volleyball player performance ratings.

Turns per-game stat entries into normalized 1-99 player and team ratings,
with sub-ratings for eight skills, attendance-based form and post-match
awards. Small samples are smoothed toward credible baselines, older games
count less and weak opponents cap what a single game can earn.

Example:
    >>> from volley_rating import PlayerRatingEngine, Position
    >>> engine = PlayerRatingEngine()
    >>> rating = engine.rate(history, Position.SETTER)
    >>> print(rating.overall, rating.sub_ratings.set)
"""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "Volley Rating Team"

# Public API exports
from volley_rating.config import Settings, get_settings
from volley_rating.ratings import (
    AwardEngine,
    FormCalculator,
    PlayerRatingEngine,
    ProgressionTracker,
    RosterRater,
    StatAggregator,
    SubRatingCalculator,
    TeamRatingAggregator,
)
from volley_rating.types import Position

__all__ = [
    "AwardEngine",
    "FormCalculator",
    "PlayerRatingEngine",
    "Position",
    "ProgressionTracker",
    "RosterRater",
    "Settings",
    "StatAggregator",
    "SubRatingCalculator",
    "TeamRatingAggregator",
    "__author__",
    "__version__",
    "get_settings",
]
