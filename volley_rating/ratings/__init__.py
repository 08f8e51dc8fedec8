"""Rating engine for volleyball player statistics.

Pure functions and small stateless calculators that turn per-game stat
entries into normalized 1-99 ratings. Nothing in this package performs I/O;
callers supply plain in-memory collections.

Submodules:
    constants: Immutable tables (tier ceilings, priors, position weights)
    estimators: Shrinkage, recency weighting and opponent ceilings
    aggregation: Cumulative totals, rate stats, per-game and per-rotation lines
    subratings: Eight skill sub-ratings from aggregated stats
    engine: Overall player rating and single-game ratings
    team: Team rating, match summaries, form streak, tier results and best lineup
    form: Attendance-based form, attendance streaks and selection indicators
    awards: Post-match and end-of-season award winners
    progression: Monthly skill progression and overall rating trend
    batch: Concurrent roster-wide rating, rankings and stat leaderboards

Example:
    >>> from volley_rating.ratings import PlayerRatingEngine, TeamRatingAggregator
    >>> engine = PlayerRatingEngine(as_of=date(2026, 10, 1))
    >>> ratings = [engine.rate(h, Position.OUTSIDE_HITTER) for h in histories]
    >>> team = TeamRatingAggregator().aggregate(ratings)
"""

from __future__ import annotations

# Aggregation
from volley_rating.ratings.aggregation import StatAggregator, aggregate_stats

# Awards
from volley_rating.ratings.awards import (
    AwardEngine,
    SeasonAwardEngine,
    calculate_match_awards,
    calculate_season_awards,
    mvp_score,
)

# Batch
from volley_rating.ratings.batch import (
    HistoryProvider,
    RosterRater,
    leaderboard_value,
    stat_leaderboard,
)

# Constants
from volley_rating.ratings.constants import (
    POSITION_WEIGHTS,
    TIER_LABELS,
    TIER_MAX_RATING,
    PositionWeights,
    Prior,
)

# Engine
from volley_rating.ratings.engine import (
    GameContribution,
    PlayerRatingEngine,
    calculate_player_rating,
)

# Estimators
from volley_rating.ratings.estimators import (
    opponent_ceiling,
    recency_weight,
    round_half_up,
    shrink,
    to_rating,
)

# Form
from volley_rating.ratings.form import FormCalculator, attendance_percent

# Progression
from volley_rating.ratings.progression import ProgressionTracker

# Sub-ratings
from volley_rating.ratings.subratings import SubRatingCalculator, calculate_sub_ratings

# Team
from volley_rating.ratings.team import TeamRatingAggregator, match_result

__all__ = [
    # Aggregation
    "StatAggregator",
    "aggregate_stats",
    # Awards
    "AwardEngine",
    "SeasonAwardEngine",
    "calculate_match_awards",
    "calculate_season_awards",
    "mvp_score",
    # Batch
    "HistoryProvider",
    "RosterRater",
    "leaderboard_value",
    "stat_leaderboard",
    # Constants
    "POSITION_WEIGHTS",
    "TIER_LABELS",
    "TIER_MAX_RATING",
    "PositionWeights",
    "Prior",
    # Engine
    "GameContribution",
    "PlayerRatingEngine",
    "calculate_player_rating",
    # Estimators
    "opponent_ceiling",
    "recency_weight",
    "round_half_up",
    "shrink",
    "to_rating",
    # Form
    "FormCalculator",
    "attendance_percent",
    # Progression
    "ProgressionTracker",
    # Sub-ratings
    "SubRatingCalculator",
    "calculate_sub_ratings",
    # Team
    "TeamRatingAggregator",
    "match_result",
]
