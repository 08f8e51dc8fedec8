"""Skill progression over time by cumulative-prefix recomputation.

Every point is the engine's own output for the games played up to that
moment, so progression can never drift from the current rating formulas:

- monthly: for each month with games, the eight displayed sub-ratings over
  every game up to the end of that month.
- per game: the overall rating after each game in chronological order,
  with a least-squares slope (rating points per game) as the trend.

Example:
    >>> tracker = ProgressionTracker(PlayerRatingEngine(as_of=date(2026, 10, 1)))
    >>> points = tracker.monthly(history)
    >>> print(tracker.trend(tracker.overall_series(history, Position.SETTER)))
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from volley_rating.logging import get_logger
from volley_rating.ratings.engine import PlayerRatingEngine
from volley_rating.ratings.estimators import as_date
from volley_rating.types import GameRecord, Month, Position, SkillProgressionPoint

logger = get_logger(__name__)


def month_key(record: GameRecord) -> Month:
    """Calendar month of a game as ``YYYY-MM``."""
    return as_date(record.event.start_time).strftime("%Y-%m")


class ProgressionTracker:
    """Replay a player's history through the rating engine.

    Attributes:
        engine: Engine used for every prefix; its ``as_of`` fixes recency.
    """

    def __init__(self, engine: PlayerRatingEngine | None = None) -> None:
        self.engine = engine or PlayerRatingEngine()

    @staticmethod
    def _chronological(history: Sequence[GameRecord]) -> list[GameRecord]:
        return sorted(history, key=lambda r: as_date(r.event.start_time))

    def monthly(
        self,
        history: Sequence[GameRecord],
        position: Position = Position.ALL_AROUND,
    ) -> list[SkillProgressionPoint]:
        """Displayed skill levels at the end of every month with games.

        Args:
            history: The player's game records, in any order.
            position: Weight profile passed to the engine. Sub-ratings do not
                depend on it.

        Returns:
            Points ordered by month, then by skill in canonical order.
        """
        ordered = self._chronological(history)
        months = sorted({month_key(record) for record in ordered})

        points: list[SkillProgressionPoint] = []
        for month in months:
            prefix = [record for record in ordered if month_key(record) <= month]
            rating = self.engine.rate(prefix, position)
            points.extend(
                SkillProgressionPoint(month=month, skill=skill, level=level)
                for skill, level in rating.sub_ratings.as_dict().items()
            )

        logger.debug("Progression over {} months, {} games", len(months), len(ordered))
        return points

    def overall_series(self, history: Sequence[GameRecord], position: Position) -> list[int]:
        """Overall rating after each game, oldest first."""
        ordered = self._chronological(history)
        return [self.engine.rate(ordered[: i + 1], position).overall for i in range(len(ordered))]

    @staticmethod
    def trend(series: Sequence[float]) -> float:
        """Slope of a least-squares line through the series.

        Returns 0.0 with fewer than two points.
        """
        if len(series) < 2:
            return 0.0
        x = np.arange(len(series), dtype=float)
        slope, _intercept = np.polyfit(x, np.asarray(series, dtype=float), 1)
        return float(slope)


__all__ = ["ProgressionTracker", "month_key"]
