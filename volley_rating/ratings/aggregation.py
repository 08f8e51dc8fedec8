"""Stat aggregation over collections of per-game stat entries.

Sums every raw counting field and derives the rate statistics the rest of the
engine consumes. Aggregation is a pure function of the input multiset: entry
order never changes the result.

Rates:
    kill % = (kills - attack errors) / attack attempts
    serve % = (serve attempts - service errors) / serve attempts
    pass rating = pass sum / pass attempts (0-3 scale)
    set rating = set sum / set attempts
    error rate = (attack + service + ball-handling errors)
                 / (attack + serve + pass attempts)

Every rate is 0 when its denominator is 0.

Example:
    >>> aggregator = StatAggregator()
    >>> stats = aggregator.aggregate(history)
    >>> print(f"{stats.kill_percentage:.3f}")
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Sequence

from volley_rating.logging import get_logger
from volley_rating.ratings.estimators import safe_rate
from volley_rating.types import (
    AggregatedStats,
    GameRecord,
    GameStatLine,
    RotationStats,
    StatEntry,
)

logger = get_logger(__name__)

# StatEntry field -> AggregatedStats total field
SUMMED_FIELDS: dict[str, str] = {
    "kills": "total_kills",
    "attack_attempts": "total_attack_attempts",
    "attack_errors": "total_attack_errors",
    "aces": "total_aces",
    "service_errors": "total_service_errors",
    "serve_attempts": "total_serve_attempts",
    "digs": "total_digs",
    "block_solos": "total_block_solos",
    "block_assists": "total_block_assists",
    "block_touches": "total_block_touches",
    "pass_attempts": "total_pass_attempts",
    "pass_sum": "total_pass_sum",
    "set_attempts": "total_set_attempts",
    "set_sum": "total_set_sum",
    "setting_errors": "total_setting_errors",
    "ball_handling_errors": "total_ball_handling_errors",
    "sets_played": "total_sets_played",
    "rotations_played": "total_rotations_played",
}

ROTATIONS: range = range(1, 7)


def kill_percentage(kills: float, attack_errors: float, attack_attempts: float) -> float:
    """Hitting efficiency: (kills - errors) / attempts."""
    return safe_rate(kills - attack_errors, attack_attempts)


def serve_percentage(service_errors: float, serve_attempts: float) -> float:
    """Share of serves that stayed in play."""
    return safe_rate(serve_attempts - service_errors, serve_attempts)


def total_blocks(block_solos: float, block_assists: float) -> float:
    """Block credit with assists counted as half a block."""
    return block_solos + 0.5 * block_assists


class StatAggregator:
    """Sum stat entries into cumulative totals and rate statistics.

    Accepts either bare :class:`StatEntry` objects or :class:`GameRecord`
    pairs; the event context plays no part in aggregation.

    Example:
        >>> aggregator = StatAggregator()
        >>> single = aggregator.aggregate([record])
        >>> career = aggregator.aggregate(history)
    """

    @staticmethod
    def _entries(items: Iterable[StatEntry | GameRecord]) -> list[StatEntry]:
        return [item.entry if isinstance(item, GameRecord) else item for item in items]

    def aggregate(self, items: Iterable[StatEntry | GameRecord]) -> AggregatedStats:
        """Aggregate a collection of games.

        Args:
            items: Stat entries or game records for one player (or one game).

        Returns:
            AggregatedStats with totals, rates and per-game averages.
        """
        entries = self._entries(items)
        games_played = len(entries)
        if games_played == 0:
            return AggregatedStats()

        totals: dict[str, int] = {total: 0 for total in SUMMED_FIELDS.values()}
        for entry in entries:
            for source, total in SUMMED_FIELDS.items():
                totals[total] += getattr(entry, source) or 0

        blocks = total_blocks(totals["total_block_solos"], totals["total_block_assists"])
        total_actions = (
            totals["total_attack_attempts"]
            + totals["total_serve_attempts"]
            + totals["total_pass_attempts"]
        )
        total_errors = (
            totals["total_attack_errors"]
            + totals["total_service_errors"]
            + totals["total_ball_handling_errors"]
        )

        return AggregatedStats(
            games_played=games_played,
            **totals,
            kill_percentage=kill_percentage(
                totals["total_kills"],
                totals["total_attack_errors"],
                totals["total_attack_attempts"],
            ),
            serve_percentage=serve_percentage(
                totals["total_service_errors"], totals["total_serve_attempts"]
            ),
            pass_rating=safe_rate(totals["total_pass_sum"], totals["total_pass_attempts"]),
            set_rating=safe_rate(totals["total_set_sum"], totals["total_set_attempts"]),
            error_rate=safe_rate(total_errors, total_actions),
            total_blocks=blocks,
            kills_per_game=safe_rate(totals["total_kills"], games_played),
            aces_per_game=safe_rate(totals["total_aces"], games_played),
            digs_per_game=safe_rate(totals["total_digs"], games_played),
            blocks_per_game=safe_rate(blocks, games_played),
        )

    def game_stat_lines(self, history: Sequence[GameRecord]) -> list[GameStatLine]:
        """Per-game rates for each record, most recent game first."""
        lines = []
        for record in history:
            entry = record.entry
            lines.append(
                GameStatLine(
                    entry=entry,
                    event=record.event,
                    kill_percentage=kill_percentage(
                        entry.kills, entry.attack_errors, entry.attack_attempts
                    ),
                    serve_percentage=serve_percentage(
                        entry.service_errors, entry.serve_attempts
                    ),
                    pass_rating=safe_rate(entry.pass_sum, entry.pass_attempts),
                    set_rating=safe_rate(entry.set_sum, entry.set_attempts),
                    total_blocks=total_blocks(entry.block_solos, entry.block_assists),
                )
            )
        return sorted(lines, key=lambda line: line.event.start_time, reverse=True)

    def rotation_stats(self, items: Iterable[StatEntry | GameRecord]) -> list[RotationStats]:
        """Break performance down by starting rotation.

        Only entries carrying a rotation number (1-6) are considered. A
        rotation is flagged below average when its kill %, pass rating or
        digs per game trails the aggregate over all rotated entries.

        Args:
            items: Stat entries or game records for one player.

        Returns:
            One RotationStats per rotation present, in rotation order.
        """
        rotated = [e for e in self._entries(items) if e.rotation in ROTATIONS]
        if not rotated:
            return []

        overall = self.aggregate(rotated)
        by_rotation: dict[int, list[StatEntry]] = defaultdict(list)
        for entry in rotated:
            by_rotation[entry.rotation].append(entry)  # type: ignore[index]

        results = []
        for rotation in ROTATIONS:
            entries = by_rotation.get(rotation)
            if not entries:
                continue
            stats = self.aggregate(entries)
            below = (
                stats.kill_percentage < overall.kill_percentage
                or stats.pass_rating < overall.pass_rating
                or stats.digs_per_game < overall.digs_per_game
            )
            results.append(
                RotationStats(
                    rotation=rotation,
                    games_in_rotation=len(entries),
                    kill_percentage=stats.kill_percentage,
                    pass_rating=stats.pass_rating,
                    digs=stats.total_digs,
                    is_below_average=below,
                )
            )

        logger.debug("Rotation breakdown covers {} rotations", len(results))
        return results


def aggregate_stats(items: Iterable[StatEntry | GameRecord]) -> AggregatedStats:
    """Convenience wrapper around :meth:`StatAggregator.aggregate`."""
    return StatAggregator().aggregate(items)


__all__ = [
    "SUMMED_FIELDS",
    "StatAggregator",
    "aggregate_stats",
    "kill_percentage",
    "serve_percentage",
    "total_blocks",
]
