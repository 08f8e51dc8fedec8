"""Post-match and end-of-season awards.

Match award categories (each emitted only when someone qualifies):

- mvp: kills*2 + aces*3 + digs + blocks*2 - (attack + service errors)*1.5,
  where blocks = solos + 0.5 * assists. Emitted whenever there are entries.
- top_attacker: best (kills - errors) / attempts, min 5 attempts.
- top_server: most aces (min 1), fewer service errors breaks ties.
- top_defender: most digs + block solos + block assists (min 1).
- top_passer: best pass sum / attempts, min 5 attempts.

Earlier entries win exact ties. Ratio values are rounded half up to one
decimal (kill % is expressed in percent); counts stay integers.

Season awards (``SeasonAwardEngine``) cover a whole season of game records
plus attendance: season MVP (best average MVP score), most improved (MVP
score rise between season halves), best attendance, top attacker (kill %,
min 20 attempts), top server (ace rate), top defender (digs per set), top
passer (min 20 attempts) and most practices attended.

Example:
    >>> awards = AwardEngine().calculate(event_entries)
    >>> for award in awards:
    ...     print(award.award_type.value, award.player_id, award.award_value)
"""

from __future__ import annotations

from typing import Callable, Iterable, Mapping, Sequence

from volley_rating.logging import get_logger
from volley_rating.ratings.aggregation import aggregate_stats, kill_percentage, total_blocks
from volley_rating.ratings.constants import (
    MIN_ATTACK_ATTEMPTS_FOR_AWARD,
    MIN_PASS_ATTEMPTS_FOR_AWARD,
    MOST_IMPROVED_MIN_GAMES,
    MVP_ACE_POINTS,
    MVP_BLOCK_POINTS,
    MVP_DIG_POINTS,
    MVP_ERROR_PENALTY,
    MVP_KILL_POINTS,
    SEASON_MIN_ATTACK_ATTEMPTS,
    SEASON_MIN_PASS_ATTEMPTS,
)
from volley_rating.ratings.estimators import as_date, round_half_up
from volley_rating.ratings.form import ATTENDED_STATUSES
from volley_rating.types import (
    AttendanceRecord,
    Award,
    AwardType,
    EventType,
    GameRecord,
    PlayerId,
    SeasonAward,
    SeasonAwardType,
    StatEntry,
)

logger = get_logger(__name__)


def mvp_score(entry: StatEntry) -> float:
    """Composite all-round contribution for one stat line."""
    return (
        entry.kills * MVP_KILL_POINTS
        + entry.aces * MVP_ACE_POINTS
        + entry.digs * MVP_DIG_POINTS
        + total_blocks(entry.block_solos, entry.block_assists) * MVP_BLOCK_POINTS
        - (entry.attack_errors + entry.service_errors) * MVP_ERROR_PENALTY
    )


def _best(
    entries: Sequence[StatEntry],
    metric: Callable[[StatEntry], float],
    qualifies: Callable[[StatEntry], bool],
) -> tuple[StatEntry, float] | None:
    winner: tuple[StatEntry, float] | None = None
    for entry in entries:
        if not qualifies(entry):
            continue
        value = metric(entry)
        if winner is None or value > winner[1]:
            winner = (entry, value)
    return winner


class AwardEngine:
    """Pick per-match award winners."""

    def mvp(self, entries: Sequence[StatEntry]) -> Award | None:
        winner = _best(entries, mvp_score, lambda e: True)
        if winner is None:
            return None
        entry, score = winner
        return self._award(entry, AwardType.MVP, round_half_up(score, 1))

    def top_attacker(self, entries: Sequence[StatEntry]) -> Award | None:
        winner = _best(
            entries,
            lambda e: kill_percentage(e.kills, e.attack_errors, e.attack_attempts),
            lambda e: e.attack_attempts >= MIN_ATTACK_ATTEMPTS_FOR_AWARD,
        )
        if winner is None:
            return None
        entry, pct = winner
        return self._award(entry, AwardType.TOP_ATTACKER, round_half_up(pct * 100, 1))

    def top_server(self, entries: Sequence[StatEntry]) -> Award | None:
        best: StatEntry | None = None
        for entry in entries:
            if entry.aces <= 0:
                continue
            if (
                best is None
                or entry.aces > best.aces
                or (entry.aces == best.aces and entry.service_errors < best.service_errors)
            ):
                best = entry
        if best is None:
            return None
        return self._award(best, AwardType.TOP_SERVER, best.aces)

    def top_defender(self, entries: Sequence[StatEntry]) -> Award | None:
        winner = _best(
            entries,
            lambda e: e.digs + e.block_solos + e.block_assists,
            lambda e: e.digs + e.block_solos + e.block_assists > 0,
        )
        if winner is None:
            return None
        entry, total = winner
        return self._award(entry, AwardType.TOP_DEFENDER, int(total))

    def top_passer(self, entries: Sequence[StatEntry]) -> Award | None:
        winner = _best(
            entries,
            lambda e: e.pass_sum / e.pass_attempts,
            lambda e: e.pass_attempts >= MIN_PASS_ATTEMPTS_FOR_AWARD,
        )
        if winner is None:
            return None
        entry, rating = winner
        return self._award(entry, AwardType.TOP_PASSER, round_half_up(rating, 1))

    def calculate(self, entries: Sequence[StatEntry]) -> list[Award]:
        """All awards for a single event.

        Args:
            entries: Every player's stat entry for the event.

        Returns:
            Zero to five awards in category order.
        """
        entries = list(entries)
        if not entries:
            return []

        candidates = (
            self.mvp(entries),
            self.top_attacker(entries),
            self.top_server(entries),
            self.top_defender(entries),
            self.top_passer(entries),
        )
        awards = [award for award in candidates if award is not None]
        get_logger(__name__, event_id=entries[0].event_id).debug("{} awards", len(awards))
        return awards

    @staticmethod
    def _award(entry: StatEntry, award_type: AwardType, value: float) -> Award:
        return Award(
            event_id=entry.event_id,
            award_type=award_type,
            player_id=entry.player_id,
            award_value=value,
        )


def calculate_match_awards(entries: Sequence[StatEntry]) -> list[Award]:
    """Convenience wrapper around :meth:`AwardEngine.calculate`."""
    return AwardEngine().calculate(entries)


def _first_best(candidates: Iterable[tuple[PlayerId, float]]) -> tuple[PlayerId, float] | None:
    winner: tuple[PlayerId, float] | None = None
    for player_id, value in candidates:
        if winner is None or value > winner[1]:
            winner = (player_id, value)
    return winner


class SeasonAwardEngine:
    """Pick end-of-season award winners.

    Works on every game record of the season (all players) plus the season's
    attendance records. Players are considered in the order they first
    appear, and earlier players win exact ties.
    """

    def season_mvp(self, by_player: Mapping[PlayerId, list[GameRecord]]) -> SeasonAward | None:
        winner = _first_best(
            (player_id, _mean_mvp(records))
            for player_id, records in by_player.items()
            if records
        )
        if winner is None:
            return None
        return SeasonAward(SeasonAwardType.SEASON_MVP, winner[0], round_half_up(winner[1], 1))

    def most_improved(
        self,
        records: Sequence[GameRecord],
        by_player: Mapping[PlayerId, list[GameRecord]],
    ) -> SeasonAward | None:
        """Largest rise in average MVP score from the first half to the second.

        The season splits at the date of the middle game (by date, across all
        players); games on that date belong to the first half. Each half
        needs at least two games for the player.
        """
        if not records:
            return None
        dates = sorted(as_date(r.event.start_time) for r in records)
        midpoint = dates[len(dates) // 2]

        candidates = []
        for player_id, player_records in by_player.items():
            first = [r for r in player_records if as_date(r.event.start_time) <= midpoint]
            second = [r for r in player_records if as_date(r.event.start_time) > midpoint]
            if len(first) < MOST_IMPROVED_MIN_GAMES or len(second) < MOST_IMPROVED_MIN_GAMES:
                continue
            improvement = _mean_mvp(second) - _mean_mvp(first)
            if improvement > 0:
                candidates.append((player_id, improvement))

        winner = _first_best(candidates)
        if winner is None:
            return None
        return SeasonAward(SeasonAwardType.MOST_IMPROVED, winner[0], round_half_up(winner[1], 1))

    def calculate(
        self,
        records: Sequence[GameRecord],
        attendance: Sequence[AttendanceRecord] = (),
    ) -> list[SeasonAward]:
        """All season awards.

        Args:
            records: Every player's game records for the season.
            attendance: Attendance records for every season event, any type.

        Returns:
            Zero to eight awards in category order. Percentages (attendance,
            kill %, ace rate) have one decimal; digs per set and pass rating
            have two; the practice count is an integer.
        """
        records = list(records)
        by_player: dict[PlayerId, list[GameRecord]] = {}
        for record in records:
            by_player.setdefault(record.entry.player_id, []).append(record)
        totals = {player_id: aggregate_stats(recs) for player_id, recs in by_player.items()}

        attendance_counts: dict[PlayerId, dict[str, int]] = {}
        for record in attendance:
            counts = attendance_counts.setdefault(
                record.player_id, {"total": 0, "attended": 0, "practices": 0}
            )
            counts["total"] += 1
            if record.status in ATTENDED_STATUSES:
                counts["attended"] += 1
                if record.event_type is EventType.PRACTICE:
                    counts["practices"] += 1

        if not by_player and not attendance_counts:
            return []

        awards = [self.season_mvp(by_player), self.most_improved(records, by_player)]

        attendance_winner = _first_best(
            (player_id, counts["attended"] / counts["total"])
            for player_id, counts in attendance_counts.items()
        )
        if attendance_winner is not None:
            awards.append(
                SeasonAward(
                    SeasonAwardType.BEST_ATTENDANCE,
                    attendance_winner[0],
                    round_half_up(attendance_winner[1] * 100, 1),
                )
            )

        attacker = _first_best(
            (player_id, s.kill_percentage)
            for player_id, s in totals.items()
            if s.total_attack_attempts >= SEASON_MIN_ATTACK_ATTEMPTS
        )
        if attacker is not None:
            awards.append(
                SeasonAward(
                    SeasonAwardType.TOP_ATTACKER, attacker[0], round_half_up(attacker[1] * 100, 1)
                )
            )

        server = _first_best(
            (player_id, s.total_aces / s.total_serve_attempts)
            for player_id, s in totals.items()
            if s.total_serve_attempts > 0
        )
        if server is not None:
            awards.append(
                SeasonAward(SeasonAwardType.TOP_SERVER, server[0], round_half_up(server[1] * 100, 1))
            )

        defender = _first_best(
            (player_id, s.total_digs / s.total_sets_played)
            for player_id, s in totals.items()
            if s.total_sets_played > 0
        )
        if defender is not None:
            awards.append(
                SeasonAward(SeasonAwardType.TOP_DEFENDER, defender[0], round_half_up(defender[1], 2))
            )

        passer = _first_best(
            (player_id, s.pass_rating)
            for player_id, s in totals.items()
            if s.total_pass_attempts >= SEASON_MIN_PASS_ATTEMPTS
        )
        if passer is not None:
            awards.append(
                SeasonAward(SeasonAwardType.TOP_PASSER, passer[0], round_half_up(passer[1], 2))
            )

        practices = _first_best(
            (player_id, counts["practices"])
            for player_id, counts in attendance_counts.items()
            if counts["practices"] > 0
        )
        if practices is not None:
            awards.append(
                SeasonAward(SeasonAwardType.MOST_PRACTICES, practices[0], int(practices[1]))
            )

        result = [award for award in awards if award is not None]
        logger.info("Season awards: {} of 8 categories awarded", len(result))
        return result


def _mean_mvp(records: Sequence[GameRecord]) -> float:
    return sum(mvp_score(r.entry) for r in records) / len(records)


def calculate_season_awards(
    records: Sequence[GameRecord],
    attendance: Sequence[AttendanceRecord] = (),
) -> list[SeasonAward]:
    """Convenience wrapper around :meth:`SeasonAwardEngine.calculate`."""
    return SeasonAwardEngine().calculate(records, attendance)


__all__ = [
    "AwardEngine",
    "SeasonAwardEngine",
    "calculate_match_awards",
    "calculate_season_awards",
    "mvp_score",
]
