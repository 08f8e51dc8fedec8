"""Attendance-based form and selection indicators.

Form is independent of game stats: it measures how many of the last ten
practices a player attended (present or late), saturating at eight:

    form_rating = round(min(attended, 8) / 8 * 99), clamped to [1, 99]

A player with no practices in the window gets form 1.

Example:
    >>> calculator = FormCalculator()
    >>> form = calculator.calculate(attendance_records)
    >>> print(f"{form.practices_attended}/{form.practices_total} -> {form.form_rating}")
"""

from __future__ import annotations

from typing import Iterable, Sequence

from volley_rating.logging import get_logger
from volley_rating.ratings.aggregation import StatAggregator
from volley_rating.ratings.constants import (
    FORM_ATTENDANCE_FOR_MAX,
    FORM_WINDOW,
    MAX_RATING,
    MIN_RATING,
    SELECTION_RECENT_GAMES,
)
from volley_rating.ratings.estimators import round_half_up, safe_rate, to_rating
from volley_rating.types import (
    AttendanceRecord,
    AttendanceStats,
    AttendanceStatus,
    EventType,
    FormIndicator,
    GameRecord,
    KeyStat,
    PlayerForm,
    Position,
    PracticeEvent,
    SelectionStats,
)

logger = get_logger(__name__)

ATTENDED_STATUSES: frozenset[AttendanceStatus] = frozenset(
    {AttendanceStatus.PRESENT, AttendanceStatus.LATE}
)

HITTING_POSITIONS: frozenset[Position] = frozenset(
    {Position.OUTSIDE_HITTER, Position.OPPOSITE, Position.MIDDLE_BLOCKER}
)
DEFENSIVE_POSITIONS: frozenset[Position] = frozenset(
    {Position.LIBERO, Position.DEFENSIVE_SPECIALIST}
)


def _grade(value: float, good_above: float, average_from: float) -> FormIndicator:
    if value > good_above:
        return FormIndicator.GOOD
    if value >= average_from:
        return FormIndicator.AVERAGE
    return FormIndicator.POOR


class FormCalculator:
    """Short-term form from practice attendance.

    Attributes:
        window: Number of most recent practices considered.
        attendance_for_max: Attended practices that already earn 99.
    """

    def __init__(
        self,
        window: int = FORM_WINDOW,
        attendance_for_max: int = FORM_ATTENDANCE_FOR_MAX,
    ) -> None:
        self.window = window
        self.attendance_for_max = attendance_for_max

    def form_rating(self, attended: int, total: int) -> int:
        """Map attended-of-total practices onto the 1-99 scale."""
        if total == 0:
            return MIN_RATING
        capped = min(attended, self.attendance_for_max)
        return to_rating(capped / self.attendance_for_max * MAX_RATING)

    def calculate(
        self,
        records: Iterable[AttendanceRecord],
        practice_events: Iterable[PracticeEvent] | None = None,
    ) -> PlayerForm:
        """Calculate a player's form.

        The window is the ``window`` most recent practices. When
        ``practice_events`` is given it defines the window, so practices the
        player has no record for count as missed; otherwise the window is
        taken from the player's own practice-type records.

        Args:
            records: The player's attendance records (any event type).
            practice_events: The team's practices, when known.

        Returns:
            PlayerForm for the window.
        """
        practice_records = [r for r in records if r.event_type is EventType.PRACTICE]

        if practice_events is not None:
            ordered = sorted(practice_events, key=lambda e: e.start_time, reverse=True)
            window_ids = {event.event_id for event in ordered[: self.window]}
            total = len(window_ids)
            attended = len(
                {
                    r.event_id
                    for r in practice_records
                    if r.event_id in window_ids and r.status in ATTENDED_STATUSES
                }
            )
        else:
            # First record per event wins
            by_event: dict[str, AttendanceRecord] = {}
            for record in practice_records:
                by_event.setdefault(record.event_id, record)
            ordered_records = sorted(by_event.values(), key=lambda r: r.start_time, reverse=True)
            window_records = ordered_records[: self.window]
            total = len(window_records)
            attended = sum(1 for r in window_records if r.status in ATTENDED_STATUSES)

        rating = self.form_rating(attended, total)
        logger.debug("Form {}/{} practices -> {}", attended, total, rating)
        return PlayerForm(practices_attended=attended, practices_total=total, form_rating=rating)

    def attendance_stats(self, records: Sequence[AttendanceRecord]) -> AttendanceStats:
        """Count attendance by status and measure attendance streaks.

        Streaks run over events in chronological order. Present and late
        extend a streak, absent breaks it, excused and not-selected leave it
        untouched.
        """
        if not records:
            return AttendanceStats()

        counts = {status: 0 for status in AttendanceStatus}
        for record in records:
            counts[record.status] += 1

        current = 0
        longest = 0
        for record in sorted(records, key=lambda r: r.start_time):
            if record.status in ATTENDED_STATUSES:
                current += 1
                longest = max(longest, current)
            elif record.status is AttendanceStatus.ABSENT:
                current = 0

        total = len(records)
        return AttendanceStats(
            total_events=total,
            attended=counts[AttendanceStatus.PRESENT],
            late=counts[AttendanceStatus.LATE],
            absent=counts[AttendanceStatus.ABSENT],
            excused=counts[AttendanceStatus.EXCUSED],
            not_selected=counts[AttendanceStatus.NOT_SELECTED],
            attendance_rate=safe_rate(counts[AttendanceStatus.PRESENT], total),
            current_streak=current,
            longest_streak=longest,
        )

    def selection_indicator(
        self,
        history: Sequence[GameRecord],
        position: Position,
        attendance_percent: int,
    ) -> SelectionStats:
        """Position-specific key stat and recent form label.

        Uses the player's three most recent games. Stat-based positions with
        no games are rated average; all-around players are judged on
        attendance instead.

        Args:
            history: The player's game records, in any order.
            position: Primary position.
            attendance_percent: Attendance rate as a whole percentage.

        Returns:
            SelectionStats for the roster screen.
        """
        recent = sorted(history, key=lambda r: r.event.start_time, reverse=True)
        recent = recent[:SELECTION_RECENT_GAMES]
        stats = StatAggregator().aggregate(recent)
        has_games = bool(recent)

        if position in HITTING_POSITIONS:
            if position is Position.MIDDLE_BLOCKER:
                key = KeyStat("blocks", stats.total_block_solos + stats.total_block_assists)
            else:
                key = KeyStat("kills", stats.total_kills)
            form = _grade(stats.kill_percentage, 0.25, 0.15) if has_games else FormIndicator.AVERAGE
        elif position is Position.SETTER:
            key = KeyStat("assists", stats.total_set_sum)
            ratio = stats.total_set_sum / (stats.total_setting_errors or 1)
            form = _grade(ratio, 10, 5) if has_games else FormIndicator.AVERAGE
        elif position in DEFENSIVE_POSITIONS:
            key = KeyStat("digs", stats.total_digs)
            form = _grade(stats.digs_per_game, 10, 5) if has_games else FormIndicator.AVERAGE
        else:
            key = KeyStat("kills", stats.total_kills)
            if attendance_percent >= 80:
                form = FormIndicator.GOOD
            elif attendance_percent >= 50:
                form = FormIndicator.AVERAGE
            else:
                form = FormIndicator.POOR

        return SelectionStats(attendance_percent=attendance_percent, key_stat=key, form=form)


def attendance_percent(stats: AttendanceStats) -> int:
    """Attendance rate as a whole percentage."""
    return int(round_half_up(stats.attendance_rate * 100))


__all__ = [
    "ATTENDED_STATUSES",
    "FormCalculator",
    "attendance_percent",
]
