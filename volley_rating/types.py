"""Type definitions for the volleyball rating engine.

Value objects flowing through the engine are frozen dataclasses: they carry no
behavior and are safe to serialize for display or storage by the caller.

Example:
    >>> from volley_rating.types import StatEntry, EventContext, GameRecord
    >>> entry = StatEntry(player_id="p1", event_id="e1", kills=8, attack_attempts=20)
    >>> record = GameRecord(entry, EventContext(start_time=date(2026, 9, 1)))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

# =============================================================================
# Type Aliases
# =============================================================================

PlayerId = str
EventId = str
Month = str  # "YYYY-MM"


# =============================================================================
# Enumerations
# =============================================================================


class Position(Enum):
    """Primary playing position; selects the overall-rating weight profile."""

    SETTER = "setter"
    OUTSIDE_HITTER = "outside_hitter"
    MIDDLE_BLOCKER = "middle_blocker"
    OPPOSITE = "opposite"
    LIBERO = "libero"
    DEFENSIVE_SPECIALIST = "defensive_specialist"
    ALL_AROUND = "all_around"


class AwardType(Enum):
    """Post-match award category."""

    MVP = "mvp"
    TOP_ATTACKER = "top_attacker"
    TOP_SERVER = "top_server"
    TOP_DEFENDER = "top_defender"
    TOP_PASSER = "top_passer"


class AttendanceStatus(Enum):
    """Attendance status recorded for a player at an event."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    EXCUSED = "excused"
    NOT_SELECTED = "not_selected"


class EventType(Enum):
    """Kind of team event."""

    PRACTICE = "practice"
    GAME = "game"
    TOURNAMENT = "tournament"
    MEETING = "meeting"
    OTHER = "other"


class MatchResult(Enum):
    """Match outcome from the team's point of view."""

    WIN = "W"
    LOSS = "L"
    DRAW = "D"


class FormIndicator(Enum):
    """Coarse recent-form label used for selection decisions."""

    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"


class SeasonAwardType(Enum):
    """End-of-season award category."""

    SEASON_MVP = "season_mvp"
    MOST_IMPROVED = "most_improved"
    BEST_ATTENDANCE = "best_attendance"
    TOP_ATTACKER = "top_attacker"
    TOP_SERVER = "top_server"
    TOP_DEFENDER = "top_defender"
    TOP_PASSER = "top_passer"
    MOST_PRACTICES = "most_practices"


class LeaderboardStat(Enum):
    """Statistic a roster leaderboard is sorted by."""

    KILLS = "kills"
    ACES = "aces"
    DIGS = "digs"
    BLOCKS = "blocks"
    PASS_RATING = "pass_rating"
    KILL_PCT = "kill_pct"
    SERVE_PCT = "serve_pct"


SKILLS: tuple[str, ...] = (
    "serve",
    "receive",
    "set",
    "block",
    "attack",
    "dig",
    "mental",
    "physique",
)


# =============================================================================
# Inputs
# =============================================================================


@dataclass(frozen=True)
class StatEntry:
    """One player's raw counting stats for one event."""

    player_id: PlayerId
    event_id: EventId
    kills: int = 0
    attack_errors: int = 0
    attack_attempts: int = 0
    aces: int = 0
    service_errors: int = 0
    serve_attempts: int = 0
    digs: int = 0
    block_solos: int = 0
    block_assists: int = 0
    block_touches: int = 0
    pass_attempts: int = 0
    pass_sum: int = 0
    set_attempts: int = 0
    set_sum: int = 0
    setting_errors: int = 0
    ball_handling_errors: int = 0
    sets_played: int = 0
    rotations_played: int = 0
    rotation: int | None = None


@dataclass(frozen=True)
class EventContext:
    """Event details needed to weight and cap a game.

    Attributes:
        start_time: Event start date (a ``datetime`` is accepted too).
        opponent_tier: Opponent strength 1-9; ``None`` means tier 5.
        event_id: Event identifier, when known.
        title: Event title for display.
        opponent: Opponent name for display.
        sets_won: Sets won by the team, when the result was recorded.
        sets_lost: Sets lost by the team, when the result was recorded.
    """

    start_time: date
    opponent_tier: int | None = None
    event_id: EventId | None = None
    title: str | None = None
    opponent: str | None = None
    sets_won: int | None = None
    sets_lost: int | None = None


@dataclass(frozen=True)
class GameRecord:
    """A stat entry paired with the context of the event it was recorded at."""

    entry: StatEntry
    event: EventContext


@dataclass(frozen=True)
class AttendanceRecord:
    """A player's attendance at one event."""

    player_id: PlayerId
    event_id: EventId
    event_type: EventType
    start_time: date
    status: AttendanceStatus


@dataclass(frozen=True)
class PracticeEvent:
    """A scheduled practice, used to define the form window."""

    event_id: EventId
    start_time: date


@dataclass(frozen=True)
class RosterPlayer:
    """An active roster member.

    ``positions`` is ordered; the first listed position is the primary one.
    """

    player_id: PlayerId
    name: str = ""
    positions: tuple[Position, ...] = ()
    jersey_number: int | None = None

    @property
    def primary_position(self) -> Position | None:
        """First listed position, if any."""
        return self.positions[0] if self.positions else None


# =============================================================================
# Outputs
# =============================================================================


@dataclass(frozen=True)
class AggregatedStats:
    """Cumulative totals and rate statistics over a set of games."""

    games_played: int = 0
    total_kills: int = 0
    total_attack_attempts: int = 0
    total_attack_errors: int = 0
    total_aces: int = 0
    total_service_errors: int = 0
    total_serve_attempts: int = 0
    total_digs: int = 0
    total_block_solos: int = 0
    total_block_assists: int = 0
    total_block_touches: int = 0
    total_pass_attempts: int = 0
    total_pass_sum: int = 0
    total_set_attempts: int = 0
    total_set_sum: int = 0
    total_setting_errors: int = 0
    total_ball_handling_errors: int = 0
    total_sets_played: int = 0
    total_rotations_played: int = 0
    kill_percentage: float = 0.0
    serve_percentage: float = 0.0
    pass_rating: float = 0.0
    set_rating: float = 0.0
    error_rate: float = 0.0
    total_blocks: float = 0.0
    kills_per_game: float = 0.0
    aces_per_game: float = 0.0
    digs_per_game: float = 0.0
    blocks_per_game: float = 0.0


@dataclass(frozen=True)
class SubRatings:
    """Eight 1-99 skill scores."""

    serve: int
    receive: int
    set: int
    block: int
    attack: int
    dig: int
    mental: int
    physique: int

    def as_dict(self) -> dict[str, int]:
        """Return the ratings keyed by skill name, in canonical order."""
        return {skill: getattr(self, skill) for skill in SKILLS}


@dataclass(frozen=True)
class PlayerRating:
    """Overall and per-skill rating for one player."""

    overall: int
    sub_ratings: SubRatings
    aggregated_stats: AggregatedStats
    is_provisional: bool
    games_played: int


@dataclass(frozen=True)
class TeamRating:
    """Average of valid player ratings across a roster."""

    overall: int
    sub_ratings: SubRatings
    player_count: int
    is_provisional: bool


@dataclass(frozen=True)
class PlayerForm:
    """Attendance-based form over the most recent practices."""

    practices_attended: int
    practices_total: int
    form_rating: int


@dataclass(frozen=True)
class Award:
    """A post-match award."""

    event_id: EventId
    award_type: AwardType
    player_id: PlayerId
    award_value: float


@dataclass(frozen=True)
class GameStatLine:
    """Single-game rates alongside the event they were recorded at."""

    entry: StatEntry
    event: EventContext
    kill_percentage: float
    serve_percentage: float
    pass_rating: float
    set_rating: float
    total_blocks: float


@dataclass(frozen=True)
class RotationStats:
    """Performance while starting in one rotation."""

    rotation: int
    games_in_rotation: int
    kill_percentage: float
    pass_rating: float
    digs: int
    is_below_average: bool


@dataclass(frozen=True)
class SkillProgressionPoint:
    """Displayed level of one skill at the end of a month."""

    month: Month
    skill: str
    level: int


@dataclass(frozen=True)
class AttendanceStats:
    """Attendance counts and streaks for one player."""

    total_events: int = 0
    attended: int = 0
    late: int = 0
    absent: int = 0
    excused: int = 0
    not_selected: int = 0
    attendance_rate: float = 0.0
    current_streak: int = 0
    longest_streak: int = 0


@dataclass(frozen=True)
class KeyStat:
    """Position-specific headline statistic."""

    label: str
    value: float


@dataclass(frozen=True)
class SelectionStats:
    """Inputs to a match-roster selection decision."""

    attendance_percent: int
    key_stat: KeyStat
    form: FormIndicator


@dataclass(frozen=True)
class TeamGameStat:
    """Team totals for one match."""

    event_id: EventId | None
    title: str | None
    start_time: date
    opponent: str | None
    opponent_tier: int | None
    result: MatchResult
    sets_won: int
    sets_lost: int
    kill_percentage: float
    serve_percentage: float
    pass_rating: float


@dataclass(frozen=True)
class FormStreak:
    """Last decided results, most recent first, with win rate percent."""

    results: tuple[MatchResult, ...] = ()
    win_rate: int = 0


@dataclass(frozen=True)
class LineupSlot:
    """A player chosen for one lineup slot."""

    player_id: PlayerId
    name: str
    position: Position
    rating: int
    jersey_number: int | None = None


@dataclass(frozen=True)
class BestLineup:
    """Strongest starting lineup; slots stay ``None`` without a candidate."""

    setter: LineupSlot | None = None
    outside_hitter_1: LineupSlot | None = None
    outside_hitter_2: LineupSlot | None = None
    middle_blocker_1: LineupSlot | None = None
    middle_blocker_2: LineupSlot | None = None
    opposite: LineupSlot | None = None
    libero: LineupSlot | None = None


@dataclass
class RosterRatings:
    """Outcome of rating a whole roster.

    Attributes:
        ratings: Successful ratings keyed by player.
        failures: Error message keyed by player for ratings that raised.
    """

    ratings: dict[PlayerId, PlayerRating] = field(default_factory=dict)
    failures: dict[PlayerId, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PlayerRanking:
    """A roster player with their rating, for sorted rankings."""

    player_id: PlayerId
    name: str
    position: Position
    rating: PlayerRating
    jersey_number: int | None = None


@dataclass(frozen=True)
class LeaderboardEntry:
    """One row of a stat leaderboard; ``value`` is rounded to one decimal."""

    player_id: PlayerId
    name: str
    value: float
    games_played: int


@dataclass(frozen=True)
class SeasonAward:
    """An end-of-season award."""

    award_type: SeasonAwardType
    player_id: PlayerId
    award_value: float


@dataclass(frozen=True)
class OpponentTierStats:
    """Team results and average efficiency against one opponent tier.

    Attributes:
        tier: Opponent tier (1-9).
        tier_label: Display name of the tier.
        wins: Matches won (more sets won than lost).
        losses: Every other scored match.
        win_pct: Wins as a rounded percentage.
        avg_kill_pct: Mean per-match team kill % (percent, one decimal).
        avg_serve_pct: Mean per-match team serve % (percent, one decimal).
        games_played: Scored matches against the tier.
    """

    tier: int
    tier_label: str
    wins: int
    losses: int
    win_pct: int
    avg_kill_pct: float
    avg_serve_pct: float
    games_played: int


# =============================================================================
# Exceptions
# =============================================================================


class VolleyRatingError(Exception):
    """Base exception for rating errors."""


class InvalidPositionError(VolleyRatingError, ValueError):
    """A position identifier does not name one of the seven positions."""


class DataLoadError(VolleyRatingError):
    """Input data could not be read."""


class InvalidRecordError(DataLoadError):
    """A row could not be converted into a value object."""
