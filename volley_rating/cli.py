"""CLI entrypoint using Typer.

Prints player, team, award, leaderboard, season, form and progression
tables computed from stat, attendance and roster files. Files default to the
configured data directory (``VOLLEY_DATA_DIR``): ``stats.csv``,
``attendance.csv`` and ``roster.csv``.

Example:
    $ volley-rating --help
    $ volley-rating player p7 --position setter --as-of 2026-10-01
    $ volley-rating team --roster data/roster.csv
    $ volley-rating awards e12
    $ volley-rating leaderboard --stat kills --limit 5
    $ volley-rating season
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from volley_rating import __version__
from volley_rating.config import get_settings
from volley_rating.data import (
    entries_by_event,
    events_from_records,
    group_by_player,
    load_attendance,
    load_game_records,
    load_roster,
    parse_position,
    practice_events,
)
from volley_rating.logging import setup_logging_from_settings
from volley_rating.ratings import (
    AwardEngine,
    FormCalculator,
    PlayerRatingEngine,
    ProgressionTracker,
    RosterRater,
    SeasonAwardEngine,
    StatAggregator,
    TeamRatingAggregator,
    attendance_percent,
    stat_leaderboard,
)
from volley_rating.types import (
    SKILLS,
    LeaderboardStat,
    PlayerRating,
    Position,
    SubRatings,
    VolleyRatingError,
)

# Initialize console for rich output
console = Console()

app = typer.Typer(
    name="volley-rating",
    help="Volleyball player performance ratings",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

StatsOption = Annotated[
    Path | None,
    typer.Option("--stats", "-s", help="Stat entries file (CSV or JSON)"),
]
RosterOption = Annotated[
    Path | None,
    typer.Option("--roster", "-r", help="Roster file (CSV or JSON)"),
]
AttendanceOption = Annotated[
    Path | None,
    typer.Option("--attendance", "-a", help="Attendance file (CSV or JSON)"),
]
PositionOption = Annotated[
    str | None,
    typer.Option("--position", "-p", help="Primary position (e.g. setter, libero)"),
]
AsOfOption = Annotated[
    str | None,
    typer.Option("--as-of", help="Evaluation date for recency weights (YYYY-MM-DD)"),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]volley-rating[/bold blue] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-V",
            help="Enable verbose output",
        ),
    ] = False,
) -> None:
    """Volleyball player performance ratings.

    Rates players and teams on a 1-99 scale from per-game statistics.
    """
    setup_logging_from_settings(get_settings(), verbose=verbose)


# =============================================================================
# Helpers
# =============================================================================


def _data_file(path: Path | None, default_name: str) -> Path:
    if path is not None:
        return path
    return get_settings().data_dir_obj / default_name


def _parse_as_of(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Invalid date '{value}', expected YYYY-MM-DD") from None


def _resolve_position(value: str | None) -> Position:
    if value is None:
        return get_settings().default_position
    return parse_position(value)


def _fail(error: Exception) -> NoReturn:
    console.print(f"[red]Error: {error}[/red]")
    raise typer.Exit(1)


def _sub_ratings_table(title: str, sub_ratings: SubRatings) -> Table:
    table = Table(title=title)
    table.add_column("Skill", style="cyan")
    table.add_column("Rating", justify="right", style="green")
    for skill, value in sub_ratings.as_dict().items():
        table.add_row(skill, str(value))
    return table


def _rating_summary(rating: PlayerRating) -> str:
    status = "[yellow]provisional[/yellow]" if rating.is_provisional else "established"
    return (
        f"[bold]Overall:[/bold] {rating.overall}\n"
        f"[bold]Games:[/bold] {rating.games_played} ({status})"
    )


# =============================================================================
# Commands
# =============================================================================


@app.command("player")
def player(
    player_id: Annotated[str, typer.Argument(help="Player ID")],
    position: PositionOption = None,
    stats: StatsOption = None,
    as_of: AsOfOption = None,
) -> None:
    """Show a player's overall rating, sub-ratings and recent games."""
    as_of_date = _parse_as_of(as_of)
    try:
        pos = _resolve_position(position)
        histories = group_by_player(load_game_records(_data_file(stats, "stats.csv")))
    except VolleyRatingError as e:
        _fail(e)

    history = histories.get(player_id, [])
    engine = PlayerRatingEngine(as_of=as_of_date)
    rating = engine.rate(history, pos)

    console.print(Panel(_rating_summary(rating), title=f"Player {player_id} ({pos.value})"))
    console.print(_sub_ratings_table("Sub-ratings", rating.sub_ratings))

    if history:
        table = Table(title="Recent Games")
        table.add_column("Date", style="cyan")
        table.add_column("Opponent")
        table.add_column("Tier", justify="right")
        table.add_column("Kill %", justify="right")
        table.add_column("Serve %", justify="right")
        table.add_column("Pass", justify="right")
        table.add_column("Game Rating", justify="right", style="green")
        for line in StatAggregator().game_stat_lines(history)[:10]:
            table.add_row(
                str(line.event.start_time),
                line.event.opponent or "N/A",
                str(line.event.opponent_tier or "-"),
                f"{line.kill_percentage:.3f}",
                f"{line.serve_percentage:.3f}",
                f"{line.pass_rating:.2f}",
                str(engine.single_game_rating(line.entry, line.event.opponent_tier, pos)),
            )
        console.print(table)


@app.command("team")
def team(
    stats: StatsOption = None,
    roster: RosterOption = None,
    as_of: AsOfOption = None,
) -> None:
    """Show the team rating, player ratings, form streak and best lineup."""
    as_of_date = _parse_as_of(as_of)
    try:
        records = load_game_records(_data_file(stats, "stats.csv"))
        players = load_roster(_data_file(roster, "roster.csv"))
    except VolleyRatingError as e:
        _fail(e)

    histories = group_by_player(records)
    rater = RosterRater(PlayerRatingEngine(as_of=as_of_date))
    result = rater.rate_roster(players, histories.get)
    aggregator = TeamRatingAggregator()
    team_rating = aggregator.aggregate(
        result.ratings[p.player_id] for p in players if p.player_id in result.ratings
    )

    status = "[yellow]provisional[/yellow]" if team_rating.is_provisional else "established"
    console.print(
        Panel(
            f"[bold]Overall:[/bold] {team_rating.overall}\n"
            f"[bold]Rated players:[/bold] {team_rating.player_count} ({status})",
            title="Team Rating",
        )
    )
    console.print(_sub_ratings_table("Team Sub-ratings", team_rating.sub_ratings))

    table = Table(title="Players")
    table.add_column("Player", style="cyan")
    table.add_column("Position")
    table.add_column("Overall", justify="right", style="green")
    table.add_column("Games", justify="right")
    for p in players:
        rating = result.ratings.get(p.player_id)
        position = p.primary_position or rater.default_position
        if rating is None:
            table.add_row(p.name or p.player_id, position.value, "[red]error[/red]", "-")
        else:
            table.add_row(
                p.name or p.player_id,
                position.value,
                str(rating.overall),
                str(rating.games_played),
            )
    console.print(table)

    events = events_from_records(records)
    streak = aggregator.form_streak(events)
    if streak.results:
        results = " ".join(r.value for r in streak.results)
        console.print(f"[bold]Form:[/bold] {results} (win rate {streak.win_rate}%)")

    tiers = aggregator.performance_by_tier(events, entries_by_event(records))
    if tiers:
        tier_table = Table(title="By Opponent Tier")
        tier_table.add_column("Tier", style="cyan")
        tier_table.add_column("W-L", justify="right")
        tier_table.add_column("Win %", justify="right", style="green")
        tier_table.add_column("Kill %", justify="right")
        tier_table.add_column("Serve %", justify="right")
        for t in tiers:
            tier_table.add_row(
                f"{t.tier} {t.tier_label}",
                f"{t.wins}-{t.losses}",
                str(t.win_pct),
                f"{t.avg_kill_pct:.1f}",
                f"{t.avg_serve_pct:.1f}",
            )
        console.print(tier_table)

    lineup = aggregator.best_lineup(players, result.ratings)
    lineup_table = Table(title="Best Lineup")
    lineup_table.add_column("Slot", style="cyan")
    lineup_table.add_column("Player")
    lineup_table.add_column("Rating", justify="right", style="green")
    for slot, chosen in vars(lineup).items():
        if chosen is None:
            lineup_table.add_row(slot, "[yellow]unfilled[/yellow]", "-")
        else:
            lineup_table.add_row(slot, chosen.name or chosen.player_id, str(chosen.rating))
    console.print(lineup_table)

    if result.failures:
        console.print(f"\n[red]Failures ({len(result.failures)}):[/red]")
        for player_id, message in result.failures.items():
            console.print(f"  - {player_id}: {message}")


@app.command("awards")
def awards(
    event_id: Annotated[str, typer.Argument(help="Event ID")],
    stats: StatsOption = None,
) -> None:
    """Show post-match awards for one event."""
    try:
        records = load_game_records(_data_file(stats, "stats.csv"))
    except VolleyRatingError as e:
        _fail(e)

    entries = entries_by_event(records).get(event_id, [])
    if not entries:
        console.print(f"[yellow]No stat entries for event {event_id}[/yellow]")
        return

    table = Table(title=f"Awards for {event_id}")
    table.add_column("Award", style="cyan")
    table.add_column("Player")
    table.add_column("Value", justify="right", style="green")
    for award in AwardEngine().calculate(entries):
        table.add_row(award.award_type.value, award.player_id, str(award.award_value))
    console.print(table)


@app.command("form")
def form(
    player_id: Annotated[str, typer.Argument(help="Player ID")],
    position: PositionOption = None,
    stats: StatsOption = None,
    attendance: AttendanceOption = None,
) -> None:
    """Show attendance-based form, attendance streaks and selection indicator."""
    try:
        pos = _resolve_position(position)
        attendance_records = load_attendance(_data_file(attendance, "attendance.csv"))
        histories = group_by_player(load_game_records(_data_file(stats, "stats.csv")))
    except VolleyRatingError as e:
        _fail(e)

    own = [r for r in attendance_records if r.player_id == player_id]
    calculator = FormCalculator()
    player_form = calculator.calculate(own, practice_events(attendance_records))
    attendance_stats = calculator.attendance_stats(own)
    selection = calculator.selection_indicator(
        histories.get(player_id, []), pos, attendance_percent(attendance_stats)
    )

    table = Table(title=f"Form for {player_id}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_row(
        "Practices attended",
        f"{player_form.practices_attended}/{player_form.practices_total}",
    )
    table.add_row("Form rating", str(player_form.form_rating))
    table.add_row("Attendance", f"{selection.attendance_percent}%")
    table.add_row("Current streak", str(attendance_stats.current_streak))
    table.add_row("Longest streak", str(attendance_stats.longest_streak))
    table.add_row(selection.key_stat.label.capitalize(), str(selection.key_stat.value))
    table.add_row("Selection form", selection.form.value)
    console.print(table)


@app.command("progression")
def progression(
    player_id: Annotated[str, typer.Argument(help="Player ID")],
    position: PositionOption = None,
    stats: StatsOption = None,
    as_of: AsOfOption = None,
) -> None:
    """Show month-by-month skill progression and the overall rating trend."""
    as_of_date = _parse_as_of(as_of)
    try:
        pos = _resolve_position(position)
        histories = group_by_player(load_game_records(_data_file(stats, "stats.csv")))
    except VolleyRatingError as e:
        _fail(e)

    history = histories.get(player_id, [])
    if not history:
        console.print(f"[yellow]No games recorded for player {player_id}[/yellow]")
        return

    tracker = ProgressionTracker(PlayerRatingEngine(as_of=as_of_date))
    levels: dict[str, dict[str, int]] = {}
    for point in tracker.monthly(history, pos):
        levels.setdefault(point.month, {})[point.skill] = point.level

    table = Table(title=f"Skill Progression for {player_id}")
    table.add_column("Month", style="cyan")
    for skill in SKILLS:
        table.add_column(skill.capitalize(), justify="right")
    for month, skills in levels.items():
        table.add_row(month, *(str(skills[skill]) for skill in SKILLS))
    console.print(table)

    series = tracker.overall_series(history, pos)
    slope = tracker.trend(series)
    color = "green" if slope > 0 else "red" if slope < 0 else "white"
    console.print(
        f"[bold]Overall:[/bold] {series[-1]}  "
        f"[bold]Trend:[/bold] [{color}]{slope:+.2f} per game[/{color}]"
    )


@app.command("leaderboard")
def leaderboard(
    stat: Annotated[
        str | None,
        typer.Option(
            "--stat",
            help="Rank by a stat: kills, aces, digs, blocks, pass_rating, kill_pct, serve_pct",
        ),
    ] = None,
    limit: Annotated[int, typer.Option("--limit", "-n", min=1, help="Rows to show")] = 10,
    stats: StatsOption = None,
    roster: RosterOption = None,
    as_of: AsOfOption = None,
) -> None:
    """Rank the roster by overall rating, or by one statistic with --stat."""
    as_of_date = _parse_as_of(as_of)
    try:
        leaderboard_stat = LeaderboardStat(stat) if stat is not None else None
    except ValueError:
        raise typer.BadParameter(f"Unknown stat '{stat}'", param_hint="--stat") from None
    try:
        histories = group_by_player(load_game_records(_data_file(stats, "stats.csv")))
        players = load_roster(_data_file(roster, "roster.csv"))
    except VolleyRatingError as e:
        _fail(e)

    rater = RosterRater(PlayerRatingEngine(as_of=as_of_date))
    rankings = rater.rankings(players, histories.get)

    if leaderboard_stat is None:
        table = Table(title="Player Rankings")
        table.add_column("#", justify="right")
        table.add_column("Player", style="cyan")
        table.add_column("Position")
        table.add_column("Overall", justify="right", style="green")
        table.add_column("Games", justify="right")
        for rank, entry in enumerate(rankings[:limit], start=1):
            table.add_row(
                str(rank),
                entry.name or entry.player_id,
                entry.position.value,
                str(entry.rating.overall),
                str(entry.rating.games_played),
            )
        console.print(table)
        return

    table = Table(title=f"Leaderboard: {leaderboard_stat.value}")
    table.add_column("#", justify="right")
    table.add_column("Player", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_column("Games", justify="right")
    for rank, row in enumerate(stat_leaderboard(rankings, leaderboard_stat, limit), start=1):
        table.add_row(
            str(rank), row.name or row.player_id, f"{row.value:.1f}", str(row.games_played)
        )
    console.print(table)


@app.command("season")
def season(
    stats: StatsOption = None,
    attendance: AttendanceOption = None,
) -> None:
    """Show end-of-season awards from every game and attendance record."""
    try:
        records = load_game_records(_data_file(stats, "stats.csv"))
        attendance_records = load_attendance(_data_file(attendance, "attendance.csv"))
    except VolleyRatingError as e:
        _fail(e)

    season_awards = SeasonAwardEngine().calculate(records, attendance_records)
    if not season_awards:
        console.print("[yellow]No season data to award[/yellow]")
        return

    table = Table(title="Season Awards")
    table.add_column("Award", style="cyan")
    table.add_column("Player")
    table.add_column("Value", justify="right", style="green")
    for award in season_awards:
        table.add_row(award.award_type.value, award.player_id, str(award.award_value))
    console.print(table)


if __name__ == "__main__":
    app()
