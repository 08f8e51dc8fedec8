"""Tests for CLI module."""
from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from volley_rating.cli import app
from volley_rating.config import Settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_settings(test_settings: Settings) -> Settings:
    """Keep CLI log files and default data paths under tmp_path."""
    return test_settings


class TestMainApp:
    """Tests for main CLI app."""

    def test_help_shows_all_commands(self) -> None:
        """Help should list all commands."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("player", "team", "awards", "form", "progression", "leaderboard", "season"):
            assert command in result.stdout

    def test_version_flag(self) -> None:
        """--version should show version and exit."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.stdout

    def test_short_version_flag(self) -> None:
        """-v should show version and exit."""
        result = runner.invoke(app, ["-v"])

        assert result.exit_code == 0
        assert "0.1.0" in result.stdout

    def test_verbose_flag(self) -> None:
        """--verbose should enable verbose mode."""
        result = runner.invoke(app, ["--verbose", "player", "--help"])

        assert result.exit_code == 0

    def test_short_verbose_flag(self) -> None:
        """-V should enable verbose mode."""
        result = runner.invoke(app, ["-V", "team", "--help"])

        assert result.exit_code == 0


class TestPlayerCommand:
    """Tests for player command."""

    def test_player_rating(self, data_files: dict[str, Path]) -> None:
        """Player command shows overall, sub-ratings and recent games."""
        result = runner.invoke(
            app,
            ["player", "p1", "--position", "outside_hitter", "--stats",
             str(data_files["stats"]), "--as-of", "2026-10-01"],
        )

        assert result.exit_code == 0
        assert "Overall" in result.stdout
        assert "established" in result.stdout
        assert "Sub-ratings" in result.stdout
        assert "Recent Games" in result.stdout

    def test_unknown_player_is_baseline(self, data_files: dict[str, Path]) -> None:
        """A player with no games gets a provisional baseline rating."""
        result = runner.invoke(app, ["player", "zz", "--stats", str(data_files["stats"])])

        assert result.exit_code == 0
        assert "provisional" in result.stdout
        assert "Recent Games" not in result.stdout

    def test_default_data_dir(self, data_files: dict[str, Path]) -> None:
        """Files default to the configured data directory."""
        result = runner.invoke(app, ["player", "p2", "-p", "setter"])

        assert result.exit_code == 0
        assert "Recent Games" in result.stdout

    def test_invalid_position(self, data_files: dict[str, Path]) -> None:
        """Unknown positions fail with exit code 1."""
        result = runner.invoke(
            app, ["player", "p1", "-p", "goalkeeper", "-s", str(data_files["stats"])]
        )

        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing stats file fails with exit code 1."""
        result = runner.invoke(app, ["player", "p1", "-s", str(tmp_path / "none.csv")])

        assert result.exit_code == 1
        assert "not found" in result.stdout

    def test_invalid_as_of(self, data_files: dict[str, Path]) -> None:
        """A malformed date is a usage error."""
        result = runner.invoke(
            app, ["player", "p1", "-s", str(data_files["stats"]), "--as-of", "01/10/2026"]
        )

        assert result.exit_code != 0


class TestTeamCommand:
    """Tests for team command."""

    def test_team_rating(self, data_files: dict[str, Path]) -> None:
        """Team command shows rating, players, form and lineup."""
        result = runner.invoke(
            app,
            ["team", "-s", str(data_files["stats"]), "-r", str(data_files["roster"]),
             "--as-of", "2026-10-01"],
        )

        assert result.exit_code == 0
        assert "Team Rating" in result.stdout
        assert "established" in result.stdout
        assert "Ana" in result.stdout
        assert "W L W" in result.stdout
        assert "67%" in result.stdout
        assert "Best Lineup" in result.stdout
        assert "By Opponent Tier" in result.stdout
        assert "4 Intermediate" in result.stdout
        assert "Failures" not in result.stdout

    def test_missing_roster(self, data_files: dict[str, Path], tmp_path: Path) -> None:
        """A missing roster file fails with exit code 1."""
        result = runner.invoke(
            app, ["team", "-s", str(data_files["stats"]), "-r", str(tmp_path / "x.csv")]
        )

        assert result.exit_code == 1


class TestAwardsCommand:
    """Tests for awards command."""

    def test_awards(self, data_files: dict[str, Path]) -> None:
        """Awards table lists every category with a qualifier."""
        result = runner.invoke(app, ["awards", "e1", "-s", str(data_files["stats"])])

        assert result.exit_code == 0
        assert "mvp" in result.stdout
        assert "top_attacker" in result.stdout
        assert "top_passer" in result.stdout

    def test_unknown_event(self, data_files: dict[str, Path]) -> None:
        """An event without entries prints a notice."""
        result = runner.invoke(app, ["awards", "e99", "-s", str(data_files["stats"])])

        assert result.exit_code == 0
        assert "No stat entries for event e99" in result.stdout


class TestFormCommand:
    """Tests for form command."""

    def test_form(self, data_files: dict[str, Path]) -> None:
        """Form command shows practices attended and selection form."""
        result = runner.invoke(
            app,
            ["form", "p1", "-p", "outside_hitter", "-s", str(data_files["stats"]),
             "-a", str(data_files["attendance"])],
        )

        assert result.exit_code == 0
        assert "Form for p1" in result.stdout
        assert "4/6" in result.stdout
        assert "Kills" in result.stdout

    def test_bad_attendance_file(self, data_files: dict[str, Path], tmp_path: Path) -> None:
        """A malformed attendance file fails with exit code 1."""
        path = tmp_path / "attendance.csv"
        path.write_text("player_id,event_id\np1,pr1\n")

        result = runner.invoke(
            app, ["form", "p1", "-s", str(data_files["stats"]), "-a", str(path)]
        )

        assert result.exit_code == 1


class TestProgressionCommand:
    """Tests for progression command."""

    def test_progression(self, data_files: dict[str, Path]) -> None:
        """Progression shows monthly levels and a trend."""
        result = runner.invoke(
            app,
            ["progression", "p1", "-s", str(data_files["stats"]), "--as-of", "2026-10-01"],
        )

        assert result.exit_code == 0
        assert "Progression" in result.stdout
        assert "Trend:" in result.stdout

    def test_no_games(self, data_files: dict[str, Path]) -> None:
        """A player with no games prints a notice."""
        result = runner.invoke(app, ["progression", "p4", "-s", str(data_files["stats"])])

        assert result.exit_code == 0
        assert "No games recorded for player p4" in result.stdout


class TestLeaderboardCommand:
    """Tests for leaderboard command."""

    def test_rankings(self, data_files: dict[str, Path]) -> None:
        """Without --stat the roster is ranked by overall."""
        result = runner.invoke(
            app,
            ["leaderboard", "-s", str(data_files["stats"]), "-r", str(data_files["roster"]),
             "--as-of", "2026-10-01"],
        )

        assert result.exit_code == 0
        assert "Player Rankings" in result.stdout
        for name in ("Ana", "Bea", "Cleo", "Dee"):
            assert name in result.stdout

    def test_stat_leaderboard(self, data_files: dict[str, Path]) -> None:
        """--stat kills ranks by kills per game."""
        result = runner.invoke(
            app,
            ["leaderboard", "--stat", "kills", "-n", "2", "-s", str(data_files["stats"]),
             "-r", str(data_files["roster"])],
        )

        assert result.exit_code == 0
        assert "Leaderboard: kills" in result.stdout
        assert "10.0" in result.stdout
        assert "Cleo" not in result.stdout

    def test_unknown_stat(self, data_files: dict[str, Path]) -> None:
        """An unknown stat is a usage error."""
        result = runner.invoke(
            app, ["leaderboard", "--stat", "spikes", "-s", str(data_files["stats"])]
        )

        assert result.exit_code != 0


class TestSeasonCommand:
    """Tests for season command."""

    def test_season_awards(self, data_files: dict[str, Path]) -> None:
        """Season awards include the MVP and attendance categories."""
        result = runner.invoke(
            app,
            ["season", "-s", str(data_files["stats"]), "-a", str(data_files["attendance"])],
        )

        assert result.exit_code == 0
        assert "Season Awards" in result.stdout
        assert "season_mvp" in result.stdout
        assert "best_attendance" in result.stdout
        assert "66.7" in result.stdout

    def test_missing_stats(self, tmp_path: Path) -> None:
        """A missing stats file fails with exit code 1."""
        result = runner.invoke(app, ["season", "-s", str(tmp_path / "none.csv")])

        assert result.exit_code == 1
