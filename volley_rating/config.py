"""Configuration management using Pydantic Settings.

Runtime settings for the collaborator layer (logging, data location, batch
width). Rating constants are deliberately not configurable; they live in
:mod:`volley_rating.ratings.constants`.

Example:
    >>> from volley_rating.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.max_workers)
    8
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from volley_rating.types import Position


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Environment variables take precedence over ``.env`` file values.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_dir: Directory for log files.
        data_dir: Default directory for stat, attendance and roster files.
        max_workers: Thread pool width for roster-wide rating.
        default_position: Position used for roster players with none listed.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level",
    )
    log_dir: str = Field(
        default="logs",
        alias="LOG_DIR",
        description="Directory for log files",
    )

    # Data
    data_dir: str = Field(
        default="data",
        alias="VOLLEY_DATA_DIR",
        description="Directory holding exported stat, attendance and roster files",
    )

    # Batch rating
    max_workers: int = Field(
        default=8,
        alias="RATING_MAX_WORKERS",
        ge=1,
        le=64,
        description="Concurrent workers when rating a whole roster",
    )
    default_position: Position = Field(
        default=Position.ALL_AROUND,
        alias="DEFAULT_POSITION",
        description="Weight profile for players without a listed position",
    )

    @field_validator("log_dir", "data_dir")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Ensure path strings are valid."""
        if not v or v.isspace():
            raise ValueError("Path cannot be empty or whitespace")
        return v

    @property
    def log_dir_obj(self) -> Path:
        """Return log directory as Path object."""
        return Path(self.log_dir)

    @property
    def data_dir_obj(self) -> Path:
        """Return data directory as Path object."""
        return Path(self.data_dir)

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        self.log_dir_obj.mkdir(parents=True, exist_ok=True)
        self.data_dir_obj.mkdir(parents=True, exist_ok=True)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        Settings instance loaded from environment.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (useful for testing)."""
    global _settings
    _settings = None
