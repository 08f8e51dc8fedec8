"""Logging configuration using Loguru.

Every log line can carry the player, event and position it concerns. Bind
them through :func:`get_logger` and they are rendered in front of the
message on the console and in the log file::

    2026-10-01 09:12:44 | WARNING  | volley_rating.ratings.batch:rate_roster:98 | [player=p7] Rating failed: ...

Example:
    >>> from volley_rating.logging import setup_logging, get_logger
    >>> setup_logging(level="DEBUG")
    >>> logger = get_logger(__name__, player_id="p7", position="libero")
    >>> logger.info("Rated {} games", 12)

Status Tags:
    >>> from volley_rating.logging import SUCCESS, FAIL, WARN
    >>> logger.warning(f"{WARN} 2 roster players have no position listed")
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from volley_rating.config import Settings

SUCCESS = "\033[92m[SUCCESS]\033[0m"
FAIL = "\033[91m[FAIL]\033[0m"
WARN = "\033[93m[WARN]\033[0m"

# Bound extras rendered into the context prefix, in display order
CONTEXT_LABELS = {"player_id": "player", "event_id": "event", "position": "position"}

LOG_FILE_PATTERN = "volley_rating_{time:YYYY-MM-DD}.log"

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<magenta>{extra[context]}</magenta><level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | "
    "{extra[context]}{message}"
)


def format_context(extra: dict[str, Any]) -> str:
    """Render bound rating ids as a ``[player=.. event=..] `` prefix.

    Returns an empty string when none of the ids are bound.
    """
    parts = [
        f"{label}={extra[key]}"
        for key, label in CONTEXT_LABELS.items()
        if extra.get(key) is not None
    ]
    return f"[{' '.join(parts)}] " if parts else ""


def _patch_context(record: Any) -> None:
    record["extra"]["context"] = format_context(record["extra"])


class InterceptHandler(logging.Handler):
    """Route stdlib logging records (pandas, typer) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(
    level: str = "INFO",
    log_dir: str | Path | None = "logs",
    rotation: str = "1 day",
    retention: str = "30 days",
    serialize: bool = True,
) -> None:
    """Configure application logging.

    Installs the rating-context patcher, a colorized stderr sink and, when
    ``log_dir`` is given, a rotating file sink. Stdlib logging is
    intercepted so both paths share the same output.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_dir: Directory for log files. ``None`` disables the file sink.
        rotation: When to rotate log files (e.g., "1 day", "100 MB").
        retention: How long to keep old log files.
        serialize: Whether to write JSON-formatted logs to file.
    """
    logger.remove()
    logger.configure(patcher=_patch_context)
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path / LOG_FILE_PATTERN,
            level=level,
            format=FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            serialize=serialize,
            enqueue=True,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


def setup_logging_from_settings(settings: Settings, verbose: bool = False) -> None:
    """Configure logging from application settings.

    Args:
        settings: Supplies ``LOG_LEVEL`` and ``LOG_DIR``.
        verbose: Force DEBUG regardless of the configured level.
    """
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_dir=settings.log_dir_obj,
    )


def get_logger(name: str, **context: Any) -> Any:
    """Get a logger bound with a module name and optional rating context.

    Args:
        name: Logger name, typically ``__name__`` of the calling module.
        **context: ``player_id``, ``event_id`` or ``position``; ``None``
            values are not bound.

    Returns:
        Loguru logger bound with the name and context.
    """
    bound = {key: value for key, value in context.items() if value is not None}
    return logger.bind(name=name, **bound)


__all__ = [
    "CONTEXT_LABELS",
    "FAIL",
    "SUCCESS",
    "WARN",
    "format_context",
    "get_logger",
    "logger",
    "setup_logging",
    "setup_logging_from_settings",
]
