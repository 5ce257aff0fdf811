"""Logging setup for lottery-factor, built on loguru.

Sync code logs through ``get_logger``, ``bind_repo`` and ``bind_phase`` so
console lines show the emitting module and, during a sync, which repository
and phase they belong to:

    12:00:01 | INFO     | sync [rails/rails pull_requests] - Fetching pull requests (cursor: start)

Standard library loggers (SQLAlchemy, httpx underneath githubkit) are routed
into the same sinks.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger, Record

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra} | {message}"


def _console_format(record: Record) -> str:
    """Pick the console line layout for ``record``.

    Intercepted stdlib records carry no bound name and fall back to the
    logger name loguru recorded.
    """
    extra = record["extra"]
    source = "{extra[name]}" if "name" in extra else "{name}"
    scope = ""
    if "repo" in extra:
        scope = " [{extra[repo]} {extra[phase]}]" if "phase" in extra else " [{extra[repo]}]"
    return (
        "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | "
        f"<cyan>{source}</cyan>{scope} - <level>{{message}}</level>\n{{exception}}"
    )


class InterceptHandler(logging.Handler):
    """Route standard library log records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(
    level: LogLevel = "INFO",
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    serialize: bool = False,
) -> Logger:
    """Configure the console sink and, optionally, a rotating log file.

    Args:
        level: Base log level from config
        verbose: Use DEBUG (wins over ``quiet``)
        quiet: Use WARNING so only problems reach the console
        log_file: Optional file that receives every record at DEBUG
        rotation: When to rotate the log file (e.g., "10 MB", "1 day")
        retention: How long to keep rotated files
        serialize: Write the log file as JSON lines

    Returns:
        Configured logger instance
    """
    if verbose:
        effective_level: LogLevel = "DEBUG"
    elif quiet:
        effective_level = "WARNING"
    else:
        effective_level = level

    logger.remove()
    logger.add(sys.stderr, level=effective_level, format=_console_format, colorize=True)

    if log_file:
        logger.add(
            log_file,
            level="DEBUG",
            format=_FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            compression="gz",
            serialize=serialize,
        )

    _intercept_stdlib_logging(effective_level)
    return logger


def _intercept_stdlib_logging(level: LogLevel) -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    # SQL echo only when debugging
    sql_level = logging.INFO if level in ("TRACE", "DEBUG") else logging.WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(sql_level)

    httpx_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    logging.getLogger("httpx").setLevel(httpx_level)
    logging.getLogger("httpcore").setLevel(httpx_level)


def get_logger(name: str) -> Logger:
    """Get a logger with ``name`` bound as context."""
    return logger.bind(name=name)


def bind_repo(owner: str, name: str) -> Logger:
    """Logger for sync steps that concern the whole repository."""
    return logger.bind(name="sync", repo=f"{owner}/{name}")


def bind_phase(owner: str, name: str, phase: str) -> Logger:
    """Logger for one sync phase ("pull_requests" or "commits")."""
    return logger.bind(name="sync", repo=f"{owner}/{name}", phase=phase)


def reset_logging() -> None:
    """Remove every sink (tests, and CliRunner's swapped stderr)."""
    logger.remove()
