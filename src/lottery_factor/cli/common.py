"""Common CLI option types and helpers.

This module centralizes reusable CLI options to reduce duplication
and consolidate noqa comments for Typer's required function call pattern.

It also provides:
- `run_async_command`: Unified async execution with error handling for CLI commands
- `validate_repo`: owner/name parsing that exits before any I/O
- `use_database`: apply a --database override to the engine
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Annotated, TypeVar

import typer
from rich.console import Console
from sqlalchemy.exc import SQLAlchemyError

from lottery_factor.github.sync import OutputFormat

# Shared console instance for CLI output
console = Console()

T = TypeVar("T")


def run_async_command(
    coro: Coroutine[object, object, T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute async code from synchronous CLI command with unified error handling.

    Uses asyncio.run() for clean event loop management. Catches exceptions,
    prints user-friendly error messages, and exits with code 1.

    Args:
        coro: Async coroutine to execute
        error_prefix: Prefix for error messages (default: "Error")

    Returns:
        Result from the coroutine

    Raises:
        typer.Exit: Re-raised from deliberate exits, or raised with code 1 on error
    """
    try:
        return asyncio.run(coro)
    except typer.Exit:
        raise
    except SQLAlchemyError as e:
        console.print(f"[red]{error_prefix}:[/red] database error: {e}")
        raise typer.Exit(1) from None
    except Exception as e:
        console.print(f"[red]{error_prefix}:[/red] {e}")
        raise typer.Exit(1) from None


# Typer requires function calls as default arguments, which triggers B008.
# Using Annotated with a centralized type alias keeps the noqa in one place.

OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
    ),
]
"""Output format option type for CLI commands.

Usage:
    def command(output_format: OutputFormatOption = OutputFormat.TEXT):
"""

RepoArgument = Annotated[
    str,
    typer.Argument(
        help="Repository in owner/name format (e.g., rails/rails)",
    ),
]
"""Required positional repository argument."""

DaysOption = Annotated[
    int | None,
    typer.Option(
        "--days",
        "-t",
        "--time-range",
        min=1,
        help="Lookback window in days (default from SYNC__DEFAULT_DAYS, 30)",
    ),
]
"""Lookback window option. None means the configured default."""

DatabaseOption = Annotated[
    str | None,
    typer.Option(
        "--database",
        "-d",
        help="SQLite file or SQLAlchemy URL (default from DATABASE_URL)",
    ),
]
"""Database override option."""


# -----------------------------------------------------------------------------
# Validation Helpers
# -----------------------------------------------------------------------------


def validate_repo(repo: str) -> tuple[str, str]:
    """Parse and validate a single repository string.

    Args:
        repo: Repository string in owner/name format

    Returns:
        Tuple of (owner, name)

    Raises:
        typer.Exit(1): If format is invalid
    """
    from lottery_factor.schemas import parse_repo_string

    try:
        return parse_repo_string(repo)
    except ValueError:
        console.print("[red]Error:[/red] Invalid repository format. Use 'owner/name'.")
        raise typer.Exit(1) from None


def database_url(value: str) -> str:
    """Turn a plain file path into an aiosqlite URL; pass URLs through."""
    if "://" in value:
        return value
    return f"sqlite+aiosqlite:///{value}"


def use_database(value: str | None) -> None:
    """Point the engine at ``value`` if one was given on the command line."""
    if value is None:
        return

    from lottery_factor.db import configure_engine

    configure_engine(database_url(value))


def resolve_days(days: int | None) -> int:
    """Explicit --days, or the configured default."""
    if days is not None:
        return days

    from lottery_factor.config import get_settings

    return get_settings().sync.default_days
