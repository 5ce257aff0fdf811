"""Enums for sync operations."""

from enum import Enum


class SyncPhase(str, Enum):
    """The two independently paginated halves of a repository sync."""

    PULL_REQUESTS = "pull_requests"
    """Merged pull requests, early exit on the first out-of-window page."""

    COMMITS = "commits"
    """Default branch history, bounded server-side by a since date."""

    @property
    def label(self) -> str:
        """Human-readable name used in log lines."""
        return "pull requests" if self is SyncPhase.PULL_REQUESTS else "commits"


class OutputFormat(str, Enum):
    """Output format for CLI commands."""

    TEXT = "text"
    """Human-readable text output."""

    JSON = "json"
    """Machine-readable JSON output."""
