"""Result objects for sync operations.

Structured results provide consistent interfaces for logging, error
handling, and CLI output.
"""

from dataclasses import dataclass, field
from typing import Any

from .enums import SyncPhase


@dataclass
class PhaseResult:
    """Outcome of one sync phase (pull requests or commits)."""

    phase: SyncPhase
    """Which phase this result describes."""

    pages: int = 0
    """Pages fetched and committed."""

    records: int = 0
    """Rows written across all committed pages."""

    skipped: bool = False
    """True if the phase was satisfied from cache without calling GitHub."""

    error: Exception | None = None
    """Upstream failure that stopped the phase, if any."""

    @property
    def success(self) -> bool:
        """Check if the phase completed without an upstream failure."""
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "phase": self.phase.value,
            "success": self.success,
            "skipped": self.skipped,
            "pages": self.pages,
            "records": self.records,
        }
        if self.error is not None:
            result["error"] = str(self.error)
            result["error_type"] = type(self.error).__name__
        return result

    @classmethod
    def from_skipped(cls, phase: SyncPhase) -> "PhaseResult":
        """Create a result for a phase answered from cache."""
        return cls(phase=phase, skipped=True)


@dataclass
class SyncResult:
    """Outcome of a full repository sync (both phases)."""

    repository: str
    """Full repository name (owner/name)."""

    repository_id: int
    """Local identity of the repository."""

    days: int
    """Requested lookback window."""

    pull_requests: PhaseResult = field(
        default_factory=lambda: PhaseResult(SyncPhase.PULL_REQUESTS)
    )
    commits: PhaseResult = field(default_factory=lambda: PhaseResult(SyncPhase.COMMITS))

    @property
    def success(self) -> bool:
        """True only if both phases succeeded."""
        return self.pull_requests.success and self.commits.success

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "repository": self.repository,
            "repository_id": self.repository_id,
            "days": self.days,
            "success": self.success,
            "pull_requests": self.pull_requests.to_dict(),
            "commits": self.commits.to_dict(),
        }
