"""Sync module - GitHub to database synchronization.

Services:
- FreshnessOracle: Decides whether cached PRs already cover a window
- PaginatedUpsert: Fetch → select → upsert → commit loop over one connection
- SyncOrchestrator: Runs the pull request and mainline commit phases
- CommitManager: One transaction per fetched page
"""

from .commit_manager import CommitManager
from .enums import OutputFormat, SyncPhase
from .freshness import FreshnessOracle, oldest_needed_date, utc_today
from .orchestrator import SyncOrchestrator, UpstreamClient
from .pagination import PaginatedUpsert
from .results import PhaseResult, SyncResult

__all__ = [
    # Orchestration
    "SyncOrchestrator",
    "UpstreamClient",
    # Freshness
    "FreshnessOracle",
    "oldest_needed_date",
    "utc_today",
    # Pagination
    "PaginatedUpsert",
    # Results
    "OutputFormat",
    "PhaseResult",
    "SyncPhase",
    "SyncResult",
    # Commit management
    "CommitManager",
]
