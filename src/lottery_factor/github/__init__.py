"""GitHub API client module.

This module provides:
- GitHubClient: Async GraphQL client returning one page per call
- Exceptions: GitHubClientError and its subclasses
- Sync: SyncOrchestrator, FreshnessOracle, PaginatedUpsert and results
"""

from .client import GitHubClient
from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubGraphQLError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubTransportError,
)
from .sync import (
    FreshnessOracle,
    OutputFormat,
    PhaseResult,
    SyncOrchestrator,
    SyncPhase,
    SyncResult,
)

__all__ = [
    # Client
    "GitHubClient",
    # Exceptions
    "GitHubAuthenticationError",
    "GitHubClientError",
    "GitHubGraphQLError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    "GitHubTransportError",
    # Sync
    "FreshnessOracle",
    "OutputFormat",
    "PhaseResult",
    "SyncOrchestrator",
    "SyncPhase",
    "SyncResult",
]
