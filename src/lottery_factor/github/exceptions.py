"""GitHub client exceptions.

Every upstream failure surfaces as a ``GitHubClientError``. The sync
engine treats all of them alike: the current phase stops and reports
failure, nothing is retried.
"""

from datetime import datetime


class GitHubClientError(Exception):
    """Base exception for GitHub client errors."""

    pass


class GitHubAuthenticationError(GitHubClientError):
    """Raised when no token is configured or GitHub rejects it (401)."""

    pass


class GitHubRateLimitError(GitHubClientError):
    """Raised when rate limit is exceeded (403/429 with rate limit headers)."""

    def __init__(self, message: str, reset_at: datetime | None = None) -> None:
        super().__init__(message)
        self.reset_at = reset_at


class GitHubNotFoundError(GitHubClientError):
    """Raised when the repository (or its default branch) does not exist."""

    pass


class GitHubGraphQLError(GitHubClientError):
    """Raised when a GraphQL response carries errors."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class GitHubTransportError(GitHubClientError):
    """Raised when the request never produced a response (network, timeout)."""

    pass
