"""Async GitHub GraphQL client wrapper using githubkit.

This module provides a typed async interface to the two paginated
GraphQL reads the sync engine needs: merged pull requests and the
default branch commit history.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from githubkit import GitHub
from githubkit.exception import GraphQLFailed, RequestError, RequestFailed
from pydantic import ValidationError

from lottery_factor.config import get_settings
from lottery_factor.logging import get_logger
from lottery_factor.schemas.github_api import CommitHistoryPage, PageInfo, PullRequestPage

from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubGraphQLError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubTransportError,
)
from .queries import DIRECT_COMMITS_QUERY, PULL_REQUESTS_QUERY

logger = get_logger(__name__)


class GitHubClient:
    """Async GitHub GraphQL client, one page per call.

    Usage:
        async with GitHubClient() as client:
            page = await client.fetch_pull_requests("rails", "rails")
            for pr in page.nodes:
                print(pr.number, pr.title)
            if page.page_info.has_next_page:
                page = await client.fetch_pull_requests(
                    "rails", "rails", page.page_info.end_cursor
                )
    """

    def __init__(self, token: str | None = None, page_size: int | None = None) -> None:
        """Initialize the GitHub client.

        Args:
            token: GitHub PAT. If not provided, uses GITHUB_TOKEN from settings.
            page_size: Items per page (max 100). Defaults to settings.sync.page_size.

        Raises:
            GitHubAuthenticationError: If no token is available.
        """
        settings = get_settings()
        self._token = token or settings.github_token
        if not self._token:
            raise GitHubAuthenticationError(
                "GitHub token required. Set GITHUB_TOKEN environment variable."
            )
        self._page_size = page_size or settings.sync.page_size
        self._client: GitHub[Any] | None = None

    @property
    def _github(self) -> GitHub[Any]:
        """Get or create the githubkit client instance."""
        if self._client is None:
            # Failures are reported to the caller, which decides whether to re-run
            self._client = GitHub(self._token, auto_retry=False)
        return self._client

    @property
    def page_size(self) -> int:
        return self._page_size

    async def close(self) -> None:
        """Drop the underlying githubkit client."""
        if self._client is not None:
            self._client = None

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Paginated Reads
    # -------------------------------------------------------------------------
    async def fetch_pull_requests(
        self,
        owner: str,
        name: str,
        cursor: str | None = None,
    ) -> PullRequestPage:
        """Fetch one page of merged pull requests, most recently updated first.

        Args:
            owner: Repository owner (org or user)
            name: Repository name
            cursor: End cursor of the previous page, None for the first page

        Returns:
            PullRequestPage with edges and pageInfo

        Raises:
            GitHubClientError: On any transport, HTTP or GraphQL failure
        """
        data = await self._query(
            PULL_REQUESTS_QUERY,
            {"owner": owner, "name": name, "cursor": cursor, "pageSize": self._page_size},
        )
        repository = data.get("repository")
        if repository is None:
            raise GitHubNotFoundError(f"Repository {owner}/{name} not found")

        return self._validate(PullRequestPage, repository["pullRequests"])

    async def fetch_direct_commits(
        self,
        owner: str,
        name: str,
        since: datetime,
        cursor: str | None = None,
    ) -> CommitHistoryPage:
        """Fetch one page of default branch history committed since ``since``.

        An empty repository (no default branch) yields an empty last page.

        Args:
            owner: Repository owner (org or user)
            name: Repository name
            since: Lower bound applied server-side
            cursor: End cursor of the previous page, None for the first page

        Returns:
            CommitHistoryPage with edges and pageInfo

        Raises:
            GitHubClientError: On any transport, HTTP or GraphQL failure
        """
        if since.tzinfo is None:
            since = since.replace(tzinfo=UTC)

        data = await self._query(
            DIRECT_COMMITS_QUERY,
            {
                "owner": owner,
                "name": name,
                "since": since.isoformat(),
                "cursor": cursor,
                "pageSize": self._page_size,
            },
        )
        repository = data.get("repository")
        if repository is None:
            raise GitHubNotFoundError(f"Repository {owner}/{name} not found")

        branch = repository.get("defaultBranchRef")
        if branch is None:
            logger.debug("Repository {}/{} has no default branch", owner, name)
            return CommitHistoryPage(edges=[], page_info=PageInfo(has_next_page=False))

        return self._validate(CommitHistoryPage, branch["target"]["history"])

    # -------------------------------------------------------------------------
    # Transport & Error Handling
    # -------------------------------------------------------------------------
    async def _query(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Run a GraphQL query, translating githubkit failures to our exceptions."""
        try:
            return await self._github.async_graphql(query, variables=variables)
        except GraphQLFailed as e:
            raise self._handle_graphql_error(e) from e
        except RequestFailed as e:
            raise self._handle_error(e) from e
        except RequestError as e:
            raise GitHubTransportError(f"GitHub request failed: {e}") from e

    @staticmethod
    def _validate(model: Any, payload: Any) -> Any:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise GitHubClientError(f"Unexpected GitHub response shape: {e}") from e

    def _handle_graphql_error(self, error: GraphQLFailed) -> GitHubClientError:
        """Convert a GraphQL error response to our exceptions."""
        errors = error.response.errors or []
        messages = [err.message for err in errors]
        if any(err.type == "NOT_FOUND" for err in errors):
            return GitHubNotFoundError("; ".join(messages))
        if any(err.type == "RATE_LIMITED" for err in errors):
            return GitHubRateLimitError("; ".join(messages))
        return GitHubGraphQLError(f"GraphQL errors: {'; '.join(messages)}", messages)

    def _handle_error(self, error: RequestFailed) -> GitHubClientError:
        """Convert githubkit HTTP failures to our exceptions."""
        status = error.response.status_code

        if status == 401:
            return GitHubAuthenticationError("Invalid GitHub token")
        elif status in (403, 429):
            headers = error.response.headers
            if headers.get("x-ratelimit-remaining") == "0" or status == 429:
                reset_ts = int(headers.get("x-ratelimit-reset", "0"))
                reset_at = datetime.fromtimestamp(reset_ts, tz=UTC) if reset_ts else None
                return GitHubRateLimitError("GitHub rate limit exceeded", reset_at=reset_at)
            return GitHubClientError(f"Access forbidden: {error}")
        elif status == 404:
            return GitHubNotFoundError(str(error))
        else:
            return GitHubClientError(f"GitHub API error ({status}): {error}")
