"""Repository for PullRequest model operations."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from lottery_factor.db.models import UNKNOWN, PullRequest, Repository
from lottery_factor.schemas.report import ContributorCount

from .base import BaseRepository

if TYPE_CHECKING:
    from lottery_factor.schemas.github_api import GitHubPullRequestNode


class PullRequestRepository(BaseRepository[PullRequest]):
    """Repository for merged PullRequest entities.

    Keyed by (repository_id, pr_number). Two write paths exist:

        - ``upsert_many``: PR sync pages, latest fetch wins
        - ``insert_if_absent``: PRs discovered through commits, never overwrite
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PullRequest)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    async def get_by_number(self, repository_id: int, pr_number: int) -> PullRequest | None:
        """Get a PR by repository and PR number.

        Args:
            repository_id: Repository ID
            pr_number: PR number

        Returns:
            PullRequest or None if not found
        """
        stmt = (
            select(PullRequest)
            .where(
                PullRequest.repository_id == repository_id,
                PullRequest.pr_number == pr_number,
            )
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_for_repository(self, repository_id: int) -> int:
        """Count stored PRs for one repository."""
        stmt = select(func.count()).where(PullRequest.repository_id == repository_id)
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def get_oldest_merged_at(self, repository_id: int) -> str | None:
        """Earliest stored merge timestamp for a repository.

        Rows carrying the ``unknown`` placeholder are ignored.

        Returns:
            ISO-8601 timestamp string, or None if the repository has no PRs
        """
        stmt = select(func.min(PullRequest.merged_at)).where(
            PullRequest.repository_id == repository_id,
            PullRequest.merged_at != UNKNOWN,
        )
        result = await self._session.execute(stmt)
        return result.scalar()

    async def get_contributors(self, owner: str, name: str) -> list[ContributorCount]:
        """PR counts per author, most prolific first.

        Args:
            owner: Repository owner
            name: Repository name

        Returns:
            List of (author, pr_count), ordered by count descending then author
        """
        pr_count = func.count().label("pr_count")
        stmt = (
            select(PullRequest.author, pr_count)
            .join(Repository, PullRequest.repository_id == Repository.id)
            .where(Repository.owner == owner, Repository.name == name)
            .group_by(PullRequest.author)
            .order_by(pr_count.desc(), PullRequest.author)
        )
        result = await self._session.execute(stmt)
        return [ContributorCount(author, count) for author, count in result.all()]

    # -------------------------------------------------------------------------
    # Write Methods
    # -------------------------------------------------------------------------

    async def upsert_many(
        self,
        repository_id: int,
        pull_requests: Iterable[GitHubPullRequestNode],
    ) -> int:
        """Insert or overwrite PRs keyed by (repository_id, pr_number).

        PRs without an author or merge timestamp cannot be attributed and
        are skipped. Does not commit.

        Args:
            repository_id: Repository ID
            pull_requests: PR nodes from the GitHub API

        Returns:
            Number of PRs written
        """
        rows = [
            {
                "repository_id": repository_id,
                "pr_number": pr.number,
                "title": pr.title,
                "author": pr.author_login,
                "merged_at": pr.merged_at,
            }
            for pr in pull_requests
            if pr.author_login is not None and pr.merged_at
        ]
        if not rows:
            return 0

        stmt = sqlite_insert(PullRequest.__table__)
        stmt = stmt.on_conflict_do_update(
            index_elements=["repository_id", "pr_number"],
            set_={
                "title": stmt.excluded.title,
                "author": stmt.excluded.author,
                "merged_at": stmt.excluded.merged_at,
            },
        )
        await self._session.execute(stmt, rows)
        return len(rows)

    async def insert_if_absent(self, repository_id: int, pr: GitHubPullRequestNode) -> None:
        """Insert a PR unless one with the same number is already stored.

        Missing author or merge timestamp are stored as ``unknown``.
        Does not commit.
        """
        stmt = (
            sqlite_insert(PullRequest.__table__)
            .values(
                repository_id=repository_id,
                pr_number=pr.number,
                title=pr.title,
                author=pr.author_login or UNKNOWN,
                merged_at=pr.merged_at or UNKNOWN,
            )
            .on_conflict_do_nothing(index_elements=["repository_id", "pr_number"])
        )
        await self._session.execute(stmt)
