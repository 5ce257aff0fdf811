"""Repository for MainlineCommit model operations."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from lottery_factor.db.models import MainlineCommit, Repository
from lottery_factor.schemas.report import YoloCoder

from .base import BaseRepository
from .pull_request import PullRequestRepository

if TYPE_CHECKING:
    from lottery_factor.schemas.github_api import GitHubCommitNode


class MainlineCommitRepository(BaseRepository[MainlineCommit]):
    """Repository for default-branch commits.

    Keyed by (repository_id, sha). A commit that landed through a pull
    request references it by ``pr_number``; the referenced PR row is
    written first, so this store needs a ``PullRequestRepository`` on the
    same session.
    """

    def __init__(
        self,
        session: AsyncSession,
        pr_repository: PullRequestRepository | None = None,
    ) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session
            pr_repository: PR store for associated PRs (created on the same session if None)
        """
        super().__init__(session, MainlineCommit)
        self._pr_repository = pr_repository or PullRequestRepository(session)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    async def get_by_sha(self, repository_id: int, sha: str) -> MainlineCommit | None:
        """Get a commit by repository and SHA."""
        stmt = (
            select(MainlineCommit)
            .where(MainlineCommit.repository_id == repository_id, MainlineCommit.sha == sha)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_for_repository(self, repository_id: int) -> int:
        """Count stored commits for one repository."""
        stmt = select(func.count()).where(MainlineCommit.repository_id == repository_id)
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def get_yolo_coders(
        self,
        owner: str,
        name: str,
        days: int,
        *,
        today: date | None = None,
    ) -> list[YoloCoder]:
        """Authors who pushed directly to the default branch within the window.

        Only commits with no associated PR and ``date(committed_at) >=
        today - days`` count. SHAs are listed newest first.

        Args:
            owner: Repository owner
            name: Repository name
            days: Lookback window in days
            today: Reference date (defaults to the current UTC date)

        Returns:
            List of (author, commit_count, shas), ordered by count descending then author
        """
        since = (today or datetime.now(UTC).date()) - timedelta(days=days)
        stmt = (
            select(MainlineCommit.author, MainlineCommit.sha)
            .join(Repository, MainlineCommit.repository_id == Repository.id)
            .where(
                Repository.owner == owner,
                Repository.name == name,
                MainlineCommit.pr_number.is_(None),
                MainlineCommit.author.is_not(None),
                func.date(MainlineCommit.committed_at) >= since.isoformat(),
            )
            .order_by(MainlineCommit.committed_at.desc(), MainlineCommit.sha)
        )
        result = await self._session.execute(stmt)

        shas_by_author: dict[str, list[str]] = {}
        for author, sha in result.all():
            shas_by_author.setdefault(author, []).append(sha)

        coders = [YoloCoder(author, len(shas), shas) for author, shas in shas_by_author.items()]
        coders.sort(key=lambda coder: (-coder.commit_count, coder.author))
        return coders

    # -------------------------------------------------------------------------
    # Write Methods
    # -------------------------------------------------------------------------

    async def upsert_many(
        self,
        repository_id: int,
        commits: Iterable[GitHubCommitNode],
    ) -> int:
        """Insert or overwrite commits keyed by (repository_id, sha).

        Commits whose author maps to no GitHub account are dropped. When a
        commit carries an associated PR, that PR is inserted first if it is
        not already stored. Does not commit.

        Args:
            repository_id: Repository ID
            commits: Commit nodes from the GitHub API

        Returns:
            Number of commits written
        """
        rows: list[dict[str, object]] = []
        for commit in commits:
            author = commit.author_login
            if author is None:
                continue

            pr = commit.associated_pull_request
            if pr is not None:
                await self._pr_repository.insert_if_absent(repository_id, pr)

            rows.append(
                {
                    "repository_id": repository_id,
                    "sha": commit.oid,
                    "author": author,
                    "committed_at": commit.committed_date,
                    "pr_number": pr.number if pr is not None else None,
                }
            )

        if not rows:
            return 0

        stmt = sqlite_insert(MainlineCommit.__table__)
        stmt = stmt.on_conflict_do_update(
            index_elements=["repository_id", "sha"],
            set_={
                "author": stmt.excluded.author,
                "committed_at": stmt.excluded.committed_at,
                "pr_number": stmt.excluded.pr_number,
            },
        )
        await self._session.execute(stmt, rows)
        return len(rows)
