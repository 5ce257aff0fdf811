"""Sync Orchestrator - bring the local cache up to date for one repository.

Runs the two sync phases for a requested window of N days:

    1. Pull requests: skipped when the Freshness Oracle says the cache
       already reaches back far enough, otherwise paginated with an early
       exit on the first page holding no in-window merges.
    2. Mainline commits: always paginated to exhaustion; GitHub bounds
       the history by date server-side.

Both phases are always attempted; the overall outcome is their AND.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime, time
from typing import TYPE_CHECKING, Protocol

from lottery_factor.logging import bind_phase, bind_repo

from .commit_manager import CommitManager
from .enums import SyncPhase
from .freshness import FreshnessOracle, oldest_needed_date, utc_today
from .pagination import PaginatedUpsert
from .results import PhaseResult, SyncResult

if TYPE_CHECKING:
    from lottery_factor.db.repositories import (
        MainlineCommitRepository,
        PullRequestRepository,
        RepositoryRepository,
    )
    from lottery_factor.schemas.github_api import (
        CommitHistoryPage,
        GitHubCommitNode,
        GitHubPullRequestNode,
        PullRequestPage,
    )


class UpstreamClient(Protocol):
    """The two paginated reads the orchestrator needs (``GitHubClient`` or a fake)."""

    async def fetch_pull_requests(
        self, owner: str, name: str, cursor: str | None = None
    ) -> PullRequestPage: ...

    async def fetch_direct_commits(
        self, owner: str, name: str, since: datetime, cursor: str | None = None
    ) -> CommitHistoryPage: ...


class SyncOrchestrator:
    """Incrementally syncs merged PRs and mainline commits into the cache.

    Usage:
        async with GitHubClient() as client:
            async with get_session() as session:
                pr_repository = PullRequestRepository(session)
                orchestrator = SyncOrchestrator(
                    client=client,
                    repo_repository=RepositoryRepository(session),
                    pr_repository=pr_repository,
                    commit_repository=MainlineCommitRepository(session, pr_repository),
                )
                result = await orchestrator.sync("rails", "rails", days=30)
                if not result.success:
                    ...  # skip reporting on incomplete data
    """

    def __init__(
        self,
        client: UpstreamClient,
        repo_repository: RepositoryRepository,
        pr_repository: PullRequestRepository,
        commit_repository: MainlineCommitRepository,
        *,
        commit_manager: CommitManager | None = None,
        today: Callable[[], date] = utc_today,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            client: Upstream API client
            repo_repository: Repository identity store
            pr_repository: Pull request store
            commit_repository: Mainline commit store
            commit_manager: Page commit boundaries (defaults to one on pr_repository's session)
            today: Clock returning the reference date
        """
        self._client = client
        self._repo_repository = repo_repository
        self._pr_repository = pr_repository
        self._commit_repository = commit_repository
        self._commit_manager = commit_manager or CommitManager(pr_repository.session)
        self._today = today
        self._freshness = FreshnessOracle(pr_repository, today=today)

    @property
    def freshness(self) -> FreshnessOracle:
        return self._freshness

    async def sync(self, owner: str, name: str, days: int) -> SyncResult:
        """Sync both phases for ``owner/name`` over the last ``days`` days.

        Upstream failures are reported in the result; store failures raise.

        Args:
            owner: Repository owner
            name: Repository name
            days: Lookback window in days

        Returns:
            SyncResult whose ``success`` is the AND of both phases
        """
        repo_logger = bind_repo(owner, name)

        repository_id = await self._repo_repository.get_or_create_id(owner, name)
        await self._commit_manager.commit()
        result = SyncResult(repository=f"{owner}/{name}", repository_id=repository_id, days=days)

        if await self._freshness.is_coverage_sufficient(repository_id, days):
            repo_logger.info(
                "Database already contains PRs covering the required {} day range.", days
            )
            result.pull_requests = PhaseResult.from_skipped(SyncPhase.PULL_REQUESTS)
        else:
            result.pull_requests = await self.sync_pull_requests(
                owner, name, repository_id, days
            )

        result.commits = await self.sync_mainline_commits(owner, name, repository_id, days)

        if result.success:
            repo_logger.info("Sync complete")
        else:
            repo_logger.warning("Sync incomplete")
        return result

    async def sync_pull_requests(
        self,
        owner: str,
        name: str,
        repository_id: int,
        days: int,
    ) -> PhaseResult:
        """Page through merged PRs (newest update first) and upsert those in the window.

        Stops when GitHub has no next page or a page holds no PR merged on
        or after ``today - days``. The early exit relies on update-time
        ordering; an old PR updated recently can sit on a later page and
        be missed.

        Returns:
            PhaseResult, unsuccessful on upstream failure
        """
        oldest_needed = oldest_needed_date(days, self._today())

        def in_window(page: PullRequestPage) -> list[GitHubPullRequestNode]:
            return [
                pr
                for pr in page.nodes
                if pr.merged_on is not None and pr.merged_on >= oldest_needed
            ]

        async def fetch(cursor: str | None) -> PullRequestPage:
            return await self._client.fetch_pull_requests(owner, name, cursor)

        async def upsert(prs: list[GitHubPullRequestNode]) -> int:
            return await self._pr_repository.upsert_many(repository_id, prs)

        paginator: PaginatedUpsert[PullRequestPage, GitHubPullRequestNode] = PaginatedUpsert(
            SyncPhase.PULL_REQUESTS,
            fetch_page=fetch,
            select=in_window,
            upsert=upsert,
            should_stop=lambda page, selected: not selected,
            commit_manager=self._commit_manager,
            log=bind_phase(owner, name, SyncPhase.PULL_REQUESTS.value),
        )
        return await paginator.run()

    async def sync_mainline_commits(
        self,
        owner: str,
        name: str,
        repository_id: int,
        days: int,
    ) -> PhaseResult:
        """Page through default branch history since ``today - days`` and upsert it.

        GitHub applies the date bound, so every returned commit is kept
        and pagination runs until there is no next page.

        Returns:
            PhaseResult, unsuccessful on upstream failure
        """
        since = datetime.combine(oldest_needed_date(days, self._today()), time.min, tzinfo=UTC)

        async def fetch(cursor: str | None) -> CommitHistoryPage:
            return await self._client.fetch_direct_commits(owner, name, since, cursor)

        async def upsert(commits: list[GitHubCommitNode]) -> int:
            return await self._commit_repository.upsert_many(repository_id, commits)

        paginator: PaginatedUpsert[CommitHistoryPage, GitHubCommitNode] = PaginatedUpsert(
            SyncPhase.COMMITS,
            fetch_page=fetch,
            select=lambda page: page.nodes,
            upsert=upsert,
            commit_manager=self._commit_manager,
            log=bind_phase(owner, name, SyncPhase.COMMITS.value),
        )
        return await paginator.run()
