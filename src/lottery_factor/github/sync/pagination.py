"""Paginated Upsert - the fetch → select → upsert → commit page loop.

Both sync phases run through ``PaginatedUpsert``; they differ only in
the callables they plug in (how to fetch a page, which items to keep,
how to store them, and when to stop early).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar

from lottery_factor.github.exceptions import GitHubClientError
from lottery_factor.logging import get_logger

from .results import PhaseResult

if TYPE_CHECKING:
    from loguru import Logger

    from lottery_factor.schemas.github_api import PageInfo

    from .commit_manager import CommitManager
    from .enums import SyncPhase


class Page(Protocol):
    """Anything with GraphQL ``pageInfo``."""

    @property
    def page_info(self) -> PageInfo: ...


PageT = TypeVar("PageT", bound=Page)
ItemT = TypeVar("ItemT")


def never_stop(page: object, selected: list[object]) -> bool:
    """Stop predicate that defers entirely to ``hasNextPage``."""
    return False


class PaginatedUpsert(Generic[PageT, ItemT]):
    """Drive one cursor-paginated upstream read into the store.

    Loop:
        1. Fetch the page at the current cursor (None = first page)
        2. ``select`` the items worth storing
        3. ``upsert`` them and commit the page as one transaction
        4. Stop when there is no next page or ``should_stop`` says so,
           otherwise advance to the page's end cursor

    Upstream failures end the loop with an unsuccessful result; pages
    committed before the failure remain. Store failures roll back the
    open page and propagate.

    Usage:
        paginator = PaginatedUpsert(
            SyncPhase.COMMITS,
            fetch_page=lambda cursor: client.fetch_direct_commits(owner, name, since, cursor),
            select=lambda page: page.nodes,
            upsert=lambda commits: commit_repository.upsert_many(repository_id, commits),
            commit_manager=CommitManager(session),
        )
        result = await paginator.run()
    """

    def __init__(
        self,
        phase: SyncPhase,
        *,
        fetch_page: Callable[[str | None], Awaitable[PageT]],
        select: Callable[[PageT], list[ItemT]],
        upsert: Callable[[list[ItemT]], Awaitable[int]],
        commit_manager: CommitManager,
        should_stop: Callable[[PageT, list[ItemT]], bool] = never_stop,
        log: Logger | None = None,
    ) -> None:
        self._phase = phase
        self._fetch_page = fetch_page
        self._select = select
        self._upsert = upsert
        self._commit_manager = commit_manager
        self._should_stop = should_stop
        self._logger = log or get_logger(__name__)

    async def run(self) -> PhaseResult:
        """Paginate until exhaustion, early stop, or upstream failure.

        Returns:
            PhaseResult with page/record counts and any upstream error
        """
        result = PhaseResult(phase=self._phase)
        label = self._phase.label
        cursor: str | None = None

        while True:
            self._logger.info("Fetching {} (cursor: {})...", label, cursor or "start")
            try:
                page = await self._fetch_page(cursor)
            except GitHubClientError as e:
                self._logger.error("Failed to fetch {}: {}", label, e)
                result.error = e
                return result

            selected = self._select(page)
            try:
                written = await self._upsert(selected)
                await self._commit_manager.commit_page(written)
            except Exception:
                await self._commit_manager.rollback()
                raise

            result.pages += 1
            result.records += written

            page_info = page.page_info
            if not page_info.has_next_page or self._should_stop(page, selected):
                break
            if page_info.end_cursor is None:
                self._logger.warning("GitHub reported a next page without a cursor, stopping")
                break
            cursor = page_info.end_cursor

        self._logger.info("{} {} processed in database.", result.records, label)
        return result
