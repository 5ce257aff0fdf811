"""Commit Manager - one transaction per fetched page.

Each page of upserts is committed as soon as it is written, so a failure
on a later page never rolls back earlier progress and a crash leaves only
whole pages applied.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lottery_factor.logging import get_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


class CommitManager:
    """Manages page commit boundaries on a session.

    Usage:
        async with get_session() as session:
            commit_manager = CommitManager(session)
            written = await pr_repository.upsert_many(repository_id, page.nodes)
            await commit_manager.commit_page(written)

    Attributes:
        pages_committed: Pages committed so far.
        total_committed: Records committed across all pages.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._pages_committed = 0
        self._total_committed = 0

    @property
    def pages_committed(self) -> int:
        return self._pages_committed

    @property
    def total_committed(self) -> int:
        return self._total_committed

    async def commit(self) -> None:
        """Commit whatever is pending on the session."""
        await self._session.commit()

    async def commit_page(self, records: int) -> None:
        """Commit one page of upserts.

        Args:
            records: Number of rows the page wrote (for bookkeeping only).
        """
        await self.commit()
        self._pages_committed += 1
        self._total_committed += records
        logger.debug(
            "Committed page of {} records (pages: {}, total: {})",
            records,
            self._pages_committed,
            self._total_committed,
        )

    async def rollback(self) -> None:
        """Discard the open page."""
        await self._session.rollback()
