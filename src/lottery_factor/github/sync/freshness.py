"""Freshness Oracle - decide whether cached PRs already cover a window."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING

from lottery_factor.logging import get_logger
from lottery_factor.schemas.github_api import parse_github_date

if TYPE_CHECKING:
    from lottery_factor.db.repositories import PullRequestRepository

logger = get_logger(__name__)


def utc_today() -> date:
    """Current date in UTC."""
    return datetime.now(UTC).date()


def oldest_needed_date(days: int, today: date) -> date:
    """First day of a ``days``-long window ending ``today``."""
    return today - timedelta(days=days)


class FreshnessOracle:
    """Answers "is the PR cache deep enough for N days?".

    Coverage is judged only by the oldest stored merge date. This
    assumes the stored range has no gaps: an interrupted earlier sync or
    rows removed from the middle of the range can make it report
    coverage that is not really there. Commits are never judged here;
    they are re-fetched on every run.
    """

    def __init__(
        self,
        pr_repository: PullRequestRepository,
        today: Callable[[], date] = utc_today,
    ) -> None:
        """Initialize the oracle.

        Args:
            pr_repository: Pull request store to inspect
            today: Clock returning the reference date
        """
        self._pr_repository = pr_repository
        self._today = today

    async def is_coverage_sufficient(self, repository_id: int, days: int) -> bool:
        """Check whether stored PRs reach back at least ``days`` days.

        Args:
            repository_id: Repository ID
            days: Requested lookback window

        Returns:
            True iff a PR exists whose merge date is on or before today - days
        """
        oldest_needed = oldest_needed_date(days, self._today())
        oldest_stored = await self._pr_repository.get_oldest_merged_at(repository_id)
        if oldest_stored is None:
            return False

        sufficient = parse_github_date(oldest_stored) <= oldest_needed
        logger.debug(
            "Oldest stored PR merged {}, window starts {}: sufficient={}",
            oldest_stored,
            oldest_needed,
            sufficient,
        )
        return sufficient
