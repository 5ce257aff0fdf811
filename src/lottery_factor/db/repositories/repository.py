"""Repository for GitHub Repository model operations."""

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from lottery_factor.db.models import Repository

from .base import BaseRepository


class RepositoryRepository(BaseRepository[Repository]):
    """Repository for GitHub Repository entities.

    Maps (owner, name) to a durable integer identity. Rows are created
    lazily and never updated or deleted.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Repository)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    async def get_by_owner_and_name(self, owner: str, name: str) -> Repository | None:
        """Get a repository by owner and name.

        Args:
            owner: Repository owner (e.g., "rails")
            name: Repository name (e.g., "rails")

        Returns:
            Repository or None if not found
        """
        stmt = select(Repository).where(
            Repository.owner == owner,
            Repository.name == name,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    # -------------------------------------------------------------------------
    # Create Methods
    # -------------------------------------------------------------------------

    async def get_or_create_id(self, owner: str, name: str) -> int:
        """Return the identity for (owner, name), inserting it if absent.

        Uses ``INSERT ... ON CONFLICT DO NOTHING`` so repeated calls never
        create duplicates, then reads the id back.

        Args:
            owner: Repository owner
            name: Repository name

        Returns:
            Repository ID (existing or newly created)
        """
        table = Repository.__table__
        stmt = (
            sqlite_insert(table)
            .values(owner=owner, name=name)
            .on_conflict_do_nothing(index_elements=["owner", "name"])
        )
        await self._session.execute(stmt)

        result = await self._session.execute(
            select(Repository.id).where(Repository.owner == owner, Repository.name == name)
        )
        return result.scalar_one()

    async def get_or_create(self, owner: str, name: str) -> tuple[Repository, bool]:
        """Get existing repository or create a new one.

        Args:
            owner: Repository owner
            name: Repository name

        Returns:
            Tuple of (repository, created) where created is True if new
        """
        existing = await self.get_by_owner_and_name(owner, name)
        if existing is not None:
            return existing, False

        repository_id = await self.get_or_create_id(owner, name)
        repo = await self.get_by_id(repository_id)
        assert repo is not None, "repository row must exist after insert"
        return repo, True
