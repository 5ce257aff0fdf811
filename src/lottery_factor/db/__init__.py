"""Database module for lottery-factor."""

from lottery_factor.db.engine import (
    configure_engine,
    create_tables,
    dispose_engine,
    get_engine,
    get_session,
    get_session_factory,
)
from lottery_factor.db.models import (
    UNKNOWN,
    Base,
    MainlineCommit,
    PullRequest,
    Repository,
)
from lottery_factor.db.repositories import (
    BaseRepository,
    MainlineCommitRepository,
    PullRequestRepository,
    RepositoryRepository,
)

__all__ = [
    # Models
    "UNKNOWN",
    "Base",
    "MainlineCommit",
    "PullRequest",
    "Repository",
    # Engine
    "configure_engine",
    "create_tables",
    "dispose_engine",
    "get_engine",
    "get_session",
    "get_session_factory",
    # Repositories
    "BaseRepository",
    "MainlineCommitRepository",
    "PullRequestRepository",
    "RepositoryRepository",
]
