"""SQLAlchemy ORM models for the lottery-factor cache."""

from datetime import datetime

from sqlalchemy import (
    DateTime,
    ForeignKey,
    ForeignKeyConstraint,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)

# Stored in place of author/merged_at when an embedded PR omits them
UNKNOWN = "unknown"


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


# ------------------------------------------------------------------------------
# Repository model
# ------------------------------------------------------------------------------
class Repository(Base):
    """A GitHub repository seen by the tool. Created on first access, never mutated."""

    __tablename__ = "repositories"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner: Mapped[str] = mapped_column(String(100))
    name: Mapped[str] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    pull_requests: Mapped[list["PullRequest"]] = relationship(back_populates="repository")
    mainline_commits: Mapped[list["MainlineCommit"]] = relationship(back_populates="repository")

    __table_args__ = (UniqueConstraint("owner", "name", name="uq_repository_owner_name"),)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __repr__(self) -> str:
        return f"<Repository(id={self.id}, full_name='{self.full_name}')>"


# ------------------------------------------------------------------------------
# PullRequest model
# ------------------------------------------------------------------------------
class PullRequest(Base):
    """A merged pull request.

    ``merged_at`` keeps the ISO-8601 string returned by GitHub so that
    ``MIN(merged_at)`` orders chronologically.
    """

    __tablename__ = "pull_requests"

    id: Mapped[int] = mapped_column(primary_key=True)
    repository_id: Mapped[int] = mapped_column(ForeignKey("repositories.id"))
    pr_number: Mapped[int] = mapped_column()
    title: Mapped[str] = mapped_column(String(500))
    author: Mapped[str] = mapped_column(String(100))
    merged_at: Mapped[str] = mapped_column(String(40))

    repository: Mapped["Repository"] = relationship(back_populates="pull_requests")

    # One PR number per repo
    __table_args__ = (
        UniqueConstraint("repository_id", "pr_number", name="uq_repo_pr_number"),
    )

    def __repr__(self) -> str:
        return f"<PullRequest(id={self.id}, repo='{self.repository_id}', number={self.pr_number})>"


# ------------------------------------------------------------------------------
# MainlineCommit model
# ------------------------------------------------------------------------------
class MainlineCommit(Base):
    """A commit on the default branch.

    ``pr_number`` is set when the commit landed through a pull request;
    NULL marks a direct push.
    """

    __tablename__ = "mainline_commits"

    id: Mapped[int] = mapped_column(primary_key=True)
    repository_id: Mapped[int] = mapped_column(ForeignKey("repositories.id"))
    sha: Mapped[str] = mapped_column(String(40))
    author: Mapped[str | None] = mapped_column(String(100), nullable=True)
    committed_at: Mapped[str] = mapped_column(String(40))
    pr_number: Mapped[int | None] = mapped_column(nullable=True)

    repository: Mapped["Repository"] = relationship(back_populates="mainline_commits")

    __table_args__ = (
        UniqueConstraint("repository_id", "sha", name="uq_repo_commit_sha"),
        ForeignKeyConstraint(
            ["repository_id", "pr_number"],
            ["pull_requests.repository_id", "pull_requests.pr_number"],
            name="fk_commit_pull_request",
        ),
    )

    def __repr__(self) -> str:
        return f"<MainlineCommit(id={self.id}, repo='{self.repository_id}', sha='{self.sha[:7]}')>"
