"""Tests for MainlineCommitRepository."""

from lottery_factor.db.models import UNKNOWN
from lottery_factor.db.repositories import MainlineCommitRepository, PullRequestRepository
from lottery_factor.schemas import YoloCoder
from tests.conftest import (
    FEB_10_ISO,
    FEB_20_ISO,
    FEB_28_ISO,
    JAN_30_ISO,
    JAN_31_ISO,
    TODAY,
)
from tests.factories import (
    commit_model,
    make_mainline_commit,
    make_pr_node,
    make_pull_request,
    make_repository,
)


class TestMainlineCommitRepositoryUpsert:
    """upsert_many tests."""

    async def test_upsert_direct_push(self, db_session):
        """A commit without an associated PR is stored as a direct push."""
        repo = make_repository(db_session)
        await db_session.flush()

        repository = MainlineCommitRepository(db_session)
        written = await repository.upsert_many(repo.id, [commit_model(sha="a" * 40)])

        assert written == 1
        stored = await repository.get_by_sha(repo.id, "a" * 40)
        assert stored is not None
        assert stored.author == "alice"
        assert stored.committed_at == FEB_28_ISO
        assert stored.pr_number is None

    async def test_upsert_drops_authorless_commits(self, db_session):
        """Commits whose git author maps to no account are never stored."""
        repo = make_repository(db_session)
        await db_session.flush()

        repository = MainlineCommitRepository(db_session)
        written = await repository.upsert_many(
            repo.id,
            [commit_model(sha="a" * 40, author=None), commit_model(sha="b" * 40)],
        )

        assert written == 1
        assert await repository.get_by_sha(repo.id, "a" * 40) is None
        assert await repository.count_for_repository(repo.id) == 1

    async def test_upsert_all_authorless(self, db_session):
        """A page of only authorless commits writes nothing."""
        repo = make_repository(db_session)
        await db_session.flush()

        repository = MainlineCommitRepository(db_session)

        assert await repository.upsert_many(repo.id, [commit_model(author=None)]) == 0
        assert await repository.count() == 0

    async def test_upsert_is_idempotent(self, db_session):
        """Re-sending the same commits creates no duplicates."""
        repo = make_repository(db_session)
        await db_session.flush()
        repository = MainlineCommitRepository(db_session)
        commits = [commit_model(sha="a" * 40), commit_model(sha="b" * 40)]

        await repository.upsert_many(repo.id, commits)
        await repository.upsert_many(repo.id, commits)

        assert await repository.count_for_repository(repo.id) == 2

    async def test_upsert_overwrites_fields(self, db_session):
        """The latest fetch of a SHA wins."""
        repo = make_repository(db_session)
        await db_session.flush()
        repository = MainlineCommitRepository(db_session)

        await repository.upsert_many(repo.id, [commit_model(sha="a" * 40, author="alice")])
        await repository.upsert_many(
            repo.id,
            [commit_model(sha="a" * 40, author="alice2", pr=make_pr_node(number=9))],
        )

        stored = await repository.get_by_sha(repo.id, "a" * 40)
        assert stored is not None
        assert stored.author == "alice2"
        assert stored.pr_number == 9

    async def test_upsert_creates_associated_pr(self, db_session):
        """An associated PR is written before the commit that references it."""
        repo = make_repository(db_session)
        await db_session.flush()
        pr_repository = PullRequestRepository(db_session)
        repository = MainlineCommitRepository(db_session, pr_repository)

        await repository.upsert_many(
            repo.id,
            [commit_model(pr=make_pr_node(number=42, title="Via commit", author="bob"))],
        )

        stored_pr = await pr_repository.get_by_number(repo.id, 42)
        assert stored_pr is not None
        assert stored_pr.title == "Via commit"
        assert stored_pr.author == "bob"
        stored_commit = await repository.get_by_sha(repo.id, "a" * 40)
        assert stored_commit is not None
        assert stored_commit.pr_number == 42

    async def test_associated_pr_without_author_is_unknown(self, db_session):
        """An associated PR by a deleted account is stored with author 'unknown'."""
        repo = make_repository(db_session)
        await db_session.flush()
        pr_repository = PullRequestRepository(db_session)
        repository = MainlineCommitRepository(db_session, pr_repository)

        await repository.upsert_many(
            repo.id, [commit_model(pr=make_pr_node(number=43, author=None))]
        )

        stored_pr = await pr_repository.get_by_number(repo.id, 43)
        assert stored_pr is not None
        assert stored_pr.author == UNKNOWN

    async def test_associated_pr_does_not_overwrite(self, db_session):
        """A PR already synced keeps its own values."""
        repo = make_repository(db_session)
        await db_session.flush()
        make_pull_request(db_session, repo, number=44, title="Synced", author="carol")
        await db_session.flush()
        pr_repository = PullRequestRepository(db_session)
        repository = MainlineCommitRepository(db_session, pr_repository)

        await repository.upsert_many(
            repo.id, [commit_model(pr=make_pr_node(number=44, title="Embedded", author="dave"))]
        )

        stored_pr = await pr_repository.get_by_number(repo.id, 44)
        assert stored_pr is not None
        assert stored_pr.title == "Synced"
        assert stored_pr.author == "carol"


class TestMainlineCommitRepositoryYoloCoders:
    """get_yolo_coders tests."""

    async def test_groups_direct_pushes(self, db_session):
        """Direct pushes are grouped per author, most pushes first."""
        repo = make_repository(db_session)
        await db_session.flush()
        make_mainline_commit(db_session, repo, sha="a1", author="alice", committed_at=FEB_10_ISO)
        make_mainline_commit(db_session, repo, sha="a2", author="alice", committed_at=FEB_28_ISO)
        make_mainline_commit(db_session, repo, sha="b1", author="bob", committed_at=FEB_20_ISO)
        await db_session.flush()

        repository = MainlineCommitRepository(db_session)
        result = await repository.get_yolo_coders("rails", "rails", 30, today=TODAY)

        assert result == [
            YoloCoder("alice", 2, ["a2", "a1"]),
            YoloCoder("bob", 1, ["b1"]),
        ]

    async def test_excludes_commits_with_pr(self, db_session):
        """Commits that landed through a PR are not YOLO pushes."""
        repo = make_repository(db_session)
        await db_session.flush()
        make_pull_request(db_session, repo, number=1)
        make_mainline_commit(db_session, repo, sha="p1", author="alice", pr_number=1)
        make_mainline_commit(db_session, repo, sha="d1", author="bob")
        await db_session.flush()

        repository = MainlineCommitRepository(db_session)
        result = await repository.get_yolo_coders("rails", "rails", 30, today=TODAY)

        assert result == [YoloCoder("bob", 1, ["d1"])]

    async def test_window_boundary(self, db_session):
        """A push exactly N days ago counts; one a day older does not."""
        repo = make_repository(db_session)
        await db_session.flush()
        make_mainline_commit(db_session, repo, sha="in", author="alice", committed_at=JAN_31_ISO)
        make_mainline_commit(db_session, repo, sha="out", author="bob", committed_at=JAN_30_ISO)
        await db_session.flush()

        repository = MainlineCommitRepository(db_session)
        result = await repository.get_yolo_coders("rails", "rails", 30, today=TODAY)

        assert result == [YoloCoder("alice", 1, ["in"])]

    async def test_ties_ordered_by_author(self, db_session):
        """Equal counts fall back to alphabetical order."""
        repo = make_repository(db_session)
        await db_session.flush()
        make_mainline_commit(db_session, repo, sha="z1", author="zed")
        make_mainline_commit(db_session, repo, sha="a1", author="amy")
        await db_session.flush()

        repository = MainlineCommitRepository(db_session)
        result = await repository.get_yolo_coders("rails", "rails", 30, today=TODAY)

        assert [coder.author for coder in result] == ["amy", "zed"]

    async def test_empty(self, db_session):
        """No direct pushes means no YOLO coders."""
        repository = MainlineCommitRepository(db_session)

        assert await repository.get_yolo_coders("rails", "rails", 30, today=TODAY) == []
