"""Tests for GitHub GraphQL payload schemas."""

from datetime import date

import pytest
from pydantic import ValidationError

from lottery_factor.schemas import (
    CommitHistoryPage,
    GitHubCommitNode,
    GitHubPullRequestNode,
    PageInfo,
    PullRequestPage,
    parse_github_date,
)
from tests.conftest import FEB_20_ISO, JAN_30_ISO
from tests.factories import make_commit_node, make_connection, make_pr_node


class TestParseGithubDate:
    """parse_github_date tests."""

    def test_zulu_timestamp(self):
        assert parse_github_date(FEB_20_ISO) == date(2024, 2, 20)

    def test_late_evening_keeps_utc_date(self):
        """The date is taken in UTC, not shifted to local time."""
        assert parse_github_date(JAN_30_ISO) == date(2024, 1, 30)

    def test_offset_timestamp(self):
        assert parse_github_date("2024-02-20T09:30:00+02:00") == date(2024, 2, 20)


class TestGitHubPullRequestNode:
    """Pull request node parsing."""

    def test_parse(self):
        pr = GitHubPullRequestNode.model_validate(make_pr_node(number=12, title="Fix"))

        assert pr.number == 12
        assert pr.title == "Fix"
        assert pr.author_login == "alice"
        assert pr.merged_at == FEB_20_ISO
        assert pr.merged_on == date(2024, 2, 20)

    def test_ghost_author(self):
        """Deleted accounts come back as a null author."""
        pr = GitHubPullRequestNode.model_validate(make_pr_node(author=None))

        assert pr.author is None
        assert pr.author_login is None

    def test_missing_merged_at(self):
        pr = GitHubPullRequestNode.model_validate(make_pr_node(merged_at=None))

        assert pr.merged_on is None

    def test_populate_by_name(self):
        """snake_case field names are accepted too."""
        pr = GitHubPullRequestNode(number=1, title="t", merged_at=FEB_20_ISO)

        assert pr.merged_on == date(2024, 2, 20)

    def test_missing_number_rejected(self):
        payload = make_pr_node()
        del payload["number"]

        with pytest.raises(ValidationError):
            GitHubPullRequestNode.model_validate(payload)


class TestGitHubCommitNode:
    """Commit node parsing."""

    def test_linked_author(self):
        commit = GitHubCommitNode.model_validate(make_commit_node(author="bob"))

        assert commit.author_login == "bob"
        assert commit.associated_pull_request is None

    def test_unlinked_author(self):
        """A git author with no GitHub account has no login."""
        commit = GitHubCommitNode.model_validate(make_commit_node(author=None))

        assert commit.author_login is None

    def test_null_author_object(self):
        payload = make_commit_node()
        payload["author"] = None

        commit = GitHubCommitNode.model_validate(payload)

        assert commit.author_login is None

    def test_associated_pull_request(self):
        commit = GitHubCommitNode.model_validate(
            make_commit_node(pr=make_pr_node(number=8, author=None))
        )

        pr = commit.associated_pull_request
        assert pr is not None
        assert pr.number == 8
        assert pr.author_login is None

    def test_missing_associated_pull_requests(self):
        payload = make_commit_node()
        del payload["associatedPullRequests"]

        commit = GitHubCommitNode.model_validate(payload)

        assert commit.associated_pull_request is None


class TestPages:
    """Connection page parsing."""

    def test_pull_request_page(self):
        page = PullRequestPage.model_validate(
            make_connection(
                [make_pr_node(number=1), make_pr_node(number=2)],
                has_next_page=True,
                end_cursor="abc",
            )
        )

        assert [pr.number for pr in page.nodes] == [1, 2]
        assert page.page_info == PageInfo(has_next_page=True, end_cursor="abc")

    def test_commit_page_last(self):
        page = CommitHistoryPage.model_validate(make_connection([make_commit_node()]))

        assert len(page.nodes) == 1
        assert page.page_info.has_next_page is False
        assert page.page_info.end_cursor is None

    def test_page_info_required(self):
        with pytest.raises(ValidationError):
            PullRequestPage.model_validate({"edges": []})
