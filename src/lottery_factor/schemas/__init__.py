"""Pydantic schemas and row types for lottery-factor.

This module provides GitHub GraphQL payload models and report row types.
"""

from .github_api import (
    CommitHistoryPage,
    GitHubActor,
    GitHubCommitNode,
    GitHubGitActor,
    GitHubPullRequestNode,
    PageInfo,
    PullRequestPage,
    parse_github_date,
)
from .report import ContributorCount, YoloCoder
from .repository import parse_repo_string

__all__ = [
    # GitHub API
    "CommitHistoryPage",
    "GitHubActor",
    "GitHubCommitNode",
    "GitHubGitActor",
    "GitHubPullRequestNode",
    "PageInfo",
    "PullRequestPage",
    "parse_github_date",
    # Report rows
    "ContributorCount",
    "YoloCoder",
    # Repository
    "parse_repo_string",
]
