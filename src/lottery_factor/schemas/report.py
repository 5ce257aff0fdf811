"""Row types returned by the report read queries."""

from typing import NamedTuple


class ContributorCount(NamedTuple):
    """Merged pull requests authored by one contributor."""

    author: str
    pr_count: int


class YoloCoder(NamedTuple):
    """Direct pushes to the default branch by one contributor."""

    author: str
    commit_count: int
    shas: list[str]
