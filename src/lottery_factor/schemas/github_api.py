"""Pydantic schemas for parsing GitHub GraphQL responses.

These schemas map to the connection/edge/node shape of the GraphQL API.
See: https://docs.github.com/en/graphql/reference/objects#pullrequestconnection
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class GraphQLModel(BaseModel):
    """Base for GraphQL payloads: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def parse_github_date(value: str) -> date:
    """Parse a GitHub ISO-8601 timestamp (e.g. ``2024-01-12T16:00:00Z``) to a date."""
    return datetime.fromisoformat(value).date()


class GitHubActor(GraphQLModel):
    """A GitHub account (``Actor`` interface)."""

    login: str = Field(description="GitHub username")


class GitHubGitActor(GraphQLModel):
    """Git author of a commit, linked to a GitHub account when resolvable."""

    user: GitHubActor | None = Field(default=None, description="Linked GitHub user")


class PageInfo(GraphQLModel):
    """Cursor pagination state of a connection."""

    has_next_page: bool = Field(alias="hasNextPage")
    end_cursor: str | None = Field(default=None, alias="endCursor")


class GitHubPullRequestNode(GraphQLModel):
    """A merged pull request as returned by the pull request and commit queries."""

    number: int = Field(description="PR number")
    title: str = Field(description="PR title")
    author: GitHubActor | None = Field(default=None, description="PR author (null for ghost)")
    merged_at: str | None = Field(default=None, alias="mergedAt")

    @property
    def author_login(self) -> str | None:
        return self.author.login if self.author else None

    @property
    def merged_on(self) -> date | None:
        """Merge date, or None when the PR carries no merge timestamp."""
        if not self.merged_at:
            return None
        return parse_github_date(self.merged_at)


class PullRequestEdge(GraphQLModel):
    node: GitHubPullRequestNode


class PullRequestPage(GraphQLModel):
    """One page of ``repository.pullRequests``."""

    edges: list[PullRequestEdge] = Field(default_factory=list)
    page_info: PageInfo = Field(alias="pageInfo")

    @property
    def nodes(self) -> list[GitHubPullRequestNode]:
        return [edge.node for edge in self.edges]


class AssociatedPullRequests(GraphQLModel):
    nodes: list[GitHubPullRequestNode] = Field(default_factory=list)


class GitHubCommitNode(GraphQLModel):
    """A commit from the default branch history."""

    oid: str = Field(description="Commit SHA")
    author: GitHubGitActor | None = Field(default=None)
    committed_date: str = Field(alias="committedDate")
    associated_pull_requests: AssociatedPullRequests = Field(
        default_factory=AssociatedPullRequests,
        alias="associatedPullRequests",
    )

    @property
    def author_login(self) -> str | None:
        """GitHub login of the commit author, None if git author maps to no account."""
        if self.author is None or self.author.user is None:
            return None
        return self.author.user.login

    @property
    def associated_pull_request(self) -> GitHubPullRequestNode | None:
        """The pull request this commit landed through, if any (at most one is requested)."""
        nodes = self.associated_pull_requests.nodes
        return nodes[0] if nodes else None


class CommitEdge(GraphQLModel):
    node: GitHubCommitNode


class CommitHistoryPage(GraphQLModel):
    """One page of ``defaultBranchRef.target.history``."""

    edges: list[CommitEdge] = Field(default_factory=list)
    page_info: PageInfo = Field(alias="pageInfo")

    @property
    def nodes(self) -> list[GitHubCommitNode]:
        return [edge.node for edge in self.edges]
