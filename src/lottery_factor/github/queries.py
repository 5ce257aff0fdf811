"""GraphQL documents sent to the GitHub API."""

PULL_REQUESTS_QUERY = """
query($owner: String!, $name: String!, $cursor: String, $pageSize: Int!) {
  repository(owner: $owner, name: $name) {
    pullRequests(
      first: $pageSize
      states: MERGED
      after: $cursor
      orderBy: {field: UPDATED_AT, direction: DESC}
    ) {
      pageInfo {
        endCursor
        hasNextPage
      }
      edges {
        node {
          number
          title
          author {
            login
          }
          mergedAt
        }
      }
    }
  }
}
"""

DIRECT_COMMITS_QUERY = """
query($owner: String!, $name: String!, $since: GitTimestamp!, $cursor: String, $pageSize: Int!) {
  repository(owner: $owner, name: $name) {
    defaultBranchRef {
      target {
        ... on Commit {
          history(first: $pageSize, since: $since, after: $cursor) {
            pageInfo {
              hasNextPage
              endCursor
            }
            edges {
              node {
                oid
                author {
                  user {
                    login
                  }
                }
                committedDate
                associatedPullRequests(first: 1) {
                  nodes {
                    number
                    title
                    author {
                      login
                    }
                    mergedAt
                  }
                }
              }
            }
          }
        }
      }
    }
  }
}
"""
