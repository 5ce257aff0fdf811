"""Repository identifier parsing."""

import re

_SEGMENT = re.compile(r"^[A-Za-z0-9._-]+$")


def parse_repo_string(repo: str) -> tuple[str, str]:
    """Split an ``owner/name`` string into its parts.

    Args:
        repo: Repository in owner/name format (e.g., "rails/rails")

    Returns:
        Tuple of (owner, name)

    Raises:
        ValueError: If the string is not exactly two non-empty segments
    """
    parts = repo.strip().split("/")
    if len(parts) != 2:
        raise ValueError(f"Invalid repository format: {repo!r}. Use 'owner/name'.")

    owner, name = parts
    if not _SEGMENT.match(owner) or not _SEGMENT.match(name):
        raise ValueError(f"Invalid repository format: {repo!r}. Use 'owner/name'.")
    return owner, name
