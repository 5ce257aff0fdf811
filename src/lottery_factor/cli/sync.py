"""Sync command: refresh the local cache from GitHub."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import typer

from lottery_factor.cli.common import (
    DatabaseOption,
    DaysOption,
    OutputFormatOption,
    RepoArgument,
    console,
    resolve_days,
    run_async_command,
    use_database,
    validate_repo,
)
from lottery_factor.db import (
    MainlineCommitRepository,
    PullRequestRepository,
    RepositoryRepository,
    create_tables,
    dispose_engine,
    get_session,
)
from lottery_factor.github import GitHubClient, OutputFormat, SyncOrchestrator, SyncResult

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from lottery_factor.github.sync import UpstreamClient


def build_orchestrator(client: UpstreamClient, session: AsyncSession) -> SyncOrchestrator:
    """Wire an orchestrator to the stores of one session."""
    pr_repository = PullRequestRepository(session)
    return SyncOrchestrator(
        client=client,
        repo_repository=RepositoryRepository(session),
        pr_repository=pr_repository,
        commit_repository=MainlineCommitRepository(session, pr_repository),
    )


def print_sync_result(result: SyncResult) -> None:
    """Human-readable summary of both sync phases."""
    for phase in (result.pull_requests, result.commits):
        label = phase.phase.label.capitalize()
        if phase.skipped:
            console.print(f"[dim]{label}: cache already covers {result.days} days[/dim]")
        elif phase.success:
            console.print(
                f"[green]{label}:[/green] {phase.records} processed over {phase.pages} page(s)"
            )
        else:
            console.print(f"[red]{label}:[/red] failed after {phase.pages} page(s): {phase.error}")


def sync_repository(
    repo: RepoArgument,
    days: DaysOption = None,
    database: DatabaseOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Sync merged PRs and default branch commits for a repository.

    Examples:
        lottery-factor sync rails/rails
        lottery-factor sync rails/rails --days 90 --format json
    """
    owner, name = validate_repo(repo)
    window = resolve_days(days)
    use_database(database)

    async def _sync() -> SyncResult:
        try:
            await create_tables()
            async with GitHubClient() as client:
                async with get_session() as session:
                    return await build_orchestrator(client, session).sync(owner, name, window)
        finally:
            await dispose_engine()

    result = run_async_command(_sync(), error_prefix="Sync failed")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result.to_dict()))
    else:
        print_sync_result(result)

    if not result.success:
        raise typer.Exit(1)
