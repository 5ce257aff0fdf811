"""Main CLI application for lottery-factor."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from lottery_factor import __version__
from lottery_factor.cli import sync as sync_cmd
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
from lottery_factor.config import get_settings
from lottery_factor.db import (
    MainlineCommitRepository,
    PullRequestRepository,
    create_tables,
    dispose_engine,
    get_session,
)
from lottery_factor.github import GitHubClient, OutputFormat, SyncResult
from lottery_factor.logging import setup_logging
from lottery_factor.report import LotteryReport, build_report, write_report
from lottery_factor.schemas import ContributorCount, YoloCoder

app = typer.Typer(
    name="lottery-factor",
    help="Lottery factor and YOLO coder reports for GitHub repositories.",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"lottery-factor version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-error output (WARNING level).",
        ),
    ] = False,
) -> None:
    """Lottery Factor - who would your repository miss most?"""
    settings = get_settings()
    log_config = settings.logging

    setup_logging(
        level=settings.log_level,
        verbose=verbose,
        quiet=quiet,
        log_file=Path(log_config.log_file) if log_config.log_file else None,
        rotation=log_config.rotation,
        retention=log_config.retention,
        serialize=log_config.serialize,
    )


@app.command()
def report(
    repo: RepoArgument,
    days: DaysOption = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output HTML file (default: <owner>-<name>-lottery.html)",
        ),
    ] = None,
    top: Annotated[
        int | None,
        typer.Option(
            "--top",
            min=1,
            help="Contributors listed individually (default from REPORT__TOP_DISPLAY_COUNT, 5)",
        ),
    ] = None,
    database: DatabaseOption = None,
) -> None:
    """Sync a repository and write its lottery factor HTML report.

    The report is not written when either sync phase failed.

    Examples:
        lottery-factor report rails/rails
        lottery-factor report rails/rails -t 90 -o rails.html -d cache.db
    """
    owner, name = validate_repo(repo)
    window = resolve_days(days)
    use_database(database)

    report_config = get_settings().report
    if top is not None:
        report_config = report_config.model_copy(update={"top_display_count": top})

    async def _report() -> tuple[SyncResult, LotteryReport | None]:
        try:
            await create_tables()
            async with GitHubClient() as client:
                async with get_session() as session:
                    result = await sync_cmd.build_orchestrator(client, session).sync(
                        owner, name, window
                    )
                    if not result.success:
                        return result, None

                    contributors = await PullRequestRepository(session).get_contributors(
                        owner, name
                    )
                    yolo_coders = await MainlineCommitRepository(session).get_yolo_coders(
                        owner, name, window
                    )
                    return result, build_report(
                        owner, name, window, contributors, yolo_coders, report_config
                    )
        finally:
            await dispose_engine()

    result, lottery_report = run_async_command(_report(), error_prefix="Report failed")
    sync_cmd.print_sync_result(result)

    if lottery_report is None:
        console.print("[red]Failed to update data, HTML not generated.[/red]")
        raise typer.Exit(1)

    try:
        path = write_report(lottery_report, output)
    except OSError as e:
        console.print(f"[red]Report failed:[/red] could not write HTML: {e}")
        raise typer.Exit(1) from None
    console.print(f"Report written to {path}")
    console.print(
        f"[bold]{lottery_report.risk_level.value}[/bold] risk: top "
        f"{len(lottery_report.top_contributors)} contributors made "
        f"{lottery_report.top_percentage}% of {lottery_report.total_prs} pull requests"
    )


@app.command()
def contributors(
    repo: RepoArgument,
    database: DatabaseOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show cached merged PR counts per author (no GitHub calls)."""
    owner, name = validate_repo(repo)
    use_database(database)

    async def _query() -> list[ContributorCount]:
        try:
            await create_tables()
            async with get_session() as session:
                return await PullRequestRepository(session).get_contributors(owner, name)
        finally:
            await dispose_engine()

    rows = run_async_command(_query())

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([row._asdict() for row in rows]))
        return

    table = Table(title=f"Contributors to {owner}/{name}")
    table.add_column("Contributor")
    table.add_column("Pull Requests", justify="right")
    for row in rows:
        table.add_row(row.author, str(row.pr_count))
    console.print(table)


@app.command()
def yolo(
    repo: RepoArgument,
    days: DaysOption = None,
    database: DatabaseOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show cached direct pushes to the default branch (no GitHub calls)."""
    owner, name = validate_repo(repo)
    window = resolve_days(days)
    use_database(database)

    async def _query() -> list[YoloCoder]:
        try:
            await create_tables()
            async with get_session() as session:
                return await MainlineCommitRepository(session).get_yolo_coders(
                    owner, name, window
                )
        finally:
            await dispose_engine()

    rows = run_async_command(_query())

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([row._asdict() for row in rows]))
        return

    table = Table(title=f"YOLO coders in {owner}/{name} (last {window} days)")
    table.add_column("Contributor")
    table.add_column("Commits", justify="right")
    table.add_column("Latest SHA")
    for row in rows:
        table.add_row(row.author, str(row.commit_count), row.shas[0][:7])
    console.print(table)


@app.command("init-db")
def init_db(database: DatabaseOption = None) -> None:
    """Create the cache tables if they do not exist."""
    use_database(database)

    async def _init() -> None:
        try:
            await create_tables()
        finally:
            await dispose_engine()

    run_async_command(_init())
    console.print("[green]Database ready.[/green]")


app.command("sync")(sync_cmd.sync_repository)


if __name__ == "__main__":
    app()
