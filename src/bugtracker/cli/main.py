"""Bug tracker CLI entry point."""
from __future__ import annotations

import click

from bugtracker.config import BugTrackerConfig


def _open_db(path: str):
    from bugtracker.store.db import Database
    from bugtracker.store.migrations import run_migrations

    database = Database(path)
    database.connect()
    run_migrations(database)
    return database


@click.group()
@click.option("--log-level", default=None, help="Logging level (default from config)")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Bug tracker: report, triage and query bugs."""
    from bugtracker.logging_config import setup_logging

    config = BugTrackerConfig.from_env()
    ctx.obj = config
    setup_logging((log_level or config.log_level).upper())


@cli.command()
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to bind to")
@click.option("--db", default=None, help="Database path")
@click.option("--debug/--no-debug", default=False, help="Enable development mode")
@click.pass_obj
def serve(
    config: BugTrackerConfig, host: str | None, port: int | None, db: str | None, debug: bool
) -> None:
    """Start the bug tracker web server."""
    import dataclasses

    from bugtracker.web.app import create_app

    config = dataclasses.replace(
        config,
        host=host or config.host,
        port=port or config.port,
        db_path=db or config.db_path,
        env="development" if debug else config.env,
    )
    app = create_app(db=_open_db(config.db_path), config=config)
    click.echo(f"Starting bug tracker on {config.host}:{config.port}")
    app.run(host=config.host, port=config.port, debug=config.is_development)


@cli.command()
@click.option("--title", required=True, help="Bug title")
@click.option("--description", required=True, help="What went wrong")
@click.option("--reported-by", required=True, help="Reporter name")
@click.option(
    "--priority",
    type=click.Choice(["low", "medium", "high", "critical"]),
    default="medium",
    help="Bug priority",
)
@click.option("--assigned-to", default="", help="Assignee name")
@click.option("--step", "steps", multiple=True, help="Reproduction step (repeatable)")
@click.option("--db", default=None, help="Database path")
@click.pass_obj
def report(
    config: BugTrackerConfig,
    title: str,
    description: str,
    reported_by: str,
    priority: str,
    assigned_to: str,
    steps: tuple[str, ...],
    db: str | None,
) -> None:
    """Report a new bug."""
    from bugtracker.errors import ValidationError
    from bugtracker.service import BugService
    from bugtracker.store.repositories import BugRepository

    database = _open_db(db or config.db_path)
    try:
        bug = BugService(BugRepository(database)).create(
            {
                "title": title,
                "description": description,
                "reportedBy": reported_by,
                "priority": priority,
                "assignedTo": assigned_to,
                "stepsToReproduce": list(steps),
            }
        )
    except ValidationError as exc:
        for error in exc.errors:
            click.echo(f"{error.field}: {error.message}", err=True)
        raise click.ClickException(exc.message) from exc
    finally:
        database.close()

    click.echo(f"Bug reported: {bug.id}")


@cli.command("list")
@click.option("--status", default=None, help="Filter by status")
@click.option("--priority", default=None, help="Filter by priority")
@click.option("--search", default=None, help="Case-insensitive title search")
@click.option("--reported-by", default=None, help="Case-insensitive reporter name match")
@click.option("--assigned-to", default=None, help="Case-insensitive assignee name match")
@click.option("--sort", default=None, help="Sort fields, e.g. -priority,createdAt")
@click.option("--page", default=1, type=int, help="Page number")
@click.option("--limit", default=None, type=int, help="Page size")
@click.option("--db", default=None, help="Database path")
@click.pass_obj
def list_bugs(
    config: BugTrackerConfig,
    status: str | None,
    priority: str | None,
    search: str | None,
    reported_by: str | None,
    assigned_to: str | None,
    sort: str | None,
    page: int,
    limit: int | None,
    db: str | None,
) -> None:
    """List bugs matching the given filters."""
    from bugtracker.errors import ValidationError
    from bugtracker.query.builder import build_query
    from bugtracker.query.executor import QueryExecutor
    from bugtracker.store.repositories import BugRepository

    query = build_query(
        {
            "status": status,
            "priority": priority,
            "search": search,
            "reportedBy": reported_by,
            "assignedTo": assigned_to,
            "sort": sort,
            "page": page,
            "limit": limit,
        },
        default_limit=config.default_page_size,
        max_limit=config.max_page_size,
    )
    database = _open_db(db or config.db_path)
    try:
        result = QueryExecutor(BugRepository(database)).execute(query)
    except ValidationError as exc:
        raise click.ClickException(exc.message) from exc
    finally:
        database.close()

    for bug in result.items:
        click.echo(
            f"{bug.id}  {bug.status:<11}  {bug.priority:<8}  {bug.title}"
        )
    p = result.pagination
    click.echo(f"Page {p.page}/{p.pages} ({p.total} bugs)")


@cli.command()
@click.option("--db", default=None, help="Database path")
@click.pass_obj
def stats(config: BugTrackerConfig, db: str | None) -> None:
    """Show bug counts by status and priority."""
    from bugtracker.query.aggregator import Aggregator
    from bugtracker.store.repositories import BugRepository

    database = _open_db(db or config.db_path)
    try:
        summary = Aggregator(BugRepository(database)).summary()
    finally:
        database.close()

    click.echo(f"Total: {summary.total_bugs}")
    click.echo(f"Open: {summary.open_bugs}")
    click.echo(f"Resolved: {summary.resolved_bugs}")
    click.echo("By status:")
    for group in summary.status_distribution:
        click.echo(f"  {group.key}: {group.count}")
    click.echo("By priority:")
    for group in summary.priority_distribution:
        click.echo(f"  {group.key}: {group.count}")


@cli.command()
@click.option("--db", default=None, help="Database path")
@click.pass_obj
def seed(config: BugTrackerConfig, db: str | None) -> None:
    """Insert a few sample bugs."""
    from bugtracker.sample_data import seed_sample_bugs
    from bugtracker.service import BugService
    from bugtracker.store.repositories import BugRepository

    database = _open_db(db or config.db_path)
    try:
        created = seed_sample_bugs(BugService(BugRepository(database)))
    finally:
        database.close()
    click.echo(f"Seeded {len(created)} bugs")
