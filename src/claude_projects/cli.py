from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click
import questionary
from click_default_group import DefaultGroup
from rich.console import Console
from rich.logging import RichHandler

from .catalog import ProjectCatalog
from .errors import CatalogError
from .formatters import render_projects_table, render_sessions_table, to_json
from .server.app import run_server


@click.group(cls=DefaultGroup, default="serve", default_if_no_args=True)
@click.option(
    "--projects-dir",
    type=click.Path(path_type=Path),
    default=None,
    help="Projects log directory override",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Project config file override",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context, projects_dir: Path | None, config_path: Path | None, verbose: bool
) -> None:
    """Browse Claude Code projects and sessions via CLI or web API."""
    _configure_logging(verbose)
    ctx.obj = ProjectCatalog.from_paths(projects_dir, config_path)


@cli.command()
@click.option("--port", default=8766, show_default=True, help="Port to serve on")
@click.option("--host", default="127.0.0.1", show_default=True, help="Host to bind to")
@click.option("--no-open", is_flag=True, help="Don't open browser automatically")
@click.pass_obj
def serve(catalog: ProjectCatalog, port: int, host: str, no_open: bool) -> None:
    """Serve the project catalog over HTTP."""
    click.echo(f"\nStarting server at http://{host}:{port}")
    run_server(catalog, host, port, open_browser=not no_open)


@cli.command(name="list")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    show_default=True,
)
@click.pass_obj
def list_projects(catalog: ProjectCatalog, output_format: str) -> None:
    """List projects with a preview of their latest sessions."""
    projects = catalog.list()
    if output_format == "json":
        click.echo(to_json(projects))
        return
    render_projects_table(projects)


@cli.command()
@click.argument("name")
@click.option("--limit", default=5, show_default=True, type=click.IntRange(min=0))
@click.option("--offset", default=0, show_default=True, type=click.IntRange(min=0))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    show_default=True,
)
@click.pass_obj
def sessions(
    catalog: ProjectCatalog, name: str, limit: int, offset: int, output_format: str
) -> None:
    """List a project's sessions, most recent first."""
    page = catalog.sessions(name, limit=limit, offset=offset)
    if output_format == "json":
        click.echo(to_json(page))
        return
    render_sessions_table(page.sessions, title=f"{name} ({page.total} sessions)")
    if page.has_more:
        click.echo(f"More sessions available, use --offset {offset + limit}")


@cli.command()
@click.argument("name")
@click.argument("session_id")
@click.pass_obj
def messages(catalog: ProjectCatalog, name: str, session_id: str) -> None:
    """Print the raw log entries of one session as JSON."""
    click.echo(to_json(catalog.messages(name, session_id)))


@cli.command()
@click.argument("name")
@click.pass_obj
def resolve(catalog: ProjectCatalog, name: str) -> None:
    """Print the working directory resolved for a project."""
    click.echo(catalog.resolve(name))


@cli.command()
@click.argument("name")
@click.argument("display_name")
@click.pass_obj
def rename(catalog: ProjectCatalog, name: str, display_name: str) -> None:
    """Set a project's display name (empty string restores the default)."""
    with _catalog_errors():
        catalog.rename(name, display_name)
    click.echo(f"Renamed {name}" if display_name.strip() else f"Cleared display name of {name}")


@cli.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--display-name", default=None, help="Custom display name")
@click.pass_obj
def add(catalog: ProjectCatalog, path: Path, display_name: str | None) -> None:
    """Register a project directory that has no logs yet."""
    with _catalog_errors():
        project = catalog.add_manually(str(path), display_name)
    click.echo(f"Added {project.display_name} as {project.name}")


@cli.command(name="delete-project")
@click.argument("name")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_obj
def delete_project(catalog: ProjectCatalog, name: str, yes: bool) -> None:
    """Delete a project that has no sessions."""
    if not yes and not _confirm(f"Delete project {name}?"):
        click.echo("Aborted.")
        return
    with _catalog_errors():
        catalog.delete_empty(name)
    click.echo(f"Deleted project {name}")


@cli.command(name="delete-session")
@click.argument("name")
@click.argument("session_id")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_obj
def delete_session(catalog: ProjectCatalog, name: str, session_id: str, yes: bool) -> None:
    """Remove every log line of a session."""
    if not yes and not _confirm(f"Delete session {session_id} from {name}?"):
        click.echo("Aborted.")
        return
    with _catalog_errors():
        catalog.delete_session(name, session_id)
    click.echo(f"Deleted session {session_id}")


@contextmanager
def _catalog_errors() -> Iterator[None]:
    """Report catalog failures as click errors instead of tracebacks."""
    try:
        yield
    except CatalogError as exc:
        raise click.ClickException(str(exc)) from exc


def _confirm(question: str) -> bool:
    return bool(questionary.confirm(question, default=False).ask())


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
