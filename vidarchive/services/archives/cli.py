"""CLI for managing archives."""

import json
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from vidarchive.lib.config_manager import config
from vidarchive.lib.defaults import get_category
from vidarchive.lib.logging_config import setup_logging

from .errors import ArchiveClientError
from .manager import Archives, create_archive_manager
from .models import Archive, ArchiveOptions


app = typer.Typer(help="Start, inspect and remove session archives")
console = Console()


def get_manager() -> Archives:
    """Build the manager used by every command."""
    return create_archive_manager()


def _print_archive(archive: Archive, as_json: bool) -> None:
    if as_json:
        console.print_json(json.dumps(archive.to_json()))
        return

    table = Table(show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    created = archive.created_at_datetime
    table.add_row("ID", archive.id)
    table.add_row("Status", archive.status or "")
    table.add_row("Name", archive.name or "")
    table.add_row("Session", archive.session_id or "")
    table.add_row("Created", created.isoformat() if created else "")
    table.add_row("Duration", f"{archive.duration:g}s" if archive.duration is not None else "")
    table.add_row("URL", archive.url or "")
    console.print(table)


def _fail(error: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Log level (defaults to LOG_LEVEL)"
    ),
):
    """Configure logging before any command runs."""
    setup_logging("vidarchive-cli", log_level or config.get("LOG_LEVEL"))


@app.command()
def create(
    session_id: str = typer.Argument(..., help="Session to record"),
    name: str = typer.Option("", "--name", "-n", help="Archive name"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """Start archiving a session."""
    try:
        archive = get_manager().create(session_id, ArchiveOptions(name=name))
    except (ArchiveClientError, ValueError) as e:
        _fail(e)
    _print_archive(archive, as_json)


@app.command()
def find(
    archive_id: str = typer.Argument(..., help="Archive ID"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """Show one archive."""
    try:
        archive = get_manager().find(archive_id)
    except (ArchiveClientError, ValueError) as e:
        _fail(e)
    _print_archive(archive, as_json)


@app.command("list")
def list_archives(
    offset: Optional[int] = typer.Option(None, help="Skip this many recent archives"),
    count: Optional[int] = typer.Option(None, help="Number of archives to show (0-100)"),
):
    """List archives, most recent first."""
    try:
        archives = get_manager().all(offset=offset, count=count)
    except (ArchiveClientError, ValueError) as e:
        _fail(e)

    table = Table(title=f"Archives ({len(archives)} of {archives.total})")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Status")
    table.add_column("Session")
    table.add_column("Duration", justify="right")
    for archive in archives:
        table.add_row(
            archive.id,
            archive.name or "",
            archive.status or "",
            archive.session_id or "",
            f"{archive.duration:g}s" if archive.duration is not None else "",
        )
    console.print(table)


@app.command()
def stop(
    archive_id: str = typer.Argument(..., help="Archive ID"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """Stop a recording archive."""
    try:
        archive = get_manager().stop_by_id(archive_id)
    except (ArchiveClientError, ValueError) as e:
        _fail(e)
    _print_archive(archive, as_json)


@app.command()
def delete(archive_id: str = typer.Argument(..., help="Archive ID")):
    """Delete an archive."""
    try:
        deleted = get_manager().delete_by_id(archive_id)
    except (ArchiveClientError, ValueError) as e:
        _fail(e)

    if not deleted:
        console.print(f"[bold yellow]Archive {archive_id} was not deleted[/bold yellow]")
        raise typer.Exit(1)
    console.print(f"[bold green]Deleted archive {archive_id}[/bold green]")


@app.command("config")
def show_config():
    """Show resolved settings. Secrets are masked."""
    table = Table(title="Configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Category")
    table.add_column("Value")
    for key, value in config.get_all().items():
        table.add_row(key, get_category(key) or "", config.mask_value(key, value))
    console.print(table)


if __name__ == "__main__":
    app()
