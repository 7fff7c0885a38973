"""CLI interface for dirkill."""

import logging
import time
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from dirkill import __version__
from dirkill.classifier import parse_exclusions
from dirkill.coordinator import ScanCoordinator, sort_entries
from dirkill.display import RichConfirmPrompt, ScanSpinner, console, show_aborted, show_entries
from dirkill.errors import DirkillError
from dirkill.models import DEFAULT_TARGET, ScanConfig, SortBy
from dirkill.remover import BackgroundRemover
from dirkill.session import SessionState, confirm_bulk_delete
from dirkill.tui.app import run_tui

log = logging.getLogger(__name__)

app = typer.Typer(
    name="dirkill",
    help="Find dependency-cache directories (node_modules by default) and delete them interactively",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"dirkill version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool, log_file: Optional[Path]) -> None:
    """Set up logging; records go to a file when given, else to stderr via rich."""
    level = logging.DEBUG if verbose else logging.WARNING
    if log_file:
        logging.basicConfig(
            filename=str(log_file),
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    else:
        logging.basicConfig(
            level=level,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


@app.command()
def main(
    directory: str = typer.Option(
        ".", "--directory", "-d", help="Directory to start searching from."
    ),
    exclude_hidden: bool = typer.Option(
        False,
        "--exclude-hidden-directories",
        "-x",
        help="Skip hidden and system-like locations (dot directories, .app bundles, AppData).",
    ),
    target: str = typer.Option(
        DEFAULT_TARGET,
        "--target",
        "-t",
        envvar="DIRKILL_TARGET",
        help="Name of the directories to search for.",
    ),
    full: bool = typer.Option(
        False, "--full", "-f", help="Start searching from the home directory."
    ),
    gb: bool = typer.Option(False, "--gb", help="Show sizes in gigabytes instead of megabytes."),
    exclude: Optional[str] = typer.Option(
        None,
        "--exclude",
        "-E",
        help='Comma-separated path substrings to skip, e.g. "ignore1, ignore2".',
    ),
    sort: Optional[SortBy] = typer.Option(
        None, "--sort", "-s", case_sensitive=False, help="Sort results by size, path or last-mod."
    ),
    delete_all: bool = typer.Option(
        False, "--delete-all", help="Delete every match (asks for confirmation first)."
    ),
    deep_size: bool = typer.Option(
        True,
        "--deep-size/--fast",
        help="Measure each match recursively (--fast uses the directory's own stat size).",
    ),
    list_only: bool = typer.Option(
        False, "--list", help="Print the matches and exit instead of opening the TUI."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Write log records to this file."
    ),
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Find directories named TARGET and delete the ones you pick.

    In the browser, use Up/Down to move, Space to delete the highlighted
    directory and q to quit.

    Known limitation: deletion is optimistic. A directory is marked deleted
    and counted in "Total Deleted" as soon as you pick it, and the removal
    runs in the background. A removal that fails (e.g. permission denied)
    is not reported and the total is not corrected.
    """
    configure_logging(verbose, log_file)

    try:
        config = ScanConfig(
            directory=directory,
            target=target,
            exclude_hidden=exclude_hidden,
            full=full,
            in_gb=gb,
            exclude=parse_exclusions(exclude),
            sort=sort,
            delete_all=delete_all,
            deep_size=deep_size,
        )
    except ValidationError as e:
        console.print(f"[red]Error: {escape(e.errors()[0]['msg'])}[/red]")
        raise typer.Exit(1)

    if config.delete_all and not confirm_bulk_delete(config.target, RichConfirmPrompt()):
        show_aborted()
        raise typer.Exit()

    start = time.perf_counter()
    try:
        entries = ScanCoordinator().run(config, feedback=ScanSpinner())
    except DirkillError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    scan_duration = time.perf_counter() - start
    log.debug("scan finished in %.2fs with %d match(es)", scan_duration, len(entries))

    entries = sort_entries(entries, config.sort)

    remover = BackgroundRemover()
    session = SessionState(entries, scan_duration, remover, bulk_delete=config.delete_all)
    try:
        if list_only:
            show_entries(session.view(in_gb=config.in_gb))
        else:
            run_tui(session, target=config.target, in_gb=config.in_gb)
    finally:
        finish_removals(remover)


def finish_removals(remover: BackgroundRemover) -> None:
    """Wait for queued removals, showing a status while any are still running."""
    pending = remover.pending
    if not pending:
        remover.shutdown(wait=True)
        return
    with console.status(f"Finishing {pending} removal(s)...", spinner="dots"):
        remover.shutdown(wait=True)
