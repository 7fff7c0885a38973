"""Rich terminal display for dirkill."""

import threading
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from dirkill.models import format_size
from dirkill.session import SessionHeader, SessionView

console = Console()

SPINNER_INTERVAL = 0.08


def header_cells(header: SessionHeader) -> list[str]:
    """Summary cells shown above the entry list."""
    return [
        f"Total Size: {format_size(header.total_bytes, in_gb=True)}",
        f"Matches: {header.entry_count}",
        f"Scan Time: {header.scan_duration:.2f}s",
        f"Total Deleted: {format_size(header.reclaimed_bytes, in_gb=True)}",
    ]


def row_style(deleted: bool, is_sensitive: bool) -> str:
    """Deleted rows in red, sensitive ones in yellow."""
    if deleted:
        return "red"
    elif is_sensitive:
        return "yellow"
    return ""


class ScanSpinner:
    """Transient "scanning" indicator running on its own thread.

    The thread polls a stop flag between frames; ``stop`` sets the flag and
    waits for the thread so the indicator is gone before anything else draws.
    """

    def __init__(self, out: Optional[Console] = None, interval: float = SPINNER_INTERVAL):
        self.console = out or console
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._completed = 0
        self._total = 0

    def _message(self) -> str:
        if self._total:
            return f"Scanning directories... ({self._completed}/{self._total})"
        return "Scanning directories..."

    def _spin(self) -> None:
        with self.console.status(self._message(), spinner="dots") as status:
            while not self._stop.is_set():
                status.update(self._message())
                self._stop.wait(self.interval)

    def start(self) -> None:
        self._stop.clear()
        self._thread = threading.Thread(target=self._spin, name="dirkill-spinner")
        self._thread.start()

    def advance(self, completed: int, total: int) -> None:
        self._completed = completed
        self._total = total

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None


class RichConfirmPrompt:
    """Confirmation prompt drawn with rich; returns the whole answer typed."""

    def __init__(self, out: Optional[Console] = None):
        self.console = out or console

    def ask(self, warning: str, instructions: str) -> str:
        self.console.print(
            Panel(f"[bold yellow]{escape(warning)}[/bold yellow]", border_style="yellow")
        )
        try:
            answer = self.console.input(f"{instructions}: ")
        except (EOFError, KeyboardInterrupt):
            return ""
        return answer.strip()


def show_entries(view: SessionView) -> None:
    """Print the scan result as a table (non-interactive list mode)."""
    summary = Table(show_header=False, box=None)
    for _ in range(4):
        summary.add_column()
    summary.add_row(*header_cells(view.header))
    console.print(summary)
    console.print()

    if not view.rows:
        console.print(Panel("No directories found", title="Directories", border_style="blue"))
        return

    table = Table(title="Directories", show_header=True, header_style="bold")
    table.add_column("Path")
    table.add_column("Age", justify="right")
    table.add_column("Size", justify="right")

    for row in view.rows:
        style = row_style(row.deleted, row.is_sensitive) or None
        table.add_row(Text(row.path), row.age, row.size, style=style)

    console.print(table)


def show_aborted() -> None:
    console.print("[yellow]Aborted - nothing was deleted[/yellow]")
