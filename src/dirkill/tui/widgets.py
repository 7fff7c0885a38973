"""Custom widgets for the dirkill TUI."""

from textual.widgets import Static

from dirkill.display import header_cells
from dirkill.session import SessionHeader


class SessionSummary(Static):
    """Totals line: size, match count, scan time, reclaimed bytes."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.header: SessionHeader | None = None

    def update_header(self, header: SessionHeader) -> None:
        """Show new totals."""
        self.header = header
        self.update(self.render_header())

    def render_header(self) -> str:
        if not self.header:
            return "[dim]Loading...[/dim]"
        return "    ".join(f"[bold]{cell}[/bold]" for cell in header_cells(self.header))
