"""Main TUI application for dirkill."""

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import DataTable, Footer, Header, Static

from dirkill.display import row_style
from dirkill.session import SessionAction, SessionState
from dirkill.tui.widgets import SessionSummary


class DirkillApp(App):
    """Interactive browser over the discovered directories."""

    TITLE = "dirkill"

    CSS = """
    #summary {
        height: 3;
        border: round $primary;
        padding: 0 1;
    }
    #entries {
        height: 1fr;
    }
    #empty {
        height: 1fr;
        border: round $primary;
        content-align: center middle;
    }
    """

    # Priority bindings so the table's own cursor keys never bypass the session
    BINDINGS = [
        Binding("up", "cursor_up", "Up", show=False, priority=True),
        Binding("down", "cursor_down", "Down", show=False, priority=True),
        Binding("space", "delete_entry", "Delete", priority=True),
        Binding("q", "quit_session", "Quit", priority=True),
    ]

    def __init__(self, session: SessionState, target: str, in_gb: bool = False):
        super().__init__()
        self.session = session
        self.in_gb = in_gb
        self.sub_title = f"{target} directories"

    def compose(self) -> ComposeResult:
        yield Header()
        yield SessionSummary(id="summary")
        if self.session.entries:
            yield DataTable(id="entries", cursor_type="row")
        else:
            yield Static("No directories found", id="empty")
        yield Footer()

    def on_mount(self) -> None:
        """Called when the app is mounted."""
        if self.session.entries:
            table = self.query_one("#entries", DataTable)
            table.add_columns("", "Path", "Age", "Size")
        self.refresh_view()

    def refresh_view(self) -> None:
        """Redraw the summary and every row from the session."""
        view = self.session.view(in_gb=self.in_gb)
        self.query_one("#summary", SessionSummary).update_header(view.header)

        if view.cursor is None:
            return

        table = self.query_one("#entries", DataTable)
        table.clear()
        for row in view.rows:
            style = row_style(row.deleted, row.is_sensitive)
            table.add_row(
                Text(row.marker, style=style),
                Text(row.path, style=style),
                Text(row.age, style=style, justify="right"),
                Text(row.size, style=style, justify="right"),
            )
        table.move_cursor(row=view.cursor)

    def _sync_cursor(self) -> None:
        if self.session.entries:
            self.query_one("#entries", DataTable).move_cursor(row=self.session.cursor)

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        # Mouse clicks move the table cursor; the session cursor is authoritative
        if event.cursor_row != self.session.cursor:
            self._sync_cursor()

    def action_cursor_up(self) -> None:
        self.session.handle(SessionAction.UP)
        self._sync_cursor()

    def action_cursor_down(self) -> None:
        self.session.handle(SessionAction.DOWN)
        self._sync_cursor()

    def action_delete_entry(self) -> None:
        self.session.handle(SessionAction.SELECT)
        self.refresh_view()

    def action_quit_session(self) -> None:
        self.session.handle(SessionAction.QUIT)
        self.exit()


def run_tui(session: SessionState, target: str, in_gb: bool = False) -> None:
    """Run the interactive TUI until the operator quits.

    Args:
        session: Session built from the finished scan
        target: Directory name that was matched (shown in the title)
        in_gb: Show sizes in GiB instead of MiB
    """
    app = DirkillApp(session, target=target, in_gb=in_gb)
    app.run()
