"""Interactive session state: cursor, optimistic deletion and accounting.

Deletion is a two-phase intent. ``SessionState.select`` commits the
deletion to the session synchronously (entry flagged, bytes counted) and
then hands the path to a ``Remover`` that works in the background. The
removal outcome is never read back: if it fails, the entry still shows as
deleted and its bytes stay counted. Keep it that way; the interactive loop
must not block on, or be driven by, filesystem removals.
"""

from enum import Enum
from typing import Optional, Protocol

from pydantic import BaseModel, Field

from dirkill.models import DiscoveredEntry, format_size
from dirkill.remover import Remover

CONFIRM_KEY = "y"
DELETED_MARKER = "[deleted]"


class SessionPhase(str, Enum):
    """Phases of an interactive session."""

    ACTIVE = "active"
    EXITED = "exited"


class SessionAction(str, Enum):
    """Input events the session understands."""

    UP = "up"
    DOWN = "down"
    SELECT = "select"
    QUIT = "quit"


class ConfirmPrompt(Protocol):
    """Shows a warning and returns the operator's answer."""

    def ask(self, warning: str, instructions: str) -> str: ...


def confirm_bulk_delete(target: str, prompt: ConfirmPrompt) -> bool:
    """
    Ask the operator to confirm deleting every match.

    Args:
        target: Directory name being matched
        prompt: Prompt used to show the warning and read the answer

    Returns:
        True only if the answer is exactly the confirm key
    """
    answer = prompt.ask(
        f"WARNING: You are about to delete ALL {target} directories!",
        f"Type '{CONFIRM_KEY}' to confirm, anything else cancels",
    )
    return answer.strip().lower() == CONFIRM_KEY


class SessionHeader(BaseModel):
    """Summary line above the entry list."""

    total_bytes: int
    entry_count: int
    scan_duration: float = Field(..., description="Seconds spent scanning")
    reclaimed_bytes: int


class SessionRow(BaseModel):
    """One rendered entry."""

    marker: str
    path: str
    age: str
    size: str
    deleted: bool
    is_sensitive: bool


class SessionView(BaseModel):
    """Everything the presenter needs to draw one frame."""

    header: SessionHeader
    rows: list[SessionRow] = Field(default_factory=list)
    cursor: Optional[int] = Field(None, description="Highlighted row, None when empty")


class SessionState:
    """Owns the discovered entries for the lifetime of the interactive view."""

    def __init__(
        self,
        entries: list[DiscoveredEntry],
        scan_duration: float,
        remover: Remover,
        bulk_delete: bool = False,
    ) -> None:
        self.entries = entries
        self.scan_duration = scan_duration
        self.remover = remover
        self.bulk_delete = bulk_delete
        self.cursor = 0
        self.reclaimed_bytes = 0
        self.phase = SessionPhase.ACTIVE
        self.total_bytes = sum(e.size for e in entries)

    @property
    def current(self) -> Optional[DiscoveredEntry]:
        """Entry under the cursor, if any."""
        if not self.entries:
            return None
        return self.entries[self.cursor]

    def move_up(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1

    def move_down(self) -> None:
        if self.cursor < len(self.entries) - 1:
            self.cursor += 1

    def _delete(self, entry: DiscoveredEntry) -> None:
        entry.deleted = True
        self.reclaimed_bytes += entry.size
        self.remover.remove(entry.path)

    def select(self) -> None:
        """Delete the entry under the cursor unless it is already deleted."""
        entry = self.current
        if entry is None or entry.deleted:
            return
        self._delete(entry)

    def quit(self) -> None:
        self.phase = SessionPhase.EXITED

    def handle(self, action: SessionAction) -> None:
        """Apply one input event."""
        if self.phase is not SessionPhase.ACTIVE:
            return

        if action == SessionAction.UP:
            self.move_up()
        elif action == SessionAction.DOWN:
            self.move_down()
        elif action == SessionAction.SELECT:
            self.select()
        elif action == SessionAction.QUIT:
            self.quit()

    def view(self, in_gb: bool = False) -> SessionView:
        """
        Build the view model for one render pass.

        In bulk-delete mode every entry that is not yet deleted is deleted
        while the rows are built, so each removal is dispatched exactly once.

        Args:
            in_gb: Show row sizes in GiB instead of MiB

        Returns:
            SessionView for the presenter
        """
        rows = []
        for entry in self.entries:
            if self.bulk_delete and not entry.deleted:
                self._delete(entry)

            rows.append(
                SessionRow(
                    marker=DELETED_MARKER if entry.deleted else "",
                    path=entry.path,
                    age=entry.age_human,
                    size=format_size(entry.size, in_gb),
                    deleted=entry.deleted,
                    is_sensitive=entry.is_sensitive,
                )
            )

        return SessionView(
            header=SessionHeader(
                total_bytes=self.total_bytes,
                entry_count=len(self.entries),
                scan_duration=self.scan_duration,
                reclaimed_bytes=self.reclaimed_bytes,
            ),
            rows=rows,
            cursor=self.cursor if self.entries else None,
        )
