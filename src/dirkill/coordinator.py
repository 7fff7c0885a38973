"""Fan-out of discovery passes across the top level of the start directory."""

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Optional, Protocol

from dirkill.errors import StartupError
from dirkill.models import DiscoveredEntry, ScanConfig, SortBy
from dirkill.scanner import scan_directory

log = logging.getLogger(__name__)

# Passes mostly wait on directory reads, so allow more of them than cores
MAX_PASS_WORKERS = 32


class ScanFeedback(Protocol):
    """Progress sink running alongside the scan (e.g. a spinner)."""

    def start(self) -> None: ...

    def advance(self, completed: int, total: int) -> None: ...

    def stop(self) -> None: ...


def home_directory() -> Path:
    """Home directory from the environment (HOME, or USERPROFILE on Windows)."""
    var = "USERPROFILE" if os.name == "nt" else "HOME"
    home = os.environ.get(var)
    if not home:
        raise StartupError(f"{var} is not set; cannot locate the home directory")
    return Path(home)


def resolve_start(config: ScanConfig) -> Path:
    """
    Resolve the directory the scan starts from.

    Raises:
        StartupError: if the directory is missing, not a directory, or the
            home directory cannot be determined in full mode
    """
    start = home_directory() if config.full else Path(config.directory)

    try:
        resolved = start.resolve(strict=True)
    except OSError as e:
        raise StartupError(f"Cannot access {start}: {e}") from e

    if not resolved.is_dir():
        raise StartupError(f"Not a directory: {resolved}")

    return resolved


def list_roots(start: Path) -> list[Path]:
    """Immediate children of the start directory, one discovery pass each."""
    try:
        with os.scandir(start) as entries:
            return [Path(entry.path) for entry in entries]
    except OSError as e:
        raise StartupError(f"Cannot read {start}: {e}") from e


class ScanCoordinator:
    """Runs discovery passes concurrently and collects their results.

    The coordinator owns the result list while passes are running. Each pass
    appends its whole batch once under ``_lock``; ``run`` hands the list over
    to the caller after every pass has finished.
    """

    def __init__(self, max_workers: int = MAX_PASS_WORKERS) -> None:
        self.max_workers = max_workers
        self._lock = threading.Lock()
        self._results: list[DiscoveredEntry] = []

    def _collect(self, batch: list[DiscoveredEntry]) -> None:
        if not batch:
            return
        with self._lock:
            self._results.extend(batch)

    def _run_pass(self, root: Path, config: ScanConfig, probe_pool: ThreadPoolExecutor) -> int:
        batch = scan_directory(root, config, executor=probe_pool)
        self._collect(batch)
        return len(batch)

    def run(
        self,
        config: ScanConfig,
        feedback: Optional[ScanFeedback] = None,
    ) -> list[DiscoveredEntry]:
        """
        Scan for target directories and return every match.

        In full mode a single pass covers the home directory; otherwise one
        pass runs per top-level entry of the start directory. A pass that
        fails contributes nothing.

        Args:
            config: Scan options
            feedback: Optional progress sink, stopped once all passes joined

        Returns:
            Matches in arrival order

        Raises:
            StartupError: if the start directory cannot be resolved or read
        """
        start = resolve_start(config)
        roots = [start] if config.full else list_roots(start)
        total = len(roots)
        log.debug("scanning %d root(s) below %s for %r", total, start, config.target)

        if feedback:
            feedback.start()

        try:
            with ThreadPoolExecutor(max_workers=os.cpu_count() or 1) as probe_pool:
                with ThreadPoolExecutor(max_workers=self.max_workers) as pass_pool:
                    future_to_root = {
                        pass_pool.submit(self._run_pass, root, config, probe_pool): root
                        for root in roots
                    }

                    for i, future in enumerate(as_completed(future_to_root)):
                        root = future_to_root[future]
                        try:
                            found = future.result()
                            log.debug("pass %s found %d match(es)", root, found)
                        except Exception as e:
                            log.debug("pass %s failed: %s", root, e)

                        if feedback:
                            feedback.advance(i + 1, total)
        finally:
            if feedback:
                feedback.stop()

        with self._lock:
            results, self._results = self._results, []
        return results


def sort_entries(
    entries: list[DiscoveredEntry], sort_by: Optional[SortBy]
) -> list[DiscoveredEntry]:
    """
    Order scan results.

    Args:
        entries: Merged scan results
        sort_by: size (largest first), path (lexicographic), last-mod
            (smallest age first), or None to keep arrival order

    Returns:
        New list in the requested order
    """
    if sort_by is None:
        return list(entries)
    if sort_by == SortBy.PATH:
        return sorted(entries, key=lambda e: e.path)
    if sort_by == SortBy.SIZE:
        return sorted(entries, key=lambda e: e.size, reverse=True)
    return sorted(entries, key=lambda e: e.age)
