"""Fire-and-forget directory removal."""

import logging
import shutil
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol

log = logging.getLogger(__name__)


class Remover(Protocol):
    """Anything that can start removing a directory tree."""

    def remove(self, path: str) -> None: ...


class BackgroundRemover:
    """Removes directory trees on a thread pool.

    ``remove`` returns as soon as the removal is queued. The outcome is only
    logged; callers never learn whether the directory actually went away.
    """

    def __init__(self, max_workers: int = 4) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="dirkill-rm"
        )
        self._lock = threading.Lock()
        self._in_flight: set[Future] = set()

    @property
    def pending(self) -> int:
        """Number of removals queued or running."""
        with self._lock:
            return len(self._in_flight)

    def remove(self, path: str) -> None:
        future = self._executor.submit(shutil.rmtree, path)
        with self._lock:
            self._in_flight.add(future)
        future.add_done_callback(lambda f: self._finished(path, f))

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting removals, optionally waiting for in-flight ones."""
        self._executor.shutdown(wait=wait)

    def _finished(self, path: str, future: Future) -> None:
        with self._lock:
            self._in_flight.discard(future)
        _log_outcome(path, future)


def _log_outcome(path: str, future: Future) -> None:
    error = future.exception()
    if error is not None:
        log.debug("removal of %s failed: %s", path, error)
    else:
        log.debug("removed %s", path)
