"""Size and age metadata for discovered directories."""

import logging
import os
import time
from typing import Optional

from dirkill.classifier import is_sensitive
from dirkill.models import DiscoveredEntry

log = logging.getLogger(__name__)


def directory_size(path: str) -> int:
    """
    Total size of the regular files below a directory.

    Uses os.scandir with an explicit stack; symlinks are never followed and
    unreadable entries are skipped.

    Args:
        path: Directory to measure

    Returns:
        Total bytes
    """
    total_size = 0
    pending = [path]

    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        if entry.is_file(follow_symlinks=False):
                            total_size += entry.stat(follow_symlinks=False).st_size
                        elif entry.is_dir(follow_symlinks=False):
                            pending.append(entry.path)
                    except OSError:
                        continue
        except OSError:
            continue

    return total_size


def probe(path: str, deep: bool = False) -> Optional[tuple[int, float]]:
    """
    Fetch the size of a directory and the modification time of its parent.

    The parent's mtime is used rather than the directory's own: installing or
    refreshing a dependency cache rewrites the parent (lock files, manifests),
    while the cache directory's own mtime only moves when its direct children
    change.

    Args:
        path: Matched directory
        deep: Measure the size recursively instead of using the stat size

    Returns:
        (size_bytes, parent_mtime) or None if the path has no parent or a
        stat call fails
    """
    parent = os.path.dirname(path)
    if not parent or parent == path:
        return None

    try:
        size = directory_size(path) if deep else os.lstat(path).st_size
        parent_modified = os.stat(parent).st_mtime
    except OSError as e:
        log.debug("probe failed for %s: %s", path, e)
        return None

    return size, parent_modified


def entry_from_probe(
    path: str,
    details: Optional[tuple[int, float]],
    now: Optional[float] = None,
) -> DiscoveredEntry:
    """Build an entry, falling back to zero size and age when details are missing."""
    if now is None:
        now = time.time()

    if details is None:
        size, modified = 0, now
    else:
        size, modified = details

    return DiscoveredEntry(
        path=path,
        size=size,
        age=int(now - modified),
        is_sensitive=is_sensitive(path),
    )
