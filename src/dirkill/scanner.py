"""Discovery of target directories below a single root.

This module walks one root with os.scandir, prunes hidden, excluded and
nested locations, and turns every match into a DiscoveredEntry. Metadata
probes for the matches run in parallel on a thread pool.
"""

import logging
import os
from concurrent.futures import Executor, ThreadPoolExecutor
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Union

from dirkill.classifier import is_excluded, is_nested_match, is_sensitive
from dirkill.models import DiscoveredEntry, ScanConfig
from dirkill.probe import entry_from_probe, probe

log = logging.getLogger(__name__)


class Visit(Enum):
    """What the walk does with a directory it reaches."""

    PRUNE = "prune"
    DESCEND = "descend"
    MATCH = "match"


def classify(path: str, name: str, config: ScanConfig) -> Visit:
    """
    Decide whether a directory is a match, should be descended into, or pruned.

    Args:
        path: Full path of the directory
        name: Final path component
        config: Scan options (target, exclusions, hidden pruning)

    Returns:
        Visit verdict for the directory
    """
    if is_excluded(path, config.exclude):
        return Visit.PRUNE

    if name == config.target:
        # A target inside another target was already reported with its ancestor
        if is_nested_match(path, config.target):
            return Visit.PRUNE
        return Visit.MATCH

    if config.exclude_hidden and is_sensitive(path):
        return Visit.PRUNE

    return Visit.DESCEND


def find_matches(root: Union[str, Path], config: ScanConfig) -> Iterator[str]:
    """
    Find directories named like the target below root (root included).

    Symlinks are never followed and matches are not descended into.
    Directories that cannot be read are skipped.

    Args:
        root: Directory to walk
        config: Scan options

    Yields:
        Paths of matching directories
    """
    root = os.fspath(root)

    verdict = classify(root, os.path.basename(root), config)
    if verdict is Visit.MATCH:
        yield root
        return
    if verdict is Visit.PRUNE:
        return

    pending = [root]
    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        if not entry.is_dir(follow_symlinks=False):
                            continue
                    except OSError:
                        continue

                    verdict = classify(entry.path, entry.name, config)
                    if verdict is Visit.MATCH:
                        yield entry.path
                    elif verdict is Visit.DESCEND:
                        pending.append(entry.path)
        except OSError as e:
            log.debug("skipping unreadable directory %s: %s", current, e)
            continue


def scan_directory(
    root: Union[str, Path],
    config: ScanConfig,
    executor: Optional[Executor] = None,
) -> list[DiscoveredEntry]:
    """
    Discover and measure every match below a root.

    Args:
        root: Directory to scan; symlinks and non-directories yield nothing
        config: Scan options
        executor: Pool for metadata probes (a temporary one is used if None)

    Returns:
        Entries in no particular order
    """
    if os.path.islink(root) or not os.path.isdir(root):
        return []

    try:
        canonical_root = str(Path(root).resolve(strict=True))
    except OSError:
        return []

    matches = list(find_matches(canonical_root, config))
    if not matches:
        return []

    def _measure(path: str) -> DiscoveredEntry:
        return entry_from_probe(path, probe(path, deep=config.deep_size))

    if executor is not None:
        return list(executor.map(_measure, matches))

    with ThreadPoolExecutor(max_workers=os.cpu_count() or 1) as pool:
        return list(pool.map(_measure, matches))
