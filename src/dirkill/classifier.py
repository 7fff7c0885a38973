"""Path predicates used to prune traversal and filter matches.

Nothing in this module touches the filesystem; every check works on the
textual form of the path so Windows-style paths can be classified on any
platform.
"""

import os
import re
from typing import Iterable, Optional, Union

PathLike = Union[str, os.PathLike]

_SEPARATORS = re.compile(r"[/\\]")


def _segments(path: PathLike) -> list[str]:
    return _SEPARATORS.split(os.fspath(path))


def is_sensitive(path: PathLike) -> bool:
    """
    Check if a path lies under a hidden or system-like location.

    A path is sensitive when any segment is hidden (starts with ``.`` but is
    not ``.`` or ``..``), when it is inside a macOS application bundle, or
    when it is inside a Windows per-user AppData directory.

    Args:
        path: Path to check

    Returns:
        True if the path is sensitive
    """
    path_str = os.fspath(path)

    is_hidden = any(
        part.startswith(".") and part not in (".", "..") for part in _segments(path_str)
    )
    is_mac_app = ".app/" in path_str or path_str.endswith(".app")
    is_windows_app_data = "\\AppData\\" in path_str

    return is_hidden or is_mac_app or is_windows_app_data


def is_nested_match(path: PathLike, target: str) -> bool:
    """Check if the target name occurs more than once anywhere in the path text."""
    return os.fspath(path).count(target) > 1


def is_excluded(path: PathLike, exclusions: Iterable[str]) -> bool:
    """Check if any exclusion substring occurs in the path text."""
    path_str = os.fspath(path)
    return any(excluded and excluded in path_str for excluded in exclusions)


def parse_exclusions(raw: Optional[str]) -> tuple[str, ...]:
    """Split a comma-separated exclusion list ("a, b") into substrings."""
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())
