"""Data models for dirkill."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TARGET = "node_modules"


class SortBy(str, Enum):
    """Orderings applied to the merged scan result."""

    SIZE = "size"  # Largest first
    PATH = "path"  # Lexicographic on the path text
    LAST_MOD = "last-mod"  # Most recently modified first


def bytes_to_unit(size_bytes: int, in_gb: bool = False) -> float:
    """Convert bytes to MiB, or GiB when in_gb is set."""
    shift = 30 if in_gb else 20
    return size_bytes / (1 << shift)


def format_size(size_bytes: int, in_gb: bool = False) -> str:
    """Format bytes as MiB or GiB with two decimals (e.g. "12.34MB")."""
    unit = "GB" if in_gb else "MB"
    return f"{bytes_to_unit(size_bytes, in_gb):.2f}{unit}"


def format_age(seconds: int) -> str:
    """Humanize an age in seconds (s, m, h or d)."""
    if seconds < 60:
        return f"{seconds}s"
    elif seconds < 3600:
        return f"{seconds // 60}m"
    elif seconds < 86400:
        return f"{seconds // 3600}h"
    return f"{seconds // 86400}d"


class DiscoveredEntry(BaseModel):
    """One matched directory.

    Everything except ``deleted`` is frozen once the entry is built, so size
    and age reflect the moment of discovery for the whole session.
    """

    path: str = Field(..., frozen=True, description="Absolute path of the match")
    size: int = Field(0, frozen=True, description="Size in bytes (0 if unreadable)")
    age: int = Field(
        0,
        frozen=True,
        description="Seconds since the parent directory was last modified",
    )
    is_sensitive: bool = Field(
        False, frozen=True, description="Lies under a hidden or system-like location"
    )
    deleted: bool = Field(False, description="Marked deleted in this session")

    def size_in(self, in_gb: bool = False) -> float:
        """Size in MiB, or GiB when in_gb is set."""
        return bytes_to_unit(self.size, in_gb)

    @property
    def age_human(self) -> str:
        """Humanized age string."""
        return format_age(self.age)


class ScanConfig(BaseModel):
    """Options for one dirkill run."""

    model_config = ConfigDict(frozen=True)

    directory: str = Field(".", description="Directory to start searching from")
    target: str = Field(DEFAULT_TARGET, description="Directory name to match")
    exclude_hidden: bool = Field(
        False, description="Prune hidden and system-like locations from traversal"
    )
    full: bool = Field(False, description="Start searching from the home directory")
    in_gb: bool = Field(False, description="Show sizes in GiB instead of MiB")
    exclude: tuple[str, ...] = Field(
        default_factory=tuple, description="Path substrings to skip"
    )
    sort: Optional[SortBy] = Field(None, description="Ordering of the result list")
    delete_all: bool = Field(False, description="Delete every match after confirmation")
    deep_size: bool = Field(True, description="Measure sizes with a recursive walk")

    @field_validator("target")
    @classmethod
    def _target_is_a_name(cls, value: str) -> str:
        value = value.strip()
        if not value or "/" in value or "\\" in value:
            raise ValueError("target must be a single directory name")
        return value
