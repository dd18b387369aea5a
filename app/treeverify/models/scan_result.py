"""Tree scan result model.

This module defines the data structure returned by the tree walker:
the files found under the scan root together with logs of what the
exclusion rules skipped and which directories could not be read.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class UnreadableDirectory:
    """A directory that could not be listed during a walk.

    Attributes:
        path: Directory path relative to the walk base, forward slashes.
        error: Error message reported by the operating system.
    """

    path: str
    error: str


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Outcome of walking one directory tree.

    Attributes:
        files: Relative file paths in discovery order.
        excluded_dirs: Relative paths of directories pruned by exclusion rules,
            in traversal order.
        excluded_files: Relative paths of files skipped by exclusion rules,
            in traversal order.
        unreadable: Directories whose contents could not be listed.
    """

    files: tuple[str, ...] = field(default_factory=tuple)
    excluded_dirs: tuple[str, ...] = field(default_factory=tuple)
    excluded_files: tuple[str, ...] = field(default_factory=tuple)
    unreadable: tuple[UnreadableDirectory, ...] = field(default_factory=tuple)

    @property
    def file_set(self) -> set[str]:
        """Distinct relative file paths found by the walk."""
        return set(self.files)

    @property
    def has_exclusions(self) -> bool:
        """True if any directory or file was skipped by a rule."""
        return bool(self.excluded_dirs or self.excluded_files)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "file_count": len(self.files),
            "excluded_dirs": list(self.excluded_dirs),
            "excluded_files": list(self.excluded_files),
            "unreadable": [{"path": u.path, "error": u.error} for u in self.unreadable],
        }
