"""Manifest models for expected file sets.

This module defines the immutable data structures produced by the
manifest parser: one ManifestEntry per accepted line and a Manifest
holding them in file order.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

# Number of leading characters that hold the truncated SHA-1 fingerprint.
FINGERPRINT_LENGTH = 10

# Shortest line that can carry an entry: fingerprint, separator, one path char.
MIN_LINE_LENGTH = FINGERPRINT_LENGTH + 1


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    """A single expected file recorded in a manifest.

    Attributes:
        fingerprint: First 10 characters of the line, lower-cased. Normally
            10 lowercase hex digits, but the shape is not validated.
        relative_path: Path relative to the verified tree, using forward
            slashes regardless of how the manifest was written.
    """

    fingerprint: str
    relative_path: str

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.relative_path:
            msg = "Manifest entry path cannot be empty"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Manifest:
    """Ordered collection of manifest entries.

    Entries keep manifest line order. Duplicate paths are allowed; lookups
    that need uniqueness should build their own mapping.

    Attributes:
        entries: Parsed entries in line order.
        skipped_lines: Number of non-blank lines ignored as malformed.
    """

    entries: tuple[ManifestEntry, ...] = field(default_factory=tuple)
    skipped_lines: int = 0

    def __iter__(self) -> Iterator[ManifestEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def paths(self) -> list[str]:
        """Return entry paths in manifest order, duplicates included."""
        return [entry.relative_path for entry in self.entries]

    def path_set(self) -> set[str]:
        """Return the distinct entry paths."""
        return {entry.relative_path for entry in self.entries}
