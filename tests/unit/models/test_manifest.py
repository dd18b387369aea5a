"""Unit tests for manifest models.

Tests for ManifestEntry and Manifest data structures.
"""

import pytest
from treeverify.models.manifest import (
    FINGERPRINT_LENGTH,
    MIN_LINE_LENGTH,
    Manifest,
    ManifestEntry,
)


class TestManifestEntry:
    """Tests for ManifestEntry dataclass."""

    def test_valid_entry(self) -> None:
        """ManifestEntry stores fingerprint and path."""
        entry = ManifestEntry(fingerprint="abc1234567", relative_path="dir/a.txt")

        assert entry.fingerprint == "abc1234567"
        assert entry.relative_path == "dir/a.txt"

    def test_empty_path_raises(self) -> None:
        """ManifestEntry rejects an empty path."""
        with pytest.raises(ValueError, match="cannot be empty"):
            ManifestEntry(fingerprint="abc1234567", relative_path="")

    def test_is_frozen(self) -> None:
        """ManifestEntry is immutable."""
        entry = ManifestEntry(fingerprint="abc1234567", relative_path="a.txt")

        with pytest.raises(AttributeError):
            entry.relative_path = "b.txt"  # type: ignore[misc]

    def test_fingerprint_shape_not_validated(self) -> None:
        """Non-hex fingerprints are accepted as-is."""
        entry = ManifestEntry(fingerprint="zzzzzzzzzz", relative_path="a.txt")

        assert entry.fingerprint == "zzzzzzzzzz"


class TestManifest:
    """Tests for Manifest dataclass."""

    def test_constants(self) -> None:
        """Line layout constants describe a 10-char fingerprint and separator."""
        assert FINGERPRINT_LENGTH == 10
        assert MIN_LINE_LENGTH == 11

    def test_empty_manifest(self) -> None:
        """Default Manifest has no entries."""
        manifest = Manifest()

        assert len(manifest) == 0
        assert manifest.paths() == []
        assert manifest.skipped_lines == 0

    def test_iteration_keeps_order(self) -> None:
        """Iterating a Manifest yields entries in line order."""
        entries = (
            ManifestEntry("0000000001", "b.txt"),
            ManifestEntry("0000000002", "a.txt"),
        )
        manifest = Manifest(entries=entries)

        assert list(manifest) == list(entries)
        assert manifest.paths() == ["b.txt", "a.txt"]

    def test_duplicates_are_kept(self) -> None:
        """Duplicate paths stay in paths() but collapse in path_set()."""
        manifest = Manifest(
            entries=(
                ManifestEntry("0000000001", "a.txt"),
                ManifestEntry("0000000002", "a.txt"),
            )
        )

        assert len(manifest) == 2
        assert manifest.paths() == ["a.txt", "a.txt"]
        assert manifest.path_set() == {"a.txt"}
