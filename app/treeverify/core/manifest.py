"""Manifest file parsing.

This module turns manifest text into a Manifest. Each line holds a
10-character truncated SHA-1 fingerprint followed by at least one
separator character and a path relative to the verified tree, e.g.::

    abc1234567 dir/a.txt
    0f9e8d7c6b assets\\logo.png

Lines whose stripped length is under 11 characters are ignored.
"""

import logging
from pathlib import Path

from treeverify.models.manifest import (
    FINGERPRINT_LENGTH,
    MIN_LINE_LENGTH,
    Manifest,
    ManifestEntry,
)

logger = logging.getLogger(__name__)


class ManifestError(Exception):
    """Base exception for manifest-related errors."""


class ManifestNotFoundError(ManifestError):
    """Raised when manifest file is not found."""


class ManifestReadError(ManifestError):
    """Raised when manifest file exists but cannot be read."""


def normalize_path(path: str) -> str:
    """Convert backslash separators to forward slashes."""
    return path.replace("\\", "/")


def parse_manifest(text: str) -> Manifest:
    """Parse manifest text into an ordered Manifest.

    The fingerprint is the first 10 characters of the line, lower-cased.
    The path is everything after them, stripped and normalized to forward
    slashes. Short and blank lines are skipped without error, and the
    fingerprint is not checked for hex digits.

    Args:
        text: Full manifest contents.

    Returns:
        Manifest with one entry per accepted line, in line order.
    """
    entries: list[ManifestEntry] = []
    skipped = 0

    for line in text.split("\n"):
        stripped_length = len(line.strip())
        if stripped_length < MIN_LINE_LENGTH:
            if stripped_length:
                skipped += 1
            continue

        entries.append(
            ManifestEntry(
                fingerprint=line[:FINGERPRINT_LENGTH].lower(),
                relative_path=normalize_path(line[FINGERPRINT_LENGTH:].strip()),
            )
        )

    return Manifest(entries=tuple(entries), skipped_lines=skipped)


def load_manifest(path: Path) -> Manifest:
    """Read and parse a manifest file.

    Undecodable bytes are replaced rather than rejected so that one bad
    path cannot prevent verification of the rest of the manifest.

    Args:
        path: Path to the manifest file.

    Returns:
        Parsed Manifest.

    Raises:
        ManifestNotFoundError: If the manifest file doesn't exist.
        ManifestReadError: If the file cannot be read.
    """
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError as e:
        raise ManifestNotFoundError(f"Manifest not found: {path}") from e
    except OSError as e:
        raise ManifestReadError(f"Failed to read manifest {path}: {e}") from e

    manifest = parse_manifest(text)
    logger.debug(
        "Loaded %d entries from %s (%d lines skipped)",
        len(manifest),
        path,
        manifest.skipped_lines,
    )
    return manifest
