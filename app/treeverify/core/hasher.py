"""Streaming content fingerprints.

A fingerprint is the SHA-1 digest of a file's contents, hex encoded and
truncated to its first 10 characters (5 bytes). It detects corruption and
change; it is not a security boundary.
"""

import hashlib
import logging
import threading
from pathlib import Path

from treeverify.models.manifest import FINGERPRINT_LENGTH, ManifestEntry
from treeverify.models.report import HashOutcome, OutcomeKind

logger = logging.getLogger(__name__)

# Default read size; files are never loaded whole.
DEFAULT_CHUNK_SIZE = 1024 * 1024


class FingerprintError(Exception):
    """Raised when a file cannot be read while computing its fingerprint."""


def compute_fingerprint(
    path: Path,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    stop: threading.Event | None = None,
) -> str:
    """Compute the truncated SHA-1 fingerprint of a file.

    The file is read in chunks of at most chunk_size bytes, so memory use
    is bounded regardless of file size. Setting stop abandons the read
    before the next chunk.

    Args:
        path: File to hash.
        chunk_size: Maximum bytes read per call.
        stop: Optional event that cancels hashing when set.

    Returns:
        Exactly 10 lowercase hexadecimal characters.

    Raises:
        FingerprintError: If the file cannot be opened or read, or hashing
            was cancelled.
    """
    hasher = hashlib.sha1(usedforsecurity=False)
    try:
        with path.open("rb") as handle:
            while chunk := handle.read(chunk_size):
                if stop is not None and stop.is_set():
                    raise FingerprintError(f"hashing cancelled: {path}")
                hasher.update(chunk)
    except OSError as e:
        raise FingerprintError(str(e)) from e
    return hasher.hexdigest()[:FINGERPRINT_LENGTH]


def resolve_entry_path(base_dir: Path, relative_path: str) -> Path:
    """Locate a manifest path under base_dir, ignoring any leading slash."""
    return base_dir / relative_path.lstrip("/")


def probe_entry(
    entry: ManifestEntry,
    base_dir: Path,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    stop: threading.Event | None = None,
) -> HashOutcome:
    """Check one manifest entry against the file on disk.

    Never raises for filesystem problems: absence becomes MISSING, even
    when the file disappears between the existence check and the read, and
    any other failure becomes READ_ERROR with a description.

    Args:
        entry: Manifest entry to check.
        base_dir: Root of the verified tree.
        chunk_size: Read size passed to the hasher.
        stop: Optional event that cancels hashing when set.

    Returns:
        HashOutcome classifying the entry.
    """
    target = resolve_entry_path(base_dir, entry.relative_path)
    expected = entry.fingerprint.lower()

    try:
        target.stat()
    except (FileNotFoundError, NotADirectoryError):
        return HashOutcome(entry.relative_path, OutcomeKind.MISSING, expected)
    except OSError as e:
        return HashOutcome(
            entry.relative_path,
            OutcomeKind.READ_ERROR,
            expected,
            message=f"error: {e.strerror or e}",
        )

    try:
        actual = compute_fingerprint(target, chunk_size, stop)
    except FingerprintError as e:
        if isinstance(e.__cause__, (FileNotFoundError, NotADirectoryError)):
            return HashOutcome(entry.relative_path, OutcomeKind.MISSING, expected)
        logger.debug("Hashing %s failed: %s", target, e)
        return HashOutcome(
            entry.relative_path,
            OutcomeKind.READ_ERROR,
            expected,
            message=f"hash calculation failed: {e}",
        )

    if actual != expected:
        return HashOutcome(entry.relative_path, OutcomeKind.MISMATCHED, expected, actual=actual)
    return HashOutcome(entry.relative_path, OutcomeKind.MATCHED, expected, actual=actual)
