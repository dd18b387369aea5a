"""Reconciliation of expected and actual file state.

This module compares a manifest against either a scanned file list
(presence only) or the files it names on disk (content fingerprints),
producing reports whose ordering is deterministic for a given input.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from treeverify.core.hasher import DEFAULT_CHUNK_SIZE, probe_entry
from treeverify.models.report import (
    ChecksumReport,
    FileListReport,
    HashOutcome,
    Mismatch,
    OutcomeKind,
)

if TYPE_CHECKING:
    from pathlib import Path

    from treeverify.models.manifest import Manifest, ManifestEntry

logger = logging.getLogger(__name__)

# Called as (current, total, relative_path) after each entry is evaluated.
ProgressCallback = Callable[[int, int, str], None]


def reconcile_files(expected: Sequence[str], actual: Iterable[str]) -> FileListReport:
    """Compare manifest paths with the paths found in a tree.

    Args:
        expected: Manifest paths in manifest order; duplicates allowed.
        actual: Paths found by the walk, in walk order.

    Returns:
        FileListReport where missing keeps manifest order (duplicates
        included) and extra keeps walk order.
    """
    actual_paths = list(actual)
    actual_set = set(actual_paths)
    expected_set = set(expected)

    missing = tuple(path for path in expected if path not in actual_set)
    extra = tuple(path for path in actual_paths if path not in expected_set)

    return FileListReport(missing=missing, extra=extra)


def iter_outcomes(
    entries: Sequence[ManifestEntry],
    base_dir: Path,
    *,
    workers: int = 1,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Iterator[HashOutcome]:
    """Yield one HashOutcome per entry, in entry order.

    With workers > 1 the entries are hashed by a bounded thread pool, but
    outcomes are still yielded in entry order. Pending work is cancelled if
    the consumer stops early or an exception (including KeyboardInterrupt)
    interrupts iteration, and hashes already running stop at their next
    chunk.

    Args:
        entries: Manifest entries to check.
        base_dir: Root of the verified tree.
        workers: Number of hashing threads; 1 means sequential.
        chunk_size: Read size passed to the hasher.

    Yields:
        HashOutcome for each entry.
    """
    if workers <= 1:
        for entry in entries:
            yield probe_entry(entry, base_dir, chunk_size)
        return

    stop = threading.Event()
    executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="treeverify-hash")
    try:
        futures = [
            executor.submit(probe_entry, entry, base_dir, chunk_size, stop) for entry in entries
        ]
        for future in futures:
            yield future.result()
    finally:
        stop.set()
        executor.shutdown(wait=False, cancel_futures=True)


def classify_outcomes(outcomes: Iterable[HashOutcome]) -> ChecksumReport:
    """Fold per-entry outcomes into a checksum report.

    Mismatches and read errors both land in ``mismatches``; missing files
    land in ``missing``. Input order is preserved in each list.

    Args:
        outcomes: Outcomes in manifest order.

    Returns:
        ChecksumReport summarizing the outcomes.
    """
    mismatches: list[Mismatch] = []
    missing: list[str] = []
    checked = 0

    for outcome in outcomes:
        checked += 1
        if outcome.kind == OutcomeKind.MISSING:
            missing.append(outcome.relative_path)
        elif outcome.kind in (OutcomeKind.MISMATCHED, OutcomeKind.READ_ERROR):
            mismatches.append(Mismatch(path=outcome.relative_path, detail=outcome.detail))

    return ChecksumReport(mismatches=tuple(mismatches), missing=tuple(missing), checked=checked)


def reconcile_checksums(
    manifest: Manifest,
    base_dir: Path,
    *,
    on_progress: ProgressCallback | None = None,
    workers: int = 1,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> ChecksumReport:
    """Verify every manifest entry's fingerprint against the file on disk.

    Each entry is evaluated exactly once. Per-entry failures are recorded
    in the report and never abort the run.

    Args:
        manifest: Parsed manifest.
        base_dir: Root of the verified tree.
        on_progress: Optional callback receiving (current, total, path).
        workers: Number of hashing threads; 1 means sequential.
        chunk_size: Read size passed to the hasher.

    Returns:
        ChecksumReport for the whole manifest.
    """
    entries = manifest.entries
    total = len(entries)

    def tracked() -> Iterator[HashOutcome]:
        for index, outcome in enumerate(
            iter_outcomes(entries, base_dir, workers=workers, chunk_size=chunk_size), start=1
        ):
            if on_progress is not None:
                on_progress(index, total, outcome.relative_path)
            yield outcome

    report = classify_outcomes(tracked())
    logger.debug(
        "Checked %d entries: %d mismatches, %d missing",
        report.checked,
        len(report.mismatches),
        len(report.missing),
    )
    return report
