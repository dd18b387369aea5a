"""Sidecar report files.

Each verification run leaves report files beside the manifest, named after
the manifest's stem. A category with findings is (over)written; a category
without findings has any report from an earlier run deleted, so the files
on disk always describe the latest run only.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from tempfile import NamedTemporaryFile

from treeverify.models.report import ChecksumReport, FileListReport

logger = logging.getLogger(__name__)

MISSING_SUFFIX = "_missing_files.txt"
EXTRA_SUFFIX = "_extra_files.txt"
CHECKSUM_SUFFIX = "_checksum_failed.txt"

MISMATCH_HEADER = "=== HASH MISMATCHES / ERRORS ==="
MISSING_HEADER = "=== MISSING FILES ==="


class ReportError(Exception):
    """Raised when a sidecar report cannot be written or removed."""


class ReportAction(str, Enum):
    """What happened to a sidecar report file during a run.

    Attributes:
        WRITTEN: The report was created or overwritten.
        DELETED: A stale report from an earlier run was removed.
        UNCHANGED: No findings and no earlier report existed.
    """

    WRITTEN = "written"
    DELETED = "deleted"
    UNCHANGED = "unchanged"


@dataclass(frozen=True, slots=True)
class ReportOutcome:
    """Result of synchronizing one sidecar report.

    Attributes:
        path: Sidecar file location.
        action: What was done to the file.
        count: Number of findings in the category.
    """

    path: Path
    action: ReportAction
    count: int


def sidecar_path(manifest_path: Path, suffix: str) -> Path:
    """Build a sidecar path beside the manifest from its stem.

    Args:
        manifest_path: Path of the manifest file.
        suffix: Category suffix, e.g. "_missing_files.txt".

    Returns:
        Path like ``<dir>/<stem>_missing_files.txt``.
    """
    return manifest_path.parent / f"{manifest_path.stem}{suffix}"


def write_report(path: Path, lines: list[str]) -> None:
    """Write lines to a report file, replacing it atomically.

    Lines are joined with newlines and no trailing newline is added. Paths
    holding undecodable file name bytes are written back as those bytes.

    Args:
        path: Report file to write.
        lines: Report lines.

    Raises:
        ReportError: If the file cannot be written.
    """
    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            errors="surrogateescape",
            dir=path.parent,
            delete=False,
            prefix=f".{path.name}.",
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            f.write("\n".join(lines))
        os.replace(str(tmp_path), str(path))
    except (OSError, UnicodeError) as e:
        raise ReportError(f"Failed to write report {path}: {e}") from e
    finally:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)


def delete_report(path: Path) -> bool:
    """Delete a stale report file if it exists.

    Args:
        path: Report file to delete.

    Returns:
        True if a file was deleted, False if none existed.

    Raises:
        ReportError: If the file exists but cannot be deleted.
    """
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        raise ReportError(f"Failed to delete old report {path}: {e}") from e
    logger.debug("Deleted stale report %s", path)
    return True


def sync_report(path: Path, lines: list[str], count: int | None = None) -> ReportOutcome:
    """Make a sidecar file reflect the current run's findings.

    Args:
        path: Report file location.
        lines: Report lines; empty means the category has no findings.
        count: Number of findings to record. Defaults to len(lines).

    Returns:
        ReportOutcome describing what was done.

    Raises:
        ReportError: If writing or deleting fails.
    """
    findings = len(lines) if count is None else count
    if lines:
        write_report(path, lines)
        logger.debug("Wrote %d findings to %s", findings, path)
        return ReportOutcome(path=path, action=ReportAction.WRITTEN, count=findings)

    deleted = delete_report(path)
    action = ReportAction.DELETED if deleted else ReportAction.UNCHANGED
    return ReportOutcome(path=path, action=action, count=0)


def checksum_report_lines(report: ChecksumReport) -> list[str]:
    """Render a checksum report as sectioned text lines.

    Args:
        report: Checksum report to render.

    Returns:
        Lines for the sidecar file; empty if the report passed.
    """
    lines: list[str] = []
    if report.mismatches:
        lines.append(MISMATCH_HEADER)
        lines.extend(str(m) for m in report.mismatches)
        lines.append("")
    if report.missing:
        lines.append(MISSING_HEADER)
        lines.extend(report.missing)
    return lines


def write_file_list_reports(
    manifest_path: Path,
    report: FileListReport,
) -> tuple[ReportOutcome, ReportOutcome]:
    """Synchronize the missing and extra sidecars for a file-list run.

    Args:
        manifest_path: Path of the manifest file.
        report: File-list report of the run.

    Returns:
        Tuple of (missing outcome, extra outcome).

    Raises:
        ReportError: If any sidecar cannot be written or deleted.
    """
    missing = sync_report(sidecar_path(manifest_path, MISSING_SUFFIX), list(report.missing))
    extra = sync_report(sidecar_path(manifest_path, EXTRA_SUFFIX), list(report.extra))
    return missing, extra


def write_checksum_report(manifest_path: Path, report: ChecksumReport) -> ReportOutcome:
    """Synchronize the checksum-failure sidecar for a checksum run.

    Args:
        manifest_path: Path of the manifest file.
        report: Checksum report of the run.

    Returns:
        ReportOutcome for the sidecar.

    Raises:
        ReportError: If the sidecar cannot be written or deleted.
    """
    return sync_report(
        sidecar_path(manifest_path, CHECKSUM_SUFFIX),
        checksum_report_lines(report),
        count=len(report.mismatches) + len(report.missing),
    )
