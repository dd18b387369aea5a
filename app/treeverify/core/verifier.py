"""Verification runs.

This module ties the parser, exclusion rules, walker, hasher, reconciler
and sidecar reports together into the two verification modes:

- files: compare the set of paths in the target tree with the manifest.
- checksum: recompute the fingerprint of every file the manifest lists.

Example:
    >>> from pathlib import Path
    >>> from treeverify.core.verifier import verify_files
    >>> run = verify_files(Path("release.sha1"), exclude_dirs=["node_modules"])
    >>> if not run.passed:
    ...     print(run.report.missing)
"""

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from treeverify.core.config import VerifyConfig
from treeverify.core.exclusion import compile_rules
from treeverify.core.manifest import load_manifest
from treeverify.core.reconcile import ProgressCallback, reconcile_checksums, reconcile_files
from treeverify.core.reports import (
    CHECKSUM_SUFFIX,
    EXTRA_SUFFIX,
    MISSING_SUFFIX,
    ReportOutcome,
    sidecar_path,
    write_checksum_report,
    write_file_list_reports,
)
from treeverify.core.walker import TreeWalker
from treeverify.models.manifest import Manifest
from treeverify.models.report import ChecksumReport, FileListReport
from treeverify.models.scan_result import ScanResult

logger = logging.getLogger(__name__)


class VerificationError(Exception):
    """Raised when a run cannot start, e.g. the target is not a directory."""


@dataclass(frozen=True, slots=True)
class FilesRun:
    """Result of a file-list verification run.

    Attributes:
        manifest_path: Absolute path of the manifest.
        target_dir: Absolute path of the verified tree.
        manifest: Parsed manifest.
        scan: Walk result, including exclusion logs.
        report: Missing and extra paths.
        missing_report: What happened to the missing-files sidecar.
        extra_report: What happened to the extra-files sidecar.
        exclude_dirs: Directory patterns in effect.
        exclude_files: File patterns in effect.
    """

    manifest_path: Path
    target_dir: Path
    manifest: Manifest
    scan: ScanResult
    report: FileListReport
    missing_report: ReportOutcome
    extra_report: ReportOutcome
    exclude_dirs: tuple[str, ...] = ()
    exclude_files: tuple[str, ...] = ()

    @property
    def passed(self) -> bool:
        """True when no files are missing or extra."""
        return self.report.passed

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "mode": "files",
            "manifest": str(self.manifest_path),
            "target": str(self.target_dir),
            "expected": len(self.manifest),
            "exclude_dirs": list(self.exclude_dirs),
            "exclude_files": list(self.exclude_files),
            "scan": self.scan.to_dict(),
            **self.report.to_dict(),
            "reports": {
                "missing": _outcome_to_dict(self.missing_report),
                "extra": _outcome_to_dict(self.extra_report),
            },
        }


@dataclass(frozen=True, slots=True)
class ChecksumRun:
    """Result of a checksum verification run.

    Attributes:
        manifest_path: Absolute path of the manifest.
        target_dir: Absolute path of the verified tree.
        manifest: Parsed manifest.
        report: Mismatches and missing paths.
        failure_report: What happened to the checksum-failure sidecar.
    """

    manifest_path: Path
    target_dir: Path
    manifest: Manifest
    report: ChecksumReport
    failure_report: ReportOutcome

    @property
    def passed(self) -> bool:
        """True when every entry matched."""
        return self.report.passed

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "mode": "checksum",
            "manifest": str(self.manifest_path),
            "target": str(self.target_dir),
            **self.report.to_dict(),
            "reports": {"checksum_failed": _outcome_to_dict(self.failure_report)},
        }


def _outcome_to_dict(outcome: ReportOutcome) -> dict[str, Any]:
    """Convert a ReportOutcome to a dictionary."""
    return {"path": str(outcome.path), "action": outcome.action.value, "count": outcome.count}


def resolve_target(manifest_path: Path, target_dir: Path | None = None) -> Path:
    """Resolve the directory a run verifies.

    Args:
        manifest_path: Absolute manifest path.
        target_dir: Optional target directory as supplied by the caller.

    Returns:
        Absolute target directory, defaulting to the manifest's directory.

    Raises:
        VerificationError: If the target is not an existing directory.
    """
    target_abs = Path(os.path.abspath(target_dir)) if target_dir else manifest_path.parent

    if not target_abs.is_dir():
        raise VerificationError(f"Target directory not found: {target_abs}")

    return target_abs


def _own_files(manifest_path: Path, target_dir: Path, listed: set[str]) -> set[str]:
    """Relative paths of the manifest and its sidecars inside the target tree.

    These are produced by the tool itself and must not count as extra
    files, otherwise one run's report would change the next run's result.
    A path the manifest lists is still treated as an ordinary file.
    """
    candidates = [
        manifest_path,
        sidecar_path(manifest_path, MISSING_SUFFIX),
        sidecar_path(manifest_path, EXTRA_SUFFIX),
        sidecar_path(manifest_path, CHECKSUM_SUFFIX),
    ]
    own: set[str] = set()
    for candidate in candidates:
        if target_dir in candidate.parents:
            own.add(candidate.relative_to(target_dir).as_posix())
    return own - listed


def verify_files(
    manifest_path: Path,
    target_dir: Path | None = None,
    exclude_dirs: Sequence[str] = (),
    exclude_files: Sequence[str] = (),
    config: VerifyConfig | None = None,
) -> FilesRun:
    """Compare the files in a tree with the paths listed in a manifest.

    Exclusion patterns from config are applied before the ones passed in.
    Missing and extra sidecar reports are written or cleaned up beside the
    manifest.

    Args:
        manifest_path: Manifest file.
        target_dir: Tree to verify. Defaults to the manifest's directory.
        exclude_dirs: Additional directory exclusion patterns.
        exclude_files: Additional file exclusion patterns.
        config: Settings; defaults are used if None.

    Returns:
        FilesRun describing the outcome.

    Raises:
        ManifestError: If the manifest cannot be read.
        VerificationError: If the target is not a directory.
        ReportError: If a sidecar cannot be written or deleted.
    """
    config = config or VerifyConfig()
    manifest_abs = Path(os.path.abspath(manifest_path))
    manifest = load_manifest(manifest_abs)
    target_abs = resolve_target(manifest_abs, target_dir)

    dir_patterns = (*config.exclude_dirs, *exclude_dirs)
    file_patterns = (*config.exclude_files, *exclude_files)
    rules = compile_rules(
        dir_patterns,
        file_patterns,
        target_abs,
        case_sensitive_paths=config.case_sensitive_paths,
    )

    logger.info("Walking %s", target_abs)
    scan = TreeWalker(rules).walk(target_abs)

    own = _own_files(manifest_abs, target_abs, manifest.path_set())
    actual = [path for path in scan.files if path not in own]
    report = reconcile_files(manifest.paths(), actual)

    missing_report, extra_report = write_file_list_reports(manifest_abs, report)

    return FilesRun(
        manifest_path=manifest_abs,
        target_dir=target_abs,
        manifest=manifest,
        scan=scan,
        report=report,
        missing_report=missing_report,
        extra_report=extra_report,
        exclude_dirs=tuple(dir_patterns),
        exclude_files=tuple(file_patterns),
    )


def verify_checksums(
    manifest_path: Path,
    target_dir: Path | None = None,
    config: VerifyConfig | None = None,
    on_progress: ProgressCallback | None = None,
) -> ChecksumRun:
    """Recompute and compare the fingerprint of every manifest entry.

    The checksum-failure sidecar is written or cleaned up beside the
    manifest.

    Args:
        manifest_path: Manifest file.
        target_dir: Tree to verify. Defaults to the manifest's directory.
        config: Settings; defaults are used if None.
        on_progress: Optional callback receiving (current, total, path).

    Returns:
        ChecksumRun describing the outcome.

    Raises:
        ManifestError: If the manifest cannot be read.
        VerificationError: If the target is not a directory.
        ReportError: If the sidecar cannot be written or deleted.
    """
    config = config or VerifyConfig()
    manifest_abs = Path(os.path.abspath(manifest_path))
    manifest = load_manifest(manifest_abs)
    target_abs = resolve_target(manifest_abs, target_dir)

    logger.info("Verifying %d entries under %s", len(manifest), target_abs)
    report = reconcile_checksums(
        manifest,
        target_abs,
        on_progress=on_progress,
        workers=config.workers,
        chunk_size=config.chunk_size,
    )
    failure_report = write_checksum_report(manifest_abs, report)

    return ChecksumRun(
        manifest_path=manifest_abs,
        target_dir=target_abs,
        manifest=manifest,
        report=report,
        failure_report=failure_report,
    )
