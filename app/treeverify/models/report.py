"""Reconciliation report models.

This module defines the per-entry hash outcome and the two report shapes
produced by the reconciler: the file-list report (missing and extra paths)
and the checksum report (mismatches and missing paths).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class OutcomeKind(str, Enum):
    """Classification of a single manifest entry in checksum mode.

    Attributes:
        MATCHED: File exists and its fingerprint equals the manifest value.
        MISMATCHED: File exists but its fingerprint differs.
        MISSING: No file exists at the expected path.
        READ_ERROR: The file could not be inspected or hashed.
    """

    MATCHED = "matched"
    MISMATCHED = "mismatched"
    MISSING = "missing"
    READ_ERROR = "read_error"


@dataclass(frozen=True, slots=True)
class HashOutcome:
    """Result of checking one manifest entry against the filesystem.

    Attributes:
        relative_path: Manifest path of the entry.
        kind: Outcome classification.
        expected: Fingerprint recorded in the manifest.
        actual: Fingerprint computed from disk (MATCHED/MISMATCHED only).
        message: Error description (READ_ERROR only).
    """

    relative_path: str
    kind: OutcomeKind
    expected: str
    actual: str | None = None
    message: str | None = None

    @property
    def detail(self) -> str:
        """Human-readable cause for failure outcomes, empty otherwise."""
        if self.kind == OutcomeKind.MISMATCHED:
            return f"expected {self.expected}, got {self.actual}"
        if self.kind == OutcomeKind.READ_ERROR:
            return self.message or "unknown error"
        return ""


@dataclass(frozen=True, slots=True)
class Mismatch:
    """A checksum failure line: the path and why it failed.

    Attributes:
        path: Manifest path of the failing entry.
        detail: Cause, e.g. "expected 0000000000, got abc1234567".
    """

    path: str
    detail: str

    def __str__(self) -> str:
        return f"{self.path} ({self.detail})"


@dataclass(frozen=True, slots=True)
class FileListReport:
    """Presence comparison between a manifest and a scanned tree.

    Attributes:
        missing: Manifest paths absent from the tree, in manifest order.
        extra: Tree paths absent from the manifest, in walk order.
    """

    missing: tuple[str, ...]
    extra: tuple[str, ...]

    @property
    def passed(self) -> bool:
        """True when the tree and the manifest list the same paths."""
        return not (self.missing or self.extra)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "passed": self.passed,
            "summary": {"missing": len(self.missing), "extra": len(self.extra)},
            "missing": list(self.missing),
            "extra": list(self.extra),
        }


@dataclass(frozen=True, slots=True)
class ChecksumReport:
    """Content comparison between a manifest and the files it names.

    Attributes:
        mismatches: Hash mismatches and read errors, in manifest order.
        missing: Manifest paths with no file on disk, in manifest order.
        checked: Number of manifest entries evaluated.
    """

    mismatches: tuple[Mismatch, ...]
    missing: tuple[str, ...]
    checked: int = 0

    @property
    def passed(self) -> bool:
        """True when every entry matched."""
        return not (self.mismatches or self.missing)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "passed": self.passed,
            "summary": {
                "checked": self.checked,
                "mismatches": len(self.mismatches),
                "missing": len(self.missing),
            },
            "mismatches": [{"path": m.path, "detail": m.detail} for m in self.mismatches],
            "missing": list(self.missing),
        }
