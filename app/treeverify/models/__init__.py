"""Data models for treeverify.

This module exports the core data structures used throughout the application.
"""

from treeverify.models.manifest import Manifest, ManifestEntry
from treeverify.models.report import (
    ChecksumReport,
    FileListReport,
    HashOutcome,
    Mismatch,
    OutcomeKind,
)
from treeverify.models.scan_result import ScanResult, UnreadableDirectory

__all__ = [
    "ChecksumReport",
    "FileListReport",
    "HashOutcome",
    "Manifest",
    "ManifestEntry",
    "Mismatch",
    "OutcomeKind",
    "ScanResult",
    "UnreadableDirectory",
]
