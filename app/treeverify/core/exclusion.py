"""Exclusion rules for tree walks.

Exclusion patterns are simple shell-style wildcards: ``*`` matches any run
of characters (separators included) and every other character is literal.
A pattern without a ``/`` is a name pattern and matches an entry's bare
name anywhere in the tree. A pattern with a ``/`` is a path pattern; it is
resolved against the scan root once, at compile time, and matched against
the entry's absolute forward-slash path.

Examples:
    ``node_modules``  prunes every directory named node_modules
    ``*.log``         skips every file ending in .log
    ``app/test*``     prunes <root>/app/test, <root>/app/tests, ...
"""

import os
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from treeverify.core.manifest import normalize_path

# Characters with regex meaning that must be taken literally in a glob.
_REGEX_SPECIAL = re.compile(r"[.+?^${}()|\[\]\\]")


class EntryKind(str, Enum):
    """Kind of filesystem entry an exclusion rule applies to."""

    DIRECTORY = "directory"
    FILE = "file"


def glob_to_regex(glob: str, *, case_sensitive: bool = False) -> re.Pattern[str]:
    """Compile a wildcard pattern into an anchored regular expression.

    Args:
        glob: Pattern text where ``*`` is the only wildcard.
        case_sensitive: Match case exactly instead of ignoring it.

    Returns:
        Compiled pattern; use ``fullmatch`` to test a candidate.
    """
    escaped = _REGEX_SPECIAL.sub(lambda m: "\\" + m.group(0), glob)
    flags = re.DOTALL if case_sensitive else re.DOTALL | re.IGNORECASE
    return re.compile(escaped.replace("*", ".*"), flags)


class ExclusionRule(ABC):
    """A compiled exclusion pattern.

    Attributes:
        source: Pattern text exactly as supplied by the caller.
    """

    def __init__(self, source: str, regex: re.Pattern[str]) -> None:
        self.source = source
        self._regex = regex

    @abstractmethod
    def matches(self, name: str, full_path: str) -> bool:
        """Check whether an entry is excluded by this rule.

        Args:
            name: Bare name of the entry.
            full_path: Absolute forward-slash path of the entry.

        Returns:
            True if the entry should be skipped.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.source!r})"


class NamePattern(ExclusionRule):
    """Rule matched against an entry's bare name. Always case-insensitive."""

    def __init__(self, source: str) -> None:
        super().__init__(source, glob_to_regex(normalize_path(source)))

    def matches(self, name: str, full_path: str) -> bool:
        return self._regex.fullmatch(name) is not None


class PathPattern(ExclusionRule):
    """Rule matched against an entry's absolute path.

    Attributes:
        resolved: Pattern joined onto the scan root and normalized.
    """

    def __init__(self, source: str, scan_root: Path, *, case_sensitive: bool = False) -> None:
        root = os.path.abspath(scan_root)
        self.resolved = normalize_path(os.path.normpath(os.path.join(root, normalize_path(source))))
        super().__init__(source, glob_to_regex(self.resolved, case_sensitive=case_sensitive))

    def matches(self, name: str, full_path: str) -> bool:
        return self._regex.fullmatch(full_path) is not None


def compile_patterns(
    patterns: Iterable[str],
    scan_root: Path,
    *,
    case_sensitive_paths: bool = False,
) -> tuple[tuple[NamePattern, ...], tuple[PathPattern, ...]]:
    """Compile raw patterns for one entry kind, split by match scope.

    Blank patterns are ignored.

    Args:
        patterns: Raw pattern strings.
        scan_root: Directory that path patterns are resolved against.
        case_sensitive_paths: Match path patterns case-sensitively.

    Returns:
        Tuple of (name rules, path rules) in input order.
    """
    names: list[NamePattern] = []
    paths: list[PathPattern] = []

    for raw in patterns:
        pattern = raw.strip()
        if not pattern:
            continue
        if "/" in normalize_path(pattern):
            paths.append(PathPattern(pattern, scan_root, case_sensitive=case_sensitive_paths))
        else:
            names.append(NamePattern(pattern))

    return tuple(names), tuple(paths)


@dataclass(frozen=True, slots=True)
class ExclusionRuleSet:
    """Compiled exclusion rules, kept separately per entry kind and scope.

    Attributes:
        dir_names: Name rules for directories.
        dir_paths: Path rules for directories.
        file_names: Name rules for files.
        file_paths: Path rules for files.
    """

    dir_names: tuple[NamePattern, ...] = field(default_factory=tuple)
    dir_paths: tuple[PathPattern, ...] = field(default_factory=tuple)
    file_names: tuple[NamePattern, ...] = field(default_factory=tuple)
    file_paths: tuple[PathPattern, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        """True if no rules of any kind are present."""
        return not (self.dir_names or self.dir_paths or self.file_names or self.file_paths)

    def match(self, kind: EntryKind, name: str, full_path: str) -> ExclusionRule | None:
        """Find the rule that excludes an entry, if any.

        Name rules are consulted before path rules.

        Args:
            kind: Whether the entry is a directory or a file.
            name: Bare name of the entry.
            full_path: Absolute forward-slash path of the entry.

        Returns:
            The first matching rule, or None if the entry is kept.
        """
        if kind == EntryKind.DIRECTORY:
            rules: tuple[ExclusionRule, ...] = (*self.dir_names, *self.dir_paths)
        else:
            rules = (*self.file_names, *self.file_paths)

        for rule in rules:
            if rule.matches(name, full_path):
                return rule
        return None

    def match_dir(self, name: str, full_path: str) -> ExclusionRule | None:
        """Find the rule excluding a directory, if any."""
        return self.match(EntryKind.DIRECTORY, name, full_path)

    def match_file(self, name: str, full_path: str) -> ExclusionRule | None:
        """Find the rule excluding a file, if any."""
        return self.match(EntryKind.FILE, name, full_path)


def compile_rules(
    exclude_dirs: Iterable[str],
    exclude_files: Iterable[str],
    scan_root: Path,
    *,
    case_sensitive_paths: bool = False,
) -> ExclusionRuleSet:
    """Compile directory and file patterns into a reusable rule set.

    Args:
        exclude_dirs: Raw directory patterns.
        exclude_files: Raw file patterns.
        scan_root: Directory that path patterns are resolved against.
        case_sensitive_paths: Match path patterns case-sensitively.

    Returns:
        ExclusionRuleSet ready to be shared by a whole walk.
    """
    dir_names, dir_paths = compile_patterns(
        exclude_dirs, scan_root, case_sensitive_paths=case_sensitive_paths
    )
    file_names, file_paths = compile_patterns(
        exclude_files, scan_root, case_sensitive_paths=case_sensitive_paths
    )
    return ExclusionRuleSet(
        dir_names=dir_names,
        dir_paths=dir_paths,
        file_names=file_names,
        file_paths=file_paths,
    )
