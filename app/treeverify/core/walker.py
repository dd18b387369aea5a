"""Recursive directory enumeration with exclusion pruning.

Walks a directory tree depth-first using an explicit stack of pending
directories, so pathologically deep trees cannot exhaust the interpreter's
recursion limit. Excluded directories are pruned before they are listed.
"""

import logging
import os
from pathlib import Path

from treeverify.core.exclusion import ExclusionRuleSet
from treeverify.core.manifest import normalize_path
from treeverify.models.scan_result import ScanResult, UnreadableDirectory

logger = logging.getLogger(__name__)


class TreeWalker:
    """Enumerates files under a root directory.

    Symbolic links are never followed: a link is reported as a file,
    whatever it points to. Entries within a directory are visited in
    sorted order so repeated walks of an unchanged tree agree.

    Args:
        rules: Compiled exclusion rules. Defaults to an empty rule set.
    """

    def __init__(self, rules: ExclusionRuleSet | None = None) -> None:
        self._rules = rules if rules is not None else ExclusionRuleSet()

    def walk(self, root: Path, base_dir: Path | None = None) -> ScanResult:
        """Walk the tree under root and collect relative file paths.

        Directories that cannot be listed are logged, recorded in the
        result, and treated as empty. The walk always runs to completion.

        Args:
            root: Directory to enumerate.
            base_dir: Directory that reported paths are relative to.
                Defaults to root.

        Returns:
            ScanResult with discovered files and exclusion logs.
        """
        root = Path(os.path.abspath(root))
        base = Path(os.path.abspath(base_dir)) if base_dir is not None else root

        files: list[str] = []
        excluded_dirs: list[str] = []
        excluded_files: list[str] = []
        unreadable: list[UnreadableDirectory] = []

        pending: list[Path] = [root]
        while pending:
            directory = pending.pop()

            try:
                children = sorted(directory.iterdir())
            except OSError as e:
                logger.warning("Cannot access %s - %s", directory, e)
                unreadable.append(
                    UnreadableDirectory(path=self._relative(directory, base), error=str(e))
                )
                continue

            subdirs: list[Path] = []
            for child in children:
                full_path = normalize_path(str(child))
                relative = self._relative(child, base)

                if self._is_directory(child):
                    rule = self._rules.match_dir(child.name, full_path)
                    if rule is not None:
                        logger.debug("Excluded directory %s (rule %s)", relative, rule.source)
                        excluded_dirs.append(relative)
                        continue
                    subdirs.append(child)
                    continue

                rule = self._rules.match_file(child.name, full_path)
                if rule is not None:
                    logger.debug("Excluded file %s (rule %s)", relative, rule.source)
                    excluded_files.append(relative)
                    continue
                files.append(relative)

            # Reversed so the first subdirectory is popped next
            pending.extend(reversed(subdirs))

        return ScanResult(
            files=tuple(files),
            excluded_dirs=tuple(excluded_dirs),
            excluded_files=tuple(excluded_files),
            unreadable=tuple(unreadable),
        )

    @staticmethod
    def _is_directory(path: Path) -> bool:
        """True for real directories; symlinks to directories count as files."""
        return path.is_dir() and not path.is_symlink()

    @staticmethod
    def _relative(path: Path, base: Path) -> str:
        """Format path relative to base with forward slashes."""
        return Path(os.path.relpath(path, base)).as_posix()


def walk(
    root: Path,
    base_dir: Path | None = None,
    rules: ExclusionRuleSet | None = None,
) -> ScanResult:
    """Walk a directory tree with the given exclusion rules.

    Convenience wrapper around TreeWalker for one-off walks.

    Args:
        root: Directory to enumerate.
        base_dir: Directory that reported paths are relative to.
        rules: Compiled exclusion rules.

    Returns:
        ScanResult for the walk.
    """
    return TreeWalker(rules).walk(root, base_dir)
