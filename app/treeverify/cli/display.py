"""Shared Rich display functions for verification runs.

Provides the run header, exclusion logs, capped previews of each failure
category, sidecar report status lines and the checksum progress bar used
by the files and checksum commands.
"""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from treeverify.core.reconcile import ProgressCallback
from treeverify.core.reports import ReportAction, ReportOutcome
from treeverify.models.report import Mismatch
from treeverify.models.scan_result import ScanResult
from treeverify.utils.formatting import console, print_success, print_warning


def printable(path: str) -> str:
    """Escape a path for Rich markup, showing undecodable name bytes as "?"."""
    return escape(path.encode("utf-8", "replace").decode("utf-8"))


def print_run_header(
    manifest_path: Path,
    target_dir: Path,
    expected: int,
    exclude_dirs: Sequence[str] = (),
    exclude_files: Sequence[str] = (),
) -> None:
    """Print the manifest, target and exclusion rules of a run.

    Args:
        manifest_path: Manifest being verified.
        target_dir: Tree being verified.
        expected: Number of manifest entries.
        exclude_dirs: Directory patterns in effect.
        exclude_files: File patterns in effect.
    """
    console.print(f"\n[header]Manifest file:[/] {printable(str(manifest_path))}")
    console.print(f"[header]Target directory:[/] {printable(str(target_dir))}")
    console.print(f"[header]Expected files in manifest:[/] {expected}\n")

    if exclude_dirs:
        console.print("[header]Exclude Rules (Dir):[/]")
        for pattern in exclude_dirs:
            console.print(f"  - {escape(pattern)}")
    if exclude_files:
        console.print("[header]Exclude Rules (File):[/]")
        for pattern in exclude_files:
            console.print(f"  - {escape(pattern)}")


def print_exclusion_log(scan: ScanResult) -> None:
    """Print the directories and files skipped by exclusion rules."""
    if scan.excluded_dirs:
        console.print("[header]Folders Skipped:[/]")
        for path in scan.excluded_dirs:
            console.print(f"  [excluded]\\[DIR][/]  {printable(path)}")
    if scan.excluded_files:
        console.print("[header]Files Skipped:[/]")
        for path in scan.excluded_files:
            console.print(f"  [excluded]\\[FILE][/] {printable(path)}")
    if scan.has_exclusions:
        console.print()


def print_unreadable(scan: ScanResult) -> None:
    """Warn about directories the walk could not list."""
    for entry in scan.unreadable:
        print_warning(f"Cannot access {printable(entry.path)} - {escape(entry.error)}")


def format_report_status(label: str, outcome: ReportOutcome) -> str:
    """Format the one-line status of a sidecar category.

    Args:
        label: Category label, e.g. "Missing".
        outcome: What happened to the sidecar.

    Returns:
        Rich markup such as "- Extra: 0 (old report deleted)".
    """
    if outcome.action == ReportAction.WRITTEN:
        return (
            f"[warning]- {label}: {outcome.count} "
            f"(saved to {printable(outcome.path.name)})[/warning]"
        )
    if outcome.action == ReportAction.DELETED:
        return f"[success]- {label}: 0 (old report deleted)[/success]"
    return f"[success]- {label}: 0[/success]"


def print_preview(title: str, items: Sequence[str], limit: int) -> None:
    """Print the first few entries of a failure category.

    Args:
        title: Heading, e.g. "Sample missing".
        items: Entries of the category.
        limit: Maximum entries shown; "..." marks truncation.
    """
    if not items or limit <= 0:
        return
    console.print(f"\n[error]{title}:[/error]")
    for item in items[:limit]:
        console.print(f"  {printable(item)}")
    if len(items) > limit:
        console.print("  ...")


def create_mismatch_table(mismatches: Sequence[Mismatch], limit: int) -> Table:
    """Create a Rich table previewing checksum failures.

    Args:
        mismatches: Checksum failures in manifest order.
        limit: Maximum rows shown.

    Returns:
        Rich Table with Path and Cause columns.
    """
    table = Table(
        title="Sample mismatches",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Path", style="path", overflow="fold")
    table.add_column("Cause", style="mismatch")

    for mismatch in mismatches[:limit]:
        table.add_row(printable(mismatch.path), escape(mismatch.detail))
    if len(mismatches) > limit:
        table.add_row("...", "")

    return table


def print_checksum_findings(
    mismatches: Sequence[Mismatch],
    missing: Sequence[str],
    limit: int,
) -> None:
    """Print the checksum run verdict with capped previews.

    Args:
        mismatches: Hash mismatches and read errors.
        missing: Paths absent from disk.
        limit: Maximum entries previewed per category.
    """
    if not mismatches and not missing:
        print_success("\nAll checks passed. No errors found.")
        return

    if mismatches:
        console.print(f"\n[error]\\[!] Found {len(mismatches)} hash mismatches[/error]")
        if limit > 0:
            console.print(create_mismatch_table(mismatches, limit))
    if missing:
        console.print(f"\n[error]\\[!] Found {len(missing)} missing files[/error]")
        print_preview("Sample missing files", missing, limit)


def print_checksum_report_status(outcome: ReportOutcome) -> None:
    """Print where the checksum report went, or that an old one was removed."""
    if outcome.action == ReportAction.WRITTEN:
        console.print(f"\n[warning]Full report saved to: {printable(str(outcome.path))}[/warning]")
    elif outcome.action == ReportAction.DELETED:
        console.print(
            f"\n[warning]\\[*] Deleted old report file: {printable(str(outcome.path))}[/warning]"
        )


@contextmanager
def checksum_progress(enabled: bool = True) -> Iterator[ProgressCallback | None]:
    """Display a transient progress bar fed by verification events.

    Args:
        enabled: If False, no bar is shown and None is yielded.

    Yields:
        Callback accepting (current, total, path), or None when disabled.
    """
    if not enabled:
        yield None
        return

    progress = Progress(
        TextColumn("[info]Checking[/]"),
        BarColumn(),
        TaskProgressColumn(),
        MofNCompleteColumn(),
        TimeRemainingColumn(),
        TextColumn("[muted]{task.fields[path]}[/]"),
        console=console,
        transient=True,
    )
    task_id = progress.add_task("checksum", total=None, path="")

    def update(current: int, total: int, path: str) -> None:
        progress.update(task_id, completed=current, total=total, path=printable(path))

    with progress:
        yield update
