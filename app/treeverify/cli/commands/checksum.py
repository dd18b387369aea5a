"""Checksum command implementation.

Recomputes the fingerprint of every file listed in a manifest and reports
mismatches, read errors and missing files.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from treeverify.cli.display import (
    checksum_progress,
    print_checksum_findings,
    print_checksum_report_status,
    print_run_header,
)
from treeverify.cli.types import (
    EXIT_ERROR,
    EXIT_FAILED,
    EXIT_INTERRUPTED,
    OutputFormat,
    is_quiet,
    require_config,
)
from treeverify.core.manifest import ManifestError
from treeverify.core.reports import ReportError
from treeverify.core.verifier import ChecksumRun, VerificationError, verify_checksums
from treeverify.utils.formatting import console, err_console, print_error


def verify_checksum_command(
    ctx: typer.Context,
    manifest: Annotated[
        Path,
        typer.Argument(help="Manifest file (.sha1) listing fingerprints and paths."),
    ],
    target: Annotated[
        Path | None,
        typer.Argument(help="Directory to verify. Defaults to the manifest's directory."),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-w",
            help="Hash files on N threads (overrides config).",
            min=1,
            max=64,
        ),
    ] = None,
    no_progress: Annotated[
        bool,
        typer.Option(
            "--no-progress",
            help="Do not display the progress bar.",
        ),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Verify file contents: report hash mismatches and missing files.

    Every manifest entry is hashed with SHA-1 and compared on its first
    10 hex characters. Failures are saved beside the manifest.

    Examples:
        treeverify checksum release.sha1
        treeverify checksum release.sha1 ./unpacked --workers 8
        treeverify checksum release.sha1 --format json
    """
    config = require_config(ctx)
    if workers is not None:
        config = config.model_copy(update={"workers": workers})

    show_progress = (
        config.show_progress and not no_progress and output_format == OutputFormat.TABLE
    )

    try:
        with checksum_progress(show_progress) as on_progress:
            run = verify_checksums(manifest, target, config=config, on_progress=on_progress)
    except KeyboardInterrupt:
        err_console.print("\n\n[warning]Verification interrupted by user[/]")
        raise typer.Exit(code=EXIT_INTERRUPTED) from None
    except (ManifestError, VerificationError, ReportError) as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from e

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(run.to_dict()), ensure_ascii=True)
    else:
        _print_run(run, preview_limit=config.preview_limit, quiet=is_quiet(ctx))

    if not run.passed:
        raise typer.Exit(code=EXIT_FAILED)


def _print_run(run: ChecksumRun, preview_limit: int, quiet: bool) -> None:
    """Print a checksum run in table form."""
    if not quiet:
        print_run_header(run.manifest_path, run.target_dir, len(run.manifest))
        console.print(f"[muted]Verified {run.report.checked} files[/]")

    print_checksum_findings(run.report.mismatches, run.report.missing, preview_limit)
    print_checksum_report_status(run.failure_report)
