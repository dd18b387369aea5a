"""Files command implementation.

Compares the set of paths in a directory tree with a manifest and reports
missing and extra files.
"""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from treeverify.cli.display import (
    format_report_status,
    print_exclusion_log,
    print_preview,
    print_run_header,
    print_unreadable,
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
from treeverify.core.verifier import FilesRun, VerificationError, verify_files
from treeverify.utils.formatting import console, err_console, print_error, print_success

# Pattern added by --ignore-config-dirs
CONFIG_DIR_PATTERN = "config"


def verify_files_command(
    ctx: typer.Context,
    manifest: Annotated[
        Path,
        typer.Argument(help="Manifest file (.sha1) listing the expected files."),
    ],
    target: Annotated[
        Path | None,
        typer.Argument(help="Directory to verify. Defaults to the manifest's directory."),
    ] = None,
    exclude_dir: Annotated[
        list[str] | None,
        typer.Option(
            "--exclude-dir",
            "-x",
            help="Skip directories matching NAME, GLOB or PATH (repeatable).",
        ),
    ] = None,
    exclude_file: Annotated[
        list[str] | None,
        typer.Option(
            "--exclude-file",
            "-X",
            help="Skip files matching NAME, GLOB or PATH (repeatable).",
        ),
    ] = None,
    ignore_config_dirs: Annotated[
        bool,
        typer.Option(
            "--ignore-config-dirs",
            "-i",
            help="Skip every directory named 'config'.",
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
    """Verify file structure: report missing and extra files.

    Patterns without a '/' match entry names anywhere in the tree and may
    use '*' wildcards. Patterns with a '/' match one location relative to
    the target directory.

    Examples:
        treeverify files release.sha1
        treeverify files release.sha1 ./unpacked
        treeverify files release.sha1 -x node_modules -x "build/tmp" -X "*.log"
        treeverify files release.sha1 --format json
    """
    config = require_config(ctx)
    quiet = is_quiet(ctx)

    dir_patterns = list(exclude_dir or [])
    if ignore_config_dirs:
        dir_patterns.append(CONFIG_DIR_PATTERN)
    file_patterns = list(exclude_file or [])

    try:
        if output_format == OutputFormat.JSON:
            run = verify_files(manifest, target, dir_patterns, file_patterns, config=config)
        else:
            with console.status("[info]Scanning target directory...[/]", spinner="dots"):
                run = verify_files(manifest, target, dir_patterns, file_patterns, config=config)
    except KeyboardInterrupt:
        err_console.print("\n\n[warning]Verification interrupted by user[/]")
        raise typer.Exit(code=EXIT_INTERRUPTED) from None
    except (ManifestError, VerificationError, ReportError) as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from e

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(run.to_dict()), ensure_ascii=True)
    else:
        _print_run(run, preview_limit=config.preview_limit, quiet=quiet)

    if not run.passed:
        raise typer.Exit(code=EXIT_FAILED)


def _print_run(run: FilesRun, preview_limit: int, quiet: bool) -> None:
    """Print a file-list run in table form."""
    if not quiet:
        print_run_header(
            run.manifest_path,
            run.target_dir,
            len(run.manifest),
            run.exclude_dirs,
            run.exclude_files,
        )
        if run.manifest.skipped_lines:
            console.print(
                f"[muted]Skipped {run.manifest.skipped_lines} malformed manifest lines[/]"
            )
        console.print(f"[muted]Files found on disk: {len(run.scan.files)}[/]\n")
        print_exclusion_log(run.scan)

    print_unreadable(run.scan)

    console.print(format_report_status("Missing", run.missing_report))
    console.print(format_report_status("Extra", run.extra_report))

    print_preview("Sample missing", run.report.missing, preview_limit)
    print_preview("Sample extra", run.report.extra, preview_limit)

    console.print()
    console.rule(style="border")
    if run.passed:
        print_success("Comparison complete. All files accounted for.")
    else:
        console.print(
            f"[error]Comparison complete. {len(run.report.missing)} missing, "
            f"{len(run.report.extra)} extra.[/error]"
        )
        console.print(f"[muted]Reports are in {escape(str(run.manifest_path.parent))}[/]")
