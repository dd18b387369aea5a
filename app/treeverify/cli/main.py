"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from pathlib import Path
from typing import Annotated

import typer

from treeverify import __version__
from treeverify.cli.commands import checksum, config, files
from treeverify.utils.formatting import configure_logging

# Create main Typer app
app = typer.Typer(
    name="treeverify",
    help="Verify directory trees against SHA-1 manifests.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"treeverify version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-C",
            help="Use this config file instead of ~/.config/treeverify/config.toml.",
            dir_okay=False,
        ),
    ] = None,
) -> None:
    """treeverify - Verify directory trees against SHA-1 manifests.

    Check that a copied, extracted or synced directory still matches the
    manifest it was recorded with: [bold]files[/bold] compares which paths
    exist, [bold]checksum[/bold] compares file contents.
    """
    configure_logging(verbose)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config_path


# Register commands
app.command(name="files")(files.verify_files_command)
app.command(name="checksum")(checksum.verify_checksum_command)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
