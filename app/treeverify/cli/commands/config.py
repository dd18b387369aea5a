"""Config command implementation.

Shows, creates and locates the treeverify settings file.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from treeverify.cli.types import EXIT_ERROR, get_option, require_config
from treeverify.core.config import ConfigError, VerifyConfig, save_config
from treeverify.core.paths import get_config_path
from treeverify.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or create the treeverify settings file.",
    no_args_is_help=True,
)


def _selected_path(ctx: typer.Context) -> Path:
    """Config file chosen with --config, or the default location."""
    config_path = get_option(ctx, "config_path")
    if isinstance(config_path, Path):
        return config_path
    return get_config_path()


def _format_value(value: object) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value) if value else "-"
    return str(value)


@app.command()
def show(ctx: typer.Context) -> None:
    """Show the effective settings."""
    config = require_config(ctx)
    path = _selected_path(ctx)

    table = Table(
        title="Settings",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Key", style="info")
    table.add_column("Value", style="text")

    for key, value in config.model_dump().items():
        table.add_row(key, escape(_format_value(value)))

    console.print(table)
    source = escape(str(path)) if path.exists() else "built-in defaults"
    console.print(f"[muted]Source: {source}[/]")


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite an existing config file.",
        ),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    path = _selected_path(ctx)

    if path.exists() and not force:
        print_info(f"Config already exists: {escape(str(path))}")
        print_info("Use --force to overwrite it.")
        return

    try:
        saved = save_config(VerifyConfig(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from e

    print_success(f"Config written to {escape(str(saved))}")


@app.command()
def path(ctx: typer.Context) -> None:
    """Print the config file location."""
    typer.echo(str(_selected_path(ctx)))
