"""Shared types and utilities for CLI commands.

This module provides common enums, exit codes and helper functions used
across multiple CLI command modules to avoid code duplication.
"""

from enum import Enum
from pathlib import Path

import typer

from treeverify.core.config import ConfigError, VerifyConfig, get_config, load_config
from treeverify.utils.formatting import print_error

# Process exit statuses
EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ERROR = 2
EXIT_INTERRUPTED = 130


class OutputFormat(str, Enum):
    """Output format options for verification commands."""

    TABLE = "table"
    JSON = "json"


def get_option(ctx: typer.Context, key: str, default: object = None) -> object:
    """Read a global option stored by the root callback."""
    if isinstance(ctx.obj, dict):
        return ctx.obj.get(key, default)
    return default


def is_quiet(ctx: typer.Context) -> bool:
    """True if --quiet was given on the root command."""
    return bool(get_option(ctx, "quiet", False))


def require_config(ctx: typer.Context) -> VerifyConfig:
    """Load the run configuration or exit with a helpful error message.

    An explicit --config path must exist; the default path may be absent,
    in which case built-in defaults are used.

    Args:
        ctx: Typer context carrying the root command options.

    Returns:
        Loaded VerifyConfig.

    Raises:
        typer.Exit: If the configuration cannot be loaded.
    """
    config_path = get_option(ctx, "config_path")
    try:
        if isinstance(config_path, Path):
            return load_config(config_path)
        return get_config()
    except ConfigError as e:
        print_error(f"Failed to load config: {e}")
        raise typer.Exit(code=EXIT_ERROR) from e
