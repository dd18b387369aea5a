"""CLI package for treeverify.

This package contains the Typer application and all subcommands.
"""

from treeverify.cli.main import app

__all__ = ["app"]
