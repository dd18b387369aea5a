"""CLI commands for treeverify.

This package contains all subcommand implementations.
"""

from treeverify.cli.commands import checksum, config, files

__all__ = ["checksum", "config", "files"]
