"""Verification settings.

This module provides the configuration model and I/O functions for
treeverify. Settings are stored in ~/.config/treeverify/config.toml::

    exclude_dirs = ["node_modules", ".git"]
    exclude_files = ["*.log"]
    workers = 4

Command-line options add to or override these values for a single run.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from treeverify.core.hasher import DEFAULT_CHUNK_SIZE
from treeverify.core.paths import get_config_path

logger = logging.getLogger(__name__)


class VerifyConfig(BaseModel):
    """Configuration for verification runs.

    Attributes:
        exclude_dirs: Directory patterns applied to every file-list run.
        exclude_files: File patterns applied to every file-list run.
        case_sensitive_paths: Match path patterns case-sensitively.
        chunk_size: Bytes read per hashing step.
        workers: Hashing threads for checksum runs (1 = sequential).
        preview_limit: Entries shown per failure category on the console.
        show_progress: Display a progress bar during checksum runs.
    """

    model_config = ConfigDict(extra="forbid")

    exclude_dirs: Annotated[
        list[str],
        Field(default_factory=list, description="Directory exclusion patterns"),
    ]
    exclude_files: Annotated[
        list[str],
        Field(default_factory=list, description="File exclusion patterns"),
    ]
    case_sensitive_paths: Annotated[
        bool,
        Field(description="Match path patterns case-sensitively"),
    ] = False
    chunk_size: Annotated[
        int,
        Field(ge=4096, le=64 * 1024 * 1024, description="Hash read size in bytes"),
    ] = DEFAULT_CHUNK_SIZE
    workers: Annotated[
        int,
        Field(ge=1, le=64, description="Hashing threads (1-64)"),
    ] = 1
    preview_limit: Annotated[
        int,
        Field(ge=0, le=1000, description="Entries previewed per category"),
    ] = 5
    show_progress: Annotated[
        bool,
        Field(description="Show checksum progress bar"),
    ] = True


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> VerifyConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated VerifyConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or its content is invalid.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return VerifyConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def get_config(path: Path | None = None) -> VerifyConfig:
    """Load configuration, falling back to defaults when no file exists.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        VerifyConfig from the file, or defaults if the file is absent.

    Raises:
        ConfigError: If the file exists but is unreadable or invalid.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file at %s, using defaults", path or get_config_path())
        return VerifyConfig()


def save_config(config: VerifyConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The VerifyConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config.model_dump(), f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
