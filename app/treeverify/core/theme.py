"""Console color theme.

Colors come from the bundled ``treeverify/data/theme.toml``. Any subset of
keys can be overridden in ``~/.config/treeverify/theme.toml``::

    [colors]
    missing = "#ff8800"
    excluded = "#555"

An unreadable or invalid user theme never stops a verification run; it is
reported and the bundled colors are used instead.
"""

import logging
import re
import sys
import tomllib
from importlib import resources
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from treeverify.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})")


class ThemeColors(BaseModel):
    """Hex colors used by the console output.

    The last four keys color the verification categories; the rest are
    general purpose.
    """

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"
    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    missing: str = "#f5b332"
    extra: str = "#0e8ac8"
    mismatch: str = "#f53263"
    excluded: str = "#7f8c8d"

    @field_validator("*", mode="before")
    @classmethod
    def check_hex(cls, value: object, info: Any) -> str:
        """Accept #RGB or #RRGGBB strings, surrounding whitespace ignored."""
        if not isinstance(value, str):
            raise ValueError(f"{info.field_name}: color must be a string")
        color = value.strip()
        if not color.startswith("#"):
            raise ValueError(f"{info.field_name}: color must start with '#'")
        if len(color) not in (4, 7):
            raise ValueError(f"{info.field_name}: color must be #RGB or #RRGGBB format")
        if not _HEX_COLOR.fullmatch(color):
            raise ValueError(f"{info.field_name}: invalid hex color '{color}'")
        return color


def get_bundled_theme_path() -> Path:
    """Location of the theme shipped with the package."""
    return Path(str(resources.files("treeverify.data").joinpath("theme.toml")))


def read_color_table(path: Path) -> dict[str, str] | None:
    """Read the ``[colors]`` table of a theme file.

    Non-string values are dropped so validation reports only real colors.

    Args:
        path: Theme file.

    Returns:
        Mapping of key to color text, or None if the file is absent,
        unreadable or malformed.
    """
    try:
        with open(path, "rb") as f:
            document = tomllib.load(f)
    except FileNotFoundError:
        return None
    except tomllib.TOMLDecodeError as e:
        logger.warning("Failed to parse theme %s: %s", path, e)
        print(f"Warning: Failed to parse {path}: {e}", file=sys.stderr)
        return None
    except OSError as e:
        logger.warning("Failed to read theme %s: %s", path, e)
        return None

    table = document.get("colors", {})
    if not isinstance(table, dict):
        logger.warning("Ignoring %s: 'colors' is not a table", path)
        return None
    return {key: value for key, value in table.items() if isinstance(value, str)}


def load_theme(user_path: Path | None = None) -> ThemeColors:
    """Merge the user's overrides onto the bundled colors.

    Args:
        user_path: Override file. Defaults to the XDG config location.

    Returns:
        Validated colors; built-in defaults if the merge is invalid.
    """
    bundled = read_color_table(get_bundled_theme_path())
    if bundled is None:
        logger.error("Bundled theme is missing; the installation may be damaged")
        bundled = {}

    override_path = user_path or get_user_theme_path()
    overrides = read_color_table(override_path) or {}
    if overrides:
        logger.debug("Applying %d theme overrides from %s", len(overrides), override_path)

    try:
        return ThemeColors.model_validate({**bundled, **overrides})
    except ValidationError as e:
        logger.warning("Invalid theme, falling back to defaults: %s", e)
        print(f"Warning: Invalid theme configuration: {e}", file=sys.stderr)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich styles used across the CLI.

    Every color key becomes a style of the same name. ``error`` is bold,
    and a few derived styles (``bold_header``, ``dim``, ``path``,
    ``rule.line``) are added for tables and separators.

    Args:
        colors: Colors to use. Loaded with load_theme() if None.

    Returns:
        Rich Theme.
    """
    colors = colors or load_theme()
    styles = colors.model_dump()
    styles["error"] = f"bold {colors.error}"
    styles.update(
        {
            "bold_header": f"bold {colors.header}",
            "dim": colors.muted,
            "path": colors.text,
            "rule.line": colors.border,
        }
    )
    return Theme(styles)


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Return the process-wide Rich theme, building it on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme


def reload_theme() -> Theme:
    """Rebuild the cached theme after the theme files changed."""
    global _cached_theme
    _cached_theme = get_rich_theme()
    return _cached_theme
