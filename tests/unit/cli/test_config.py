"""Unit tests for config CLI commands.

Tests for treeverify config show, init and path.
"""

from pathlib import Path

from treeverify.cli.main import app
from treeverify.core.config import VerifyConfig, load_config
from typer.testing import CliRunner

runner = CliRunner()


class TestConfigPath:
    """Tests for treeverify config path."""

    def test_default_location(self, isolated_config_home: Path) -> None:
        """Prints the XDG config file path."""
        result = runner.invoke(app, ["config", "path"])

        assert result.exit_code == 0
        assert result.stdout.strip() == str(isolated_config_home / "treeverify" / "config.toml")

    def test_explicit_location(self, tmp_path: Path) -> None:
        """--config changes the reported path."""
        custom = tmp_path / "custom.toml"

        result = runner.invoke(app, ["--config", str(custom), "config", "path"])

        assert result.stdout.strip() == str(custom)


class TestConfigInit:
    """Tests for treeverify config init."""

    def test_creates_default_file(self, isolated_config_home: Path) -> None:
        """init writes default settings."""
        result = runner.invoke(app, ["config", "init"])

        path = isolated_config_home / "treeverify" / "config.toml"
        assert result.exit_code == 0
        assert "Config written to" in result.output
        assert load_config(path) == VerifyConfig()

    def test_keeps_existing_file(self, tmp_path: Path) -> None:
        """init does not overwrite without --force."""
        path = tmp_path / "config.toml"
        path.write_text("workers = 4\n")

        result = runner.invoke(app, ["--config", str(path), "config", "init"])

        assert result.exit_code == 0
        assert "already exists" in result.output
        assert path.read_text() == "workers = 4\n"

    def test_force_overwrites(self, tmp_path: Path) -> None:
        """init --force replaces the file with defaults."""
        path = tmp_path / "config.toml"
        path.write_text("workers = 4\n")

        result = runner.invoke(app, ["--config", str(path), "config", "init", "--force"])

        assert result.exit_code == 0
        assert load_config(path).workers == 1


class TestConfigShow:
    """Tests for treeverify config show."""

    def test_defaults(self) -> None:
        """Without a file the built-in defaults are shown."""
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "workers" in result.output
        assert "preview_limit" in result.output
        assert "built-in defaults" in result.output

    def test_values_from_file(self, tmp_path: Path) -> None:
        """Values from --config are shown."""
        path = tmp_path / "c.toml"
        path.write_text('exclude_dirs = ["node_modules"]\n')

        result = runner.invoke(app, ["--config", str(path), "config", "show"])

        assert result.exit_code == 0
        assert "node_modules" in result.output

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        """An explicit --config that does not exist is an error."""
        result = runner.invoke(app, ["--config", str(tmp_path / "absent.toml"), "config", "show"])

        assert result.exit_code == 2
        assert "Config not found" in result.output
