"""Unit tests for the checksum CLI command.

Tests for treeverify checksum: verdicts, reports, worker selection and
error handling.
"""

import json
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

from treeverify.cli.main import app
from treeverify.core.config import VerifyConfig
from treeverify.core.verifier import verify_checksums
from typer.testing import CliRunner

runner = CliRunner()

TREE: dict[str, bytes | str] = {
    "a.txt": "alpha",
    "dir/b.txt": "beta",
}


class TestChecksumCommand:
    """Tests for treeverify checksum."""

    def test_all_match(
        self,
        tmp_path: Path,
        make_tree: Callable[..., Path],
        manifest_for: Callable[..., Path],
    ) -> None:
        """Matching contents exit 0."""
        root = make_tree(TREE)
        manifest = manifest_for(tmp_path / "m.sha1", TREE)

        result = runner.invoke(app, ["checksum", str(manifest), str(root), "--no-progress"])

        assert result.exit_code == 0
        assert "All checks passed. No errors found." in result.output
        assert not (tmp_path / "m_checksum_failed.txt").exists()

    def test_mismatch_and_missing(
        self,
        tmp_path: Path,
        make_tree: Callable[..., Path],
        manifest_for: Callable[..., Path],
    ) -> None:
        """Failures exit 1, are previewed and saved."""
        root = make_tree({"a.txt": "tampered"})
        manifest = manifest_for(tmp_path / "m.sha1", TREE)

        result = runner.invoke(app, ["checksum", str(manifest), str(root), "--no-progress"])

        assert result.exit_code == 1
        assert "[!] Found 1 hash mismatches" in result.output
        assert "[!] Found 1 missing files" in result.output
        assert "Full report saved to:" in result.output
        assert (tmp_path / "m_checksum_failed.txt").exists()

    def test_deleted_report_message(
        self,
        tmp_path: Path,
        make_tree: Callable[..., Path],
        manifest_for: Callable[..., Path],
    ) -> None:
        """A stale report is removed and that is announced."""
        root = make_tree(TREE)
        manifest = manifest_for(tmp_path / "m.sha1", TREE)
        (tmp_path / "m_checksum_failed.txt").write_text("old")

        result = runner.invoke(app, ["checksum", str(manifest), str(root), "--no-progress"])

        assert result.exit_code == 0
        assert "[*] Deleted old report file:" in result.output

    def test_progress_bar_does_not_break_output(
        self,
        tmp_path: Path,
        make_tree: Callable[..., Path],
        manifest_for: Callable[..., Path],
    ) -> None:
        """The default progress display still yields a normal verdict."""
        root = make_tree(TREE)
        manifest = manifest_for(tmp_path / "m.sha1", TREE)

        result = runner.invoke(app, ["checksum", str(manifest), str(root)])

        assert result.exit_code == 0
        assert "All checks passed" in result.output

    def test_workers_option_overrides_config(
        self,
        tmp_path: Path,
        make_tree: Callable[..., Path],
        manifest_for: Callable[..., Path],
    ) -> None:
        """--workers is passed to the verifier through the config."""
        root = make_tree(TREE)
        manifest = manifest_for(tmp_path / "m.sha1", TREE)
        seen: list[VerifyConfig] = []

        def spy(*args, **kwargs):  # type: ignore[no-untyped-def]
            seen.append(kwargs["config"])
            return verify_checksums(*args, **kwargs)

        with patch("treeverify.cli.commands.checksum.verify_checksums", side_effect=spy):
            result = runner.invoke(
                app, ["checksum", str(manifest), str(root), "-w", "3", "--no-progress"]
            )

        assert result.exit_code == 0
        assert seen[0].workers == 3

    def test_workers_out_of_range(self, tmp_path: Path) -> None:
        """--workers is bounded."""
        result = runner.invoke(app, ["checksum", str(tmp_path / "m.sha1"), "-w", "0"])

        assert result.exit_code == 2

    def test_json_output(
        self,
        tmp_path: Path,
        make_tree: Callable[..., Path],
        manifest_for: Callable[..., Path],
        fingerprint: Callable[[bytes | str], str],
    ) -> None:
        """--format json prints mismatches with their cause."""
        root = make_tree({"a.txt": "tampered", "dir/b.txt": "beta"})
        manifest = manifest_for(tmp_path / "m.sha1", TREE)

        result = runner.invoke(app, ["checksum", str(manifest), str(root), "-f", "json"])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["mode"] == "checksum"
        assert data["mismatches"] == [
            {
                "path": "a.txt",
                "detail": f"expected {fingerprint('alpha')}, got {fingerprint('tampered')}",
            }
        ]
        assert data["missing"] == []

    def test_missing_manifest_exit_2(self, tmp_path: Path) -> None:
        """A missing manifest is a fatal error."""
        result = runner.invoke(app, ["checksum", str(tmp_path / "absent.sha1")])

        assert result.exit_code == 2
        assert "Manifest not found" in result.output

    def test_interrupt_exit_130(
        self, tmp_path: Path, write_manifest: Callable[..., Path]
    ) -> None:
        """Ctrl+C exits 130 with a short message."""
        manifest = write_manifest(tmp_path / "m.sha1", [("0000000000", "a.txt")])

        with patch(
            "treeverify.cli.commands.checksum.verify_checksums",
            side_effect=KeyboardInterrupt,
        ):
            result = runner.invoke(app, ["checksum", str(manifest)])

        assert result.exit_code == 130
        assert "Verification interrupted by user" in result.output
