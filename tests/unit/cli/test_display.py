"""Unit tests for CLI display helpers.

Tests for report status lines, previews and the mismatch table.
"""

from pathlib import Path

from rich.console import Console
from rich.table import Table
from treeverify.cli.display import (
    checksum_progress,
    create_mismatch_table,
    format_report_status,
    print_preview,
    printable,
)
from treeverify.core.reports import ReportAction, ReportOutcome
from treeverify.core.theme import get_theme
from treeverify.models.report import Mismatch


def _render(table: Table) -> str:
    console = Console(theme=get_theme(), width=120, record=True)
    console.print(table)
    return console.export_text()


class TestFormatReportStatus:
    """Tests for format_report_status function."""

    def test_written(self) -> None:
        """Written reports show the count and file name."""
        outcome = ReportOutcome(Path("/x/m_missing_files.txt"), ReportAction.WRITTEN, 3)

        text = format_report_status("Missing", outcome)

        assert "- Missing: 3 (saved to m_missing_files.txt)" in text

    def test_deleted(self) -> None:
        """Deleted reports are announced."""
        outcome = ReportOutcome(Path("/x/m_extra_files.txt"), ReportAction.DELETED, 0)

        assert "- Extra: 0 (old report deleted)" in format_report_status("Extra", outcome)

    def test_unchanged(self) -> None:
        """No findings and no report gives a bare zero."""
        outcome = ReportOutcome(Path("/x/m_extra_files.txt"), ReportAction.UNCHANGED, 0)

        text = format_report_status("Extra", outcome)

        assert "- Extra: 0" in text
        assert "deleted" not in text


class TestPrintPreview:
    """Tests for print_preview function."""

    def test_truncates_with_ellipsis(self, capsys) -> None:  # type: ignore[no-untyped-def]
        """Only limit items are printed, followed by '...'."""
        print_preview("Sample missing", ["a", "b", "c"], limit=2)

        out = capsys.readouterr().out
        assert "Sample missing:" in out
        assert "  a" in out
        assert "  b" in out
        assert "  c" not in out
        assert "..." in out

    def test_zero_limit_prints_nothing(self, capsys) -> None:  # type: ignore[no-untyped-def]
        """A zero limit suppresses the preview."""
        print_preview("Sample missing", ["a"], limit=0)

        assert capsys.readouterr().out == ""


class TestCreateMismatchTable:
    """Tests for create_mismatch_table function."""

    def test_rows(self) -> None:
        """Each mismatch becomes a row with its cause."""
        table = create_mismatch_table(
            [Mismatch("a.txt", "expected 0000000000, got abc1234567")], limit=5
        )

        text = _render(table)
        assert "a.txt" in text
        assert "expected 0000000000, got abc1234567" in text
        assert table.row_count == 1

    def test_limit_adds_ellipsis_row(self) -> None:
        """Rows beyond the limit are replaced by '...'."""
        mismatches = [Mismatch(f"f{i}", "x") for i in range(4)]

        table = create_mismatch_table(mismatches, limit=2)

        assert table.row_count == 3

    def test_markup_in_paths_is_literal(self) -> None:
        """Paths containing brackets are shown verbatim."""
        table = create_mismatch_table([Mismatch("[bold]x[/bold].txt", "x")], limit=5)

        assert "[bold]x[/bold].txt" in _render(table)


class TestChecksumProgress:
    """Tests for checksum_progress context manager."""

    def test_disabled_yields_none(self) -> None:
        """No callback is provided when progress is disabled."""
        with checksum_progress(False) as callback:
            assert callback is None

    def test_enabled_yields_callback(self) -> None:
        """The callback accepts progress events."""
        with checksum_progress(True) as callback:
            assert callback is not None
            callback(1, 2, "a.txt")
            callback(2, 2, "b.txt")


class TestPrintable:
    """Tests for printable function."""

    def test_undecodable_bytes_become_question_marks(self) -> None:
        """Surrogate-escaped file name bytes are shown as '?'."""
        assert printable(b"bad\xff.txt".decode("utf-8", "surrogateescape")) == "bad?.txt"

    def test_markup_is_escaped(self) -> None:
        """Rich markup in a path is escaped."""
        assert printable("[x].txt") == "\\[x].txt"

    def test_preview_with_undecodable_name(self, capsys) -> None:  # type: ignore[no-untyped-def]
        """A preview containing an undecodable name prints without error."""
        name = b"bad\xff.txt".decode("utf-8", "surrogateescape")

        print_preview("Sample extra", [name], limit=5)

        assert "bad?.txt" in capsys.readouterr().out
