"""
Tests for corpus export formats.
"""

import pytest

from policy_crawler.errors import ExportError
from policy_crawler.exporter import export_csv, format_quoted_rows, format_rows
from policy_crawler.models import ListingNode


RECORDS = [
    ListingNode("X", "https://x.example/privacy"),
    ListingNode("Y", "https://y.example/privacy"),
]


# ============================================================================
# Row formats
# ============================================================================

class TestRawFormat:
    """Default title,policy_url rows."""

    def test_rows_joined_without_header_or_trailing_newline(self):
        """Rows are newline-separated with nothing after the last one."""
        assert format_rows(RECORDS) == "X,https://x.example/privacy\nY,https://y.example/privacy"

    def test_commas_in_titles_are_not_escaped(self):
        """Raw mode writes titles verbatim."""
        rows = format_rows([ListingNode("Notes, Lists & More", "https://n.example/p")])
        assert rows == "Notes, Lists & More,https://n.example/p"

    def test_empty_records(self, tmp_path):
        """No records produce an empty file."""
        path = tmp_path / "corpus.csv"
        export_csv([], str(path))
        assert path.read_text(encoding="utf-8") == ""


class TestQuotedFormat:
    """RFC 4180 rows selected with quote=True."""

    def test_commas_and_quotes_are_escaped(self):
        """Fields with commas are quoted and embedded quotes doubled."""
        rows = format_quoted_rows([ListingNode('Notes, "Pro"', "https://n.example/p")])
        assert rows == '"Notes, ""Pro""",https://n.example/p'

    def test_ends_like_raw_format(self):
        """Both modes stop at the last row without a trailing newline."""
        assert format_quoted_rows(RECORDS) == format_rows(RECORDS)
        assert not format_quoted_rows(RECORDS).endswith("\n")

    def test_empty_records(self):
        """No records give an empty string."""
        assert format_quoted_rows([]) == ""


# ============================================================================
# File output
# ============================================================================

class TestExportCsv:
    """Writing the corpus file."""

    def test_writes_utf8_and_creates_parent(self, tmp_path):
        """Missing directories are created and text is UTF-8."""
        path = tmp_path / "files" / "corpus.csv"
        written = export_csv(RECORDS + [ListingNode("Café Ünïcode", "https://c.example/p")], str(path))
        assert written == str(path.absolute())
        assert path.read_text(encoding="utf-8").splitlines()[-1] == "Café Ünïcode,https://c.example/p"

    def test_overwrites_existing_file(self, tmp_path):
        """A previous corpus is replaced, not appended to."""
        path = tmp_path / "corpus.csv"
        path.write_text("stale,row\nmore,stale\nrows,here", encoding="utf-8")
        export_csv(RECORDS[:1], str(path))
        assert path.read_text(encoding="utf-8") == "X,https://x.example/privacy"

    def test_quoted_mode_escapes_commas(self, tmp_path):
        """quote=True writes quoted rows with no trailing newline."""
        path = tmp_path / "corpus.csv"
        export_csv([ListingNode('Notes, "Pro"', "https://n.example/p")], str(path), quote=True)
        assert path.read_text(encoding="utf-8") == '"Notes, ""Pro""",https://n.example/p'

    def test_unwritable_target_raises_export_error(self, tmp_path):
        """A file in place of the parent directory surfaces as ExportError."""
        blocker = tmp_path / "files"
        blocker.write_text("not a directory", encoding="utf-8")
        with pytest.raises(ExportError) as exc_info:
            export_csv(RECORDS, str(blocker / "corpus.csv"))
        assert exc_info.value.path == str(blocker / "corpus.csv")
