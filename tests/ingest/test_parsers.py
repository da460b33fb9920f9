"""Tests for file decoders."""

import io

import pytest
from openpyxl import Workbook

from stat_analyzer.core.errors import UnsupportedFileError
from stat_analyzer.ingest import (
    file_type_for,
    parse_file,
    split_text_table,
    supported_extensions,
)


class TestFileTypes:
    """Tests for format detection."""

    @pytest.mark.parametrize(
        ("filename", "file_type"),
        [
            ("data.csv", "csv"),
            ("DATA.XLSX", "excel"),
            ("old.xls", "excel"),
            ("report.pdf", "pdf"),
            ("notes.docx", "word"),
        ],
    )
    def test_known_extensions(self, filename: str, file_type: str) -> None:
        """Test mapping of supported extensions."""
        assert file_type_for(filename) == file_type

    def test_unknown_extension(self) -> None:
        """Test that unsupported files are rejected."""
        with pytest.raises(UnsupportedFileError, match=".txt"):
            file_type_for("data.txt")

    def test_no_extension(self) -> None:
        """Test a file name without an extension."""
        with pytest.raises(UnsupportedFileError):
            parse_file(b"a,b", "README")

    def test_supported_extensions(self) -> None:
        """Test the advertised extension list."""
        assert ".csv" in supported_extensions()
        assert ".pdf" in supported_extensions()


class TestParseCsv:
    """Tests for CSV decoding."""

    def test_headers_and_rows(self, sample_csv: bytes) -> None:
        """Test that every cell is kept as text."""
        table = parse_file(sample_csv, "sample.csv")

        assert table.headers == ["age", "income", "date"]
        assert len(table.rows) == 50
        assert table.rows[0] == ["20", "30000", "2024-01-01"]
        assert table.metadata["file_type"] == "csv"
        assert table.metadata["total_rows"] == 50

    def test_blank_cells_are_empty_strings(self) -> None:
        """Test that pandas NA inference is disabled."""
        table = parse_file(b"x,y\n1,\nNA,2\n", "gaps.csv")
        assert table.rows == [["1", ""], ["NA", "2"]]

    def test_preview(self, sample_csv: bytes) -> None:
        """Test the preview shown before analysis finishes."""
        preview = parse_file(sample_csv, "sample.csv").preview(n=3)

        assert preview["headers"] == ["age", "income", "date"]
        assert len(preview["sample_data"]) == 3
        assert preview["metadata"]["file_name"] == "sample.csv"

    def test_undecodable_content(self) -> None:
        """Test that decoder failures become ValueError."""
        with pytest.raises(ValueError, match="Failed to parse file"):
            parse_file(b"", "empty.csv")


class TestParseExcel:
    """Tests for Excel decoding."""

    def test_first_sheet(self) -> None:
        """Test that the first row becomes the header."""
        workbook = Workbook()
        sheet = workbook.active
        sheet.append(["height", "label"])
        sheet.append([1.5, "a"])
        sheet.append([None, "b"])
        buffer = io.BytesIO()
        workbook.save(buffer)

        table = parse_file(buffer.getvalue(), "book.xlsx")

        assert table.headers == ["height", "label"]
        assert table.rows[0] == [1.5, "a"]
        assert table.rows[1][0] is None
        assert table.metadata["file_type"] == "excel"


class TestSplitTextTable:
    """Tests for table inference from document text."""

    def test_space_separated(self) -> None:
        """Test cells split on runs of spaces and tabs."""
        text = "name  score\nalice  10\nbob\t12\n"
        headers, rows = split_text_table(text)

        assert headers == ["name", "score"]
        assert rows == [["alice", "10"], ["bob", "12"]]

    def test_single_spaces_do_not_split(self) -> None:
        """Test that single spaces stay inside a cell."""
        headers, rows = split_text_table("first name  age\nmary jane  31")

        assert headers == ["first name", "age"]
        assert rows == [["mary jane", "31"]]

    def test_free_text(self) -> None:
        """Test that prose becomes a single text column."""
        headers, rows = split_text_table("Hello world.\n\nSecond line.")

        assert headers == ["Text"]
        assert rows == [["Hello world."], ["Second line."]]
