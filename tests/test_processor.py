"""
Tests for file ingestion and shallow analysis.
"""

import pytest

from filechat.exceptions import UnsupportedFileTypeException
from filechat.modules.files.processor import (
    SPREADSHEET_PREVIEW,
    format_file_size,
    generate_summary,
    process_content,
    process_file,
    structure_as_text,
)
from filechat.modules.files.schemas import FileKind, LogStructure, TableStructure


class TestFormatFileSize:
    """Human-readable sizes."""

    @pytest.mark.parametrize(
        "size,expected",
        [
            (0, "0 Bytes"),
            (500, "500 Bytes"),
            (1024, "1 KB"),
            (1536, "1.5 KB"),
            (1024 * 1024, "1 MB"),
            (200 * 1024 * 1024, "200 MB"),
            (3 * 1024**3, "3 GB"),
            (2048 * 1024**3, "2048 GB"),
        ],
    )
    def test_format(self, size, expected):
        assert format_file_size(size) == expected


class TestTextFiles:
    def test_line_count_and_preview(self):
        content = "\n".join(f"line {i}" for i in range(15))
        processed = process_content(content, "txt")

        assert processed.kind == FileKind.TEXT
        assert processed.line_count == 15
        assert processed.preview_text.split("\n") == [f"line {i}" for i in range(10)]
        assert processed.structure_summary is None

    def test_bytes_are_decoded_with_replacement(self):
        processed = process_content(b"caf\xc3\xa9 \xff", "txt")
        assert processed.raw_content.startswith("café")
        assert processed.byte_size == 7

    def test_summary(self):
        processed = process_content("a\nb\nc", "txt")
        assert generate_summary(processed) == "Text file with 3 lines (5 Bytes)"


class TestLogFiles:
    def test_detects_timestamps_levels_and_ips(self):
        processed = process_content("2024-01-15 10:30:00 ERROR 192.168.1.1 failed", "log")
        structure = processed.structure_summary

        assert isinstance(structure, LogStructure)
        assert structure.has_timestamps is True
        assert structure.has_log_levels is True
        assert structure.has_ip_addresses is True

    def test_plain_lines_detect_nothing(self):
        processed = process_content("hello\nworld\n", "log")
        structure = processed.structure_summary

        assert structure.has_timestamps is False
        assert structure.has_log_levels is False
        assert structure.has_ip_addresses is False

    def test_level_match_is_case_insensitive(self):
        processed = process_content("service warn: disk almost full", "log")
        assert processed.structure_summary.has_log_levels is True

    def test_blank_lines_dropped(self):
        processed = process_content("first\n\n   \nsecond\n", "log")
        assert processed.line_count == 2
        assert processed.structure_summary.total_lines == 2
        assert processed.preview_text == "first\nsecond"

    def test_summary_lists_only_present_signals(self):
        processed = process_content("2024-01-15 started\nINFO ready", "log")
        assert generate_summary(processed) == (
            "Log file with 2 entries. Contains timestamps. Contains log levels."
        )


class TestTableFiles:
    def test_headers_rows_columns(self):
        processed = process_content("a,b,c\n1,2,3\n4,5,6", "csv")
        structure = processed.structure_summary

        assert isinstance(structure, TableStructure)
        assert structure.headers == ["a", "b", "c"]
        assert structure.row_count == 2
        assert structure.column_count == 3
        assert structure.delimiter == ","
        assert processed.columns == ["a", "b", "c"]

    def test_headers_trimmed_and_unquoted(self):
        processed = process_content('"Name" , "Age"\nAda,36', "csv")
        assert processed.structure_summary.headers == ["Name", "Age"]

    def test_empty_file(self):
        processed = process_content("", "csv")
        assert processed.structure_summary.headers == []
        assert processed.structure_summary.row_count == 0

    def test_preview_is_six_lines(self):
        content = "h\n" + "\n".join(str(i) for i in range(20))
        processed = process_content(content, "csv")
        assert len(processed.preview_text.split("\n")) == 6

    def test_summary_truncates_headers(self):
        processed = process_content("a,b,c,d\n1,2,3,4", "csv")
        assert generate_summary(processed) == (
            "CSV file with 1 rows and 4 columns. Headers: a, b, c..."
        )

    def test_structure_as_text_is_indented_json(self):
        processed = process_content("a,b\n1,2", "csv")
        text = structure_as_text(processed)
        assert '"row_count": 1' in text
        assert text.startswith("{\n  ")


class TestSpreadsheetFiles:
    def test_placeholder(self):
        processed = process_content(b"PK\x03\x04binary", "xlsx")

        assert processed.kind == FileKind.SPREADSHEET
        assert processed.preview_text == SPREADSHEET_PREVIEW
        assert processed.structure_summary.sheets == ["Sheet1"]
        assert processed.byte_size == 10

    def test_summary(self):
        processed = process_content(b"x" * 2048, "xlsx")
        assert generate_summary(processed) == (
            "Excel file (2 KB). Full processing available after upload."
        )


class TestUnsupported:
    def test_unknown_type_raises(self):
        with pytest.raises(UnsupportedFileTypeException) as exc_info:
            process_content("MZ", "exe")
        assert exc_info.value.status_code == 415

    def test_process_file_reads_disk(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("x,y\n1,2\n")
        processed = process_file(path, "csv")
        assert processed.structure_summary.row_count == 1

    def test_process_file_checks_type_before_reading(self, tmp_path):
        with pytest.raises(UnsupportedFileTypeException):
            process_file(tmp_path / "missing.exe", "exe")
