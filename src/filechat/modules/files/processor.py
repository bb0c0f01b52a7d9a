"""
FileChat Files - Processor.

Shallow analysis of an uploaded file: classify it by its declared type
tag, build a short preview and a kind-specific structure summary. Nothing
here looks past the declared tag or parses quoted CSV fields.
"""

import json
import re
from pathlib import Path

from filechat.exceptions import UnsupportedFileTypeException
from filechat.modules.files.schemas import (
    FileKind,
    LogStructure,
    ProcessedFile,
    SpreadsheetStructure,
    TableStructure,
)

TEXT_PREVIEW_LINES = 10
LOG_PREVIEW_LINES = 10
TABLE_PREVIEW_LINES = 6

SPREADSHEET_PREVIEW = (
    "Excel file processing requires additional libraries. File uploaded successfully."
)
SPREADSHEET_CONTENT = "Excel file content (binary)"

# Declared type tag (file extension) -> kind
FILE_TYPE_KINDS: dict[str, FileKind] = {
    "txt": FileKind.TEXT,
    "log": FileKind.LOG,
    "csv": FileKind.TABLE,
    "xlsx": FileKind.SPREADSHEET,
}

TIMESTAMP_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}(?:[ \tT]\d{2}:\d{2}:\d{2})?")
LEVEL_PATTERN = re.compile(r"\b(?:ERROR|WARN|INFO|DEBUG|TRACE|FATAL)\b", re.IGNORECASE)
IP_PATTERN = re.compile(r"\b\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}\b")

SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def kind_for_file_type(file_type: str) -> FileKind:
    """Map a declared type tag to a FileKind, raising for unknown tags."""
    kind = FILE_TYPE_KINDS.get(file_type.lower())
    if kind is None:
        raise UnsupportedFileTypeException(file_type, list(FILE_TYPE_KINDS))
    return kind


def process_content(content: bytes | str, file_type: str) -> ProcessedFile:
    """
    Build a ProcessedFile from raw content and its declared type tag.

    Raises:
        UnsupportedFileTypeException: tag is not txt, log, csv or xlsx
    """
    kind = kind_for_file_type(file_type)

    if isinstance(content, bytes):
        size = len(content)
        text = content.decode("utf-8", errors="replace") if kind != FileKind.SPREADSHEET else ""
    else:
        text = content
        size = len(content.encode("utf-8"))

    if kind == FileKind.TEXT:
        return _process_text(text, size)
    if kind == FileKind.LOG:
        return _process_log(text, size)
    if kind == FileKind.TABLE:
        return _process_table(text, size)
    return _process_spreadsheet(size)


def process_file(file_path: str | Path, file_type: str) -> ProcessedFile:
    """Read a stored file and process it."""
    kind_for_file_type(file_type)
    return process_content(Path(file_path).read_bytes(), file_type)


def _process_text(content: str, size: int) -> ProcessedFile:
    lines = content.split("\n")
    return ProcessedFile(
        kind=FileKind.TEXT,
        raw_content=content,
        byte_size=size,
        line_count=len(lines),
        preview_text="\n".join(lines[:TEXT_PREVIEW_LINES]),
    )


def _process_log(content: str, size: int) -> ProcessedFile:
    lines = [line for line in content.split("\n") if line.strip()]
    structure = LogStructure(
        has_timestamps=bool(TIMESTAMP_PATTERN.search(content)),
        has_log_levels=bool(LEVEL_PATTERN.search(content)),
        has_ip_addresses=bool(IP_PATTERN.search(content)),
        total_lines=len(lines),
    )
    return ProcessedFile(
        kind=FileKind.LOG,
        raw_content=content,
        byte_size=size,
        line_count=len(lines),
        preview_text="\n".join(lines[:LOG_PREVIEW_LINES]),
        structure_summary=structure,
    )


def _process_table(content: str, size: int) -> ProcessedFile:
    lines = [line for line in content.split("\n") if line.strip()]
    headers = [h.strip().replace('"', "") for h in lines[0].split(",")] if lines else []
    structure = TableStructure(
        headers=headers,
        row_count=max(len(lines) - 1, 0),
        column_count=len(headers),
        delimiter=",",
    )
    return ProcessedFile(
        kind=FileKind.TABLE,
        raw_content=content,
        byte_size=size,
        line_count=len(lines),
        preview_text="\n".join(lines[:TABLE_PREVIEW_LINES]),
        columns=headers,
        structure_summary=structure,
    )


def _process_spreadsheet(size: int) -> ProcessedFile:
    # Binary workbooks are not parsed
    return ProcessedFile(
        kind=FileKind.SPREADSHEET,
        raw_content=SPREADSHEET_CONTENT,
        byte_size=size,
        preview_text=SPREADSHEET_PREVIEW,
        structure_summary=SpreadsheetStructure(sheets=["Sheet1"], format="spreadsheet"),
    )


# =============================================================================
# Display helpers
# =============================================================================


def format_file_size(size_bytes: int) -> str:
    """
    Human-readable size: 0 -> "0 Bytes", 1024 -> "1 KB", 1536 -> "1.5 KB".
    """
    if size_bytes <= 0:
        return "0 Bytes"

    index = 0
    while index < len(SIZE_UNITS) - 1 and size_bytes >= 1024 ** (index + 1):
        index += 1

    value = f"{size_bytes / 1024 ** index:.2f}".rstrip("0").rstrip(".")
    return f"{value} {SIZE_UNITS[index]}"


def generate_summary(processed: ProcessedFile) -> str:
    """One-line description of a processed file."""
    size = format_file_size(processed.byte_size)
    structure = processed.structure_summary

    if processed.kind == FileKind.TEXT:
        return f"Text file with {processed.line_count} lines ({size})"

    if processed.kind == FileKind.LOG and isinstance(structure, LogStructure):
        parts = [f"Log file with {processed.line_count} entries."]
        if structure.has_timestamps:
            parts.append("Contains timestamps.")
        if structure.has_log_levels:
            parts.append("Contains log levels.")
        if structure.has_ip_addresses:
            parts.append("Contains IP addresses.")
        return " ".join(parts)

    if processed.kind == FileKind.TABLE and isinstance(structure, TableStructure):
        headers = ", ".join(structure.headers[:3])
        more = "..." if len(structure.headers) > 3 else ""
        return (
            f"CSV file with {structure.row_count} rows and {structure.column_count} columns. "
            f"Headers: {headers}{more}"
        )

    if processed.kind == FileKind.SPREADSHEET:
        return f"Excel file ({size}). Full processing available after upload."

    return f"File processed ({size})"


def structure_as_text(processed: ProcessedFile) -> str | None:
    """Structure summary as indented JSON for prompts, or None."""
    if processed.structure_summary is None:
        return None
    return json.dumps(processed.structure_summary.model_dump(), indent=2)
