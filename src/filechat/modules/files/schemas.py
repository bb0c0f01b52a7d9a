"""
FileChat Files - Schemas.

Pydantic models for uploaded files and their processed summaries.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class FileKind(str, Enum):
    """What a file is treated as once its type tag is known."""

    TEXT = "text"
    LOG = "log"
    TABLE = "table"
    SPREADSHEET = "spreadsheet"


# =============================================================================
# Processed File
# =============================================================================


class LogStructure(BaseModel):
    """Signals detected in a log file."""

    has_timestamps: bool
    has_log_levels: bool
    has_ip_addresses: bool
    total_lines: int = Field(ge=0)


class TableStructure(BaseModel):
    """Header-row summary of a delimited file."""

    headers: list[str]
    row_count: int = Field(ge=0, description="Data rows, header excluded")
    column_count: int = Field(ge=0)
    delimiter: str = ","


class SpreadsheetStructure(BaseModel):
    """Placeholder structure for binary workbooks."""

    sheets: list[str]
    format: str = "spreadsheet"


class ProcessedFile(BaseModel):
    """Request-scoped summary derived from a file's content. Never persisted."""

    kind: FileKind
    raw_content: str
    byte_size: int = Field(ge=0)
    line_count: int | None = None
    preview_text: str
    columns: list[str] | None = None
    structure_summary: LogStructure | TableStructure | SpreadsheetStructure | None = None


# =============================================================================
# Response Schemas
# =============================================================================


class FileRecordResponse(BaseModel):
    """Stored file metadata."""

    id: int
    filename: str
    file_type: str
    size: int = Field(ge=0)
    upload_date: datetime | None = None


class FileListResponse(BaseModel):
    files: list[FileRecordResponse]


class ProcessedFileResponse(BaseModel):
    """File metadata plus its processing preview."""

    file: FileRecordResponse
    processed_data: ProcessedFile
    summary: str


class UploadResult(BaseModel):
    """Outcome for one file of a multi-file upload."""

    filename: str
    success: bool
    id: int | None = None
    file_type: str | None = None
    size: int | None = None
    error: str | None = None
    code: str | None = None


class UploadResponse(BaseModel):
    results: list[UploadResult]
