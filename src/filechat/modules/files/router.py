"""
FileChat Files - Router.

API endpoints for uploading, listing, previewing and deleting files.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from filechat.config import Settings
from filechat.core.database import Database
from filechat.core.file_storage import FileStorage
from filechat.core.users_repository import UsersRepository
from filechat.deps import (
    get_app_settings,
    get_database,
    get_file_storage,
    get_metrics,
    require_files,
    require_upload,
)
from filechat.exceptions import ValidationException
from filechat.modules.conversations.repository import ConversationsRepository
from filechat.modules.files.repository import FilesRepository
from filechat.modules.files.schemas import (
    FileListResponse,
    FileRecordResponse,
    ProcessedFileResponse,
    UploadResponse,
)
from filechat.modules.files.service import FilesService
from filechat.observability.metrics import MetricsStore
from filechat.schemas import SuccessResponse

upload_router = APIRouter(prefix="/api", tags=["upload"], dependencies=[require_upload])

router = APIRouter(prefix="/api/files", tags=["files"], dependencies=[require_files])


def get_service(
    database: Database = Depends(get_database),
    storage: FileStorage = Depends(get_file_storage),
    metrics: MetricsStore = Depends(get_metrics),
    settings: Settings = Depends(get_app_settings),
) -> FilesService:
    """Get files service instance."""
    return FilesService(
        FilesRepository(database),
        ConversationsRepository(database),
        UsersRepository(database),
        storage,
        metrics,
        user_id=settings.default_user_id,
    )


@upload_router.post("/upload", response_model=UploadResponse)
async def upload_files(
    files: list[UploadFile] = File(..., description="One or more .log, .csv, .xlsx or .txt files"),
    service: FilesService = Depends(get_service),
):
    """
    Upload one or more files.

    Each file is validated (extension, 200MB ceiling) and stored
    independently; the response lists a pass/fail result per file.
    """
    if not files:
        raise ValidationException("No files provided")

    uploads = []
    for upload in files:
        if not upload.filename:
            raise ValidationException("Filename is required")
        uploads.append((upload.filename, await upload.read()))

    return UploadResponse(results=await service.upload_files(uploads))


@router.get("", response_model=FileListResponse)
async def list_files(service: FilesService = Depends(get_service)):
    """List uploaded files, newest first."""
    return FileListResponse(files=await service.list_files())


@router.get("/{file_id}", response_model=FileRecordResponse)
async def get_file(file_id: int, service: FilesService = Depends(get_service)):
    """Get stored metadata for a file."""
    return await service.get_file(file_id)


@router.get("/{file_id}/process", response_model=ProcessedFileResponse)
async def process_file(file_id: int, service: FilesService = Depends(get_service)):
    """Preview how the agent sees a file: kind, preview, structure and summary."""
    return await service.process(file_id)


@router.delete("/{file_id}", response_model=SuccessResponse)
async def delete_file(file_id: int, service: FilesService = Depends(get_service)):
    """Delete a file and detach it from conversations."""
    await service.delete_file(file_id)
    return SuccessResponse()
