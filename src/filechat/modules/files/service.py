"""
FileChat Files - Service.

Business logic for uploads, file listing, processing previews and deletion.
"""

import asyncio
import logging
from typing import Any

from filechat.core.file_storage import FileStorage
from filechat.core.users_repository import UsersRepository
from filechat.exceptions import FileChatException, NotFoundException
from filechat.modules.conversations.repository import ConversationsRepository
from filechat.modules.files.processor import generate_summary, process_file
from filechat.modules.files.repository import FilesRepository
from filechat.modules.files.schemas import (
    FileRecordResponse,
    ProcessedFileResponse,
    UploadResult,
)
from filechat.observability.metrics import MetricsStore

logger = logging.getLogger(__name__)


def to_file_response(row: dict[str, Any]) -> FileRecordResponse:
    return FileRecordResponse(
        id=row["id"],
        filename=row["filename"],
        file_type=row["file_type"],
        size=row["file_size"],
        upload_date=row.get("upload_date"),
    )


class FilesService:
    """Service for file operations."""

    def __init__(
        self,
        repository: FilesRepository,
        conversations: ConversationsRepository,
        users: UsersRepository,
        storage: FileStorage,
        metrics: MetricsStore,
        user_id: int,
    ):
        self.repository = repository
        self.conversations = conversations
        self.users = users
        self.storage = storage
        self.metrics = metrics
        self.user_id = user_id

    async def upload_files(self, uploads: list[tuple[str, bytes]]) -> list[UploadResult]:
        """
        Store each (filename, content) pair independently.

        A rejected file never touches disk or the database; one failure does
        not stop the rest of the batch.
        """
        await self.users.get_by_id_or_raise(self.user_id)

        results = []
        for filename, content in uploads:
            try:
                file_type = self.storage.validate(filename, len(content))
            except FileChatException as e:
                logger.warning(f"Rejected upload {filename!r}: {e.message}")
                self.metrics.record_error(e.code)
                results.append(
                    UploadResult(filename=filename, success=False, error=e.message, code=e.code)
                )
                continue

            results.append(await self._store(filename, file_type, content))
        return results

    async def _store(self, filename: str, file_type: str, content: bytes) -> UploadResult:
        file_path = None
        try:
            file_path = await asyncio.to_thread(self.storage.save, self.user_id, filename, content)
            record = await self.repository.save_file_record(
                user_id=self.user_id,
                filename=filename,
                file_path=str(file_path),
                file_type=file_type,
                file_size=len(content),
            )
        except (FileChatException, OSError) as e:
            logger.error(f"Error uploading file {filename}: {e}")
            if file_path is not None:
                await asyncio.to_thread(self.storage.delete, file_path)
            code = getattr(e, "code", "STORAGE_ERROR")
            self.metrics.record_error(code)
            return UploadResult(filename=filename, success=False, error="Failed to save file", code=code)

        self.metrics.increment("files_uploaded")
        return UploadResult(
            filename=filename,
            success=True,
            id=record["id"],
            file_type=file_type,
            size=len(content),
        )

    async def _get_owned(self, file_id: int) -> dict[str, Any]:
        row = await self.repository.get_by_id_or_raise(file_id)
        if row["user_id"] != self.user_id:
            raise NotFoundException("files", file_id)
        return row

    async def list_files(self) -> list[FileRecordResponse]:
        return [to_file_response(row) for row in await self.repository.list_by_user(self.user_id)]

    async def get_file(self, file_id: int) -> FileRecordResponse:
        return to_file_response(await self._get_owned(file_id))

    async def process(self, file_id: int) -> ProcessedFileResponse:
        """Run shallow analysis on a stored file."""
        row = await self._get_owned(file_id)
        try:
            processed = await asyncio.to_thread(process_file, row["file_path"], row["file_type"])
        except OSError as e:
            logger.error(f"Cannot read stored file {row['file_path']}: {e}")
            raise NotFoundException("file content", file_id) from e
        return ProcessedFileResponse(
            file=to_file_response(row),
            processed_data=processed,
            summary=generate_summary(processed),
        )

    async def delete_file(self, file_id: int) -> None:
        """
        Remove the blob and the record.

        Conversations that referenced the file keep their history and lose
        only the file link.
        """
        row = await self._get_owned(file_id)
        detached = await self.conversations.detach_file(file_id)
        await self.repository.delete(file_id)
        await asyncio.to_thread(self.storage.delete, row["file_path"])
        logger.info(f"Deleted file {file_id} ({row['filename']}), detached from {detached} conversations")
