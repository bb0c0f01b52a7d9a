"""
FileChat Files - Repository.

Database operations for uploaded file records.
"""

from typing import Any

from sqlalchemy import Table

from filechat.core.database import files
from filechat.core.repository import BaseRepository


class FilesRepository(BaseRepository):
    """Repository for file records."""

    @property
    def table(self) -> Table:
        return files

    async def list_by_user(self, user_id: int) -> list[dict[str, Any]]:
        """List a user's files, newest upload first."""
        return await self.list(filters={"user_id": user_id}, order_by="upload_date")

    async def save_file_record(
        self,
        user_id: int,
        filename: str,
        file_path: str,
        file_type: str,
        file_size: int,
    ) -> dict[str, Any]:
        return await self.create(
            {
                "user_id": user_id,
                "filename": filename,
                "file_path": file_path,
                "file_type": file_type,
                "file_size": file_size,
            }
        )
