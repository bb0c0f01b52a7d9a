"""
FileChat Conversations - Repository.

Database operations for conversations. History is one JSON blob per row,
rewritten in full on every update.
"""

import json
from typing import Any

from sqlalchemy import Table, func, update

from filechat.core.database import conversations
from filechat.core.repository import BaseRepository


class ConversationsRepository(BaseRepository):
    """Repository for conversations."""

    @property
    def table(self) -> Table:
        return conversations

    async def list_by_user(self, user_id: int) -> list[dict[str, Any]]:
        """List a user's conversations, most recently updated first."""
        return await self.list(filters={"user_id": user_id}, order_by="updated_at")

    async def create_conversation(
        self, user_id: int, title: str, file_id: int | None = None
    ) -> dict[str, Any]:
        return await self.create(
            {
                "user_id": user_id,
                "file_id": file_id,
                "title": title,
                "history_json": json.dumps([]),
            }
        )

    async def update_history(self, id: int, messages: list[dict[str, Any]]) -> dict[str, Any]:
        """Replace the whole history blob (last writer wins)."""
        return await self.update(
            id,
            {"history_json": json.dumps(messages), "updated_at": func.current_timestamp()},
        )

    async def update_title(self, id: int, title: str) -> dict[str, Any]:
        return await self.update(id, {"title": title, "updated_at": func.current_timestamp()})

    async def detach_file(self, file_id: int) -> int:
        """Null out file_id on conversations that reference a deleted file."""
        async with self._connect("update") as conn:
            result = await conn.execute(
                update(self.table).where(self.table.c.file_id == file_id).values(file_id=None)
            )
        return result.rowcount
