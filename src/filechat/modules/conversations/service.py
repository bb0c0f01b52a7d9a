"""
FileChat Conversations - Service.

Business logic for conversations and their history blobs.
"""

import json
import logging
from typing import Any

from filechat.exceptions import NotFoundException
from filechat.modules.agent.schemas import ConversationMessage
from filechat.modules.conversations.repository import ConversationsRepository
from filechat.modules.conversations.schemas import (
    ConversationCreate,
    ConversationResponse,
    ConversationSummary,
    ConversationUpdate,
)
from filechat.modules.files.repository import FilesRepository

logger = logging.getLogger(__name__)


def parse_history(history_json: str | None) -> list[ConversationMessage]:
    if not history_json:
        return []
    return [ConversationMessage.model_validate(m) for m in json.loads(history_json)]


class ConversationsService:
    """Service for conversation operations."""

    def __init__(
        self,
        repository: ConversationsRepository,
        files_repository: FilesRepository,
        user_id: int,
    ):
        self.repository = repository
        self.files_repository = files_repository
        self.user_id = user_id

    def _to_response(self, row: dict[str, Any]) -> ConversationResponse:
        return ConversationResponse(
            id=row["id"],
            user_id=row["user_id"],
            file_id=row.get("file_id"),
            title=row["title"],
            history=parse_history(row.get("history_json")),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    async def _get_owned(self, conversation_id: int) -> dict[str, Any]:
        row = await self.repository.get_by_id_or_raise(conversation_id)
        if row["user_id"] != self.user_id:
            raise NotFoundException("conversations", conversation_id)
        return row

    async def create_conversation(self, request: ConversationCreate) -> ConversationResponse:
        if request.file_id is not None:
            await self.files_repository.get_by_id_or_raise(request.file_id)
        row = await self.repository.create_conversation(self.user_id, request.title, request.file_id)
        logger.info(f"Created conversation {row['id']} ({row['title']!r})")
        return self._to_response(row)

    async def list_conversations(self) -> list[ConversationSummary]:
        rows = await self.repository.list_by_user(self.user_id)
        return [
            ConversationSummary(
                id=row["id"],
                title=row["title"],
                file_id=row.get("file_id"),
                updated_at=row.get("updated_at"),
                message_count=len(json.loads(row["history_json"] or "[]")),
            )
            for row in rows
        ]

    async def get_conversation(self, conversation_id: int) -> ConversationResponse:
        return self._to_response(await self._get_owned(conversation_id))

    async def find_conversation(self, conversation_id: int) -> ConversationResponse | None:
        """Like get_conversation but returns None when missing."""
        row = await self.repository.get_by_id(conversation_id)
        if not row or row["user_id"] != self.user_id:
            return None
        return self._to_response(row)

    async def rename_conversation(
        self, conversation_id: int, request: ConversationUpdate
    ) -> ConversationResponse:
        await self._get_owned(conversation_id)
        row = await self.repository.update_title(conversation_id, request.title)
        return self._to_response(row)

    async def delete_conversation(self, conversation_id: int) -> None:
        await self._get_owned(conversation_id)
        await self.repository.delete(conversation_id)
        logger.info(f"Deleted conversation {conversation_id}")

    async def append_turn(
        self,
        conversation_id: int,
        user_message: ConversationMessage,
        assistant_message: ConversationMessage,
    ) -> list[ConversationMessage]:
        """
        Append one user + assistant pair and rewrite the history blob.

        Read-modify-write with no version check: two concurrent turns on the
        same conversation race and the later write wins.
        """
        row = await self._get_owned(conversation_id)
        history = parse_history(row.get("history_json"))
        history.extend([user_message, assistant_message])
        await self.repository.update_history(
            conversation_id,
            [m.model_dump(mode="json", exclude_none=True) for m in history],
        )
        return history
