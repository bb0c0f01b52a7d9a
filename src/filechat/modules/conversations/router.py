"""
FileChat Conversations - Router.

API endpoints for conversation CRUD.
"""

from fastapi import APIRouter, Depends

from filechat.config import Settings
from filechat.core.database import Database
from filechat.deps import get_app_settings, get_database, require_conversations
from filechat.modules.conversations.repository import ConversationsRepository
from filechat.modules.conversations.schemas import (
    ConversationCreate,
    ConversationListResponse,
    ConversationResponse,
    ConversationUpdate,
)
from filechat.modules.conversations.service import ConversationsService
from filechat.modules.files.repository import FilesRepository
from filechat.schemas import SuccessResponse

router = APIRouter(
    prefix="/api/conversations",
    tags=["conversations"],
    dependencies=[require_conversations],
)


def get_service(
    database: Database = Depends(get_database),
    settings: Settings = Depends(get_app_settings),
) -> ConversationsService:
    """Get conversations service instance."""
    return ConversationsService(
        ConversationsRepository(database),
        FilesRepository(database),
        user_id=settings.default_user_id,
    )


@router.get("", response_model=ConversationListResponse)
async def list_conversations(service: ConversationsService = Depends(get_service)):
    """List the user's conversations, most recent first."""
    return ConversationListResponse(conversations=await service.list_conversations())


@router.post("", response_model=ConversationResponse, status_code=201)
async def create_conversation(
    request: ConversationCreate,
    service: ConversationsService = Depends(get_service),
):
    """Start a conversation, optionally bound to a file."""
    return await service.create_conversation(request)


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    conversation_id: int,
    service: ConversationsService = Depends(get_service),
):
    """Get a conversation with its full history."""
    return await service.get_conversation(conversation_id)


@router.put("/{conversation_id}", response_model=ConversationResponse)
async def rename_conversation(
    conversation_id: int,
    request: ConversationUpdate,
    service: ConversationsService = Depends(get_service),
):
    """Rename a conversation."""
    return await service.rename_conversation(conversation_id, request)


@router.delete("/{conversation_id}", response_model=SuccessResponse)
async def delete_conversation(
    conversation_id: int,
    service: ConversationsService = Depends(get_service),
):
    """Delete a conversation."""
    await service.delete_conversation(conversation_id)
    return SuccessResponse()
