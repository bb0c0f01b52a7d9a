"""
FileChat Agent - Router.

API endpoint for chat turns.
"""

from fastapi import APIRouter, Depends

from filechat.config import Settings
from filechat.core.database import Database
from filechat.core.gemini import TextGenerator
from filechat.deps import (
    get_app_settings,
    get_database,
    get_generator,
    get_metrics,
    require_chat,
)
from filechat.modules.agent.schemas import ChatRequest, ChatResponse
from filechat.modules.agent.service import AgentService
from filechat.modules.conversations.repository import ConversationsRepository
from filechat.modules.conversations.service import ConversationsService
from filechat.modules.files.repository import FilesRepository
from filechat.observability.metrics import MetricsStore

router = APIRouter(
    prefix="/api",
    tags=["chat"],
    dependencies=[require_chat],
)


def get_service(
    database: Database = Depends(get_database),
    generator: TextGenerator = Depends(get_generator),
    metrics: MetricsStore = Depends(get_metrics),
    settings: Settings = Depends(get_app_settings),
) -> AgentService:
    """Get agent service instance."""
    files = FilesRepository(database)
    conversations = ConversationsService(
        ConversationsRepository(database),
        files,
        user_id=settings.default_user_id,
    )
    return AgentService(files, conversations, generator, metrics, settings.gemini)


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, service: AgentService = Depends(get_service)):
    """
    Ask a question, optionally about a file and inside a conversation.

    - Uses the request's file_id, else the conversation's file
    - Appends the user and assistant messages to the conversation history
    - Generation failures return a fixed apology with confidence 0
    """
    return await service.chat(request)
