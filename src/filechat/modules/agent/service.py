"""
FileChat Agent - Service.

Runs one chat turn: load the file and history, build the prompt, make the
single generation call, interpret the answer, persist the turn.
"""

import asyncio
import logging
import time
from typing import Any, Sequence

from filechat.config import GeminiSettings
from filechat.core.gemini import TextGenerator
from filechat.exceptions import NotFoundException
from filechat.modules.agent.fixtures import DataSynthesizer, FixtureDataSynthesizer
from filechat.modules.agent.interpreter import fallback_response, interpret_response
from filechat.modules.agent.prompts import build_prompt
from filechat.modules.agent.schemas import (
    AgentResponse,
    ChatRequest,
    ChatResponse,
    ConversationMessage,
)
from filechat.modules.conversations.service import ConversationsService
from filechat.modules.files.processor import process_file
from filechat.modules.files.repository import FilesRepository
from filechat.modules.files.schemas import ProcessedFile
from filechat.observability.metrics import MetricsStore

logger = logging.getLogger(__name__)

GENERATION_OPERATION = "generation"


class AgentService:
    """Service for chat turns."""

    def __init__(
        self,
        files: FilesRepository,
        conversations: ConversationsService,
        generator: TextGenerator,
        metrics: MetricsStore,
        gemini: GeminiSettings,
        synthesizer: DataSynthesizer | None = None,
    ):
        self.files = files
        self.conversations = conversations
        self.generator = generator
        self.metrics = metrics
        self.temperature = gemini.temperature
        self.max_output_tokens = gemini.max_output_tokens
        self.synthesizer = synthesizer or FixtureDataSynthesizer()

    async def _load_file(self, file_id: int) -> tuple[dict[str, Any] | None, ProcessedFile | None]:
        record = await self.files.get_by_id(file_id)
        if record is None or record["user_id"] != self.conversations.user_id:
            logger.warning(f"File {file_id} not found, answering without file context")
            return None, None
        try:
            processed = await asyncio.to_thread(
                process_file, record["file_path"], record["file_type"]
            )
        except OSError as e:
            logger.error(f"Cannot read stored file {record['file_path']}: {e}")
            raise NotFoundException("file content", file_id) from e
        return record, processed

    async def process_query(
        self,
        query: str,
        file_id: int | None = None,
        history: Sequence[ConversationMessage] = (),
    ) -> AgentResponse:
        """
        Answer one question.

        Any generation failure is answered with the fixed fallback response;
        it is never raised to the caller.
        """
        record, processed = (None, None)
        if file_id is not None:
            record, processed = await self._load_file(file_id)

        prompt = build_prompt(query, processed, history, record)

        started = time.perf_counter()
        try:
            text = await self.generator.generate(
                prompt.system_instruction,
                prompt.user_instruction,
                temperature=self.temperature,
                max_output_tokens=self.max_output_tokens,
            )
        except Exception as e:
            code = getattr(e, "code", "GENERATION_FAILED")
            logger.error(f"AI agent error ({code}): {e}")
            self.metrics.record_operation_error(GENERATION_OPERATION, code)
            self.metrics.increment("fallback_responses")
            return fallback_response()
        finally:
            self.metrics.record_latency(GENERATION_OPERATION, (time.perf_counter() - started) * 1000)

        return interpret_response(text, processed, self.synthesizer)

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """Run a chat turn and append it to the conversation, if any."""
        conversation = None
        history: list[ConversationMessage] = []
        if request.conversation_id is not None:
            conversation = await self.conversations.find_conversation(request.conversation_id)
            if conversation is None:
                logger.warning(f"Conversation {request.conversation_id} not found, turn not persisted")
            else:
                history = conversation.history

        file_id = request.file_id
        if file_id is None and conversation is not None:
            file_id = conversation.file_id

        user_message = ConversationMessage(role="user", content=request.message)
        response = await self.process_query(request.message, file_id, history)
        assistant_message = ConversationMessage.from_agent_response(response)

        if conversation is not None:
            await self.conversations.append_turn(conversation.id, user_message, assistant_message)

        self.metrics.increment("chat_turns")
        return ChatResponse(
            message=assistant_message,
            conversation_id=conversation.id if conversation is not None else None,
        )
