"""
FileChat Conversations - Schemas.

Pydantic models for conversation operations.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from filechat.modules.agent.schemas import ConversationMessage


# =============================================================================
# Request Schemas
# =============================================================================


class ConversationCreate(BaseModel):
    """Request to start a conversation."""

    title: str = Field(..., max_length=200)
    file_id: int | None = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value


class ConversationUpdate(BaseModel):
    """Rename a conversation."""

    title: str = Field(..., max_length=200)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value


# =============================================================================
# Response Schemas
# =============================================================================


class ConversationSummary(BaseModel):
    """Row in the conversation list."""

    id: int
    title: str
    file_id: int | None = None
    updated_at: datetime | None = None
    message_count: int = Field(ge=0)


class ConversationListResponse(BaseModel):
    conversations: list[ConversationSummary]


class ConversationResponse(BaseModel):
    """Conversation with its full history."""

    id: int
    user_id: int
    file_id: int | None = None
    title: str
    history: list[ConversationMessage]
    created_at: datetime | None = None
    updated_at: datetime | None = None
