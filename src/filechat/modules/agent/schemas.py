"""
FileChat Agent - Schemas.

Pydantic models for chat turns and the structured agent response.
"""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# Visualizations & Tables
# =============================================================================


class Dataset(BaseModel):
    """One named series of values."""

    model_config = ConfigDict(frozen=True)

    label: str
    values: list[float]


class ChartSeries(BaseModel):
    """Chart-ready payload: category labels plus one or more datasets."""

    model_config = ConfigDict(frozen=True)

    category_labels: list[str]
    datasets: list[Dataset]


class StyleConfig(BaseModel):
    """Rendering hints for the chart component."""

    model_config = ConfigDict(frozen=True)

    responsive: bool = True
    legend_position: str = "top"
    y_axis_begin_at_zero: bool | None = Field(
        default=None,
        description="Only set for cartesian charts (bar, line, area)",
    )


class VisualizationSpec(BaseModel):
    """A chart the front-end should render next to the answer."""

    model_config = ConfigDict(frozen=True)

    render_kind: Literal["chart"] = "chart"
    chart_kind: str = Field(..., description="bar, line, pie or area; other values render as bar")
    title: str
    description: str
    series: ChartSeries
    style_config: StyleConfig = Field(default_factory=StyleConfig)


class TableSpec(BaseModel):
    """
    A table the front-end should render next to the answer.

    Every row is normalized to the header width: short rows are padded with
    empty strings, rows wider than the header row are rejected.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    column_headers: list[str]
    rows: list[list[str]]

    @model_validator(mode="before")
    @classmethod
    def _normalize_rows(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        headers = data.get("column_headers") or []
        rows = data.get("rows") or []
        width = len(headers)
        normalized = []
        for index, row in enumerate(rows):
            cells = [str(cell) for cell in row]
            if len(cells) > width:
                raise ValueError(
                    f"row {index} has {len(cells)} cells but there are only {width} column headers"
                )
            normalized.append(cells + [""] * (width - len(cells)))
        return {**data, "rows": normalized}


# =============================================================================
# Agent Response
# =============================================================================


class AgentResponse(BaseModel):
    """Structured result of one chat turn. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    display_text: str
    visualizations: list[VisualizationSpec] = Field(default_factory=list)
    tables: list[TableSpec] = Field(default_factory=list)
    confidence_score: float = Field(ge=0.0, le=1.0)
    source_tags: set[str] = Field(default_factory=set)


# =============================================================================
# Conversation Messages
# =============================================================================


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ConversationMessage(BaseModel):
    """One entry of a conversation history blob."""

    role: Literal["user", "assistant"]
    content: str
    timestamp: str = Field(default_factory=utc_now_iso)
    visualizations: list[VisualizationSpec] | None = None
    tables: list[TableSpec] | None = None
    confidence: float | None = None
    sources: list[str] | None = None

    @classmethod
    def from_agent_response(cls, response: AgentResponse) -> "ConversationMessage":
        return cls(
            role="assistant",
            content=response.display_text,
            visualizations=list(response.visualizations),
            tables=list(response.tables),
            confidence=response.confidence_score,
            sources=sorted(response.source_tags),
        )


# =============================================================================
# Request / Response Schemas
# =============================================================================


class ChatRequest(BaseModel):
    """Request for one chat turn."""

    message: str = Field(..., max_length=4000)
    conversation_id: int | None = Field(default=None, description="Conversation to continue")
    file_id: int | None = Field(default=None, description="File to answer about")

    @field_validator("message")
    @classmethod
    def _message_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message is required")
        return value


class ChatResponse(BaseModel):
    """Assistant message for a chat turn."""

    message: ConversationMessage
    conversation_id: int | None = None
