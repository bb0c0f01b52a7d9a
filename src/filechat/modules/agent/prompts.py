"""
FileChat Agent - Prompt Construction.

Pure functions that assemble the system and user instructions for one
chat turn.
"""

from dataclasses import dataclass
from typing import Any, Sequence

from filechat.modules.agent.schemas import ConversationMessage
from filechat.modules.files.processor import format_file_size, generate_summary, structure_as_text
from filechat.modules.files.schemas import ProcessedFile

HISTORY_WINDOW = 6

SYSTEM_PROMPT = """You are an AI Agent specialized in analyzing and answering questions about uploaded files. You provide accurate, helpful responses based on the file content and user queries.

Key capabilities:
- Analyze data patterns and trends
- Generate insights and summaries
- Suggest visualizations when appropriate
- Answer specific questions about file content
- Provide actionable recommendations

Guidelines:
- Always base your responses on the actual file content provided
- Be specific and cite relevant parts of the data when possible
- Suggest visualizations using the format: [VIZ:chartType:title:description] where chartType is bar, line, pie, or area
- Suggest tables using the format: [TABLE:title:description]
- Titles and descriptions must not contain ':' or ']'
- If you cannot answer based on the available data, say so clearly
- Keep responses concise but comprehensive

Examples:
- For trend analysis: [VIZ:line:Sales Trend Over Time:Shows the progression of sales data across months]
- For categorical data: [VIZ:bar:Revenue by Category:Compares revenue across different product categories]
- For proportions: [VIZ:pie:Market Share Distribution:Shows the percentage breakdown of market share]
- For cumulative data: [VIZ:area:Cumulative Growth:Displays accumulated growth over time]"""


@dataclass(frozen=True)
class PromptPair:
    system_instruction: str
    user_instruction: str


def build_file_context(file_record: dict[str, Any] | None, processed: ProcessedFile) -> str:
    """Describe the file (name, type, size, summary, preview, structure)."""
    record = file_record or {}
    filename = record.get("filename", "unknown")
    file_type = str(record.get("file_type", processed.kind.value)).upper()
    size = record.get("file_size", processed.byte_size)

    context = (
        "File Information:\n"
        f"- Name: {filename}\n"
        f"- Type: {file_type}\n"
        f"- Size: {format_file_size(size)}\n"
        f"- Summary: {generate_summary(processed)}\n"
        "\n"
        "File Preview:\n"
        f"{processed.preview_text}\n"
    )

    structure = structure_as_text(processed)
    if structure:
        context += f"\nFile Structure: {structure}"
    return context


def build_system_instruction(
    processed: ProcessedFile | None = None,
    file_record: dict[str, Any] | None = None,
) -> str:
    if processed is None:
        return SYSTEM_PROMPT
    return f"{SYSTEM_PROMPT}\n\nCurrent File Context:\n{build_file_context(file_record, processed)}"


def _render_turn(message: ConversationMessage | dict[str, Any]) -> str:
    if isinstance(message, dict):
        role, content = message.get("role"), message.get("content", "")
    else:
        role, content = message.role, message.content
    speaker = "User" if role == "user" else "Assistant"
    return f"{speaker}: {content}"


def build_user_instruction(
    query: str,
    history: Sequence[ConversationMessage | dict[str, Any]] = (),
) -> str:
    """The query alone, or the last few turns followed by the query."""
    if not history:
        return query
    recent = "\n".join(_render_turn(m) for m in list(history)[-HISTORY_WINDOW:])
    return f"{recent}\n\nCurrent question: {query}"


def build_prompt(
    query: str,
    processed: ProcessedFile | None = None,
    history: Sequence[ConversationMessage | dict[str, Any]] = (),
    file_record: dict[str, Any] | None = None,
) -> PromptPair:
    return PromptPair(
        system_instruction=build_system_instruction(processed, file_record),
        user_instruction=build_user_instruction(query, history),
    )
