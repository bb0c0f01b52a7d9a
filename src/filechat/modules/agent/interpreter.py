"""
FileChat Agent - Response Interpreter.

Turns the model's free-form answer into an AgentResponse: directives are
parsed out, chart/table payloads synthesized for each, and the tags
removed from the text shown to the user.
"""

import logging

from filechat.modules.agent.directives import (
    ParseFailure,
    TableDirective,
    VisualizationDirective,
    parse_directives,
    strip_directives,
)
from filechat.modules.agent.fixtures import DataSynthesizer, FixtureDataSynthesizer
from filechat.modules.agent.schemas import AgentResponse, TableSpec, VisualizationSpec
from filechat.modules.files.schemas import ProcessedFile

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.85

FALLBACK_TEXT = (
    "I apologize, but I encountered an error while processing your request. Please try again."
)


def fallback_response() -> AgentResponse:
    """The single response used whenever generation fails."""
    return AgentResponse(
        display_text=FALLBACK_TEXT,
        visualizations=[],
        tables=[],
        confidence_score=0.0,
        source_tags=set(),
    )


def interpret_response(
    raw_text: str,
    processed: ProcessedFile | None = None,
    synthesizer: DataSynthesizer | None = None,
) -> AgentResponse:
    """Build the structured response for one generated answer."""
    synthesizer = synthesizer or FixtureDataSynthesizer()
    directives = parse_directives(raw_text)

    visualizations: list[VisualizationSpec] = []
    tables: list[TableSpec] = []

    for directive in directives:
        if isinstance(directive, VisualizationDirective):
            visualizations.append(
                VisualizationSpec(
                    chart_kind=directive.chart_kind,
                    title=directive.title,
                    description=directive.description,
                    series=synthesizer.series_for(directive.chart_kind, processed),
                    style_config=synthesizer.style_for(directive.chart_kind),
                )
            )
        elif isinstance(directive, TableDirective):
            headers, rows = synthesizer.table_for(processed)
            tables.append(
                TableSpec(
                    title=directive.title,
                    description=directive.description,
                    column_headers=headers,
                    rows=rows,
                )
            )
        elif isinstance(directive, ParseFailure):
            logger.debug(f"Leaving malformed directive in text: {directive.raw!r} ({directive.reason})")

    return AgentResponse(
        display_text=strip_directives(raw_text, directives),
        visualizations=visualizations,
        tables=tables,
        confidence_score=DEFAULT_CONFIDENCE,
        source_tags={processed.kind.value} if processed else set(),
    )
