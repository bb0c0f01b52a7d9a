"""
FileChat Agent - Visualization & Table Data Synthesis.

The model only asks for a chart or table; it never supplies numbers. The
payloads below are fixed illustrative fixtures chosen by
(file kind, chart kind) for charts and by file kind for tables.

FixtureDataSynthesizer is the seam for real data-derived series: a
replacement only needs ``series_for``, ``style_for`` and ``table_for``.
"""

from __future__ import annotations

from typing import Protocol

from filechat.modules.agent.schemas import ChartSeries, Dataset, StyleConfig
from filechat.modules.files.schemas import FileKind, ProcessedFile

DEFAULT_CHART_KIND = "bar"
CARTESIAN_CHART_KINDS = frozenset({"bar", "line", "area"})


def _series(labels: list[str], *datasets: tuple[str, list[float]]) -> ChartSeries:
    return ChartSeries(
        category_labels=labels,
        datasets=[Dataset(label=label, values=values) for label, values in datasets],
    )


# =============================================================================
# Chart fixtures
# =============================================================================

SAMPLE_SERIES = _series(
    ["Category A", "Category B", "Category C", "Category D"],
    ("Sample Data", [30, 45, 25, 35]),
)

# Only table and log files have kind-specific charts; every other kind
# (and no file at all) gets SAMPLE_SERIES.
CHART_FIXTURES: dict[tuple[FileKind, str], ChartSeries] = {
    (FileKind.TABLE, "line"): _series(
        ["Jan", "Feb", "Mar", "Apr", "May", "Jun"],
        ("Sales", [12000, 19000, 15000, 25000, 22000, 30000]),
        ("Profit", [3000, 4500, 3800, 6200, 5500, 7500]),
    ),
    (FileKind.TABLE, "pie"): _series(
        ["Product A", "Product B", "Product C", "Product D"],
        ("Revenue Share", [35, 25, 20, 20]),
    ),
    (FileKind.TABLE, "area"): _series(
        ["Q1", "Q2", "Q3", "Q4"],
        ("Revenue", [45000, 52000, 48000, 61000]),
        ("Costs", [32000, 38000, 35000, 42000]),
    ),
    (FileKind.TABLE, "bar"): _series(
        ["North", "South", "East", "West", "Central"],
        ("Sales", [23000, 18000, 31000, 15000, 27000]),
    ),
    (FileKind.LOG, "pie"): _series(
        ["ERROR", "WARN", "INFO", "DEBUG"],
        ("Log Levels", [8, 15, 62, 15]),
    ),
    (FileKind.LOG, "line"): _series(
        ["00:00", "04:00", "08:00", "12:00", "16:00", "20:00"],
        ("Error Count", [2, 1, 8, 12, 15, 6]),
        ("Warning Count", [5, 3, 12, 18, 22, 10]),
    ),
    (FileKind.LOG, "bar"): _series(
        ["Authentication", "Database", "API", "Network", "System"],
        ("Error Count", [12, 8, 15, 6, 9]),
    ),
}

CHART_FIXTURE_KINDS = frozenset(kind for kind, _ in CHART_FIXTURES)


# =============================================================================
# Table fixtures
# =============================================================================

SAMPLE_TABLE: tuple[list[str], list[list[str]]] = (
    ["Item", "Value", "Status"],
    [
        ["Sample Item 1", "100", "Active"],
        ["Sample Item 2", "250", "Pending"],
        ["Sample Item 3", "75", "Complete"],
    ],
)

GENERIC_TABLE: tuple[list[str], list[list[str]]] = (
    ["Key", "Value", "Type"],
    [
        ["Total Records", "1,234", "Count"],
        ["Average Size", "2.5 MB", "Size"],
        ["Processing Time", "0.8s", "Duration"],
    ],
)

TABLE_FIXTURES: dict[FileKind, tuple[list[str], list[list[str]]]] = {
    FileKind.TABLE: (
        ["Product", "Sales", "Growth", "Region"],
        [
            ["Product A", "$45,000", "+12%", "North"],
            ["Product B", "$32,000", "+8%", "South"],
            ["Product C", "$58,000", "+15%", "East"],
            ["Product D", "$41,000", "+5%", "West"],
            ["Product E", "$37,000", "+10%", "Central"],
        ],
    ),
    FileKind.LOG: (
        ["Timestamp", "Level", "Component", "Message"],
        [
            ["2024-01-15 10:30:15", "ERROR", "Database", "Connection timeout"],
            ["2024-01-15 10:30:16", "WARN", "API", "Rate limit approaching"],
            ["2024-01-15 10:30:17", "INFO", "Auth", "User login successful"],
            ["2024-01-15 10:30:18", "DEBUG", "Cache", "Cache miss for key: user_123"],
        ],
    ),
    FileKind.TEXT: GENERIC_TABLE,
    FileKind.SPREADSHEET: GENERIC_TABLE,
}


# =============================================================================
# Synthesizers
# =============================================================================


class DataSynthesizer(Protocol):
    def series_for(self, chart_kind: str, processed: ProcessedFile | None) -> ChartSeries: ...

    def style_for(self, chart_kind: str) -> StyleConfig: ...

    def table_for(self, processed: ProcessedFile | None) -> tuple[list[str], list[list[str]]]: ...


class FixtureDataSynthesizer:
    """Picks canned payloads from the lookup tables above."""

    def series_for(self, chart_kind: str, processed: ProcessedFile | None) -> ChartSeries:
        if processed is None or processed.kind not in CHART_FIXTURE_KINDS:
            return SAMPLE_SERIES
        series = CHART_FIXTURES.get((processed.kind, chart_kind))
        if series is None:
            series = CHART_FIXTURES[(processed.kind, DEFAULT_CHART_KIND)]
        return series

    def style_for(self, chart_kind: str) -> StyleConfig:
        if chart_kind in CARTESIAN_CHART_KINDS:
            return StyleConfig(y_axis_begin_at_zero=True)
        return StyleConfig()

    def table_for(self, processed: ProcessedFile | None) -> tuple[list[str], list[list[str]]]:
        if processed is None:
            return SAMPLE_TABLE
        return TABLE_FIXTURES.get(processed.kind, GENERIC_TABLE)
