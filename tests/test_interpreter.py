"""
Tests for directive parsing and response interpretation.
"""

import pytest
from pydantic import ValidationError

from filechat.modules.agent.directives import (
    ParseFailure,
    TableDirective,
    VisualizationDirective,
    parse_directives,
    strip_directives,
)
from filechat.modules.agent.fixtures import (
    CHART_FIXTURES,
    SAMPLE_SERIES,
    SAMPLE_TABLE,
    FixtureDataSynthesizer,
)
from filechat.modules.agent.interpreter import (
    DEFAULT_CONFIDENCE,
    FALLBACK_TEXT,
    fallback_response,
    interpret_response,
)
from filechat.modules.agent.schemas import ChartSeries, Dataset, StyleConfig, TableSpec
from filechat.modules.files.processor import process_content
from filechat.modules.files.schemas import FileKind


@pytest.fixture
def csv_file():
    return process_content("region,sales\nNorth,10\nSouth,20", "csv")


@pytest.fixture
def log_file():
    return process_content("2024-01-15 10:30:00 ERROR db down", "log")


class TestParseDirectives:
    """Directive grammar."""

    def test_visualization(self):
        [directive] = parse_directives("Look [VIZ:bar:T:D] here")

        assert isinstance(directive, VisualizationDirective)
        assert directive.chart_kind == "bar"
        assert directive.title == "T"
        assert directive.description == "D"
        assert directive.span == (5, 18)

    def test_table(self):
        [directive] = parse_directives("[TABLE:Top Errors:Most frequent errors]")

        assert isinstance(directive, TableDirective)
        assert directive.title == "Top Errors"
        assert directive.description == "Most frequent errors"

    def test_description_stops_at_next_colon(self):
        [viz, table] = parse_directives("[VIZ:line:Trend:Over time:extra] [TABLE:T:desc:more]")
        assert viz.description == "Over time"
        assert table.description == "desc"

    def test_order_is_left_to_right(self):
        directives = parse_directives("[TABLE:A:a] then [VIZ:pie:B:b] then [VIZ:line:C:c]")
        assert [type(d) for d in directives] == [
            TableDirective,
            VisualizationDirective,
            VisualizationDirective,
        ]

    @pytest.mark.parametrize(
        "text",
        ["[VIZ:bar]", "[VIZ:bar:only title]", "[TABLE:]", "[TABLE:no description]", "[VIZ:]"],
    )
    def test_malformed_is_parse_failure(self, text):
        [directive] = parse_directives(text)
        assert isinstance(directive, ParseFailure)
        assert directive.raw == text

    def test_unknown_tags_ignored(self):
        assert parse_directives("[CHART:bar:T:D] and [viz:bar:T:D]") == []


class TestStripDirectives:
    def test_removes_well_formed_and_trims(self):
        assert strip_directives("  Here: [VIZ:bar:T:D]  ") == "Here:"

    def test_keeps_malformed(self):
        assert strip_directives("Broken [VIZ:bar] tag [TABLE:A:a]") == "Broken [VIZ:bar] tag"

    @pytest.mark.parametrize(
        "text",
        [
            "Plain answer with no tags.",
            "Sales rose. [VIZ:line:Sales:Monthly sales] See table [TABLE:Top:Best products]",
            "Odd [VIZ:bar] left alone",
            "See [VIZ[VIZ:bar:a:b]:x:y:z] now",
        ],
    )
    def test_idempotent(self, text):
        once = strip_directives(text)
        assert strip_directives(once) == once

    def test_nested_tag_joined_by_removal_is_stripped(self):
        text = "See [VIZ[VIZ:bar:a:b]:x:y:z] now"
        assert strip_directives(text) == "See  now"
        assert interpret_response(text, None).display_text == "See  now"


class TestFixtureDataSynthesizer:
    """Canned chart and table payloads."""

    def test_no_file_uses_sample_series(self):
        synthesizer = FixtureDataSynthesizer()
        for kind in ("bar", "line", "pie", "area", "scatter"):
            assert synthesizer.series_for(kind, None) == SAMPLE_SERIES

    def test_text_and_spreadsheet_use_sample_series(self):
        synthesizer = FixtureDataSynthesizer()
        assert synthesizer.series_for("line", process_content("hi", "txt")) == SAMPLE_SERIES
        assert synthesizer.series_for("pie", process_content(b"x", "xlsx")) == SAMPLE_SERIES

    def test_table_fixtures(self, csv_file):
        synthesizer = FixtureDataSynthesizer()

        line = synthesizer.series_for("line", csv_file)
        assert [d.label for d in line.datasets] == ["Sales", "Profit"]
        assert len(line.category_labels) == 6

        pie = synthesizer.series_for("pie", csv_file)
        assert sum(pie.datasets[0].values) == 100

        area = synthesizer.series_for("area", csv_file)
        assert area.category_labels == ["Q1", "Q2", "Q3", "Q4"]

        bar = synthesizer.series_for("bar", csv_file)
        assert len(bar.category_labels) == 5

    def test_unknown_chart_kind_uses_bar_fixture(self, csv_file, log_file):
        synthesizer = FixtureDataSynthesizer()
        assert synthesizer.series_for("scatter", csv_file) == CHART_FIXTURES[(FileKind.TABLE, "bar")]
        assert synthesizer.series_for("area", log_file) == CHART_FIXTURES[(FileKind.LOG, "bar")]

    def test_log_fixtures(self, log_file):
        synthesizer = FixtureDataSynthesizer()

        pie = synthesizer.series_for("pie", log_file)
        assert pie.category_labels == ["ERROR", "WARN", "INFO", "DEBUG"]

        line = synthesizer.series_for("line", log_file)
        assert [d.label for d in line.datasets] == ["Error Count", "Warning Count"]

    @pytest.mark.parametrize("kind", ["bar", "line", "area"])
    def test_cartesian_style_starts_at_zero(self, kind):
        style = FixtureDataSynthesizer().style_for(kind)
        assert style.y_axis_begin_at_zero is True
        assert style.responsive is True
        assert style.legend_position == "top"

    @pytest.mark.parametrize("kind", ["pie", "radar"])
    def test_other_styles_omit_axis_hint(self, kind):
        assert FixtureDataSynthesizer().style_for(kind).y_axis_begin_at_zero is None

    def test_tables_by_kind(self, csv_file, log_file):
        synthesizer = FixtureDataSynthesizer()

        assert synthesizer.table_for(None) == SAMPLE_TABLE
        assert synthesizer.table_for(csv_file)[0] == ["Product", "Sales", "Growth", "Region"]
        assert len(synthesizer.table_for(csv_file)[1]) == 5
        assert synthesizer.table_for(log_file)[0] == ["Timestamp", "Level", "Component", "Message"]
        assert synthesizer.table_for(process_content("x", "txt"))[0] == ["Key", "Value", "Type"]


class TestTableSpec:
    """Row shape is enforced when the table is built."""

    def test_short_rows_are_padded(self):
        table = TableSpec(title="T", description="D", column_headers=["a", "b", "c"], rows=[["1"]])
        assert table.rows == [["1", "", ""]]

    def test_wide_rows_are_rejected(self):
        with pytest.raises(ValidationError):
            TableSpec(title="T", description="D", column_headers=["a"], rows=[["1", "2"]])


class TestInterpretResponse:
    def test_text_without_tags(self):
        response = interpret_response("  Just an answer.\n")

        assert response.display_text == "Just an answer."
        assert response.visualizations == []
        assert response.tables == []
        assert response.confidence_score == DEFAULT_CONFIDENCE
        assert response.source_tags == set()

    def test_bar_chart_without_file(self):
        response = interpret_response("Here: [VIZ:bar:Sample:Demo]")

        assert response.display_text == "Here:"
        [viz] = response.visualizations
        assert viz.render_kind == "chart"
        assert viz.chart_kind == "bar"
        assert viz.title == "Sample"
        assert viz.description == "Demo"
        assert viz.series == SAMPLE_SERIES
        assert viz.style_config.y_axis_begin_at_zero is True
        assert response.confidence_score == 0.85
        assert response.source_tags == set()

    def test_with_file(self, csv_file):
        response = interpret_response(
            "Totals [VIZ:pie:Share:Revenue share] and [TABLE:Top:Best products]", csv_file
        )

        assert response.display_text == "Totals  and"
        assert response.visualizations[0].series.datasets[0].label == "Revenue Share"
        assert response.tables[0].title == "Top"
        assert response.tables[0].column_headers[0] == "Product"
        assert response.source_tags == {"table"}

    def test_malformed_directive_stays_in_text(self):
        response = interpret_response("See [VIZ:bar:no description]")
        assert response.display_text == "See [VIZ:bar:no description]"
        assert response.visualizations == []

    def test_chart_kind_is_not_validated(self):
        response = interpret_response("[VIZ:donut:T:D]")
        assert response.visualizations[0].chart_kind == "donut"
        assert response.visualizations[0].style_config == StyleConfig()

    def test_custom_synthesizer(self):
        class OneSeries(FixtureDataSynthesizer):
            def series_for(self, chart_kind, processed):
                return ChartSeries(category_labels=["x"], datasets=[Dataset(label="y", values=[1])])

        response = interpret_response("[VIZ:bar:T:D]", synthesizer=OneSeries())
        assert response.visualizations[0].series.category_labels == ["x"]

    def test_response_is_immutable(self):
        response = interpret_response("text")
        with pytest.raises(ValidationError):
            response.display_text = "changed"


class TestFallback:
    def test_fallback_response(self):
        response = fallback_response()

        assert response.display_text == FALLBACK_TEXT
        assert response.confidence_score == 0.0
        assert response.visualizations == []
        assert response.tables == []
        assert response.source_tags == set()
