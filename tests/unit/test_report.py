"""
Unit tests for console, HTML, JSON and CSV rendering and the summary.
"""

import csv
import json

import pytest

from querydiff.config import ComparisonConfig
from querydiff.engine import compare
from querydiff.report import (
    Segment,
    Style,
    build_table,
    export_report_csv,
    export_report_json,
    format_summary_console,
    generate_summary,
    load_report_json,
    render_console,
    render_html,
    to_ansi,
    write_html_report,
)
from querydiff.rowset import Side


@pytest.fixture
def result(customers_left, customers_right):
    return compare(customers_left, customers_right, ComparisonConfig(("id",), ("id",)))


@pytest.fixture
def equal_result(customers_left, make_rowset):
    right = make_rowset(
        list(customers_left.schema),
        [[c.value for c in row] for row in customers_left.rows],
        Side.RIGHT,
    )
    return compare(customers_left, right, ComparisonConfig(("id",), ("id",)))


class TestConsoleRenderer:
    """Test styled segment rendering."""

    def test_equal_result_renders_nothing(self, equal_result, customers_left):
        assert render_console(equal_result, customers_left.schema, customers_left.schema) == []

    def test_rows_ordered_and_prefixed(self, result):
        text = to_ansi(render_console(result), use_colors=False)

        assert text.splitlines() == [
            "  row 2: 2\tBob\t0.00\t2024-01-02T09:00:00\t",
            "  row 2: 2\tBobby\t0.00\t2024-01-02T09:00:00\t",
            "- row 3: 3\tCarol\tnull\t2024-01-03T09:00:00\t",
            "+ row 3: 4\tDave\t5.00\t2024-01-04T09:00:00\t",
        ]

    def test_styles(self, result):
        lines = render_console(result)

        mismatched_left, _, left_only, right_only = lines
        assert mismatched_left[2] == Segment("Bob\t", Style.YELLOW)
        assert mismatched_left[1].style is Style.PLAIN
        assert {s.style for s in left_only} == {Style.RED}
        assert {s.style for s in right_only} == {Style.GREEN}

    def test_header_from_schema(self, result, customers_left, customers_right):
        lines = render_console(result, customers_left.schema, customers_right.schema)

        assert to_ansi(lines[:1], use_colors=False) == "  columns: id\tname\tbalance\tcreated\t"
        assert len(lines) == 5

    def test_ansi_colors(self, result):
        text = to_ansi(render_console(result))

        assert "\033[31m- row 3: \033[0m" in text
        assert "\033[33mBob\t\033[0m" in text

    def test_no_colors(self, result):
        assert "\033[" not in to_ansi(render_console(result), use_colors=False)


class TestHtmlRenderer:
    """Test the table model and template."""

    def test_table_model(self, result, customers_left, customers_right):
        table = build_table(result, customers_left.schema, customers_right.schema)

        assert table.columns == ("DBMS", "Row number", "id", "name", "balance", "created")
        assert [(r.dbms, r.row_number, r.css_class) for r in table.rows] == [
            ("MSSQL", 2, ""),
            ("PgSQL", 2, ""),
            ("MSSQL", 3, "red-row"),
            ("PgSQL", 3, "green-row"),
        ]
        assert table.rows[0].cells[1].css_class == "yellow-cell"
        assert table.rows[0].cells[0].css_class == ""

    def test_render(self, result, customers_left, customers_right):
        html = render_html(build_table(result, customers_left.schema, customers_right.schema))

        assert html.startswith("<!DOCTYPE html>")
        assert '<tr class="red-row">' in html
        assert '<tr class="green-row">' in html
        assert '<td class="yellow-cell">Bob</td>' in html
        assert "<th>Row number</th>" in html

    def test_values_escaped(self, make_rowset):
        left = make_rowset(["id", "val"], [[1, "<b>x</b>"]])
        right = make_rowset(["id", "val"], [], Side.RIGHT)
        result = compare(left, right, ComparisonConfig(("id",), ("id",)))

        html = render_html(build_table(result, left.schema, right.schema))

        assert "&lt;b&gt;x&lt;/b&gt;" in html

    def test_write(self, result, customers_left, customers_right, tmp_path):
        path = write_html_report(
            result, customers_left.schema, customers_right.schema, tmp_path / "out.html"
        )

        assert "yellow-cell" in path.read_text(encoding="utf-8")


class TestJsonReport:
    """Test JSON export and reload."""

    def test_export_and_load(self, result, customers_left, customers_right, tmp_path):
        path = tmp_path / "report.json"
        summary = generate_summary(result, customers_left.schema)

        export_report_json(
            result, path, customers_left.schema, customers_right.schema, summary=summary
        )
        saved = load_report_json(path)

        assert saved.result == result
        assert saved.left_schema == customers_left.schema
        assert saved.left_label == "MSSQL"
        assert saved.summary["status"] == "FAIL"

    def test_not_a_report(self, tmp_path):
        path = tmp_path / "other.json"
        path.write_text(json.dumps({"status": "PASS"}))

        with pytest.raises(ValueError, match="not a querydiff report"):
            load_report_json(path)


class TestCsvReport:
    """Test CSV export."""

    def test_export(self, result, customers_left, customers_right, tmp_path):
        path = tmp_path / "report.csv"

        export_report_csv(result, path, customers_left.schema, customers_right.schema)

        with open(path, newline="") as f:
            rows = list(csv.reader(f))

        assert rows[0] == ["Status", "DBMS", "Row number", "Mismatched columns",
                           "id", "name", "balance", "created"]
        assert rows[1][:5] == ["MISMATCHED", "MSSQL", "2", "name", "2"]
        assert rows[3][:4] == ["LEFT_ONLY", "MSSQL", "3", ""]
        assert rows[3][6] == "null"
        assert rows[4][0] == "RIGHT_ONLY"


class TestSummary:
    """Test summary generation."""

    def test_fail_summary(self, result, customers_left):
        summary = generate_summary(result, customers_left.schema)

        assert summary["status"] == "FAIL"
        assert summary["mode"] == "keyed"
        assert summary["missing_left"] == 1
        assert summary["missing_right"] == 1
        assert summary["mismatched"] == 1
        assert summary["mismatched_columns"] == ["name"]
        assert summary["severity"] == "CRITICAL"
        assert any("name" in r for r in summary["recommendations"])

    def test_pass_summary(self, equal_result):
        summary = generate_summary(equal_result)

        assert summary["status"] == "PASS"
        assert summary["severity"] == "NONE"
        assert len(summary["recommendations"]) == 1

    def test_pass_with_count_disagreement_mentions_duplicates(self, make_rowset):
        left = make_rowset(["id"], [[1]])
        right = make_rowset(["id"], [[1], [1]], Side.RIGHT)
        result = compare(left, right, ComparisonConfig(("id",), ("id",)))

        summary = generate_summary(result, left.schema)

        assert summary["status"] == "PASS"
        assert summary["row_count_mismatch"] is True
        assert any("--duplicates multiset" in r for r in summary["recommendations"])

    def test_type_drift_recommendation(self, make_rowset):
        left = make_rowset(["id", "amount"], [[1, 5]])
        right = make_rowset(["id", "amount"], [[1, "5"]], Side.RIGHT)
        result = compare(left, right, ComparisonConfig(("id",), ("id",)))

        summary = generate_summary(result, left.schema)

        assert summary["type_drift_columns"] == ["amount"]
        assert any("type mapping for column amount" in r for r in summary["recommendations"])

    def test_console_format(self, result, customers_left):
        text = format_summary_console(generate_summary(result, customers_left.schema))

        assert "Status: FAIL" in text
        assert "RECOMMENDATIONS" in text
        assert "Mismatched columns: name" in text
