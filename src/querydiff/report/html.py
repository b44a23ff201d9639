"""
HTML rendering.

build_table() is a pure function from a DiffResult to a table model: one
header row (DBMS, Row number, then the schema columns) and one body row per
reported row, tagged with the CSS classes the template styles:

- red-row: present on the left only
- green-row: present on the right only
- yellow-cell: a cell that differs within a matched pair

render_html() feeds the model to a Jinja2 template.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, PackageLoader, select_autoescape

from ..result import DiffResult
from ..rowset import Row, Schema

logger = logging.getLogger(__name__)

RED_ROW = "red-row"
GREEN_ROW = "green-row"
YELLOW_CELL = "yellow-cell"

TEMPLATE_NAME = "report.html.j2"


@dataclass(frozen=True)
class HtmlCell:
    text: str
    css_class: str = ""


@dataclass(frozen=True)
class HtmlRow:
    dbms: str
    row_number: int
    cells: tuple[HtmlCell, ...]
    css_class: str = ""


@dataclass(frozen=True)
class HtmlTable:
    columns: tuple[str, ...]
    rows: tuple[HtmlRow, ...]
    title: str = "Query result differences"


def _header(left_schema: Schema, right_schema: Schema) -> tuple[str, ...]:
    # Left names, extended by any trailing right columns
    columns = list(left_schema.columns)
    columns.extend(right_schema.columns[len(columns):])
    return ("DBMS", "Row number", *columns)


def _cells(row: Row, width: int, marked: frozenset[int] = frozenset()) -> tuple[HtmlCell, ...]:
    cells = [
        HtmlCell(str(cell), YELLOW_CELL if index in marked else "")
        for index, cell in enumerate(row)
    ]
    cells.extend(HtmlCell("") for _ in range(width - len(cells)))
    return tuple(cells)


def build_table(
    result: DiffResult,
    left_schema: Schema,
    right_schema: Schema,
    left_label: str = "MSSQL",
    right_label: str = "PgSQL",
) -> HtmlTable:
    """Build the table model for a result, rows ordered by row number."""
    columns = _header(left_schema, right_schema)
    width = len(columns) - 2

    entries = []
    for pair in result.mismatched:
        entries.append((pair.left_row_number, 0, HtmlRow(
            left_label, pair.left_row_number, _cells(pair.left_row, width, pair.columns),
        )))
        entries.append((pair.right_row_number, 1, HtmlRow(
            right_label, pair.right_row_number, _cells(pair.right_row, width, pair.columns),
        )))
    for missing in result.missing_left:
        entries.append((missing.row_number, 2, HtmlRow(
            left_label, missing.row_number, _cells(missing.row, width), RED_ROW,
        )))
    for missing in result.missing_right:
        entries.append((missing.row_number, 3, HtmlRow(
            right_label, missing.row_number, _cells(missing.row, width), GREEN_ROW,
        )))

    entries.sort(key=lambda entry: (entry[0], entry[1]))
    return HtmlTable(columns=columns, rows=tuple(row for _, _, row in entries))


def _environment() -> Environment:
    return Environment(
        loader=PackageLoader("querydiff.report", "templates"),
        autoescape=select_autoescape(["html", "j2"]),
    )


def render_html(table: HtmlTable) -> str:
    """Render a table model to a standalone HTML document."""
    return _environment().get_template(TEMPLATE_NAME).render(table=table)


def write_html_report(
    result: DiffResult,
    left_schema: Schema,
    right_schema: Schema,
    output_path: str | Path,
    left_label: str = "MSSQL",
    right_label: str = "PgSQL",
) -> Path:
    """Render a result and write it to output_path."""
    table = build_table(result, left_schema, right_schema, left_label, right_label)
    path = Path(output_path)
    path.write_text(render_html(table), encoding="utf-8")
    logger.info(f"HTML report written to {path} ({len(table.rows)} rows)")
    return path
