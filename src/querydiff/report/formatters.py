"""
Report export and loading: JSON, CSV and the console summary block.

The JSON report holds the full result plus both schemas and labels, so it
can be loaded later and rendered again without re-running the queries.
"""

import csv
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..result import DiffResult
from ..rowset import Row, Schema

REPORT_FORMAT_VERSION = 1


@dataclass(frozen=True)
class SavedReport:
    """A report loaded back from JSON."""

    result: DiffResult
    left_schema: Schema
    right_schema: Schema
    left_label: str
    right_label: str
    summary: dict[str, Any] | None = None


def export_report_json(
    result: DiffResult,
    output_path: str | Path,
    left_schema: Schema,
    right_schema: Schema,
    left_label: str = "MSSQL",
    right_label: str = "PgSQL",
    summary: dict[str, Any] | None = None,
) -> None:
    """
    Export a result to a JSON file

    Args:
        result: Comparison result
        output_path: Path to output file
        left_schema: Left column names
        right_schema: Right column names
        left_label: Left source name
        right_label: Right source name
        summary: Optional generate_summary() output to embed
    """
    report = {
        "version": REPORT_FORMAT_VERSION,
        "left": {"label": left_label, "columns": list(left_schema.columns)},
        "right": {"label": right_label, "columns": list(right_schema.columns)},
        "result": result.to_dict(),
    }
    if summary is not None:
        report["summary"] = summary

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(report, f, indent=2)


def load_report_json(input_path: str | Path) -> SavedReport:
    """
    Load a report written by export_report_json

    Raises:
        ValueError: If the file is not a querydiff report
    """
    with open(input_path, encoding='utf-8') as f:
        report = json.load(f)

    if not isinstance(report, dict) or "result" not in report:
        raise ValueError(f"{input_path} is not a querydiff report")
    version = report.get("version", REPORT_FORMAT_VERSION)
    if version != REPORT_FORMAT_VERSION:
        raise ValueError(f"Unsupported report version {version} in {input_path}")

    return SavedReport(
        result=DiffResult.from_dict(report["result"]),
        left_schema=Schema(tuple(report["left"]["columns"])),
        right_schema=Schema(tuple(report["right"]["columns"])),
        left_label=report["left"]["label"],
        right_label=report["right"]["label"],
        summary=report.get("summary"),
    )


def _csv_cells(row: Row) -> list[str]:
    return [str(cell) for cell in row]


def export_report_csv(
    result: DiffResult,
    output_path: str | Path,
    left_schema: Schema,
    right_schema: Schema,
    left_label: str = "MSSQL",
    right_label: str = "PgSQL",
) -> None:
    """
    Export a result to a CSV file, one line per reported row

    Args:
        result: Comparison result
        output_path: Path to output file
        left_schema: Left column names
        right_schema: Right column names
        left_label: Left source name
        right_label: Right source name
    """
    columns = list(left_schema.columns)
    columns.extend(right_schema.columns[len(columns):])

    entries = []
    for pair in result.mismatched:
        differing = ";".join(
            columns[i] if i < len(columns) else f"#{i}" for i in sorted(pair.columns)
        )
        entries.append((pair.left_row_number, 0, [
            "MISMATCHED", left_label, pair.left_row_number, differing, *_csv_cells(pair.left_row),
        ]))
        entries.append((pair.right_row_number, 1, [
            "MISMATCHED", right_label, pair.right_row_number, differing, *_csv_cells(pair.right_row),
        ]))
    for missing in result.missing_left:
        entries.append((missing.row_number, 2, [
            "LEFT_ONLY", left_label, missing.row_number, "", *_csv_cells(missing.row),
        ]))
    for missing in result.missing_right:
        entries.append((missing.row_number, 3, [
            "RIGHT_ONLY", right_label, missing.row_number, "", *_csv_cells(missing.row),
        ]))
    entries.sort(key=lambda entry: (entry[0], entry[1]))

    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)

        writer.writerow(["Status", "DBMS", "Row number", "Mismatched columns", *columns])

        for _, _, line in entries:
            writer.writerow(line)


def format_summary_console(summary: dict[str, Any]) -> str:
    """
    Format a summary for console output

    Args:
        summary: generate_summary() output

    Returns:
        Formatted string for console display
    """
    lines = []

    lines.append("=" * 80)
    lines.append("COMPARISON SUMMARY")
    lines.append("=" * 80)
    lines.append(f"Status: {summary['status']}")
    lines.append(f"Mode: {summary['mode']}")
    lines.append(f"{summary['left_label']} rows: {summary['left_row_count']:,}")
    lines.append(f"{summary['right_label']} rows: {summary['right_row_count']:,}")
    lines.append(f"Only in {summary['left_label']}: {summary['missing_left']}")
    lines.append(f"Only in {summary['right_label']}: {summary['missing_right']}")
    lines.append(f"Mismatched: {summary['mismatched']}")
    if summary['type_drift_cells']:
        lines.append(f"Type drift cells: {summary['type_drift_cells']}")
    lines.append(f"Severity: {summary['severity']}")
    lines.append("")
    lines.append(summary['summary'])
    lines.append("")

    if summary['mismatched_columns']:
        lines.append(f"Mismatched columns: {', '.join(summary['mismatched_columns'])}")
    if summary['type_drift_columns']:
        lines.append(f"Type drift columns: {', '.join(summary['type_drift_columns'])}")

    if summary['recommendations']:
        lines.append("RECOMMENDATIONS")
        lines.append("-" * 80)
        for i, rec in enumerate(summary['recommendations'], 1):
            lines.append(f"{i}. {rec}")

    lines.append("=" * 80)

    return "\n".join(lines)
