"""
Summary generation for comparison results.

The summary is what a person reads first: a status, the per-category
counts, the columns involved and recommended next steps.
"""

from datetime import UTC, datetime
from typing import Any

from ..result import DiffResult
from ..rowset import Schema


def format_timestamp(timestamp: datetime) -> str:
    """ISO 8601 timestamp for reports."""
    return timestamp.isoformat()


def _calculate_severity(left_count: int, differing: int) -> str:
    """
    Severity from the share of differing rows

    Args:
        left_count: Number of rows on the left
        differing: Rows missing on either side or mismatched

    Returns:
        NONE, LOW, MEDIUM, HIGH or CRITICAL
    """
    if differing == 0:
        return "NONE"
    if left_count == 0:
        return "CRITICAL"

    percentage = (differing / left_count) * 100

    if percentage < 0.1:
        return "LOW"
    elif percentage < 1.0:
        return "MEDIUM"
    elif percentage < 10.0:
        return "HIGH"
    else:
        return "CRITICAL"


def _column_names(indices: set[int], schema: Schema | None) -> list[str]:
    names = []
    for index in sorted(indices):
        if schema is not None and index < len(schema):
            names.append(schema.columns[index])
        else:
            names.append(f"#{index}")
    return names


def _generate_recommendations(
    result: DiffResult,
    left_label: str,
    right_label: str,
    mismatched_columns: list[str],
    drift_columns: list[str],
) -> list[str]:
    recommendations = []

    if result.equal:
        recommendations.append(f"{left_label} and {right_label} return the same rows.")
        if result.row_count_mismatch:
            recommendations.append(
                f"Row counts differ ({left_label}={result.left_row_count}, "
                f"{right_label}={result.right_row_count}) but every row matched: duplicate "
                f"keys or identical rows were collapsed. Use --duplicates multiset to "
                f"compare multiplicity."
            )
        return recommendations

    if result.missing_right:
        recommendations.append(
            f"{len(result.missing_right)} row(s) exist only in {right_label}. "
            f"Check for rows inserted after migration or filters that differ between queries."
        )
    if result.missing_left:
        recommendations.append(
            f"{len(result.missing_left)} row(s) exist only in {left_label}. "
            f"Check that all rows were migrated."
        )

    for column in drift_columns:
        recommendations.append(
            f"Check type mapping for column {column}: the two engines return different value types."
        )

    value_only = [c for c in mismatched_columns if c not in drift_columns]
    if value_only:
        recommendations.append(
            f"Values differ in column(s) {', '.join(value_only)}. "
            f"Check collation, rounding and timezone handling."
        )

    if result.row_count_mismatch:
        recommendations.append(
            f"Row counts differ ({left_label}={result.left_row_count}, "
            f"{right_label}={result.right_row_count})."
        )

    return recommendations


def generate_summary(
    result: DiffResult,
    left_schema: Schema | None = None,
    right_schema: Schema | None = None,
    left_label: str = "MSSQL",
    right_label: str = "PgSQL",
) -> dict[str, Any]:
    """
    Summarize a comparison result

    Returns:
        Dictionary containing:
        - status: PASS or FAIL
        - mode: keyed or fingerprint
        - left_label / right_label: source names
        - left_row_count / right_row_count: rows per side
        - row_count_mismatch: True when the counts differ
        - missing_left / missing_right / mismatched: entry counts
        - type_drift_cells: mismatched cells whose types differ
        - severity: NONE, LOW, MEDIUM, HIGH or CRITICAL
        - mismatched_columns / type_drift_columns: affected column names
        - summary: human-readable summary
        - recommendations: list of recommended actions
        - timestamp: summary generation time
    """
    mismatched_columns = _column_names(result.mismatched_column_indices(), left_schema)
    drift_columns = _column_names(result.type_drift_column_indices(), left_schema)
    differing = len(result.missing_left) + len(result.missing_right) + len(result.mismatched)

    if result.equal:
        summary = f"{left_label} and {right_label} results are equal ({result.left_row_count} rows)."
    else:
        summary = (
            f"{differing} difference(s) between {left_label} and {right_label}: "
            f"{len(result.missing_left)} only in {left_label}, "
            f"{len(result.missing_right)} only in {right_label}, "
            f"{len(result.mismatched)} mismatched."
        )

    return {
        "status": "PASS" if result.equal else "FAIL",
        "mode": result.mode.value,
        "left_label": left_label,
        "right_label": right_label,
        "left_row_count": result.left_row_count,
        "right_row_count": result.right_row_count,
        "row_count_mismatch": result.row_count_mismatch,
        "missing_left": len(result.missing_left),
        "missing_right": len(result.missing_right),
        "mismatched": len(result.mismatched),
        "type_drift_cells": result.type_drift_count,
        "severity": _calculate_severity(result.left_row_count, differing),
        "mismatched_columns": mismatched_columns,
        "type_drift_columns": drift_columns,
        "summary": summary,
        "recommendations": _generate_recommendations(
            result, left_label, right_label, mismatched_columns, drift_columns
        ),
        "timestamp": format_timestamp(datetime.now(UTC)),
    }
