"""
querydiff: compare the result sets of the same query on two databases.

Typical use is a migration check between SQL Server and PostgreSQL:

    from querydiff import ComparisonConfig, RowSet, Side, compare

    left = RowSet.from_values(["id", "name"], mssql_rows, Side.LEFT, "MSSQL")
    right = RowSet.from_values(["id", "name"], pgsql_rows, Side.RIGHT, "PgSQL")
    result = compare(left, right, ComparisonConfig(("id",), ("id",)))
"""

from .cells import Cell, CellType
from .comparator import cells_equal, compare_rows
from .config import ComparisonConfig, DuplicatePolicy
from .engine import compare
from .exceptions import (
    ComparisonTimeoutError,
    ConfigurationError,
    MatchCancelledError,
    QueryDiffError,
    UpstreamExecutionError,
)
from .result import DiffResult, MatchMode, MismatchedRow, MissingRow
from .rowset import RowSet, Schema, Side

__version__ = "1.0.0"

__all__ = [
    "Cell",
    "CellType",
    "ComparisonConfig",
    "ComparisonTimeoutError",
    "ConfigurationError",
    "DiffResult",
    "DuplicatePolicy",
    "MatchCancelledError",
    "MatchMode",
    "MismatchedRow",
    "MissingRow",
    "QueryDiffError",
    "RowSet",
    "Schema",
    "Side",
    "UpstreamExecutionError",
    "cells_equal",
    "compare",
    "compare_rows",
]
