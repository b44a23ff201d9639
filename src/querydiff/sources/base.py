"""
Query sources: run one side's query and materialize it as a RowSet.

Queries name their parameters as @name on both sides. Each source rewrites
those placeholders into its driver's paramstyle before executing.
"""

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from ..cells import Cell
from ..config import SideConfig
from ..exceptions import QueryDiffError, UpstreamExecutionError
from ..rowset import RowSet, Schema, Side
from ..utils.retry import retry_database_operation
from ..utils.tracing import add_span_attributes, trace_operation

logger = logging.getLogger(__name__)

# @name, but not @@name (SQL Server system functions) and not inside words
_NAMED_PARAMETER = re.compile(r"(?<![@\w])@(\w+)")


def normalize_parameters(parameters: Mapping[str, Any]) -> dict[str, Any]:
    """Strip a leading '@' from parameter names."""
    return {name.lstrip("@"): value for name, value in parameters.items()}


def bind_qmark(query: str, parameters: Mapping[str, Any]) -> tuple[str, list[Any]]:
    """Rewrite @name placeholders to '?' and return values in placeholder order."""
    parameters = normalize_parameters(parameters)
    values: list[Any] = []

    def replace(match: re.Match) -> str:
        name = match.group(1)
        if name not in parameters:
            return match.group(0)
        values.append(parameters[name])
        return "?"

    return _NAMED_PARAMETER.sub(replace, query), values


def bind_pyformat(query: str, parameters: Mapping[str, Any]) -> tuple[str, dict[str, Any]]:
    """Rewrite @name placeholders to %(name)s, escaping literal percent signs."""
    parameters = normalize_parameters(parameters)
    if not parameters:
        return query, {}

    query = query.replace("%", "%%")
    used = {}

    def replace(match: re.Match) -> str:
        name = match.group(1)
        if name not in parameters:
            return match.group(0)
        used[name] = parameters[name]
        return f"%({name})s"

    return _NAMED_PARAMETER.sub(replace, query), used


def unique_column_names(columns: Sequence[str]) -> list[str]:
    """
    Make result column names unique.

    A repeated name gets the lowest numeric suffix not already taken (id,
    id1, id2); an unnamed column becomes ColumnN, N being its 1-based
    position.
    """
    taken = set(columns)
    seen = set()
    names = []
    for position, name in enumerate(columns, start=1):
        if not name:
            name = f"Column{position}"
        if name in seen:
            suffix = 1
            while f"{name}{suffix}" in taken or f"{name}{suffix}" in seen:
                suffix += 1
            name = f"{name}{suffix}"
        seen.add(name)
        names.append(name)
    return names


class QuerySource(ABC):
    """
    One database side of a comparison.

    Args:
        config: Connection string, query and parameters for the side
        side: LEFT or RIGHT
        max_retries: Retries for transient connection errors
        retry_delay: Base delay between retries, in seconds
    """

    dbms: str = ""

    def __init__(
        self,
        config: SideConfig,
        side: Side,
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ):
        self.config = config
        self.side = side
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    @property
    def label(self) -> str:
        return self.config.label or self.dbms

    @abstractmethod
    def connect(self) -> Any:
        """Open a DB-API connection."""

    @abstractmethod
    def bind(self, query: str, parameters: Mapping[str, Any]) -> tuple[str, Any]:
        """Translate @name placeholders for this driver."""

    def _fetch(self) -> tuple[list[str], list[Sequence[Any]]]:
        query, params = self.bind(self.config.query, self.config.parameters)
        conn = self.connect()
        try:
            cursor = conn.cursor()
            try:
                if params:
                    cursor.execute(query, params)
                else:
                    cursor.execute(query)
                if cursor.description is None:
                    raise UpstreamExecutionError(
                        f"{self.label} query returned no result set", side=self.side.value
                    )
                columns = [column[0] for column in cursor.description]
                rows = cursor.fetchall()
            finally:
                cursor.close()
        finally:
            conn.close()
        return columns, rows

    def fetch(self) -> RowSet:
        """
        Execute the query and materialize the result.

        Raises:
            UpstreamExecutionError: If the query fails or a value cannot be
                represented as a cell
        """
        with trace_operation("fetch_rows", side=self.side.value, dbms=self.label):
            fetch = retry_database_operation(
                max_retries=self.max_retries,
                base_delay=self.retry_delay,
            )(self._fetch)

            try:
                columns, rows = fetch()
            except QueryDiffError:
                raise
            except Exception as e:
                logger.error(f"{self.label} query failed: {type(e).__name__}: {e}")
                raise UpstreamExecutionError(
                    f"{self.label} query failed: {e}", side=self.side.value
                ) from e

            try:
                cells = [tuple(Cell.of(value) for value in row) for row in rows]
            except TypeError as e:
                raise UpstreamExecutionError(
                    f"{self.label} returned a value that cannot be compared: {e}",
                    side=self.side.value,
                ) from e

            names = unique_column_names(columns)
            if names != list(columns):
                logger.warning(f"{self.label} result columns renamed to be unique: {names}")
            row_set = RowSet(Schema(tuple(names)), tuple(cells), self.side, self.label)
            add_span_attributes(rows=len(row_set), columns=len(row_set.schema))
            logger.info(f"Number of {self.label} rows: {len(row_set)}")
            return row_set
