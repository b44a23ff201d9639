"""
SQL Server source (pyodbc).
"""

from collections.abc import Mapping
from typing import Any

import pyodbc

from .base import QuerySource, bind_qmark


class SqlServerSource(QuerySource):
    """Run the left query against SQL Server through ODBC."""

    dbms = "MSSQL"

    def connect(self) -> Any:
        return pyodbc.connect(self.config.connection_string)

    def bind(self, query: str, parameters: Mapping[str, Any]) -> tuple[str, list[Any]]:
        return bind_qmark(query, parameters)
