"""
PostgreSQL source (psycopg2).
"""

from collections.abc import Mapping
from typing import Any

import psycopg2

from .base import QuerySource, bind_pyformat


class PostgresSource(QuerySource):
    """Run the right query against PostgreSQL."""

    dbms = "PgSQL"

    def connect(self) -> Any:
        return psycopg2.connect(self.config.connection_string)

    def bind(self, query: str, parameters: Mapping[str, Any]) -> tuple[str, dict[str, Any]]:
        return bind_pyformat(query, parameters)
