"""
Database sources that produce the row sets to compare.

Driver modules are imported on demand: pyodbc needs the system ODBC
libraries at import time, and comparing in-memory row sets needs neither
driver.
"""

from ..config import SideConfig
from ..rowset import Side
from .base import (
    QuerySource,
    bind_pyformat,
    bind_qmark,
    normalize_parameters,
    unique_column_names,
)

DBMS_MSSQL = "mssql"
DBMS_PGSQL = "pgsql"


def create_source(dbms: str, config: SideConfig, side: Side, **kwargs) -> QuerySource:
    """
    Create the source for a DBMS name ("mssql" or "pgsql").

    Raises:
        ValueError: If the DBMS is not supported
    """
    if dbms == DBMS_MSSQL:
        from .sqlserver import SqlServerSource
        return SqlServerSource(config, side, **kwargs)
    if dbms == DBMS_PGSQL:
        from .postgres import PostgresSource
        return PostgresSource(config, side, **kwargs)
    raise ValueError(f"Unsupported DBMS: {dbms}")


__all__ = [
    "QuerySource",
    "create_source",
    "bind_qmark",
    "bind_pyformat",
    "normalize_parameters",
    "unique_column_names",
    "DBMS_MSSQL",
    "DBMS_PGSQL",
]
