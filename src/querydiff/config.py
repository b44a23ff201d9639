"""
Configuration for comparisons and for the query sources feeding them.

Values given explicitly win; connection strings fall back to environment
variables so credentials need not appear on the command line.
"""

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Environment variables consulted when a connection string is not given
MSSQL_CONNECTION_ENV = "QUERYDIFF_MSSQL_CONNECTION"
PGSQL_CONNECTION_ENV = "QUERYDIFF_PGSQL_CONNECTION"

DEFAULT_HTML_OUTPUT = "output.html"
DEFAULT_WORKERS = 4


class DuplicatePolicy(str, Enum):
    """
    How rows sharing a key (or a fingerprint) are matched.

    LAST_WINS: the last occurrence takes part in matching. Earlier right
        rows sharing a key (and earlier identical left rows in fingerprint
        mode) are overwritten without being reported; earlier left rows
        sharing a key are reported as missing on the left.
    MULTISET: occurrences are paired in order, preserving multiplicity.
    """

    LAST_WINS = "last_wins"
    MULTISET = "multiset"


@dataclass(frozen=True)
class ComparisonConfig:
    """
    Settings that affect how two row sets are matched.

    Args:
        left_keys: Key column names on the left side
        right_keys: Key column names on the right side
        duplicates: Duplicate key/fingerprint policy
        partitions: Number of hash partitions (1 = sequential)
        workers: Worker threads used when partitions > 1
        timeout_seconds: Wall-clock limit for matching, None for unlimited
    """

    left_keys: tuple[str, ...] = ()
    right_keys: tuple[str, ...] = ()
    duplicates: DuplicatePolicy = DuplicatePolicy.LAST_WINS
    partitions: int = 1
    workers: int = DEFAULT_WORKERS
    timeout_seconds: float | None = None

    def __post_init__(self):
        object.__setattr__(self, "left_keys", tuple(self.left_keys or ()))
        object.__setattr__(self, "right_keys", tuple(self.right_keys or ()))
        object.__setattr__(self, "duplicates", DuplicatePolicy(self.duplicates))

        if self.keyed and len(self.left_keys) != len(self.right_keys):
            raise ConfigurationError(
                f"Key column lists differ in length: "
                f"left={list(self.left_keys)}, right={list(self.right_keys)}"
            )
        if self.partitions < 1:
            raise ConfigurationError(f"partitions must be >= 1, got {self.partitions}")
        if self.workers < 1:
            raise ConfigurationError(f"workers must be >= 1, got {self.workers}")
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ConfigurationError(
                f"timeout_seconds must be positive, got {self.timeout_seconds}"
            )

    @property
    def keyed(self) -> bool:
        """Keyed mode needs key columns on both sides."""
        return bool(self.left_keys) and bool(self.right_keys)


def parse_parameters(items: Sequence[str] | str | None) -> dict[str, str]:
    """
    Parse "name=value" query parameters.

    Accepts either a ';'-separated string or a list of items. Items that are
    not exactly one name and one value are skipped.
    """
    if not items:
        return {}
    if isinstance(items, str):
        items = items.split(";")

    parameters = {}
    for item in items:
        if not item.strip():
            continue
        parts = item.split("=")
        if len(parts) != 2:
            logger.warning(f"Ignoring malformed parameter: {item!r}")
            continue
        parameters[parts[0].strip()] = parts[1]
    return parameters


def parse_columns(value: Sequence[str] | str | None) -> tuple[str, ...]:
    """Parse a comma-separated key column list."""
    if not value:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    return tuple(c.strip() for c in value if c.strip())


@dataclass(frozen=True)
class SideConfig:
    """Where and how to fetch one side's rows."""

    connection_string: str
    query: str
    parameters: dict[str, str] = field(default_factory=dict)
    key_columns: tuple[str, ...] = ()
    label: str = ""


def build_side_configs(
    mssql_connection: str | None,
    mssql_query: str,
    pgsql_connection: str | None,
    pgsql_query: str | None = None,
    mssql_parameters: Sequence[str] | str | None = None,
    pgsql_parameters: Sequence[str] | str | None = None,
    mssql_keycolumns: Sequence[str] | str | None = None,
    pgsql_keycolumns: Sequence[str] | str | None = None,
) -> tuple[SideConfig, SideConfig]:
    """
    Build the SQL Server (left) and PostgreSQL (right) side configurations.

    The PostgreSQL query and parameters default to the SQL Server ones.

    Raises:
        ConfigurationError: If a connection string or the query is missing
    """
    mssql_connection = mssql_connection or os.getenv(MSSQL_CONNECTION_ENV)
    pgsql_connection = pgsql_connection or os.getenv(PGSQL_CONNECTION_ENV)

    if not mssql_connection:
        raise ConfigurationError(
            f"SQL Server connection string not provided (set {MSSQL_CONNECTION_ENV})",
            side="left",
        )
    if not pgsql_connection:
        raise ConfigurationError(
            f"PostgreSQL connection string not provided (set {PGSQL_CONNECTION_ENV})",
            side="right",
        )
    if not mssql_query:
        raise ConfigurationError("SQL Server query not provided", side="left")

    mssql_params = parse_parameters(mssql_parameters)
    pgsql_params = parse_parameters(pgsql_parameters) or dict(mssql_params)

    left = SideConfig(
        connection_string=mssql_connection,
        query=mssql_query,
        parameters=mssql_params,
        key_columns=parse_columns(mssql_keycolumns),
        label="MSSQL",
    )
    right = SideConfig(
        connection_string=pgsql_connection,
        query=pgsql_query or mssql_query,
        parameters=pgsql_params,
        key_columns=parse_columns(pgsql_keycolumns),
        label="PgSQL",
    )
    return left, right
