"""
Row sets: the materialized output of one side of a comparison.

A RowSet pairs an ordered schema with an ordered tuple of rows and a side.
Row numbers handed out by a RowSet are 1-based ordinals in iteration order;
they identify a row within this row set only.
"""

import hashlib
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import NamedTuple

from .cells import Cell, CellType, to_cells
from .exceptions import ConfigurationError, UpstreamExecutionError

Row = tuple[Cell, ...]
KeyTuple = tuple[Cell, ...]


class Side(str, Enum):
    """Which side of the comparison a row set belongs to."""

    LEFT = "left"
    RIGHT = "right"


class NumberedRow(NamedTuple):
    """A row together with its 1-based position in its row set."""

    row_number: int
    row: Row


@dataclass(frozen=True)
class Schema:
    """Ordered, unique column names shared by all rows of a row set."""

    columns: tuple[str, ...]

    def __post_init__(self):
        columns = tuple(self.columns)
        object.__setattr__(self, "columns", columns)
        seen = set()
        for name in columns:
            if name in seen:
                raise UpstreamExecutionError(f"Duplicate column name in schema: {name!r}")
            seen.add(name)

    def __len__(self) -> int:
        return len(self.columns)

    def __iter__(self) -> Iterator[str]:
        return iter(self.columns)

    def index_of(self, column: str, side: Side | None = None) -> int:
        """
        Return the position of a column.

        Raises:
            ConfigurationError: If the column does not exist
        """
        try:
            return self.columns.index(column)
        except ValueError:
            where = f" in {side.value} schema" if side else ""
            raise ConfigurationError(
                f"Key column {column!r} not found{where}; available: {', '.join(self.columns)}",
                side=side.value if side else None,
                column=column,
            ) from None

    def resolve(self, columns: Sequence[str], side: Side | None = None) -> tuple[int, ...]:
        """Resolve a list of column names to positions."""
        return tuple(self.index_of(c, side) for c in columns)


@dataclass(frozen=True)
class RowSet:
    """
    Immutable schema + rows for one side of a comparison.

    Args:
        schema: Column names
        rows: Rows of cells, each as long as the schema
        side: LEFT or RIGHT
        label: Display name of the source, e.g. the DBMS ("MSSQL", "PgSQL")
    """

    schema: Schema
    rows: tuple[Row, ...]
    side: Side
    label: str = ""

    def __post_init__(self):
        rows = tuple(tuple(r) for r in self.rows)
        width = len(self.schema)
        for number, row in enumerate(rows, start=1):
            if len(row) != width:
                raise UpstreamExecutionError(
                    f"Row {number} has {len(row)} cells but schema has {width} columns",
                    side=self.side.value,
                )
        object.__setattr__(self, "rows", rows)
        if not self.label:
            object.__setattr__(self, "label", self.side.value)

    @classmethod
    def from_values(
        cls,
        columns: Sequence[str],
        rows: Iterable[Sequence],
        side: Side,
        label: str = "",
    ) -> "RowSet":
        """Build a row set from native Python values."""
        return cls(Schema(tuple(columns)), tuple(to_cells(r) for r in rows), side, label)

    def __len__(self) -> int:
        return len(self.rows)

    def numbered(self) -> list[NumberedRow]:
        return [NumberedRow(i, row) for i, row in enumerate(self.rows, start=1)]


def project_key(row: Row, indices: Sequence[int]) -> KeyTuple:
    """Project a row onto the key column positions."""
    return tuple(row[i] for i in indices)


def _canonical_temporal(value) -> str:
    if isinstance(value, datetime):
        if value.utcoffset() is None:
            return f"naive:{value.isoformat()}"
        return f"utc:{value.astimezone(timezone.utc).replace(tzinfo=None).isoformat()}"
    if isinstance(value, time):
        offset = value.utcoffset()
        if offset is None:
            return f"naive-time:{value.isoformat()}"
        micros = (
            (value.hour * 3600 + value.minute * 60 + value.second) * 1_000_000
            + value.microsecond
            - offset // timedelta(microseconds=1)
        )
        return f"utc-time:{micros}"
    return f"date:{value.isoformat()}"


def _canonical_decimal(value: Decimal) -> str:
    # Exact: normalize() would round to the context precision
    if value.is_zero():
        return "0"
    if value.is_infinite():
        return str(value)
    sign, digits, exponent = value.as_tuple()
    digits = list(digits)
    while digits[-1] == 0:
        digits.pop()
        exponent += 1
    return f"{'-' if sign else ''}{''.join(map(str, digits))}e{exponent}"


def _canonical_value(cell: Cell) -> str:
    """
    Text form of a cell value that is identical for equal cells.

    Equal values with different spellings (-0.0 and 0.0, 1.0 and 1.00, the
    same instant in two UTC offsets, quiet and signaling NaN) map to one form.
    """
    if cell.is_nan:
        return "NaN"
    if cell.type is CellType.FLOAT:
        return repr(0.0 if cell.value == 0 else cell.value)
    if cell.type is CellType.DECIMAL:
        return _canonical_decimal(cell.value)
    if cell.type is CellType.DATETIME:
        return _canonical_temporal(cell.value)
    return str(cell)


def _encode_cell(cell: Cell) -> str:
    # Tag-prefixed so equal text of different types never collides
    if cell.type is CellType.NULL:
        return "null:"
    return f"{cell.type.value}:{_canonical_value(cell)}"


def fingerprint(row: Row) -> str:
    """
    Deterministic content digest of a row.

    Cells are stringified in order, separated by a unit separator, and hashed
    with SHA256. Used for exact-match detection when no key columns exist.
    """
    hasher = hashlib.sha256()
    hasher.update("\x1f".join(_encode_cell(c) for c in row).encode("utf-8"))
    return hasher.hexdigest()


def stable_bucket(cells: Sequence[Cell], buckets: int) -> int:
    """Deterministic bucket for a key tuple, independent of PYTHONHASHSEED."""
    if buckets <= 1:
        return 0
    digest = fingerprint(tuple(cells))
    return int(digest[:12], 16) % buckets

