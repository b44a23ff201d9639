"""
Typed cell model.

A Cell is a tagged scalar: the tag records which kind of value a database
driver produced and the value holds it. Two cells are equal only when both
tag and value are equal, so an INTEGER 5 never equals a TEXT "5" and a
DECIMAL never equals a FLOAT. Differences of this kind between two engines
are exactly what a migration check needs to surface.
"""

import base64
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any


class CellType(str, Enum):
    """Tag of a cell value."""

    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    TEXT = "text"
    BYTES = "bytes"
    DATETIME = "datetime"


@dataclass(frozen=True, eq=False)
class Cell:
    """
    A single tagged value from a result row.

    NaN (float or decimal) equals NaN of the same tag, so a row holding a
    NaN still equals itself.
    """

    type: CellType
    value: Any = None

    @property
    def is_nan(self) -> bool:
        if self.type is CellType.FLOAT:
            return self.value != self.value
        if self.type is CellType.DECIMAL:
            return self.value.is_nan()
        return False

    def _identity(self) -> tuple:
        if self.is_nan:
            return (self.type, "nan")
        return (self.type, self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    @classmethod
    def null(cls) -> "Cell":
        return _NULL

    @classmethod
    def of(cls, value: Any) -> "Cell":
        """
        Build a cell from a native Python value as returned by a DB-API driver.

        Raises:
            TypeError: If the value has no cell representation
        """
        if value is None:
            return _NULL
        # bool before int: bool is an int subclass
        if isinstance(value, bool):
            return cls(CellType.BOOLEAN, value)
        if isinstance(value, int):
            return cls(CellType.INTEGER, value)
        if isinstance(value, float):
            return cls(CellType.FLOAT, value)
        if isinstance(value, Decimal):
            return cls(CellType.DECIMAL, value)
        if isinstance(value, str):
            return cls(CellType.TEXT, value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(CellType.BYTES, bytes(value))
        if isinstance(value, (datetime, date, time)):
            return cls(CellType.DATETIME, value)
        if isinstance(value, uuid.UUID):
            return cls(CellType.TEXT, str(value))
        raise TypeError(f"Unsupported cell value type: {type(value).__name__}")

    @property
    def is_null(self) -> bool:
        return self.type is CellType.NULL

    def __str__(self) -> str:
        if self.is_null:
            return "null"
        if self.type is CellType.BYTES:
            return "0x" + self.value.hex()
        if self.type is CellType.DATETIME:
            return self.value.isoformat()
        return str(self.value)

    def to_json(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict that keeps the tag."""
        if self.is_null:
            return {"type": self.type.value, "value": None}
        if self.type is CellType.BYTES:
            value = base64.b64encode(self.value).decode("ascii")
        elif self.type is CellType.DECIMAL:
            value = str(self.value)
        elif self.type is CellType.DATETIME:
            value = {"kind": type(self.value).__name__, "iso": self.value.isoformat()}
        else:
            value = self.value
        return {"type": self.type.value, "value": value}

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Cell":
        """Inverse of to_json."""
        cell_type = CellType(data["type"])
        value = data.get("value")
        if cell_type is CellType.NULL:
            return _NULL
        if cell_type is CellType.BYTES:
            return cls(cell_type, base64.b64decode(value))
        if cell_type is CellType.DECIMAL:
            return cls(cell_type, Decimal(value))
        if cell_type is CellType.DATETIME:
            parser = _DATETIME_PARSERS[value["kind"]]
            return cls(cell_type, parser(value["iso"]))
        return cls(cell_type, value)


_NULL = Cell(CellType.NULL)

_DATETIME_PARSERS = {
    "datetime": datetime.fromisoformat,
    "date": date.fromisoformat,
    "time": time.fromisoformat,
}


def to_cells(values) -> tuple[Cell, ...]:
    """Convert a sequence of native values to a row of cells."""
    return tuple(Cell.of(v) for v in values)
