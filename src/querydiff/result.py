"""
Diff result model.

Both matchers normalize their outcome into a DiffResult. The equality flag
is derived once, when the result is built, from the rule of the matcher
that produced it; renderers and callers only read it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .cells import Cell
from .rowset import Row


class MatchMode(str, Enum):
    """How rows were aligned."""

    KEYED = "keyed"
    FINGERPRINT = "fingerprint"


def _row_to_json(row: Row) -> list[dict[str, Any]]:
    return [cell.to_json() for cell in row]


def _row_from_json(data: list[dict[str, Any]]) -> Row:
    return tuple(Cell.from_json(c) for c in data)


@dataclass(frozen=True)
class MissingRow:
    """A row present on one side only."""

    row_number: int
    row: Row

    def to_dict(self) -> dict[str, Any]:
        return {"row_number": self.row_number, "row": _row_to_json(self.row)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MissingRow:
        return cls(data["row_number"], _row_from_json(data["row"]))


@dataclass(frozen=True)
class MismatchedRow:
    """A key-matched row pair whose cells differ in one or more columns."""

    left_row_number: int
    right_row_number: int
    left_row: Row
    right_row: Row
    columns: frozenset[int]
    type_drift_columns: frozenset[int] = frozenset()

    def to_dict(self) -> dict[str, Any]:
        return {
            "left_row_number": self.left_row_number,
            "right_row_number": self.right_row_number,
            "left_row": _row_to_json(self.left_row),
            "right_row": _row_to_json(self.right_row),
            "columns": sorted(self.columns),
            "type_drift_columns": sorted(self.type_drift_columns),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MismatchedRow:
        return cls(
            left_row_number=data["left_row_number"],
            right_row_number=data["right_row_number"],
            left_row=_row_from_json(data["left_row"]),
            right_row=_row_from_json(data["right_row"]),
            columns=frozenset(data["columns"]),
            type_drift_columns=frozenset(data.get("type_drift_columns", [])),
        )


@dataclass
class MatchOutcome:
    """Mutable accumulator filled by a matcher before it is frozen."""

    missing_left: list[MissingRow] = field(default_factory=list)
    missing_right: list[MissingRow] = field(default_factory=list)
    mismatched: list[MismatchedRow] = field(default_factory=list)

    def extend(self, other: MatchOutcome) -> None:
        self.missing_left.extend(other.missing_left)
        self.missing_right.extend(other.missing_right)
        self.mismatched.extend(other.mismatched)


@dataclass(frozen=True)
class DiffResult:
    """
    Outcome of one comparison.

    Attributes:
        mode: KEYED or FINGERPRINT
        equal: True when nothing is missing on either side and, in keyed
            mode, no matched pair differs
        missing_left: Rows present only on the left, by left row number
        missing_right: Rows present only on the right, by right row number
        mismatched: Key-matched pairs with differing cells, by left row number
        left_row_count: Number of rows in the left row set
        right_row_count: Number of rows in the right row set
    """

    mode: MatchMode
    equal: bool
    missing_left: tuple[MissingRow, ...] = ()
    missing_right: tuple[MissingRow, ...] = ()
    mismatched: tuple[MismatchedRow, ...] = ()
    left_row_count: int = 0
    right_row_count: int = 0

    @classmethod
    def build(
        cls,
        mode: MatchMode,
        outcome: MatchOutcome,
        left_row_count: int,
        right_row_count: int,
    ) -> DiffResult:
        """Freeze a matcher outcome and derive the equality flag."""
        missing_left = tuple(sorted(outcome.missing_left, key=lambda m: m.row_number))
        missing_right = tuple(sorted(outcome.missing_right, key=lambda m: m.row_number))
        mismatched = tuple(
            sorted(outcome.mismatched, key=lambda m: (m.left_row_number, m.right_row_number))
        )

        if mode is MatchMode.KEYED:
            equal = not missing_left and not missing_right and not mismatched
        else:
            if mismatched:
                raise ValueError("Fingerprint matching cannot produce mismatched rows")
            equal = not missing_left and not missing_right

        return cls(
            mode=mode,
            equal=equal,
            missing_left=missing_left,
            missing_right=missing_right,
            mismatched=mismatched,
            left_row_count=left_row_count,
            right_row_count=right_row_count,
        )

    @classmethod
    def union(
        cls,
        mode: MatchMode,
        outcomes: Iterable[MatchOutcome],
        left_row_count: int,
        right_row_count: int,
    ) -> DiffResult:
        """Merge independently matched partitions into one result."""
        merged = MatchOutcome()
        for outcome in outcomes:
            merged.extend(outcome)
        return cls.build(mode, merged, left_row_count, right_row_count)

    @property
    def row_count_mismatch(self) -> bool:
        return self.left_row_count != self.right_row_count

    @property
    def type_drift_count(self) -> int:
        return sum(len(m.type_drift_columns) for m in self.mismatched)

    def mismatched_column_indices(self) -> set[int]:
        columns = set()
        for pair in self.mismatched:
            columns.update(pair.columns)
        return columns

    def type_drift_column_indices(self) -> set[int]:
        columns = set()
        for pair in self.mismatched:
            columns.update(pair.type_drift_columns)
        return columns

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "equal": self.equal,
            "left_row_count": self.left_row_count,
            "right_row_count": self.right_row_count,
            "missing_left": [m.to_dict() for m in self.missing_left],
            "missing_right": [m.to_dict() for m in self.missing_right],
            "mismatched": [m.to_dict() for m in self.mismatched],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DiffResult:
        """Rebuild a result from to_dict output; equality is re-derived."""
        outcome = MatchOutcome(
            missing_left=[MissingRow.from_dict(m) for m in data.get("missing_left", [])],
            missing_right=[MissingRow.from_dict(m) for m in data.get("missing_right", [])],
            mismatched=[MismatchedRow.from_dict(m) for m in data.get("mismatched", [])],
        )
        return cls.build(
            MatchMode(data["mode"]),
            outcome,
            data.get("left_row_count", 0),
            data.get("right_row_count", 0),
        )
