"""
Cell and row comparison.

Equality is strict: a cell equals another only if both tag and value match.
No numeric widening and no string/number coercion is performed, so values
that two engines represent differently (e.g. NUMERIC vs FLOAT) are reported
as mismatches.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from .cells import Cell


def cells_equal(a: Cell, b: Cell) -> bool:
    """
    Return True if both cells have the same tag and the same value.

    Two NaNs of the same tag are equal.
    """
    if a.type is not b.type:
        return False
    if a.is_null:
        return True
    if a.is_nan or b.is_nan:
        return a.is_nan and b.is_nan
    return a.value == b.value


@dataclass(frozen=True)
class RowComparison:
    """Outcome of comparing two rows position by position."""

    mismatched_columns: frozenset[int]
    type_drift_columns: frozenset[int]

    @property
    def equal(self) -> bool:
        return not self.mismatched_columns


def compare_rows(left: Sequence[Cell], right: Sequence[Cell]) -> RowComparison:
    """
    Compare two rows over the column positions present in both.

    Returns:
        RowComparison with the differing column indices and, among those,
        the indices where the two cells carry different non-null tags
    """
    mismatched = set()
    drift = set()
    for index in range(min(len(left), len(right))):
        a, b = left[index], right[index]
        if cells_equal(a, b):
            continue
        mismatched.add(index)
        if a.type is not b.type and not a.is_null and not b.is_null:
            drift.add(index)
    return RowComparison(frozenset(mismatched), frozenset(drift))
