"""
Composite-key row alignment.

The right side is indexed by key tuple; each left row looks up its key.
Unmatched left rows go to missing_left, matched pairs are compared cell by
cell, and index entries never consumed go to missing_right.

Duplicate keys (LAST_WINS): a later right row overwrites the earlier index
entry, so only the last one can be matched. On the left, the last row with
a key takes part in matching and earlier rows with that key are reported
in missing_left. Neither case is an error.
"""

import logging
from collections import deque
from collections.abc import Sequence

from ..comparator import compare_rows
from ..config import DuplicatePolicy
from ..result import MatchMode, MatchOutcome, MismatchedRow, MissingRow
from ..rowset import KeyTuple, NumberedRow, Side, project_key, stable_bucket
from ..utils.tracing import add_span_attributes, add_span_event, trace_operation
from .base import Deadline, Matcher

logger = logging.getLogger(__name__)


class KeyedMatcher(Matcher):
    """
    Match rows by key columns.

    Args:
        left_key: Key column positions in the left schema
        right_key: Key column positions in the right schema
        duplicates: Duplicate key policy
    """

    mode = MatchMode.KEYED

    def __init__(
        self,
        left_key: Sequence[int],
        right_key: Sequence[int],
        duplicates: DuplicatePolicy = DuplicatePolicy.LAST_WINS,
    ):
        super().__init__(duplicates)
        if len(left_key) != len(right_key):
            raise ValueError("Left and right key must have the same number of columns")
        if not left_key:
            raise ValueError("Keyed matching needs at least one key column")
        self.left_key = tuple(left_key)
        self.right_key = tuple(right_key)

    def key_of(self, row: NumberedRow, side: Side) -> KeyTuple:
        indices = self.left_key if side is Side.LEFT else self.right_key
        return project_key(row.row, indices)

    def bucket(self, row: NumberedRow, side: Side, partitions: int) -> int:
        return stable_bucket(self.key_of(row, side), partitions)

    def match(
        self,
        left: Sequence[NumberedRow],
        right: Sequence[NumberedRow],
        deadline: Deadline | None = None,
    ) -> MatchOutcome:
        deadline = deadline or Deadline()
        with trace_operation(
            "keyed_match",
            left_rows=len(left),
            right_rows=len(right),
            duplicates=self.duplicates.value,
        ):
            if self.duplicates is DuplicatePolicy.MULTISET:
                outcome = self._match_multiset(left, right, deadline)
            else:
                outcome = self._match_last_wins(left, right, deadline)

            add_span_attributes(
                missing_left=len(outcome.missing_left),
                missing_right=len(outcome.missing_right),
                mismatched=len(outcome.mismatched),
            )
            return outcome

    def _pair(self, outcome: MatchOutcome, left: NumberedRow, right: NumberedRow) -> None:
        comparison = compare_rows(left.row, right.row)
        if comparison.equal:
            return
        outcome.mismatched.append(
            MismatchedRow(
                left_row_number=left.row_number,
                right_row_number=right.row_number,
                left_row=left.row,
                right_row=right.row,
                columns=comparison.mismatched_columns,
                type_drift_columns=comparison.type_drift_columns,
            )
        )

    def _match_last_wins(
        self,
        left: Sequence[NumberedRow],
        right: Sequence[NumberedRow],
        deadline: Deadline,
    ) -> MatchOutcome:
        outcome = MatchOutcome()

        index: dict[KeyTuple, NumberedRow] = {}
        overwritten = 0
        for row in right:
            deadline.check()
            key = self.key_of(row, Side.RIGHT)
            if key in index:
                overwritten += 1
            index[key] = row

        if overwritten:
            logger.warning(
                f"{overwritten} right row(s) overwritten in the key index by a later row "
                f"with the same key"
            )
            add_span_event("duplicate_keys_overwritten", side=Side.RIGHT.value, rows=overwritten)

        last_left: dict[KeyTuple, int] = {}
        for row in left:
            last_left[self.key_of(row, Side.LEFT)] = row.row_number

        superseded = 0
        consumed: set[KeyTuple] = set()
        for row in left:
            deadline.check()
            key = self.key_of(row, Side.LEFT)
            if last_left[key] != row.row_number:
                superseded += 1
                outcome.missing_left.append(MissingRow(row.row_number, row.row))
                continue

            match = index.get(key)
            if match is None:
                outcome.missing_left.append(MissingRow(row.row_number, row.row))
                continue

            consumed.add(key)
            self._pair(outcome, row, match)

        for key, row in index.items():
            if key not in consumed:
                outcome.missing_right.append(MissingRow(row.row_number, row.row))

        if superseded:
            logger.warning(
                f"{superseded} left row(s) superseded by a later row with the same key; "
                f"reported as missing"
            )
            add_span_event("duplicate_keys_superseded", side=Side.LEFT.value, rows=superseded)
        return outcome

    def _match_multiset(
        self,
        left: Sequence[NumberedRow],
        right: Sequence[NumberedRow],
        deadline: Deadline,
    ) -> MatchOutcome:
        outcome = MatchOutcome()

        index: dict[KeyTuple, deque[NumberedRow]] = {}
        for row in right:
            deadline.check()
            index.setdefault(self.key_of(row, Side.RIGHT), deque()).append(row)

        for row in left:
            deadline.check()
            candidates = index.get(self.key_of(row, Side.LEFT))
            if not candidates:
                outcome.missing_left.append(MissingRow(row.row_number, row.row))
                continue
            self._pair(outcome, row, candidates.popleft())

        for candidates in index.values():
            for row in candidates:
                outcome.missing_right.append(MissingRow(row.row_number, row.row))

        return outcome
