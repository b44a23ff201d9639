"""
Content-fingerprint matching for row sets without key columns.

A row on one side matches a row on the other only if their fingerprints
are identical, so any content difference makes both rows one-sided. There
is no cell-level mismatch in this mode.

Under LAST_WINS identical left rows collapse into one map entry, so only
the last of them can be matched; use MULTISET to compare multiplicity.
"""

import logging
from collections import deque
from collections.abc import Sequence

from ..config import DuplicatePolicy
from ..result import MatchMode, MatchOutcome, MissingRow
from ..rowset import NumberedRow, Side, fingerprint
from ..utils.tracing import add_span_attributes, add_span_event, trace_operation
from .base import Deadline, Matcher

logger = logging.getLogger(__name__)


class FingerprintMatcher(Matcher):
    """Match rows by content digest."""

    mode = MatchMode.FINGERPRINT

    def bucket(self, row: NumberedRow, side: Side, partitions: int) -> int:
        if partitions <= 1:
            return 0
        return int(fingerprint(row.row)[:12], 16) % partitions

    def match(
        self,
        left: Sequence[NumberedRow],
        right: Sequence[NumberedRow],
        deadline: Deadline | None = None,
    ) -> MatchOutcome:
        deadline = deadline or Deadline()
        with trace_operation(
            "fingerprint_match",
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
            )
            return outcome

    def _match_last_wins(
        self,
        left: Sequence[NumberedRow],
        right: Sequence[NumberedRow],
        deadline: Deadline,
    ) -> MatchOutcome:
        outcome = MatchOutcome()

        left_map: dict[str, NumberedRow] = {}
        overwritten = 0
        for row in left:
            deadline.check()
            digest = fingerprint(row.row)
            if digest in left_map:
                overwritten += 1
            left_map[digest] = row

        if overwritten:
            logger.warning(
                f"{overwritten} left row(s) overwritten by a later identical row; "
                f"multiplicity is not compared"
            )
            add_span_event("duplicate_rows_overwritten", side=Side.LEFT.value, rows=overwritten)

        for row in right:
            deadline.check()
            digest = fingerprint(row.row)
            if digest in left_map:
                del left_map[digest]
            else:
                outcome.missing_right.append(MissingRow(row.row_number, row.row))

        for row in left_map.values():
            outcome.missing_left.append(MissingRow(row.row_number, row.row))

        return outcome

    def _match_multiset(
        self,
        left: Sequence[NumberedRow],
        right: Sequence[NumberedRow],
        deadline: Deadline,
    ) -> MatchOutcome:
        outcome = MatchOutcome()

        left_map: dict[str, deque[NumberedRow]] = {}
        for row in left:
            deadline.check()
            left_map.setdefault(fingerprint(row.row), deque()).append(row)

        for row in right:
            deadline.check()
            candidates = left_map.get(fingerprint(row.row))
            if candidates:
                candidates.popleft()
            else:
                outcome.missing_right.append(MissingRow(row.row_number, row.row))

        for candidates in left_map.values():
            for row in candidates:
                outcome.missing_left.append(MissingRow(row.row_number, row.row))

        return outcome
