"""
Shared matcher plumbing: the matcher interface and the matching deadline.
"""

import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence

from ..config import DuplicatePolicy
from ..exceptions import ComparisonTimeoutError, MatchCancelledError
from ..result import MatchMode, MatchOutcome
from ..rowset import NumberedRow, Side


class Deadline:
    """
    Wall-clock budget and cancellation flag for matching.

    Matchers call check() as they consume rows. Once the budget is spent a
    ComparisonTimeoutError is raised; once cancel() is called on any deadline
    sharing the same flag, MatchCancelledError is raised. Either way no
    partial result escapes.
    """

    def __init__(
        self,
        timeout_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.timeout_seconds = timeout_seconds
        self._clock = clock
        self._expires_at = None if timeout_seconds is None else clock() + timeout_seconds
        self._cancelled = threading.Event()
        self.rows_processed = 0

    def split(self) -> "Deadline":
        """A deadline with the same expiry and cancellation flag, for one worker."""
        child = Deadline.__new__(Deadline)
        child.timeout_seconds = self.timeout_seconds
        child._clock = self._clock
        child._expires_at = self._expires_at
        child._cancelled = self._cancelled
        child.rows_processed = 0
        return child

    def check(self, rows: int = 1) -> None:
        self.rows_processed += rows
        if self._cancelled.is_set():
            raise MatchCancelledError("Matching cancelled")
        if self.expired:
            raise ComparisonTimeoutError(self.timeout_seconds, self.rows_processed)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._expires_at is not None and self._clock() >= self._expires_at

    def remaining(self) -> float | None:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - self._clock())


class Matcher(ABC):
    """Aligns two sequences of numbered rows and reports differences."""

    mode: MatchMode

    def __init__(self, duplicates: DuplicatePolicy = DuplicatePolicy.LAST_WINS):
        self.duplicates = DuplicatePolicy(duplicates)

    @abstractmethod
    def match(
        self,
        left: Sequence[NumberedRow],
        right: Sequence[NumberedRow],
        deadline: Deadline | None = None,
    ) -> MatchOutcome:
        """Match left rows against right rows."""

    @abstractmethod
    def bucket(self, row: NumberedRow, side: Side, partitions: int) -> int:
        """
        Partition a row so that rows which may match land in the same bucket.
        """
