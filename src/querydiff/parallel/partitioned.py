"""
Thread-pool matching of hash partitions.
"""

import logging
import threading
import time
from collections.abc import Sequence
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait

from ..exceptions import ComparisonTimeoutError, MatchCancelledError
from ..matching.base import Deadline, Matcher
from ..result import MatchOutcome
from ..rowset import NumberedRow, Side
from ..utils.tracing import trace_operation
from .helpers import partition_rows
from .metrics import ACTIVE_PARTITION_WORKERS, PARTITION_MATCH_TIME, PARTITIONS_PROCESSED

logger = logging.getLogger(__name__)


class PartitionedMatcher:
    """
    Run a matcher over hash partitions on a thread pool.

    The first failing partition cancels the others and its error is
    re-raised; no partial outcome is returned.

    Args:
        matcher: Keyed or fingerprint matcher to run per partition
        partitions: Number of hash partitions
        max_workers: Worker threads
    """

    def __init__(self, matcher: Matcher, partitions: int, max_workers: int = 4):
        if partitions < 1:
            raise ValueError("partitions must be >= 1")
        self.matcher = matcher
        self.partitions = partitions
        self.max_workers = max(1, min(max_workers, partitions))
        self._active_lock = threading.Lock()
        self._active = 0

    def match(
        self,
        left: Sequence[NumberedRow],
        right: Sequence[NumberedRow],
        deadline: Deadline | None = None,
    ) -> list[MatchOutcome]:
        """
        Match all partitions.

        Returns:
            One outcome per partition, in partition order

        Raises:
            ComparisonTimeoutError: If the deadline expires
        """
        deadline = deadline or Deadline()
        with trace_operation(
            "partitioned_match",
            mode=self.matcher.mode.value,
            partitions=self.partitions,
            max_workers=self.max_workers,
        ):
            left_parts = partition_rows(self.matcher, left, Side.LEFT, self.partitions)
            right_parts = partition_rows(self.matcher, right, Side.RIGHT, self.partitions)

            logger.info(
                f"Matching {len(left)}x{len(right)} rows in {self.partitions} partitions "
                f"with {self.max_workers} workers"
            )

            workers = [deadline.split() for _ in range(self.partitions)]
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [
                    executor.submit(
                        self._match_partition,
                        number,
                        left_parts[number],
                        right_parts[number],
                        workers[number],
                    )
                    for number in range(self.partitions)
                ]

                done, pending = wait(futures, timeout=deadline.remaining(), return_when=FIRST_EXCEPTION)
                errors = [f.exception() for f in done if f.exception() is not None]
                # Prefer the root cause over siblings it cancelled
                errors.sort(key=lambda e: isinstance(e, MatchCancelledError))
                error = errors[0] if errors else None

                if error is not None or pending:
                    deadline.cancel()
                    for future in pending:
                        future.cancel()

                if error is not None:
                    logger.error(f"Partition matching failed: {type(error).__name__}: {error}")
                    raise error
                if pending:
                    raise ComparisonTimeoutError(
                        deadline.timeout_seconds,
                        sum(w.rows_processed for w in workers),
                    )

            return [future.result() for future in futures]

    def _match_partition(
        self,
        number: int,
        left: list[NumberedRow],
        right: list[NumberedRow],
        deadline: Deadline,
    ) -> MatchOutcome:
        with self._active_lock:
            self._active += 1
            ACTIVE_PARTITION_WORKERS.set(self._active)

        start = time.monotonic()
        status = "success"
        try:
            with trace_operation("match_partition", partition=number, left_rows=len(left), right_rows=len(right)):
                outcome = self.matcher.match(left, right, deadline)
            logger.debug(
                f"Partition {number}: {len(outcome.missing_left)} missing left, "
                f"{len(outcome.missing_right)} missing right, {len(outcome.mismatched)} mismatched"
            )
            return outcome
        except ComparisonTimeoutError:
            status = "timeout"
            raise
        except MatchCancelledError:
            status = "cancelled"
            raise
        except Exception:
            status = "failed"
            raise
        finally:
            PARTITION_MATCH_TIME.observe(time.monotonic() - start)
            PARTITIONS_PROCESSED.labels(status=status).inc()
            with self._active_lock:
                self._active -= 1
                ACTIVE_PARTITION_WORKERS.set(self._active)
