"""
Comparison entry point.

compare() validates the key configuration against both schemas, picks the
keyed or fingerprint matcher, runs it (optionally over hash partitions on a
thread pool) and freezes the outcome into a DiffResult.
"""

import time

from .config import ComparisonConfig
from .exceptions import ConfigurationError, QueryDiffError
from .matching import Deadline, FingerprintMatcher, KeyedMatcher, Matcher
from .parallel import PartitionedMatcher
from .result import DiffResult, MatchMode
from .rowset import RowSet, Side
from .utils.logging import ContextLogger
from .utils.metrics import ComparisonMetrics
from .utils.tracing import add_span_attributes, trace_operation


def build_matcher(left: RowSet, right: RowSet, config: ComparisonConfig) -> Matcher:
    """
    Choose the matcher for a configuration.

    Fingerprint mode is forced when either side has no key columns.

    Raises:
        ConfigurationError: If a key column is missing from its schema
    """
    if not config.keyed:
        return FingerprintMatcher(config.duplicates)

    left_key = left.schema.resolve(config.left_keys, Side.LEFT)
    right_key = right.schema.resolve(config.right_keys, Side.RIGHT)
    return KeyedMatcher(left_key, right_key, config.duplicates)


def compare(
    left: RowSet,
    right: RowSet,
    config: ComparisonConfig | None = None,
    *,
    metrics: ComparisonMetrics | None = None,
) -> DiffResult:
    """
    Compare two materialized row sets.

    Args:
        left: Left row set (side LEFT)
        right: Right row set (side RIGHT)
        config: Key columns and matching options (default: fingerprint mode)
        metrics: Optional metrics sink

    Returns:
        Immutable DiffResult

    Raises:
        ConfigurationError: Unknown key column or key lists of different length
        ComparisonTimeoutError: Matching exceeded config.timeout_seconds

    Example:
        >>> left = RowSet.from_values(["id", "name"], [[1, "a"]], Side.LEFT)
        >>> right = RowSet.from_values(["id", "name"], [[1, "b"]], Side.RIGHT)
        >>> result = compare(left, right, ComparisonConfig(("id",), ("id",)))
        >>> result.equal
        False
    """
    config = config or ComparisonConfig()
    log = ContextLogger(__name__, left=left.label, right=right.label)

    if left.side is not Side.LEFT or right.side is not Side.RIGHT:
        raise ConfigurationError(
            f"Row sets passed in the wrong order: left is {left.side.value}, "
            f"right is {right.side.value}"
        )

    mode = MatchMode.KEYED if config.keyed else MatchMode.FINGERPRINT
    log = log.bind(mode=mode.value)
    start = time.monotonic()

    with trace_operation(
        "compare",
        mode=mode.value,
        left_label=left.label,
        right_label=right.label,
        left_rows=len(left),
        right_rows=len(right),
        partitions=config.partitions,
    ):
        try:
            matcher = build_matcher(left, right, config)

            if len(left) != len(right):
                log.warning(
                    f"Row count disagreement: {left.label}={len(left)}, {right.label}={len(right)}",
                    left_rows=len(left),
                    right_rows=len(right),
                )

            log.info(
                f"Comparing {len(left)} {left.label} rows with {len(right)} {right.label} rows "
                f"({mode.value} mode)"
            )

            deadline = Deadline(config.timeout_seconds)
            if config.partitions > 1:
                partitioned = PartitionedMatcher(matcher, config.partitions, config.workers)
                outcomes = partitioned.match(left.numbered(), right.numbered(), deadline)
                result = DiffResult.union(mode, outcomes, len(left), len(right))
            else:
                outcome = matcher.match(left.numbered(), right.numbered(), deadline)
                result = DiffResult.build(mode, outcome, len(left), len(right))

        except QueryDiffError as e:
            log.error(f"Comparison failed: {e}", error_type=type(e).__name__)
            if metrics is not None:
                metrics.record_failure(mode.value, e)
            raise

        duration = time.monotonic() - start
        add_span_attributes(
            equal=result.equal,
            missing_left=len(result.missing_left),
            missing_right=len(result.missing_right),
            mismatched=len(result.mismatched),
        )

    if metrics is not None:
        metrics.record_comparison(result, duration)

    log.info(
        f"Comparison finished in {duration:.3f}s: "
        f"{'equal' if result.equal else 'different'} "
        f"({len(result.missing_left)} missing left, {len(result.missing_right)} missing right, "
        f"{len(result.mismatched)} mismatched)",
        equal=result.equal,
        duration_seconds=round(duration, 3),
    )
    return result
