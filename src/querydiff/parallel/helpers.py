"""
Partitioning helpers and statistics.
"""

import logging
from collections.abc import Sequence
from typing import Any

from prometheus_client import REGISTRY

from ..matching.base import Matcher
from ..rowset import NumberedRow, Side

logger = logging.getLogger(__name__)


def partition_rows(
    matcher: Matcher,
    rows: Sequence[NumberedRow],
    side: Side,
    partitions: int,
) -> list[list[NumberedRow]]:
    """
    Split rows into buckets, keeping their relative order in each bucket.

    Order matters: last-wins duplicate handling depends on it.
    """
    buckets: list[list[NumberedRow]] = [[] for _ in range(partitions)]
    for row in rows:
        buckets[matcher.bucket(row, side, partitions)].append(row)
    return buckets


def estimate_partitions(
    row_count: int,
    rows_per_partition: int = 250_000,
    max_partitions: int = 32,
) -> int:
    """
    Suggest a partition count for a row set of the given size.

    Example:
        >>> estimate_partitions(1_000_000)
        4
    """
    if row_count <= rows_per_partition:
        return 1
    partitions = -(-row_count // rows_per_partition)
    partitions = max(1, min(partitions, max_partitions))
    logger.debug(f"Estimated {partitions} partitions for {row_count} rows")
    return partitions


def get_partition_stats() -> dict[str, Any]:
    """Current partition metrics as a plain dict."""
    def processed(status: str) -> float:
        return REGISTRY.get_sample_value(
            "querydiff_partitions_processed_total", {"status": status}
        ) or 0

    return {
        "active_workers": REGISTRY.get_sample_value("querydiff_active_partition_workers") or 0,
        "total_processed": {
            status: processed(status)
            for status in ("success", "failed", "timeout", "cancelled")
        },
    }
