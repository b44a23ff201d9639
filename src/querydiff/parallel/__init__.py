"""
Partitioned matching.

Rows are split into hash partitions by key tuple (keyed mode) or by
fingerprint (fingerprint mode). Rows that could match always share a
partition, so partitions are matched independently on a thread pool and
merged by union. The merged result is identical to sequential matching.
"""

from .helpers import estimate_partitions, get_partition_stats, partition_rows
from .partitioned import PartitionedMatcher

__all__ = [
    "PartitionedMatcher",
    "estimate_partitions",
    "get_partition_stats",
    "partition_rows",
]
