"""
Prometheus metrics for partitioned matching.
"""

from prometheus_client import REGISTRY, Counter, Gauge, Histogram

from ..utils.metrics import get_or_create_metric

PARTITIONS_PROCESSED = get_or_create_metric(
    lambda: Counter(
        "querydiff_partitions_processed_total",
        "Partitions matched, by outcome",
        ["status"],  # success, failed, timeout, cancelled
        registry=REGISTRY,
    ),
    "querydiff_partitions_processed_total",
)

PARTITION_MATCH_TIME = get_or_create_metric(
    lambda: Histogram(
        "querydiff_partition_match_seconds",
        "Time to match a single partition",
        buckets=[0.001, 0.01, 0.05, 0.1, 0.5, 1, 5, 10, 30, 60],
        registry=REGISTRY,
    ),
    "querydiff_partition_match_seconds",
)

ACTIVE_PARTITION_WORKERS = get_or_create_metric(
    lambda: Gauge(
        "querydiff_active_partition_workers",
        "Worker threads currently matching partitions",
        registry=REGISTRY,
    ),
    "querydiff_active_partition_workers",
)
