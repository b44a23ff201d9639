"""
Metrics describing comparison runs and the differences they find.
"""

import logging
import threading
import time
from typing import TYPE_CHECKING, Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram

from .registry import get_or_create_metric

if TYPE_CHECKING:
    from querydiff.result import DiffResult

logger = logging.getLogger(__name__)


class ComparisonMetrics:
    """
    Counters, gauges and histograms for comparison runs.

    Args:
        registry: Prometheus registry (default: global REGISTRY)
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or REGISTRY

        def metric(factory, name):
            return get_or_create_metric(factory, name, self.registry)

        self.comparisons_total = metric(
            lambda: Counter(
                "querydiff_comparisons_total",
                "Comparisons run, by matching mode and outcome",
                ["mode", "status"],
                registry=self.registry,
            ),
            "querydiff_comparisons_total",
        )
        self.comparison_duration_seconds = metric(
            lambda: Histogram(
                "querydiff_comparison_duration_seconds",
                "Wall-clock duration of the matching phase",
                ["mode"],
                buckets=(0.01, 0.05, 0.1, 0.5, 1, 5, 10, 30, 60, 300),
                registry=self.registry,
            ),
            "querydiff_comparison_duration_seconds",
        )
        self.rows_compared_total = metric(
            lambda: Counter(
                "querydiff_rows_compared_total",
                "Rows read from each side",
                ["side"],
                registry=self.registry,
            ),
            "querydiff_rows_compared_total",
        )
        self.missing_rows_total = metric(
            lambda: Counter(
                "querydiff_missing_rows_total",
                "Rows present on one side only, by the side holding them",
                ["side"],
                registry=self.registry,
            ),
            "querydiff_missing_rows_total",
        )
        self.mismatched_rows_total = metric(
            lambda: Counter(
                "querydiff_mismatched_rows_total",
                "Key-matched row pairs with differing cells",
                registry=self.registry,
            ),
            "querydiff_mismatched_rows_total",
        )
        self.type_drift_cells_total = metric(
            lambda: Counter(
                "querydiff_type_drift_cells_total",
                "Mismatched cells whose value types differ between sides",
                registry=self.registry,
            ),
            "querydiff_type_drift_cells_total",
        )
        self.row_count_mismatch_total = metric(
            lambda: Counter(
                "querydiff_row_count_mismatch_total",
                "Comparisons where the two sides returned different row counts",
                registry=self.registry,
            ),
            "querydiff_row_count_mismatch_total",
        )
        self.last_run_timestamp = metric(
            lambda: Gauge(
                "querydiff_last_run_timestamp",
                "Unix time of the last finished comparison",
                registry=self.registry,
            ),
            "querydiff_last_run_timestamp",
        )

    def record_comparison(self, result: "DiffResult", duration: float) -> None:
        """Record a finished comparison."""
        mode = result.mode.value
        status = "equal" if result.equal else "different"

        self.comparisons_total.labels(mode=mode, status=status).inc()
        self.comparison_duration_seconds.labels(mode=mode).observe(duration)
        self.rows_compared_total.labels(side="left").inc(result.left_row_count)
        self.rows_compared_total.labels(side="right").inc(result.right_row_count)
        self.missing_rows_total.labels(side="left").inc(len(result.missing_left))
        self.missing_rows_total.labels(side="right").inc(len(result.missing_right))
        self.mismatched_rows_total.inc(len(result.mismatched))
        self.type_drift_cells_total.inc(result.type_drift_count)
        if result.row_count_mismatch:
            self.row_count_mismatch_total.inc()
        self.last_run_timestamp.set(time.time())

    def record_failure(self, mode: str, error: Exception) -> None:
        """Record a comparison that aborted with an error."""
        self.comparisons_total.labels(mode=mode, status="error").inc()
        logger.debug(f"Recorded failed comparison: mode={mode}, error={type(error).__name__}")


_default_metrics: ComparisonMetrics | None = None
_default_lock = threading.Lock()


def get_comparison_metrics() -> ComparisonMetrics:
    """Process-wide metrics on the global registry."""
    global _default_metrics

    with _default_lock:
        if _default_metrics is None:
            _default_metrics = ComparisonMetrics()
        return _default_metrics
