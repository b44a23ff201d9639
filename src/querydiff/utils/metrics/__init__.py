"""
Prometheus metrics for comparisons.

Usage:
    from querydiff.utils.metrics import ComparisonMetrics, MetricsPublisher

    MetricsPublisher(port=9091).start()
    metrics = ComparisonMetrics()
    metrics.record_comparison(result, duration=1.2)
"""

from .comparison import ComparisonMetrics, get_comparison_metrics
from .publisher import MetricsPublisher
from .registry import get_or_create_metric

__all__ = [
    "ComparisonMetrics",
    "MetricsPublisher",
    "get_comparison_metrics",
    "get_or_create_metric",
]
