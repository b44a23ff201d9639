"""
Ambient utilities for querydiff

Provides:
- logging: structured/console logging setup
- metrics: Prometheus comparison metrics
- tracing: OpenTelemetry spans around comparisons and queries
- retry: backoff for transient database errors
"""

__all__ = ["logging", "metrics", "tracing", "retry"]
