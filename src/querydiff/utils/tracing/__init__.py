"""
OpenTelemetry tracing for comparisons and source queries.

Spans are no-ops until initialize_tracing() installs a provider, so library
users pay nothing unless they opt in.
"""

from .context import add_span_attributes, add_span_event, trace_operation
from .tracer import get_tracer, initialize_tracing, shutdown_tracing

__all__ = [
    "initialize_tracing",
    "get_tracer",
    "shutdown_tracing",
    "trace_operation",
    "add_span_attributes",
    "add_span_event",
]
