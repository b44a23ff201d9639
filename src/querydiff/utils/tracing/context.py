"""
Span helpers usable without holding a span reference.

Attribute values that OpenTelemetry accepts natively (str, bool, int, float)
are recorded as-is so row counts stay numeric in the backend; anything else
is stringified.
"""

from contextlib import contextmanager

from opentelemetry import trace

from .tracer import get_tracer

_NATIVE = (str, bool, int, float)


def _attribute_value(value):
    return value if isinstance(value, _NATIVE) else str(value)


def _attributes(attributes: dict) -> dict:
    return {key: _attribute_value(value) for key, value in attributes.items() if value is not None}


@contextmanager
def trace_operation(
    operation_name: str,
    kind: trace.SpanKind = trace.SpanKind.INTERNAL,
    **attributes
):
    """
    Run a block inside a span, recording any exception on it.

    None-valued attributes are dropped.

    Example:
        >>> with trace_operation("keyed_match", left_rows=10) as span:
        ...     span.set_attribute("mismatched", 2)
    """
    with get_tracer().start_as_current_span(
        operation_name, kind=kind, attributes=_attributes(attributes)
    ) as span:
        try:
            yield span
        except Exception as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(e).__name__)
            span.record_exception(e)
            raise


def add_span_attributes(**attributes):
    """Add attributes to the current span, if it is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attributes(_attributes(attributes))


def add_span_event(name: str, **attributes):
    """Add an event to the current span, if it is recording."""
    span = trace.get_current_span()
    if span.is_recording():
        span.add_event(name, attributes=_attributes(attributes))
