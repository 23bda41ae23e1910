"""Tracing helpers for instrumenting application code with OpenTelemetry."""

from opentelemetry import trace
from opentelemetry.trace import Tracer


def get_tracer(name: str) -> Tracer:
    """Get a tracer for the given module name, typically __name__."""
    return trace.get_tracer(name)


def get_current_trace_id() -> str | None:
    """Return the active trace ID as 32 hex characters, or None."""
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        return format(span_context.trace_id, "032x")
    return None


def get_current_span_id() -> str | None:
    """Return the active span ID as 16 hex characters, or None."""
    span_context = trace.get_current_span().get_span_context()
    if span_context.is_valid:
        return format(span_context.span_id, "016x")
    return None
