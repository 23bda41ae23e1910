"""Structlog processor for OpenTelemetry trace context injection."""

from typing import Any

from careguide.infrastructure.observability.tracing import (
    get_current_span_id,
    get_current_trace_id,
)


def add_trace_context(
    logger: Any,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add trace_id and span_id to log events emitted inside a span.

    Lets cache and retrieval log lines be joined to their traces.
    """
    trace_id = get_current_trace_id()
    if trace_id is not None:
        event_dict["trace_id"] = trace_id
        event_dict["span_id"] = get_current_span_id()
    return event_dict
