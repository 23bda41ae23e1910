"""Observability: structlog configuration and OpenTelemetry tracing."""

from careguide.infrastructure.observability.setup import (
    configure_logging,
    init_observability,
    shutdown_observability,
)
from careguide.infrastructure.observability.structlog_processor import add_trace_context
from careguide.infrastructure.observability.tracing import (
    get_current_span_id,
    get_current_trace_id,
    get_tracer,
)

__all__ = [
    "add_trace_context",
    "configure_logging",
    "get_current_span_id",
    "get_current_trace_id",
    "get_tracer",
    "init_observability",
    "shutdown_observability",
]
