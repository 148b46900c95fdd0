"""
Observability module for mimbook

Provides OpenTelemetry tracing around runbook generation.
"""

from .tracer import (
    configure_tracing,
    get_trace_id,
    get_tracer,
    set_attribute,
    trace_operation,
    trace_sync,
)

__all__ = [
    "configure_tracing",
    "get_trace_id",
    "get_tracer",
    "set_attribute",
    "trace_operation",
    "trace_sync",
]
