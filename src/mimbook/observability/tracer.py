"""
OpenTelemetry tracing for runbook generation

Spans are created through the OpenTelemetry API only. When the host process
has installed an SDK TracerProvider the spans are exported by it; otherwise the
API hands out non-recording spans and tracing costs nothing.
"""

import functools
import logging
import time
from contextlib import contextmanager
from typing import Any, Callable, Optional, ParamSpec, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from ..config import TelemetryConfig

logger = logging.getLogger(__name__)

# Global tracer instance
_tracer: Optional[trace.Tracer] = None

P = ParamSpec("P")
T = TypeVar("T")


def configure_tracing(config: TelemetryConfig) -> None:
    """Bind the module tracer according to the telemetry configuration"""
    global _tracer

    if not config.enable_tracing:
        logger.info("Tracing is disabled")
        _tracer = trace.NoOpTracer()
        return

    from .. import __version__

    _tracer = trace.get_tracer(
        instrumenting_module_name=config.service_name,
        instrumenting_library_version=__version__,
    )
    logger.debug(f"Tracing bound to the global provider as '{config.service_name}'")


def get_tracer() -> trace.Tracer:
    """Get the configured tracer, falling back to the global provider"""
    if _tracer is None:
        return trace.get_tracer("mimbook")
    return _tracer


@contextmanager
def trace_operation(
    operation_name: str,
    attributes: Optional[dict[str, Any]] = None,
    set_status_on_exception: bool = True,
):
    """
    Context manager for tracing operations

    Args:
        operation_name: Name of the operation being traced
        attributes: Additional attributes to add to the span
        set_status_on_exception: Whether to set error status on exceptions
    """
    tracer = get_tracer()

    with tracer.start_as_current_span(operation_name) as span:
        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, value)

        try:
            yield span
        except Exception as e:
            if set_status_on_exception:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                span.record_exception(e)
            raise


def trace_sync(
    operation_name: Optional[str] = None,
    attributes: Optional[dict[str, Any]] = None,
    record_result: bool = False,
):
    """
    Decorator for tracing synchronous functions

    Args:
        operation_name: Custom operation name (defaults to function name)
        attributes: Static attributes to add to spans
        record_result: Whether to record the result length as an attribute
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            name = operation_name or f"{func.__module__}.{func.__qualname__}"

            with trace_operation(name, attributes) as span:
                start_time = time.time()

                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    span.set_attribute("error.type", type(e).__name__)
                    raise
                finally:
                    duration = time.time() - start_time
                    span.set_attribute("operation.duration_ms", duration * 1000)

                if record_result and hasattr(result, "__len__"):
                    span.set_attribute("result.length", len(result))
                return result

        return wrapper

    return decorator


def set_attribute(key: str, value: Any) -> None:
    """Set an attribute on the current span"""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attribute(key, value)


def get_trace_id() -> str:
    """Get the current trace ID as a string"""
    span = trace.get_current_span()
    if span.is_recording():
        return format(span.get_span_context().trace_id, "032x")
    return ""
