"""OpenTelemetry tracing setup for Pizzeria.

Spans wrap the slow, out-of-band paths:
  MetricsExporter.tick() and OrderService.fulfil()

In development, spans can be printed to the console.
"""

from __future__ import annotations

import atexit
import os
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

_tracer: trace.Tracer | None = None


def setup_tracing(service_name: str = "pizzeria", console: bool = False) -> None:
    """Initialize OpenTelemetry tracing.

    Args:
        service_name: Service name for the resource attribute.
        console: If True, export spans to console (dev mode).
    """
    global _tracer

    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)

    if console or os.getenv("OTEL_TRACES_CONSOLE", "").lower() in ("1", "true"):
        # Synchronous export; a batch processor's thread can outlive stdout.
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(service_name)

    atexit.register(provider.shutdown)


def get_tracer() -> trace.Tracer:
    """Return the configured tracer (or a no-op tracer if not initialized)."""
    return _tracer or trace.get_tracer("pizzeria")


def traced(
    name: str | None = None,
    attributes: dict[str, Any] | None = None,
):
    """Decorator to wrap async functions with OTel spans.

    Usage:
        @traced("metrics.export")
        async def tick(self):
            ...
    """

    def decorator(func):
        span_name = name or f"{func.__module__}.{func.__qualname__}"

        @wraps(func)
        async def wrapper(*args, **kwargs):
            tracer = get_tracer()
            with tracer.start_as_current_span(span_name) as span:
                if attributes:
                    for key, value in attributes.items():
                        span.set_attribute(key, value)
                try:
                    return await func(*args, **kwargs)
                except Exception as exc:
                    span.set_attribute("error", True)
                    span.set_attribute("error.message", str(exc))
                    raise

        return wrapper

    return decorator
