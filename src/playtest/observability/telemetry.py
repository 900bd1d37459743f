"""
telemetry.py

PURPOSE: OpenTelemetry initialization and tracer management.
DEPENDENCIES: opentelemetry-api, opentelemetry-sdk,
              opentelemetry-exporter-otlp-proto-grpc (only with an endpoint)

ARCHITECTURE NOTES:
Modules call get_tracer(__name__) at import time. The API returns proxy
tracers that resolve against whatever provider is installed when a span
is started, so spans stay no-ops until init_telemetry() runs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

if TYPE_CHECKING:
    from playtest.config import OpenTelemetrySettings

logger = logging.getLogger(__name__)

_tracer_provider: TracerProvider | None = None


def init_telemetry(settings: OpenTelemetrySettings) -> None:
    """
    Initialize OpenTelemetry tracing.

    Should be called once at application startup. Calling it again, or
    with tracing disabled, does nothing.

    Args:
        settings: OpenTelemetry configuration settings.
    """
    global _tracer_provider

    if _tracer_provider is not None:
        logger.debug("Telemetry already initialized")
        return

    if not settings.enabled:
        logger.debug("Telemetry disabled")
        return

    resource = Resource.create({"service.name": settings.service_name})
    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    if settings.endpoint:
        # Requires the `otlp` extra
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.endpoint)))
        logger.info(f"OTLP exporter configured: {settings.endpoint}")

    trace.set_tracer_provider(provider)
    _tracer_provider = provider

    logger.info(f"Telemetry initialized: service={settings.service_name}")


def get_tracer(name: str) -> trace.Tracer:
    """
    Get a tracer for the given module name.

    Args:
        name: Module name (typically __name__).

    Returns:
        A tracer that follows the globally installed provider.
    """
    return trace.get_tracer(name)


def shutdown_telemetry() -> None:
    """Flush and shut down the tracer provider, if one was installed."""
    global _tracer_provider

    if _tracer_provider is not None:
        _tracer_provider.shutdown()
        logger.debug("Telemetry shutdown complete")
    _tracer_provider = None
