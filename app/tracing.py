"""OpenTelemetry tracing configuration for the application."""

from __future__ import annotations

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from app.config import settings

_PROVIDER: TracerProvider | None = None


def setup_tracing(service_name: str, environment: str | None = None) -> None:
    """Install a global TracerProvider; export over OTLP/HTTP only when an endpoint is set."""
    global _PROVIDER
    if _PROVIDER is not None:
        return

    resource_attrs = {"service.name": service_name}
    if environment:
        resource_attrs["deployment.environment"] = environment

    provider = TracerProvider(resource=Resource.create(resource_attrs))

    if settings.OTEL_EXPORTER_OTLP_ENDPOINT:
        exporter = OTLPSpanExporter(endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT)
        provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(provider)
    _PROVIDER = provider


def shutdown_tracing() -> None:
    """Flush pending spans and stop the exporter. Safe to call when tracing was never set up."""
    global _PROVIDER
    if _PROVIDER is None:
        return
    _PROVIDER.force_flush()
    _PROVIDER.shutdown()
    _PROVIDER = None
