"""OpenTelemetry instrumentation for the proxy service.

Sets up tracing, metrics, and structured logging. When telemetry is disabled
the global no-op providers stay in place, so tracers and meters handed out
here are always safe to use.
"""

import os

from opentelemetry import trace, metrics
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.sdk.resources import Resource, SERVICE_NAME, SERVICE_NAMESPACE
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

from shared.config import Settings
from shared.logging_config import configure_logging


def _create_resource(service_name: str, namespace: str) -> Resource:
    """Build OTEL Resource for the service."""
    attrs = {
        SERVICE_NAME: service_name,
        SERVICE_NAMESPACE: namespace,
        "service.version": os.getenv("SERVICE_VERSION", "0.1.0"),
        "service.instance.id": os.getenv("HOSTNAME", f"{service_name}-local"),
        "deployment.environment": os.getenv("ENVIRONMENT", "dev"),
    }
    return Resource.create(attrs)


def setup_telemetry(app, settings: Settings, namespace: str = "proxy"):
    """Initialize logging and, if enabled, OpenTelemetry for a FastAPI app."""
    configure_logging(settings.service_name, settings.log_level)

    if settings.telemetry_enabled:
        resource = _create_resource(settings.service_name, namespace)

        trace_provider = TracerProvider(resource=resource)
        trace_provider.add_span_processor(
            BatchSpanProcessor(
                OTLPSpanExporter(endpoint=settings.otlp_endpoint, insecure=True)
            )
        )
        trace.set_tracer_provider(trace_provider)

        metric_reader = PeriodicExportingMetricReader(
            OTLPMetricExporter(endpoint=settings.otlp_endpoint, insecure=True),
            export_interval_millis=30000
        )
        meter_provider = MeterProvider(resource=resource, metric_readers=[metric_reader])
        metrics.set_meter_provider(meter_provider)

        FastAPIInstrumentor.instrument_app(app)
        HTTPXClientInstrumentor().instrument()

    return (
        trace.get_tracer(settings.service_name),
        metrics.get_meter(settings.service_name),
    )
