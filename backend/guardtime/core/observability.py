from typing import Optional

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from .config import settings

RESOURCE = Resource.create(
    {
        "service.name": "guardtime-api",
        "deployment.environment": settings.env,
        "guardtime.night_diff_mode": settings.night_diff_mode,
    }
)


def signal_endpoint(base: Optional[str], signal: str) -> Optional[str]:
    """Exporters given an explicit endpoint post to it verbatim, so append the signal path."""
    if not base:
        return None
    return f"{base.rstrip('/')}/v1/{signal}"


def configure_tracing(otlp_endpoint: Optional[str] = None) -> TracerProvider:
    provider = TracerProvider(resource=RESOURCE)
    endpoint = signal_endpoint(otlp_endpoint or settings.otlp_endpoint, "traces")
    if endpoint:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
    trace.set_tracer_provider(provider)
    return provider


def configure_metrics(otlp_endpoint: Optional[str] = None) -> MeterProvider:
    endpoint = signal_endpoint(otlp_endpoint or settings.otlp_endpoint, "metrics")
    readers = [PeriodicExportingMetricReader(OTLPMetricExporter(endpoint=endpoint))] if endpoint else []
    provider = MeterProvider(resource=RESOURCE, metric_readers=readers)
    metrics.set_meter_provider(provider)
    return provider


def configure_observability() -> None:
    configure_tracing()
    configure_metrics()


def get_tracer(name: str) -> trace.Tracer:
    return trace.get_tracer(name)


def get_meter(name: str) -> metrics.Meter:
    return metrics.get_meter(name)
