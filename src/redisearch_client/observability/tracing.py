"""OpenTelemetry tracing around client commands."""

from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter as GrpcOTLPSpanExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter as HttpOTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import SpanKind, Status, StatusCode

from redisearch_client.config import ObservabilityCollectorConfig
from redisearch_client.observability.context import trace_context, update_span_id


if TYPE_CHECKING:
    from collections.abc import Generator

    from opentelemetry.trace import Span, Tracer

logger = logging.getLogger(__name__)

SERVICE_NAME = "redisearch-client"

_tracer_holder: dict[str, Tracer | None] = {"tracer": None}


def init_tracing(
    service_name: str = SERVICE_NAME,
    resource_attributes: dict[str, str] | None = None,
) -> TracerProvider:
    """Install an SDK tracer provider."""
    attributes = {"service.name": service_name}
    if resource_attributes:
        attributes.update(resource_attributes)
    provider = TracerProvider(resource=Resource.create(attributes))
    trace.set_tracer_provider(provider)
    _tracer_holder["tracer"] = trace.get_tracer(__name__)
    logger.info("Tracing initialized for service: %s", service_name)
    return provider


def configure_trace_exporter(
    config: ObservabilityCollectorConfig | None,
    provider: TracerProvider | None = None,
) -> None:
    """Attach an OTLP span exporter when export is enabled."""
    if not config or not config.enabled:
        return

    active_provider = provider or trace.get_tracer_provider()
    if not isinstance(active_provider, TracerProvider):
        active_provider = init_tracing(resource_attributes=dict(config.resource_attributes))

    if config.otlp_protocol == "grpc":
        exporter = GrpcOTLPSpanExporter(
            endpoint=config.collector_endpoint,
            headers=config.headers,
            timeout=config.timeout_seconds,
            insecure=config.grpc_insecure,
        )
    else:
        exporter = HttpOTLPSpanExporter(
            endpoint=config.collector_endpoint,
            headers=config.headers,
            timeout=config.timeout_seconds,
        )

    active_provider.add_span_processor(BatchSpanProcessor(exporter))
    logger.info("OTLP trace export enabled (%s) to %s", config.otlp_protocol, config.collector_endpoint)


def get_tracer() -> Tracer:
    """Return the package tracer; falls back to the global provider (no-op unless configured)."""
    if _tracer_holder["tracer"] is None:
        _tracer_holder["tracer"] = trace.get_tracer(__name__)
    return _tracer_holder["tracer"]  # type: ignore[return-value]


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.CLIENT,
    attributes: dict[str, Any] | None = None,
) -> Generator[Span, None, None]:
    """Open a span; exceptions are recorded on it and re-raised."""
    tracer = get_tracer()
    with tracer.start_as_current_span(name, kind=kind, record_exception=False, set_status_on_exception=False) as span:
        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, value)

        token = None
        ctx = span.get_span_context()
        if ctx.is_valid:
            token = update_span_id(format(ctx.span_id, "016x"), format(ctx.trace_id, "032x"))

        try:
            yield span
        except Exception as exc:
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            span.record_exception(exc)
            raise
        finally:
            # log records after the span carry the enclosing ids again
            if token is not None:
                trace_context.reset(token)
