"""Prometheus metrics for client commands, bridged to OpenTelemetry instruments."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING, Any

from opentelemetry import metrics as otel_metrics
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import (
    OTLPMetricExporter as GrpcOTLPMetricExporter,
)
from opentelemetry.exporter.otlp.proto.http.metric_exporter import (
    OTLPMetricExporter as HttpOTLPMetricExporter,
)
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

from redisearch_client.config import ObservabilityCollectorConfig


if TYPE_CHECKING:
    from collections.abc import Generator


_meter_holder: dict[str, Any] = {"meter": None, "provider": None}


def configure_metrics_exporter(
    config: ObservabilityCollectorConfig | None,
    *,
    service_name: str = "redisearch-client",
) -> MeterProvider | None:
    """Install a meter provider exporting over OTLP when export is enabled."""
    if not config or not config.enabled:
        return None

    endpoint = config.collector_endpoint
    if config.otlp_protocol == "http" and endpoint.endswith("/v1/traces"):
        endpoint = endpoint.removesuffix("/v1/traces") + "/v1/metrics"

    if config.otlp_protocol == "grpc":
        exporter = GrpcOTLPMetricExporter(
            endpoint=endpoint,
            headers=config.headers,
            timeout=config.timeout_seconds,
            insecure=config.grpc_insecure,
        )
    else:
        exporter = HttpOTLPMetricExporter(endpoint=endpoint, headers=config.headers, timeout=config.timeout_seconds)

    attributes = {"service.name": service_name, **config.resource_attributes}
    provider = MeterProvider(
        resource=Resource.create(attributes),
        metric_readers=[PeriodicExportingMetricReader(exporter)],
    )
    otel_metrics.set_meter_provider(provider)
    _meter_holder["provider"] = provider
    _meter_holder["meter"] = otel_metrics.get_meter(__name__)
    return provider


def _get_meter():
    meter = _meter_holder.get("meter")
    if meter is None:
        meter = otel_metrics.get_meter(__name__)
        _meter_holder["meter"] = meter
    return meter


class _BoundMetric:
    """A bridge with its label values fixed, mirroring ``prometheus_client``'s ``labels()``."""

    def __init__(self, bridge: MetricBridge, labels: dict[str, str]) -> None:
        self._bridge = bridge
        self._labels = labels

    def inc(self, amount: float = 1.0) -> None:
        self._bridge.record(self._labels, amount)

    def observe(self, value: float) -> None:
        self._bridge.record(self._labels, value)


class MetricBridge:
    """Send each measurement to a Prometheus metric and to an OTel instrument of the same name.

    The OTel instrument is created on first use so a meter provider installed
    after import is still picked up.
    """

    def __init__(self, name: str, prom_metric: Counter | Histogram, description: str) -> None:
        self.name = name
        self.prom_metric = prom_metric
        self.description = description
        self._instrument = None

    def labels(self, **labels: str) -> _BoundMetric:
        return _BoundMetric(self, labels)

    def _otel_instrument(self):
        if self._instrument is None:
            meter = _get_meter()
            if isinstance(self.prom_metric, Counter):
                self._instrument = meter.create_counter(self.name, description=self.description)
            else:
                self._instrument = meter.create_histogram(self.name, description=self.description)
        return self._instrument

    def record(self, labels: dict[str, str], value: float) -> None:
        child = self.prom_metric.labels(**labels)
        if isinstance(self.prom_metric, Counter):
            child.inc(value)
            self._otel_instrument().add(value, labels)
        else:
            child.observe(value)
            self._otel_instrument().record(value, labels)


def _counter(name: str, description: str, labelnames: list[str]) -> MetricBridge:
    return MetricBridge(name, Counter(name, description, labelnames), description)


def _histogram(name: str, description: str, labelnames: list[str], buckets: tuple[float, ...]) -> MetricBridge:
    return MetricBridge(name, Histogram(name, description, labelnames, buckets=buckets), description)


COMMAND_LATENCY = _histogram(
    "redisearch_command_latency_seconds",
    "Round-trip latency of search engine commands",
    ["index", "command"],
    buckets=(0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)
COMMAND_COUNT = _counter("redisearch_commands_total", "Search engine commands issued", ["index", "command", "status"])
BATCH_FAILURES = _counter(
    "redisearch_batch_document_failures_total",
    "Documents rejected inside indexing batches",
    ["index", "reason"],
)
SEARCH_RESULTS = _histogram(
    "redisearch_search_results",
    "Documents returned per search call",
    ["index"],
    buckets=(0, 1, 5, 10, 25, 50, 100, 500),
)


@contextmanager
def track_latency(histogram: MetricBridge, **labels: str) -> Generator[None, None, None]:
    """Observe the wall time of the block, including when it raises."""
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    """Prometheus exposition output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
