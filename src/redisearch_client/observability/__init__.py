"""Observability helpers: structured logging, tracing and metrics."""

from redisearch_client.observability.bootstrap import configure_observability
from redisearch_client.observability.context import get_trace_context, set_trace_context, trace_context
from redisearch_client.observability.logging import JsonFormatter, configure_logging
from redisearch_client.observability.metrics import (
    BATCH_FAILURES,
    COMMAND_COUNT,
    COMMAND_LATENCY,
    SEARCH_RESULTS,
    configure_metrics_exporter,
    get_metrics,
    get_metrics_content_type,
    track_latency,
)
from redisearch_client.observability.tracing import (
    configure_trace_exporter,
    create_span,
    get_tracer,
    init_tracing,
)


__all__ = [
    "BATCH_FAILURES",
    "COMMAND_COUNT",
    "COMMAND_LATENCY",
    "SEARCH_RESULTS",
    "JsonFormatter",
    "configure_logging",
    "configure_metrics_exporter",
    "configure_observability",
    "configure_trace_exporter",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "set_trace_context",
    "trace_context",
    "track_latency",
]
