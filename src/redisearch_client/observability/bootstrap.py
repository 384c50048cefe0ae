"""One-call observability setup driven by ``ClientSettings``."""

from __future__ import annotations

import logging

from redisearch_client.config import ClientSettings
from redisearch_client.observability.logging import configure_logging
from redisearch_client.observability.metrics import configure_metrics_exporter
from redisearch_client.observability.tracing import SERVICE_NAME, configure_trace_exporter, init_tracing


logger = logging.getLogger(__name__)


def configure_observability(settings: ClientSettings, *, logger_levels: dict[str, str] | None = None) -> None:
    """Configure logging from the settings and, when enabled, OTLP trace and metric export.

    Meant for applications; the client itself never installs global providers.
    """
    configure_logging(level=settings.log_level, json_output=settings.log_json, logger_levels=logger_levels)

    collector_config = settings.observability
    if not collector_config.enabled:
        logger.debug("OTLP export disabled")
        return

    resource_attributes = dict(collector_config.resource_attributes)
    configure_metrics_exporter(collector_config, service_name=SERVICE_NAME)
    provider = init_tracing(service_name=SERVICE_NAME, resource_attributes=resource_attributes)
    configure_trace_exporter(collector_config, provider)
