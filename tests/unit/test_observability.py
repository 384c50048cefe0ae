"""Unit tests for logging, tracing and metrics helpers."""

import logging

import orjson
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode
from prometheus_client import REGISTRY
import pytest

from redisearch_client import ClientSettings, Document, IndexingOptions, Query
from redisearch_client.observability import tracing
from redisearch_client.observability.bootstrap import configure_observability
from redisearch_client.observability.context import get_trace_context, set_trace_context
from redisearch_client.observability.logging import JsonFormatter, configure_logging
from redisearch_client.observability.metrics import (
    COMMAND_LATENCY,
    get_metrics,
    get_metrics_content_type,
    track_latency,
)


def make_record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("redisearch_client.test", logging.INFO, __file__, 1, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    redis_level = logging.getLogger("redis").level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("redis").setLevel(redis_level)


@pytest.fixture
def span_exporter(monkeypatch) -> InMemorySpanExporter:
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    monkeypatch.setitem(tracing._tracer_holder, "tracer", provider.get_tracer("test"))
    return exporter


class TestJsonFormatter:
    def test_emits_json_with_trace_ids(self):
        set_trace_context("a" * 32, "b" * 16)

        entry = orjson.loads(JsonFormatter().format(make_record("Created index idx", index="idx")))

        assert entry["message"] == "Created index idx"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "redisearch_client.test"
        assert entry["trace_id"] == "a" * 32
        assert entry["span_id"] == "b" * 16
        assert entry["index"] == "idx"

    def test_redacts_secrets(self):
        entry = orjson.loads(JsonFormatter().format(make_record("connect", password="hunter2")))

        assert entry["password"] == "[REDACTED]"

    def test_truncates_long_messages(self):
        entry = orjson.loads(JsonFormatter().format(make_record("x" * 5000)))

        assert len(entry["message"]) == JsonFormatter.MAX_MESSAGE_LEN + 3

    def test_serializes_bytes_and_tuples(self):
        entry = orjson.loads(JsonFormatter().format(make_record("reply", raw=b"OK", fields=("a", "b"))))

        assert entry["raw"] == "OK"
        assert entry["fields"] == ["a", "b"]


def test_trace_context_created_on_first_use():
    ctx = get_trace_context()

    assert len(ctx["trace_id"]) == 32
    assert len(ctx["span_id"]) == 16


def test_configure_logging_installs_formatter(restore_root_logger):
    configure_logging(level="debug", json_output=True, logger_levels={"redisearch_client.batch": "error"})

    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert isinstance(root.handlers[0].formatter, JsonFormatter)
    assert logging.getLogger("redis").level == logging.WARNING
    assert logging.getLogger("redisearch_client.batch").level == logging.ERROR
    logging.getLogger("redisearch_client.batch").setLevel(logging.NOTSET)


def test_configure_observability_plain_logs_without_export(restore_root_logger):
    settings = ClientSettings(_env_file=None, log_level="warning", log_json=False)

    configure_observability(settings)

    root = restore_root_logger
    assert root.level == logging.WARNING
    assert not isinstance(root.handlers[0].formatter, JsonFormatter)


class TestCreateSpan:
    def test_records_attributes(self, span_exporter):
        with tracing.create_span("FT.SEARCH", attributes={"redisearch.index": "idx"}):
            pass

        (span,) = span_exporter.get_finished_spans()
        assert span.name == "FT.SEARCH"
        assert span.attributes["redisearch.index"] == "idx"

    def test_marks_error_and_reraises(self, span_exporter):
        with pytest.raises(RuntimeError):
            with tracing.create_span("FT.INFO"):
                raise RuntimeError("boom")

        (span,) = span_exporter.get_finished_spans()
        assert span.status.status_code == StatusCode.ERROR
        assert any(event.name == "exception" for event in span.events)

    def test_client_calls_open_spans(self, span_exporter, client, connection):
        connection.execute_command.return_value = [0]

        client.search(Query("hello"))

        (span,) = span_exporter.get_finished_spans()
        assert span.name == "FT.SEARCH"
        assert span.attributes["db.operation"] == "FT.SEARCH"
        assert span.attributes["redisearch.index"] == "testung"

    def test_index_outcomes_is_traced_and_counted(self, span_exporter, client, pipeline):
        labels = {"index": "testung", "command": "FT.ADD", "status": "ok"}
        before = REGISTRY.get_sample_value("redisearch_commands_total", labels) or 0.0
        pipeline.execute.return_value = [b"OK", b"OK"]

        outcomes = client.index_outcomes(IndexingOptions(), [Document("a"), Document("b")])

        assert outcomes == [None, None]
        (span,) = span_exporter.get_finished_spans()
        assert span.name == "FT.ADD"
        assert span.attributes["redisearch.batch_size"] == 2
        assert REGISTRY.get_sample_value("redisearch_commands_total", labels) == before + 1

    def test_restores_trace_context_on_exit(self, span_exporter):
        set_trace_context("a" * 32, "b" * 16)

        with tracing.create_span("FT.SEARCH"):
            assert get_trace_context()["span_id"] != "b" * 16

        assert get_trace_context() == {"trace_id": "a" * 32, "span_id": "b" * 16}

    def test_restores_trace_context_on_error(self, span_exporter):
        set_trace_context("c" * 32, "d" * 16)

        with pytest.raises(RuntimeError):
            with tracing.create_span("FT.INFO"):
                raise RuntimeError("boom")

        assert get_trace_context() == {"trace_id": "c" * 32, "span_id": "d" * 16}


def test_track_latency_observes_on_error():
    labels = {"index": "latency-test", "command": "FT.INFO"}
    before = REGISTRY.get_sample_value("redisearch_command_latency_seconds_count", labels) or 0.0

    with pytest.raises(ValueError):
        with track_latency(COMMAND_LATENCY, **labels):
            raise ValueError("boom")

    assert REGISTRY.get_sample_value("redisearch_command_latency_seconds_count", labels) == before + 1
    assert b"redisearch_command_latency_seconds" in get_metrics()


def test_metrics_content_type_is_prometheus_text():
    assert get_metrics_content_type().startswith("text/plain")
    assert "version=" in get_metrics_content_type()
