"""Structured JSON logging with trace correlation."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import sys
from typing import Any

import orjson

from redisearch_client.observability.context import get_trace_context


_RESERVED_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """JSON formatter with trace correlation and secret redaction."""

    REDACT_KEYS = frozenset({"password", "auth", "token", "secret"})
    MAX_MESSAGE_LEN = 2000
    MAX_VALUE_LEN = 500

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_trace_context()
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": self._truncate(record.getMessage(), self.MAX_MESSAGE_LEN),
            "logger": record.name,
            "trace_id": ctx.get("trace_id", ""),
            "span_id": ctx.get("span_id", ""),
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                entry[key] = self._redact(key, value)

        return orjson.dumps(entry, default=self._json_default).decode("utf-8")

    @staticmethod
    def _truncate(text: str, limit: int) -> str:
        if len(text) > limit:
            return text[:limit] + "..."
        return text

    def _redact(self, key: str, value: Any) -> Any:
        if key.lower() in self.REDACT_KEYS:
            return "[REDACTED]"
        if isinstance(value, str):
            return self._truncate(value, self.MAX_VALUE_LEN)
        return value

    def _json_default(self, value: Any) -> Any:
        if isinstance(value, (bytes, bytearray)):
            return value.decode("utf-8", errors="replace")
        if isinstance(value, (set, frozenset, tuple)):
            return list(value)
        if isinstance(value, Exception):
            return str(value)
        return repr(value)


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    *,
    logger_levels: dict[str, str] | None = None,
) -> None:
    """Configure the root logger.

    Args:
        level: Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Emit structured JSON logs when True
        logger_levels: Per-logger level overrides (logger name -> level string)
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    root.addHandler(handler)

    # redis-py is chatty at DEBUG
    logging.getLogger("redis").setLevel(logging.WARNING)

    for logger_name, logger_level in (logger_levels or {}).items():
        logging.getLogger(logger_name).setLevel(getattr(logging, logger_level.upper(), logging.INFO))
