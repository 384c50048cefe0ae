"""Context propagation so log records can be correlated with the active span."""

from __future__ import annotations

from contextvars import ContextVar, Token
from uuid import uuid4


trace_context: ContextVar[dict | None] = ContextVar("trace_context", default=None)


def generate_trace_id() -> str:
    return uuid4().hex


def generate_span_id() -> str:
    return uuid4().hex[:16]


def get_trace_context() -> dict:
    """Get current trace context, creating ids on first use."""
    ctx = trace_context.get()
    if ctx is None or not ctx.get("trace_id"):
        ctx = {"trace_id": generate_trace_id(), "span_id": generate_span_id()}
        trace_context.set(ctx)
    return ctx


def set_trace_context(trace_id: str, span_id: str, **extra: object) -> None:
    trace_context.set({"trace_id": trace_id, "span_id": span_id, **extra})


def update_span_id(span_id: str, trace_id: str | None = None) -> Token:
    """Replace the span id (and optionally the trace id) keeping any extra keys.

    Returns the token that restores the previous context via ``trace_context.reset``.
    """
    ctx = trace_context.get() or {}
    updated = {**ctx, "span_id": span_id}
    if trace_id:
        updated["trace_id"] = trace_id
    return trace_context.set(updated)
