"""Per-context correlation data attached to every log line.

Holds the trace/span ids of the active span plus the index operation being
served (``search``, ``get_entity``, ``build`` ...), so log records emitted
deep inside the ranker still say which query produced them.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4


_correlation: ContextVar[dict[str, str] | None] = ContextVar("ember_docs_correlation", default=None)


def new_trace_id() -> str:
    return uuid4().hex


def new_span_id() -> str:
    return uuid4().hex[:16]


def get_trace_context() -> dict[str, str]:
    """Current correlation data; ids are minted lazily on first access."""
    ctx = _correlation.get()
    if not ctx or not ctx.get("trace_id"):
        ctx = {"trace_id": new_trace_id(), "span_id": new_span_id()}
        _correlation.set(ctx)
    return dict(ctx)


def set_trace_context(trace_id: str, span_id: str, **fields: str) -> None:
    _correlation.set({"trace_id": trace_id, "span_id": span_id, **fields})


def update_span_id(span_id: str) -> None:
    """Point log correlation at a new span, keeping the trace id and fields."""
    _correlation.set({**(_correlation.get() or {}), "span_id": span_id})


@contextmanager
def bind_operation(operation: str) -> Iterator[None]:
    """Tag log records emitted inside the block with the index operation name."""
    token = _correlation.set({**get_trace_context(), "operation": operation})
    try:
        yield
    finally:
        _correlation.reset(token)
