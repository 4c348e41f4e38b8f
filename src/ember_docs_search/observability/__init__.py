"""Observability module for tracing, metrics, and logging."""

from ember_docs_search.observability.context import (
    bind_operation,
    get_trace_context,
    set_trace_context,
    update_span_id,
)
from ember_docs_search.observability.logging import JsonFormatter, configure_logging, configure_logging_from_settings
from ember_docs_search.observability.metrics import (
    ENTITY_KEY_COLLISIONS,
    INDEX_BUILD_LATENCY,
    INDEXED_ENTITY_KEYS,
    INDEXED_ITEMS,
    MALFORMED_RECORDS,
    QUERY_LATENCY,
    get_metrics,
    get_metrics_content_type,
    track_latency,
)
from ember_docs_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "ENTITY_KEY_COLLISIONS",
    "INDEXED_ENTITY_KEYS",
    "INDEXED_ITEMS",
    "INDEX_BUILD_LATENCY",
    "MALFORMED_RECORDS",
    "QUERY_LATENCY",
    "JsonFormatter",
    "bind_operation",
    "configure_logging",
    "configure_logging_from_settings",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "set_trace_context",
    "track_latency",
    "update_span_id",
]
