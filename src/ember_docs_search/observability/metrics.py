"""Prometheus metrics for index builds and query latency."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


QUERY_LATENCY = Histogram(
    "docs_index_query_latency_seconds",
    "Query latency against the in-memory documentation index",
    ["operation"],
    buckets=(0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5),
)

INDEX_BUILD_LATENCY = Histogram(
    "docs_index_build_latency_seconds",
    "Time spent building the documentation index from corpus text",
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

INDEXED_ITEMS = Gauge(
    "docs_index_items",
    "Items per corpus section in the active index",
    ["section"],
)

INDEXED_ENTITY_KEYS = Gauge(
    "docs_index_entity_keys",
    "Lookup keys in the active entity index",
)

MALFORMED_RECORDS = Counter(
    "docs_index_malformed_records_total",
    "API items skipped because their embedded record could not be parsed",
)

ENTITY_KEY_COLLISIONS = Counter(
    "docs_index_entity_key_collisions_total",
    "Entity lookup keys overwritten by a later record",
)


@contextmanager
def track_latency(histogram: Histogram, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    metric = histogram.labels(**labels) if labels else histogram
    start = time.perf_counter()
    try:
        yield
    finally:
        metric.observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get content type for a metrics endpoint."""
    return CONTENT_TYPE_LATEST
