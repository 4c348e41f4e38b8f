"""OpenTelemetry spans around index builds and queries.

No exporter is configured here: callers that want spans shipped somewhere
pass their own span processors to ``init_tracing``. Without that the SDK
provider still records spans so status and attributes are inspectable.
"""

from __future__ import annotations

from collections.abc import Iterable
from contextlib import contextmanager
import logging
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.trace import SpanKind, Status, StatusCode

from ember_docs_search.observability.context import update_span_id


if TYPE_CHECKING:
    from collections.abc import Generator

    from opentelemetry.trace import Span, Tracer

logger = logging.getLogger(__name__)

SERVICE_NAME = "ember-docs-search"

_state: dict[str, Any] = {"provider": None, "tracer": None}


def init_tracing(
    service_name: str = SERVICE_NAME,
    resource_attributes: dict[str, str] | None = None,
    span_processors: Iterable[SpanProcessor] = (),
) -> TracerProvider:
    """Create the SDK tracer provider used by ``create_span``.

    The provider is also registered globally when no other SDK provider has
    been installed yet.
    """
    provider = TracerProvider(resource=Resource.create({"service.name": service_name, **(resource_attributes or {})}))
    for processor in span_processors:
        provider.add_span_processor(processor)

    if not isinstance(trace.get_tracer_provider(), TracerProvider):
        trace.set_tracer_provider(provider)

    _state["provider"] = provider
    _state["tracer"] = provider.get_tracer(__name__)
    logger.debug("Tracing initialized for service %s", service_name)
    return provider


def get_tracer() -> Tracer:
    if _state["tracer"] is None:
        init_tracing()
    return _state["tracer"]


@contextmanager
def create_span(
    name: str,
    attributes: dict[str, Any] | None = None,
    kind: SpanKind = SpanKind.INTERNAL,
) -> Generator[Span, None, None]:
    """Run the block inside a span; exceptions mark the span as failed and propagate."""
    with get_tracer().start_as_current_span(
        name, kind=kind, attributes=attributes, record_exception=False, set_status_on_exception=False
    ) as span:
        update_span_id(format(span.get_span_context().span_id, "016x"))
        try:
            yield span
        except Exception as exc:
            span.record_exception(exc)
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            raise
