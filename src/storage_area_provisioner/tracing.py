"""OpenTelemetry spans around reconciliations and handler operations."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Span, Tracer

from . import __version__
from .constants import SERVICE_NAME

logger = logging.getLogger(__name__)

_tracer: Tracer | None = None


def initialize_tracing(service_name: str = SERVICE_NAME) -> None:
    """Install an OTLP exporting tracer provider.

    Spans are only produced after this has run; until then ``trace_span``
    is a no-op.

    Environment Variables:
        OTEL_TRACES_ENABLED: Set to "false" to keep tracing off (default: true)
        OTEL_SERVICE_NAME: Overrides ``service_name``
        OTEL_EXPORTER_OTLP_ENDPOINT: Collector endpoint (default: http://localhost:4317)
    """
    global _tracer

    if os.getenv("OTEL_TRACES_ENABLED", "true").lower() == "false":
        logger.info("Tracing disabled by OTEL_TRACES_ENABLED")
        return

    try:
        name = os.getenv("OTEL_SERVICE_NAME", service_name)
        provider = TracerProvider(
            resource=Resource.create({"service.name": name, "service.version": __version__})
        )
        endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4317")
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint)))
        trace.set_tracer_provider(provider)
        _tracer = trace.get_tracer(name)
    except Exception as e:
        # Provisioning proceeds without spans
        logger.warning(f"Failed to initialize tracing: {e}")


def get_tracer() -> Tracer | None:
    return _tracer


def bucket_attributes(bucket_name: str, region: str | None = None, prefix: str | None = None) -> dict[str, str]:
    """Span attributes identifying the bucket (and prefix) an operation targets."""
    attributes = {"bucket.name": bucket_name}
    if region:
        attributes["bucket.region"] = region
    if prefix:
        attributes["bucket.prefix"] = prefix
    return attributes


@contextmanager
def trace_span(name: str, attributes: dict[str, Any] | None = None) -> Iterator[Span | None]:
    """Run the enclosed block inside a span named ``name``.

    Exceptions escaping the block are recorded on the span and re-raised.
    Yields None when tracing was never initialized.
    """
    tracer = get_tracer()
    if tracer is None:
        yield None
        return

    with tracer.start_as_current_span(name, attributes=attributes or {}) as span:
        try:
            yield span
        except Exception as e:
            if span.is_recording():
                span.record_exception(e)
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
            raise


def set_span_status(ok: bool, description: str | None = None) -> None:
    """Mark the current span as succeeded or failed with ``description``."""
    span = trace.get_current_span()
    if span.is_recording():
        status_code = trace.StatusCode.OK if ok else trace.StatusCode.ERROR
        span.set_status(trace.Status(status_code, None if ok else description))
