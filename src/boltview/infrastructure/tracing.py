"""OpenTelemetry tracing for boltview commands and engine transactions.

Tracing is off unless an OTLP endpoint is configured; until then spans go
to the API's no-op tracer. A traced run produces one ``command.<name>``
span with one ``engine.transaction`` child.
"""

from __future__ import annotations

from contextlib import AbstractContextManager, contextmanager
from pathlib import Path
from typing import Any, Generator, Mapping

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter
from opentelemetry.util.types import AttributeValue


DB_SYSTEM = "lmdb"

_tracer: trace.Tracer | None = None


def setup_tracing(
    service_name: str = "boltview",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Install a tracer provider that exports boltview spans.

    Args:
        service_name: ``service.name`` resource attribute
        otlp_endpoint: OTLP gRPC collector (e.g., "http://localhost:4317")
        console_export: Also print finished spans to stdout (debugging only;
            this mixes with command output)

    Returns:
        The tracer used by ``trace_span``
    """
    global _tracer

    from boltview import __version__

    exporters: list[SpanExporter] = []
    if otlp_endpoint:
        exporters.append(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
    if console_export:
        exporters.append(ConsoleSpanExporter())

    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": service_name,
                "service.version": __version__,
                "db.system": DB_SYSTEM,
            }
        )
    )
    for exporter in exporters:
        provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    _tracer = trace.get_tracer("boltview", __version__)
    return _tracer


def shutdown_tracing() -> None:
    """Flush pending spans before the process exits."""
    provider = trace.get_tracer_provider()
    if isinstance(provider, TracerProvider):
        provider.shutdown()


def get_tracer() -> trace.Tracer:
    """Get the boltview tracer, falling back to the global provider's."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer("boltview")
    return _tracer


def span_attribute(value: Any) -> AttributeValue:
    """Convert a value to a type OpenTelemetry accepts as an attribute.

    Bucket names and keys are bytes; paths are ``Path``. Both become text.
    """
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, (str, bool, int, float)):
        return value
    return str(value)


@contextmanager
def trace_span(
    name: str,
    attributes: Mapping[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """
    Run the enclosed block inside a span.

    An exception escaping the block is recorded on the span and marks it
    as an error before propagating.

    Args:
        name: Name of the span
        attributes: Span attributes; values pass through ``span_attribute``

    Yields:
        The created span
    """
    with get_tracer().start_as_current_span(name) as span:
        for key, value in (attributes or {}).items():
            span.set_attribute(key, span_attribute(value))
        yield span


def command_span(command: str, path: Path) -> AbstractContextManager[trace.Span]:
    """Span around one command, from open to close of ``path``."""
    return trace_span(
        f"command.{command}",
        {"boltview.command": command, "db.system": DB_SYSTEM, "db.name": path},
    )


def transaction_span(mode: str, path: Path) -> AbstractContextManager[trace.Span]:
    """Span around one engine transaction on ``path``."""
    return trace_span(
        "engine.transaction",
        {"boltview.transaction.mode": mode, "db.system": DB_SYSTEM, "db.name": path},
    )
