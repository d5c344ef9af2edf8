"""Unit tests for tracing around commands and transactions."""

from __future__ import annotations

from pathlib import Path

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from boltview.adapters.outbound import LMDBStorageEngine
from boltview.application import ListCommand, Streams
from boltview.domain.errors import BucketNotFoundError
from boltview.infrastructure import tracing


@pytest.fixture
def exporter(monkeypatch: pytest.MonkeyPatch) -> InMemorySpanExporter:
    """Route spans to memory without touching the global provider."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    monkeypatch.setattr(tracing, "_tracer", provider.get_tracer("test"))
    return exporter


@pytest.mark.unit
class TestTracing:
    """Tests for trace spans."""

    def test_trace_span_sets_attributes(self, exporter: InMemorySpanExporter) -> None:
        with tracing.trace_span("work", {"path": "t.db"}):
            pass

        (span,) = exporter.get_finished_spans()
        assert span.name == "work"
        assert span.attributes["path"] == "t.db"

    @pytest.mark.parametrize(
        "value,expected",
        [
            (b"volume", "volume"),
            (b"ok\xff", "ok�"),
            (Path("t.db"), "t.db"),
            ("text", "text"),
            (3, 3),
            (True, True),
        ],
    )
    def test_span_attribute(self, value: object, expected: object) -> None:
        assert tracing.span_attribute(value) == expected

    def test_command_span_attributes(
        self, exporter: InMemorySpanExporter, temp_dir: Path
    ) -> None:
        with tracing.command_span("buckets", temp_dir / "t.db"):
            pass

        (span,) = exporter.get_finished_spans()
        assert span.name == "command.buckets"
        assert span.attributes["boltview.command"] == "buckets"
        assert span.attributes["db.system"] == "lmdb"
        assert span.attributes["db.name"] == str(temp_dir / "t.db")

    def test_failed_command_span_records_error(
        self,
        exporter: InMemorySpanExporter,
        streams: Streams,
        engine: LMDBStorageEngine,
        db_path: Path,
    ) -> None:
        with pytest.raises(BucketNotFoundError):
            ListCommand(streams, engine).run(str(db_path), "nosuchbucket")

        spans = {span.name: span for span in exporter.get_finished_spans()}
        assert spans["command.list"].status.status_code is StatusCode.ERROR
        assert spans["engine.transaction"].status.status_code is StatusCode.ERROR

    def test_command_and_transaction_spans(
        self,
        exporter: InMemorySpanExporter,
        streams: Streams,
        engine: LMDBStorageEngine,
        db_path: Path,
    ) -> None:
        ListCommand(streams, engine).run(str(db_path), "volume")

        spans = {span.name: span for span in exporter.get_finished_spans()}
        assert set(spans) == {"command.list", "engine.transaction"}
        assert spans["engine.transaction"].attributes["boltview.transaction.mode"] == "read"
        assert spans["engine.transaction"].parent.span_id == (
            spans["command.list"].context.span_id
        )
