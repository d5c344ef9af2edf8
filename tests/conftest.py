"""Pytest configuration and fixtures for boltview tests."""

from __future__ import annotations

import io
import sys
import tempfile
from pathlib import Path
from typing import Callable, Generator

import lmdb
import pytest
from prometheus_client import CollectorRegistry

from boltview.adapters.inbound.cli import Main
from boltview.adapters.outbound import LMDBStorageEngine
from boltview.application import Streams
from boltview.infrastructure.config import EngineConfig
from boltview.infrastructure.logging import setup_logging
from boltview.infrastructure.metrics import MetricsRegistry


def create_database(path: Path, buckets: dict[bytes, dict[bytes, bytes]]) -> Path:
    """Create an LMDB file holding ``buckets`` (name -> {key: value})."""
    env = lmdb.open(str(path), subdir=False, max_dbs=max(len(buckets), 1), map_size=1048576)
    try:
        for name, items in buckets.items():
            db = env.open_db(name)
            with env.begin(write=True) as txn:
                for key, value in items.items():
                    txn.put(key, value, db=db)
    finally:
        env.close()
    return path


def read_bucket(path: Path, name: bytes) -> dict[bytes, bytes]:
    """Read back every pair of a bucket, bypassing boltview."""
    env = lmdb.open(str(path), subdir=False, max_dbs=16, readonly=True)
    try:
        with env.begin() as txn:
            db = env.open_db(name, txn=txn, create=False)
            return dict(txn.cursor(db=db))
    finally:
        env.close()


@pytest.fixture(autouse=True)
def quiet_logging() -> None:
    """Keep structured logs out of captured output."""
    setup_logging(level="CRITICAL", log_format="console", stream=sys.stderr)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_database() -> Callable[[Path, dict[bytes, dict[bytes, bytes]]], Path]:
    """Provide the database builder to tests that need their own layout."""
    return create_database


@pytest.fixture
def bucket_contents() -> Callable[[Path, bytes], dict[bytes, bytes]]:
    """Provide a reader that checks stored pairs without going through boltview."""
    return read_bucket


@pytest.fixture
def db_path(temp_dir: Path) -> Path:
    """A database with a one-entry ``volume`` bucket and an ``empty`` bucket."""
    return create_database(
        temp_dir / "t.db",
        {
            b"volume": {b"wx-pv": b'{"a":1}'},
            b"empty": {},
        },
    )


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def engine(metrics_registry: MetricsRegistry) -> LMDBStorageEngine:
    """Provide an engine with default settings and isolated metrics."""
    return LMDBStorageEngine(config=EngineConfig(), metrics=metrics_registry)


@pytest.fixture
def streams() -> Streams:
    """Provide in-memory standard streams."""
    return Streams(stdin=io.StringIO(), stdout=io.StringIO(), stderr=io.StringIO())


@pytest.fixture
def main(
    streams: Streams,
    engine: LMDBStorageEngine,
    metrics_registry: MetricsRegistry,
) -> Main:
    """Provide a program wired to in-memory streams."""
    return Main(
        stdin=streams.stdin,
        stdout=streams.stdout,
        stderr=streams.stderr,
        engine=engine,
        metrics=metrics_registry,
    )


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
