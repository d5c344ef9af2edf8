"""End-to-end command-line scenarios against real database files."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from boltview.adapters.inbound.cli import Main, run_cli
from boltview.adapters.outbound import LMDBStorageEngine
from boltview.infrastructure.metrics import MetricsRegistry


class Session:
    """Runs commands one at a time, each with fresh output streams."""

    def __init__(self, engine: LMDBStorageEngine, metrics: MetricsRegistry) -> None:
        self.engine = engine
        self.metrics = metrics
        self.stdout = ""
        self.stderr = ""

    def run(self, *argv: str) -> int:
        main = Main(
            stdin=io.StringIO(),
            stdout=io.StringIO(),
            stderr=io.StringIO(),
            engine=self.engine,
            metrics=self.metrics,
        )
        code = run_cli(argv, main)
        self.stdout = main.stdout.getvalue()
        self.stderr = main.stderr.getvalue()
        return code

    def rows(self) -> list[str]:
        """Output lines after the two header lines."""
        return self.stdout.splitlines()[2:]


@pytest.fixture
def session(engine: LMDBStorageEngine, metrics_registry: MetricsRegistry) -> Session:
    return Session(engine, metrics_registry)


@pytest.mark.integration
class TestVolumeScenario:
    """The volume bucket walk-through: buckets, insert, list, delete, list."""

    def test_walkthrough(self, session: Session, db_path: Path) -> None:
        db = str(db_path)

        assert session.run("buckets", db) == 0
        assert "volume   1       " in session.rows()

        assert session.run("insert", db, "volume", "hello", "world") == 0
        assert session.stdout == ""

        assert session.run("list", db, "volume") == 0
        assert session.rows() == [
            "hello        world       ",
            'wx-pv        {"a":1}     ',
        ]

        assert session.run("delete", db, "volume", "hello") == 0

        assert session.run("list", db, "volume") == 0
        assert session.rows() == ['wx-pv        {"a":1}     ']

    def test_missing_file(self, session: Session, temp_dir: Path) -> None:
        missing = temp_dir / "missing.db"

        assert session.run("list", str(missing), "b", "k") == 1
        assert session.stdout == "file not found\n"
        assert not missing.exists()

    def test_missing_bucket(self, session: Session, db_path: Path) -> None:
        assert session.run("list", str(db_path), "nosuchbucket") == 1
        assert session.stdout == "bucket not found\n"

    @pytest.mark.parametrize("argv", [[], ["-x"]])
    def test_no_command(self, session: Session, argv: list[str]) -> None:
        assert session.run(*argv) == 2
        assert "boltview command [arguments]" in session.stderr


@pytest.mark.integration
class TestProperties:
    """Round-trip properties of insert, list and delete."""

    def test_buckets_lists_every_bucket_with_its_count(
        self, session: Session, make_database, temp_dir: Path
    ) -> None:
        layout = {
            b"alpha": {b"a": b"1", b"b": b"2", b"c": b"3"},
            b"beta": {},
            b"gamma": {bytes([i]) + b"key": b"v" for i in range(65, 75)},
        }
        path = make_database(temp_dir / "many.db", layout)

        assert session.run("buckets", str(path)) == 0

        counts = {}
        for row in session.rows():
            name, count = row.split()
            counts[name] = int(count)
        assert counts == {"alpha": 3, "beta": 0, "gamma": 10}

    def test_insert_twice_keeps_latest_value(
        self, session: Session, db_path: Path, bucket_contents
    ) -> None:
        db = str(db_path)

        assert session.run("insert", db, "volume", "hello", "first") == 0
        assert session.run("insert", db, "volume", "hello", "second") == 0
        assert session.run("insert", db, "volume", "hello", "second") == 0

        assert bucket_contents(db_path, b"volume")[b"hello"] == b"second"
        assert session.run("list", db, "volume") == 0
        assert [row for row in session.rows() if row.startswith("hello ")] == [
            "hello        second      "
        ]

    def test_insert_long_key_lists_truncated(
        self, session: Session, db_path: Path, bucket_contents
    ) -> None:
        db = str(db_path)

        assert session.run("insert", db, "volume", "pvc-0123456789abcdef", "bound") == 0
        assert session.run("list", db, "volume") == 0

        assert "pvc-01234567 bound       " in session.rows()
        assert b"pvc-0123456789abcdef" in bucket_contents(db_path, b"volume")

    def test_delete_absent_key_exits_0(
        self, session: Session, db_path: Path, bucket_contents
    ) -> None:
        assert session.run("delete", str(db_path), "volume", "never-there") == 0
        assert bucket_contents(db_path, b"volume") == {b"wx-pv": b'{"a":1}'}

    def test_insert_into_missing_bucket_does_not_create_it(
        self, session: Session, db_path: Path
    ) -> None:
        db = str(db_path)

        assert session.run("insert", db, "fresh", "k", "v") == 1
        assert session.stdout == "bucket not found\n"

        assert session.run("buckets", db) == 0
        assert [row.split()[0] for row in session.rows()] == ["empty", "volume"]
