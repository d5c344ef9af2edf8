"""Command handlers for boltview.

Every handler runs the same four steps:

    validate args -> open file -> run one transaction -> close file

A failure in one step skips the later ones, except that an opened file
is always closed. Flags come before positional arguments; the first
positional argument (or ``--``) ends flag parsing, so a later token that
starts with ``-`` is an ordinary argument.

Usage:
    streams = Streams(sys.stdin, sys.stdout, sys.stderr)
    ListCommand(streams, LMDBStorageEngine()).run("t.db", "volume")
"""

from __future__ import annotations

import argparse
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Sequence, TextIO

from boltview.domain.errors import (
    BoltViewError,
    BucketNotFoundError,
    BucketRequiredError,
    DatabaseFileNotFoundError,
    EngineError,
    KeyRequiredError,
    PathRequiredError,
    UsageError,
    ValueRequiredError,
)
from boltview.domain.value_objects import BucketName, Key, Value, display, display_key, from_arg
from boltview.infrastructure.logging import get_logger
from boltview.infrastructure.metrics import MetricsRegistry, get_metrics
from boltview.infrastructure.tracing import command_span
from boltview.ports.outbound import Bucket, Database, StorageEngine, Transaction


logger = get_logger(__name__)


@dataclass
class Streams:
    """Standard streams threaded through every command."""

    stdin: TextIO
    stdout: TextIO
    stderr: TextIO


class _FlagError(Exception):
    """Raised by the flag parser instead of exiting the process."""


class _FlagParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise _FlagError(message)


def split_flags(args: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split ``args`` into leading flags and positional arguments.

    Example:
        >>> split_flags(["-h", "t.db", "-x"])
        (['-h'], ['t.db', '-x'])
        >>> split_flags(["--", "-odd-name"])
        ([], ['-odd-name'])
    """
    for i, arg in enumerate(args):
        if arg == "--":
            return list(args[:i]), list(args[i + 1:])
        if not arg.startswith("-") or arg == "-":
            return list(args[:i]), list(args[i:])
    return list(args), []


def _arg(args: Sequence[str], index: int) -> str:
    """Return positional ``index``, or an empty string if absent."""
    return args[index] if index < len(args) else ""


class BaseCommand(ABC):
    """Shared flag parsing, validation and bookkeeping for all commands.

    Subclasses set ``name``, ``usage`` and ``readonly`` and implement
    ``execute``.
    """

    name: ClassVar[str]
    usage: ClassVar[str]
    readonly: ClassVar[bool] = True

    def __init__(
        self,
        streams: Streams,
        engine: StorageEngine,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        self.streams = streams
        self.engine = engine
        self.metrics = metrics or get_metrics()

    @property
    def stdout(self) -> TextIO:
        return self.streams.stdout

    @property
    def stderr(self) -> TextIO:
        return self.streams.stderr

    def print_usage(self) -> None:
        print(self.usage, file=self.stderr)

    def parse_flags(self, args: Sequence[str]) -> list[str]:
        """Parse leading flags and return the positional arguments.

        Raises:
            UsageError: If help was requested or a flag is not defined.
        """
        flags, positional = split_flags(args)

        parser = _FlagParser(prog=f"boltview {self.name}", add_help=False, allow_abbrev=False)
        parser.add_argument("-h", "--help", action="store_true", dest="help")
        try:
            options = parser.parse_args(flags)
        except _FlagError as e:
            print(str(e), file=self.stderr)
            self.print_usage()
            raise UsageError() from e

        if options.help:
            self.print_usage()
            raise UsageError()
        return positional

    def validate(self, args: Sequence[str]) -> Path:
        """Check the database path; subclasses add their own arguments.

        Raises:
            PathRequiredError: If PATH is missing.
            DatabaseFileNotFoundError: If PATH does not exist.
        """
        path = _arg(args, 0)
        if not path:
            raise PathRequiredError()
        if not Path(path).exists():
            raise DatabaseFileNotFoundError()
        return Path(path)

    def run(self, *args: str) -> None:
        """Execute the command with the arguments after its name."""
        positional = self.parse_flags(args)

        log = logger.bind(command=self.name)
        status = "error"
        start = time.perf_counter()
        try:
            path = self.validate(positional)
            log = log.bind(path=str(path))
            log.debug("command_started")

            with command_span(self.name, path):
                with self.engine.open(path, readonly=self.readonly) as db:
                    self.execute(db, positional)
            status = "success"
        except EngineError as e:
            log.warning("command_failed", error=str(e), error_type=type(e).__name__)
            raise
        except BoltViewError as e:
            # Argument and lookup errors are reported to the user by the caller.
            log.debug("command_failed", error=str(e), error_type=type(e).__name__)
            raise
        finally:
            duration = time.perf_counter() - start
            self.metrics.commands_total.labels(command=self.name, status=status).inc()
            self.metrics.command_duration_seconds.labels(command=self.name).observe(duration)

        log.debug("command_finished", duration_ms=round(duration * 1000, 3))

    @abstractmethod
    def execute(self, db: Database, args: Sequence[str]) -> None:
        """Run the command's single transaction against an open database."""
        ...


def _require_bucket(tx: Transaction, name: BucketName) -> Bucket:
    bucket = tx.bucket(name)
    if bucket is None:
        raise BucketNotFoundError()
    return bucket


class BucketsCommand(BaseCommand):
    """Print a table of the buckets in a database and their item counts."""

    name = "buckets"
    usage = (
        "usage: boltview buckets PATH\n"
        "\n"
        "Buckets prints a table of buckets in bolt database\n"
    )

    def execute(self, db: Database, args: Sequence[str]) -> None:
        with db.view() as tx:
            print("NAME     ITEMS", file=self.stdout)
            print("======== ========", file=self.stdout)
            for stats in tx.buckets():
                print(f"{display(stats.name):<8} {stats.key_count:<8d}", file=self.stdout)


class ListCommand(BaseCommand):
    """Print every key-value pair of one bucket in key order."""

    name = "list"
    usage = (
        "usage: boltview list PATH BUCKET_NAME\n"
        "\n"
        "List prints a table of key-value pairs in that bucket\n"
    )

    def validate(self, args: Sequence[str]) -> Path:
        path = super().validate(args)
        if not _arg(args, 1):
            raise BucketRequiredError()
        return path

    def execute(self, db: Database, args: Sequence[str]) -> None:
        bucket_name = BucketName(from_arg(args[1]))

        with db.view() as tx:
            bucket = _require_bucket(tx, bucket_name)

            print("KEY          VALUE", file=self.stdout)
            print("============ ============", file=self.stdout)
            for pair in bucket.cursor():
                print(f"{display_key(pair.key):<12} {display(pair.value):<12}", file=self.stdout)


class InsertCommand(BaseCommand):
    """Set a key to a value in an existing bucket."""

    name = "insert"
    usage = (
        "usage: boltview insert PATH BUCKET_NAME KEY VALUE\n"
        "\n"
        "Insert add a pair of key-value into the bucket\n"
    )
    readonly = False

    def validate(self, args: Sequence[str]) -> Path:
        path = super().validate(args)
        if not _arg(args, 1):
            raise BucketRequiredError()
        if not _arg(args, 2):
            raise KeyRequiredError()
        if not _arg(args, 3):
            raise ValueRequiredError()
        return path

    def execute(self, db: Database, args: Sequence[str]) -> None:
        bucket_name = BucketName(from_arg(args[1]))
        key = Key(from_arg(args[2]))
        value = Value(from_arg(args[3]))

        with db.update() as tx:
            _require_bucket(tx, bucket_name).put(key, value)

        self.metrics.keys_written_total.inc()
        logger.debug("key_written", bucket=bucket_name, key=key)


class DeleteCommand(BaseCommand):
    """Remove a key from an existing bucket. A missing key is not an error."""

    name = "delete"
    usage = (
        "usage: boltview delete PATH BUCKET_NAME KEY\n"
        "\n"
        "Delete delete a pair of key-value from the bucket\n"
    )
    readonly = False

    def validate(self, args: Sequence[str]) -> Path:
        path = super().validate(args)
        if not _arg(args, 1):
            raise BucketRequiredError()
        if not _arg(args, 2):
            raise KeyRequiredError()
        return path

    def execute(self, db: Database, args: Sequence[str]) -> None:
        bucket_name = BucketName(from_arg(args[1]))
        key = Key(from_arg(args[2]))

        with db.update() as tx:
            existed = _require_bucket(tx, bucket_name).delete(key)

        if existed:
            self.metrics.keys_deleted_total.inc()
        logger.debug("key_deleted", bucket=bucket_name, key=key, existed=existed)
