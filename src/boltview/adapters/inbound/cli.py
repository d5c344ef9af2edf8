"""Command-line adapter for boltview.

Parses the command name, dispatches to its handler and maps errors to
exit statuses:

    0  success
    2  usage printed (no command, leading flag, ``help``, ``-h``, bad flag)
    1  anything else; the error message is printed to stdout

Usage:
    $ boltview buckets t.db
    $ boltview list t.db volume
    $ boltview insert t.db volume hello world
    $ boltview delete t.db volume hello
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence, TextIO

from prometheus_client import CollectorRegistry

from boltview.adapters.outbound import LMDBStorageEngine
from boltview.application import (
    BaseCommand,
    BucketsCommand,
    DeleteCommand,
    InsertCommand,
    ListCommand,
    Streams,
)
from boltview.domain.errors import BoltViewError, UnknownCommandError, UsageError
from boltview.infrastructure.config import Config, get_config
from boltview.infrastructure.logging import get_logger, setup_logging
from boltview.infrastructure.metrics import MetricsRegistry, setup_metrics
from boltview.infrastructure.tracing import setup_tracing, shutdown_tracing
from boltview.ports.outbound import StorageEngine


logger = get_logger(__name__)


USAGE = """\
BoltView is a tool for reading/writting bolt databases.

Usage:

    boltview command [arguments]

The commands are:

    buckets       list buckets in bolt database
    list          list key-value pairs in bucket
    insert        insert a key-value pair into bucket
    delete        delete a key-value pair from bucket

Use "boltview [command] -h" for more information about a command.
"""


class Command(Enum):
    """Every command the dispatcher knows about."""

    BUCKETS = "buckets"
    LIST = "list"
    INSERT = "insert"
    DELETE = "delete"
    HELP = "help"
    UNKNOWN = ""

    @classmethod
    def parse(cls, token: str) -> Command:
        """Map a command-line token to a command; unrecognized is UNKNOWN."""
        try:
            return cls(token)
        except ValueError:
            return cls.UNKNOWN


HANDLERS: dict[Command, type[BaseCommand]] = {
    Command.BUCKETS: BucketsCommand,
    Command.LIST: ListCommand,
    Command.INSERT: InsertCommand,
    Command.DELETE: DeleteCommand,
}


@dataclass
class Main:
    """The program: standard streams plus the engine the commands use."""

    stdin: TextIO = field(default_factory=lambda: sys.stdin)
    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    stderr: TextIO = field(default_factory=lambda: sys.stderr)
    engine: StorageEngine | None = None
    metrics: MetricsRegistry | None = None

    @property
    def streams(self) -> Streams:
        return Streams(self.stdin, self.stdout, self.stderr)

    def usage(self) -> str:
        return USAGE

    def run(self, *args: str) -> None:
        """Execute the program.

        Raises:
            UsageError: If usage text was printed instead of running.
            UnknownCommandError: If the command name is not recognized.
            BoltViewError: If the command fails.
        """
        if not args or args[0].startswith("-"):
            print(self.usage(), file=self.stderr)
            raise UsageError()

        command = Command.parse(args[0])
        if command is Command.HELP:
            print(self.usage(), file=self.stderr)
            raise UsageError()
        if command is Command.UNKNOWN:
            raise UnknownCommandError()

        engine = self.engine or LMDBStorageEngine(metrics=self.metrics)
        handler = HANDLERS[command](self.streams, engine, self.metrics)
        handler.run(*args[1:])


def run_cli(argv: Sequence[str], main: Main | None = None) -> int:
    """Run the program and return its exit status."""
    main = main or Main()
    try:
        main.run(*argv)
    except UsageError:
        return UsageError.exit_code
    except BoltViewError as e:
        print(str(e), file=main.stdout)
        return e.exit_code
    except BrokenPipeError:
        # The reader of stdout went away (e.g. ``boltview list ... | head``).
        return 1
    return 0


def _silence_stdout() -> None:
    """Point stdout at the null device so the final flush cannot fail."""
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, sys.stdout.fileno())


def configure(config: Config) -> MetricsRegistry:
    """Set up logging, tracing and metrics for one process run."""
    obs = config.observability
    setup_logging(level=obs.log_level, log_format=obs.log_format)
    if obs.otel_endpoint:
        setup_tracing(service_name=obs.otel_service_name, otlp_endpoint=obs.otel_endpoint)
    return setup_metrics(CollectorRegistry())


def main(argv: Sequence[str] | None = None) -> None:
    """Console entry point."""
    config = get_config()
    metrics = configure(config)

    code = run_cli(sys.argv[1:] if argv is None else argv, Main(metrics=metrics))
    try:
        sys.stdout.flush()
    except BrokenPipeError:
        _silence_stdout()
        code = 1

    textfile = config.observability.metrics_textfile
    if textfile is not None:
        try:
            metrics.export(textfile)
        except OSError as e:
            logger.warning("metrics_export_failed", path=str(textfile), error=str(e))
    if config.observability.otel_endpoint:
        shutdown_tracing()

    sys.exit(code)


if __name__ == "__main__":
    main()
