"""Application layer for boltview.

The application layer runs one use case per command: validate the
arguments, open the database through the StorageEngine port, run a
single transaction and report the result.

Exports:
    - Streams: stdin/stdout/stderr bundle passed to every command
    - BaseCommand: Shared flag parsing, validation and bookkeeping
    - BucketsCommand, ListCommand, InsertCommand, DeleteCommand
"""

from boltview.application.commands import (
    BaseCommand,
    BucketsCommand,
    DeleteCommand,
    InsertCommand,
    ListCommand,
    Streams,
    split_flags,
)

__all__ = [
    "Streams",
    "BaseCommand",
    "BucketsCommand",
    "ListCommand",
    "InsertCommand",
    "DeleteCommand",
    "split_flags",
]
