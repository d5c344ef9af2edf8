"""Storage Engine port for transactional bucket access.

This outbound port defines the contract boltview needs from an embedded,
single-file key-value engine. The engine owns everything that matters
for durability: page layout, copy-on-write commits, free space and file
locking. boltview only opens a file, runs one transaction and closes it.

The contract mirrors a bucketed B+Tree store:
- A database file holds named top-level buckets
- A bucket is an ordered mapping of byte-string keys to values
- Read transactions see a consistent snapshot
- Write transactions commit atomically or leave the file unchanged
"""

from __future__ import annotations

from abc import abstractmethod
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Iterator, Protocol

from boltview.domain.entities import BucketStats, KeyValuePair
from boltview.domain.value_objects import BucketName, Key, TransactionMode, Value


class Bucket(Protocol):
    """A bucket resolved inside a transaction.

    A bucket handle is only valid until its transaction ends.
    """

    @property
    @abstractmethod
    def name(self) -> BucketName:
        """Return the bucket's name."""
        ...

    @abstractmethod
    def stats(self) -> BucketStats:
        """Return the bucket's entry count."""
        ...

    @abstractmethod
    def cursor(self) -> Iterator[KeyValuePair]:
        """Iterate all entries forward, from the first key to the last.

        Keys are yielded in the engine's key order (byte-wise ascending).
        """
        ...

    @abstractmethod
    def put(self, key: Key, value: Value) -> None:
        """Set ``key`` to ``value``, replacing any existing value.

        Raises:
            EngineError: If the engine rejects the write, for example in a
                read-only transaction or for a key over the engine limit.
        """
        ...

    @abstractmethod
    def delete(self, key: Key) -> bool:
        """Remove ``key`` if present.

        Returns:
            True if the key existed. Deleting a missing key is not an error.
        """
        ...


class Transaction(Protocol):
    """A read or read-write view over the whole database file."""

    @property
    @abstractmethod
    def mode(self) -> TransactionMode:
        """Return whether this transaction may write."""
        ...

    @abstractmethod
    def buckets(self) -> Iterator[BucketStats]:
        """Iterate all top-level buckets with their entry counts."""
        ...

    @abstractmethod
    def bucket(self, name: BucketName) -> Bucket | None:
        """Resolve a top-level bucket by name.

        Returns:
            The bucket, or None if no bucket has that name. Buckets are
            never created implicitly.
        """
        ...


class Database(Protocol):
    """An open database file.

    Usage:
        with engine.open(path, readonly=True) as db:
            with db.view() as tx:
                for stats in tx.buckets():
                    ...
    """

    @property
    @abstractmethod
    def path(self) -> Path:
        """Return the path of the database file."""
        ...

    @abstractmethod
    def view(self) -> AbstractContextManager[Transaction]:
        """Start a read-only transaction.

        The transaction ends when the context exits.
        """
        ...

    @abstractmethod
    def update(self) -> AbstractContextManager[Transaction]:
        """Start a read-write transaction.

        The transaction commits when the context exits normally and rolls
        back if the block raises.

        Raises:
            PermissionError: If the database was opened read-only.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the file. Safe to call more than once."""
        ...

    def __enter__(self) -> Database:
        ...

    def __exit__(self, *exc_info: object) -> None:
        ...


class StorageEngine(Protocol):
    """Factory for open databases."""

    @abstractmethod
    def open(self, path: str | Path, readonly: bool = False) -> Database:
        """Open an existing database file.

        Args:
            path: Path to the database file. It must already exist.
            readonly: Open for reading only.

        Raises:
            DatabaseFileNotFoundError: If the file does not exist.
            EngineError: If the engine cannot open the file.
        """
        ...
