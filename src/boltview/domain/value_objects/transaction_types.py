"""Transaction-related types."""

from __future__ import annotations

from enum import Enum


class TransactionMode(Enum):
    """Access mode of an engine transaction.

    READ transactions see a consistent snapshot and never block writers.
    WRITE transactions are exclusive; their changes commit atomically.
    """

    READ = "read"
    WRITE = "write"

    @property
    def is_write(self) -> bool:
        return self is TransactionMode.WRITE
