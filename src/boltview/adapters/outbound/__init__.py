"""Outbound adapters - implementations of outbound ports."""

from boltview.adapters.outbound.lmdb_engine import (
    LMDBBucket,
    LMDBDatabase,
    LMDBStorageEngine,
    LMDBTransaction,
)

__all__ = [
    "LMDBStorageEngine",
    "LMDBDatabase",
    "LMDBTransaction",
    "LMDBBucket",
]
