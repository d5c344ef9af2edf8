"""Outbound ports - interfaces for external dependencies.

boltview depends on exactly one external system: the embedded storage
engine that owns the database file.
"""

from boltview.ports.outbound.storage_engine import (
    Bucket,
    Database,
    StorageEngine,
    Transaction,
)

__all__ = [
    "Bucket",
    "Database",
    "StorageEngine",
    "Transaction",
]
