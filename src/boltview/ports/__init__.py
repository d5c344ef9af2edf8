"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts:
- Outbound ports: Dependencies on external systems (the storage engine)

Adapters implement these ports with concrete functionality.
"""

from boltview.ports.outbound import Bucket, Database, StorageEngine, Transaction

__all__ = [
    # Outbound ports
    "Bucket",
    "Database",
    "StorageEngine",
    "Transaction",
]
