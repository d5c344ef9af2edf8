"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Inbound adapters: Handle incoming requests (the command line)
- Outbound adapters: Implement external dependencies (the LMDB engine)
"""

from boltview.adapters.outbound import LMDBStorageEngine

__all__ = [
    # Outbound adapters
    "LMDBStorageEngine",
]
