"""Domain entities for boltview.

Exports:
    - BucketStats: Bucket name with its entry count
    - KeyValuePair: One bucket entry
"""

from boltview.domain.entities.bucket import BucketStats, KeyValuePair

__all__ = [
    "BucketStats",
    "KeyValuePair",
]
