"""Bucket contents as seen through a transaction."""

from __future__ import annotations

from dataclasses import dataclass

from boltview.domain.value_objects import BucketName, Key, Value


@dataclass(frozen=True, slots=True)
class BucketStats:
    """A top-level bucket and the number of entries it holds."""

    name: BucketName
    key_count: int

    def __post_init__(self) -> None:
        if self.key_count < 0:
            raise ValueError(f"key_count must be non-negative, got {self.key_count}")


@dataclass(frozen=True, slots=True)
class KeyValuePair:
    """One entry of a bucket, in cursor order."""

    key: Key
    value: Value
