"""Byte-string identifiers used across boltview.

Buckets, keys and values are raw bytes inside the database. Command-line
arguments arrive as ``str`` and are converted with ``os.fsencode`` so that
undecodable argv bytes round-trip unchanged.
"""

from __future__ import annotations

import os
from typing import NewType


BucketName = NewType("BucketName", bytes)
"""Name of a top-level bucket (a named database inside the file)."""

Key = NewType("Key", bytes)
"""Key within a bucket. Unique per bucket, never empty."""

Value = NewType("Value", bytes)
"""Value associated with a key. Never empty when written by boltview."""

# Width of the KEY column in list output; longer keys are cut for display.
KEY_DISPLAY_WIDTH = 12


def from_arg(arg: str) -> bytes:
    """Convert a command-line argument to the bytes stored in the database."""
    return os.fsencode(arg)


def display(data: bytes) -> str:
    """Render stored bytes for terminal output."""
    return data.decode("utf-8", errors="replace")


def display_key(key: bytes) -> str:
    """Render a key for the KEY column, truncated to its first 12 bytes.

    The cut is made on bytes, before decoding, so a multi-byte UTF-8
    character split at byte 12 is shown as U+FFFD.

    Example:
        >>> display_key(b"a-very-long-key-name")
        'a-very-long-'
        >>> display_key("caf\\u00e9-au-lait".encode())
        'café-au-lai'
        >>> display_key(b"eleven-byte\\xc3\\xa9")
        'eleven-byte�'
    """
    return display(key[:KEY_DISPLAY_WIDTH])
