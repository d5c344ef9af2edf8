"""Value objects for boltview.

Exports:
    Identifiers:
        - BucketName, Key, Value: Byte-string identifiers
        - from_arg: Command-line string to stored bytes
        - display, display_key: Stored bytes to terminal text
        - KEY_DISPLAY_WIDTH: Width of the KEY column

    Transaction Types:
        - TransactionMode: READ or WRITE
"""

from boltview.domain.value_objects.identifiers import (
    KEY_DISPLAY_WIDTH,
    BucketName,
    Key,
    Value,
    display,
    display_key,
    from_arg,
)
from boltview.domain.value_objects.transaction_types import TransactionMode

__all__ = [
    # Identifiers
    "BucketName",
    "Key",
    "Value",
    "KEY_DISPLAY_WIDTH",
    "display",
    "display_key",
    "from_arg",
    # Transaction types
    "TransactionMode",
]
