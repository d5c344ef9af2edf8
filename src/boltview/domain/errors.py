"""Exception hierarchy for boltview.

Every error carries the process exit status the command line reports
for it. Messages are the short, user-facing strings printed on failure.
"""

from __future__ import annotations


class BoltViewError(Exception):
    """Base exception for all boltview errors."""

    exit_code: int = 1
    message: str = "error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class UsageError(BoltViewError):
    """Raised when usage text was printed instead of running a command."""

    exit_code = 2
    message = "usage"


class UnknownCommandError(BoltViewError):
    """Raised when the command name is not recognized."""

    message = "unknown command"


# =============================================================================
# Argument errors
# =============================================================================


class ArgumentError(BoltViewError):
    """Raised when a required positional argument is missing or empty."""


class PathRequiredError(ArgumentError):
    message = "path required"


class BucketRequiredError(ArgumentError):
    message = "bucket required"


class KeyRequiredError(ArgumentError):
    message = "key required"


class ValueRequiredError(ArgumentError):
    message = "value required"


# =============================================================================
# Not-found errors
# =============================================================================


class NotFoundError(BoltViewError):
    """Raised when the database file or a bucket does not exist."""


class DatabaseFileNotFoundError(NotFoundError):
    message = "file not found"


class BucketNotFoundError(NotFoundError):
    message = "bucket not found"


class EngineError(BoltViewError):
    """Raised when the storage engine fails.

    The message is the engine's own, unchanged. The engine exception is
    chained as ``__cause__``.
    """
