"""Error kinds shared by the core and the action layer.

Every error carries a ``kind`` so callers can tell a retryable contention
failure from a fatal configuration problem without parsing messages.
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Discriminator for failures surfaced to callers."""

    CONFIGURATION = "configuration"
    BUSY = "busy"
    STORE = "store"
    VALIDATION = "validation"
    UNKNOWN_ACTION = "unknown_action"


class AppError(Exception):
    """Base class for all application errors."""

    kind: ErrorKind = ErrorKind.STORE
    retryable: bool = False

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(AppError):
    """Backing store is not configured or cannot be opened."""

    kind = ErrorKind.CONFIGURATION


class LockTimeoutError(AppError):
    """Host lock was not acquired within its bounded wait."""

    kind = ErrorKind.BUSY
    retryable = True

    def __init__(self, message: str = "Server is busy, try again"):
        super().__init__(message)


class StoreError(AppError):
    """Unrecoverable backing store access failure."""

    kind = ErrorKind.STORE


class ValidationError(AppError):
    """Bad input from the caller."""

    kind = ErrorKind.VALIDATION


class UnknownActionError(AppError):
    """Action name is not in the registered set."""

    kind = ErrorKind.UNKNOWN_ACTION

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Unknown action: '{action}'")
