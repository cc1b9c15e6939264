"""API errors and validation helpers."""

from app.errors import (
    AppError,
    ConfigurationError,
    ErrorKind,
    LockTimeoutError,
    StoreError,
    UnknownActionError,
    ValidationError,
)
from app.services.cache import CacheCategory

MAX_RECENT_LIMIT = 5000


def validate_category(category: str | None) -> CacheCategory:
    """Validate a cache category name."""
    if not category:
        raise ValidationError("Missing 'category'")
    try:
        return CacheCategory(category)
    except ValueError:
        valid = ", ".join(c.value for c in CacheCategory)
        raise ValidationError(f"Invalid category: '{category}'. Must be one of {valid}") from None


def validate_limit(limit: int) -> None:
    """Validate a row limit (0 means full history)."""
    if not 0 <= limit <= MAX_RECENT_LIMIT:
        raise ValidationError(f"Invalid limit: {limit}. Must be between 0 and {MAX_RECENT_LIMIT}")


__all__ = [
    "AppError",
    "ConfigurationError",
    "ErrorKind",
    "LockTimeoutError",
    "StoreError",
    "UnknownActionError",
    "ValidationError",
    "validate_category",
    "validate_limit",
]
