"""Schema API."""

from web.api.schema.views import get_registry, reconcile_schema

__all__ = [
    "reconcile_schema",
    "get_registry",
]
