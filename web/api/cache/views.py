"""Cache API views - category invalidation and rebuild."""

from app.container import Container
from web.api.errors import validate_category

from .schemas import InvalidateResponse, RebuildResponse


def invalidate_cache(container: Container, category: str | None) -> InvalidateResponse:
    """Expire every cache key registered under category."""
    cat = validate_category(category)
    keys = container.bus.keys(cat)
    count = container.bus.invalidate(cat)

    return InvalidateResponse(category=str(cat), invalidated=count, keys=keys)


def rebuild_cache(container: Container, category: str | None) -> RebuildResponse:
    """Expire a category and recompute the dashboard if it depends on it."""
    cat = validate_category(category)
    data = container.dashboard.rebuild(cat)

    return RebuildResponse(**data)
