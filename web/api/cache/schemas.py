"""Cache API response schemas."""

from typing import Any

from pydantic import BaseModel


class InvalidateResponse(BaseModel):
    """Keys expired for a category."""

    category: str
    invalidated: int
    keys: list[str]


class RebuildResponse(BaseModel):
    """Category invalidated and, when affected, the dashboard recomputed."""

    category: str
    invalidated: int
    rebuilt: bool
    data: dict[str, Any] | None = None
