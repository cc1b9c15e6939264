"""Schema API response schemas."""

from pydantic import BaseModel


class FailureItem(BaseModel):
    """Table the reconciler could not finish."""

    table: str
    message: str


class ReconcileResponse(BaseModel):
    """Result of one reconciliation pass."""

    fingerprint: str
    changes: list[str]
    failures: list[FailureItem]
    changed: bool


class TableItem(BaseModel):
    """Declared table shape."""

    name: str
    columns: list[str]
    uuid_column: str | None = None


class RegistryResponse(BaseModel):
    """Declared schema."""

    fingerprint: str
    tables: list[TableItem]
