"""Common models - base classes, table shapes and internal storage tables."""

from app.models.common.base import BaseEntity
from app.models.common.cache import CACHE_DDL
from app.models.common.sheet import SHEET_CELL_DDL, SHEET_DDL
from app.models.common.table import (
    ReconciliationReport,
    TableFailure,
    TableSpec,
    UUIDBackfillTarget,
)

__all__ = [
    "BaseEntity",
    "CACHE_DDL",
    "SHEET_DDL",
    "SHEET_CELL_DDL",
    "TableSpec",
    "UUIDBackfillTarget",
    "TableFailure",
    "ReconciliationReport",
]
