"""Models package - table shapes, DDL and entities for all domains."""

from app.models.common import (
    CACHE_DDL,
    SHEET_CELL_DDL,
    SHEET_DDL,
    BaseEntity,
    ReconciliationReport,
    TableFailure,
    TableSpec,
    UUIDBackfillTarget,
)
from app.models.config import CONFIG_FORM, CONFIG_GASTOS, CONFIG_PRODUCTOS
from app.models.dashboard import ProductRank, SalesBucket, SellerRank
from app.models.operaciones import (
    LIBRO_DIARIO,
    LOGS,
    OPERACIONES_UUID_TARGETS,
    TAREAS,
)
from app.models.registry import DuplicateTableError, RegistryFrozenError, SchemaRegistry
from app.models.ventas import CLIENTES_MAYORISTAS, CLIENTES_MINORISTAS, VENTAS_UUID_TARGETS

# Internal storage tables
ALL_DDL = [
    SHEET_DDL,
    SHEET_CELL_DDL,
    CACHE_DDL,
]

# Backing sheets, in reconcile order
ALL_TABLES = (
    # Ventas
    CLIENTES_MINORISTAS,
    CLIENTES_MAYORISTAS,
    # Operaciones
    LIBRO_DIARIO,
    TAREAS,
    # Config
    CONFIG_PRODUCTOS,
    CONFIG_GASTOS,
    CONFIG_FORM,
    # Health log
    LOGS,
)

ALL_UUID_TARGETS = VENTAS_UUID_TARGETS + OPERACIONES_UUID_TARGETS


def default_registry() -> SchemaRegistry:
    """Fresh, frozen registry with every application sheet."""
    registry = SchemaRegistry(ALL_TABLES, ALL_UUID_TARGETS)
    registry.freeze()
    return registry


__all__ = [
    # Common
    "BaseEntity",
    "TableSpec",
    "UUIDBackfillTarget",
    "TableFailure",
    "ReconciliationReport",
    "CACHE_DDL",
    "SHEET_DDL",
    "SHEET_CELL_DDL",
    # Ventas
    "CLIENTES_MINORISTAS",
    "CLIENTES_MAYORISTAS",
    # Operaciones
    "LIBRO_DIARIO",
    "TAREAS",
    "LOGS",
    # Config
    "CONFIG_PRODUCTOS",
    "CONFIG_GASTOS",
    "CONFIG_FORM",
    # Dashboard
    "SalesBucket",
    "SellerRank",
    "ProductRank",
    # Registry
    "SchemaRegistry",
    "RegistryFrozenError",
    "DuplicateTableError",
    "default_registry",
    # Collections
    "ALL_DDL",
    "ALL_TABLES",
    "ALL_UUID_TARGETS",
]
