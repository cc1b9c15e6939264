"""Sales domain models."""

from app.models.ventas.tables import (
    CLIENTES_MAYORISTAS,
    CLIENTES_MINORISTAS,
    VENTA_COLUMNS,
    VENTAS_UUID_TARGETS,
)

__all__ = [
    "VENTA_COLUMNS",
    "CLIENTES_MINORISTAS",
    "CLIENTES_MAYORISTAS",
    "VENTAS_UUID_TARGETS",
]
