"""Operations domain models."""

from app.models.operaciones.tables import (
    LIBRO_DIARIO,
    LOGS,
    OPERACIONES_UUID_TARGETS,
    TAREAS,
)

__all__ = [
    "LIBRO_DIARIO",
    "TAREAS",
    "LOGS",
    "OPERACIONES_UUID_TARGETS",
]
