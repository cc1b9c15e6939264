"""Operations sheets - journal (libro diario), tasks and the health log."""

from app.models.common import TableSpec, UUIDBackfillTarget

LIBRO_DIARIO = TableSpec(
    "Libro Diario",
    (
        "Fecha",
        "Detalle",
        "Tipo de Movimiento",
        "Categoría de Movimiento",
        "Monto",
        "Divisa",
        "Destino",
        "Comentarios",
        "Auditoría",
        "ID",
    ),
)

TAREAS = TableSpec(
    "Tareas",
    (
        "ID",
        "Fecha_Creacion",
        "Fecha_Objetivo",
        "Descripcion",
        "Cliente",
        "Estado",  # Pendiente, Completada, Vencida
        "Prioridad",
        "Creado_Por",
    ),
)

LOGS = TableSpec("_LOGS", ("Fecha", "Estado", "Mensaje"))

OPERACIONES_UUID_TARGETS = (
    UUIDBackfillTarget(LIBRO_DIARIO.name, "ID"),
    UUIDBackfillTarget(TAREAS.name, "ID"),
)
