"""Sales sheets (ventas minoristas / mayoristas)."""

from app.models.common import TableSpec, UUIDBackfillTarget

VENTA_COLUMNS = (
    "Fecha",
    "Mes",
    "N° ID",
    # Cliente
    "Nombre y Apellido",
    "Canal",
    "Contacto",
    "Mail",
    # Producto
    "Cantidad",
    "Equipo | Producto",
    "Modelo",
    "Tamaño",
    "Color",
    "Estado",
    "IMEI | Serial",
    # Transaccion
    "Envio | Retiro",
    "Monto",
    "Divisa",
    "Costo del Producto",
    "Profit Bruto",
    "Auditoría",
    "ID",
)

CLIENTES_MINORISTAS = TableSpec("Clientes Minoristas", VENTA_COLUMNS)
CLIENTES_MAYORISTAS = TableSpec("Clientes Mayoristas", VENTA_COLUMNS)

VENTAS_UUID_TARGETS = (
    UUIDBackfillTarget(CLIENTES_MINORISTAS.name, "ID"),
    UUIDBackfillTarget(CLIENTES_MAYORISTAS.name, "ID"),
)
