"""Configuration sheets - dropdown options edited from the admin panel."""

from app.models.common import TableSpec

CONFIG_PRODUCTOS = TableSpec("Config_Productos", ("Categoria", "Modelo", "Variantes", "Colores"))

CONFIG_GASTOS = TableSpec(
    "Config_Gastos",
    ("Destinos", "Divisas", "Tipo de Movimiento", "Categoría de Movimiento"),
)

CONFIG_FORM = TableSpec("Config_Form", ("Canal de Venta", "Estado"))
