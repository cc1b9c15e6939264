"""Configuration domain models."""

from app.models.config.tables import CONFIG_FORM, CONFIG_GASTOS, CONFIG_PRODUCTOS

__all__ = [
    "CONFIG_PRODUCTOS",
    "CONFIG_GASTOS",
    "CONFIG_FORM",
]
