"""Dashboard domain entities - computed aggregates."""

from dataclasses import dataclass

from app.models.common import BaseEntity


@dataclass
class SalesBucket(BaseEntity):
    """Sales totals for one period (hoy, mes, anio, historico)."""

    total: float = 0.0
    count: int = 0
    profit: float = 0.0


@dataclass
class SellerRank(BaseEntity):
    """Seller ranked by sold amount."""

    name: str
    total: float
    count: int
    profit: float


@dataclass
class ProductRank(BaseEntity):
    """Product ranked by units sold."""

    name: str
    cantidad: int
    costo: float
    monto: float
