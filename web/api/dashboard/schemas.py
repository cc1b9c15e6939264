"""Dashboard API response schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class BucketItem(BaseModel):
    """Sales totals for one period."""

    total: float
    count: int
    profit: float


class SellerItem(BaseModel):
    """Seller ranking entry."""

    name: str
    total: float
    count: int
    profit: float


class ProductItem(BaseModel):
    """Product ranking entry."""

    name: str
    cantidad: int
    costo: float
    monto: float


class OperationItem(BaseModel):
    """Latest sale."""

    id: str
    fecha: str
    cliente: str
    tipo_producto: str
    modelo: str
    capacidad: str
    color: str
    monto: float
    auditoria: str
    tipo: str
    divisa: str


class DashboardStats(BaseModel):
    """Computed dashboard aggregates."""

    stats: dict[str, BucketItem]
    top_vendedores: list[SellerItem]
    ranking_productos: list[ProductItem]
    ultimas_operaciones: list[OperationItem]
    balances: dict[str, dict[str, float]]
    ultima_modificacion: str


class DashboardStatsResponse(BaseModel):
    """Dashboard stats with the cache source."""

    source: Literal["cache", "rebuild", "no-cache"]
    timings: dict[str, float] = Field(default_factory=dict)
    data: DashboardStats


class RecentOperationsResponse(BaseModel):
    """Latest rows per sheet, newest first."""

    source: Literal["cache", "rebuild", "no-cache"]
    limit: int
    minorista: list[dict[str, str]]
    mayorista: list[dict[str, str]]
    gasto: list[dict[str, str]]
