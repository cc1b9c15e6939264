"""Dashboard domain models."""

from app.models.dashboard.entities import ProductRank, SalesBucket, SellerRank

__all__ = [
    "SalesBucket",
    "SellerRank",
    "ProductRank",
]
