"""Services package - service class exports."""

from app.services.cache import CacheStore, InvalidationBus
from app.services.dashboard.service import DashboardService
from app.services.schema import SchemaReconciler

__all__ = [
    "CacheStore",
    "InvalidationBus",
    "DashboardService",
    "SchemaReconciler",
]
