"""Dashboard API views - thin layer over services."""

from app.container import Container
from web.api.errors import validate_limit

from .schemas import DashboardStats, DashboardStatsResponse, RecentOperationsResponse


def get_dashboard_stats(container: Container) -> DashboardStatsResponse:
    """Get dashboard aggregates (served from cache when fresh)."""
    result = container.dashboard.dashboard_stats()

    return DashboardStatsResponse(
        source=str(result.source),
        timings=result.timings,
        data=DashboardStats.model_validate(result.value),
    )


def get_recent_operations(container: Container, limit: int = 50) -> RecentOperationsResponse:
    """Get latest sales and journal rows."""
    validate_limit(limit)
    result = container.dashboard.recent_operations(limit)

    return RecentOperationsResponse(
        source=str(result.source),
        limit=limit,
        minorista=result.value["Minorista"],
        mayorista=result.value["Mayorista"],
        gasto=result.value["Gasto"],
    )
