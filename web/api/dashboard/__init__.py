"""Dashboard API."""

from web.api.dashboard.views import get_dashboard_stats, get_recent_operations

__all__ = [
    "get_dashboard_stats",
    "get_recent_operations",
]
