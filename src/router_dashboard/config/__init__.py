"""
Router dashboard configuration.

Pydantic-based settings read from ROUTER_DASHBOARD_* environment variables
and an optional .env file.
"""

from router_dashboard.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
