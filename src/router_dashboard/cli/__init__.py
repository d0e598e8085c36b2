"""
CLI commands for router-dashboard.
"""

from router_dashboard.cli.dashboard import (
    check_grafana_command,
    generate_dashboard_command,
    list_queries_command,
    push_dashboard_command,
)

__all__ = [
    "generate_dashboard_command",
    "push_dashboard_command",
    "check_grafana_command",
    "list_queries_command",
]
