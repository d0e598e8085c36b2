"""Grafana dashboard generation.

Composes PromQL queries and panel specs for the Router Monitor dashboard and
renders them with the Grafana Foundation SDK.
"""

from router_dashboard.dashboards.layout import (
    PanelGroup,
    PanelRow,
    auto_layout,
    new_panel_group,
    new_panel_row,
)
from router_dashboard.dashboards.models import PanelKind, PanelSpec, Target, Unit
from router_dashboard.dashboards.panels import (
    build_panel,
    new_bar_gauge_panel,
    new_pie_chart_panel,
    new_stat_panel,
    new_table_panel,
    new_timeseries_panel,
    table_exclude_by_name,
    table_index_by_name,
)
from router_dashboard.dashboards.queries import DOWNLOAD, UPLOAD, build_traffic_query
from router_dashboard.dashboards.router_monitor import (
    assemble_dashboard,
    build_router_monitor_dashboard,
)
from router_dashboard.dashboards.writer import write_dashboard_and_post_to_grafana

__all__ = [
    # Specs
    "PanelKind",
    "PanelSpec",
    "Target",
    "Unit",
    # Queries
    "DOWNLOAD",
    "UPLOAD",
    "build_traffic_query",
    # Panels
    "build_panel",
    "new_bar_gauge_panel",
    "new_pie_chart_panel",
    "new_stat_panel",
    "new_table_panel",
    "new_timeseries_panel",
    "table_exclude_by_name",
    "table_index_by_name",
    # Layout
    "PanelGroup",
    "PanelRow",
    "auto_layout",
    "new_panel_group",
    "new_panel_row",
    # Dashboard
    "assemble_dashboard",
    "build_router_monitor_dashboard",
    "write_dashboard_and_post_to_grafana",
]
