"""The Router Monitor dashboard.

Internet uptime and latency, connected devices and DHCP leases, and
bandwidth usage by local IP.
"""

from typing import List, Sequence, Tuple

import structlog
from grafana_foundation_sdk.models import dashboard as dashboard_models

from router_dashboard.dashboards import queries
from router_dashboard.dashboards.layout import (
    PROMETHEUS_DATASOURCE,
    PanelRow,
    PanelRowOrGroup,
    auto_layout,
    new_panel_group,
    new_panel_row,
)
from router_dashboard.dashboards.models import (
    DrawStyle,
    FieldOverride,
    Legend,
    PanelSpec,
    Target,
    TemplateVariable,
    Thresholds,
    TimeRange,
    Unit,
    ValueText,
)
from router_dashboard.dashboards.panels import (
    GREEN_BASE,
    color_override,
    new_bar_gauge_panel,
    new_pie_chart_panel,
    new_stat_panel,
    new_table_panel,
    new_timeseries_panel,
    organize,
)
from router_dashboard.dashboards.queries import DOWNLOAD, UPLOAD, TrafficDirection
from router_dashboard.dashboards.sdk_adapter import SDKAdapter

logger = structlog.get_logger(__name__)

DASHBOARD_UID = "router-monitor"
DASHBOARD_TITLE = "Router Monitor"
DASHBOARD_DESCRIPTION = "Dashboard for Router Monitor"
DASHBOARD_TAGS = ("router-monitor",)

DEVICE_LEGEND = "{{ hostname }} ({{ ip_addr }})"
INTERNET_LEGEND = "{{ ip_addr }}"

TEMPLATE_VARIABLES = (
    TemplateVariable(name="DS_PROMETHEUS", label="Prometheus", var_type="datasource", datasource_type="prometheus"),
    TemplateVariable(
        name="localips",
        label="Local IPs",
        query=f"label_values({queries.PACKETS_TOTAL}, dst)",
        multi=True,
        include_all=True,
    ),
    TemplateVariable(
        name="instance",
        label="Instance",
        query=f"label_values({queries.CONNECTION_IS_UP}, instance)",
    ),
)


# Network traffic


def total_bytes_by_local_ip_pie_chart_panel(direction: TrafficDirection) -> PanelSpec:
    return new_pie_chart_panel(
        title=f"Total Bytes {direction.name}ed - by local IP (pie chart)",
        targets=[
            Target(
                expr=queries.build_traffic_query(direction.labels, direction.ip_label),
                legend_format=DEVICE_LEGEND,
                instant=True,
            )
        ],
        unit=Unit.BYTES_SI,
    )


def total_bytes_by_local_ip_bar_gauge_panel(direction: TrafficDirection) -> PanelSpec:
    return new_bar_gauge_panel(
        title=f"Total Bytes {direction.name}ed - by local IP (bar gauge)",
        targets=[
            Target(
                expr=queries.build_traffic_query(direction.labels, direction.ip_label),
                legend_format=DEVICE_LEGEND,
                instant=True,
            )
        ],
        unit=Unit.BYTES_SI,
        thresholds=GREEN_BASE,
    )


def _ip_label(direction: TrafficDirection, is_internet_total_graph: bool) -> str:
    # Internet totals aggregate on the remote side, which is always "internet".
    return direction.remote_label if is_internet_total_graph else direction.ip_label


def total_bytes_timeseries_panel(
    title: str,
    direction: TrafficDirection,
    is_internet_total_graph: bool = False,
) -> PanelSpec:
    return new_timeseries_panel(
        title=title,
        targets=[
            Target(
                expr=queries.build_traffic_query(
                    direction.labels,
                    _ip_label(direction, is_internet_total_graph),
                    window=queries.INTERVAL,
                    func=queries.INCREASE,
                    include_device_join=not is_internet_total_graph,
                ),
                legend_format=INTERNET_LEGEND if is_internet_total_graph else DEVICE_LEGEND,
            )
        ],
        unit=Unit.BYTES_SI,
        thresholds=GREEN_BASE,
        draw_style=DrawStyle.BARS,
        legend=Legend(calcs=("sum",), placement="bottom"),
    )


def data_rate_timeseries_panel(
    title: str,
    direction: TrafficDirection,
    is_internet_total_graph: bool = False,
) -> PanelSpec:
    return new_timeseries_panel(
        title=title,
        targets=[
            Target(
                expr=queries.build_traffic_query(
                    direction.labels,
                    _ip_label(direction, is_internet_total_graph),
                    window=queries.RATE_INTERVAL,
                    func=queries.RATE,
                    include_device_join=not is_internet_total_graph,
                ),
                legend_format=INTERNET_LEGEND if is_internet_total_graph else DEVICE_LEGEND,
            )
        ],
        unit=Unit.BYTES_PER_SEC_SI,
        thresholds=GREEN_BASE,
        legend=Legend(calcs=("mean", "min", "max"), placement="bottom"),
    )


def network_traffic_rows() -> List[PanelRow]:
    return [
        new_panel_row(
            [
                total_bytes_by_local_ip_pie_chart_panel(DOWNLOAD),
                total_bytes_by_local_ip_pie_chart_panel(UPLOAD),
            ],
            height=12,
        ),
        new_panel_row(
            [
                total_bytes_by_local_ip_bar_gauge_panel(DOWNLOAD),
                total_bytes_by_local_ip_bar_gauge_panel(UPLOAD),
            ],
            height=12,
        ),
        new_panel_row(
            [
                total_bytes_timeseries_panel("Total bytes downloaded - by local IP", DOWNLOAD),
                total_bytes_timeseries_panel("Total bytes uploaded - by local IP", UPLOAD),
                data_rate_timeseries_panel("Download Data Rate - by local IP", DOWNLOAD),
                data_rate_timeseries_panel("Upload Data Rate - by local IP", UPLOAD),
            ],
            height=12,
        ),
        new_panel_row(
            [
                total_bytes_timeseries_panel("Total bytes downloaded", DOWNLOAD, is_internet_total_graph=True),
                total_bytes_timeseries_panel("Total bytes uploaded", UPLOAD, is_internet_total_graph=True),
                data_rate_timeseries_panel("Download Data Rate", DOWNLOAD, is_internet_total_graph=True),
                data_rate_timeseries_panel("Upload Data Rate", UPLOAD, is_internet_total_graph=True),
            ],
            height=10,
        ),
    ]


# Overview


def overview_panels() -> List[PanelSpec]:
    return [
        new_stat_panel(
            title="Internet",
            targets=[Target(queries.connection_up_query())],
            unit=Unit.SHORT,
            mappings=[ValueText("0", "Down"), ValueText("1", "Up")],
            thresholds=Thresholds.of(("red", None), ("green", 1)),
        ),
        new_stat_panel(
            title="Internet Downtime",
            targets=[Target(queries.downtime_query())],
            unit=Unit.SECONDS,
            thresholds=Thresholds.of(("green", None), ("red", 1)),
        ),
        new_stat_panel(
            title="Average Connection Latency",
            targets=[Target(queries.average_latency_query())],
            unit=Unit.SECONDS,
            reduce_calc="mean",
            thresholds=Thresholds.of(("green", None), ("#EAB839", 0.1), ("red", 0.2)),
        ),
        new_stat_panel(
            title="Max Connection Latency",
            targets=[Target(queries.latency_quantile_query("0.99"))],
            unit=Unit.SECONDS,
            reduce_calc="max",
            thresholds=Thresholds.of(("green", None), ("#EAB839", 0.5), ("red", 1)),
        ),
        new_stat_panel(
            title="No. of devices",
            description="Number of devices connected",
            targets=[Target(queries.device_count_query())],
            unit=Unit.SHORT,
        ),
        new_stat_panel(
            title="No. of DHCP leases",
            description="Number of DHCP leases handed out by dnsmasq",
            targets=[Target(queries.lease_count_query())],
            unit=Unit.SHORT,
        ),
        new_bar_gauge_panel(
            title="Bandwidth Usage",
            targets=[
                Target(queries.bandwidth_usage_query(DOWNLOAD), legend_format=DOWNLOAD.name),
                Target(queries.bandwidth_usage_query(UPLOAD), legend_format=UPLOAD.name),
            ],
            unit=Unit.BYTES_SI,
            overrides=[color_override(UPLOAD.name, "blue"), color_override(DOWNLOAD.name, "green")],
        ),
    ]


def connection_latency_panel() -> PanelSpec:
    return new_timeseries_panel(
        title="Connection Latency",
        targets=[
            Target(queries.average_latency_query(separator="/\n"), legend_format="average"),
            Target(queries.connection_down_query(), legend_format="down"),
            Target(queries.latency_quantile_query("0.95"), legend_format="95p"),
            Target(queries.latency_quantile_query("0.50"), legend_format="50p"),
        ],
        unit=Unit.SECONDS,
        legend=Legend(calcs=(), display_mode="list"),
        overrides=[
            FieldOverride(
                "down",
                (
                    ("color", {"mode": "fixed", "fixedColor": "red"}),
                    ("custom.drawStyle", "bars"),
                    ("custom.fillOpacity", 100),
                    ("custom.lineWidth", 0),
                    ("max", 1),
                    ("unit", Unit.SHORT.value),
                ),
            )
        ],
    )


def connected_devices_panel() -> PanelSpec:
    return new_table_panel(
        title="Connected Devices",
        targets=[Target(queries.connected_devices_query(), instant=True, table_format=True)],
        overrides=[
            FieldOverride(
                "Flags",
                (
                    (
                        "mappings",
                        [
                            {
                                "type": "value",
                                "options": {
                                    "0x0": {"text": "INVALID", "color": "red", "index": 0},
                                    "0x2": {"text": "VALID", "color": "green", "index": 1},
                                },
                            }
                        ],
                    ),
                    ("custom.cellOptions", {"type": "color-background"}),
                ),
            )
        ],
        transformations=[
            organize(
                exclude=["Value", "Time"],
                order=["flags", "hostname", "ip_addr", "hw_addr", "device"],
                rename={
                    "hostname": "Hostname",
                    "device": "Interface",
                    "hw_addr": "Mac Address",
                    "ip_addr": "IP Address",
                    "flags": "Flags",
                },
            )
        ],
    )


def dhcp_leases_panel() -> PanelSpec:
    return new_table_panel(
        title="DHCP Leases",
        targets=[Target(queries.dhcp_leases_query(), instant=True, table_format=True)],
        overrides=[FieldOverride("Expires", (("unit", Unit.DATE_TIME_ISO.value),))],
        transformations=[
            organize(
                exclude=["Time", "__name__"],
                order=["devicename", "ip", "mac", "Value"],
                rename={
                    "devicename": "Hostname",
                    "ip": "IP Address",
                    "mac": "Mac Address",
                    "Value": "Expires",
                },
            )
        ],
    )


def dashboard_panels() -> List[PanelRowOrGroup]:
    """All rows and groups of the dashboard, top to bottom."""
    return [
        new_panel_group("Overview", [new_panel_row(overview_panels(), height=3)]),
        new_panel_row([connection_latency_panel()], height=6),
        new_panel_row([connected_devices_panel(), dhcp_leases_panel()], height=12),
        new_panel_group("Network Traffic", network_traffic_rows()),
    ]


def assemble_dashboard(
    panel_groups: Sequence[PanelRowOrGroup],
    template_variables: Sequence[TemplateVariable] = TEMPLATE_VARIABLES,
    time_range: TimeRange = TimeRange(),
) -> dashboard_models.Dashboard:
    """
    Lay out the panels and wrap them in the dashboard model.

    Deterministic: the same inputs always produce the same model.
    """
    layout = auto_layout(panel_groups)
    model = SDKAdapter.create_dashboard(
        title=DASHBOARD_TITLE,
        uid=DASHBOARD_UID,
        description=DASHBOARD_DESCRIPTION,
        tags=DASHBOARD_TAGS,
        time_range=time_range,
        layout=layout,
        variables=template_variables,
        variable_datasource=PROMETHEUS_DATASOURCE,
    )
    logger.debug("dashboard_assembled", uid=DASHBOARD_UID, items=len(layout))
    return model


def build_router_monitor_dashboard() -> dashboard_models.Dashboard:
    return assemble_dashboard(dashboard_panels())


def traffic_queries() -> List[Tuple[str, str]]:
    """(title, expr) for every network traffic panel."""
    result = []
    for row in network_traffic_rows():
        for panel in row.panels:
            for expr in panel.exprs:
                result.append((panel.title, expr))
    return result
