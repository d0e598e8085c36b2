"""Tests for the Router Monitor dashboard composition."""

import pytest

from router_dashboard.dashboards import router_monitor
from router_dashboard.dashboards.layout import GRID_WIDTH, PanelGroup, PanelRow
from router_dashboard.dashboards.models import DrawStyle, PanelKind, Unit
from router_dashboard.dashboards.queries import DOWNLOAD, UPLOAD
from router_dashboard.dashboards.router_monitor import (
    DEVICE_LEGEND,
    INTERNET_LEGEND,
    build_router_monitor_dashboard,
    dashboard_panels,
    data_rate_timeseries_panel,
    network_traffic_rows,
    overview_panels,
    total_bytes_by_local_ip_bar_gauge_panel,
    total_bytes_by_local_ip_pie_chart_panel,
    total_bytes_timeseries_panel,
    traffic_queries,
)
from router_dashboard.dashboards.sdk_adapter import SDKAdapter


@pytest.fixture(scope="module")
def dashboard_json():
    return SDKAdapter.to_dict(build_router_monitor_dashboard())


def flatten(panels):
    for panel in panels:
        yield panel
        yield from panel.get("panels") or []


def by_title(dashboard_json, title):
    matches = [p for p in flatten(dashboard_json["panels"]) if p.get("title") == title]
    assert len(matches) == 1, title
    return matches[0]


class TestTrafficPanels:
    """Tests for the network traffic panel helpers."""

    @pytest.mark.parametrize("direction", [DOWNLOAD, UPLOAD])
    def test_pie_chart(self, direction):
        panel = total_bytes_by_local_ip_pie_chart_panel(direction)

        assert panel.kind == PanelKind.PIE_CHART
        assert panel.title == f"Total Bytes {direction.name}ed - by local IP (pie chart)"
        assert panel.unit == Unit.BYTES_SI
        target = panel.targets[0]
        assert target.instant
        assert target.legend_format == DEVICE_LEGEND
        assert "increase(" in target.expr and "[$__range]" in target.expr
        assert "router_monitor_arp_devices" in target.expr

    @pytest.mark.parametrize("direction", [DOWNLOAD, UPLOAD])
    def test_bar_gauge(self, direction):
        panel = total_bytes_by_local_ip_bar_gauge_panel(direction)

        assert panel.kind == PanelKind.BAR_GAUGE
        assert panel.title.endswith("(bar gauge)")
        assert panel.unit == Unit.BYTES_SI
        assert panel.targets[0].instant

    def test_total_bytes_by_local_ip(self):
        panel = total_bytes_timeseries_panel("Total bytes downloaded - by local IP", DOWNLOAD)

        assert panel.kind == PanelKind.TIMESERIES
        assert panel.unit == Unit.BYTES_SI
        assert panel.draw_style == DrawStyle.BARS
        assert panel.legend.calcs == ("sum",)
        expr = panel.targets[0].expr
        assert "increase(" in expr and "[$__interval]" in expr
        assert "sum by(dst)" in expr
        assert "router_monitor_arp_devices" in expr
        assert panel.targets[0].legend_format == DEVICE_LEGEND

    def test_data_rate_by_local_ip(self):
        panel = data_rate_timeseries_panel("Upload Data Rate - by local IP", UPLOAD)

        assert panel.unit == Unit.BYTES_PER_SEC_SI
        assert panel.legend.calcs == ("mean", "min", "max")
        expr = panel.targets[0].expr
        assert "rate(" in expr and "[$__rate_interval]" in expr
        assert "increase(" not in expr
        assert "sum by(src)" in expr

    @pytest.mark.parametrize("direction", [DOWNLOAD, UPLOAD])
    def test_internet_totals_skip_device_join(self, direction):
        for panel in (
            total_bytes_timeseries_panel("t", direction, is_internet_total_graph=True),
            data_rate_timeseries_panel("r", direction, is_internet_total_graph=True),
        ):
            expr = panel.targets[0].expr
            assert "router_monitor_arp_devices" not in expr
            assert "router_monitor_hostnames" not in expr
            assert f"sum by({direction.remote_label})" in expr
            assert panel.targets[0].legend_format == INTERNET_LEGEND

    def test_units_match_aggregation(self):
        for row in network_traffic_rows():
            for panel in row.panels:
                expr = panel.targets[0].expr
                if "increase(" in expr:
                    assert panel.unit == Unit.BYTES_SI, panel.title
                else:
                    assert "rate(" in expr
                    assert panel.unit == Unit.BYTES_PER_SEC_SI, panel.title

    def test_row_sizes(self):
        rows = network_traffic_rows()

        assert [len(r.panels) for r in rows] == [2, 2, 4, 4]
        assert [r.height for r in rows] == [12, 12, 12, 10]

    def test_traffic_queries(self):
        pairs = traffic_queries()

        assert len(pairs) == 12
        assert pairs[0][0] == "Total Bytes Downloaded - by local IP (pie chart)"
        assert all("router_monitor_bytes_total" in expr for _, expr in pairs)


class TestOverview:
    def test_titles(self):
        assert [p.title for p in overview_panels()] == [
            "Internet",
            "Internet Downtime",
            "Average Connection Latency",
            "Max Connection Latency",
            "No. of devices",
            "No. of DHCP leases",
            "Bandwidth Usage",
        ]

    def test_internet_up_down_mapping(self):
        internet = overview_panels()[0]
        assert {(m.value, m.text) for m in internet.mappings} == {("0", "Down"), ("1", "Up")}

    def test_bandwidth_usage(self):
        panel = overview_panels()[-1]

        assert panel.kind == PanelKind.BAR_GAUGE
        assert [t.legend_format for t in panel.targets] == ["Download", "Upload"]
        assert {o.name for o in panel.overrides} == {"Download", "Upload"}


class TestDashboardPanels:
    def test_structure(self):
        items = dashboard_panels()

        assert isinstance(items[0], PanelGroup) and items[0].title == "Overview"
        assert isinstance(items[1], PanelRow)
        assert isinstance(items[2], PanelRow)
        assert isinstance(items[3], PanelGroup) and items[3].title == "Network Traffic"


class TestBuildRouterMonitorDashboard:
    """Tests for the generated dashboard JSON."""

    def test_metadata(self, dashboard_json):
        assert dashboard_json["uid"] == "router-monitor"
        assert dashboard_json["title"] == "Router Monitor"
        assert dashboard_json["tags"] == ["router-monitor"]
        assert dashboard_json["time"] == {"from": "now-24h", "to": "now"}

    def test_template_variables(self, dashboard_json):
        variables = dashboard_json["templating"]["list"]

        assert [v["name"] for v in variables] == ["DS_PROMETHEUS", "localips", "instance"]
        localips = variables[1]
        assert localips["multi"] is True
        assert localips["includeAll"] is True

    def test_panel_ids_unique(self, dashboard_json):
        ids = [p["id"] for p in flatten(dashboard_json["panels"])]
        assert len(ids) == len(set(ids))

    def test_panels_within_grid(self, dashboard_json):
        for panel in flatten(dashboard_json["panels"]):
            grid = panel["gridPos"]
            assert grid["x"] >= 0
            assert grid["x"] + grid["w"] <= GRID_WIDTH

    def test_row_panels_fill_width(self, dashboard_json):
        widths = {}
        for panel in dashboard_json["panels"]:
            if panel["type"] != "row":
                widths.setdefault(panel["gridPos"]["y"], 0)
                widths[panel["gridPos"]["y"]] += panel["gridPos"]["w"]
        assert set(widths.values()) == {GRID_WIDTH}

    def test_every_query_panel_uses_prometheus_variable(self, dashboard_json):
        for panel in flatten(dashboard_json["panels"]):
            if panel["type"] != "row":
                assert panel["datasource"]["uid"] == "${DS_PROMETHEUS}"

    def test_template_tokens_survive_serialization(self):
        text = SDKAdapter.serialize_dashboard(build_router_monitor_dashboard())

        for token in ("$localips", "$instance", "$__range", "$__interval", "$__rate_interval", "{{ hostname }}"):
            assert token in text

    def test_deterministic(self):
        first = SDKAdapter.serialize_dashboard(build_router_monitor_dashboard())
        second = SDKAdapter.serialize_dashboard(build_router_monitor_dashboard())
        assert first == second

    def test_units(self, dashboard_json):
        def unit(title):
            return by_title(dashboard_json, title)["fieldConfig"]["defaults"]["unit"]

        assert unit("Total bytes downloaded") == "decbytes"
        assert unit("Download Data Rate") == "Bps"
        assert unit("Internet Downtime") == "s"
        assert unit("No. of devices") == "short"

    def test_tables(self, dashboard_json):
        devices = by_title(dashboard_json, "Connected Devices")
        leases = by_title(dashboard_json, "DHCP Leases")

        assert devices["type"] == leases["type"] == "table"
        assert devices["targets"][0]["format"] == "table"
        rename = leases["transformations"][0]["options"]["renameByName"]
        assert rename["Value"] == "Expires"

    def test_assemble_uses_given_groups(self):
        model = router_monitor.assemble_dashboard([PanelRow(tuple(overview_panels()[:2]), height=3)])
        data = SDKAdapter.to_dict(model)

        assert [p["title"] for p in data["panels"]] == ["Internet", "Internet Downtime"]
        assert [p["gridPos"]["w"] for p in data["panels"]] == [12, 12]
