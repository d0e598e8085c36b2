"""Tests for panel builder helpers."""

import pytest

from router_dashboard.dashboards.models import (
    DrawStyle,
    Legend,
    Orientation,
    PanelKind,
    Target,
    Thresholds,
    Unit,
)
from router_dashboard.dashboards.panels import (
    GREEN_BASE,
    build_panel,
    color_override,
    new_bar_gauge_panel,
    new_table_panel,
    organize,
    table_exclude_by_name,
    table_index_by_name,
)

TARGETS = [Target("up"), Target("down")]


class TestBuildPanel:
    """Tests for build_panel dispatch."""

    @pytest.mark.parametrize("kind", list(PanelKind))
    def test_every_kind(self, kind):
        spec = build_panel(kind, "Title", TARGETS, Unit.BYTES_SI)

        assert spec.kind == kind
        assert spec.title == "Title"
        assert spec.unit == Unit.BYTES_SI
        assert spec.exprs == ["up", "down"]

    def test_accepts_kind_string(self):
        assert build_panel("piechart", "Pie", TARGETS).kind == PanelKind.PIE_CHART

    def test_unit_defaults_to_short(self):
        assert build_panel(PanelKind.STAT, "Stat", TARGETS).unit == Unit.SHORT

    def test_thresholds_passed_through(self):
        spec = build_panel(PanelKind.TIMESERIES, "TS", TARGETS, thresholds=GREEN_BASE)
        assert spec.thresholds == GREEN_BASE

    def test_kind_specific_options(self):
        spec = build_panel(
            PanelKind.TIMESERIES,
            "TS",
            TARGETS,
            draw_style=DrawStyle.BARS,
            legend=Legend(calcs=("sum",)),
        )

        assert spec.draw_style == DrawStyle.BARS
        assert spec.legend.calcs == ("sum",)

    def test_unsupported_option_rejected(self):
        with pytest.raises(TypeError):
            build_panel(PanelKind.PIE_CHART, "Pie", TARGETS, draw_style=DrawStyle.BARS)

    def test_targets_become_tuple(self):
        spec = build_panel(PanelKind.STAT, "Stat", TARGETS)
        assert isinstance(spec.targets, tuple)


class TestHelpers:
    def test_bar_gauge_defaults_horizontal(self):
        assert new_bar_gauge_panel("Gauge", TARGETS).orientation == Orientation.HORIZONTAL

    def test_table_defaults_small_cells(self):
        assert new_table_panel("Table", TARGETS).cell_height == "sm"

    def test_green_base(self):
        assert GREEN_BASE == Thresholds.of(("green", None))
        assert GREEN_BASE.steps[0].value is None

    def test_color_override(self):
        override = color_override("Upload", "blue")

        assert override.name == "Upload"
        assert override.properties == (("color", {"mode": "fixed", "fixedColor": "blue"}),)


class TestTableTransformations:
    def test_exclude_by_name(self):
        assert table_exclude_by_name(["Time", "Value"]) == {"Time": True, "Value": True}

    def test_index_by_name_follows_order(self):
        assert table_index_by_name(["b", "a", "c"]) == {"b": 0, "a": 1, "c": 2}

    def test_organize(self):
        transformation = organize(exclude=["Time"], order=["ip", "mac"], rename={"ip": "IP Address"})

        assert transformation.id == "organize"
        assert transformation.options == {
            "excludeByName": {"Time": True},
            "indexByName": {"ip": 0, "mac": 1},
            "renameByName": {"ip": "IP Address"},
        }

    def test_organize_defaults_empty(self):
        assert organize().options == {"excludeByName": {}, "indexByName": {}, "renameByName": {}}
