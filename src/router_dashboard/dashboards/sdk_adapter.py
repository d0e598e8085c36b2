"""
SDK Adapter - Bridge between panel specs and the Grafana Foundation SDK.

Converts the immutable specs produced by the composer into Grafana Foundation
SDK builders, and serializes the resulting dashboard model to Grafana JSON.
"""

import json
from typing import Any, Dict, List, Optional, Sequence

from grafana_foundation_sdk.builders import bargauge, piechart, prometheus, stat, table, timeseries
from grafana_foundation_sdk.builders.common import ReduceDataOptions, VizLegendOptions
from grafana_foundation_sdk.builders.dashboard import (
    Dashboard,
    DatasourceVariable,
    QueryVariable,
    Row,
    ThresholdsConfig,
)
from grafana_foundation_sdk.builders.piechart import PieChartLegendOptions
from grafana_foundation_sdk.cog.encoder import JSONEncoder
from grafana_foundation_sdk.models import dashboard as dashboard_models
from grafana_foundation_sdk.models.common import (
    GraphDrawStyle,
    LegendDisplayMode,
    LegendPlacement,
    TableCellHeight,
    VizOrientation,
)
from grafana_foundation_sdk.models.dashboard import (
    DashboardCursorSync,
    DataSourceRef,
    DataTransformerConfig,
    DynamicConfigValue,
    GridPos,
    Threshold,
    ThresholdsMode,
    ValueMap,
    ValueMappingResult,
    VariableRefresh,
)
from grafana_foundation_sdk.models.prometheus import PromQueryFormat

from router_dashboard.dashboards.layout import GridPosition, LayoutItem, PlacedPanel, PlacedRow
from router_dashboard.dashboards.models import (
    PanelKind,
    PanelSpec,
    Target,
    TemplateVariable,
    Thresholds,
    TimeRange,
)

_PANEL_BUILDERS = {
    PanelKind.STAT: stat.Panel,
    PanelKind.TIMESERIES: timeseries.Panel,
    PanelKind.TABLE: table.Panel,
    PanelKind.BAR_GAUGE: bargauge.Panel,
    PanelKind.PIE_CHART: piechart.Panel,
}

_REF_IDS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class SDKAdapter:
    """Adapter from router dashboard specs to Grafana Foundation SDK objects."""

    @staticmethod
    def datasource_ref(uid: str) -> DataSourceRef:
        return DataSourceRef(type_val="prometheus", uid=uid)

    @staticmethod
    def create_prometheus_query(target: Target, ref_id: str = "A") -> prometheus.Dataquery:
        """
        Create Prometheus query for panels.

        Args:
            target: Query target spec
            ref_id: Reference ID of the query within its panel

        Returns:
            Prometheus dataquery builder
        """
        query = prometheus.Dataquery()
        query.expr(target.expr)
        query.ref_id(ref_id)

        if target.legend_format:
            query.legend_format(target.legend_format)

        if target.instant:
            query.instant()

        if target.table_format:
            query.format(PromQueryFormat.TABLE)

        return query

    @staticmethod
    def create_thresholds(thresholds: Thresholds) -> ThresholdsConfig:
        return (
            ThresholdsConfig()
            .mode(ThresholdsMode.ABSOLUTE)
            .steps([Threshold(color=step.color, value=step.value) for step in thresholds.steps])
        )

    @staticmethod
    def create_panel(spec: PanelSpec) -> Any:
        """
        Create the SDK panel builder matching ``spec.kind``.

        Only options meaningful for the visualization are applied; the rest
        of the panel description is left at SDK defaults.
        """
        panel = _PANEL_BUILDERS[spec.kind]()
        panel.title(spec.title)
        panel.unit(spec.unit.value)

        if spec.description:
            panel.description(spec.description)

        for index, target in enumerate(spec.targets):
            panel.with_target(SDKAdapter.create_prometheus_query(target, _REF_IDS[index]))

        if spec.thresholds is not None:
            panel.thresholds(SDKAdapter.create_thresholds(spec.thresholds))

        if spec.mappings:
            panel.mappings(
                [
                    ValueMap(
                        options={
                            m.value: ValueMappingResult(text=m.text, color=m.color)
                            for m in spec.mappings
                        }
                    )
                ]
            )

        for override in spec.overrides:
            panel.override_by_name(
                override.name,
                [DynamicConfigValue(id_val=prop, value=value) for prop, value in override.properties],
            )

        for transformation in spec.transformations:
            panel.with_transformation(
                DataTransformerConfig(id_val=transformation.id, options=transformation.options)
            )

        if spec.orientation is not None:
            panel.orientation(VizOrientation(spec.orientation.value))

        if spec.reduce_calc:
            panel.reduce_options(ReduceDataOptions().calcs([spec.reduce_calc]))

        if spec.draw_style is not None:
            panel.draw_style(GraphDrawStyle(spec.draw_style.value))

        if spec.cell_height:
            panel.cell_height(TableCellHeight(spec.cell_height))

        if spec.legend is not None:
            legend_builder = PieChartLegendOptions if spec.kind == PanelKind.PIE_CHART else VizLegendOptions
            panel.legend(
                legend_builder()
                .show_legend(True)
                .calcs(list(spec.legend.calcs))
                .placement(LegendPlacement(spec.legend.placement))
                .display_mode(LegendDisplayMode(spec.legend.display_mode))
            )

        return panel

    @staticmethod
    def grid_pos(grid: GridPosition) -> GridPos:
        return GridPos(h=grid.h, w=grid.w, x=grid.x, y=grid.y)

    @staticmethod
    def create_placed_panel(placed: PlacedPanel) -> Any:
        panel = SDKAdapter.create_panel(placed.spec)
        panel.id(placed.id)
        panel.grid_pos(SDKAdapter.grid_pos(placed.grid))
        panel.datasource(SDKAdapter.datasource_ref(placed.datasource))
        return panel

    @staticmethod
    def create_row(placed: PlacedRow) -> Row:
        """
        Create a dashboard row.

        Panels of a collapsed row are nested inside it, as Grafana expects.
        """
        row = Row(placed.title)
        row.id(placed.id)
        row.grid_pos(SDKAdapter.grid_pos(placed.grid))
        row.collapsed(placed.collapsed)
        for panel in placed.panels:
            row.with_panel(SDKAdapter.create_placed_panel(panel))
        return row

    @staticmethod
    def create_variable(variable: TemplateVariable, datasource: Optional[str] = None) -> Any:
        if variable.var_type == "datasource":
            return (
                DatasourceVariable(variable.name)
                .label(variable.label)
                .type(variable.datasource_type or "prometheus")
            )

        query_variable = (
            QueryVariable(variable.name)
            .label(variable.label)
            .query(variable.query or "")
            .refresh(VariableRefresh.ON_DASHBOARD_LOAD)
            .multi(variable.multi)
            .include_all(variable.include_all)
        )
        if datasource:
            query_variable.datasource(SDKAdapter.datasource_ref(datasource))
        return query_variable

    @staticmethod
    def create_dashboard(
        title: str,
        uid: str,
        description: str,
        tags: Sequence[str],
        time_range: TimeRange,
        layout: Sequence[LayoutItem],
        variables: Sequence[TemplateVariable],
        variable_datasource: Optional[str] = None,
        version: int = 1,
    ) -> dashboard_models.Dashboard:
        """
        Create the dashboard model.

        Panels keep the positions computed by the layout; they are attached to
        the built model directly so the SDK does not re-flow them.
        """
        dash = (
            Dashboard(title)
            .uid(uid)
            .description(description)
            .tags(list(tags))
            .time(time_range.time_from, time_range.time_to)
            .timezone("browser")
            .editable()
        )
        for variable in variables:
            dash.with_variable(SDKAdapter.create_variable(variable, variable_datasource))

        model = dash.build()
        model.graph_tooltip = DashboardCursorSync.CROSSHAIR
        model.version = version

        panels: List[Any] = []
        for item in layout:
            if isinstance(item, PlacedRow):
                panels.append(SDKAdapter.create_row(item).build())
            else:
                panels.append(SDKAdapter.create_placed_panel(item).build())
        model.panels = panels

        return model

    @staticmethod
    def serialize_dashboard(model: dashboard_models.Dashboard) -> str:
        """
        Serialize dashboard to Grafana JSON.

        Args:
            model: Built dashboard model

        Returns:
            JSON string for Grafana import
        """
        encoder = JSONEncoder(sort_keys=False, indent=2)
        return encoder.encode(model)

    @staticmethod
    def to_dict(model: dashboard_models.Dashboard) -> Dict[str, Any]:
        return json.loads(SDKAdapter.serialize_dashboard(model))
