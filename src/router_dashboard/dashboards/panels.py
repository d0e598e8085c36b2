"""Panel builder helpers.

Each helper returns an immutable :class:`PanelSpec` with the defaults this
dashboard uses for that visualization. ``build_panel`` dispatches by kind.
"""

from typing import Any, Dict, Iterable, Optional, Sequence

from router_dashboard.dashboards.models import (
    DrawStyle,
    FieldOverride,
    Legend,
    Orientation,
    PanelKind,
    PanelSpec,
    Target,
    Thresholds,
    Transformation,
    Unit,
    ValueText,
)

GREEN_BASE = Thresholds.of(("green", None))


def _targets(targets: Iterable[Target]) -> tuple:
    return tuple(targets)


def new_stat_panel(
    title: str,
    targets: Sequence[Target],
    unit: Unit = Unit.SHORT,
    thresholds: Optional[Thresholds] = None,
    description: Optional[str] = None,
    mappings: Sequence[ValueText] = (),
    reduce_calc: Optional[str] = None,
) -> PanelSpec:
    return PanelSpec(
        kind=PanelKind.STAT,
        title=title,
        targets=_targets(targets),
        unit=unit,
        description=description,
        thresholds=thresholds,
        mappings=tuple(mappings),
        reduce_calc=reduce_calc,
    )


def new_timeseries_panel(
    title: str,
    targets: Sequence[Target],
    unit: Unit = Unit.SHORT,
    thresholds: Optional[Thresholds] = None,
    description: Optional[str] = None,
    legend: Optional[Legend] = None,
    draw_style: Optional[DrawStyle] = None,
    overrides: Sequence[FieldOverride] = (),
) -> PanelSpec:
    return PanelSpec(
        kind=PanelKind.TIMESERIES,
        title=title,
        targets=_targets(targets),
        unit=unit,
        description=description,
        thresholds=thresholds,
        legend=legend,
        draw_style=draw_style,
        overrides=tuple(overrides),
    )


def new_table_panel(
    title: str,
    targets: Sequence[Target],
    unit: Unit = Unit.SHORT,
    description: Optional[str] = None,
    overrides: Sequence[FieldOverride] = (),
    transformations: Sequence[Transformation] = (),
    cell_height: Optional[str] = "sm",
) -> PanelSpec:
    return PanelSpec(
        kind=PanelKind.TABLE,
        title=title,
        targets=_targets(targets),
        unit=unit,
        description=description,
        overrides=tuple(overrides),
        transformations=tuple(transformations),
        cell_height=cell_height,
    )


def new_bar_gauge_panel(
    title: str,
    targets: Sequence[Target],
    unit: Unit = Unit.SHORT,
    thresholds: Optional[Thresholds] = None,
    description: Optional[str] = None,
    orientation: Orientation = Orientation.HORIZONTAL,
    overrides: Sequence[FieldOverride] = (),
) -> PanelSpec:
    return PanelSpec(
        kind=PanelKind.BAR_GAUGE,
        title=title,
        targets=_targets(targets),
        unit=unit,
        description=description,
        thresholds=thresholds,
        orientation=orientation,
        overrides=tuple(overrides),
    )


def new_pie_chart_panel(
    title: str,
    targets: Sequence[Target],
    unit: Unit = Unit.SHORT,
    description: Optional[str] = None,
    legend: Optional[Legend] = None,
) -> PanelSpec:
    return PanelSpec(
        kind=PanelKind.PIE_CHART,
        title=title,
        targets=_targets(targets),
        unit=unit,
        description=description,
        legend=legend,
    )


_BUILDERS = {
    PanelKind.STAT: new_stat_panel,
    PanelKind.TIMESERIES: new_timeseries_panel,
    PanelKind.TABLE: new_table_panel,
    PanelKind.BAR_GAUGE: new_bar_gauge_panel,
    PanelKind.PIE_CHART: new_pie_chart_panel,
}


def build_panel(
    kind: PanelKind,
    title: str,
    targets: Sequence[Target],
    unit: Unit = Unit.SHORT,
    thresholds: Optional[Thresholds] = None,
    **options: Any,
) -> PanelSpec:
    """Build a panel of any kind.

    ``options`` are passed through to the kind-specific helper, so only the
    options that visualization supports are accepted.
    """
    builder = _BUILDERS[PanelKind(kind)]
    if thresholds is not None:
        options["thresholds"] = thresholds
    return builder(title, targets, unit=unit, **options)


def color_override(name: str, color: str) -> FieldOverride:
    """Fix the colour of the series called ``name``."""
    return FieldOverride(name, (("color", {"mode": "fixed", "fixedColor": color}),))


def table_exclude_by_name(names: Iterable[str]) -> Dict[str, bool]:
    return {name: True for name in names}


def table_index_by_name(names: Iterable[str]) -> Dict[str, int]:
    return {name: index for index, name in enumerate(names)}


def organize(
    exclude: Iterable[str] = (),
    order: Iterable[str] = (),
    rename: Optional[Dict[str, str]] = None,
) -> Transformation:
    """Grafana ``organize`` transformation: hide, reorder and rename columns."""
    return Transformation(
        "organize",
        {
            "excludeByName": table_exclude_by_name(exclude),
            "indexByName": table_index_by_name(order),
            "renameByName": dict(rename or {}),
        },
    )
