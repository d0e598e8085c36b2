"""Dashboard panel models.

Typed, immutable descriptions of what each panel shows. The composer builds
these, and the SDK adapter turns them into Grafana Foundation SDK objects.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Unit(str, Enum):
    """Grafana display units used by this dashboard."""

    BYTES_SI = "decbytes"
    BYTES_PER_SEC_SI = "Bps"
    SECONDS = "s"
    SHORT = "short"
    DATE_TIME_ISO = "dateTimeAsIso"


class PanelKind(str, Enum):
    """Panel visualizations the composer knows how to build."""

    STAT = "stat"
    TIMESERIES = "timeseries"
    TABLE = "table"
    BAR_GAUGE = "bargauge"
    PIE_CHART = "piechart"


class Orientation(str, Enum):
    AUTO = "auto"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class DrawStyle(str, Enum):
    LINE = "line"
    BARS = "bars"
    POINTS = "points"


@dataclass(frozen=True)
class Target:
    """Prometheus query target for a panel."""

    expr: str
    legend_format: Optional[str] = None
    instant: bool = False
    table_format: bool = False


@dataclass(frozen=True)
class Threshold:
    color: str
    value: Optional[float] = None


@dataclass(frozen=True)
class Thresholds:
    """Absolute-mode threshold steps. The first step must have no value."""

    steps: Tuple[Threshold, ...]

    @classmethod
    def of(cls, *steps: Tuple[str, Optional[float]]) -> "Thresholds":
        return cls(tuple(Threshold(color, value) for color, value in steps))


@dataclass(frozen=True)
class ValueText:
    """Maps a raw value to display text (and optionally a colour)."""

    value: str
    text: str
    color: Optional[str] = None


@dataclass(frozen=True)
class FieldOverride:
    """Override properties for the field matching ``name``."""

    name: str
    properties: Tuple[Tuple[str, Any], ...]


@dataclass(frozen=True)
class Transformation:
    id: str
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Legend:
    calcs: Tuple[str, ...] = ()
    placement: str = "bottom"
    display_mode: str = "list"


@dataclass(frozen=True)
class PanelSpec:
    """Everything needed to render one panel.

    Created by the ``new_*_panel`` helpers and only read afterwards.
    """

    kind: PanelKind
    title: str
    targets: Tuple[Target, ...]
    unit: Unit = Unit.SHORT
    description: Optional[str] = None
    thresholds: Optional[Thresholds] = None
    mappings: Tuple[ValueText, ...] = ()
    overrides: Tuple[FieldOverride, ...] = ()
    transformations: Tuple[Transformation, ...] = ()
    orientation: Optional[Orientation] = None
    legend: Optional[Legend] = None
    draw_style: Optional[DrawStyle] = None
    reduce_calc: Optional[str] = None
    cell_height: Optional[str] = None

    @property
    def exprs(self) -> List[str]:
        return [t.expr for t in self.targets]


@dataclass(frozen=True)
class TemplateVariable:
    """Dashboard template variable."""

    name: str
    label: str
    var_type: str = "query"  # query or datasource
    query: Optional[str] = None
    datasource_type: Optional[str] = None
    multi: bool = False
    include_all: bool = False


@dataclass(frozen=True)
class TimeRange:
    time_from: str = "now-24h"
    time_to: str = "now"
