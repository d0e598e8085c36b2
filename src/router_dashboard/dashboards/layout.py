"""Grid layout for rows and groups of panels.

Grafana places panels on a 24-column grid. ``auto_layout`` walks the rows and
groups in order and gives every panel an id and a non-overlapping position.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from router_dashboard.dashboards.models import PanelSpec

GRID_WIDTH = 24
ROW_HEADER_HEIGHT = 1

PROMETHEUS_DATASOURCE = "${DS_PROMETHEUS}"


@dataclass(frozen=True)
class PanelRow:
    """Panels shown side by side, sharing one height."""

    panels: Tuple[PanelSpec, ...]
    height: int = 8
    datasource: str = PROMETHEUS_DATASOURCE


@dataclass(frozen=True)
class PanelGroup:
    """A titled dashboard row holding one or more panel rows."""

    title: str
    rows: Tuple[PanelRow, ...]
    collapsed: bool = False


PanelRowOrGroup = Union[PanelRow, PanelGroup]


@dataclass(frozen=True)
class GridPosition:
    x: int
    y: int
    w: int
    h: int


@dataclass(frozen=True)
class PlacedPanel:
    id: int
    spec: PanelSpec
    grid: GridPosition
    datasource: str


@dataclass(frozen=True)
class PlacedRow:
    id: int
    title: str
    grid: GridPosition
    collapsed: bool = False
    panels: Tuple[PlacedPanel, ...] = ()


LayoutItem = Union[PlacedPanel, PlacedRow]


def new_panel_row(panels: Sequence[PanelSpec], height: int = 8, datasource: Optional[str] = None) -> PanelRow:
    return PanelRow(tuple(panels), height, datasource or PROMETHEUS_DATASOURCE)


def new_panel_group(title: str, rows: Sequence[PanelRow], collapsed: bool = False) -> PanelGroup:
    return PanelGroup(title, tuple(rows), collapsed)


def column_widths(count: int) -> List[int]:
    """Split the grid width across ``count`` panels.

    Leftover columns go one each to the leftmost panels.
    """
    if count <= 0:
        return []
    base, extra = divmod(GRID_WIDTH, count)
    return [base + 1 if i < extra else base for i in range(count)]


class _Placer:
    def __init__(self) -> None:
        self.next_id = 1
        self.y = 0

    def take_id(self) -> int:
        panel_id = self.next_id
        self.next_id += 1
        return panel_id

    def place_row(self, row: PanelRow, y: int) -> List[PlacedPanel]:
        placed = []
        x = 0
        for spec, width in zip(row.panels, column_widths(len(row.panels))):
            placed.append(
                PlacedPanel(
                    id=self.take_id(),
                    spec=spec,
                    grid=GridPosition(x=x, y=y, w=width, h=row.height),
                    datasource=row.datasource,
                )
            )
            x += width
        return placed


def auto_layout(items: Sequence[PanelRowOrGroup]) -> List[LayoutItem]:
    """Assign ids and grid positions, top to bottom.

    Panels of a collapsed group are nested inside its row item and do not
    take vertical space on the dashboard.
    """
    placer = _Placer()
    result: List[LayoutItem] = []

    for item in items:
        if isinstance(item, PanelRow):
            result.extend(placer.place_row(item, placer.y))
            placer.y += item.height
            continue

        row_id = placer.take_id()
        row_grid = GridPosition(x=0, y=placer.y, w=GRID_WIDTH, h=ROW_HEADER_HEIGHT)
        placer.y += ROW_HEADER_HEIGHT

        if item.collapsed:
            nested: List[PlacedPanel] = []
            y = placer.y
            for row in item.rows:
                nested.extend(placer.place_row(row, y))
                y += row.height
            result.append(PlacedRow(row_id, item.title, row_grid, True, tuple(nested)))
            continue

        result.append(PlacedRow(row_id, item.title, row_grid))
        for row in item.rows:
            result.extend(placer.place_row(row, placer.y))
            placer.y += row.height

    return result
