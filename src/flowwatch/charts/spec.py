"""
Renderer-agnostic chart specification records.

A ChartSpec is fully resolved: every axis, series, legend, tooltip, and color is a
concrete value, so a rendering consumer needs nothing else. Heatmap cells carry their
own label and tooltip text.

``ChartSpec.freshness`` is the only field that differs between two builds from the
same inputs; it exists to force a redraw downstream. Compare specs with
``ChartSpec.content()``.
"""

from __future__ import annotations

import itertools
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from flowwatch.models import Severity

__all__ = [
    "ChartKind",
    "TextStyle",
    "Tooltip",
    "Legend",
    "GridBox",
    "SplitLine",
    "SplitArea",
    "Axis",
    "SeriesLabel",
    "AreaFill",
    "HeatmapCell",
    "Series",
    "VisualPiece",
    "VisualMap",
    "Freshness",
    "ChartSpec",
    "next_freshness_token",
]


class ChartKind(Enum):
    HEATMAP = "heatmap"
    BAR = "bar"
    LINE = "line"


_FRESHNESS = itertools.count(1)


def next_freshness_token() -> int:
    return next(_FRESHNESS)


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class TextStyle(_Record):
    font_family: str
    color: str
    font_size: int


class Tooltip(_Record):
    trigger: Literal["item", "axis"] = "item"
    background_color: str
    border_color: str
    border_width: int = 1
    text_color: str
    padding: int = 12
    border_radius: int = 8


class Legend(_Record):
    show: bool = True
    data: list[str] = Field(default_factory=list)
    text_color: str
    top: int = 10


class GridBox(_Record):
    left: str
    right: str
    top: str
    bottom: str
    contain_label: bool = False


class SplitLine(_Record):
    show: bool = False
    color: str = "transparent"
    style: Literal["dashed", "solid"] = "dashed"


class SplitArea(_Record):
    show: bool = True
    colors: tuple[str, str]


class Axis(_Record):
    """
    One chart axis.

    Attributes:
        type: "category" axes list their labels in ``data``; "value" axes are continuous.
        boundary_gap: For category axes, False anchors points on grid lines instead of
            centering them between lines.
    """

    type: Literal["category", "value"]
    name: str | None = None
    position: Literal["left", "right", "bottom"] = "bottom"
    data: list[str] = Field(default_factory=list)
    boundary_gap: bool = True
    label_color: str
    label_font_size: int
    label_rotate: int = 0
    line_color: str
    show_line: bool = True
    split_line: SplitLine = Field(default_factory=SplitLine)
    split_area: SplitArea | None = None


class SeriesLabel(_Record):
    show: bool = False
    color: str = "inherit"
    font_size: int = 12
    position: Literal["top", "inside"] = "inside"


class AreaFill(_Record):
    """Vertical linear gradient under a line, ``color_from`` at the top."""

    color_from: str
    color_to: str


class HeatmapCell(_Record):
    """
    One cell of the 24 x 4 heatmap grid.

    Attributes:
        value: Count, or None when no point backs the cell (drawn empty, not as zero).
        color: Severity tier color, or None for empty cells.
        label: Text drawn in the cell ("" for empty and zero cells).
        tooltip: Hover text ("No data" for empty and zero cells).
    """

    hour: int
    severity: Severity
    severity_index: int
    value: int | None = None
    color: str | None = None
    label: str = ""
    tooltip: str

    @property
    def empty(self) -> bool:
        return self.value is None


class Series(_Record):
    name: str
    type: Literal["bar", "line", "heatmap"]
    y_axis_index: int = 0
    data: list[float] = Field(default_factory=list)
    cells: list[HeatmapCell] = Field(default_factory=list)
    color: str
    smooth: bool = False
    symbol: Literal["circle", "none"] = "none"
    symbol_size: int = 0
    line_width: int = 0
    border_radius: int = 0
    border_color: str | None = None
    border_width: int = 0
    bar_max_width: int | None = None
    label: SeriesLabel = Field(default_factory=SeriesLabel)
    area: AreaFill | None = None


class VisualPiece(_Record):
    value: int
    label: str
    color: str


class VisualMap(_Record):
    """Piecewise color key keyed on the severity index dimension of heatmap cells."""

    type: Literal["piecewise"] = "piecewise"
    dimension: int = 1
    show: bool = True
    pieces: list[VisualPiece]
    text_color: str
    orient: Literal["horizontal", "vertical"] = "horizontal"
    selected_mode: Literal["multiple", "single"] = "multiple"


class Freshness(_Record):
    theme_key: str
    token: int


class ChartSpec(_Record):
    """Complete chart description handed to a rendering consumer."""

    kind: ChartKind
    background_color: str
    text_style: TextStyle
    tooltip: Tooltip
    legend: Legend | None = None
    grid: GridBox
    x_axis: Axis
    y_axes: list[Axis]
    series: list[Series]
    visual_map: VisualMap | None = None
    freshness: Freshness

    @property
    def y_axis(self) -> Axis:
        return self.y_axes[0]

    def series_named(self, name: str) -> Series | None:
        return next((s for s in self.series if s.name == name), None)

    def content(self) -> dict[str, Any]:
        """Plain record without the freshness marker, for equality checks."""
        return self.model_dump(mode="json", exclude={"freshness"})
