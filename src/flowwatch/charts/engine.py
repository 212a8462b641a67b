"""
Chart specification engine.

``build_spec`` maps a chart kind, a list of points, an optional partial ChartConfig,
and the active palette to a complete, renderer-agnostic ChartSpec. It is a pure
function of its inputs apart from the freshness token, and never mutates them.

Heatmap
- Always a full 24 x 4 grid, hour-major (hour 0 low, hour 0 medium, ...).
- Points addressing the same cell are summed.
- Cells without a backing point have ``value=None`` and no color; they are drawn
  empty, never as zero.
- Tooltip text reads "No data" for empty and zero-count cells.

Bar
- One "Volume" series with top-rounded bars.
- ``hybrid=True`` adds a "Cumulative" line (running sum of the bar values) on a
  right-hand value axis, plus a two-entry legend.

Line
- One smoothed-or-straight series with points on grid lines (no boundary gap) and an
  optional gradient area fill when ``stacked=True``.

Examples:
    >>> from flowwatch.charts.engine import build_spec
    >>> spec = build_spec("heatmap", [{"x": 3, "y": 2, "value": 5}])
    >>> len(spec.series[0].cells)
    96
    >>> build_spec("pie", []).kind
    Traceback (most recent call last):
    ...
    flowwatch.errors.ChartKindError: unknown chart kind: 'pie'
"""

from __future__ import annotations

import itertools
import re
from collections.abc import Iterable, Mapping
from typing import Any

from flowwatch.errors import ChartKindError
from flowwatch.models import Severity

from .config import ChartConfig, Palette, resolve_config, tier_color
from .points import CategoryPoint, HeatmapPoint, coerce_points
from .spec import (
    AreaFill,
    Axis,
    ChartKind,
    ChartSpec,
    Freshness,
    GridBox,
    HeatmapCell,
    Legend,
    Series,
    SeriesLabel,
    SplitArea,
    SplitLine,
    TextStyle,
    Tooltip,
    VisualMap,
    VisualPiece,
    next_freshness_token,
)

__all__ = ["build_spec", "chart_kind_from_value", "format_heatmap_tooltip", "hour_labels"]

HOURS: int = 24
SEVERITIES: tuple[Severity, ...] = tuple(Severity)

NO_DATA: str = "No data"
VOLUME_SERIES: str = "Volume"
CUMULATIVE_SERIES: str = "Cumulative"
HEATMAP_SERIES: str = "Anomalies"

_RGBA = re.compile(r"rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*[\d.]+\s*)?\)")
_HEX = re.compile(r"#([0-9a-fA-F]{6})")


def chart_kind_from_value(kind: ChartKind | str) -> ChartKind:
    """
    Resolve a chart kind.

    Raises:
        ChartKindError: If ``kind`` names no supported chart kind.
    """
    if isinstance(kind, ChartKind):
        return kind
    try:
        return ChartKind(str(kind).strip().lower())
    except ValueError:
        raise ChartKindError(f"unknown chart kind: {kind!r}") from None


def hour_labels() -> list[str]:
    return [f"{h:02d}:00" for h in range(HOURS)]


def format_heatmap_tooltip(hour: int, severity_index: int, count: int | None) -> str:
    """Hover text for one heatmap cell; empty and zero cells read "No data"."""
    if not count:
        return NO_DATA
    severity = SEVERITIES[severity_index]
    return (
        f"{hour:02d}:00 - {(hour + 1) % HOURS:02d}:00\n"
        f"Severity: {severity.label}\n"
        f"Count: {count}"
    )


def with_alpha(color: str, alpha: float) -> str:
    """Return ``color`` as rgba() with the given alpha; unparseable colors pass through."""
    m = _RGBA.fullmatch(color.strip())
    if m:
        r, g, b = m.groups()
    else:
        h = _HEX.fullmatch(color.strip())
        if not h:
            return color
        raw = h.group(1)
        r, g, b = (str(int(raw[i : i + 2], 16)) for i in (0, 2, 4))
    return f"rgba({r}, {g}, {b}, {alpha:g})"


# ---------- shared chrome ----------


def _text_style(cfg: ChartConfig, pal: Palette) -> TextStyle:
    return TextStyle(font_family=cfg.font_family, color=pal.text, font_size=cfg.font_size)


def _tooltip(pal: Palette, trigger: str = "item") -> Tooltip:
    return Tooltip(
        trigger=trigger,
        background_color="rgba(15, 23, 42, 0.95)" if pal.is_dark else "rgba(255, 255, 255, 0.95)",
        border_color=pal.grid,
        text_color=pal.text,
    )


def _split_line(show: bool, pal: Palette) -> SplitLine:
    return SplitLine(show=show, color=pal.grid, style="dashed")


def _category_axis(labels: list[str], cfg: ChartConfig, pal: Palette, **kw: Any) -> Axis:
    return Axis(
        type="category",
        data=labels,
        label_color=pal.text,
        label_font_size=cfg.font_size,
        line_color=pal.grid,
        **kw,
    )


def _value_axis(cfg: ChartConfig, pal: Palette, **kw: Any) -> Axis:
    kw.setdefault("split_line", _split_line(cfg.show_grid, pal))
    return Axis(
        type="value",
        label_color=pal.text,
        label_font_size=cfg.font_size,
        line_color=pal.grid,
        **kw,
    )


def _freshness(pal: Palette) -> Freshness:
    return Freshness(theme_key=pal.mode.value, token=next_freshness_token())


def _category_names(points: list[CategoryPoint]) -> list[str]:
    return [p.display_name(i) for i, p in enumerate(points)]


# ---------- per-kind builders ----------


def _heatmap(points: list[HeatmapPoint], cfg: ChartConfig, pal: Palette) -> ChartSpec:
    counts: dict[tuple[int, int], int] = {}
    for p in points:
        counts[(p.x, p.y)] = counts.get((p.x, p.y), 0) + p.value

    cell_text = "#fff" if pal.is_dark else "#000"
    cells: list[HeatmapCell] = []
    for hour in range(HOURS):
        for severity in SEVERITIES:
            value = counts.get((hour, severity.rank))
            cells.append(
                HeatmapCell(
                    hour=hour,
                    severity=severity,
                    severity_index=severity.rank,
                    value=value,
                    color=None if value is None else tier_color(severity, pal),
                    label=str(value) if value else "",
                    tooltip=format_heatmap_tooltip(hour, severity.rank, value),
                )
            )

    stripe = "rgba(255, 255, 255, 0.02)" if pal.is_dark else "rgba(0, 0, 0, 0.02)"
    x_axis = _category_axis(
        hour_labels(),
        cfg,
        pal,
        label_rotate=45,
        show_line=False,
        split_area=SplitArea(show=True, colors=(stripe, "transparent")),
    )
    y_axis = _category_axis(
        [s.label for s in SEVERITIES],
        cfg,
        pal,
        position="left",
        show_line=False,
        split_area=SplitArea(show=True, colors=(stripe, "transparent")),
    )
    series = Series(
        name=HEATMAP_SERIES,
        type="heatmap",
        cells=cells,
        color=pal.primary,
        border_radius=6,
        border_color="#0f172a" if pal.is_dark else "#ffffff",
        border_width=3,
        label=SeriesLabel(
            show=cfg.show_labels, color=cell_text, font_size=cfg.font_size, position="inside"
        ),
    )
    visual_map = VisualMap(
        show=cfg.show_legend,
        pieces=[
            VisualPiece(value=s.rank, label=s.label, color=tier_color(s, pal)) for s in SEVERITIES
        ],
        text_color=pal.text,
    )
    return ChartSpec(
        kind=ChartKind.HEATMAP,
        background_color=pal.background,
        text_style=_text_style(cfg, pal),
        tooltip=_tooltip(pal),
        grid=GridBox(left="80px", right="40px", top="60px", bottom="80px"),
        x_axis=x_axis,
        y_axes=[y_axis],
        series=[series],
        visual_map=visual_map,
        freshness=_freshness(pal),
    )


def _bar(points: list[CategoryPoint], cfg: ChartConfig, pal: Palette) -> ChartSpec:
    values = [p.value for p in points]
    r = cfg.border_radius
    volume = Series(
        name=VOLUME_SERIES,
        type="bar",
        data=values,
        color=pal.primary,
        border_radius=r,
        bar_max_width=60,
        label=SeriesLabel(
            show=cfg.show_labels,
            color=pal.text,
            font_size=max(cfg.font_size - 2, 1),
            position="top",
        ),
    )
    y_axes = [_value_axis(cfg, pal, name="Count", position="left")]
    series = [volume]
    legend = None
    if cfg.hybrid:
        y_axes.append(
            _value_axis(
                cfg,
                pal,
                name=CUMULATIVE_SERIES,
                position="right",
                line_color=pal.secondary,
                split_line=SplitLine(show=False),
            )
        )
        series.append(
            Series(
                name=CUMULATIVE_SERIES,
                type="line",
                y_axis_index=1,
                data=list(itertools.accumulate(values)),
                color=pal.secondary,
                smooth=True,
                symbol="circle",
                symbol_size=8,
                line_width=3,
                area=AreaFill(
                    color_from=with_alpha(pal.secondary, 0.25),
                    color_to=with_alpha(pal.secondary, 0.06),
                ),
            )
        )
        legend = Legend(
            show=cfg.show_legend, data=[VOLUME_SERIES, CUMULATIVE_SERIES], text_color=pal.text
        )
    return ChartSpec(
        kind=ChartKind.BAR,
        background_color=pal.background,
        text_style=_text_style(cfg, pal),
        tooltip=_tooltip(pal, trigger="axis"),
        legend=legend,
        grid=GridBox(
            left="40px",
            right="60px" if cfg.hybrid else "20px",
            top="50px" if cfg.hybrid else "20px",
            bottom="40px",
        ),
        x_axis=_category_axis(_category_names(points), cfg, pal),
        y_axes=y_axes,
        series=series,
        freshness=_freshness(pal),
    )


def _line(points: list[CategoryPoint], cfg: ChartConfig, pal: Palette) -> ChartSpec:
    area = None
    if cfg.stacked:
        area = AreaFill(color_from=pal.primary, color_to=with_alpha(pal.primary, 0.1))
    series = Series(
        name=VOLUME_SERIES,
        type="line",
        data=[p.value for p in points],
        color=pal.primary,
        smooth=cfg.smooth,
        symbol="circle",
        symbol_size=6,
        line_width=3,
        area=area,
    )
    return ChartSpec(
        kind=ChartKind.LINE,
        background_color=pal.background,
        text_style=_text_style(cfg, pal),
        tooltip=_tooltip(pal, trigger="axis"),
        grid=GridBox(left="3%", right="4%", top="10%", bottom="3%", contain_label=True),
        x_axis=_category_axis(_category_names(points), cfg, pal, boundary_gap=False),
        y_axes=[_value_axis(cfg, pal, position="left", show_line=False)],
        series=[series],
        freshness=_freshness(pal),
    )


_BUILDERS = {
    ChartKind.HEATMAP: _heatmap,
    ChartKind.BAR: _bar,
    ChartKind.LINE: _line,
}


def build_spec(
    kind: ChartKind | str,
    points: Iterable[HeatmapPoint | CategoryPoint | Mapping[str, Any]] | None,
    config: ChartConfig | Mapping[str, Any] | None = None,
    palette: Palette | None = None,
) -> ChartSpec:
    """
    Build a complete chart specification.

    Args:
        kind (ChartKind | str): "heatmap", "bar", or "line".
        points: Points or plain mappings; invalid points are dropped with a warning.
        config (ChartConfig | Mapping | None): Partial options merged over defaults.
        palette (Palette | None): Active palette; ``config.colors`` takes precedence,
            and the dark palette is used when neither is given.

    Returns:
        ChartSpec: Fully resolved specification with a fresh freshness token.

    Raises:
        ChartKindError: If ``kind`` is not a supported chart kind.
        pydantic.ValidationError: If ``config`` carries invalid option values.
    """
    resolved = chart_kind_from_value(kind)
    cfg, pal = resolve_config(config, palette)
    return _BUILDERS[resolved](coerce_points(resolved, points), cfg, pal)
