"""
Altair rendering of ChartSpec records.

``to_altair`` turns a resolved ChartSpec into a top-level Altair chart with the
spec's palette applied as chart defaults. It reads the spec only; all decisions
(colors, labels, empty heatmap cells, cumulative values) were made by the engine.

Notes
- Heatmap cells with ``value=None`` are not drawn; the hour and severity domains are
  fixed so the grid keeps its 24 x 4 shape regardless of data.
- The hybrid bar overlays the cumulative line on an independent right-hand y scale.
"""

from __future__ import annotations

from typing import Any

import altair as alt

from .spec import ChartKind, ChartSpec, Series

__all__ = ["to_altair", "spec_rows"]


def spec_rows(spec: ChartSpec) -> list[dict[str, Any]]:
    """
    Tabular rows behind a spec, as passed to ``alt.Data``.

    Returns:
        list[dict]: For heatmaps, one row per backed cell (hour, severity, value,
        label, tooltip). For bar and line, one row per category with ``value`` and,
        when present, ``cumulative``.
    """
    if spec.kind is ChartKind.HEATMAP:
        hours = spec.x_axis.data
        return [
            {
                "hour": hours[c.hour],
                "severity": c.severity.label,
                "value": c.value,
                "label": c.label,
                "tooltip": c.tooltip,
            }
            for c in spec.series[0].cells
            if c.value is not None
        ]
    main = spec.series[0]
    extra = spec.series[1] if len(spec.series) > 1 else None
    rows: list[dict[str, Any]] = []
    for i, name in enumerate(spec.x_axis.data):
        row: dict[str, Any] = {"name": name, "value": main.data[i]}
        if extra is not None:
            row["cumulative"] = extra.data[i]
        rows.append(row)
    return rows


def _apply_chart_defaults(ch: alt.TopLevelMixin, spec: ChartSpec) -> alt.TopLevelMixin:
    style = spec.text_style
    grid = spec.y_axis.split_line
    return (
        ch.properties(background=spec.background_color)
        .configure_axis(
            labelColor=style.color,
            titleColor=style.color,
            labelFont=style.font_family,
            titleFont=style.font_family,
            labelFontSize=spec.x_axis.label_font_size,
            titleFontSize=style.font_size,
            domainColor=spec.x_axis.line_color,
            gridColor=grid.color,
            gridDash=[4, 4] if grid.style == "dashed" else [],
        )
        .configure_axisX(grid=spec.x_axis.split_line.show)
        .configure_axisY(grid=grid.show)
        .configure_legend(
            labelColor=style.color, titleColor=style.color, labelFont=style.font_family
        )
        .configure_title(fontSize=style.font_size + 2, color=style.color)
        .configure_view(strokeOpacity=0)
    )


def _x_category(spec: ChartSpec) -> alt.X:
    axis = spec.x_axis
    if axis.boundary_gap:
        return alt.X("name:N", sort=None, title=None, axis=alt.Axis(labelAngle=-axis.label_rotate))
    return alt.X(
        "name:N",
        sort=None,
        title=None,
        scale=alt.Scale(padding=0),
        axis=alt.Axis(labelAngle=-axis.label_rotate),
    )


def _line_layers(base: alt.Chart, s: Series, field: str, title: str | None, **y_kw: Any) -> list:
    y = alt.Y(f"{field}:Q", title=title, **y_kw)
    layers = []
    if s.area is not None:
        gradient = alt.Gradient(
            gradient="linear",
            stops=[
                alt.GradientStop(color=s.area.color_from, offset=0),
                alt.GradientStop(color=s.area.color_to, offset=1),
            ],
            x1=0,
            x2=0,
            y1=0,
            y2=1,
        )
        interpolate = "monotone" if s.smooth else "linear"
        layers.append(base.mark_area(color=gradient, interpolate=interpolate).encode(y=y))
    layers.append(
        base.mark_line(
            color=s.color,
            strokeWidth=s.line_width,
            interpolate="monotone" if s.smooth else "linear",
            point=alt.OverlayMarkDef(filled=True, color=s.color, size=s.symbol_size**2)
            if s.symbol == "circle"
            else False,
        ).encode(y=y, tooltip=["name:N", alt.Tooltip(f"{field}:Q", title=s.name)])
    )
    return layers


def _bar_chart(spec: ChartSpec) -> alt.TopLevelMixin:
    base = alt.Chart(alt.Data(values=spec_rows(spec))).encode(x=_x_category(spec))
    volume = spec.series[0]
    y = alt.Y("value:Q", title=spec.y_axis.name)
    r = volume.border_radius
    layers = [
        base.mark_bar(
            color=volume.color,
            cornerRadiusTopLeft=r,
            cornerRadiusTopRight=r,
        ).encode(y=y, tooltip=["name:N", alt.Tooltip("value:Q", title=volume.name)])
    ]
    if volume.label.show:
        layers.append(
            base.mark_text(
                dy=-8, color=volume.label.color, fontSize=volume.label.font_size
            ).encode(y=y, text="value:Q")
        )
    bars = alt.layer(*layers)
    if len(spec.series) < 2:
        return bars
    cumulative = spec.series[1]
    right = spec.y_axes[1]
    line = alt.layer(
        *_line_layers(
            base,
            cumulative,
            "cumulative",
            right.name,
            axis=alt.Axis(orient="right", domainColor=right.line_color),
        )
    )
    return alt.layer(bars, line).resolve_scale(y="independent")


def _line_chart(spec: ChartSpec) -> alt.TopLevelMixin:
    base = alt.Chart(alt.Data(values=spec_rows(spec))).encode(x=_x_category(spec))
    return alt.layer(*_line_layers(base, spec.series[0], "value", spec.y_axis.name))


def _heatmap_chart(spec: ChartSpec) -> alt.TopLevelMixin:
    series = spec.series[0]
    hours = spec.x_axis.data
    severities = spec.y_axis.data
    pieces = spec.visual_map.pieces if spec.visual_map is not None else []
    base = alt.Chart(alt.Data(values=spec_rows(spec))).encode(
        x=alt.X(
            "hour:N",
            title=None,
            sort=hours,
            scale=alt.Scale(domain=hours),
            axis=alt.Axis(labelAngle=-spec.x_axis.label_rotate),
        ),
        # First domain entry is drawn at the top.
        y=alt.Y("severity:N", title=None, scale=alt.Scale(domain=list(reversed(severities)))),
    )
    show_key = spec.visual_map is not None and spec.visual_map.show
    rect = base.mark_rect(
        cornerRadius=series.border_radius,
        stroke=series.border_color,
        strokeWidth=series.border_width,
    ).encode(
        color=alt.Color(
            "severity:N",
            scale=alt.Scale(domain=[p.label for p in pieces], range=[p.color for p in pieces]),
            legend=alt.Legend(orient="top", title=None) if show_key else None,
        ),
        tooltip=alt.Tooltip("tooltip:N", title=series.name),
    )
    if not series.label.show:
        return rect
    text = base.mark_text(
        color=series.label.color, fontSize=series.label.font_size, fontWeight="bold"
    ).encode(text="label:N")
    return alt.layer(rect, text)


_RENDERERS = {
    ChartKind.HEATMAP: _heatmap_chart,
    ChartKind.BAR: _bar_chart,
    ChartKind.LINE: _line_chart,
}


def to_altair(spec: ChartSpec) -> alt.TopLevelMixin:
    """Render a ChartSpec as a configured Altair chart."""
    return _apply_chart_defaults(_RENDERERS[spec.kind](spec), spec)
