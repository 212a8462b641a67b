from __future__ import annotations

from typing import Any

import altair as alt

from flowwatch.charts import LIGHT_PALETTE, build_spec, to_altair
from flowwatch.charts.render import spec_rows


def find_in_spec(obj: Any, predicate) -> bool:
    """Recursively scan a chart spec dict for a predicate match."""
    if isinstance(obj, dict):
        if predicate(obj):
            return True
        return any(find_in_spec(v, predicate) for v in obj.values())
    if isinstance(obj, list):
        return any(find_in_spec(v, predicate) for v in obj)
    return False


def mark_type(d: dict) -> str | None:
    mark = d.get("mark")
    if isinstance(mark, dict):
        return mark.get("type")
    return mark


def has_mark(spec: dict, kind: str, **props: Any) -> bool:
    def pred(d: dict) -> bool:
        if mark_type(d) != kind:
            return False
        mark = d["mark"] if isinstance(d["mark"], dict) else {}
        return all(mark.get(k) == v for k, v in props.items())

    return find_in_spec(spec, pred)


def dataset_rows(spec: dict) -> list[list[dict]]:
    """Inline row sets, whether consolidated under "datasets" or left in place."""
    found: list[list[dict]] = list(spec.get("datasets", {}).values())

    def collect(d: dict) -> bool:
        values = d.get("values")
        if isinstance(values, list):
            found.append(values)
        return False

    find_in_spec({k: v for k, v in spec.items() if k != "datasets"}, collect)
    return found


HEAT_POINTS = [{"x": 1, "y": 0, "value": 2}, {"x": 5, "y": 3, "value": 1}]
BAR_POINTS = [{"name": "a", "value": 1}, {"name": "b", "value": 2}, {"name": "c", "value": 3}]


def test_spec_rows_for_heatmap_only_cover_backed_cells() -> None:
    rows = spec_rows(build_spec("heatmap", HEAT_POINTS))
    assert rows == [
        {
            "hour": "01:00",
            "severity": "Low",
            "value": 2,
            "label": "2",
            "tooltip": "01:00 - 02:00\nSeverity: Low\nCount: 2",
        },
        {
            "hour": "05:00",
            "severity": "Critical",
            "value": 1,
            "label": "1",
            "tooltip": "05:00 - 06:00\nSeverity: Critical\nCount: 1",
        },
    ]


def test_spec_rows_for_hybrid_bar_include_cumulative() -> None:
    rows = spec_rows(build_spec("bar", BAR_POINTS, {"hybrid": True}))
    assert rows == [
        {"name": "a", "value": 1.0, "cumulative": 1.0},
        {"name": "b", "value": 2.0, "cumulative": 3.0},
        {"name": "c", "value": 3.0, "cumulative": 6.0},
    ]


def test_heatmap_renders_rects_with_labels() -> None:
    chart = to_altair(build_spec("heatmap", HEAT_POINTS))
    assert isinstance(chart, alt.TopLevelMixin)
    d = chart.to_dict()
    assert has_mark(d, "rect", cornerRadius=6, strokeWidth=3)
    assert has_mark(d, "text")
    assert any(len(rows) == 2 for rows in dataset_rows(d))


def test_heatmap_without_labels_draws_no_text() -> None:
    d = to_altair(build_spec("heatmap", HEAT_POINTS, {"show_labels": False})).to_dict()
    assert has_mark(d, "rect")
    assert not has_mark(d, "text")


def test_heatmap_color_scale_uses_tier_colors() -> None:
    d = to_altair(build_spec("heatmap", HEAT_POINTS, palette=LIGHT_PALETTE)).to_dict()

    def is_tier_scale(x: dict) -> bool:
        scale = x.get("scale")
        return isinstance(scale, dict) and scale.get("range") == [
            "#34d399",
            "#fbbf24",
            "#fb923c",
            "#f87171",
        ]

    assert find_in_spec(d, is_tier_scale)


def test_plain_bar_renders_rounded_bars() -> None:
    d = to_altair(build_spec("bar", BAR_POINTS)).to_dict()
    assert has_mark(d, "bar", cornerRadiusTopLeft=8, cornerRadiusTopRight=8)
    assert not has_mark(d, "line")


def test_hybrid_bar_overlays_line_on_independent_axis() -> None:
    d = to_altair(build_spec("bar", BAR_POINTS, {"hybrid": True})).to_dict()
    assert has_mark(d, "bar")
    assert has_mark(d, "line", interpolate="monotone")
    assert has_mark(d, "area")
    assert find_in_spec(d, lambda x: x.get("resolve") == {"scale": {"y": "independent"}})
    assert find_in_spec(
        d, lambda x: isinstance(x.get("axis"), dict) and x["axis"].get("orient") == "right"
    )


def test_line_chart_variants() -> None:
    straight = to_altair(build_spec("line", BAR_POINTS)).to_dict()
    assert has_mark(straight, "line", interpolate="linear")
    assert not has_mark(straight, "area")

    stacked = to_altair(build_spec("line", BAR_POINTS, {"smooth": True, "stacked": True}))
    d = stacked.to_dict()
    assert has_mark(d, "line", interpolate="monotone")
    assert has_mark(d, "area")


def test_palette_applied_as_chart_config() -> None:
    d = to_altair(build_spec("line", BAR_POINTS, palette=LIGHT_PALETTE)).to_dict()
    assert d["background"] == "transparent"
    assert d["config"]["axis"]["labelColor"] == LIGHT_PALETTE.text
    assert d["config"]["axis"]["gridColor"] == LIGHT_PALETTE.grid
    assert d["config"]["axisY"]["grid"] is True
    assert d["config"]["view"]["strokeOpacity"] == 0
