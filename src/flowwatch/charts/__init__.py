"""
flowwatch.charts — chart palettes, options, and the specification engine.

## Public API
- ChartConfig, Palette, DARK_PALETTE, LIGHT_PALETTE, palette_for — options and colors.
- HeatmapPoint, CategoryPoint — input point variants.
- ChartKind, ChartSpec, HeatmapCell — resolved output records.
- build_spec — pure mapping (kind, points, config, palette) -> ChartSpec.
- to_altair — render a ChartSpec with Altair.

## Import DAG discipline
- Depends on flowwatch.models, flowwatch.errors, pydantic, and altair.
- MUST NOT import flowwatch.stores; the active palette is passed in by the caller.

## Examples
```python
from flowwatch.charts import LIGHT_PALETTE, build_spec, to_altair
spec = build_spec("bar", [{"name": "Mon", "value": 5}], {"hybrid": True}, LIGHT_PALETTE)
chart = to_altair(spec)  # doctest: +SKIP
```
"""

from __future__ import annotations

from .config import (
    DARK_PALETTE,
    LIGHT_PALETTE,
    ChartConfig,
    Palette,
    palette_for,
    resolve_config,
    tier_color,
)
from .engine import build_spec, chart_kind_from_value, format_heatmap_tooltip
from .points import CategoryPoint, HeatmapPoint
from .render import to_altair
from .spec import ChartKind, ChartSpec, HeatmapCell

__all__ = [
    "DARK_PALETTE",
    "LIGHT_PALETTE",
    "ChartConfig",
    "Palette",
    "palette_for",
    "resolve_config",
    "tier_color",
    "build_spec",
    "chart_kind_from_value",
    "format_heatmap_tooltip",
    "CategoryPoint",
    "HeatmapPoint",
    "to_altair",
    "ChartKind",
    "ChartSpec",
    "HeatmapCell",
]
