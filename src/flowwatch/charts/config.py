"""
Chart palettes and configuration.

Palette
- One fixed palette per ThemeMode. The chart engine takes the palette as an input and
  never reads theme state itself.

ChartConfig
- Every option has a default; ``resolve_config`` shallow-merges caller fields over the
  defaults (caller wins) and fills ``colors`` from the active palette when unset.

Heatmap tiers
- Four piecewise color tiers, one per severity, each with a dark and a light color.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from flowwatch.models import Severity, ThemeMode

__all__ = [
    "Palette",
    "ChartConfig",
    "DARK_PALETTE",
    "LIGHT_PALETTE",
    "SEVERITY_TIER_COLORS",
    "palette_for",
    "resolve_config",
    "tier_color",
]


class Palette(BaseModel):
    """
    Named colors for one theme mode.

    Attributes:
        mode (ThemeMode): Theme the palette belongs to.
        primary, secondary, tertiary (str): Series colors.
        background, text, grid (str): Chrome colors.
    """

    model_config = ConfigDict(frozen=True)

    mode: ThemeMode
    primary: str = "rgba(0, 217, 255, 1)"
    secondary: str = "rgba(132, 188, 71, 1)"
    tertiary: str = "rgba(0, 172, 167, 1)"
    background: str = "transparent"
    text: str
    grid: str

    @property
    def is_dark(self) -> bool:
        return self.mode is ThemeMode.DARK


DARK_PALETTE = Palette(mode=ThemeMode.DARK, text="#e2e8f0", grid="rgba(255, 255, 255, 0.1)")
LIGHT_PALETTE = Palette(mode=ThemeMode.LIGHT, text="#4b5563", grid="rgba(0, 0, 0, 0.1)")

# (dark, light) per severity tier
SEVERITY_TIER_COLORS: dict[Severity, tuple[str, str]] = {
    Severity.LOW: ("#10b981", "#34d399"),
    Severity.MEDIUM: ("#f59e0b", "#fbbf24"),
    Severity.HIGH: ("#f97316", "#fb923c"),
    Severity.CRITICAL: ("#ef4444", "#f87171"),
}


def palette_for(mode: ThemeMode | str) -> Palette:
    if isinstance(mode, str):
        mode = ThemeMode(mode)
    return DARK_PALETTE if mode is ThemeMode.DARK else LIGHT_PALETTE


def tier_color(severity: Severity, palette: Palette) -> str:
    dark, light = SEVERITY_TIER_COLORS[severity]
    return dark if palette.is_dark else light


class ChartConfig(BaseModel):
    """
    Chart options with defaults.

    Attributes:
        font_family (str): Text font.
        font_size (int): Base axis/label font size.
        border_radius (int): Bar top-corner radius.
        show_labels (bool): Value labels on bars/cells.
        show_legend (bool): Legend for hybrid bar charts and the heatmap tier key.
        show_grid (bool): Dashed split lines on value axes.
        smooth (bool): Smoothed line interpolation (line charts).
        stacked (bool): Filled area under the line (line charts).
        hybrid (bool): Bar chart with a cumulative line on a secondary axis.
        colors (Palette | None): Palette override; None means "use the active palette".
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    font_family: str = "Inter, sans-serif"
    font_size: int = Field(default=12, gt=0)
    border_radius: int = Field(default=8, ge=0)
    show_labels: bool = True
    show_legend: bool = True
    show_grid: bool = True
    smooth: bool = False
    stacked: bool = False
    hybrid: bool = False
    colors: Palette | None = None


def resolve_config(
    partial: ChartConfig | Mapping[str, Any] | None, palette: Palette | None
) -> tuple[ChartConfig, Palette]:
    """
    Merge caller options over defaults and settle the palette.

    Returns:
        tuple[ChartConfig, Palette]: Config with ``colors`` set, and that palette.
        Precedence for the palette: caller ``colors`` > ``palette`` > dark palette.
    """
    if partial is None:
        overrides: dict[str, Any] = {}
    elif isinstance(partial, ChartConfig):
        overrides = {name: getattr(partial, name) for name in partial.model_fields_set}
    else:
        overrides = dict(partial)
    cfg = ChartConfig.model_validate(overrides)
    active = cfg.colors or palette or DARK_PALETTE
    return cfg.model_copy(update={"colors": active}), active
