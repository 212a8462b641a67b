"""
Consuming-view glue between the stores, the filter state, and the chart engine.

Responsibilities
- Narrow windowed store output by the current FilterState.
- Prepare chart points: anomaly heatmap (hour x severity counts), hourly event
  volume (bar), and per-category event counts (line).
- Build specs with the palette of the active theme.

Notes
- Filter values are matched exactly against ``category`` / ``type``; ``"all"`` in a
  selection disables that dimension.
- Anomalies with a non-canonical severity have no heatmap row and are left out of
  the heatmap points (they still count in ``group_by_severity``).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, tzinfo
from typing import Any

from flowwatch.charts.config import ChartConfig
from flowwatch.charts.engine import build_spec
from flowwatch.charts.points import CategoryPoint, HeatmapPoint
from flowwatch.charts.spec import ChartKind, ChartSpec
from flowwatch.constants import ALL, HOURS_PER_DAY
from flowwatch.context import DashboardContext
from flowwatch.models import Anomaly, WorkflowEvent, parse_timestamp, severity_from_value
from flowwatch.stores.filters import FilterState

__all__ = [
    "filter_events",
    "filter_anomalies",
    "visible_events",
    "visible_anomalies",
    "heatmap_points",
    "hourly_volume_points",
    "category_points",
    "chart_spec",
]


def _passes(selection: frozenset[str], value: str) -> bool:
    return ALL in selection or value in selection


def filter_events(events: Iterable[WorkflowEvent], state: FilterState) -> list[WorkflowEvent]:
    return [e for e in events if _passes(state.categories, e.category)]


def filter_anomalies(anomalies: Iterable[Anomaly], state: FilterState) -> list[Anomaly]:
    return [a for a in anomalies if _passes(state.anomaly_types, a.type)]


def visible_events(ctx: DashboardContext, now: datetime | None = None) -> list[WorkflowEvent]:
    """Events inside the selected time range that pass the category filter."""
    state = ctx.filters.state()
    return filter_events(ctx.events.last_n_hours(state.time_range.hours, now), state)


def visible_anomalies(ctx: DashboardContext, now: datetime | None = None) -> list[Anomaly]:
    """Anomalies inside the selected time range that pass the anomaly-type filter."""
    state = ctx.filters.state()
    return filter_anomalies(ctx.anomalies.last_n_hours(state.time_range.hours, now), state)


def heatmap_points(anomalies: Iterable[Anomaly], tz: tzinfo = UTC) -> list[HeatmapPoint]:
    """One point per populated (hour, severity) cell, ordered by hour then severity."""
    counts: dict[tuple[int, int], int] = {}
    for a in anomalies:
        severity = severity_from_value(a.severity)
        hour = a.hour_of_day(tz)
        if severity is None or hour is None:
            continue
        key = (hour, severity.rank)
        counts[key] = counts.get(key, 0) + 1
    return [HeatmapPoint(x=x, y=y, value=n) for (x, y), n in sorted(counts.items())]


def hourly_volume_points(
    events: Iterable[WorkflowEvent], tz: tzinfo = UTC, now: datetime | None = None
) -> list[CategoryPoint]:
    """
    Event counts for each hour of day, all 24 hours labelled "HH:00".

    Args:
        events: Events to count (typically one 24-hour window).
        tz (tzinfo): Zone used for the hour of day.
        now (datetime | None): When given, buckets run in time order and end with the
            hour containing ``now`` (so a running sum follows the window). When None,
            buckets run 00:00 .. 23:00.

    Notes:
        A 24-hour window starts exactly 24 hours before ``now``, so records from the
        first minutes of the window share the last bucket with the current hour.
    """
    counts = [0] * HOURS_PER_DAY
    for e in events:
        instant = e.instant
        if instant is not None:
            counts[instant.astimezone(tz).hour] += 1
    if now is None:
        order = list(range(HOURS_PER_DAY))
    else:
        current = parse_timestamp(now).astimezone(tz).hour
        order = [(current + 1 + i) % HOURS_PER_DAY for i in range(HOURS_PER_DAY)]
    return [CategoryPoint(name=f"{h:02d}:00", value=counts[h]) for h in order]


def category_points(events: Iterable[WorkflowEvent]) -> list[CategoryPoint]:
    """Event counts per category in first-seen order."""
    counts: dict[str, int] = {}
    for e in events:
        counts[e.category] = counts.get(e.category, 0) + 1
    return [CategoryPoint(name=name, value=n) for name, n in counts.items()]


def chart_spec(
    ctx: DashboardContext,
    kind: ChartKind | str,
    points: Iterable[Any],
    config: ChartConfig | Mapping[str, Any] | None = None,
) -> ChartSpec:
    """``build_spec`` with the palette of the context's active theme."""
    return build_spec(kind, points, config, ctx.palette())
