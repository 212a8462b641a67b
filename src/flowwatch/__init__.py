"""
flowwatch — reactive state and chart specifications for a workflow-monitoring dashboard.

## Responsibilities
- Hold streaming workflow events, anomalies, and overview metrics in reactive stores
  whose derived views stay consistent under any mutation order.
- Hold UI filter and theme state.
- Map (chart kind, points, options, palette) to renderer-agnostic chart specs.

## Public API
- reactive — Signal, Computed, derive.
- stores — EventsStore, AnomaliesStore, MetricsStore, FilterStore, ThemeStore.
- charts — build_spec, ChartSpec, ChartConfig, palettes, to_altair.
- context — DashboardContext, build_context.
- ingest — push_events, push_anomalies, push_stats, report_transport_error.
- views — filter narrowing and chart point preparation.
- config — DashboardSettings (env > TOML > defaults).

## Import DAG discipline
- models/reactive/constants/errors depend only on stdlib and pydantic.
- charts depends on models; stores depend on charts.config (palettes) and models.
- context/ingest/views sit on top; the Streamlit shell lives in the separate ``app``
  package and is never imported from here.

## Examples
```python
from flowwatch.config import DashboardSettings
from flowwatch.context import build_context
from flowwatch.ingest import push_anomalies
from flowwatch.views import chart_spec, heatmap_points, visible_anomalies

ctx = build_context(DashboardSettings())
push_anomalies(ctx, [{"id": "a1", "timestamp": "2026-10-19T08:00:00Z", "severity": "high"}])
spec = chart_spec(ctx, "heatmap", heatmap_points(visible_anomalies(ctx)))
```
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
