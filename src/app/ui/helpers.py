"""
Shared UI helper utilities for the flowwatch Streamlit application.

This module centralizes small cross-cutting helpers (time formatting, KPI card
content, tabular views of store records) used by multiple UI components.

Notes:
    - All functions include Google-style docstrings.
    - This module contains no Streamlit state manipulation itself.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from typing import Any

import polars as pl
from pydantic import BaseModel

from flowwatch.models import OverviewStats
from flowwatch.stores.metrics import MetricsStore

# Streamlit ``st.metric`` delta colors per status class.
STATUS_DELTA_COLOR: dict[str, str] = {
    "excellent": "normal",
    "good": "normal",
    "fast": "normal",
    "normal": "off",
    "none": "off",
    "low": "off",
    "warning": "inverse",
    "slow": "inverse",
    "medium": "inverse",
    "high": "inverse",
    "critical": "inverse",
}


def humanize_ago(ts: float, now: float | None = None) -> str:
    """Convert a UNIX timestamp into a short humanized age string.

    Args:
        ts (float): UNIX timestamp (seconds since epoch).
        now (float | None): Reference UNIX timestamp; current time when None.

    Returns:
        str: Humanized string like "32s ago", "5m ago", "2h ago", "3d ago",
        or "n/a" if conversion fails.
    """
    try:
        dt = datetime.fromtimestamp(ts, tz=UTC)
        ref = datetime.fromtimestamp(now, tz=UTC) if now is not None else datetime.now(tz=UTC)
    except (OverflowError, OSError, ValueError, TypeError):
        return "n/a"
    delta = max((ref - dt).total_seconds(), 0.0)
    if delta < 60:
        return f"{int(delta)}s ago"
    if delta < 3600:
        return f"{int(delta // 60)}m ago"
    if delta < 86400:
        return f"{int(delta // 3600)}h ago"
    return f"{int(delta // 86400)}d ago"


def format_ts(ts: float | datetime | None) -> str:
    """Format a UNIX timestamp or datetime as "YYYY-MM-DD HH:MM:SS" ("n/a" on failure)."""
    if ts is None:
        return "n/a"
    try:
        dt = ts if isinstance(ts, datetime) else datetime.fromtimestamp(ts)
    except (OverflowError, OSError, ValueError, TypeError):
        return "n/a"
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def kpi_cards(metrics: MetricsStore) -> list[dict[str, str]]:
    """Build the four overview KPI cards from the metrics store.

    Args:
        metrics (MetricsStore): Source of stats and status classifications.

    Returns:
        list[dict[str, str]]: Cards with keys "label", "value", "status", and
        "delta_color" (for ``st.metric``), in display order.
    """
    s: OverviewStats = metrics.stats
    cards = [
        ("Workflows today", f"{s.total_workflows_today:,}", ""),
        ("Avg cycle time", f"{s.average_cycle_time:.1f} min", metrics.cycle_time_status()),
        ("SLA compliance", f"{s.sla_compliance:.1f}%", metrics.sla_status()),
        ("Active anomalies", f"{s.active_anomalies_count}", metrics.anomaly_status()),
    ]
    return [
        {
            "label": label,
            "value": value,
            "status": status,
            "delta_color": STATUS_DELTA_COLOR.get(status, "off"),
        }
        for label, value, status in cards
    ]


def records_frame(records: Iterable[BaseModel], columns: Sequence[str]) -> pl.DataFrame:
    """Tabulate store records for ``st.dataframe``.

    Args:
        records (Iterable[BaseModel]): Events or anomalies.
        columns (Sequence[str]): Fields to keep, in order.

    Returns:
        pl.DataFrame: One row per record; timestamps rendered as strings, newest first
        when a "timestamp" column is present.
    """
    rows: list[dict[str, Any]] = []
    for r in records:
        data = r.model_dump(include=set(columns))
        ts = data.get("timestamp")
        if isinstance(ts, datetime):
            data["timestamp"] = ts.isoformat()
        rows.append(data)
    if not rows:
        return pl.DataFrame(schema={c: pl.Utf8 for c in columns})
    df = pl.DataFrame(rows).select([c for c in columns if c in rows[0]])
    if "timestamp" in df.columns:
        df = df.sort("timestamp", descending=True)
    return df
