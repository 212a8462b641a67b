"""
Streamlit application orchestrator for flowwatch.

This module composes the global header, filter controls, KPI cards, and chart tabs
while delegating supporting concerns to focused modules under app.ui.* (header,
state, helpers).

Responsibilities:
    - Configure Streamlit page and logging.
    - Resolve the session DashboardContext (stores live across reruns).
    - Load feeds via app.data with configurable caching and push them through
      flowwatch.ingest (the shell plays the transport role).
    - Mount tab content (Anomalies heatmap, Volume, Categories, Data).

Notes:
    - Charts are ChartSpecs from flowwatch.views rendered with flowwatch.charts.to_altair.
    - Feed failures become store error state via report_transport_error.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, cast

import streamlit as st

from app.data import (
    create_demo_feed,
    find_feed,
    load_anomalies_feed,
    load_events_feed,
    load_stats_feed,
)
from flowwatch.charts import ChartSpec, to_altair
from flowwatch.config import DashboardSettings
from flowwatch.context import DashboardContext
from flowwatch.errors import FeedError
from flowwatch.ingest import push_anomalies, push_events, push_stats, report_transport_error
from flowwatch.logging import configure_logging
from flowwatch.views import (
    category_points,
    chart_spec,
    heatmap_points,
    hourly_volume_points,
    visible_anomalies,
    visible_events,
)

from .header import render_filters, render_header
from .helpers import kpi_cards, records_frame
from .state import get_context

logger = logging.getLogger(__name__)


def _sync_feeds(ctx: DashboardContext, feed_dir: str, cache_cfg: Any) -> None:
    try:
        events = load_events_feed(feed_dir, cfg=cache_cfg)
        anomalies = load_anomalies_feed(feed_dir, cfg=cache_cfg)
        stats = load_stats_feed(feed_dir, cfg=cache_cfg)
    except FeedError as e:
        report_transport_error(ctx, str(e))
        return
    push_events(ctx, events, replace=True)
    push_anomalies(ctx, anomalies, replace=True)
    if stats is not None:
        push_stats(ctx, stats)
    else:
        ctx.metrics.set_loading(False)


def _show_chart(spec: ChartSpec) -> None:
    st.altair_chart(cast(Any, to_altair(spec)), theme=None, use_container_width=True)


def streamlit_app(
    default_feed_dir: str | None = None,
    default_watch_ttl: int = 10,
) -> None:
    """Render the flowwatch Streamlit application.

    Args:
        default_feed_dir (str | None): Optional feed directory (settings value when None).
        default_watch_ttl (int): Default auto-refresh interval in seconds.

    Returns:
        None

    Notes:
        - When the feed directory holds no feeds, a demo feed is written there.
    """
    settings = DashboardSettings.load()
    configure_logging(settings.log_level)
    st.set_page_config(page_title="Workflow Monitor", layout="wide")

    ctx = get_context(settings)
    feed_dir, cache_cfg = render_header(
        ctx, default_feed_dir=default_feed_dir, default_watch_ttl=default_watch_ttl
    )
    if not feed_dir:
        st.error("Enter a feed directory in the header.")
        return

    if all(find_feed(feed_dir, name) is None for name in ("events", "anomalies")):
        try:
            create_demo_feed(Path(feed_dir))
            st.success(f"No feeds found. Created demo feed at {feed_dir}")
        except OSError as e:  # pragma: no cover
            st.error(f"Failed to create demo feed: {e}")
            return

    with st.spinner("Loading feeds ..."):
        _sync_feeds(ctx, feed_dir, cache_cfg)
    if ctx.events.error:
        st.error(ctx.events.error)

    render_filters(ctx)

    cards = kpi_cards(ctx.metrics)
    for col, card in zip(st.columns(len(cards)), cards):
        with col:
            st.metric(
                card["label"],
                card["value"],
                delta=card["status"] or None,
                delta_color=cast(Any, card["delta_color"]),
            )

    now = datetime.now(tz=UTC)
    events = visible_events(ctx, now)
    anomalies = visible_anomalies(ctx, now)
    tz = ctx.settings.tzinfo()

    tab_heat, tab_volume, tab_cat, tab_data = st.tabs(
        ["Anomalies", "Volume", "Categories", "Data"]
    )
    with tab_heat:
        st.subheader("Anomalies by hour and severity")
        _show_chart(chart_spec(ctx, "heatmap", heatmap_points(anomalies, tz)))
        st.caption(
            " | ".join(f"{k}: {v}" for k, v in ctx.anomalies.group_by_severity().items())
        )
    with tab_volume:
        st.subheader("Workflow volume by hour")
        _show_chart(
            chart_spec(ctx, "bar", hourly_volume_points(events, tz, now), {"hybrid": True})
        )
    with tab_cat:
        st.subheader("Workflows per category")
        _show_chart(chart_spec(ctx, "line", category_points(events), {"smooth": True}))
    with tab_data:
        st.subheader("Recent anomalies")
        st.dataframe(
            records_frame(anomalies, ["id", "timestamp", "severity", "type"]),
            use_container_width=True,
        )
        st.subheader("Recent events")
        st.dataframe(
            records_frame(events, ["id", "timestamp", "status", "category"]),
            use_container_width=True,
        )
