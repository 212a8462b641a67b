"""
Header (global controls) for the flowwatch Streamlit application.

This module renders the top-of-page controls, including:
- Feed directory selection, manual refresh, and the "last updated" caption.
- Theme toggle (dark/light) backed by the session ThemeStore.
- Cache preferences and construction of the CacheConfig used by data loaders.
- Filter controls: category and anomaly-type toggles, time range, live updates.

Notes:
    - Filter buttons call FilterStore.toggle directly, so the "all" sentinel rule
      is enforced by the store rather than by widget state.
    - Live updates reuse the auto-refresh interval as the loader cache TTL.
"""

from __future__ import annotations

from pathlib import Path

import streamlit as st

from app.data import CacheConfig, feed_mtime
from flowwatch.constants import ANOMALY_TYPE_OPTIONS, CATEGORY_OPTIONS
from flowwatch.context import DashboardContext
from flowwatch.models import TimeRange
from flowwatch.stores.filters import FilterDimension, format_label

from .helpers import format_ts, humanize_ago


def render_header(
    ctx: DashboardContext,
    *,
    default_feed_dir: str | None,
    default_watch_ttl: int,
) -> tuple[str, CacheConfig]:
    """Render the global header and return the feed directory and cache config.

    Args:
        ctx (DashboardContext): Session context (theme and filter stores).
        default_feed_dir (str | None): Initial feed directory; settings value when None.
        default_watch_ttl (int): Default auto-refresh interval in seconds.

    Returns:
        tuple[str, CacheConfig]: (feed_dir, cache_config)
    """
    if "feed_dir" not in st.session_state:
        st.session_state["feed_dir"] = default_feed_dir or ctx.settings.feed_dir
    if "watch_ttl" not in st.session_state:
        st.session_state["watch_ttl"] = int(default_watch_ttl)
    if "cache_ttl" not in st.session_state:
        st.session_state["cache_ttl"] = 600
    if "cache_persist" not in st.session_state:
        st.session_state["cache_persist"] = False

    st.markdown("### Workflow Monitor")
    c1, c2, c3 = st.columns([0.45, 0.35, 0.20])

    with c1:
        feed_dir = st.text_input("Feed directory", value=st.session_state["feed_dir"])
        st.session_state["feed_dir"] = feed_dir
        mtime = feed_mtime(feed_dir) if Path(feed_dir).is_dir() else None
        if mtime is not None:
            st.caption(f"Updated: {format_ts(mtime)} ({humanize_ago(mtime)})")
        else:
            st.caption("No feed files found (events / anomalies / stats).")

    with c2:
        cols_mid = st.columns([0.33, 0.67])
        with cols_mid[0]:
            if st.button("Refresh"):
                st.cache_data.clear()
                st.rerun()
        with cols_mid[1]:
            with st.expander("Cache", expanded=False):
                watch_ttl = st.number_input(
                    "Auto-refresh interval (seconds)",
                    min_value=0,
                    value=int(st.session_state["watch_ttl"]),
                    step=5,
                    key="pref_watch_ttl",
                )
                ttl = st.number_input(
                    "Cache TTL (seconds)",
                    min_value=0,
                    value=int(st.session_state["cache_ttl"]),
                    step=60,
                    help="0 disables TTL; ignored while live updates are on",
                    key="cache_ttl_header",
                )
                persist = st.checkbox(
                    "Persist to disk",
                    value=bool(st.session_state["cache_persist"]),
                    key="cache_persist_header",
                )
                st.session_state["watch_ttl"] = int(watch_ttl)
                st.session_state["cache_ttl"] = int(ttl)
                st.session_state["cache_persist"] = bool(persist)

    with c3:
        other = "light" if ctx.theme.is_dark else "dark"
        st.caption(f"Theme: {ctx.theme.current_theme()}")
        if st.button(f"Switch to {other}", key="theme_toggle"):
            ctx.theme.toggle()
            st.rerun()
        if ctx.theme.error:
            st.caption(f"Theme preference not saved: {ctx.theme.error}")

    if ctx.filters.live_updates and int(st.session_state["watch_ttl"]) > 0:
        ttl_value: int | None = int(st.session_state["watch_ttl"])
    else:
        ttl_value = int(st.session_state["cache_ttl"]) or None
    cache_cfg = CacheConfig(ttl=ttl_value, persist=bool(st.session_state["cache_persist"]))
    return feed_dir, cache_cfg


def _render_toggle_row(
    ctx: DashboardContext, dimension: FilterDimension, options: tuple[str, ...], title: str
) -> None:
    st.caption(title)
    selected = (
        ctx.filters.categories
        if dimension is FilterDimension.CATEGORIES
        else ctx.filters.anomaly_types
    )
    cols = st.columns(len(options))
    for col, option in zip(cols, options):
        with col:
            clicked = st.button(
                format_label(option),
                key=f"filter_{dimension.value}_{option}",
                type="primary" if option in selected else "secondary",
                use_container_width=True,
            )
            if clicked:
                ctx.filters.toggle(dimension, option)
                st.rerun()


def render_filters(ctx: DashboardContext) -> None:
    """Render filter controls bound to the session FilterStore.

    Args:
        ctx (DashboardContext): Session context.
    """
    with st.expander("Filters", expanded=ctx.filters.has_active_filters()):
        _render_toggle_row(ctx, FilterDimension.CATEGORIES, CATEGORY_OPTIONS, "Categories")
        _render_toggle_row(
            ctx, FilterDimension.ANOMALY_TYPES, ANOMALY_TYPE_OPTIONS, "Anomaly types"
        )

        c1, c2, c3 = st.columns([0.5, 0.25, 0.25])
        with c1:
            ranges = [tr.value for tr in TimeRange]
            choice = st.radio(
                "Time range",
                options=ranges,
                index=ranges.index(ctx.filters.time_range.value),
                horizontal=True,
                key="filter_time_range",
            )
            ctx.filters.set_time_range(choice)
        with c2:
            live = st.toggle("Live updates", value=ctx.filters.live_updates, key="filter_live")
            ctx.filters.set_live_updates(live)
        with c3:
            if ctx.filters.has_active_filters() and st.button("Clear filters"):
                ctx.filters.clear()
                st.rerun()
