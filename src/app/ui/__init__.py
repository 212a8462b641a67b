"""
flowwatch App UI package.

This package contains the Streamlit UI for the workflow-monitoring dashboard. It
exposes high-level orchestration and focused modules for separate concerns.

Modules:
    - app: Streamlit application orchestrator (streamlit_app).
    - header: Global header (feed directory, theme, cache preferences) and filters.
    - state: Per-session DashboardContext and session-backed theme preference storage.
    - helpers: Small cross-cutting helpers (time formatting, KPI cards, record tables).

Usage:
    from app.ui import streamlit_app
    streamlit_app(default_feed_dir="feeds", default_watch_ttl=10)
"""

from __future__ import annotations

from .app import streamlit_app
from .header import render_filters, render_header

__all__ = [
    "streamlit_app",
    "render_header",
    "render_filters",
]
