"""
Exception types for the flowwatch package.

Purpose
- Give each failure surface of the dashboard core a typed error.
- Keep store mutations total: stores never raise these across their public
  boundary; they record failures on their ``error`` state instead.

Error map
- SettingsError: invalid configuration that cannot be defaulted (e.g., unknown timezone).
- PreferenceStorageError: the theme preference backend is unavailable.
- ChartKindError: ``build_spec`` was asked for a chart kind it does not know.
- FeedError: a feed file for the Streamlit shell is missing or unreadable.

Notes
- These exceptions perform no IO and are stdlib-only.
"""

from __future__ import annotations

__all__ = [
    "FlowwatchError",
    "SettingsError",
    "PreferenceStorageError",
    "ChartKindError",
    "FeedError",
]


class FlowwatchError(Exception):
    """
    Base class for errors raised by flowwatch.

    Notes:
        Use this as a catch-all for dashboard-layer failures.
    """


class SettingsError(FlowwatchError):
    """
    Raised when a configuration value is present but unusable.

    Examples:
        - Timezone name not known to the zoneinfo database
    """


class PreferenceStorageError(FlowwatchError):
    """
    Raised by a preference backend when it cannot read or write.

    Notes:
        ThemeStore catches this, logs it, and exposes the message on ``ThemeStore.error``.
    """


class ChartKindError(FlowwatchError, ValueError):
    """Unknown chart kind passed to the chart specification engine."""


class FeedError(FlowwatchError):
    """
    Raised when an event, anomaly, or stats feed cannot be loaded.

    Notes:
        Only the Streamlit shell (app.data) raises this; the core never reads files.
    """
