"""
flowwatch.stores — reactive state containers for the dashboard.

## Public API
- EventsStore — workflow events with time-window and status/category views.
- AnomaliesStore — anomalies with severity/type views and hour-of-day buckets.
- MetricsStore — overview statistics and their status classifications.
- FilterStore — category/anomaly-type selections, time range, live updates.
- ThemeStore — dark/light mode with persisted and ambient preferences.

## Notes
- Every store is an explicit instance; nothing here is a module-level singleton.
- Mutations never raise for malformed input; they log and ignore it.
"""

from __future__ import annotations

from .anomalies import AnomaliesStore
from .events import EventsStore
from .filters import FilterDimension, FilterState, FilterStore
from .metrics import MetricsStore
from .theme import (
    AmbientPreference,
    MemoryPreferenceStorage,
    PreferenceStorage,
    StaticAmbientPreference,
    ThemeStore,
)

__all__ = [
    "AnomaliesStore",
    "EventsStore",
    "FilterDimension",
    "FilterState",
    "FilterStore",
    "MetricsStore",
    "AmbientPreference",
    "MemoryPreferenceStorage",
    "PreferenceStorage",
    "StaticAmbientPreference",
    "ThemeStore",
]
