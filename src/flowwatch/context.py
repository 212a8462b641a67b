"""
Dashboard context: one explicit bundle of stores per session.

``build_context`` wires every store from DashboardSettings (timezone, initial time
range, live updates, theme storage key, ambient dark preference). Callers pass the
context to ``flowwatch.ingest`` and ``flowwatch.views``; there are no module-level
store singletons.

Examples:
    >>> from flowwatch.config import DashboardSettings
    >>> from flowwatch.context import build_context
    >>> ctx = build_context(DashboardSettings(prefers_dark=False))
    >>> ctx.theme.current_theme()
    'light'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from flowwatch.charts.config import Palette
from flowwatch.config import DashboardSettings
from flowwatch.stores.anomalies import AnomaliesStore
from flowwatch.stores.base import Clock
from flowwatch.stores.events import EventsStore
from flowwatch.stores.filters import FilterStore
from flowwatch.stores.metrics import MetricsStore
from flowwatch.stores.theme import (
    AmbientPreference,
    PreferenceStorage,
    StaticAmbientPreference,
    ThemeStore,
)

__all__ = ["DashboardContext", "build_context"]

logger = logging.getLogger(__name__)


@dataclass
class DashboardContext:
    """Stores shared by the inbound interface and the consuming views."""

    settings: DashboardSettings
    events: EventsStore
    anomalies: AnomaliesStore
    metrics: MetricsStore
    filters: FilterStore
    theme: ThemeStore

    def palette(self) -> Palette:
        return self.theme.palette()

    def close(self) -> None:
        self.theme.close()


def build_context(
    settings: DashboardSettings | None = None,
    *,
    storage: PreferenceStorage | None = None,
    ambient: AmbientPreference | None = None,
    clock: Clock | None = None,
) -> DashboardContext:
    """
    Build a DashboardContext.

    Args:
        settings (DashboardSettings | None): Settings; ``DashboardSettings.load()`` if None.
        storage (PreferenceStorage | None): Theme preference persistence (in-memory default).
        ambient (AmbientPreference | None): Host color-scheme signal; defaults to a static
            preference built from ``settings.prefers_dark``.
        clock (Callable[[], datetime] | None): Wall clock for windowed views and stamps.

    Raises:
        SettingsError: If ``settings.timezone`` is not a known zone.
    """
    s = settings or DashboardSettings.load()
    tz = s.tzinfo()
    ctx = DashboardContext(
        settings=s,
        events=EventsStore(clock=clock, tz=tz),
        anomalies=AnomaliesStore(clock=clock, tz=tz),
        metrics=MetricsStore(clock=clock),
        filters=FilterStore(time_range=s.default_time_range, live_updates=s.live_updates),
        theme=ThemeStore(
            storage,
            ambient or StaticAmbientPreference(s.prefers_dark),
            storage_key=s.theme_storage_key,
        ),
    )
    logger.debug("context built tz=%s range=%s", s.timezone, s.default_time_range)
    return ctx
