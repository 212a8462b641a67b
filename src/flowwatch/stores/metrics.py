"""
Overview metrics store.

Holds the singleton OverviewStats record with its loading flag and last-update stamp,
and derives the three status classifications shown on the KPI cards.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from flowwatch.constants import (
    ANOMALY_COUNT_THRESHOLDS,
    CYCLE_TIME_THRESHOLDS,
    SLA_THRESHOLDS,
)
from flowwatch.models import OverviewStats
from flowwatch.reactive import Signal, derive

from .base import Clock, utcnow

__all__ = [
    "MetricsStore",
    "classify_sla",
    "classify_cycle_time",
    "classify_anomaly_count",
]

logger = logging.getLogger(__name__)


def classify_sla(compliance: float) -> str:
    """Map SLA compliance (%) to excellent/good/warning/critical."""
    for bound, label in SLA_THRESHOLDS:
        if compliance >= bound:
            return label
    return "critical"


def classify_cycle_time(minutes: float) -> str:
    """Map average cycle time (minutes) to fast/normal/slow/critical."""
    for bound, label in CYCLE_TIME_THRESHOLDS:
        if minutes < bound:
            return label
    return "critical"


def classify_anomaly_count(count: int) -> str:
    """Map the active anomaly count to none/low/medium/high."""
    if count == 0:
        return "none"
    for bound, label in ANOMALY_COUNT_THRESHOLDS:
        if count < bound:
            return label
    return "high"


def _field_name(key: str) -> str | None:
    fields = OverviewStats.model_fields
    if key in fields:
        return key
    for name, info in fields.items():
        if info.alias == key:
            return name
    return None


class MetricsStore:
    """
    Store for the OverviewStats singleton.

    Args:
        clock (Callable[[], datetime] | None): Source for ``last_updated`` stamps.
    """

    def __init__(self, *, clock: Clock | None = None) -> None:
        self._lock = threading.RLock()
        self._clock: Clock = clock or utcnow
        self._stats: Signal[OverviewStats] = Signal(OverviewStats())
        self._loading: Signal[bool] = Signal(True)
        self._last_updated: Signal[datetime | None] = Signal(None)
        self._sla_status = derive(lambda s: classify_sla(s.sla_compliance), self._stats)
        self._cycle_time_status = derive(
            lambda s: classify_cycle_time(s.average_cycle_time), self._stats
        )
        self._anomaly_status = derive(
            lambda s: classify_anomaly_count(s.active_anomalies_count), self._stats
        )

    @property
    def stats(self) -> OverviewStats:
        return self._stats.read()

    @property
    def loading(self) -> bool:
        return self._loading.read()

    @property
    def last_updated(self) -> datetime | None:
        return self._last_updated.read()

    @property
    def signal(self) -> Signal[OverviewStats]:
        return self._stats

    def set_stats(self, stats: OverviewStats | Mapping[str, Any]) -> bool:
        """
        Replace the stats record.

        Args:
            stats: An OverviewStats, or a mapping validated into one (unset fields take
                their defaults).

        Returns:
            bool: False if ``stats`` is neither, or fails validation (stats are left
            unchanged).
        """
        if not isinstance(stats, OverviewStats):
            if not isinstance(stats, Mapping):
                logger.warning("set_stats ignoring %s", type(stats).__name__)
                return False
            try:
                stats = OverviewStats.model_validate(stats)
            except ValidationError as e:
                logger.warning("set_stats rejected mapping: %s", e.error_count())
                return False
        with self._lock:
            self._stats.write(stats)
            self._last_updated.write(self._clock())
            return True

    def update_stats(self, partial: Mapping[str, Any] | OverviewStats) -> bool:
        """
        Shallow-merge ``partial`` over the current stats.

        Args:
            partial: Mapping using field names or camelCase aliases, or an OverviewStats
                (only its explicitly set fields are merged).

        Returns:
            bool: False if the merged record fails validation (stats are left unchanged).
        """
        if isinstance(partial, OverviewStats):
            changes: dict[str, Any] = partial.model_dump(exclude_unset=True)
        elif not isinstance(partial, Mapping):
            logger.warning("update_stats ignoring %s", type(partial).__name__)
            return False
        else:
            changes = {}
            for key, value in partial.items():
                name = _field_name(key)
                if name is None:
                    logger.debug("update_stats ignoring unknown key %r", key)
                    continue
                changes[name] = value
        with self._lock:
            merged = {**self._stats.read().model_dump(), **changes}
            try:
                stats = OverviewStats.model_validate(merged)
            except ValidationError as e:
                logger.warning("update_stats rejected %s: %s", sorted(changes), e.error_count())
                return False
            self._stats.write(stats)
            self._last_updated.write(self._clock())
            return True

    def reset_stats(self) -> None:
        with self._lock:
            self._stats.write(OverviewStats())

    def set_loading(self, loading: bool) -> None:
        with self._lock:
            self._loading.write(bool(loading))

    def sla_status(self) -> str:
        with self._lock:
            return self._sla_status.read()

    def cycle_time_status(self) -> str:
        with self._lock:
            return self._cycle_time_status.read()

    def anomaly_status(self) -> str:
        with self._lock:
            return self._anomaly_status.read()
