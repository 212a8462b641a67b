"""
UI filter state: category and anomaly-type selections, time range, live updates.

Selection sets follow the sentinel rule:
- selecting ``"all"`` clears every other member;
- selecting another value removes ``"all"`` and flips that value's membership;
- a selection never becomes empty: deselecting the last value reinstates ``"all"``.

Examples:
    >>> from flowwatch.stores.filters import FilterStore
    >>> f = FilterStore()
    >>> f.toggle_category("approval")
    True
    >>> sorted(f.categories)
    ['approval']
    >>> f.toggle_category("approval")
    True
    >>> sorted(f.categories)
    ['all']
"""

from __future__ import annotations

import logging
import operator
import re
import threading
from dataclasses import dataclass
from enum import Enum

from flowwatch.constants import ALL
from flowwatch.models import TimeRange
from flowwatch.reactive import Signal, derive

__all__ = [
    "FilterDimension",
    "FilterState",
    "FilterStore",
    "toggle_selection",
    "format_label",
]

logger = logging.getLogger(__name__)

ALL_ONLY: frozenset[str] = frozenset({ALL})


class FilterDimension(Enum):
    CATEGORIES = "categories"
    ANOMALY_TYPES = "anomaly_types"


@dataclass(frozen=True)
class FilterState:
    """Snapshot of the filter store."""

    categories: frozenset[str]
    anomaly_types: frozenset[str]
    time_range: TimeRange
    live_updates: bool


def toggle_selection(current: frozenset[str], value: str) -> frozenset[str]:
    """Apply one toggle under the sentinel rule and return the new selection."""
    if value == ALL:
        return ALL_ONLY
    selected = set(current)
    selected.discard(ALL)
    if value in selected:
        selected.discard(value)
    else:
        selected.add(value)
    return frozenset(selected) if selected else ALL_ONLY


def format_label(text: str) -> str:
    """Human label for an option value, e.g. "sla_breach" -> "Sla Breach"."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), text.replace("_", " "))


def _dimension(value: FilterDimension | str) -> FilterDimension | None:
    if isinstance(value, FilterDimension):
        return value
    try:
        return FilterDimension(str(value))
    except ValueError:
        return None


class FilterStore:
    """
    In-memory filter state consumed by the dashboard views.

    Args:
        time_range (TimeRange | str): Initial time range (default 24h).
        live_updates (bool): Initial live-updates toggle.
    """

    def __init__(
        self, *, time_range: TimeRange | str = TimeRange.H24, live_updates: bool = True
    ) -> None:
        self._lock = threading.RLock()
        self._selections: dict[FilterDimension, Signal[frozenset[str]]] = {
            dim: Signal(ALL_ONLY, equal=operator.eq) for dim in FilterDimension
        }
        if isinstance(time_range, str):
            time_range = TimeRange(time_range)
        self._time_range: Signal[TimeRange] = Signal(time_range)
        self._live_updates: Signal[bool] = Signal(bool(live_updates))
        categories = self._selections[FilterDimension.CATEGORIES]
        anomaly_types = self._selections[FilterDimension.ANOMALY_TYPES]
        self._has_active = derive(
            lambda c, a: c != ALL_ONLY or a != ALL_ONLY, categories, anomaly_types
        )
        self._state = derive(
            FilterState, categories, anomaly_types, self._time_range, self._live_updates
        )

    # ---------- state ----------

    @property
    def categories(self) -> frozenset[str]:
        return self._selections[FilterDimension.CATEGORIES].read()

    @property
    def anomaly_types(self) -> frozenset[str]:
        return self._selections[FilterDimension.ANOMALY_TYPES].read()

    @property
    def time_range(self) -> TimeRange:
        return self._time_range.read()

    @property
    def live_updates(self) -> bool:
        return self._live_updates.read()

    def state(self) -> FilterState:
        with self._lock:
            return self._state.read()

    def has_active_filters(self) -> bool:
        with self._lock:
            return self._has_active.read()

    def window_hours(self) -> int:
        return self.time_range.hours

    def allows(self, dimension: FilterDimension | str, value: str) -> bool:
        """True if ``value`` passes the selection for ``dimension``."""
        dim = _dimension(dimension)
        if dim is None:
            return True
        selected = self._selections[dim].read()
        return ALL in selected or value in selected

    # ---------- mutations ----------

    def toggle(self, dimension: FilterDimension | str, value: str) -> bool:
        """Toggle ``value`` in ``dimension``; unknown dimensions are a no-op (False)."""
        dim = _dimension(dimension)
        if dim is None or not isinstance(value, str):
            logger.warning("ignoring toggle(%r, %r)", dimension, value)
            return False
        with self._lock:
            sig = self._selections[dim]
            sig.write(toggle_selection(sig.read(), value))
            return True

    def toggle_category(self, category: str) -> bool:
        return self.toggle(FilterDimension.CATEGORIES, category)

    def toggle_anomaly_type(self, anomaly_type: str) -> bool:
        return self.toggle(FilterDimension.ANOMALY_TYPES, anomaly_type)

    def clear(self) -> None:
        with self._lock:
            for sig in self._selections.values():
                sig.write(ALL_ONLY)

    def set_time_range(self, time_range: TimeRange | str) -> bool:
        try:
            tr = time_range if isinstance(time_range, TimeRange) else TimeRange(time_range)
        except ValueError:
            logger.warning("ignoring unknown time range %r", time_range)
            return False
        with self._lock:
            self._time_range.write(tr)
            return True

    def toggle_live_updates(self) -> None:
        with self._lock:
            self._live_updates.update(lambda enabled: not enabled)

    def set_live_updates(self, enabled: bool) -> None:
        with self._lock:
            self._live_updates.write(bool(enabled))
