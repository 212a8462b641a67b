"""Workflow events store: status views and status/category groupings."""

from __future__ import annotations

from datetime import UTC, tzinfo

from flowwatch.constants import UNKNOWN
from flowwatch.models import EventStatus, WorkflowEvent, status_from_value
from flowwatch.reactive import Computed, derive

from .base import Clock, TimedCollectionStore, count_by

__all__ = ["EventsStore"]


def _status_key(event: WorkflowEvent) -> str:
    status = status_from_value(event.status)
    return status.value if status is not None else UNKNOWN


class EventsStore(TimedCollectionStore[WorkflowEvent]):
    """
    Store for WorkflowEvent records.

    Derived views:
        - ``with_status`` / ``completed`` / ``pending`` / ``anomalous``: whole collection,
          insertion order.
        - ``group_by_status``: counts for every EventStatus (0 when absent) plus
          ``"unknown"`` when a record carries a non-canonical status.
        - ``group_by_category``: counts per category, first-seen order.
    """

    record_type = WorkflowEvent

    def __init__(self, *, clock: Clock | None = None, tz: tzinfo = UTC) -> None:
        super().__init__(clock=clock, tz=tz)
        self._status_views: dict[EventStatus, Computed[tuple[WorkflowEvent, ...]]] = {
            status: derive(
                lambda items, s=status.value: tuple(e for e in items if e.status == s),
                self._items,
            )
            for status in EventStatus
        }
        self._by_status = derive(
            lambda items: count_by(items, _status_key, (s.value for s in EventStatus)),
            self._items,
        )
        self._by_category = derive(
            lambda items: count_by(items, lambda e: e.category), self._items
        )

    def with_status(self, status: EventStatus | str) -> list[WorkflowEvent]:
        if isinstance(status, EventStatus):
            canonical: EventStatus | None = status
        else:
            canonical = status_from_value(status)
        with self._lock:
            if canonical is not None:
                return list(self._status_views[canonical].read())
            wanted = str(status).strip().lower()
            return [e for e in self._items.read() if e.status == wanted]

    def completed(self) -> list[WorkflowEvent]:
        return self.with_status(EventStatus.COMPLETED)

    def pending(self) -> list[WorkflowEvent]:
        return self.with_status(EventStatus.PENDING)

    def anomalous(self) -> list[WorkflowEvent]:
        return self.with_status(EventStatus.ANOMALY)

    def group_by_status(self) -> dict[str, int]:
        with self._lock:
            return dict(self._by_status.read())

    def group_by_category(self) -> dict[str, int]:
        with self._lock:
            return dict(self._by_category.read())
