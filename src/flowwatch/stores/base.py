"""
Shared machinery for time-stamped entity stores.

``TimedCollectionStore`` owns one ordered collection of records keyed by ``id`` plus
its loading/error flags, and exposes the time-windowed views common to the events
and anomalies stores.

Invariants
- Identity is ``id``: adding a record whose id is already stored replaces it in place,
  keeping the position of the first occurrence. Size always equals the number of
  distinct ids.
- ``last_n_hours`` re-filters against the clock on every call. Only the clock-free
  part (parse + stable ascending sort) is memoized.
- Records whose timestamp cannot be parsed are left out of time-windowed views and
  still present in ``items`` and whole-collection groupings.

Notes
- Mutations and reads are serialized by a per-instance RLock.
"""

from __future__ import annotations

import logging
import threading
from bisect import bisect_left
from collections.abc import Callable, Iterable
from datetime import UTC, date, datetime, timedelta, tzinfo
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from flowwatch.constants import DEFAULT_WINDOW_HOURS
from flowwatch.reactive import Computed, Signal, derive

__all__ = ["TimedCollectionStore", "count_by", "utcnow"]

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


def count_by(
    items: Iterable[Any], key: Callable[[Any], str], canonical: Iterable[str] = ()
) -> dict[str, int]:
    """Count items per key; canonical keys are always present (possibly 0)."""
    counts: dict[str, int] = {k: 0 for k in canonical}
    for item in items:
        k = key(item)
        counts[k] = counts.get(k, 0) + 1
    return counts


def _merge(existing: Iterable[R], incoming: Iterable[R]) -> tuple[R, ...]:
    by_id: dict[str, R] = {item.id: item for item in existing}  # type: ignore[attr-defined]
    for item in incoming:
        by_id[item.id] = item  # type: ignore[attr-defined]
    return tuple(by_id.values())


def _build_timeline(items: tuple[R, ...]) -> tuple[tuple[datetime, ...], tuple[R, ...]]:
    dated = [(item.instant, item) for item in items]  # type: ignore[attr-defined]
    # sorted() is stable: equal instants keep insertion order.
    ordered = sorted(((ts, item) for ts, item in dated if ts is not None), key=lambda p: p[0])
    return tuple(ts for ts, _ in ordered), tuple(item for _, item in ordered)


class TimedCollectionStore(Generic[R]):
    """
    Base store for records carrying ``id`` and ``timestamp``.

    Args:
        clock (Callable[[], datetime] | None): Wall clock returning an aware datetime;
            defaults to UTC now.
        tz (tzinfo): Zone used for hour-of-day and calendar-day views.

    Notes:
        Subclasses set ``record_type`` and may override ``_hour_of``.
    """

    record_type: ClassVar[type[BaseModel]]

    def __init__(self, *, clock: Clock | None = None, tz: tzinfo = UTC) -> None:
        self._lock = threading.RLock()
        self._clock: Clock = clock or utcnow
        self._tz = tz
        self._items: Signal[tuple[R, ...]] = Signal(())
        self._loading: Signal[bool] = Signal(True)
        self._error: Signal[str | None] = Signal(None)
        self._index: Computed[dict[str, R]] = derive(
            lambda items: {item.id: item for item in items}, self._items
        )
        self._timeline = derive(_build_timeline, self._items)

    # ---------- state ----------

    @property
    def items(self) -> tuple[R, ...]:
        with self._lock:
            return self._items.read()

    @property
    def loading(self) -> bool:
        return self._loading.read()

    @property
    def error(self) -> str | None:
        return self._error.read()

    @property
    def size(self) -> int:
        return len(self.items)

    @property
    def signal(self) -> Signal[tuple[R, ...]]:
        """Underlying collection signal, for building further derived views."""
        return self._items

    def get(self, item_id: object) -> R | None:
        if not isinstance(item_id, str):
            return None
        with self._lock:
            return self._index.read().get(item_id)

    # ---------- mutations ----------

    def _accept(self, items: Iterable[Any]) -> list[R]:
        accepted: list[R] = []
        for item in items:
            if isinstance(item, self.record_type):
                accepted.append(item)  # type: ignore[arg-type]
            else:
                logger.warning(
                    "%s ignoring %s (expected %s)",
                    type(self).__name__,
                    type(item).__name__,
                    self.record_type.__name__,
                )
        return accepted

    def set_all(self, items: Iterable[R]) -> None:
        incoming = self._accept(items)
        with self._lock:
            self._items.write(_merge((), incoming))
            logger.debug("%s set_all size=%d", type(self).__name__, len(self._items.read()))

    def add(self, item: R) -> None:
        self.add_many([item])

    def add_many(self, items: Iterable[R]) -> None:
        incoming = self._accept(items)
        if not incoming:
            return
        with self._lock:
            self._items.write(_merge(self._items.read(), incoming))
            logger.debug(
                "%s add_many n=%d size=%d",
                type(self).__name__,
                len(incoming),
                len(self._items.read()),
            )

    def remove(self, item_id: object) -> bool:
        """Remove by id; absent or non-string ids are a no-op returning False."""
        if not isinstance(item_id, str):
            return False
        with self._lock:
            if item_id not in self._index.read():
                return False
            items = self._items.read()
            self._items.write(tuple(i for i in items if i.id != item_id))  # type: ignore[attr-defined]
            return True

    def clear(self) -> None:
        with self._lock:
            self._items.write(())

    def set_loading(self, loading: bool) -> None:
        with self._lock:
            self._loading.write(bool(loading))

    def set_error(self, error: str | None) -> None:
        with self._lock:
            self._error.write(error)

    # ---------- time-windowed views ----------

    def _now(self, now: datetime | None) -> datetime:
        current = now or self._clock()
        if current.tzinfo is None:
            current = current.replace(tzinfo=UTC)
        return current

    def _hour_of(self, item: R) -> int | None:
        instant = item.instant  # type: ignore[attr-defined]
        return None if instant is None else instant.astimezone(self._tz).hour

    def last_n_hours(self, hours: float, now: datetime | None = None) -> list[R]:
        """Records with ``timestamp >= now - hours``, ascending by timestamp (stable)."""
        cutoff = self._now(now) - timedelta(hours=hours)
        with self._lock:
            instants, ordered = self._timeline.read()
        start = bisect_left(instants, cutoff)
        return list(ordered[start:])

    def last_24_hours(self, now: datetime | None = None) -> list[R]:
        return self.last_n_hours(DEFAULT_WINDOW_HOURS, now)

    def group_by_hour(self, now: datetime | None = None) -> dict[int, list[R]]:
        """Partition ``last_24_hours`` by hour of day (ascending hour keys)."""
        buckets: dict[int, list[R]] = {}
        for item in self.last_24_hours(now):
            hour = self._hour_of(item)
            if hour is None:
                continue
            buckets.setdefault(hour, []).append(item)
        return dict(sorted(buckets.items()))

    def today(self, now: datetime | None = None) -> list[R]:
        """Records whose timestamp falls on the current calendar day in ``tz``."""
        day: date = self._now(now).astimezone(self._tz).date()
        with self._lock:
            instants, ordered = self._timeline.read()
        return [
            item for ts, item in zip(instants, ordered) if ts.astimezone(self._tz).date() == day
        ]
