"""Anomalies store: severity views, severity/type groupings, and hour bucketing."""

from __future__ import annotations

from datetime import UTC, tzinfo

from flowwatch.constants import UNKNOWN
from flowwatch.models import Anomaly, Severity, severity_from_value
from flowwatch.reactive import Computed, derive

from .base import Clock, TimedCollectionStore, count_by

__all__ = ["AnomaliesStore"]


def _severity_key(anomaly: Anomaly) -> str:
    severity = severity_from_value(anomaly.severity)
    return severity.value if severity is not None else UNKNOWN


class AnomaliesStore(TimedCollectionStore[Anomaly]):
    """
    Store for Anomaly records.

    Notes:
        ``group_by_hour`` buckets by ``Anomaly.hour`` when set and by the timestamp
        otherwise, while the 24-hour window itself is always timestamp based. The two
        can disagree for a record whose override differs from its timestamp hour.
    """

    record_type = Anomaly

    def __init__(self, *, clock: Clock | None = None, tz: tzinfo = UTC) -> None:
        super().__init__(clock=clock, tz=tz)
        self._severity_views: dict[Severity, Computed[tuple[Anomaly, ...]]] = {
            severity: derive(
                lambda items, s=severity.value: tuple(a for a in items if a.severity == s),
                self._items,
            )
            for severity in Severity
        }
        self._by_severity = derive(
            lambda items: count_by(items, _severity_key, (s.value for s in Severity)),
            self._items,
        )
        self._by_type = derive(lambda items: count_by(items, lambda a: a.type), self._items)

    def _hour_of(self, item: Anomaly) -> int | None:
        return item.hour_of_day(self._tz)

    def with_severity(self, severity: Severity | str) -> list[Anomaly]:
        if isinstance(severity, Severity):
            canonical: Severity | None = severity
        else:
            canonical = severity_from_value(severity)
        with self._lock:
            if canonical is not None:
                return list(self._severity_views[canonical].read())
            wanted = str(severity).strip().lower()
            return [a for a in self._items.read() if a.severity == wanted]

    def critical(self) -> list[Anomaly]:
        return self.with_severity(Severity.CRITICAL)

    def high(self) -> list[Anomaly]:
        return self.with_severity(Severity.HIGH)

    def medium(self) -> list[Anomaly]:
        return self.with_severity(Severity.MEDIUM)

    def low(self) -> list[Anomaly]:
        return self.with_severity(Severity.LOW)

    def group_by_severity(self) -> dict[str, int]:
        """Counts for all four severities (low..critical), plus "unknown" if any."""
        with self._lock:
            return dict(self._by_severity.read())

    def group_by_type(self) -> dict[str, int]:
        with self._lock:
            return dict(self._by_type.read())
