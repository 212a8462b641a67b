from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from flowwatch.models import Anomaly, Severity
from flowwatch.stores.anomalies import AnomaliesStore

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


def _an(id: str, hours_ago: float, severity: str = "low", type: str = "delay", hour=None):
    ts = (NOW - timedelta(hours=hours_ago)).isoformat()
    return Anomaly(id=id, timestamp=ts, severity=severity, type=type, hour=hour)


def _store() -> AnomaliesStore:
    return AnomaliesStore(clock=lambda: NOW)


def test_group_by_severity_always_has_four_keys() -> None:
    s = _store()
    assert s.group_by_severity() == {"low": 0, "medium": 0, "high": 0, "critical": 0}
    s.add_many([_an("a", 1, "high"), _an("b", 2, "HIGH"), _an("c", 3, "critical")])
    assert s.group_by_severity() == {"low": 0, "medium": 0, "high": 2, "critical": 1}


def test_severity_counts_sum_to_size_after_any_mutation_sequence() -> None:
    s = _store()
    s.add_many([_an("a", 1, "low"), _an("b", 1, "medium"), _an("a", 2, "critical")])
    s.add(_an("c", 40, "bogus"))
    s.remove("b")
    s.add_many([_an("d", 1, "high"), _an("c", 1, "low")])
    counts = s.group_by_severity()
    assert sum(counts.values()) == s.size == 3
    assert "unknown" not in counts


def test_unknown_severity_gets_its_own_key() -> None:
    s = _store()
    s.add_many([_an("a", 1, "bogus"), _an("b", 1, "low")])
    counts = s.group_by_severity()
    assert counts["unknown"] == 1
    assert sum(counts.values()) == 2


def test_severity_views() -> None:
    s = _store()
    s.add_many([_an("a", 1, "critical"), _an("b", 1, "high"), _an("c", 1, "critical")])
    assert [a.id for a in s.critical()] == ["a", "c"]
    assert [a.id for a in s.high()] == ["b"]
    assert s.medium() == []
    assert s.low() == []
    assert [a.id for a in s.with_severity(Severity.CRITICAL)] == ["a", "c"]


def test_group_by_type() -> None:
    s = _store()
    s.add_many([_an("a", 1, type="delay"), _an("b", 1, type="sla_breach"), _an("c", 1)])
    assert s.group_by_type() == {"delay": 2, "sla_breach": 1}


def test_hour_override_wins_for_grouping() -> None:
    s = _store()
    s.add(_an("a", 1.5, hour=3))  # timestamp hour is 10
    assert list(s.group_by_hour()) == [3]


def test_hour_override_does_not_extend_window() -> None:
    s = _store()
    s.add_many([_an("old", 30, hour=5), _an("new", 1)])
    assert [a.id for a in s.last_24_hours()] == ["new"]
    assert 5 not in s.group_by_hour()


def test_group_by_hour_partitions_last_24_hours() -> None:
    s = _store()
    s.add_many(
        [_an("a", 1), _an("b", 2, hour=0), _an("c", 23.5), _an("d", 25), _an("e", 1.2)]
    )
    buckets = s.group_by_hour()
    ids = [a.id for group in buckets.values() for a in group]
    assert sorted(ids) == sorted(a.id for a in s.last_24_hours())
    assert len(ids) == len(set(ids))
    assert list(buckets) == sorted(buckets)


def test_hour_outside_range_is_rejected_by_model() -> None:
    with pytest.raises(ValidationError):
        Anomaly(id="x", timestamp=NOW.isoformat(), hour=24)
    with pytest.raises(ValidationError):
        Anomaly(id="x", timestamp=NOW.isoformat(), hour=-1)


def test_datetime_timestamps_are_accepted() -> None:
    s = _store()
    s.add(Anomaly(id="a", timestamp=NOW - timedelta(hours=2)))
    s.add(Anomaly(id="naive", timestamp=datetime(2026, 10, 19, 11, 0)))
    assert [a.id for a in s.last_24_hours()] == ["a", "naive"]
