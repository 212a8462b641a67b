from __future__ import annotations

from datetime import UTC, datetime

import pytest

from flowwatch.models import OverviewStats
from flowwatch.stores.metrics import (
    MetricsStore,
    classify_anomaly_count,
    classify_cycle_time,
    classify_sla,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    "value, expected",
    [(100.0, "excellent"), (95.0, "excellent"), (94.9, "good"), (85.0, "good"),
     (70.0, "warning"), (69.99, "critical"), (0.0, "critical")],
)
def test_classify_sla(value: float, expected: str) -> None:
    assert classify_sla(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [(0.0, "fast"), (29.9, "fast"), (30.0, "normal"), (59.9, "normal"), (60.0, "slow"),
     (90.0, "critical")],
)
def test_classify_cycle_time(value: float, expected: str) -> None:
    assert classify_cycle_time(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [(0, "none"), (1, "low"), (4, "low"), (5, "medium"), (9, "medium"), (10, "high")],
)
def test_classify_anomaly_count(value: int, expected: str) -> None:
    assert classify_anomaly_count(value) == expected


def test_defaults() -> None:
    m = MetricsStore(clock=lambda: NOW)
    assert m.stats == OverviewStats()
    assert m.stats.sla_compliance == 100.0
    assert m.loading is True
    assert m.last_updated is None
    assert m.sla_status() == "excellent"
    assert m.anomaly_status() == "none"


def test_update_stats_merges_aliases_and_stamps_time() -> None:
    m = MetricsStore(clock=lambda: NOW)
    assert m.update_stats({"slaCompliance": 80.0, "active_anomalies_count": 7}) is True
    assert m.stats.sla_compliance == 80.0
    assert m.stats.active_anomalies_count == 7
    assert m.stats.total_workflows_today == 0
    assert m.last_updated == NOW
    assert m.sla_status() == "warning"
    assert m.anomaly_status() == "medium"


def test_update_stats_rejects_invalid_and_keeps_previous() -> None:
    m = MetricsStore(clock=lambda: NOW)
    m.update_stats({"averageCycleTime": 45.0})
    before = m.stats
    assert m.update_stats({"slaCompliance": 150.0}) is False
    assert m.stats is before
    assert m.cycle_time_status() == "normal"


def test_update_stats_ignores_unknown_keys() -> None:
    m = MetricsStore()
    assert m.update_stats({"somethingElse": 1, "totalWorkflowsToday": 3}) is True
    assert m.stats.total_workflows_today == 3


def test_set_and_reset_stats() -> None:
    m = MetricsStore(clock=lambda: NOW)
    m.set_stats(OverviewStats(totalWorkflowsToday=10, averageCycleTime=95.0))
    assert m.cycle_time_status() == "critical"
    assert m.last_updated == NOW
    m.reset_stats()
    assert m.stats == OverviewStats()
    m.set_loading(False)
    assert m.loading is False


def test_update_stats_merges_only_fields_set_on_a_model() -> None:
    m = MetricsStore(clock=lambda: NOW)
    m.update_stats({"totalWorkflowsToday": 12, "averageCycleTime": 40.0})
    assert m.update_stats(OverviewStats(slaCompliance=80.0)) is True
    assert m.stats.total_workflows_today == 12
    assert m.stats.average_cycle_time == 40.0
    assert m.stats.sla_compliance == 80.0


def test_set_stats_validates_mappings() -> None:
    m = MetricsStore(clock=lambda: NOW)
    assert m.set_stats({"totalWorkflowsToday": 3}) is True
    assert m.stats == OverviewStats(totalWorkflowsToday=3)
    assert m.sla_status() == "excellent"


@pytest.mark.parametrize("bad", [{"slaCompliance": 101.0}, 42, None, ["x"]])
def test_set_stats_rejects_invalid_input_and_keeps_previous(bad) -> None:
    m = MetricsStore(clock=lambda: NOW)
    m.set_stats(OverviewStats(totalWorkflowsToday=5))
    before = m.stats
    assert m.set_stats(bad) is False
    assert m.stats is before
    assert m.sla_status() == "excellent"
    assert m.anomaly_status() == "none"


def test_update_stats_rejects_non_mapping() -> None:
    m = MetricsStore()
    assert m.update_stats(7) is False  # type: ignore[arg-type]
    assert m.stats == OverviewStats()
