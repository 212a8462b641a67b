from __future__ import annotations

import time
from datetime import datetime

from app.ui.helpers import format_ts, humanize_ago, kpi_cards, records_frame
from flowwatch.models import OverviewStats, WorkflowEvent
from flowwatch.stores.metrics import MetricsStore


def test_humanize_ago_and_format_ts_smoke() -> None:
    now = time.time()
    assert "ago" in humanize_ago(now - 2)
    assert isinstance(format_ts(now), str) and len(format_ts(now)) >= 10


def test_humanize_ago_units() -> None:
    now = 1_000_000.0
    assert humanize_ago(now - 5, now) == "5s ago"
    assert humanize_ago(now - 125, now) == "2m ago"
    assert humanize_ago(now - 3 * 3600, now) == "3h ago"
    assert humanize_ago(now - 2 * 86400, now) == "2d ago"
    assert humanize_ago(now + 30, now) == "0s ago"
    assert humanize_ago(float("nan")) == "n/a"


def test_format_ts_handles_datetimes_and_missing() -> None:
    assert format_ts(datetime(2026, 10, 19, 8, 5, 9)) == "2026-10-19 08:05:09"
    assert format_ts(None) == "n/a"


def test_kpi_cards_follow_metric_statuses() -> None:
    m = MetricsStore()
    m.set_stats(
        OverviewStats(
            totalWorkflowsToday=1234,
            averageCycleTime=42.3,
            slaCompliance=96.0,
            activeAnomaliesCount=12,
        )
    )
    cards = kpi_cards(m)
    assert [c["label"] for c in cards] == [
        "Workflows today",
        "Avg cycle time",
        "SLA compliance",
        "Active anomalies",
    ]
    assert [c["value"] for c in cards] == ["1,234", "42.3 min", "96.0%", "12"]
    assert [c["status"] for c in cards] == ["", "normal", "excellent", "high"]
    assert cards[2]["delta_color"] == "normal"
    assert cards[3]["delta_color"] == "inverse"


def test_records_frame_sorts_newest_first() -> None:
    events = [
        WorkflowEvent(id="a", timestamp="2026-10-19T08:00:00+00:00", category="approval"),
        WorkflowEvent(id="b", timestamp="2026-10-19T09:00:00+00:00", category="case_intake"),
    ]
    df = records_frame(events, ["id", "timestamp", "category"])
    assert df.columns == ["id", "timestamp", "category"]
    assert df["id"].to_list() == ["b", "a"]


def test_records_frame_empty_keeps_columns() -> None:
    df = records_frame([], ["id", "severity"])
    assert df.height == 0
    assert df.columns == ["id", "severity"]
