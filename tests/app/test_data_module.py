from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from app.data import (
    CacheConfig,
    _load_anomalies_impl,
    _load_events_impl,
    _load_stats_impl,
    create_demo_feed,
    feed_mtime,
    find_feed,
    load_events_feed,
)
from flowwatch.config import DashboardSettings
from flowwatch.context import build_context
from flowwatch.errors import FeedError
from flowwatch.ingest import push_anomalies, push_events, push_stats

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


def _demo(tmp_path: Path) -> Path:
    feed_dir = tmp_path / "feeds"
    create_demo_feed(feed_dir, now=NOW, n_events=20, n_anomalies=5)
    return feed_dir


def test_demo_feed_files_and_discovery(tmp_path: Path) -> None:
    feed_dir = _demo(tmp_path)
    assert find_feed(feed_dir, "events") == feed_dir / "events.ndjson"
    assert find_feed(feed_dir, "anomalies") == feed_dir / "anomalies.ndjson"
    assert find_feed(feed_dir, "stats") == feed_dir / "stats.json"
    assert find_feed(feed_dir, "missing") is None
    assert feed_mtime(feed_dir) is not None


def test_demo_feed_is_deterministic(tmp_path: Path) -> None:
    a = tmp_path / "a"
    b = tmp_path / "b"
    create_demo_feed(a, now=NOW, n_events=10, n_anomalies=4)
    create_demo_feed(b, now=NOW, n_events=10, n_anomalies=4)
    assert _load_events_impl(str(a)) == _load_events_impl(str(b))
    assert _load_anomalies_impl(str(a)) == _load_anomalies_impl(str(b))


def test_demo_feed_round_trips_into_stores(tmp_path: Path) -> None:
    feed_dir = str(_demo(tmp_path))
    ctx = build_context(DashboardSettings(), clock=lambda: NOW)

    assert push_events(ctx, _load_events_impl(feed_dir), replace=True) == 20
    assert push_anomalies(ctx, _load_anomalies_impl(feed_dir), replace=True) == 5
    stats = _load_stats_impl(feed_dir)
    assert stats is not None
    assert push_stats(ctx, stats) is True

    assert ctx.events.size == 20
    assert len(ctx.events.last_24_hours()) == 20
    assert sum(ctx.anomalies.group_by_severity().values()) == 5
    assert ctx.metrics.stats.total_workflows_today == 20
    assert ctx.metrics.stats.active_anomalies_count == 5


def test_missing_feeds_load_as_empty(tmp_path: Path) -> None:
    assert _load_events_impl(str(tmp_path)) == []
    assert _load_anomalies_impl(str(tmp_path)) == []
    assert _load_stats_impl(str(tmp_path)) is None
    assert feed_mtime(tmp_path) is None


def test_json_array_feed_is_read(tmp_path: Path) -> None:
    rows = [{"id": "e1", "timestamp": "2026-10-19T10:00:00+00:00", "category": "approval"}]
    (tmp_path / "events.json").write_text(json.dumps(rows))
    assert _load_events_impl(str(tmp_path)) == [
        {"id": "e1", "timestamp": "2026-10-19T10:00:00+00:00", "category": "approval"}
    ]


def test_feed_without_id_column_raises(tmp_path: Path) -> None:
    (tmp_path / "events.ndjson").write_text('{"timestamp": "2026-10-19T10:00:00Z"}\n')
    with pytest.raises(FeedError):
        _load_events_impl(str(tmp_path))


def test_public_loader_matches_implementation(tmp_path: Path) -> None:
    feed_dir = str(_demo(tmp_path))
    cached = load_events_feed(feed_dir, cfg=CacheConfig(ttl=60))
    assert cached == _load_events_impl(feed_dir)
