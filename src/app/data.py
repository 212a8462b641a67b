from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import polars as pl
import streamlit as st

from flowwatch.constants import ALL, ANOMALY_TYPE_OPTIONS, CATEGORY_OPTIONS
from flowwatch.errors import FeedError
from flowwatch.models import EventStatus, Severity

__all__ = [
    "CacheConfig",
    "FEED_NAMES",
    "find_feed",
    "read_feed_frame",
    "load_events_feed",
    "load_anomalies_feed",
    "load_stats_feed",
    "feed_mtime",
    "create_demo_feed",
]

logger = logging.getLogger(__name__)

FEED_NAMES: tuple[str, ...] = ("events", "anomalies", "stats")
FEED_SUFFIXES: tuple[str, ...] = (".parquet", ".ndjson", ".jsonl", ".json")

# ---------- Cache configuration (factory of cached callables) ----------


@dataclass(frozen=True)
class CacheConfig:
    """Hashable cache configuration for Streamlit @st.cache_data.

    Note: Streamlit's decorator parameters (ttl, persist) are fixed at decoration
    time. We build and memoize decorated callables per (name, ttl, persist) so the
    app can switch these at runtime while still benefiting from caching.
    """

    ttl: int | None = None
    persist: bool = False


_CACHE_REGISTRY: dict[tuple[str, CacheConfig], Callable[..., Any]] = {}


def _get_cached(loader_name: str, cfg: CacheConfig, fn: Callable[..., Any]) -> Callable[..., Any]:
    key = (loader_name, cfg)
    if key in _CACHE_REGISTRY:
        return _CACHE_REGISTRY[key]
    if cfg.persist:
        wrapped = st.cache_data(persist="disk", ttl=cfg.ttl)(fn)
    else:
        wrapped = st.cache_data(ttl=cfg.ttl)(fn)
    _CACHE_REGISTRY[key] = wrapped
    return wrapped


# ---------- Internal IO helpers (Polars-first) ----------


def find_feed(feed_dir: str | Path, name: str) -> Path | None:
    """Return the first existing ``<name><suffix>`` file under feed_dir, in suffix order."""
    base = Path(feed_dir)
    for suffix in FEED_SUFFIXES:
        p = base / f"{name}{suffix}"
        if p.is_file():
            return p
    return None


def read_feed_frame(path: Path) -> pl.DataFrame:
    """Read one feed file into a DataFrame.

    Args:
        path (Path): Parquet, NDJSON (.ndjson/.jsonl), or JSON (array of objects) file.

    Raises:
        FeedError: If the file cannot be read or parsed.
    """
    try:
        if path.suffix == ".parquet":
            return pl.read_parquet(path)
        if path.suffix in {".ndjson", ".jsonl"}:
            return pl.read_ndjson(path)
        return pl.read_json(path)
    except (OSError, pl.exceptions.PolarsError) as e:
        raise FeedError(f"unreadable feed {path}: {e}") from e


def _records(df: pl.DataFrame) -> list[dict[str, Any]]:
    # Temporal columns come back as datetime objects, which the models accept.
    return df.to_dicts()


# ---------- Loaders (internal implementations) ----------


def _load_records_impl(feed_dir: str, name: str) -> list[dict[str, Any]]:
    path = find_feed(feed_dir, name)
    if path is None:
        return []
    df = read_feed_frame(path)
    if "id" not in df.columns:
        raise FeedError(f"feed {path} has no 'id' column")
    logger.debug("loaded %s rows=%d from %s", name, df.height, path)
    return _records(df)


def _load_events_impl(feed_dir: str) -> list[dict[str, Any]]:
    return _load_records_impl(feed_dir, "events")


def _load_anomalies_impl(feed_dir: str) -> list[dict[str, Any]]:
    return _load_records_impl(feed_dir, "anomalies")


def _load_stats_impl(feed_dir: str) -> dict[str, Any] | None:
    """Last row of the stats feed (latest snapshot), or None when there is no feed."""
    path = find_feed(feed_dir, "stats")
    if path is None:
        return None
    df = read_feed_frame(path)
    if df.height == 0:
        return None
    return df.row(df.height - 1, named=True)


# ---------- Public loader APIs (dispatch to cached implementations) ----------


def load_events_feed(feed_dir: str, *, cfg: CacheConfig = CacheConfig()) -> list[dict[str, Any]]:
    """Raw event records from ``events.*`` (empty when the feed is absent)."""
    fn = _get_cached("load_events_feed", cfg, _load_events_impl)
    return fn(feed_dir)  # type: ignore[no-any-return]


def load_anomalies_feed(
    feed_dir: str, *, cfg: CacheConfig = CacheConfig()
) -> list[dict[str, Any]]:
    """Raw anomaly records from ``anomalies.*`` (empty when the feed is absent)."""
    fn = _get_cached("load_anomalies_feed", cfg, _load_anomalies_impl)
    return fn(feed_dir)  # type: ignore[no-any-return]


def load_stats_feed(feed_dir: str, *, cfg: CacheConfig = CacheConfig()) -> dict[str, Any] | None:
    fn = _get_cached("load_stats_feed", cfg, _load_stats_impl)
    return fn(feed_dir)  # type: ignore[no-any-return]


def feed_mtime(feed_dir: str | Path) -> float | None:
    """Most recent modification time across the feed files, or None if there are none."""
    mtimes: list[float] = []
    for name in FEED_NAMES:
        p = find_feed(feed_dir, name)
        if p is not None:
            mtimes.append(p.stat().st_mtime)
    return max(mtimes) if mtimes else None


# ---------- Demo feed ----------


def create_demo_feed(
    feed_dir: Path,
    *,
    now: datetime | None = None,
    n_events: int = 240,
    n_anomalies: int = 60,
    seed: int = 7,
) -> None:
    """Write a deterministic demo feed (events.ndjson, anomalies.ndjson, stats.json).

    Args:
        feed_dir (Path): Target directory to create or populate.
        now (datetime | None): Anchor time; records spread over the preceding 24 hours.
        n_events (int): Number of workflow events.
        n_anomalies (int): Number of anomalies.
        seed (int): RNG seed.
    """
    feed_dir.mkdir(parents=True, exist_ok=True)
    anchor = now or datetime.now(tz=UTC)
    rng = random.Random(seed)
    categories = [c for c in CATEGORY_OPTIONS if c != ALL]
    anomaly_types = [t for t in ANOMALY_TYPE_OPTIONS if t != ALL]
    statuses = [s.value for s in EventStatus]
    severities = [s.value for s in Severity]

    def _ts() -> str:
        return (anchor - timedelta(minutes=rng.randrange(0, 24 * 60))).isoformat()

    events = pl.DataFrame(
        {
            "id": [f"evt-{i:04d}" for i in range(n_events)],
            "timestamp": [_ts() for _ in range(n_events)],
            "status": rng.choices(statuses, weights=[3, 6, 1], k=n_events),
            "category": rng.choices(categories, k=n_events),
        }
    )
    events.write_ndjson(feed_dir / "events.ndjson")

    anomalies = pl.DataFrame(
        {
            "id": [f"anm-{i:04d}" for i in range(n_anomalies)],
            "timestamp": [_ts() for _ in range(n_anomalies)],
            "severity": rng.choices(severities, weights=[5, 4, 2, 1], k=n_anomalies),
            "type": rng.choices(anomaly_types, k=n_anomalies),
        }
    )
    anomalies.write_ndjson(feed_dir / "anomalies.ndjson")

    completed = sum(1 for s in events["status"].to_list() if s == EventStatus.COMPLETED.value)
    stats = pl.DataFrame(
        {
            "totalWorkflowsToday": [n_events],
            "averageCycleTime": [round(rng.uniform(20.0, 80.0), 1)],
            "slaCompliance": [round(100.0 * completed / max(n_events, 1), 1)],
            "activeAnomaliesCount": [n_anomalies],
        }
    )
    stats.write_json(feed_dir / "stats.json")
    logger.info("demo feed written to %s", feed_dir)
