from __future__ import annotations

import pytest

from flowwatch.models import TimeRange
from flowwatch.stores.filters import (
    FilterDimension,
    FilterStore,
    format_label,
    toggle_selection,
)


def test_defaults_are_unrestricted() -> None:
    f = FilterStore()
    assert f.categories == {"all"}
    assert f.anomaly_types == {"all"}
    assert f.time_range is TimeRange.H24
    assert f.live_updates is True
    assert f.has_active_filters() is False


def test_toggle_round_trip_returns_to_all() -> None:
    f = FilterStore()
    f.toggle_category("approval")
    assert f.categories == {"approval"}
    assert f.has_active_filters() is True
    f.toggle_category("approval")
    assert f.categories == {"all"}
    assert f.has_active_filters() is False


def test_selecting_all_clears_other_values() -> None:
    f = FilterStore()
    f.toggle_anomaly_type("delay")
    f.toggle_anomaly_type("sla_breach")
    assert f.anomaly_types == {"delay", "sla_breach"}
    f.toggle_anomaly_type("all")
    assert f.anomaly_types == {"all"}


def test_toggle_selection_never_returns_empty() -> None:
    assert toggle_selection(frozenset({"x"}), "x") == {"all"}
    assert toggle_selection(frozenset({"all"}), "all") == {"all"}
    assert toggle_selection(frozenset({"all"}), "x") == {"x"}


def test_unknown_dimension_is_noop() -> None:
    f = FilterStore()
    assert f.toggle("priorities", "p1") is False
    assert f.toggle(FilterDimension.CATEGORIES, 3) is False  # type: ignore[arg-type]
    assert f.state().categories == {"all"}
    assert f.allows("priorities", "p1") is True


def test_toggle_accepts_dimension_names() -> None:
    f = FilterStore()
    assert f.toggle("categories", "case_intake") is True
    assert f.categories == {"case_intake"}
    assert f.allows("categories", "case_intake") is True
    assert f.allows("categories", "approval") is False
    assert f.allows("anomaly_types", "delay") is True


def test_clear_resets_both_dimensions() -> None:
    f = FilterStore()
    f.toggle_category("approval")
    f.toggle_anomaly_type("delay")
    f.clear()
    assert f.categories == {"all"}
    assert f.anomaly_types == {"all"}


@pytest.mark.parametrize("value, hours", [("6h", 6), ("12h", 12), (TimeRange.H24, 24)])
def test_set_time_range_and_window_hours(value, hours: int) -> None:
    f = FilterStore(time_range="6h")
    assert f.set_time_range(value) is True
    assert f.window_hours() == hours


def test_set_time_range_rejects_unknown() -> None:
    f = FilterStore()
    assert f.set_time_range("48h") is False
    assert f.time_range is TimeRange.H24


def test_live_updates_toggle() -> None:
    f = FilterStore(live_updates=False)
    f.toggle_live_updates()
    assert f.live_updates is True
    f.set_live_updates(False)
    assert f.live_updates is False


def test_state_snapshot_is_memoized_until_change() -> None:
    f = FilterStore()
    first = f.state()
    assert f.state() is first
    f.toggle_category("approval")
    second = f.state()
    assert second is not first
    assert second.categories == {"approval"}
    assert first.categories == {"all"}


@pytest.mark.parametrize(
    "raw, label",
    [("sla_breach", "Sla Breach"), ("all", "All"), ("document_review", "Document Review")],
)
def test_format_label(raw: str, label: str) -> None:
    assert format_label(raw) == label
