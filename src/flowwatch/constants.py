"""
flowwatch defaults and classification thresholds.

Single source of truth for values shared by settings, stores, and the chart engine.
This module is zero-IO and uses only the Python standard library.

Notes:
    - Status thresholds are inclusive lower bounds for "better" classes
      (e.g., SLA compliance >= 95 is "excellent").
    - The sentinel ``ALL`` marks an unrestricted filter dimension.
"""

from __future__ import annotations

__all__ = [
    "ALL",
    "UNKNOWN",
    "DEFAULT_WINDOW_HOURS",
    "HOURS_PER_DAY",
    "TIME_RANGE_HOURS",
    "THEME_STORAGE_KEY",
    "DEFAULT_TIMEZONE",
    "SLA_THRESHOLDS",
    "CYCLE_TIME_THRESHOLDS",
    "ANOMALY_COUNT_THRESHOLDS",
    "CATEGORY_OPTIONS",
    "ANOMALY_TYPE_OPTIONS",
]

# Filter sentinel meaning "no restriction on this dimension".
ALL: str = "all"

# Group key for records carrying an enum value outside the canonical set.
UNKNOWN: str = "unknown"

DEFAULT_WINDOW_HOURS: int = 24
HOURS_PER_DAY: int = 24

TIME_RANGE_HOURS: dict[str, int] = {"6h": 6, "12h": 12, "24h": 24}

THEME_STORAGE_KEY: str = "theme"
DEFAULT_TIMEZONE: str = "UTC"

# (lower bound, label) pairs checked in order; the fallback label comes last.
SLA_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (95.0, "excellent"),
    (85.0, "good"),
    (70.0, "warning"),
)
# (exclusive upper bound in minutes, label)
CYCLE_TIME_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (30.0, "fast"),
    (60.0, "normal"),
    (90.0, "slow"),
)
# (exclusive upper bound, label); zero is handled separately as "none"
ANOMALY_COUNT_THRESHOLDS: tuple[tuple[int, str], ...] = ((5, "low"), (10, "medium"))

# Filter option catalogs offered by the dashboard controls.
CATEGORY_OPTIONS: tuple[str, ...] = (ALL, "case_intake", "approval", "document_review", "completed")
ANOMALY_TYPE_OPTIONS: tuple[str, ...] = (
    ALL,
    "delay",
    "sla_breach",
    "stuck_workflow",
    "duplicate_case",
)
