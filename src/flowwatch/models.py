"""
Domain records and enums for workflow events, anomalies, and overview statistics.

Responsibilities
- Define the Pydantic models pushed into the entity stores by the transport layer.
- Define the canonical enums (status, severity, theme mode, time range).
- Parse timestamps on read so malformed values can be stored and counted.

Style
- Zero-IO (stdlib + pydantic only).
- Records are frozen; stores replace them wholesale rather than editing in place.
- Enum-like strings are normalized to lower case but never rejected: a value outside
  the canonical set is "malformed but present" and is bucketed by the stores.

Examples:
    >>> from flowwatch.models import Anomaly, parse_timestamp
    >>> a = Anomaly(id="a1", timestamp="2026-10-19T08:30:00Z", severity="HIGH", type="delay")
    >>> a.severity
    'high'
    >>> parse_timestamp("not a time") is None
    True
"""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .constants import TIME_RANGE_HOURS

__all__ = [
    "EventStatus",
    "Severity",
    "ThemeMode",
    "TimeRange",
    "WorkflowEvent",
    "Anomaly",
    "OverviewStats",
    "parse_timestamp",
    "severity_from_value",
    "status_from_value",
]


class EventStatus(Enum):
    """Lifecycle status of a workflow event."""

    PENDING = "pending"
    COMPLETED = "completed"
    ANOMALY = "anomaly"


class Severity(Enum):
    """
    Anomaly severity, totally ordered by declaration order.

    Notes:
        ``rank`` gives the position used as the heatmap row index (low=0 .. critical=3).
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)

    @property
    def label(self) -> str:
        return self.value.capitalize()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank


_SEVERITY_ORDER: tuple[Severity, ...] = tuple(Severity)


class ThemeMode(Enum):
    DARK = "dark"
    LIGHT = "light"


class TimeRange(Enum):
    """Dashboard time range options."""

    H6 = "6h"
    H12 = "12h"
    H24 = "24h"

    @property
    def hours(self) -> int:
        return TIME_RANGE_HOURS[self.value]


def severity_from_value(s: str) -> Severity | None:
    """Return the Severity for a (case-insensitive) string, or None if unknown."""
    try:
        return Severity(s.strip().lower())
    except (ValueError, AttributeError):
        return None


def status_from_value(s: str) -> EventStatus | None:
    """Return the EventStatus for a (case-insensitive) string, or None if unknown."""
    try:
        return EventStatus(s.strip().lower())
    except (ValueError, AttributeError):
        return None


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse a stored timestamp into an aware datetime.

    Args:
        value: ISO-8601 string (trailing "Z" allowed) or datetime.

    Returns:
        datetime | None: Aware datetime (naive values are taken as UTC), or None
        when the value cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _normalize_label(v: Any) -> Any:
    if isinstance(v, str):
        return v.strip().lower()
    return v


class WorkflowEvent(BaseModel):
    """
    A single workflow event pushed by the transport layer.

    Attributes:
        id (str): Opaque identity.
        timestamp (str | datetime): Raw event time; parsed on read via ``instant``.
        status (str): Lower-cased status; canonical values are EventStatus members.
        category (str): Workflow category (e.g., "approval").
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    timestamp: str | datetime
    status: str = EventStatus.PENDING.value
    category: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> Any:
        return _normalize_label(v)

    @property
    def instant(self) -> datetime | None:
        return parse_timestamp(self.timestamp)


class Anomaly(BaseModel):
    """
    A detected anomaly.

    Attributes:
        id (str): Opaque identity.
        timestamp (str | datetime): Raw detection time; parsed on read via ``instant``.
        severity (str): Lower-cased severity; canonical values are Severity members.
        type (str): Anomaly type (e.g., "sla_breach").
        hour (int | None): Explicit hour-of-day override in [0, 23].

    Raises:
        pydantic.ValidationError: If hour is outside [0, 23].
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    timestamp: str | datetime
    severity: str = Severity.LOW.value
    type: str = ""
    hour: int | None = Field(default=None, ge=0, le=23)

    @field_validator("severity", mode="before")
    @classmethod
    def normalize_severity(cls, v: Any) -> Any:
        return _normalize_label(v)

    @property
    def instant(self) -> datetime | None:
        return parse_timestamp(self.timestamp)

    def hour_of_day(self, tz: tzinfo = UTC) -> int | None:
        """Hour bucket for grouping: the explicit override wins over the timestamp."""
        if self.hour is not None:
            return self.hour
        instant = self.instant
        if instant is None:
            return None
        return instant.astimezone(tz).hour


class OverviewStats(BaseModel):
    """
    Dashboard overview statistics (singleton record in MetricsStore).

    Attributes:
        total_workflows_today (int): Workflows started today (>= 0).
        average_cycle_time (float): Mean cycle time in minutes (>= 0).
        sla_compliance (float): SLA compliance percentage in [0, 100].
        active_anomalies_count (int): Open anomalies (>= 0).

    Notes:
        Accepts the transport's camelCase keys (``totalWorkflowsToday``) as well as
        the field names.
    """

    model_config = ConfigDict(
        frozen=True, extra="ignore", alias_generator=to_camel, populate_by_name=True
    )

    total_workflows_today: int = Field(default=0, ge=0)
    average_cycle_time: float = Field(default=0.0, ge=0.0)
    sla_compliance: float = Field(default=100.0, ge=0.0, le=100.0)
    active_anomalies_count: int = Field(default=0, ge=0)
