"""
Input point variants for the chart specification engine.

- HeatmapPoint: one (hour, severity) cell count.
- CategoryPoint: one named value for bar and line charts.

``coerce_points`` validates plain mappings into the variant required by a chart kind
and drops points that cannot be validated (logged at WARNING). The caller's sequence
is never modified.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from flowwatch.models import Severity, severity_from_value

from .spec import ChartKind

__all__ = ["HeatmapPoint", "CategoryPoint", "ChartPoint", "coerce_points"]

logger = logging.getLogger(__name__)


class HeatmapPoint(BaseModel):
    """
    Count of anomalies in one hour-of-day and severity tier.

    Attributes:
        x (int): Hour of day in [0, 23].
        y (int): Severity index in [0, 3] (low..critical). Severity members and
            severity names are accepted and converted.
        value (int): Count (>= 0).
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    x: int = Field(ge=0, le=23)
    y: int = Field(ge=0, le=3)
    value: int = Field(default=0, ge=0)

    @field_validator("y", mode="before")
    @classmethod
    def severity_to_index(cls, v: Any) -> Any:
        if isinstance(v, Severity):
            return v.rank
        if isinstance(v, str):
            severity = severity_from_value(v)
            if severity is not None:
                return severity.rank
        return v


class CategoryPoint(BaseModel):
    """
    Named value for bar and line charts.

    Attributes:
        name (str | None): Category label.
        label (str | None): Alternate label used when ``name`` is missing.
        value (float): Plotted value.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str | None = None
    label: str | None = None
    value: float = 0.0

    def display_name(self, index: int) -> str:
        """Axis label: name, else label, else the point's position."""
        if self.name is not None:
            return self.name
        if self.label is not None:
            return self.label
        return str(index)


ChartPoint = HeatmapPoint | CategoryPoint


def coerce_points(kind: ChartKind, points: Iterable[Any] | None) -> list[Any]:
    model: type[BaseModel] = HeatmapPoint if kind is ChartKind.HEATMAP else CategoryPoint
    out: list[Any] = []
    for i, point in enumerate(points or ()):
        if isinstance(point, model):
            out.append(point)
            continue
        raw = point.model_dump() if isinstance(point, BaseModel) else point
        try:
            out.append(model.model_validate(raw))
        except ValidationError as e:
            logger.warning("dropping %s point #%d: %s", kind.value, i, e.errors()[0]["msg"])
    return out
