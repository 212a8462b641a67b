"""
Inbound interface: the transport layer pushes records into the stores here.

Each push validates raw records (mappings or model instances) into the domain models,
skips the ones that fail validation with a WARNING log, and returns how many were
accepted. A successful push clears the target store's error and loading flags.

Transport failures are reported with ``report_transport_error``; they become store
state and are never raised.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from flowwatch.context import DashboardContext
from flowwatch.models import Anomaly, OverviewStats, WorkflowEvent

__all__ = ["push_events", "push_anomalies", "push_stats", "report_transport_error"]

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _validate(model: type[M], records: Iterable[Any]) -> list[M]:
    accepted: list[M] = []
    skipped = 0
    for i, record in enumerate(records):
        if isinstance(record, model):
            accepted.append(record)
            continue
        try:
            accepted.append(model.model_validate(record))
        except ValidationError as e:
            skipped += 1
            logger.warning("skipping %s record #%d (%d errors)", model.__name__, i, e.error_count())
    if skipped:
        logger.info("%s: accepted=%d skipped=%d", model.__name__, len(accepted), skipped)
    return accepted


def push_events(
    ctx: DashboardContext, records: Iterable[Any], *, replace: bool = False
) -> int:
    """
    Push workflow events.

    Args:
        ctx (DashboardContext): Target context.
        records: Mappings or WorkflowEvent instances.
        replace (bool): Replace the whole collection instead of upserting.

    Returns:
        int: Number of accepted records.
    """
    events = _validate(WorkflowEvent, records)
    if replace:
        ctx.events.set_all(events)
    else:
        ctx.events.add_many(events)
    ctx.events.set_error(None)
    ctx.events.set_loading(False)
    return len(events)


def push_anomalies(
    ctx: DashboardContext, records: Iterable[Any], *, replace: bool = False
) -> int:
    """Push anomalies; same contract as ``push_events``."""
    anomalies = _validate(Anomaly, records)
    if replace:
        ctx.anomalies.set_all(anomalies)
    else:
        ctx.anomalies.add_many(anomalies)
    ctx.anomalies.set_error(None)
    ctx.anomalies.set_loading(False)
    return len(anomalies)


def push_stats(ctx: DashboardContext, stats: OverviewStats | Mapping[str, Any]) -> bool:
    """
    Push overview statistics.

    An OverviewStats with every field set replaces the record. A partial OverviewStats
    (only its explicitly set fields) or a mapping (field names or camelCase aliases)
    is merged over the current one.

    Returns:
        bool: False if the update was rejected.
    """
    if isinstance(stats, OverviewStats) and stats.model_fields_set >= set(
        OverviewStats.model_fields
    ):
        ok = ctx.metrics.set_stats(stats)
    else:
        ok = ctx.metrics.update_stats(stats)
    ctx.metrics.set_loading(False)
    return ok


def report_transport_error(ctx: DashboardContext, message: str) -> None:
    """Record a transport failure on the entity stores and end their loading state."""
    logger.warning("transport error: %s", message)
    for store in (ctx.events, ctx.anomalies):
        store.set_error(message)
        store.set_loading(False)
    ctx.metrics.set_loading(False)
