"""
src/services/reports.py
───────────────────────
Report queries used by the dashboard callbacks.

Each query pulls the relevant rows from the store and hands them to the
analytics layer; nothing here is cached.
"""
from __future__ import annotations

import logging
from datetime import datetime

from src.analytics.progress import track_zones
from src.analytics.safety import compute_safety_stats
from src.analytics.series import (
    PERFORMANCE_FIELDS,
    aggregate_performance,
    aggregate_volume,
    count_by,
    operations_frame,
    summarize,
)
from src.analytics.time_window import resolve_window
from src.data import store
from src.data.models import (
    OverviewStats,
    PerformanceSeries,
    ProgressReport,
    SafetyStats,
    VolumeStats,
)

logger = logging.getLogger(__name__)

RECENT_OPERATIONS_DISPLAY = 5


def get_performance_series(
    time_range: str | None = None,
    group_by: str | None = "none",
    methode: str | None = None,
    now: datetime | None = None,
) -> PerformanceSeries:
    window = resolve_window(time_range, now)
    result = aggregate_performance(store.list_operations(), window, group_by=group_by, methode=methode)
    logger.debug(
        "Performance series %s/%s: %d points, %d skipped",
        result.time_range, result.group_by, len(result.series), result.skipped,
    )
    return result


def get_volume_stats(time_range: str | None = None, now: datetime | None = None) -> VolumeStats:
    return aggregate_volume(store.list_operations(), resolve_window(time_range, now))


def get_overview_stats() -> OverviewStats:
    """All-time operation count, totals, mean rates, counts per method / panel."""
    operations = store.list_operations()
    df, _ = operations_frame(operations, PERFORMANCE_FIELDS)
    recent = sorted(
        operations,
        key=lambda op: (op.date, op.created_at.isoformat() if op.created_at else "", op.id or 0),
        reverse=True,
    )[:RECENT_OPERATIONS_DISPLAY]
    return OverviewStats(
        summary=summarize(df),
        by_method=count_by(df, "methode"),
        by_panel=count_by(df, "panneau"),
        recent=recent,
    )


def get_zone_progress(zone_id: str | None = None) -> ProgressReport:
    """
    Raises:
        NotFoundError: `zone_id` is neither configured nor has any record.
    """
    return track_zones(store.list_operations(), zone_id=zone_id)


def get_safety_stats() -> SafetyStats:
    return compute_safety_stats(store.list_safety_incidents())
