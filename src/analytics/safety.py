"""
src/analytics/safety.py
───────────────────────
Safety incident statistics.

Counts per status / type / severity, and mean resolution time in days over
incidents with status Résolu and both timestamps present.

Inverted timestamps (resolved_at < created_at, i.e. clock skew or bad data)
are EXCLUDED from the mean and logged; they are reported through
SafetyStats.excluded_from_resolution.
"""
from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from config.safety import RECENT_INCIDENTS_DISPLAY, IncidentStatus
from src.analytics.time_window import to_instant
from src.data.models import SafetyCounts, SafetyIncident, SafetyStats

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def _field(incident: Any, name: str) -> Any:
    if isinstance(incident, Mapping):
        return incident.get(name)
    return getattr(incident, name, None)


def _label(value: Any) -> str:
    return value.value if isinstance(value, IncidentStatus) else str(value)


def count_by(incidents: Iterable[Any], field: str, keys: Iterable[str] = ()) -> dict[str, int]:
    """Count incidents per value of `field`. `keys` are always present (possibly 0)."""
    counts: Counter[str] = Counter({key: 0 for key in keys})
    for incident in incidents:
        value = _field(incident, field)
        if value is not None:
            counts[_label(value)] += 1
    return dict(sorted(counts.items()))


def resolution_days(incident: Any) -> float | None:
    """
    Days between creation and resolution.

    Returns None for incidents that are not resolved or lack a timestamp.
    May return a negative number for inverted timestamps; callers decide.
    """
    if _label(_field(incident, "status")) != IncidentStatus.RESOLVED.value:
        return None
    created = _field(incident, "created_at")
    resolved = _field(incident, "resolved_at")
    if not isinstance(created, date) or not isinstance(resolved, date):
        return None
    delta = to_instant(resolved) - to_instant(created)
    return delta.total_seconds() / SECONDS_PER_DAY


def mean_resolution_days(incidents: Iterable[Any]) -> tuple[float, int]:
    """
    Mean resolution time in days.

    Returns:
        (mean_days, excluded) where excluded counts inverted-timestamp incidents.
        mean_days is 0.0 when no incident qualifies.
    """
    durations: list[float] = []
    excluded = 0
    for incident in incidents:
        days = resolution_days(incident)
        if days is None:
            continue
        if days < 0:
            excluded += 1
            logger.warning(
                "Incident %s resolved before creation (%.2f days); excluded from resolution time",
                _field(incident, "incident_id"),
                days,
            )
            continue
        durations.append(days)

    if not durations:
        return 0.0, excluded
    return sum(durations) / len(durations), excluded


def _sort_moment(incident: SafetyIncident) -> datetime:
    return to_instant(incident.created_at or incident.date)


def recent_incidents(incidents: Iterable[Any], limit: int = RECENT_INCIDENTS_DISPLAY) -> list[SafetyIncident]:
    """Most recent stored incidents first (creation time, else incident date)."""
    items = [i for i in incidents if isinstance(i, SafetyIncident)]
    items.sort(key=_sort_moment, reverse=True)
    return items[:limit]


def compute_safety_stats(incidents: Iterable[Any]) -> SafetyStats:
    incidents = list(incidents)
    avg_days, excluded = mean_resolution_days(incidents)
    return SafetyStats(
        total=len(incidents),
        counts=SafetyCounts(
            by_status=count_by(incidents, "status", keys=[s.value for s in IncidentStatus]),
            by_type=count_by(incidents, "type"),
            by_severity=count_by(incidents, "severity"),
        ),
        avg_resolution_days=avg_days,
        excluded_from_resolution=excluded,
        recent=recent_incidents(incidents),
    )
