"""
src/analytics/series.py
───────────────────────
Performance series aggregation for charts and dashboard cards.

Records are bucketed by calendar date (optionally also by method or panel)
and each bucket holds the SUM of rendement, disponibilité, volume and
métrage for that bucket. Rates are summed per bucket, not re-derived from
bucket totals, so a day with two shifts at 80% availability shows 160.
Series are sparse (no interpolation of missing days) and always sorted.

Summary scalars are computed over the filtered record set, not over buckets:
  avg_rendement, avg_disponibilite  → arithmetic mean (0 for an empty set)
  total_volume, total_metrage       → sums

Records missing a required numeric field are skipped and logged; they never
abort a report. The window and method filters run first, so `skipped` only
counts records inside the requested range (and records with no usable date).
"""
from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from numbers import Real
from typing import Any

import pandas as pd
from pydantic import BaseModel

from src.analytics.time_window import TimeWindow
from src.data.models import GroupTotal, PerformanceSeries, PerformanceSummary, SeriesPoint, VolumeStats
from src.errors import ValidationError

logger = logging.getLogger(__name__)

GROUP_DIMENSIONS: dict[str, str | None] = {
    "none": None,
    "method": "methode",
    "panel": "panneau",
}

FRAME_COLUMNS = [
    "operation_id",
    "date",
    "methode",
    "panneau",
    "rendement",
    "disponibilite",
    "volume",
    "metrage",
]

# record field → frame column
_NUMERIC_FIELDS = {
    "rendement": "rendement",
    "disponibilite": "disponibilite",
    "volume_saute": "volume",
    "metrage": "metrage",
}

PERFORMANCE_FIELDS = ("rendement", "disponibilite", "volume_saute", "metrage")
VOLUME_FIELDS = ("volume_saute", "metrage")

_SUM_COLUMNS = ["rendement", "disponibilite", "volume", "metrage"]


# ── Record normalisation ──────────────────────────────────────────────────────

def _as_mapping(record: Any) -> Mapping[str, Any]:
    if isinstance(record, BaseModel):
        return record.model_dump()
    if isinstance(record, Mapping):
        return record
    return vars(record)


def _calendar_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def _number(value: Any) -> float | None:
    if value is None or isinstance(value, bool) or not isinstance(value, Real):
        return None
    value = float(value)
    return value if math.isfinite(value) else None


def _problem(row: Mapping[str, Any], required: Iterable[str]) -> str | None:
    if _calendar_date(row.get("date")) is None:
        return "missing or invalid date"
    for field in required:
        if _number(row.get(field)) is None:
            return f"missing or non-numeric {field}"
    return None


def _selected(row: Mapping[str, Any], day: date, window: TimeWindow | None, methode: str | None) -> bool:
    if window is not None and not window.contains(day):
        return False
    if methode and methode != "all" and row.get("methode") != methode:
        return False
    return True


def operations_frame(
    records: Iterable[Any],
    required: Iterable[str] = PERFORMANCE_FIELDS,
    window: TimeWindow | None = None,
    methode: str | None = None,
) -> tuple[pd.DataFrame, int]:
    """
    Build an aggregation frame from operation records.

    Records with a valid date outside `window`, or of another `methode`, are
    left out before validation so they never count as skipped.

    Returns:
        (frame, skipped) where skipped counts malformed records left out.
    """
    required = tuple(required)
    rows: list[dict] = []
    skipped = 0

    for record in records:
        row = _as_mapping(record)
        day = _calendar_date(row.get("date"))
        if day is not None and not _selected(row, day, window, methode):
            continue
        problem = _problem(row, required)
        if problem is not None:
            skipped += 1
            logger.warning("Skipping operation %s: %s", row.get("operation_id", "?"), problem)
            continue

        item = {
            "operation_id": row.get("operation_id"),
            "date": _calendar_date(row["date"]),
            "methode": row.get("methode") or "",
            "panneau": row.get("panneau") or "",
        }
        for field, column in _NUMERIC_FIELDS.items():
            value = _number(row.get(field))
            item[column] = float("nan") if value is None else value
        rows.append(item)

    if skipped:
        logger.info("Aggregation frame built: %d rows, %d skipped", len(rows), skipped)
    return pd.DataFrame(rows, columns=FRAME_COLUMNS), skipped


# ── Aggregations ──────────────────────────────────────────────────────────────

def group_column(group_by: str | None) -> str | None:
    key = group_by or "none"
    if key not in GROUP_DIMENSIONS:
        raise ValidationError(f"Unknown grouping {group_by!r}; expected one of {sorted(GROUP_DIMENSIONS)}")
    return GROUP_DIMENSIONS[key]


def bucket_by_date(df: pd.DataFrame, group_by: str | None = "none") -> list[SeriesPoint]:
    """Sum each metric per calendar date (and group key), ascending."""
    column = group_column(group_by)
    if df.empty:
        return []

    keys = ["date"] if column is None else ["date", column]
    grouped = (
        df.groupby(keys, sort=True)[_SUM_COLUMNS]
        .sum(min_count=0)
        .reset_index()
        .sort_values(keys, kind="mergesort")
    )

    return [
        SeriesPoint(
            date=row["date"],
            group=None if column is None else str(row[column]),
            rendement=float(row["rendement"]),
            disponibilite=float(row["disponibilite"]),
            volume=float(row["volume"]),
            metrage=float(row["metrage"]),
        )
        for row in grouped.to_dict("records")
    ]


def summarize(df: pd.DataFrame) -> PerformanceSummary:
    """Means over records (not buckets) and totals. Empty → all zeros."""
    if df.empty:
        return PerformanceSummary()

    def _mean(column: str) -> float:
        value = df[column].mean()
        return 0.0 if pd.isna(value) else float(value)

    return PerformanceSummary(
        avg_rendement=_mean("rendement"),
        avg_disponibilite=_mean("disponibilite"),
        total_volume=float(df["volume"].sum()),
        total_metrage=float(df["metrage"].sum()),
        operation_count=int(len(df)),
    )


def totals_by(df: pd.DataFrame, column: str) -> list[GroupTotal]:
    """Volume / métrage totals and record counts per value of `column`, sorted by key."""
    if df.empty:
        return []
    grouped = df.groupby(column, sort=True).agg(
        volume=("volume", "sum"),
        metrage=("metrage", "sum"),
        count=("operation_id", "size"),
    )
    return [
        GroupTotal(key=str(key), volume=float(row["volume"]), metrage=float(row["metrage"]), count=int(row["count"]))
        for key, row in grouped.iterrows()
    ]


def count_by(df: pd.DataFrame, column: str) -> dict[str, int]:
    """Record counts per non-empty value of `column`, keys sorted."""
    if df.empty:
        return {}
    values = df.loc[df[column] != "", column]
    counts = values.value_counts()
    return {str(key): int(counts[key]) for key in sorted(counts.index)}


# ── Report builders ───────────────────────────────────────────────────────────

def aggregate_performance(
    records: Iterable[Any],
    window: TimeWindow,
    group_by: str | None = "none",
    methode: str | None = None,
) -> PerformanceSeries:
    """Date-bucketed series plus summary for the records inside `window`."""
    group_column(group_by)  # validate before doing any work
    df, skipped = operations_frame(records, PERFORMANCE_FIELDS, window=window, methode=methode)

    return PerformanceSeries(
        time_range=window.token,
        group_by=group_by or "none",
        series=bucket_by_date(df, group_by),
        summary=summarize(df),
        skipped=skipped,
    )


def aggregate_volume(records: Iterable[Any], window: TimeWindow) -> VolumeStats:
    """Volume / métrage per method, and per date per method."""
    df, _ = operations_frame(records, VOLUME_FIELDS, window=window)
    if df.empty:
        return VolumeStats(time_range=window.token)

    return VolumeStats(
        time_range=window.token,
        by_method=totals_by(df, "methode"),
        series=bucket_by_date(df, "method"),
        total_volume=float(df["volume"].sum()),
        total_metrage=float(df["metrage"].sum()),
    )
