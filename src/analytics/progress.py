"""
src/analytics/progress.py
─────────────────────────
Zone (panneau) progress against campaign targets.

  percent_complete = min(100, cumulative_volume / volume_target × 100)

The status label is looked up in the ordered PROGRESS_BANDS table from
config/site.py using the unrounded percentage. Reported percentages are
truncated to two decimals, so a zone short of its target never shows 100.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any

from config.site import DEFAULT_ZONE_TARGET, PROGRESS_BANDS, ZONE_TARGETS, ZoneTarget
from src.analytics.series import VOLUME_FIELDS, operations_frame
from src.data.models import GlobalProgress, ProgressReport, ZoneProgress
from src.errors import NotFoundError

logger = logging.getLogger(__name__)


def get_target(
    zone: str,
    targets: Mapping[str, ZoneTarget] | None = None,
    default: ZoneTarget = DEFAULT_ZONE_TARGET,
) -> ZoneTarget:
    """Configured target for `zone`, or `default` when the zone is not configured."""
    targets = ZONE_TARGETS if targets is None else targets
    return targets.get(zone, default)


def percent_of(actual: float, target: float) -> float:
    """Share of target reached, clamped to [0, 100]. A non-positive target reads as 0."""
    if target <= 0:
        return 0.0
    return max(0.0, min(100.0, actual / target * 100.0))


def displayed_percent(percent: float) -> float:
    """Percent truncated to two decimals; only a full 100 ever reads as 100.0."""
    shown = math.floor(percent * 100 + 1e-6) / 100
    if percent < 100.0 and shown >= 100.0:
        return 99.99
    return shown


def classify_progress(
    percent: float,
    bands: tuple[tuple[float, str], ...] = PROGRESS_BANDS,
) -> str:
    """
    Map a completion percentage to a status label.

    `bands` is ordered highest threshold first; the first band whose
    minimum is <= percent wins. Below every band → the last label.
    """
    for minimum, label in bands:
        if percent >= minimum:
            return label
    return bands[-1][1]


def zone_progress(zone: str, volume: float, metrage: float, target: ZoneTarget) -> ZoneProgress:
    pct = percent_of(volume, target.volume)
    return ZoneProgress(
        zone=zone,
        volume=volume,
        volume_target=target.volume,
        metrage=metrage,
        metrage_target=target.metrage,
        percent_complete=displayed_percent(pct),
        percent_metrage_complete=displayed_percent(percent_of(metrage, target.metrage)),
        status=classify_progress(pct),
    )


def track_zones(
    records: Iterable[Any],
    zone_id: str | None = None,
    targets: Mapping[str, ZoneTarget] | None = None,
    default: ZoneTarget = DEFAULT_ZONE_TARGET,
) -> ProgressReport:
    """
    Progress for every configured zone and every zone seen in `records`,
    or for `zone_id` only.

    Raises:
        NotFoundError: `zone_id` is neither configured nor present in records.
    """
    targets = ZONE_TARGETS if targets is None else targets
    df, _ = operations_frame(records, VOLUME_FIELDS)
    df = df[df["panneau"] != ""]

    sums: dict[str, tuple[float, float]] = {}
    if not df.empty:
        grouped = df.groupby("panneau", sort=True)[["volume", "metrage"]].sum()
        sums = {str(zone): (float(row["volume"]), float(row["metrage"])) for zone, row in grouped.iterrows()}

    if zone_id is not None:
        if zone_id not in sums and zone_id not in targets:
            raise NotFoundError(f"Unknown zone {zone_id!r}")
        zones = [zone_id]
    else:
        zones = sorted(set(sums) | set(targets))

    progress = []
    for zone in zones:
        if zone not in targets:
            logger.debug("Zone %s has no configured target, using default", zone)
        volume, metrage = sums.get(zone, (0.0, 0.0))
        progress.append(zone_progress(zone, volume, metrage, get_target(zone, targets, default)))

    return ProgressReport(zones=progress, overall=overall_progress(progress))


def overall_progress(zones: list[ZoneProgress]) -> GlobalProgress:
    """Totals across `zones` against the sum of their targets."""
    total_volume = sum(z.volume for z in zones)
    total_metrage = sum(z.metrage for z in zones)
    volume_target = sum(z.volume_target for z in zones)
    metrage_target = sum(z.metrage_target for z in zones)
    return GlobalProgress(
        total_volume=total_volume,
        total_metrage=total_metrage,
        total_volume_target=volume_target,
        total_metrage_target=metrage_target,
        percent_volume_complete=displayed_percent(percent_of(total_volume, volume_target)),
        percent_metrage_complete=displayed_percent(percent_of(total_metrage, metrage_target)),
    )
