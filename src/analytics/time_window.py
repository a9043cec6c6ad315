"""
src/analytics/time_window.py
────────────────────────────
Symbolic report ranges ("7d", "30d", "90d", "365d", "all") resolved to a
cutoff instant.

Unknown tokens fall back to DEFAULT_TIME_RANGE (the configured default, "30d"
unless set) instead of failing; the dashboard sends free-form query values
and an unexpected one should still render a report.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import TypeVar

from config.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

TIME_RANGES: dict[str, int | None] = {
    "7d": 7,
    "30d": 30,
    "90d": 90,
    "365d": 365,
    "all": None,
}

FALLBACK_TIME_RANGE = "30d"


def configured_default(token: str) -> str:
    """The configured default range, or FALLBACK_TIME_RANGE when it is not a known token."""
    if token in TIME_RANGES:
        return token
    logger.warning("Configured default time range %r is unknown, using %s", token, FALLBACK_TIME_RANGE)
    return FALLBACK_TIME_RANGE


DEFAULT_TIME_RANGE = configured_default(settings.DEFAULT_TIME_RANGE)


def to_instant(value: date | datetime) -> datetime:
    """Normalise a calendar date (UTC midnight) or naive datetime to an aware UTC datetime."""
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    return datetime.combine(value, time.min, tzinfo=UTC)


@dataclass(frozen=True)
class TimeWindow:
    token: str
    cutoff: datetime | None  # None → unbounded

    def contains(self, moment: date | datetime) -> bool:
        if self.cutoff is None:
            return True
        return to_instant(moment) >= self.cutoff

    def apply(
        self,
        records: Iterable[T],
        key: Callable[[T], date | datetime] = lambda r: r.date,
    ) -> list[T]:
        """Return the in-range records, input order preserved."""
        return [r for r in records if self.contains(key(r))]


def normalize_token(token: str | None) -> str:
    if token in TIME_RANGES:
        return token
    logger.warning("Unknown time range %r, falling back to %s", token, DEFAULT_TIME_RANGE)
    return DEFAULT_TIME_RANGE


def resolve_window(token: str | None, now: datetime | None = None) -> TimeWindow:
    """Resolve a range token against `now` (defaults to current UTC time)."""
    token = normalize_token(token)
    days = TIME_RANGES[token]
    if days is None:
        return TimeWindow(token=token, cutoff=None)
    now = to_instant(now) if now is not None else datetime.now(tz=UTC)
    return TimeWindow(token=token, cutoff=now - timedelta(days=days))
