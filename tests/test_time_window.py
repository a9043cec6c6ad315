"""
tests/test_time_window.py
──────────────────────────
Tests for report range tokens.
"""
import logging
from datetime import date, datetime, timedelta, timezone

import pytest

from config.settings import settings
from src.analytics import time_window
from src.analytics.time_window import (
    DEFAULT_TIME_RANGE,
    TIME_RANGES,
    configured_default,
    resolve_window,
    to_instant,
)


class TestResolveWindow:
    @pytest.mark.parametrize("token,days", [("7d", 7), ("30d", 30), ("90d", 90), ("365d", 365)])
    def test_cutoff(self, now, token, days):
        window = resolve_window(token, now)
        assert window.token == token
        assert window.cutoff == now - timedelta(days=days)

    def test_all_is_unbounded(self, now):
        window = resolve_window("all", now)
        assert window.cutoff is None
        assert window.contains(date(1990, 1, 1))

    @pytest.mark.parametrize("token", ["bogus", "", None, "30"])
    def test_unknown_token_falls_back_to_30d(self, now, token, caplog):
        with caplog.at_level(logging.WARNING):
            window = resolve_window(token, now)
        assert window.token == "30d"
        assert window.cutoff == now - timedelta(days=30)
        assert "Unknown time range" in caplog.text

    def test_tokens_cover_expected_set(self):
        assert set(TIME_RANGES) == {"7d", "30d", "90d", "365d", "all"}

    def test_default_read_from_settings(self):
        assert DEFAULT_TIME_RANGE == settings.DEFAULT_TIME_RANGE

    def test_unknown_token_uses_configured_default(self, now, monkeypatch):
        monkeypatch.setattr(time_window, "DEFAULT_TIME_RANGE", "90d")
        window = resolve_window("bogus", now)
        assert window.token == "90d"
        assert window.cutoff == now - timedelta(days=90)

    def test_unknown_configured_default_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert configured_default("2w") == "30d"
        assert "2w" in caplog.text
        assert configured_default("365d") == "365d"


class TestContains:
    def test_cutoff_is_inclusive(self, now):
        window = resolve_window("7d", now)
        assert window.contains(window.cutoff)
        assert not window.contains(window.cutoff - timedelta(seconds=1))

    def test_dates_compare_at_utc_midnight(self):
        now = datetime(2024, 6, 8, 0, 0, tzinfo=timezone.utc)
        window = resolve_window("7d", now)  # cutoff 2024-06-01 00:00
        assert window.contains(date(2024, 6, 1))
        assert not window.contains(date(2024, 5, 31))

    def test_naive_datetime_treated_as_utc(self):
        assert to_instant(datetime(2024, 1, 1, 12)) == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)

    def test_apply_preserves_order(self, now, make_operation):
        records = [
            make_operation(day=date(2024, 5, 30)),
            make_operation(day=date(2024, 1, 1)),
            make_operation(day=date(2024, 5, 28)),
        ]
        kept = resolve_window("7d", now).apply(records)
        assert [r.date for r in kept] == [date(2024, 5, 30), date(2024, 5, 28)]
