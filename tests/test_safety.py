"""
tests/test_safety.py
─────────────────────
Tests for safety incident statistics.
"""
import logging

import pytest

from src.analytics.safety import compute_safety_stats, mean_resolution_days, resolution_days


class TestResolutionTime:
    def test_mean_of_two_and_four_days(self, make_incident):
        incidents = [
            make_incident(status="Résolu", resolved_after_days=2),
            make_incident(status="Résolu", resolved_after_days=4),
        ]
        mean, excluded = mean_resolution_days(incidents)
        assert mean == pytest.approx(3.0)
        assert excluded == 0

    def test_no_resolved_incidents(self, make_incident):
        assert mean_resolution_days([make_incident(), make_incident(status="En cours")]) == (0.0, 0)

    def test_empty(self):
        assert mean_resolution_days([]) == (0.0, 0)

    def test_unresolved_status_ignored_even_with_timestamp(self, make_incident):
        assert resolution_days(make_incident(status="En cours", resolved_after_days=1)) is None

    def test_missing_resolved_at_ignored(self, make_incident):
        assert resolution_days(make_incident(status="Résolu")) is None

    def test_inverted_timestamps_excluded(self, make_incident, caplog):
        incidents = [
            make_incident(status="Résolu", resolved_after_days=2),
            make_incident(status="Résolu", resolved_after_days=-1),
        ]
        with caplog.at_level(logging.WARNING):
            mean, excluded = mean_resolution_days(incidents)
        assert mean == pytest.approx(2.0)
        assert excluded == 1
        assert "resolved before creation" in caplog.text


class TestComputeSafetyStats:
    def test_empty(self):
        stats = compute_safety_stats([])
        assert stats.total == 0
        assert stats.avg_resolution_days == 0.0
        assert stats.counts.by_status == {"En cours": 0, "Ouvert": 0, "Résolu": 0}
        assert stats.recent == []

    def test_counts(self, make_incident):
        incidents = [
            make_incident(type="HSE", severity="Bas"),
            make_incident(type="HSE", severity="Critique", status="En cours"),
            make_incident(type="Technique", severity="Bas", status="Résolu", resolved_after_days=1),
        ]
        stats = compute_safety_stats(incidents)
        assert stats.total == 3
        assert stats.counts.by_status == {"En cours": 1, "Ouvert": 1, "Résolu": 1}
        assert stats.counts.by_type == {"HSE": 2, "Technique": 1}
        assert stats.counts.by_severity == {"Bas": 2, "Critique": 1}
        assert stats.avg_resolution_days == pytest.approx(1.0)

    def test_recent_newest_first_limited(self, make_incident):
        incidents = [make_incident(created_days_ago=d) for d in (10, 1, 7, 3, 5, 2, 9)]
        recent = compute_safety_stats(incidents).recent
        assert len(recent) == 5
        created = [i.created_at for i in recent]
        assert created == sorted(created, reverse=True)

    def test_excluded_count_reported(self, make_incident):
        stats = compute_safety_stats([make_incident(status="Résolu", resolved_after_days=-0.5)])
        assert stats.excluded_from_resolution == 1
        assert stats.avg_resolution_days == 0.0
