"""
tests/test_series.py
─────────────────────
Tests for date-bucketed performance series and summaries.
"""
import logging
from datetime import date

import pytest

from src.analytics.series import (
    aggregate_performance,
    aggregate_volume,
    count_by,
    operations_frame,
)
from src.analytics.time_window import resolve_window
from src.errors import ValidationError


class TestAggregatePerformance:
    def test_empty_input(self, now):
        result = aggregate_performance([], resolve_window("30d", now))
        assert result.series == []
        assert result.summary.avg_rendement == 0.0
        assert result.summary.avg_disponibilite == 0.0
        assert result.summary.total_volume == 0.0
        assert result.summary.operation_count == 0

    def test_same_day_records_are_summed(self, now, make_operation):
        day = date(2024, 5, 30)
        records = [
            make_operation(day=day, heures_marche=6, duree_arret=2, volume_saute=250),  # dispo 75
            make_operation(day=day, heures_marche=8, duree_arret=0, volume_saute=100),  # dispo 100
        ]
        result = aggregate_performance(records, resolve_window("7d", now))
        assert len(result.series) == 1
        point = result.series[0]
        assert point.date == day
        assert point.disponibilite == 175.0
        assert point.volume == 350.0
        assert point.metrage == 140.0

    def test_summary_means_over_records(self, now, make_operation):
        records = [
            make_operation(day=date(2024, 5, 30), heures_marche=6, duree_arret=2),
            make_operation(day=date(2024, 5, 31), heures_marche=8, duree_arret=0),
        ]
        summary = aggregate_performance(records, resolve_window("7d", now)).summary
        assert summary.avg_disponibilite == pytest.approx(87.5)
        assert summary.operation_count == 2

    def test_series_sorted_by_date(self, now, make_operation):
        records = [make_operation(day=date(2024, 5, d)) for d in (30, 27, 29)]
        result = aggregate_performance(records, resolve_window("7d", now))
        assert [p.date for p in result.series] == [date(2024, 5, 27), date(2024, 5, 29), date(2024, 5, 30)]

    def test_grouped_by_method_sorted_by_date_then_group(self, now, make_operation):
        day = date(2024, 5, 30)
        records = [
            make_operation(day=day, methode="Transport"),
            make_operation(day=day, methode="Casement"),
            make_operation(day=date(2024, 5, 29), methode="Poussage"),
        ]
        result = aggregate_performance(records, resolve_window("7d", now), group_by="method")
        assert [(p.date, p.group) for p in result.series] == [
            (date(2024, 5, 29), "Poussage"),
            (day, "Casement"),
            (day, "Transport"),
        ]

    def test_grouped_by_panel(self, now, make_operation):
        records = [make_operation(panneau="P2"), make_operation(panneau="P1")]
        result = aggregate_performance(records, resolve_window("7d", now), group_by="panel")
        assert [p.group for p in result.series] == ["P1", "P2"]

    def test_ungrouped_points_have_no_group(self, now, make_operation):
        result = aggregate_performance([make_operation()], resolve_window("7d", now))
        assert result.series[0].group is None

    def test_unknown_grouping_rejected(self, now):
        with pytest.raises(ValidationError):
            aggregate_performance([], resolve_window("7d", now), group_by="machine")

    def test_window_excludes_old_records(self, now, make_operation):
        records = [make_operation(day=date(2024, 5, 30)), make_operation(day=date(2023, 1, 1))]
        result = aggregate_performance(records, resolve_window("30d", now))
        assert result.summary.operation_count == 1
        assert aggregate_performance(records, resolve_window("all", now)).summary.operation_count == 2

    def test_method_filter(self, now, make_operation):
        records = [make_operation(methode="Transport"), make_operation(methode="Poussage")]
        result = aggregate_performance(records, resolve_window("7d", now), methode="Poussage")
        assert result.summary.operation_count == 1

    def test_malformed_records_skipped(self, now, make_operation, caplog):
        records = [
            make_operation(),
            {"operation_id": "OP-BAD", "date": "2024-05-31", "rendement": None,
             "disponibilite": 50, "volume_saute": 10, "metrage": 4},
            {"operation_id": "OP-NODATE", "rendement": 1, "disponibilite": 50, "volume_saute": 10, "metrage": 4},
        ]
        with caplog.at_level(logging.WARNING):
            result = aggregate_performance(records, resolve_window("7d", now))
        assert result.skipped == 2
        assert result.summary.operation_count == 1
        assert "OP-BAD" in caplog.text

    def test_out_of_range_malformed_records_not_counted(self, now, make_operation):
        records = [
            make_operation(methode="Transport"),
            {"operation_id": "OP-OLD", "date": "2023-01-01", "methode": "Transport", "rendement": None,
             "disponibilite": 50, "volume_saute": 10, "metrage": 4},
            {"operation_id": "OP-OTHER", "date": "2024-05-31", "methode": "Casement", "rendement": None,
             "disponibilite": 50, "volume_saute": 10, "metrage": 4},
        ]
        result = aggregate_performance(records, resolve_window("7d", now), methode="Transport")
        assert result.skipped == 0
        assert result.summary.operation_count == 1

    def test_deterministic(self, now, make_operation):
        records = [make_operation(day=date(2024, 5, d), methode=m) for d in (28, 29) for m in ("Transport", "Casement")]
        window = resolve_window("7d", now)
        first = aggregate_performance(records, window, group_by="method")
        second = aggregate_performance(list(reversed(records)), window, group_by="method")
        assert first == second


class TestAggregateVolume:
    def test_totals_by_method(self, now, make_operation):
        records = [
            make_operation(methode="Transport", volume_saute=100),
            make_operation(methode="Transport", volume_saute=50),
            make_operation(methode="Casement", volume_saute=200),
        ]
        stats = aggregate_volume(records, resolve_window("7d", now))
        by_method = {t.key: t for t in stats.by_method}
        assert by_method["Transport"].volume == 150.0
        assert by_method["Transport"].count == 2
        assert by_method["Casement"].metrage == 80.0
        assert stats.total_volume == 350.0

    def test_empty(self, now):
        stats = aggregate_volume([], resolve_window("7d", now))
        assert stats.by_method == []
        assert stats.total_volume == 0.0


class TestFrameHelpers:
    def test_count_by(self, make_operation):
        df, _ = operations_frame([make_operation(panneau="P2"), make_operation(panneau="P2"), make_operation(panneau="P1")])
        assert count_by(df, "panneau") == {"P1": 1, "P2": 2}

    def test_frame_skips_non_numeric(self):
        df, skipped = operations_frame([{"operation_id": "x", "date": "2024-01-01", "rendement": "abc",
                                         "disponibilite": 1, "volume_saute": 1, "metrage": 1}])
        assert df.empty
        assert skipped == 1
