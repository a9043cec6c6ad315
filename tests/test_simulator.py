"""
tests/test_simulator.py
────────────────────────
Tests for the synthetic shift / incident simulator.
"""

from config.safety import IncidentStatus
from config.site import METHOD_CONFIG, POSTES, ZONE_TARGETS
from src.analytics.metrics import derive_metrics
from src.data.simulator import generate_history


class TestGenerateHistory:
    def test_record_count(self):
        operations, _ = generate_history(seed=42, days=4)
        assert len(operations) == 4 * len(POSTES) * len(METHOD_CONFIG)

    def test_records_are_chronological(self):
        operations, _ = generate_history(seed=42, days=3)
        dates = [op.date for op in operations]
        assert dates == sorted(dates)

    def test_operation_ids_unique(self):
        operations, _ = generate_history(seed=42, days=5)
        ids = [op.operation_id for op in operations]
        assert len(ids) == len(set(ids))

    def test_derived_fields_consistent(self):
        operations, _ = generate_history(seed=42, days=2)
        for op in operations:
            derived = derive_metrics(op.heures_marche, op.duree_arret, op.volume_saute)
            assert op.metrage == derived.metrage
            assert op.rendement == derived.rendement
            assert op.disponibilite == derived.disponibilite

    def test_values_in_site_vocabulary(self):
        operations, _ = generate_history(seed=42, days=3)
        for op in operations:
            assert op.machine in METHOD_CONFIG[op.methode]["machines"]
            assert op.panneau in ZONE_TARGETS
            assert op.poste in POSTES
            assert op.heures_marche + op.duree_arret <= 8.01

    def test_reproducible(self):
        first, _ = generate_history(seed=7, days=3)
        second, _ = generate_history(seed=7, days=3)
        assert [op.volume_saute for op in first] == [op.volume_saute for op in second]

    def test_resolved_incidents_have_resolution_fields(self):
        _, incidents = generate_history(seed=42, days=120)
        assert incidents
        for incident in incidents:
            if incident.status == IncidentStatus.RESOLVED:
                assert incident.resolved_by is not None
                assert incident.resolved_at >= incident.created_at
            else:
                assert incident.resolved_at is None
