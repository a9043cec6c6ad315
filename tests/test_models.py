"""
tests/test_models.py
─────────────────────
Tests for Pydantic v2 data models.
"""
import pytest
from datetime import date
from pydantic import ValidationError

from config.safety import IncidentStatus
from src.data.models import DerivedMetrics, OperationRecord, SafetyIncident, ZoneProgress


class TestOperationRecord:
    def test_valid_record(self, make_operation):
        op = make_operation()
        assert op.methode == "Transport"
        assert op.etat_machine == "marche"
        assert 0.0 <= op.disponibilite <= 100.0

    def test_date_parsed_from_string(self):
        op = OperationRecord(
            operation_id="OP-1", date="2024-05-30", methode="Poussage", machine="D11",
            poste="1", panneau="P1", heures_marche=1, duree_arret=0, volume_saute=1,
        )
        assert op.date == date(2024, 5, 30)
        assert op.metrage is None

    def test_negative_volume_rejected(self):
        with pytest.raises(ValidationError):
            OperationRecord(
                operation_id="OP-1", date="2024-05-30", methode="Poussage", machine="D11",
                poste="1", panneau="P1", heures_marche=1, duree_arret=0,
                volume_saute=-5,  # invalid
            )

    def test_availability_bounds(self, make_operation):
        with pytest.raises(ValidationError):
            OperationRecord(**{**make_operation().model_dump(), "disponibilite": 120.0})

    def test_model_dump(self, make_operation):
        data = make_operation().model_dump()
        assert "volume_saute" in data
        assert "metrage" in data


class TestSafetyIncident:
    def test_default_status_open(self, make_incident):
        assert make_incident().status == IncidentStatus.OPEN

    def test_status_from_french_label(self, make_incident):
        assert make_incident(status="Résolu").status is IncidentStatus.RESOLVED

    def test_unknown_status_rejected(self, make_incident):
        with pytest.raises(ValidationError):
            make_incident(status="Fermé")


class TestReportModels:
    def test_derived_availability_bounds(self):
        with pytest.raises(ValidationError):
            DerivedMetrics(metrage=1, rendement=1, disponibilite=101)

    def test_zone_progress_percent_bounds(self):
        with pytest.raises(ValidationError):
            ZoneProgress(zone="P1", volume=1, volume_target=1, metrage_target=1,
                         percent_complete=150.0, status="complete")
