"""
tests/conftest.py
─────────────────
Shared pytest fixtures for the Décapage Monitor test suite.
"""
import os
import pytest
from datetime import date, datetime, timedelta, timezone

# Use in-memory SQLite for tests
os.environ.setdefault("DATABASE_URL", ":memory:")
os.environ.setdefault("HISTORY_DAYS", "7")
os.environ.setdefault("SIMULATION_SEED", "42")


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_operation(now):
    """Factory for OperationRecords with derived fields already computed."""
    from src.analytics.metrics import derive_metrics
    from src.data.models import OperationRecord

    counter = {"n": 0}

    def _make(
        day: date | None = None,
        methode: str = "Transport",
        panneau: str = "P1",
        heures_marche: float = 6.0,
        duree_arret: float = 2.0,
        volume_saute: float = 250.0,
        **extra,
    ) -> OperationRecord:
        counter["n"] += 1
        derived = derive_metrics(heures_marche, duree_arret, volume_saute)
        fields = dict(
            operation_id=f"OP-TEST-{counter['n']:03d}",
            date=day or now.date(),
            methode=methode,
            machine="D11" if methode == "Poussage" else "Transwine",
            poste="1",
            panneau=panneau,
            heures_marche=heures_marche,
            duree_arret=duree_arret,
            volume_saute=volume_saute,
            **derived.model_dump(),
        )
        fields.update(extra)
        return OperationRecord(**fields)

    return _make


@pytest.fixture
def make_incident(now):
    from src.data.models import SafetyIncident

    counter = {"n": 0}

    def _make(status: str = "Ouvert", created_days_ago: float = 5.0, resolved_after_days: float | None = None, **extra):
        counter["n"] += 1
        created_at = now - timedelta(days=created_days_ago)
        resolved_at = created_at + timedelta(days=resolved_after_days) if resolved_after_days is not None else None
        fields = dict(
            incident_id=f"INC-TEST-{counter['n']:03d}",
            date=created_at.date(),
            type="HSE",
            severity="Moyen",
            location="Panneau P1",
            description="Test incident",
            status=status,
            created_at=created_at,
            resolved_at=resolved_at,
        )
        fields.update(extra)
        return SafetyIncident(**fields)

    return _make


@pytest.fixture
def clean_store():
    """Empty in-memory store before and after each test that touches it."""
    from src.data import store
    store.clear()
    yield store
    store.clear()


@pytest.fixture
def operation_payload() -> dict:
    return {
        "date": "2024-05-30",
        "methode": "Casement",
        "machine": "PH1",
        "poste": "2",
        "panneau": "P3",
        "heures_marche": 10,
        "duree_arret": 0,
        "volume_saute": 100,
    }


@pytest.fixture
def incident_payload() -> dict:
    return {
        "date": "2024-05-30",
        "type": "Technique",
        "severity": "Élevé",
        "location": "Atelier",
        "description": "Fuite hydraulique sur D11",
    }
