"""
src/data/simulator.py
─────────────────────
Synthetic shift history for the décapage site.

Generates:
  - `days` of shift records: one per (day, poste, method), 3 postes per day
  - Safety incidents (Poisson arrivals), older ones mostly resolved

Design:
  - Reproducible with SIMULATION_SEED for consistent demos
  - Zones are drawn with uneven weights so progress differs per panneau
  - Derived fields go through derive_metrics, exactly as on a real write
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

import numpy as np

from config.safety import IncidentSeverity, IncidentStatus, IncidentType
from config.settings import settings
from config.site import METHOD_CONFIG, POSTES, ZONE_TARGETS
from src.analytics.metrics import derive_metrics
from src.data.models import OperationRecord, SafetyIncident

SHIFT_HOURS = 8.0


@dataclass(frozen=True)
class MethodProfile:
    volume_per_hour: float  # m³/h while running
    noise: float            # σ of the hourly rate
    mean_running_hours: float


PROFILES: dict[str, MethodProfile] = {
    "Transport": MethodProfile(volume_per_hour=40.0, noise=6.0, mean_running_hours=6.2),
    "Poussage": MethodProfile(volume_per_hour=25.0, noise=4.0, mean_running_hours=6.8),
    "Casement": MethodProfile(volume_per_hour=35.0, noise=7.0, mean_running_hours=5.6),
}

ZONE_WEIGHTS = np.array([0.30, 0.25, 0.20, 0.15, 0.10])

INCIDENTS_PER_DAY = 0.15

_LOCATIONS = ["Panneau P1", "Panneau P2", "Panneau P3", "Atelier", "Piste d'accès", "Zone de stockage"]
_DESCRIPTIONS = {
    IncidentType.HSE: "Non-respect de la distance de sécurité",
    IncidentType.TECHNIQUE: "Fuite hydraulique sur engin",
    IncidentType.AUTRE: "Dégradation de la signalisation",
}


def _shift_record(
    day: date,
    poste: str,
    methode: str,
    rng: np.random.Generator,
    zones: list[str],
) -> OperationRecord:
    profile = PROFILES[methode]
    machines = METHOD_CONFIG[methode]["machines"]

    heures = float(np.clip(rng.normal(profile.mean_running_hours, 1.0), 0.0, SHIFT_HOURS))
    # one shift in ~25 is a full breakdown
    if rng.random() < 0.04:
        heures = 0.0
    arret = round(SHIFT_HOURS - heures, 2)
    heures = round(heures, 2)
    rate = max(0.0, rng.normal(profile.volume_per_hour, profile.noise))
    volume = round(heures * rate, 1)

    derived = derive_metrics(heures, arret, volume)

    return OperationRecord(
        operation_id=f"OP-{day:%Y%m%d}-{poste}-{methode[:3].upper()}",
        date=day,
        methode=methode,
        machine=str(rng.choice(machines)),
        poste=poste,
        panneau=str(rng.choice(zones, p=ZONE_WEIGHTS[: len(zones)] / ZONE_WEIGHTS[: len(zones)].sum())),
        tranche=f"T{int(rng.integers(1, 4))}",
        niveau=f"N{int(rng.integers(1, 3))}",
        etat_machine="marche" if heures > 0 else "arret",
        heures_marche=heures,
        duree_arret=arret,
        volume_saute=volume,
        observation=None if heures > 0 else "Panne engin",
        created_by=1,
        created_at=datetime.combine(day, datetime.min.time(), tzinfo=UTC) + timedelta(hours=8 * int(poste)),
        **derived.model_dump(),
    )


def _incident(n: int, day: date, now: datetime, rng: np.random.Generator) -> SafetyIncident:
    created_at = datetime.combine(day, datetime.min.time(), tzinfo=UTC) + timedelta(hours=float(rng.uniform(6, 20)))
    age_days = (now - created_at).total_seconds() / 86_400

    kind = IncidentType(rng.choice([t.value for t in IncidentType], p=[0.5, 0.35, 0.15]))
    severity = IncidentSeverity(rng.choice([s.value for s in IncidentSeverity], p=[0.4, 0.35, 0.18, 0.07]))

    status = IncidentStatus.OPEN
    resolved_at = None
    resolved_by = None
    resolution_days = float(rng.gamma(2.0, 2.0))
    if resolution_days < age_days:
        status = IncidentStatus.RESOLVED
        resolved_at = created_at + timedelta(days=resolution_days)
        resolved_by = 1
    elif age_days > 1.0:
        status = IncidentStatus.IN_PROGRESS

    return SafetyIncident(
        incident_id=f"INC-{n:04d}",
        date=day,
        type=kind.value,
        severity=severity.value,
        location=str(rng.choice(_LOCATIONS)),
        description=_DESCRIPTIONS[kind],
        actions="Balisage et consignation" if status != IncidentStatus.OPEN else None,
        status=status,
        reported_by=2,
        resolved_by=resolved_by,
        resolved_at=resolved_at,
        created_at=created_at,
    )


# ── Public API ────────────────────────────────────────────────────────────────

def generate_history(
    seed: int = settings.SIMULATION_SEED,
    days: int = settings.HISTORY_DAYS,
) -> tuple[list[OperationRecord], list[SafetyIncident]]:
    """
    Generate `days` × 3 postes × 3 methods shift records, plus incidents.
    Records are chronological, ending today (UTC).
    """
    rng = np.random.default_rng(seed)
    now = datetime.now(tz=UTC)
    end = now.date()
    start = end - timedelta(days=days - 1)
    zones = list(ZONE_TARGETS.keys())

    operations: list[OperationRecord] = []
    incidents: list[SafetyIncident] = []

    for offset in range(days):
        day = start + timedelta(days=offset)
        for poste in POSTES:
            for methode in METHOD_CONFIG:
                operations.append(_shift_record(day, poste, methode, rng, zones))
        for _ in range(int(rng.poisson(INCIDENTS_PER_DAY))):
            incidents.append(_incident(len(incidents) + 1, day, now, rng))

    return operations, incidents
