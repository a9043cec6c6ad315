"""
src/data/models.py
──────────────────
Pydantic v2 data models for shift operations, safety incidents and the
report payloads handed to the dashboard.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from config.safety import IncidentStatus


# ── Stored entities ───────────────────────────────────────────────────────────


class OperationRecord(BaseModel):
    """One shift-level décapage record."""

    id: int | None = None
    operation_id: str
    date: date
    methode: str
    machine: str
    poste: str
    panneau: str
    tranche: str = ""
    niveau: str = ""
    etat_machine: str = "marche"
    heures_marche: float = Field(ge=0.0)
    duree_arret: float = Field(ge=0.0)
    volume_saute: float = Field(ge=0.0)
    observation: str | None = None
    # Derived on every write; None only for rows stored without derivation.
    metrage: float | None = None
    rendement: float | None = None
    disponibilite: float | None = Field(default=None, ge=0.0, le=100.0)
    created_by: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SafetyIncident(BaseModel):
    id: int | None = None
    incident_id: str
    date: date
    type: str
    severity: str
    location: str
    description: str
    actions: str | None = None
    status: IncidentStatus = IncidentStatus.OPEN
    reported_by: int | None = None
    resolved_by: int | None = None
    resolved_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ── Derivation ────────────────────────────────────────────────────────────────


class DerivedMetrics(BaseModel):
    metrage: int
    rendement: int
    disponibilite: int = Field(ge=0, le=100)


# ── Performance reports ───────────────────────────────────────────────────────


class SeriesPoint(BaseModel):
    date: date
    group: str | None = None
    rendement: float = 0.0
    disponibilite: float = 0.0
    volume: float = 0.0
    metrage: float = 0.0


class PerformanceSummary(BaseModel):
    avg_rendement: float = 0.0
    avg_disponibilite: float = 0.0
    total_volume: float = 0.0
    total_metrage: float = 0.0
    operation_count: int = 0


class PerformanceSeries(BaseModel):
    time_range: str
    group_by: str = "none"
    series: list[SeriesPoint] = Field(default_factory=list)
    summary: PerformanceSummary = Field(default_factory=PerformanceSummary)
    skipped: int = 0


class GroupTotal(BaseModel):
    key: str
    volume: float = 0.0
    metrage: float = 0.0
    count: int = 0


class VolumeStats(BaseModel):
    time_range: str
    by_method: list[GroupTotal] = Field(default_factory=list)
    series: list[SeriesPoint] = Field(default_factory=list)
    total_volume: float = 0.0
    total_metrage: float = 0.0


class OverviewStats(BaseModel):
    summary: PerformanceSummary
    by_method: dict[str, int] = Field(default_factory=dict)
    by_panel: dict[str, int] = Field(default_factory=dict)
    recent: list[OperationRecord] = Field(default_factory=list)


# ── Zone progress ─────────────────────────────────────────────────────────────


class ZoneProgress(BaseModel):
    zone: str
    volume: float = Field(ge=0.0)
    volume_target: float = Field(gt=0.0)
    metrage: float = Field(default=0.0, ge=0.0)
    metrage_target: float = Field(gt=0.0)
    percent_complete: float = Field(ge=0.0, le=100.0)
    percent_metrage_complete: float = Field(default=0.0, ge=0.0, le=100.0)
    status: str


class GlobalProgress(BaseModel):
    total_volume: float = 0.0
    total_metrage: float = 0.0
    total_volume_target: float = 0.0
    total_metrage_target: float = 0.0
    percent_volume_complete: float = Field(default=0.0, ge=0.0, le=100.0)
    percent_metrage_complete: float = Field(default=0.0, ge=0.0, le=100.0)


class ProgressReport(BaseModel):
    zones: list[ZoneProgress] = Field(default_factory=list)
    overall: GlobalProgress = Field(default_factory=GlobalProgress)


# ── Safety ────────────────────────────────────────────────────────────────────


class SafetyCounts(BaseModel):
    by_status: dict[str, int] = Field(default_factory=dict)
    by_type: dict[str, int] = Field(default_factory=dict)
    by_severity: dict[str, int] = Field(default_factory=dict)


class SafetyStats(BaseModel):
    total: int = 0
    counts: SafetyCounts = Field(default_factory=SafetyCounts)
    avg_resolution_days: float = 0.0
    excluded_from_resolution: int = 0
    recent: list[SafetyIncident] = Field(default_factory=list)


# ── Login ─────────────────────────────────────────────────────────────────────


class LoginDecision(BaseModel):
    allowed: bool
    retry_after_seconds: int | None = None
