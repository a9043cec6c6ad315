"""
config/safety.py
────────────────
Safety incident vocabularies (status, type, severity) and display configuration.
"""

from enum import Enum


class IncidentStatus(str, Enum):
    OPEN = "Ouvert"
    IN_PROGRESS = "En cours"
    RESOLVED = "Résolu"


class IncidentType(str, Enum):
    HSE = "HSE"
    TECHNIQUE = "Technique"
    AUTRE = "Autre"


class IncidentSeverity(str, Enum):
    BAS = "Bas"
    MOYEN = "Moyen"
    ELEVE = "Élevé"
    CRITIQUE = "Critique"


STATUS_COLORS: dict[str, str] = {
    IncidentStatus.OPEN.value: "#da3633",
    IncidentStatus.IN_PROGRESS.value: "#e8a020",
    IncidentStatus.RESOLVED.value: "#2ea44f",
}

SEVERITY_COLORS: dict[str, str] = {
    IncidentSeverity.BAS.value: "#2ea44f",
    IncidentSeverity.MOYEN.value: "#e8a020",
    IncidentSeverity.ELEVE.value: "#f0883e",
    IncidentSeverity.CRITIQUE.value: "#da3633",
}

TYPE_LABELS_FR: dict[str, str] = {
    IncidentType.HSE.value: "Hygiène, Sécurité, Environnement",
    IncidentType.TECHNIQUE.value: "Problème Technique",
    IncidentType.AUTRE.value: "Autre",
}

# Severity ordering for sorting (higher = more severe)
SEVERITY_ORDER: dict[str, int] = {
    IncidentSeverity.CRITIQUE.value: 4,
    IncidentSeverity.ELEVE.value: 3,
    IncidentSeverity.MOYEN.value: 2,
    IncidentSeverity.BAS.value: 1,
}

RECENT_INCIDENTS_DISPLAY = 5
