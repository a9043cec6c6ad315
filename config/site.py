"""
config/site.py
──────────────
Site definitions: décapage methods, zone (panneau) targets and the
progress classification table.

Zone targets are planning figures for the whole campaign, not derived
from data. A zone that is not listed here falls back to DEFAULT_ZONE_TARGET.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class ZoneTarget:
    """Cumulative campaign targets for one panneau."""
    volume: float   # m³ sautés
    metrage: float  # m


# ── Décapage methods ──────────────────────────────────────────────────────────
METHOD_CONFIG: dict[str, dict] = {
    "Transport": {
        "id": "Transport",
        "name": "Transport",
        "machines": ["Transwine", "Procaneq"],
        "color": "#58a6ff",
    },
    "Poussage": {
        "id": "Poussage",
        "name": "Poussage",
        "machines": ["D11"],
        "color": "#2ea44f",
    },
    "Casement": {
        "id": "Casement",
        "name": "Casement",
        "machines": ["750011", "750012", "PH1", "PH2", "200B1", "Libhere"],
        "color": "#e8a020",
    },
}

METHOD_IDS = list(METHOD_CONFIG.keys())

POSTES = ("1", "2", "3")

MACHINE_STATES = ("marche", "arret")

# ── Zone targets ──────────────────────────────────────────────────────────────
ZONE_TARGETS: dict[str, ZoneTarget] = {
    "P1": ZoneTarget(volume=50_000.0, metrage=5_000.0),
    "P2": ZoneTarget(volume=75_000.0, metrage=7_500.0),
    "P3": ZoneTarget(volume=60_000.0, metrage=6_000.0),
    "P4": ZoneTarget(volume=80_000.0, metrage=8_000.0),
    "P5": ZoneTarget(volume=55_000.0, metrage=5_500.0),
}

DEFAULT_ZONE_TARGET = ZoneTarget(volume=100_000.0, metrage=10_000.0)

# ── Progress classification ───────────────────────────────────────────────────
# Ordered (min_percent, label) pairs, highest first. First match wins.
PROGRESS_BANDS: tuple[tuple[float, str], ...] = (
    (100.0, "complete"),
    (75.0, "advanced"),
    (40.0, "on_track"),
    (0.0, "behind"),
)

PROGRESS_COLORS: dict[str, str] = {
    "complete": "#2ea44f",
    "advanced": "#58a6ff",
    "on_track": "#e8a020",
    "behind": "#da3633",
}

PROGRESS_LABELS_FR: dict[str, str] = {
    "complete": "Terminé",
    "advanced": "Avancé",
    "on_track": "En cours",
    "behind": "En retard",
}
