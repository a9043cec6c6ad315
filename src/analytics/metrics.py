"""
src/analytics/metrics.py
────────────────────────
Shift performance indicators derived from raw operation inputs.

  métrage       = round(volume_sauté × K)                       K = METRAGE_FACTOR
  rendement     = round(métrage / heures_marche)                0 if no running hours
  disponibilité = round(heures_marche / (heures_marche + durée_arrêt) × 100)
                                                                0 if no scheduled hours

Rounding is half-up. Derived values are never accepted from callers: they
are recomputed on create and on every update touching an input.
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from numbers import Real
from typing import Any

from config.settings import settings
from src.data.models import DerivedMetrics
from src.errors import ValidationError

INPUT_FIELDS = ("heures_marche", "duree_arret", "volume_saute")
DERIVED_FIELDS = ("metrage", "rendement", "disponibilite")


def _round_half_up(value: float) -> int:
    # inputs are validated non-negative
    return int(math.floor(value + 0.5))


def _check_input(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be finite, got {value!r}")
    if value < 0:
        raise ValidationError(f"{name} must be >= 0, got {value!r}")
    return value


def derive_metrics(
    heures_marche: float,
    duree_arret: float,
    volume_saute: float,
    factor: float | None = None,
) -> DerivedMetrics:
    """
    Compute métrage, rendement and disponibilité for one shift.

    Raises:
        ValidationError: if any input is negative, non-finite or not a number.
    """
    heures = _check_input("heures_marche", heures_marche)
    arret = _check_input("duree_arret", duree_arret)
    volume = _check_input("volume_saute", volume_saute)
    k = _check_input("factor", settings.METRAGE_FACTOR if factor is None else factor)

    metrage = _round_half_up(volume * k)
    rendement = _round_half_up(metrage / heures) if heures > 0 else 0

    scheduled = heures + arret
    disponibilite = _round_half_up(heures / scheduled * 100.0) if scheduled > 0 else 0

    return DerivedMetrics(metrage=metrage, rendement=rendement, disponibilite=disponibilite)


def touches_inputs(changes: Mapping[str, Any]) -> bool:
    """True if an update payload modifies any derivation input."""
    return any(name in changes for name in INPUT_FIELDS)


def rederive(current: Mapping[str, Any], changes: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merge `changes` into `current` and refresh the derived fields.

    Derived fields present in `changes` are discarded. When no input field is
    touched the derived values already in `current` are kept unchanged.
    """
    merged = {**current, **{k: v for k, v in changes.items() if k not in DERIVED_FIELDS}}
    if touches_inputs(changes) or any(current.get(f) is None for f in DERIVED_FIELDS):
        derived = derive_metrics(
            merged.get("heures_marche"),
            merged.get("duree_arret"),
            merged.get("volume_saute"),
        )
        merged.update(derived.model_dump())
    return merged
