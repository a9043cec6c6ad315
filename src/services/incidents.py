"""
src/services/incidents.py
─────────────────────────
Safety incident lifecycle.

  Ouvert ──▶ En cours ──▶ Résolu
     └──────────────────────▲

  - Entering Résolu stamps resolved_at (now) and resolved_by (acting user)
    unless the caller provides them.
  - Edits that keep Résolu leave resolved_at / resolved_by untouched.
  - Leaving Résolu clears both.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import pydantic

from config.safety import IncidentStatus
from src.data import store
from src.data.models import SafetyIncident
from src.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

_PROTECTED = {"id", "created_at", "updated_at", "reported_by"}
_RESOLUTION_FIELDS = ("resolved_at", "resolved_by")


def new_incident_id() -> str:
    return f"INC-{uuid.uuid4().hex[:8].upper()}"


def _validated(data: Mapping[str, Any]) -> SafetyIncident:
    try:
        return SafetyIncident.model_validate(dict(data))
    except pydantic.ValidationError as exc:
        raise ValidationError(str(exc)) from exc


def _status(value: Any) -> IncidentStatus:
    try:
        return IncidentStatus(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown incident status {value!r}") from exc


def apply_transition(
    current: Mapping[str, Any],
    changes: Mapping[str, Any],
    user_id: int | None,
    now: datetime,
) -> dict[str, Any]:
    """Merge `changes` into `current`, maintaining the resolution fields."""
    before = _status(current.get("status", IncidentStatus.OPEN))
    after = _status(changes.get("status", before))
    merged = {**current, **changes, "status": after}

    if after is IncidentStatus.RESOLVED and before is not IncidentStatus.RESOLVED:
        merged["resolved_at"] = changes.get("resolved_at") or now
        merged["resolved_by"] = changes.get("resolved_by") or user_id
    elif after is IncidentStatus.RESOLVED:
        for field in _RESOLUTION_FIELDS:
            merged[field] = current.get(field)
    else:
        for field in _RESOLUTION_FIELDS:
            merged[field] = None
    return merged


def create_incident(data: Mapping[str, Any], user_id: int | None = None) -> SafetyIncident:
    """
    Validate and persist a new incident (status defaults to Ouvert).

    Raises:
        ValidationError: invalid or missing fields.
        ConflictError: `incident_id` already used.
    """
    payload = {k: v for k, v in data.items() if k not in _PROTECTED and k not in _RESOLUTION_FIELDS}
    payload.setdefault("incident_id", new_incident_id())

    if store.get_incident_by_incident_id(payload["incident_id"]) is not None:
        raise ConflictError(f"Incident {payload['incident_id']} already exists")

    now = datetime.now(tz=UTC)
    payload = apply_transition({"status": IncidentStatus.OPEN}, payload, user_id, now)
    incident = _validated({**payload, "reported_by": user_id, "created_at": now})
    saved = store.save_safety_incident(incident)
    logger.info("Incident %s reported (%s, %s)", saved.incident_id, saved.type, saved.severity)
    return saved


def update_incident(row_id: int, changes: Mapping[str, Any], user_id: int | None = None) -> SafetyIncident:
    """
    Apply `changes` to an existing incident.

    Raises:
        NotFoundError: no incident with this id.
        ValidationError: the merged incident is invalid.
    """
    current = store.get_safety_incident(row_id)
    if current is None:
        raise NotFoundError(f"Incident {row_id} not found")

    changes = {k: v for k, v in changes.items() if k not in _PROTECTED}
    now = datetime.now(tz=UTC)
    merged = apply_transition(current.model_dump(), changes, user_id, now)
    incident = _validated({**merged, "updated_at": now})
    saved = store.save_safety_incident(incident)

    if saved.status != current.status:
        logger.info("Incident %s: %s → %s", saved.incident_id, current.status.value, saved.status.value)
    return saved


def delete_incident(row_id: int) -> None:
    if not store.delete_safety_incident(row_id):
        raise NotFoundError(f"Incident {row_id} not found")
    logger.info("Incident %d deleted", row_id)
