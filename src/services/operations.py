"""
src/services/operations.py
──────────────────────────
Create / update shift operations.

Every write goes through rederive(): derived fields sent by the caller are
dropped and recomputed from the stored inputs merged with the changes.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import pydantic

from src.analytics.metrics import DERIVED_FIELDS, rederive
from src.data import store
from src.data.models import OperationRecord
from src.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# fields a client may never set directly
_PROTECTED = {"id", "created_at", "updated_at", "created_by"}


def new_operation_id() -> str:
    return f"OP-{uuid.uuid4().hex[:8].upper()}"


def _validated(data: Mapping[str, Any]) -> OperationRecord:
    try:
        return OperationRecord.model_validate(dict(data))
    except pydantic.ValidationError as exc:
        raise ValidationError(str(exc)) from exc


def create_operation(data: Mapping[str, Any], user_id: int | None = None) -> OperationRecord:
    """
    Validate, derive metrics and persist a new operation.

    Raises:
        ValidationError: invalid or missing fields.
        ConflictError: `operation_id` already used.
    """
    payload = {k: v for k, v in data.items() if k not in _PROTECTED and k not in DERIVED_FIELDS}
    payload.setdefault("operation_id", new_operation_id())

    if store.get_operation_by_operation_id(payload["operation_id"]) is not None:
        raise ConflictError(f"Operation {payload['operation_id']} already exists")

    payload = rederive({f: None for f in DERIVED_FIELDS}, payload)
    record = _validated({**payload, "created_by": user_id, "created_at": datetime.now(tz=UTC)})
    saved = store.save_operation(record)
    logger.info("Operation %s created (%s, panneau %s)", saved.operation_id, saved.methode, saved.panneau)
    return saved


def update_operation(row_id: int, changes: Mapping[str, Any]) -> OperationRecord:
    """
    Apply `changes` to an existing operation.

    Derived fields are recomputed when an input changes; otherwise the stored
    values are kept.

    Raises:
        NotFoundError: no operation with this id.
        ValidationError: the merged record is invalid.
        ConflictError: `operation_id` renamed onto another record's id.
    """
    current = store.get_operation(row_id)
    if current is None:
        raise NotFoundError(f"Operation {row_id} not found")

    changes = {k: v for k, v in changes.items() if k not in _PROTECTED}
    new_business_id = changes.get("operation_id")
    if new_business_id and new_business_id != current.operation_id:
        other = store.get_operation_by_operation_id(new_business_id)
        if other is not None and other.id != row_id:
            raise ConflictError(f"Operation {new_business_id} already exists")

    merged = rederive(current.model_dump(), changes)
    record = _validated({**merged, "updated_at": datetime.now(tz=UTC)})
    saved = store.save_operation(record)
    logger.info("Operation %s updated", saved.operation_id)
    return saved


def delete_operation(row_id: int) -> None:
    if not store.delete_operation(row_id):
        raise NotFoundError(f"Operation {row_id} not found")
    logger.info("Operation %d deleted", row_id)
