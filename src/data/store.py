"""
src/data/store.py
─────────────────
SQLite record store for shift operations and safety incidents.

Provides:
  - initialize_db()          : Create tables + seed with simulated history on first run
  - save_operation()         : Insert or update an OperationRecord (NotFoundError on a missing id)
  - list_operations()        : Fetch operations, optionally filtered by method / panel
  - save_safety_incident()   : Insert or update a SafetyIncident
  - list_safety_incidents()  : Fetch incidents filtered by type / severity / status

The store persists what it is given; derived fields are computed by the
services before saving.

Thread safety: uses check_same_thread=False + a module-level lock.
"""
from __future__ import annotations

import logging
import sqlite3
import threading
from datetime import UTC, datetime
from typing import Any

from config.settings import settings
from src.data.models import OperationRecord, SafetyIncident
from src.errors import NotFoundError

logger = logging.getLogger(__name__)

_lock = threading.RLock()
_DB: sqlite3.Connection | None = None


# ── Connection ────────────────────────────────────────────────────────────────

def _get_conn() -> sqlite3.Connection:
    global _DB
    if _DB is None:
        _DB = sqlite3.connect(settings.DATABASE_URL, check_same_thread=False)
        _DB.row_factory = sqlite3.Row
        _create_tables(_DB)
    return _DB


# ── Schema ────────────────────────────────────────────────────────────────────

_CREATE_OPERATIONS = """
CREATE TABLE IF NOT EXISTS operations (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    operation_id   TEXT NOT NULL UNIQUE,
    date           TEXT NOT NULL,
    methode        TEXT NOT NULL,
    machine        TEXT NOT NULL,
    poste          TEXT NOT NULL,
    panneau        TEXT NOT NULL,
    tranche        TEXT NOT NULL DEFAULT '',
    niveau         TEXT NOT NULL DEFAULT '',
    etat_machine   TEXT NOT NULL DEFAULT 'marche',
    heures_marche  REAL NOT NULL,
    duree_arret    REAL NOT NULL,
    volume_saute   REAL NOT NULL,
    observation    TEXT,
    metrage        REAL,
    rendement      REAL,
    disponibilite  REAL,
    created_by     INTEGER,
    created_at     TEXT NOT NULL,
    updated_at     TEXT
);
"""

_CREATE_INCIDENTS = """
CREATE TABLE IF NOT EXISTS safety_incidents (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    incident_id  TEXT NOT NULL UNIQUE,
    date         TEXT NOT NULL,
    type         TEXT NOT NULL,
    severity     TEXT NOT NULL,
    location     TEXT NOT NULL,
    description  TEXT NOT NULL,
    actions      TEXT,
    status       TEXT NOT NULL DEFAULT 'Ouvert',
    reported_by  INTEGER,
    resolved_by  INTEGER,
    resolved_at  TEXT,
    created_at   TEXT NOT NULL,
    updated_at   TEXT
);
"""

_CREATE_IDX = """
CREATE INDEX IF NOT EXISTS idx_operations_date    ON operations (date);
CREATE INDEX IF NOT EXISTS idx_operations_panneau ON operations (panneau);
CREATE INDEX IF NOT EXISTS idx_incidents_status   ON safety_incidents (status);
"""

_OPERATION_COLUMNS = [
    "operation_id", "date", "methode", "machine", "poste", "panneau", "tranche",
    "niveau", "etat_machine", "heures_marche", "duree_arret", "volume_saute",
    "observation", "metrage", "rendement", "disponibilite", "created_by",
    "created_at", "updated_at",
]

_INCIDENT_COLUMNS = [
    "incident_id", "date", "type", "severity", "location", "description",
    "actions", "status", "reported_by", "resolved_by", "resolved_at",
    "created_at", "updated_at",
]


def _create_tables(conn: sqlite3.Connection) -> None:
    with conn:
        conn.executescript(_CREATE_OPERATIONS + _CREATE_INCIDENTS + _CREATE_IDX)


# ── Row conversion ────────────────────────────────────────────────────────────

def _to_db(value: Any) -> Any:
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value"):  # str enums
        return value.value
    return value


def _row_values(model: OperationRecord | SafetyIncident, columns: list[str]) -> list[Any]:
    data = model.model_dump()
    return [_to_db(data[col]) for col in columns]


def _operation_from_row(row: sqlite3.Row) -> OperationRecord:
    return OperationRecord.model_validate(dict(row))


def _incident_from_row(row: sqlite3.Row) -> SafetyIncident:
    return SafetyIncident.model_validate(dict(row))


def _stamp(model: OperationRecord | SafetyIncident) -> OperationRecord | SafetyIncident:
    now = datetime.now(tz=UTC)
    if model.created_at is None:
        return model.model_copy(update={"created_at": now})
    return model


# ── Generic upsert / select ───────────────────────────────────────────────────

def _save(table: str, columns: list[str], model: Any) -> int:
    values = _row_values(model, columns)
    conn = _get_conn()
    with _lock, conn:
        if model.id is None:
            placeholders = ",".join("?" for _ in columns)
            cur = conn.execute(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
                values,
            )
            return int(cur.lastrowid)
        assignments = ", ".join(f"{col} = ?" for col in columns)
        cur = conn.execute(f"UPDATE {table} SET {assignments} WHERE id = ?", [*values, model.id])
        if cur.rowcount == 0:
            raise NotFoundError(f"{table} row {model.id} does not exist")
        return int(model.id)


def _select(table: str, filters: dict[str, Any], order_by: str) -> list[sqlite3.Row]:
    where = []
    params: list = []
    for column, value in filters.items():
        if value and value != "all":
            where.append(f"{column} = ?")
            params.append(_to_db(value))
    sql = f"SELECT * FROM {table}"
    if where:
        sql += f" WHERE {' AND '.join(where)}"
    sql += f" ORDER BY {order_by}"
    conn = _get_conn()
    with _lock:
        return conn.execute(sql, params).fetchall()


def _fetch_one(sql: str, params: tuple) -> sqlite3.Row | None:
    conn = _get_conn()
    with _lock:
        return conn.execute(sql, params).fetchone()


def _delete(table: str, row_id: int) -> bool:
    conn = _get_conn()
    with _lock, conn:
        return conn.execute(f"DELETE FROM {table} WHERE id = ?", (row_id,)).rowcount > 0


# ── Public API: operations ────────────────────────────────────────────────────

def save_operation(record: OperationRecord) -> OperationRecord:
    """Insert (id is None) or update an operation. Returns the stored record."""
    record = _stamp(record)
    row_id = _save("operations", _OPERATION_COLUMNS, record)
    return record.model_copy(update={"id": row_id})


def get_operation(row_id: int) -> OperationRecord | None:
    row = _fetch_one("SELECT * FROM operations WHERE id = ?", (row_id,))
    return _operation_from_row(row) if row else None


def get_operation_by_operation_id(operation_id: str) -> OperationRecord | None:
    row = _fetch_one("SELECT * FROM operations WHERE operation_id = ?", (operation_id,))
    return _operation_from_row(row) if row else None


def list_operations(methode: str | None = None, panneau: str | None = None) -> list[OperationRecord]:
    """Operations in ascending date order. "all" or empty filters are ignored."""
    rows = _select("operations", {"methode": methode, "panneau": panneau}, "date ASC, id ASC")
    return [_operation_from_row(r) for r in rows]


def delete_operation(row_id: int) -> bool:
    return _delete("operations", row_id)


# ── Public API: safety incidents ──────────────────────────────────────────────

def save_safety_incident(incident: SafetyIncident) -> SafetyIncident:
    incident = _stamp(incident)
    row_id = _save("safety_incidents", _INCIDENT_COLUMNS, incident)
    return incident.model_copy(update={"id": row_id})


def get_safety_incident(row_id: int) -> SafetyIncident | None:
    row = _fetch_one("SELECT * FROM safety_incidents WHERE id = ?", (row_id,))
    return _incident_from_row(row) if row else None


def get_incident_by_incident_id(incident_id: str) -> SafetyIncident | None:
    row = _fetch_one("SELECT * FROM safety_incidents WHERE incident_id = ?", (incident_id,))
    return _incident_from_row(row) if row else None


def list_safety_incidents(
    type: str | None = None,
    severity: str | None = None,
    status: str | None = None,
) -> list[SafetyIncident]:
    rows = _select(
        "safety_incidents",
        {"type": type, "severity": severity, "status": status},
        "date DESC, id DESC",
    )
    return [_incident_from_row(r) for r in rows]


def delete_safety_incident(row_id: int) -> bool:
    return _delete("safety_incidents", row_id)


# ── Lifecycle ─────────────────────────────────────────────────────────────────

def clear() -> None:
    """Delete every row (used by tests and force reseeding)."""
    conn = _get_conn()
    with _lock, conn:
        conn.execute("DELETE FROM operations")
        conn.execute("DELETE FROM safety_incidents")


def initialize_db(force_reseed: bool = False) -> None:
    """
    Create tables and populate with simulated history if the DB is empty.
    Safe to call multiple times (idempotent).
    """
    # Import here to avoid circular deps
    from src.data.simulator import generate_history

    conn = _get_conn()
    with _lock:
        count = conn.execute("SELECT COUNT(*) FROM operations").fetchone()[0]
        if count > 0 and not force_reseed:
            return  # Already seeded

        clear()
        operations, incidents = generate_history()
        for record in operations:
            save_operation(record)
        for incident in incidents:
            save_safety_incident(incident)
    logger.info("Seeded %d operations and %d safety incidents", len(operations), len(incidents))
