"""
src/errors.py
─────────────
Error taxonomy shared by the metrics engine, services and login guard.
"""
from __future__ import annotations


class DecapageError(Exception):
    """Base class for domain errors."""


class ValidationError(DecapageError, ValueError):
    """Invalid input (negative, non-numeric, unknown enumerated value...)."""


class NotFoundError(DecapageError, LookupError):
    """Unknown operation, incident or zone reference."""


class ConflictError(DecapageError):
    """A record with the same business identifier already exists."""


class RateLimitedError(DecapageError):
    """Login attempts blocked by the throttle."""

    def __init__(self, client_id: str, retry_after_seconds: int) -> None:
        self.client_id = client_id
        self.retry_after_seconds = retry_after_seconds
        minutes = -(-retry_after_seconds // 60)
        super().__init__(
            f"Trop de tentatives de connexion. Veuillez réessayer dans {minutes} minutes."
        )
