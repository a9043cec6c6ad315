"""
src/auth/throttle.py
────────────────────
Failed-login throttling per client identifier (IP address, username...).

State per client:

  Clear ──fail──▶ Tracking(1) ──fail──▶ … ──fail (count ≥ max)──▶ Locked(until)
    ▲                  │                                            │
    └──── success ─────┴───────── attempt after `until` ────────────┘

  - Locked + attempt before `until` → Denied(retry_after_seconds), no state change.
  - Tracking entries expire once now - last_attempt_at exceeds the window.
  - Expired entries are discarded lazily on the next access (no sweeper).

Each check-and-update runs under one lock so concurrent attempts from the
same client cannot lose an increment.
"""
from __future__ import annotations

import logging
import math
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum

from config.settings import settings

logger = logging.getLogger(__name__)


class ThrottleState(str, Enum):
    CLEAR = "clear"
    TRACKING = "tracking"
    LOCKED = "locked"


@dataclass
class ThrottleEntry:
    count: int
    last_attempt_at: datetime
    locked_until: datetime | None = None


@dataclass(frozen=True)
class ThrottleDecision:
    allowed: bool
    retry_after_seconds: int | None = None

    @classmethod
    def allow(cls) -> ThrottleDecision:
        return cls(allowed=True)

    @classmethod
    def deny(cls, remaining: timedelta) -> ThrottleDecision:
        return cls(allowed=False, retry_after_seconds=max(1, math.ceil(remaining.total_seconds())))


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class LoginThrottle:
    """In-memory failed-attempt table owned by one guard instance."""

    def __init__(
        self,
        max_attempts: int | None = None,
        lockout_window: timedelta | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.max_attempts = max_attempts if max_attempts is not None else settings.LOGIN_MAX_ATTEMPTS
        self.lockout_window = (
            lockout_window if lockout_window is not None else timedelta(minutes=settings.LOGIN_LOCKOUT_MINUTES)
        )
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._clock = clock
        self._entries: dict[str, ThrottleEntry] = {}
        self._lock = threading.RLock()

    # ── Internal (caller holds the lock) ──────────────────────────────────────

    def _live_entry(self, client_id: str, now: datetime) -> ThrottleEntry | None:
        entry = self._entries.get(client_id)
        if entry is None:
            return None
        if entry.locked_until is not None:
            expired = now >= entry.locked_until
        else:
            expired = now - entry.last_attempt_at > self.lockout_window
        if expired:
            del self._entries[client_id]
            logger.debug("Throttle entry for %s expired", client_id)
            return None
        return entry

    def _denial(self, entry: ThrottleEntry | None, now: datetime) -> ThrottleDecision | None:
        if entry is not None and entry.locked_until is not None:
            return ThrottleDecision.deny(entry.locked_until - now)
        return None

    def _record(self, client_id: str, success: bool, entry: ThrottleEntry | None, now: datetime) -> None:
        if success:
            if self._entries.pop(client_id, None) is not None:
                logger.debug("Throttle cleared for %s after successful login", client_id)
            return

        if entry is None:
            entry = ThrottleEntry(count=0, last_attempt_at=now)
            self._entries[client_id] = entry
        entry.count += 1
        entry.last_attempt_at = now
        if entry.count >= self.max_attempts:
            entry.locked_until = now + self.lockout_window
            logger.warning(
                "Client %s locked out after %d failed login attempts (until %s)",
                client_id,
                entry.count,
                entry.locked_until.isoformat(),
            )

    # ── Public API ────────────────────────────────────────────────────────────

    def check(self, client_id: str) -> ThrottleDecision:
        """May `client_id` attempt to authenticate now?"""
        with self._lock:
            now = self._clock()
            return self._denial(self._live_entry(client_id, now), now) or ThrottleDecision.allow()

    def record(self, client_id: str, success: bool) -> None:
        """
        Record the outcome of an attempt that was allowed to proceed.

        Ignored while the client is locked: neither a failure nor a success
        changes a running lockout.
        """
        with self._lock:
            now = self._clock()
            entry = self._live_entry(client_id, now)
            if self._denial(entry, now) is not None:
                return
            self._record(client_id, success, entry, now)

    def check_and_record(self, client_id: str, success: bool) -> ThrottleDecision:
        """
        Atomically evaluate an attempt and record its outcome.

        A denied attempt is not recorded (the lockout does not extend).
        """
        with self._lock:
            now = self._clock()
            entry = self._live_entry(client_id, now)
            denial = self._denial(entry, now)
            if denial is not None:
                return denial
            self._record(client_id, success, entry, now)
            return ThrottleDecision.allow()

    def state(self, client_id: str) -> ThrottleState:
        with self._lock:
            entry = self._live_entry(client_id, self._clock())
            if entry is None:
                return ThrottleState.CLEAR
            return ThrottleState.LOCKED if entry.locked_until is not None else ThrottleState.TRACKING

    def failed_attempts(self, client_id: str) -> int:
        with self._lock:
            entry = self._live_entry(client_id, self._clock())
            return 0 if entry is None else entry.count

    def reset(self, client_id: str | None = None) -> None:
        """Forget one client, or every client when `client_id` is None."""
        with self._lock:
            if client_id is None:
                self._entries.clear()
            else:
                self._entries.pop(client_id, None)
