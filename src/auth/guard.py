"""
src/auth/guard.py
─────────────────
Login guard: puts the throttle in front of whatever verifies credentials.

Credential verification itself is supplied by the caller as a callable.
"""
from __future__ import annotations

import logging
from collections.abc import Callable

from src.auth.throttle import LoginThrottle
from src.data.models import LoginDecision
from src.errors import RateLimitedError

logger = logging.getLogger(__name__)


class AuthGuard:
    def __init__(self, throttle: LoginThrottle | None = None) -> None:
        self.throttle = throttle if throttle is not None else LoginThrottle()

    def check_login_attempt(self, client_id: str) -> LoginDecision:
        decision = self.throttle.check(client_id)
        return LoginDecision(allowed=decision.allowed, retry_after_seconds=decision.retry_after_seconds)

    def record_login_outcome(self, client_id: str, success: bool) -> None:
        self.throttle.record(client_id, success)

    def attempt_login(self, client_id: str, authenticate: Callable[[], bool]) -> bool:
        """
        Run `authenticate` unless `client_id` is locked out, and record the result.

        Raises:
            RateLimitedError: the client is locked out; carries retry_after_seconds.
        """
        decision = self.throttle.check(client_id)
        if not decision.allowed:
            logger.info("Login attempt from %s rejected by throttle", client_id)
            raise RateLimitedError(client_id, decision.retry_after_seconds or 1)

        success = bool(authenticate())
        outcome = self.throttle.check_and_record(client_id, success)
        if not outcome.allowed:
            # another request locked the client between check and record
            raise RateLimitedError(client_id, outcome.retry_after_seconds or 1)
        return success
