"""Brute-force protection for the signin endpoint.

Failed attempts are tracked per client identifier (normally the source IP) in
a sliding window held in process memory. Restarting the process clears all
history, and separate worker processes each keep their own counts.
"""

import threading
import time
from collections.abc import Callable
from datetime import timedelta


class LoginAttemptGuard:
    """Sliding-window failed-login counter keyed by client identifier.

    One lock covers the whole map: every call is a read-modify-write on it.
    """

    def __init__(
        self,
        max_attempts: int,
        window: timedelta,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")
        if window <= timedelta(0):
            raise ValueError("window must be positive")
        self.max_attempts = max_attempts
        self.window = window
        self._window_seconds = window.total_seconds()
        self._clock = clock
        self._lock = threading.Lock()
        # client id -> failure timestamps, oldest first
        self._attempts: dict[str, list[float]] = {}

    def is_blocked(self, client_id: str) -> bool:
        """Prune stale attempts for *client_id* and report whether it is over the limit.

        Checking never consumes an attempt slot.
        """
        with self._lock:
            now = self._clock()
            cutoff = now - self._window_seconds
            recent = [t for t in self._attempts.get(client_id, ()) if t > cutoff]
            if recent:
                self._attempts[client_id] = recent
            else:
                self._attempts.pop(client_id, None)
            return len(recent) >= self.max_attempts

    def record_failed_attempt(self, client_id: str) -> None:
        """Append a failure for *client_id*. Pruning is left to ``is_blocked``."""
        with self._lock:
            self._attempts.setdefault(client_id, []).append(self._clock())

    def reset(self, client_id: str) -> None:
        """Forget every recorded failure for *client_id* (successful login)."""
        with self._lock:
            self._attempts.pop(client_id, None)

    def attempt_count(self, client_id: str) -> int:
        """Inspection only: stored failures for *client_id*, pruned or not.

        Used for logging; blocking decisions go through ``is_blocked``.
        """
        with self._lock:
            return len(self._attempts.get(client_id, ()))
