from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict


@dataclass
class _Window:
    count: int
    reset_at: datetime


class RateLimiter:
    """Fixed-window attempt counter keyed by an identifier such as an email.

    State lives on the instance, so each owner (an app, a test) gets its own
    map and its own clock. Sync request handlers share one instance across
    the server threadpool, so every read-check-write runs under a lock.
    """

    def __init__(
        self,
        max_attempts: int = 5,
        window: timedelta = timedelta(minutes=15),
        clock: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self.max_attempts = max_attempts
        self.window = window
        self._clock = clock
        self._attempts: Dict[str, _Window] = {}
        self._lock = threading.Lock()

    def is_allowed(self, key: str) -> bool:
        with self._lock:
            now = self._clock()
            current = self._attempts.get(key)
            if current is None or now > current.reset_at:
                self._attempts[key] = _Window(count=1, reset_at=now + self.window)
                return True
            if current.count >= self.max_attempts:
                return False
            current.count += 1
            return True

    def remaining(self, key: str) -> int:
        with self._lock:
            current = self._attempts.get(key)
            if current is None or self._clock() > current.reset_at:
                return self.max_attempts
            return max(self.max_attempts - current.count, 0)

    def reset(self, key: str) -> None:
        with self._lock:
            self._attempts.pop(key, None)
