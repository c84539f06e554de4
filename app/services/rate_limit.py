from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass
class _Window:
    started_at: datetime
    count: int


class FixedWindowRateLimiter:
    """Allow at most ``max_requests`` per client within each fixed window."""

    def __init__(self, *, max_requests: int, window_seconds: int) -> None:
        self._max_requests = max(int(max_requests), 1)
        self._window_seconds = max(int(window_seconds), 1)
        self._lock = threading.Lock()
        self._windows: dict[str, _Window] = {}

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    def try_acquire(self, *, client_id: str, now: datetime) -> tuple[bool, int]:
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        with self._lock:
            window = self._windows.get(client_id)
            if window is None or self._elapsed(window, now) >= self._window_seconds:
                self._prune(now)
                self._windows[client_id] = _Window(started_at=now, count=1)
                return True, 0

            if window.count < self._max_requests:
                window.count += 1
                return True, 0

            retry_after = int(self._window_seconds - self._elapsed(window, now))
            return False, max(retry_after, 1)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    @staticmethod
    def _elapsed(window: _Window, now: datetime) -> float:
        return (now - window.started_at).total_seconds()

    def _prune(self, now: datetime) -> None:
        # Called with the lock held.
        expired = [
            key
            for key, window in self._windows.items()
            if self._elapsed(window, now) >= self._window_seconds
        ]
        for key in expired:
            del self._windows[key]
