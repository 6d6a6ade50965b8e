from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Iterator

from snake_core import Position


TRAIL_TTL_MS = 300


class TrailQueue:
    """Cosmetic markers left behind when the snake grows.

    Markers fade oldest-first, one every ttl_ms. Adding markers restarts the
    decay clock.
    """

    def __init__(self, ttl_ms: int = TRAIL_TTL_MS):
        if ttl_ms <= 0:
            raise ValueError("ttl_ms must be positive")
        self.ttl_ms = ttl_ms
        self._markers: Deque[Position] = deque()
        self._last_change_ms: float | None = None

    def extend(self, positions: Iterable[Position], now_ms: float) -> None:
        self._markers.extend(positions)
        self._last_change_ms = now_ms

    def expire(self, now_ms: float) -> int:
        dropped = 0
        while self._markers and self._last_change_ms is not None and now_ms - self._last_change_ms >= self.ttl_ms:
            self._markers.popleft()
            self._last_change_ms += self.ttl_ms
            dropped += 1
        return dropped

    def clear(self) -> None:
        self._markers.clear()
        self._last_change_ms = None

    def __iter__(self) -> Iterator[Position]:
        return iter(self._markers)

    def __len__(self) -> int:
        return len(self._markers)
