"""Time-bounded in-process memo."""

from __future__ import annotations

import time
from typing import Any, Callable, Hashable


class TTLMemo:
    """In-process memo with per-entry expiry.

    Entries expire after ``ttl_seconds``; expired entries are dropped when read.
    There is no size bound and no background eviction.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, Any]] = {}

    @staticmethod
    def key_for(latitude: float, longitude: float, *extra: Hashable) -> tuple:
        # 소수점 4자리 ≈ 11m
        return (round(latitude, 4), round(longitude, 4), *extra)

    def get(self, key: Hashable) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: Hashable, value: Any) -> None:
        self._entries[key] = (self._clock() + self._ttl, value)

    def pop(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
