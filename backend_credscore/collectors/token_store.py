"""
Vault auth token store.

Injectable key-value store for per-user vault tokens with a TTL per entry and a
bound on the number of entries. Expired entries are dropped lazily on access;
when full, the entry closest to expiry is evicted first. The API server owns one
instance and hands it out as a dependency.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Protocol

from backend_credscore.core.exceptions import TokenNotFound


class TokenStore(Protocol):
    def put(self, user_id: str, token: str, ttl_sec: float | None = None) -> None: ...

    def get(self, user_id: str) -> str: ...

    def delete(self, user_id: str) -> bool: ...


class InMemoryTokenStore:
    """Thread-safe in-process TokenStore."""

    def __init__(
        self,
        ttl_sec: float = 3600.0,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_sec <= 0:
            raise ValueError("ttl_sec must be positive")
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._ttl_sec = ttl_sec
        self._max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    def put(self, user_id: str, token: str, ttl_sec: float | None = None) -> None:
        if not user_id or not token:
            raise ValueError("user_id and token are required")
        now = self._clock()
        expires_at = now + (ttl_sec if ttl_sec is not None else self._ttl_sec)
        with self._lock:
            self._purge_expired(now)
            if user_id not in self._entries and len(self._entries) >= self._max_entries:
                oldest = min(self._entries, key=lambda k: self._entries[k][1])
                del self._entries[oldest]
            self._entries[user_id] = (token, expires_at)

    def get(self, user_id: str) -> str:
        """Return the token, or raise TokenNotFound when absent or expired."""
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is None:
                raise TokenNotFound(user_id)
            token, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[user_id]
                raise TokenNotFound(user_id)
            return token

    def delete(self, user_id: str) -> bool:
        with self._lock:
            return self._entries.pop(user_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired(self._clock())
            return len(self._entries)

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
