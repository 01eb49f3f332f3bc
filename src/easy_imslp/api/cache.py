"""In-memory TTL cache for API responses."""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

V = TypeVar("V")

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


@dataclass
class _Entry(Generic[V]):
    value: V
    expires_at: float


class TTLCache(Generic[V]):
    """Dictionary-backed cache whose entries expire after ``ttl`` seconds.

    Expired entries are dropped lazily on access, or eagerly via
    :meth:`prune`. The clock is injectable for tests.
    """

    def __init__(self, ttl: float = 300.0, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, _Entry[V]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> V | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: V, ttl: float | None = None) -> None:
        expires_at = self._clock() + (self.ttl if ttl is None else ttl)
        with self._lock:
            self._entries[key] = _Entry(value=value, expires_at=expires_at)

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        """Number of stored entries, including ones that expired but were not pruned."""
        with self._lock:
            return len(self._entries)

    def prune(self) -> int:
        """Remove expired entries and return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def get_or_set(self, key: str, factory: Callable[[], V], ttl: float | None = None) -> V:
        """Return the cached value, computing and storing it on a miss."""
        cached = self.get(key)
        if cached is not None:
            return cached
        value = factory()
        self.set(key, value, ttl)
        return value


def create_cache_key(prefix: str, *parts: Any) -> str:
    """Join ``prefix`` and ``parts`` with ``:``; dicts/lists are JSON-encoded, None is empty.

    Examples:
        >>> create_cache_key("search", "sonata", 10, None)
        'search:sonata:10:'
    """
    encoded = []
    for part in parts:
        if part is None:
            encoded.append("")
        elif isinstance(part, (dict, list)):
            encoded.append(json.dumps(part, sort_keys=True, separators=(",", ":")))
        else:
            encoded.append(str(part))
    return ":".join([prefix, *encoded])


def hash_string(value: str) -> str:
    """32-bit FNV-1a hash of ``value`` rendered in base 36."""
    digest = FNV_OFFSET_BASIS
    for char in value:
        digest ^= ord(char)
        digest = (digest * FNV_PRIME) & 0xFFFFFFFF

    if digest == 0:
        return "0"
    digits = []
    while digest:
        digest, remainder = divmod(digest, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))
