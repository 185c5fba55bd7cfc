"""Key-value cache abstractions for suggestion results."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

SUGGESTIONS_PREFIX = "suggestions"
PANTRY_FILTER_PREFIX = "pantry-filter"

_logger = logging.getLogger(__name__)


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL in seconds."""

    def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with prefix and return how many went."""


@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime


@dataclass
class InMemoryCache(Cache):
    """In-process cache implementation."""

    _entries: dict[str, _CacheEntry]

    def __init__(self) -> None:
        self._entries = {}

    def get(self, key: str) -> object | None:
        """Return a cached value if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL."""
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=ttl_seconds)
        self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)

    def delete_prefix(self, prefix: str) -> int:
        """Drop all keys that start with prefix."""
        doomed = [key for key in self._entries if key.startswith(prefix)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)


def user_cache_key(prefix: str, user_id: UUID, options_key: str) -> str:
    """Build the cache key for one user's request."""
    return f"{prefix}:{user_id}:{options_key}"


def invalidate_user_cache(cache: Cache, user_id: UUID) -> int:
    """Drop every cached suggestion result for a user.

    Cache failures are logged and ignored; stale entries expire by TTL.
    """
    removed = 0
    for prefix in (SUGGESTIONS_PREFIX, PANTRY_FILTER_PREFIX):
        try:
            removed += cache.delete_prefix(f"{prefix}:{user_id}:")
        except Exception:
            _logger.warning(
                "Cache invalidation failed for %s:%s", prefix, user_id, exc_info=True
            )
    return removed
