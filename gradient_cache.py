"""
Cache for rendered gradients, keyed by image identity.

Entries are opaque strings with a time-to-live. There is no locking: two
callers that miss at the same time both compute the gradient and the last
write wins.
"""

import time
from typing import Callable, Optional, Protocol


MOVIE_IMAGE_GRADIENT = 'movie_image_gradient'
DEFAULT_TTL = 30 * 24 * 60 * 60  # One month, in seconds


class GradientCache(Protocol):
    def has(self, key: str) -> bool: ...

    def get(self, key: str) -> Optional[str]: ...

    def put(self, key: str, value: str, ttl: float) -> None: ...


def mount_key(prefix: str, **params) -> str:
    """
    Build a cache key from a prefix and named parameters.

    Parameters are sorted by name so the key does not depend on call order:
    mount_key('movie_image_gradient', imageURL='a.jpg')
    -> 'movie_image_gradient:imageURL=a.jpg'
    """
    if not params:
        return prefix
    parts = [f'{name}={params[name]}' for name in sorted(params)]
    return f"{prefix}:{'&'.join(parts)}"


class MemoryCache:
    """In-process TTL cache implementing the GradientCache interface."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries = {}  # key -> (value, expires_at)

    def _live(self, key: str):
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry[1] <= self._clock():
            self._entries.pop(key, None)
            return None
        return entry

    def has(self, key: str) -> bool:
        return self._live(key) is not None

    def get(self, key: str) -> Optional[str]:
        entry = self._live(key)
        return entry[0] if entry else None

    def put(self, key: str, value: str, ttl: float = DEFAULT_TTL) -> None:
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        now = self._clock()
        self.purge_expired(now)
        self._entries[key] = (value, now + ttl)

    def purge_expired(self, now: Optional[float] = None) -> int:
        """Drop every expired entry; returns how many were removed."""
        if now is None:
            now = self._clock()
        expired = [key for key, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        self.purge_expired()
        return len(self._entries)
