"""In-process TTL cache for catalog aggregates.

Category counts are requested on every catalog page load but only change
when an admin writes a document. Keys are tuples whose first element names
the cached family (e.g. ``("categories",)``) so that writers can drop a
whole family with :func:`invalidate_family`.
"""

import time
from typing import Any

CacheKey = tuple[Any, ...]

_entries: dict[CacheKey, tuple[float, Any]] = {}

DEFAULT_TTL = 30.0


def get(key: CacheKey) -> Any | None:
    """Return the cached value, or None when missing or expired."""
    entry = _entries.get(key)
    if entry is None:
        return None
    expires_at, value = entry
    if time.monotonic() >= expires_at:
        _entries.pop(key, None)
        return None
    return value


def put(key: CacheKey, value: Any, ttl: float = DEFAULT_TTL) -> None:
    if ttl <= 0:
        return
    _entries[key] = (time.monotonic() + ttl, value)


def invalidate_family(family: str) -> int:
    """Drop every entry whose key starts with ``family``. Returns the count."""
    stale = [k for k in _entries if k and k[0] == family]
    for key in stale:
        del _entries[key]
    return len(stale)


def clear() -> None:
    _entries.clear()
