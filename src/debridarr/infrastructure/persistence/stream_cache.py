"""In-process TTL cache for resolved stream lists.

Entries live in a plain dict keyed by ``stream_cache_key``. Expiry is
checked lazily on ``get`` (no background sweep); the content is lost on
restart. An optional ``max_entries`` bound prunes the oldest entries on
write.
"""

from __future__ import annotations

import hashlib
import time
from collections.abc import Callable

import structlog

from debridarr.domain.entities import Stream

log = structlog.get_logger(__name__)

DEFAULT_TTL_SECONDS = 3600


def stream_cache_key(media_id: str, credential: str) -> str:
    """Cache key scoped to one account.

    ``media_id`` includes season/episode for series. The credential is
    reduced to a sha256 fingerprint so the key never holds the API key.
    """
    fingerprint = hashlib.sha256(credential.encode("utf-8")).hexdigest()[:16]
    return f"streams:{media_id}:{fingerprint}"


class MemoryStreamCache:
    """Implements ``StreamCachePort`` with a dict of ``(created_at, streams)``."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int | None = None,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._max_entries = max_entries
        self._store: dict[str, tuple[float, tuple[Stream, ...]]] = {}

    def __len__(self) -> int:
        return len(self._store)

    async def get(self, key: str) -> list[Stream] | None:
        item = self._store.get(key)
        if item is None:
            return None
        created_at, streams = item
        if self._clock() - created_at > self._ttl:
            del self._store[key]
            log.debug("stream_cache_expired", key=key)
            return None
        return list(streams)

    async def set(self, key: str, streams: list[Stream]) -> None:
        # Re-insert so dict order tracks write time for pruning.
        self._store.pop(key, None)
        self._store[key] = (self._clock(), tuple(streams))
        self._prune()

    def _prune(self) -> None:
        if self._max_entries is None or len(self._store) <= self._max_entries:
            return
        overflow = len(self._store) - self._max_entries
        for key in list(self._store)[:overflow]:
            del self._store[key]
        log.debug("stream_cache_pruned", removed=overflow)

    def clear(self) -> None:
        self._store.clear()
