"""Stream cache port - short-lived storage of resolved streams."""

from __future__ import annotations

from typing import Protocol

from debridarr.domain.entities import Stream


class StreamCachePort(Protocol):
    """Keyed store of resolved stream lists.

    Implementations:
      - MemoryStreamCache (in-process dict with TTL)
    """

    async def get(self, key: str) -> list[Stream] | None:
        """Return cached streams, or None when missing or expired."""
        ...

    async def set(self, key: str, streams: list[Stream]) -> None:
        """Store streams under *key* (last write wins)."""
        ...
