"""Metadata port - title/year lookup by IMDb id."""

from __future__ import annotations

from typing import Protocol

from debridarr.domain.entities import MediaKind, TitleInfo


class MetadataPort(Protocol):
    async def lookup(self, media_id: str, kind: MediaKind) -> TitleInfo:
        """Best-effort lookup. Returns ``TitleInfo("", None)`` on any failure."""
        ...
