"""Domain entities for resolved, playable streams."""

from __future__ import annotations

from dataclasses import dataclass

from .torrent import QualityDescriptor


@dataclass(frozen=True)
class Stream:
    """A candidate confirmed as instantly available on the debrid provider.

    ``file_idx`` is the 1-based position of the episode file inside the
    torrent, or ``None`` for movies (the player picks the main file).
    """

    name: str
    title: str
    info_hash: str
    file_idx: int | None
    size: str
    quality: QualityDescriptor
    seeders: int
    source: str

    @property
    def description(self) -> str:
        tags = []
        if self.size:
            tags.append(f"📦 {self.size}")
        tags.append(f"🎬 {self.quality.label}")
        if self.seeders:
            tags.append(f"👥 {self.seeders}")
        return " | ".join(tags)


@dataclass(frozen=True)
class StreamResolution:
    """Result of one resolve request."""

    streams: tuple[Stream, ...] = ()
    configuration_required: bool = False
    from_cache: bool = False

    @classmethod
    def empty(cls) -> StreamResolution:
        return cls()

    @classmethod
    def missing_credential(cls) -> StreamResolution:
        return cls(configuration_required=True)
