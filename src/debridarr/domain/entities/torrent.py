"""Domain entities for discovered torrents and debrid availability."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

_INFO_HASH_RE = re.compile(r"^[0-9A-Fa-f]{40}$")


class Resolution(str, Enum):
    SD_480P = "480p"
    HD_720P = "720p"
    HD_1080P = "1080p"
    UHD_4K = "4K"
    UNKNOWN = "unknown"


class SourceType(str, Enum):
    CAM = "CAM"
    TS = "TS"
    HDTV = "HDTV"
    WEBRIP = "WEBRip"
    WEB_DL = "WEB-DL"
    BLURAY = "BluRay"
    REMUX = "REMUX"
    DVDRIP = "DVDRip"
    UNKNOWN = "unknown"


class Codec(str, Enum):
    H264 = "H.264"
    HEVC = "HEVC"
    AV1 = "AV1"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class QualityDescriptor:
    """Quality information derived once from a release title."""

    resolution: Resolution = Resolution.UNKNOWN
    source: SourceType = SourceType.UNKNOWN
    codec: Codec = Codec.UNKNOWN
    audio: str | None = None
    hdr: bool = False

    @property
    def label(self) -> str:
        """Short human-readable summary, e.g. ``1080p | BluRay | HEVC | HDR``."""
        parts = [
            member.value
            for member in (self.resolution, self.source, self.codec)
            if member.value != "unknown"
        ]
        if self.hdr:
            parts.append("HDR")
        return " | ".join(parts) or "Unknown"


def is_info_hash(value: str | None) -> bool:
    """True when *value* is a 40-character hexadecimal identity hash."""
    return bool(value) and bool(_INFO_HASH_RE.match(value))


def normalize_info_hash(value: str) -> str:
    """Validate and upper-case an identity hash.

    Raises:
        ValueError: *value* is not 40 hex characters.
    """
    value = (value or "").strip()
    if not is_info_hash(value):
        raise ValueError(f"invalid info hash: {value!r}")
    return value.upper()


@dataclass(frozen=True)
class Candidate:
    """One discovered torrent, not yet checked against the debrid cache."""

    info_hash: str
    title: str
    source: str
    seeders: int = 0
    size: str = ""
    quality: QualityDescriptor = field(default_factory=QualityDescriptor)
    magnet: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "info_hash", normalize_info_hash(self.info_hash))
        object.__setattr__(self, "seeders", max(0, int(self.seeders or 0)))


@dataclass(frozen=True)
class DebridFile:
    """A single file inside a cached torrent."""

    name: str
    size: int = 0


@dataclass(frozen=True)
class AvailabilityInfo:
    """Debrid cache status for one identity hash."""

    available: bool
    files: tuple[DebridFile, ...] = ()

    @classmethod
    def unavailable(cls) -> AvailabilityInfo:
        return cls(available=False)

    @property
    def file_names(self) -> list[str]:
        return [f.name for f in self.files]
