from .media import MediaKind, SearchCriteria, StreamRequest, TitleInfo
from .stream import Stream, StreamResolution
from .torrent import (
    AvailabilityInfo,
    Candidate,
    Codec,
    DebridFile,
    QualityDescriptor,
    Resolution,
    SourceType,
    is_info_hash,
    normalize_info_hash,
)

__all__ = [
    "AvailabilityInfo",
    "Candidate",
    "Codec",
    "DebridFile",
    "MediaKind",
    "QualityDescriptor",
    "Resolution",
    "SearchCriteria",
    "SourceType",
    "Stream",
    "StreamRequest",
    "StreamResolution",
    "TitleInfo",
    "is_info_hash",
    "normalize_info_hash",
]
