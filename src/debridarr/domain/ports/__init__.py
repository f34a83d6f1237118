from .debrid import DebridProviderPort
from .metadata import MetadataPort
from .source import SourceKind, TorrentSourcePort
from .stream_cache import StreamCachePort

__all__ = [
    "DebridProviderPort",
    "MetadataPort",
    "SourceKind",
    "StreamCachePort",
    "TorrentSourcePort",
]
