"""Source port - a torrent discovery backend."""

from __future__ import annotations

from typing import Literal, Protocol

from debridarr.domain.entities import Candidate, SearchCriteria

SourceKind = Literal["indexer", "tracker"]


class TorrentSourcePort(Protocol):
    """A torrent discovery backend.

    ``indexer`` sources are structured APIs (Jackett) and are queried
    first; ``tracker`` sources scrape HTML and act as fallback.

    ``search`` must not raise: network and parse failures are logged
    and reduced to an empty list.
    """

    name: str
    kind: SourceKind

    @property
    def enabled(self) -> bool: ...

    async def search(self, criteria: SearchCriteria) -> list[Candidate]: ...
