"""Two-phase torrent discovery across all configured sources."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence

import structlog

from debridarr.domain.entities import Candidate, SearchCriteria
from debridarr.domain.ports import TorrentSourcePort

log = structlog.get_logger(__name__)

DEFAULT_SOURCE_TIMEOUT = 10.0


class SourceAggregator:
    """Query sources concurrently and merge their candidates.

    Phase one asks every enabled ``indexer``. Only when that yields
    nothing are the ``tracker`` scrapers asked. A failing or slow
    source contributes nothing and never affects its siblings.
    """

    def __init__(
        self,
        sources: Sequence[TorrentSourcePort],
        *,
        timeout_seconds: float = DEFAULT_SOURCE_TIMEOUT,
        timeout_overrides: Mapping[str, float] | None = None,
    ) -> None:
        self._sources = list(sources)
        self._timeout = timeout_seconds
        self._timeout_overrides = dict(timeout_overrides or {})

    def _enabled(self, kind: str) -> list[TorrentSourcePort]:
        return [s for s in self._sources if s.kind == kind and s.enabled]

    async def search(self, criteria: SearchCriteria) -> list[Candidate]:
        indexers = self._enabled("indexer")
        if indexers:
            candidates = await self._search_all(indexers, criteria)
            if candidates:
                return candidates
            log.info("indexers_empty_falling_back", indexers=len(indexers))

        trackers = self._enabled("tracker")
        if not trackers:
            return []
        return await self._search_all(trackers, criteria)

    async def _search_all(
        self,
        sources: list[TorrentSourcePort],
        criteria: SearchCriteria,
    ) -> list[Candidate]:
        results_per_source = await asyncio.gather(
            *(self._search_one(source, criteria) for source in sources)
        )
        merged: list[Candidate] = []
        for results in results_per_source:
            merged.extend(results)
        return merged

    async def _search_one(
        self,
        source: TorrentSourcePort,
        criteria: SearchCriteria,
    ) -> list[Candidate]:
        timeout = self._timeout_overrides.get(source.name, self._timeout)
        try:
            results = await asyncio.wait_for(source.search(criteria), timeout=timeout)
        except asyncio.TimeoutError:
            log.warning("source_timeout", source=source.name, timeout=timeout)
            return []
        except Exception:
            log.warning("source_error", source=source.name, exc_info=True)
            return []

        valid = [c for c in results or [] if isinstance(c, Candidate)]
        log.debug(
            "source_search_done",
            source=source.name,
            result_count=len(valid),
            dropped=len(results or []) - len(valid),
        )
        return valid
